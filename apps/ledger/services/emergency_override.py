"""
Emergency override service.

Forces a debit on a beneficiary outside the consent workflow. The debit
may take the balance below zero, bounded by a ceiling the caller supplies.
"""

import logging
from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from django.db.models import F
from django.utils import timezone

from apps.accounts.models import User
from apps.organizations.models import Organization
from apps.ledger.changesets import EmergencyActivation, apply_changeset
from apps.ledger.exceptions import ConflictError, DomainError, NotFoundError
from apps.ledger.models import EmergencyCaseStatus, TransactionType
from apps.ledger.store import LedgerStore

logger = logging.getLogger(__name__)


def apply_emergency_override(
    *,
    store: LedgerStore,
    beneficiary_id: UUID,
    organization_id: UUID,
    initiated_by_id: UUID,
    credits: int,
    justification: str,
    debt_ceiling_credits: int,
    repayment_plan: Optional[str] = None,
    repayment_due_at: Optional[datetime] = None
) -> dict:
    """
    Debit a beneficiary under emergency authority.

    A user holds at most one open override: a negative balance means an
    earlier override is still outstanding. After the debit, the magnitude
    of the resulting balance must not exceed ``debt_ceiling_credits``.

    Args:
        store: Ledger store handle
        beneficiary_id: UUID of the user receiving emergency credits
        organization_id: UUID of the treating organization
        initiated_by_id: UUID of the government or admin user initiating it
        credits: Positive number of credits to debit
        justification: Reason for the override
        debt_ceiling_credits: Positive bound on the resulting debt
        repayment_plan: Optional repayment plan
        repayment_due_at: Optional repayment deadline

    Returns:
        dict with ``transaction_id``, ``case_id`` and the new ``balance``

    Raises:
        DomainError: If credits or ceiling is not a positive integer
        NotFoundError: If beneficiary, organization or initiator doesn't exist
        ConflictError: If an override is outstanding or the ceiling is exceeded
    """
    if isinstance(credits, bool) or not isinstance(credits, int) or credits <= 0:
        raise DomainError("Credits must be a positive integer")
    if (
        isinstance(debt_ceiling_credits, bool)
        or not isinstance(debt_ceiling_credits, int)
        or debt_ceiling_credits <= 0
    ):
        raise DomainError("Debt ceiling must be a positive integer")

    initiated_at = timezone.now()
    transaction_id = uuid4()

    def work(store):
        try:
            beneficiary = store.users.select_for_update().get(id=beneficiary_id)
        except User.DoesNotExist:
            raise NotFoundError("Beneficiary not found")

        if beneficiary.credit_balance < 0:
            raise ConflictError("Beneficiary already has an outstanding emergency debt")

        projected_balance = beneficiary.credit_balance - credits
        if abs(projected_balance) > debt_ceiling_credits:
            raise ConflictError("Emergency request exceeds configured debt ceiling")

        try:
            organization = store.organizations.get(id=organization_id)
        except Organization.DoesNotExist:
            raise NotFoundError("Organization not found")

        if not store.users.filter(id=initiated_by_id).exists():
            raise NotFoundError("Initiating user not found")

        store.users.filter(id=beneficiary.id).update(
            credit_balance=F('credit_balance') - credits,
            credits_total_redeemed=F('credits_total_redeemed') + credits,
        )
        apply_changeset(
            beneficiary,
            EmergencyActivation(
                emergency_override_id=transaction_id,
                emergency_credits=credits,
                emergency_initiated_at=initiated_at,
                emergency_organization_id=organization.id,
                emergency_justification=justification,
                emergency_repayment_plan=repayment_plan or '',
                emergency_repayment_due_at=repayment_due_at,
            ),
            using=store.using,
        )

        override = store.transactions.create(
            id=transaction_id,
            type=TransactionType.EMERGENCY_OVERRIDE,
            beneficiary=beneficiary,
            organization=organization,
            initiated_by_id=initiated_by_id,
            credits=credits,
            justification=justification,
            repayment_plan=repayment_plan or '',
            repayment_due_at=repayment_due_at,
            recorded_at=initiated_at,
        )

        store.credit_events.create(
            user=beneficiary,
            type=TransactionType.EMERGENCY_OVERRIDE,
            credits=credits,
            organization=organization,
            transaction=override,
            at=initiated_at,
        )

        case = store.emergency_cases.create(
            id=transaction_id,
            beneficiary=beneficiary,
            organization=organization,
            initiated_by_id=initiated_by_id,
            credits=credits,
            status=EmergencyCaseStatus.OUTSTANDING,
            justification=justification,
            repayment_plan=repayment_plan or '',
            repayment_due_at=repayment_due_at,
            created_at=initiated_at,
            updated_at=initiated_at,
        )

        return {
            'transaction_id': override.id,
            'case_id': case.id,
            'balance': projected_balance,
        }

    result = store.run_atomic(work)
    logger.warning(
        "Emergency override %s: %d credits for %s by %s (balance now %d)",
        transaction_id, credits, beneficiary_id, initiated_by_id, result['balance']
    )
    return result
