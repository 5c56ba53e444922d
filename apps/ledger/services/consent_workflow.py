"""
Consent workflow service.

A consent request asks a credit owner to spend part of their balance on
behalf of a beneficiary. Requests start PENDING and are resolved exactly
once, to APPROVED or DECLINED.
"""

import logging
from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from django.db.models import F
from django.utils import timezone

from apps.accounts.models import User
from apps.organizations.models import MovementType
from apps.ledger.changesets import ConsentContext, ConsentResolution, apply_changeset
from apps.ledger.exceptions import (
    ConflictError,
    DomainError,
    InsufficientCreditsError,
    NotFoundError,
)
from apps.ledger.models import ConsentRequest, ConsentStatus, TransactionType
from apps.ledger.store import LedgerStore

logger = logging.getLogger(__name__)

APPROVE = 'approve'
DECLINE = 'decline'

DECISION_STATUSES = {
    APPROVE: ConsentStatus.APPROVED,
    DECLINE: ConsentStatus.DECLINED,
}


def create_consent_request(
    *,
    store: LedgerStore,
    credit_owner_id: UUID,
    beneficiary_id: UUID,
    organization_id: UUID,
    credits: int,
    expires_at: Optional[datetime] = None,
    context: Optional[ConsentContext] = None
) -> dict:
    """
    Open a PENDING consent request. No balance is touched.

    Args:
        store: Ledger store handle
        credit_owner_id: UUID of the user whose balance would be spent
        beneficiary_id: UUID of the user receiving the credits
        organization_id: UUID of the fulfilling organization
        credits: Positive number of credits requested
        expires_at: Optional expiry timestamp
        context: Optional ConsentContext; unset keys are not stored

    Returns:
        dict with ``request_id``, ``status`` and ``requested_at``

    Raises:
        DomainError: If credits is not a positive integer
        NotFoundError: If any referenced user or organization doesn't exist
    """
    if isinstance(credits, bool) or not isinstance(credits, int) or credits <= 0:
        raise DomainError("Credits must be a positive integer")

    if not store.users.filter(id=credit_owner_id).exists():
        raise NotFoundError("Credit owner not found")
    if not store.users.filter(id=beneficiary_id).exists():
        raise NotFoundError("Beneficiary not found")
    if not store.organizations.filter(id=organization_id).exists():
        raise NotFoundError("Organization not found")

    request = store.consent_requests.create(
        id=uuid4(),
        status=ConsentStatus.PENDING,
        credit_owner_id=credit_owner_id,
        beneficiary_id=beneficiary_id,
        organization_id=organization_id,
        credits=credits,
        expires_at=expires_at,
        context=(context or ConsentContext()).as_document(),
        requested_at=timezone.now(),
    )

    logger.info(
        "Consent request %s opened: %d credits from %s for %s",
        request.id, credits, credit_owner_id, beneficiary_id
    )
    return {
        'request_id': request.id,
        'status': request.status,
        'requested_at': request.requested_at,
    }


def get_consent_request(*, store: LedgerStore, request_id: UUID) -> ConsentRequest:
    """
    Get a consent request by ID.

    Raises:
        NotFoundError: If the request doesn't exist
    """
    try:
        return store.consent_requests.get(id=request_id)
    except ConsentRequest.DoesNotExist:
        raise NotFoundError("Consent request not found")


def respond_to_consent_request(
    *,
    store: LedgerStore,
    request_id: UUID,
    actor_id: UUID,
    decision: str,
    note: Optional[str] = None
) -> dict:
    """
    Resolve a PENDING consent request.

    The status check, the status change and, on approval, the balance
    debit happen in one atomic unit with the request row locked. Of two
    concurrent responses, the second sees a resolved request and fails
    with ConflictError.

    On approval:
        - the credit owner's balance must cover ``credits``; approval never
          drives a balance negative
        - balance is debited, total redeemed grows, a REDEMPTION event is
          appended and an immutable REDEMPTION transaction is inserted
        - when the request context names a blood type, that inventory
          record of the organization is debited with a FULFILLMENT
          movement. Requests without a blood type leave inventory as is.

    Args:
        store: Ledger store handle
        request_id: UUID of the consent request
        actor_id: UUID of the user submitting the decision
        decision: 'approve' or 'decline'
        note: Optional decision note

    Returns:
        dict with the resolved ``request`` and ``transaction_id``
        (None when declined)

    Raises:
        DomainError: If decision is not 'approve' or 'decline'
        NotFoundError: If the request, the actor or the credit owner
            doesn't exist
        ConflictError: If the request is already resolved
        InsufficientCreditsError: If the owner's balance is too low
    """
    if decision not in DECISION_STATUSES:
        raise DomainError(f"Unknown decision: {decision}")

    resolved_at = timezone.now()
    transaction_id = uuid4() if decision == APPROVE else None

    def work(store):
        try:
            request = store.consent_requests.select_for_update().get(id=request_id)
        except ConsentRequest.DoesNotExist:
            raise NotFoundError("Consent request not found")

        if not request.is_pending:
            raise ConflictError("Consent request already resolved")

        if not store.users.filter(id=actor_id).exists():
            raise NotFoundError("Actor not found")

        resolution = ConsentResolution(
            status=DECISION_STATUSES[decision],
            decided_by_id=actor_id,
            decided_at=resolved_at,
            decision_note=note,
        )

        if decision == APPROVE:
            _redeem(store, request, transaction_id, resolved_at)

        apply_changeset(request, resolution, using=store.using)
        return {'request': request, 'transaction_id': transaction_id}

    result = store.run_atomic(work)
    logger.info(
        "Consent request %s %s by %s",
        request_id, result['request'].status, actor_id
    )
    return result


def _redeem(store, request, transaction_id, recorded_at):
    """Debit the credit owner (and inventory) for an approved request."""
    try:
        owner = store.users.select_for_update().get(id=request.credit_owner_id)
    except User.DoesNotExist:
        raise NotFoundError("Credit owner not found")

    if owner.credit_balance < request.credits:
        raise InsufficientCreditsError("Insufficient credits for approval")

    store.users.filter(id=owner.id).update(
        credit_balance=F('credit_balance') - request.credits,
        credits_total_redeemed=F('credits_total_redeemed') + request.credits,
    )

    redemption = store.transactions.create(
        id=transaction_id,
        type=TransactionType.REDEMPTION,
        credit_owner_id=request.credit_owner_id,
        beneficiary_id=request.beneficiary_id,
        organization_id=request.organization_id,
        consent_request=request,
        credits=request.credits,
        recorded_at=recorded_at,
    )

    store.credit_events.create(
        user=owner,
        type=TransactionType.REDEMPTION,
        credits=request.credits,
        organization_id=request.organization_id,
        transaction=redemption,
        beneficiary_id=request.beneficiary_id,
        at=recorded_at,
    )

    blood_type = request.requested_blood_type
    if not blood_type:
        return

    record = (
        store.inventory
        .select_for_update()
        .filter(organization_id=request.organization_id, blood_type=blood_type)
        .first()
    )
    if record is None:
        logger.warning(
            "No %s inventory at organization %s to fulfill consent request %s",
            blood_type, request.organization_id, request.id
        )
        return

    store.inventory.filter(id=record.id).update(
        available_credits=F('available_credits') - request.credits,
        updated_at=recorded_at,
    )
    store.movements.create(
        record=record,
        type=MovementType.FULFILLMENT,
        credits=request.credits,
        consent_request_id=request.id,
        at=recorded_at,
    )
