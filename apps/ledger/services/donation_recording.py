"""
Donation recording service.

Credits a donor and the collecting organization's inventory from a single
donation event.
"""

import logging
from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4

from django.conf import settings
from django.db.models import F
from django.utils import timezone

from apps.accounts.models import User
from apps.organizations.models import MovementType, Organization
from apps.ledger.exceptions import DomainError, NotFoundError
from apps.ledger.models import TransactionType
from apps.ledger.store import LedgerStore

logger = logging.getLogger(__name__)


def record_donation(
    *,
    store: LedgerStore,
    donor_id: UUID,
    organization_id: UUID,
    blood_type: str,
    component: str,
    credits: int,
    volume_ml: Optional[int] = None,
    collected_at: Optional[datetime] = None,
    notes: str = ''
) -> dict:
    """
    Record a donation and credit donor and inventory in one unit.

    Effects, all or nothing:
        - donor balance and total earned grow by ``credits``
        - a DONATION credit event is appended to the donor's log
        - an immutable DONATION transaction is inserted
        - the (organization, blood type) inventory record is created on
          first donation, then its available and donated totals grow by
          ``credits`` and a DONATION movement is appended

    Args:
        store: Ledger store handle
        donor_id: UUID of the donating user
        organization_id: UUID of the collecting organization
        blood_type: One of BloodType
        component: One of BloodComponent
        credits: Positive number of credits earned
        volume_ml: Collected volume; defaults to credits * LEDGER['ML_PER_CREDIT']
        collected_at: Collection time; defaults to the recording time
        notes: Free-form notes

    Returns:
        dict with ``transaction_id`` and ``recorded_at``

    Raises:
        DomainError: If credits is not a positive integer
        NotFoundError: If the donor or organization doesn't exist
    """
    if isinstance(credits, bool) or not isinstance(credits, int) or credits <= 0:
        raise DomainError("Credits must be a positive integer")

    recorded_at = timezone.now()
    transaction_id = uuid4()
    if volume_ml is None:
        volume_ml = credits * settings.LEDGER['ML_PER_CREDIT']

    def work(store):
        # Row lock serializes concurrent balance changes for this donor
        try:
            donor = store.users.select_for_update().get(id=donor_id)
        except User.DoesNotExist:
            raise NotFoundError("Donor profile not found")

        try:
            organization = store.organizations.get(id=organization_id)
        except Organization.DoesNotExist:
            raise NotFoundError("Organization not found")

        store.users.filter(id=donor.id).update(
            credit_balance=F('credit_balance') + credits,
            credits_total_earned=F('credits_total_earned') + credits,
        )

        donation = store.transactions.create(
            id=transaction_id,
            type=TransactionType.DONATION,
            donor=donor,
            organization=organization,
            credits=credits,
            volume_ml=volume_ml,
            component=component,
            blood_type=blood_type,
            collected_at=collected_at or recorded_at,
            notes=notes or '',
            recorded_at=recorded_at,
        )

        store.credit_events.create(
            user=donor,
            type=TransactionType.DONATION,
            credits=credits,
            organization=organization,
            transaction=donation,
            at=recorded_at,
        )

        record, _ = store.inventory.select_for_update().get_or_create(
            organization=organization,
            blood_type=blood_type,
        )
        store.inventory.filter(id=record.id).update(
            available_credits=F('available_credits') + credits,
            total_donated_credits=F('total_donated_credits') + credits,
            updated_at=recorded_at,
        )
        store.movements.create(
            record=record,
            type=MovementType.DONATION,
            credits=credits,
            transaction_id=transaction_id,
            at=recorded_at,
        )

        return {'transaction_id': donation.id, 'recorded_at': recorded_at}

    receipt = store.run_atomic(work)
    logger.info(
        "Recorded donation %s: %d credits for donor %s at organization %s (%s)",
        transaction_id, credits, donor_id, organization_id, blood_type
    )
    return receipt
