"""
Exchange proposal service.

Proposals are log entries only: no balance or inventory moves when one is
created. Settlement is not implemented.
"""

import logging
from typing import Optional
from uuid import UUID, uuid4

from django.utils import timezone

from apps.ledger.exceptions import DomainError, NotFoundError
from apps.ledger.models import ExchangeStatus
from apps.ledger.store import LedgerStore

logger = logging.getLogger(__name__)


def create_exchange_proposal(
    *,
    store: LedgerStore,
    requesting_org_id: UUID,
    offering_org_id: UUID,
    requested: dict,
    offered: dict,
    notes: Optional[str] = None
) -> dict:
    """
    Record a proposal for two organizations to swap credits.

    Args:
        store: Ledger store handle
        requesting_org_id: UUID of the organization asking for credits
        offering_org_id: UUID of the organization asked to provide them
        requested: ``{'blood_type': ..., 'credits': ...}`` wanted
        offered: ``{'blood_type': ..., 'credits': ...}`` given in return
        notes: Optional notes

    Returns:
        dict with ``exchange_id``, ``status`` and ``proposed_at``

    Raises:
        DomainError: If either side's credits is not a positive integer
        NotFoundError: If either organization doesn't exist
    """
    for side in (requested, offered):
        credits = side.get('credits')
        if isinstance(credits, bool) or not isinstance(credits, int) or credits <= 0:
            raise DomainError("Exchange credits must be positive integers")

    for org_id, label in (
        (requesting_org_id, "Requesting organization"),
        (offering_org_id, "Offering organization"),
    ):
        if not store.organizations.filter(id=org_id).exists():
            raise NotFoundError(f"{label} not found")

    exchange = store.exchanges.create(
        id=uuid4(),
        requesting_organization_id=requesting_org_id,
        offering_organization_id=offering_org_id,
        requested_blood_type=requested['blood_type'],
        requested_credits=requested['credits'],
        offered_blood_type=offered['blood_type'],
        offered_credits=offered['credits'],
        status=ExchangeStatus.PENDING,
        notes=notes or '',
        proposed_at=timezone.now(),
    )

    logger.info(
        "Exchange %s proposed: %s asks %s for %d %s, offering %d %s",
        exchange.id, requesting_org_id, offering_org_id,
        exchange.requested_credits, exchange.requested_blood_type,
        exchange.offered_credits, exchange.offered_blood_type
    )
    return {
        'exchange_id': exchange.id,
        'status': exchange.status,
        'proposed_at': exchange.proposed_at,
    }
