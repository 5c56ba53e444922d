"""
Organization onboarding service.

Organizations are created pending and become active once verified.
"""

import logging
from uuid import UUID

from django.utils import timezone

from apps.ledger.exceptions import ConflictError, NotFoundError
from apps.ledger.store import LedgerStore
from apps.organizations.models import Organization, OrganizationStatus

logger = logging.getLogger(__name__)


def activate_organization(*, store: LedgerStore, organization_id: UUID) -> Organization:
    """
    Move a pending organization to active.

    Args:
        store: Ledger store handle
        organization_id: UUID of the organization

    Returns:
        The activated Organization

    Raises:
        NotFoundError: If the organization doesn't exist
        ConflictError: If it is already active
    """
    def work(store):
        try:
            organization = store.organizations.select_for_update().get(id=organization_id)
        except Organization.DoesNotExist:
            raise NotFoundError("Organization not found")

        if organization.status != OrganizationStatus.PENDING:
            raise ConflictError("Organization is already active")

        organization.status = OrganizationStatus.ACTIVE
        organization.verified_at = timezone.now()
        organization.save(using=store.using, update_fields=['status', 'verified_at', 'updated_at'])
        return organization

    organization = store.run_atomic(work)
    logger.info("Organization %s (%s) activated", organization.id, organization.name)
    return organization
