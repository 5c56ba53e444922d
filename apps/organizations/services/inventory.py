"""Inventory reads."""

from uuid import UUID

from apps.ledger.exceptions import NotFoundError
from apps.ledger.store import LedgerStore


def get_inventory_for_organization(*, store: LedgerStore, organization_id: UUID) -> dict:
    """
    Get every inventory record held by an organization.

    Raises:
        NotFoundError: If the organization doesn't exist
    """
    if not store.organizations.filter(id=organization_id).exists():
        raise NotFoundError("Organization not found")

    return {
        'organization_id': organization_id,
        'inventory': list(
            store.inventory
            .filter(organization_id=organization_id)
            .order_by('blood_type')
        ),
    }
