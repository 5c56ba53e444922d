"""
Organizations services layer.

Onboarding transitions and inventory reads for organizations.
"""

from .onboarding import (
    activate_organization,
)

from .inventory import (
    get_inventory_for_organization,
)


__all__ = [
    'activate_organization',
    'get_inventory_for_organization',
]
