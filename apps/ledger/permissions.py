"""
Permission classes for the ledger API.

Both classes defer to the capability table in policy.py so every role
decision lives in one place.
"""
from rest_framework.permissions import BasePermission

from .policy import authorize


class HasLedgerCapability(BasePermission):
    """
    Check the view's ``ledger_action`` against the access policy.

    Views declare the action and, for scoped actions, override
    ``get_policy_resource()`` to return the organization or user id the
    rule inspects. Views acting on a loaded object set
    ``object_scoped = True``; the check then runs when the view calls
    ``check_object_permissions()``.

    Usage:
        class DonationView(LedgerAPIView):
            ledger_action = Action.RECORD_DONATION

            def get_policy_resource(self, request):
                return request.data.get('organization_id')
    """

    def has_permission(self, request, view):
        if getattr(view, 'object_scoped', False):
            return True
        authorize(request.user, view.ledger_action, view.get_policy_resource(request))
        return True

    def has_object_permission(self, request, view, obj):
        authorize(request.user, view.ledger_action, obj)
        return True
