"""
Ledger access policy.

One capability table maps each action to the rule deciding whether an
actor may perform it on a resource. Views evaluate it through the
permission classes in permissions.py before any service is called; the
services themselves never look at roles.
"""

from django.db import models

from apps.accounts.models import Role

from .exceptions import PermissionDeniedError


class Action(models.TextChoices):
    RECORD_DONATION = 'record_donation', 'Record donation'
    CREATE_CONSENT_REQUEST = 'create_consent_request', 'Create consent request'
    VIEW_CONSENT_REQUEST = 'view_consent_request', 'View consent request'
    RESPOND_TO_CONSENT_REQUEST = 'respond_to_consent_request', 'Respond to consent request'
    APPLY_EMERGENCY_OVERRIDE = 'apply_emergency_override', 'Apply emergency override'
    PROPOSE_EXCHANGE = 'propose_exchange', 'Propose exchange'
    VIEW_LEDGER = 'view_ledger', 'View ledger'
    VIEW_INVENTORY = 'view_inventory', 'View inventory'
    ACTIVATE_ORGANIZATION = 'activate_organization', 'Activate organization'


def _is_admin(actor):
    return actor.has_role(Role.ADMIN)


def _is_staff_of(actor, organization_id):
    return (
        organization_id is not None
        and actor.has_role(Role.ORGANIZATION)
        and str(actor.organization_id) == str(organization_id)
    )


def _any_authenticated(actor, resource):
    return True


def _consent_party(actor, request):
    return (
        request.credit_owner_id == actor.id
        or request.beneficiary_id == actor.id
        or _is_staff_of(actor, request.organization_id)
    )


def _credit_owner(actor, request):
    return request.credit_owner_id == actor.id


def _government(actor, resource):
    return actor.has_role(Role.GOVERNMENT)


def _staff_of_organization(actor, organization_id):
    return _is_staff_of(actor, organization_id)


def _self_or_government(actor, user_id):
    return str(actor.id) == str(user_id) or actor.has_role(Role.GOVERNMENT)


def _org_staff_or_government(actor, organization_id):
    return _is_staff_of(actor, organization_id) or actor.has_role(Role.GOVERNMENT)


def _nobody(actor, resource):
    return False


# Administrators pass every rule; these cover everyone else.
RULES = {
    Action.RECORD_DONATION: _staff_of_organization,
    Action.CREATE_CONSENT_REQUEST: _any_authenticated,
    Action.VIEW_CONSENT_REQUEST: _consent_party,
    Action.RESPOND_TO_CONSENT_REQUEST: _credit_owner,
    Action.APPLY_EMERGENCY_OVERRIDE: _government,
    Action.PROPOSE_EXCHANGE: _staff_of_organization,
    Action.VIEW_LEDGER: _self_or_government,
    Action.VIEW_INVENTORY: _org_staff_or_government,
    Action.ACTIVATE_ORGANIZATION: _nobody,
}


def can(actor, action, resource=None):
    """
    Evaluate the capability ``{actor, roles} x {action, resource}``.

    Args:
        actor: Authenticated user performing the action.
        action: One of Action.
        resource: What the rule inspects: a ConsentRequest for consent
            actions, an organization id or user id for scoped actions,
            or None.
    """
    if actor is None or not getattr(actor, 'is_authenticated', False):
        return False
    if _is_admin(actor):
        return True
    return RULES[action](actor, resource)


def authorize(actor, action, resource=None):
    """Raise PermissionDeniedError unless ``actor`` may perform ``action``."""
    if not can(actor, action, resource):
        raise PermissionDeniedError(
            f"You are not permitted to {Action(action).label.lower()}"
        )
