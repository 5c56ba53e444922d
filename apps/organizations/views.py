from rest_framework.response import Response
from drf_spectacular.utils import extend_schema

from apps.ledger.policy import Action
from apps.ledger.views import LedgerAPIView
from .serializers import OrganizationSerializer, OrganizationInventorySerializer
from .services import activate_organization, get_inventory_for_organization


class OrganizationInventoryView(LedgerAPIView):
    """Per-blood-type credit inventory of one organization."""

    ledger_action = Action.VIEW_INVENTORY

    def get_policy_resource(self, request):
        return self.kwargs.get('organization_id')

    @extend_schema(responses=OrganizationInventorySerializer)
    def get(self, request, organization_id):
        inventory = get_inventory_for_organization(
            store=self.get_store(),
            organization_id=organization_id
        )
        return Response(OrganizationInventorySerializer(inventory).data)


class OrganizationActivateView(LedgerAPIView):
    """Activate a pending organization (administrators only)."""

    ledger_action = Action.ACTIVATE_ORGANIZATION

    @extend_schema(request=None, responses=OrganizationSerializer)
    def post(self, request, organization_id):
        organization = activate_organization(
            store=self.get_store(),
            organization_id=organization_id
        )
        return Response(OrganizationSerializer(organization).data)
