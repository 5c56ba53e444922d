from collections.abc import Mapping

from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView
from drf_spectacular.utils import extend_schema

from .changesets import ConsentContext
from .permissions import HasLedgerCapability
from .policy import Action
from .exceptions import PermissionDeniedError
from .serializers import (
    DonationInputSerializer,
    ConsentRequestInputSerializer,
    ConsentDecisionInputSerializer,
    EmergencyOverrideInputSerializer,
    ExchangeProposalInputSerializer,
    ConsentRequestSerializer,
    DonationReceiptSerializer,
    ConsentRequestReceiptSerializer,
    ConsentDecisionResultSerializer,
    EmergencyOverrideReceiptSerializer,
    ExchangeProposalReceiptSerializer,
    LedgerSummarySerializer,
)
from .services import (
    record_donation,
    create_consent_request,
    get_consent_request,
    respond_to_consent_request,
    apply_emergency_override,
    create_exchange_proposal,
    get_ledger_summary,
)
from .store import LedgerStore


class LedgerAPIView(APIView):
    """
    Base view for ledger endpoints.

    Subclasses set ``ledger_action``; the access policy is checked before
    the handler runs. Each request gets its own LedgerStore bound to the
    configured database alias.
    """

    permission_classes = [IsAuthenticated, HasLedgerCapability]
    ledger_action = None
    object_scoped = False

    def get_store(self):
        return LedgerStore.from_settings()

    def get_policy_resource(self, request):
        return None

    def request_field(self, request, name):
        """Read a raw body field before validation; None if the body is not an object."""
        if isinstance(request.data, Mapping):
            return request.data.get(name)
        return None


class DonationView(LedgerAPIView):
    """Record a donation at a collecting organization."""

    ledger_action = Action.RECORD_DONATION

    def get_policy_resource(self, request):
        return self.request_field(request, 'organization_id')

    @extend_schema(
        request=DonationInputSerializer,
        responses={201: DonationReceiptSerializer},
        description="Record a donation and credit the donor"
    )
    def post(self, request):
        serializer = DonationInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        receipt = record_donation(
            store=self.get_store(),
            donor_id=data['donor_id'],
            organization_id=data['organization_id'],
            blood_type=data['blood_type'],
            component=data['component'],
            credits=data['credits'],
            volume_ml=data.get('volume_ml'),
            collected_at=data.get('collected_at'),
            notes=data.get('notes', ''),
        )

        return Response(DonationReceiptSerializer(receipt).data, status=status.HTTP_201_CREATED)


class ConsentRequestCreateView(LedgerAPIView):
    """Open a consent request against another user's credits."""

    ledger_action = Action.CREATE_CONSENT_REQUEST

    @extend_schema(
        request=ConsentRequestInputSerializer,
        responses={201: ConsentRequestReceiptSerializer},
        description="Create a pending consent request"
    )
    def post(self, request):
        serializer = ConsentRequestInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        context = data.get('context')
        receipt = create_consent_request(
            store=self.get_store(),
            credit_owner_id=data['credit_owner_id'],
            beneficiary_id=data['beneficiary_id'],
            organization_id=data['organization_id'],
            credits=data['credits'],
            expires_at=data.get('expires_at'),
            context=ConsentContext.from_mapping(context) if context is not None else None,
        )

        return Response(
            ConsentRequestReceiptSerializer(receipt).data,
            status=status.HTTP_201_CREATED
        )


class ConsentRequestDetailView(LedgerAPIView):
    """Read a consent request; parties to it and admins only."""

    ledger_action = Action.VIEW_CONSENT_REQUEST
    object_scoped = True

    @extend_schema(responses=ConsentRequestSerializer)
    def get(self, request, request_id):
        consent = get_consent_request(store=self.get_store(), request_id=request_id)
        self.check_object_permissions(request, consent)
        return Response(ConsentRequestSerializer(consent).data)


class ConsentDecisionView(LedgerAPIView):
    """Approve or decline a pending consent request."""

    ledger_action = Action.RESPOND_TO_CONSENT_REQUEST
    object_scoped = True

    @extend_schema(
        request=ConsentDecisionInputSerializer,
        responses=ConsentDecisionResultSerializer,
        description="Approve (redeeming credits) or decline a consent request"
    )
    def post(self, request, request_id):
        serializer = ConsentDecisionInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        store = self.get_store()
        consent = get_consent_request(store=store, request_id=request_id)
        self.check_object_permissions(request, consent)

        actor_id = data.get('actor_id', request.user.id)
        if actor_id != request.user.id and not request.user.is_ledger_admin:
            raise PermissionDeniedError("You may only respond on your own behalf")

        result = respond_to_consent_request(
            store=store,
            request_id=request_id,
            actor_id=actor_id,
            decision=data['decision'],
            note=data.get('note'),
        )

        return Response(ConsentDecisionResultSerializer(result).data)


class EmergencyOverrideView(LedgerAPIView):
    """Advance emergency credits to a beneficiary."""

    ledger_action = Action.APPLY_EMERGENCY_OVERRIDE

    @extend_schema(
        request=EmergencyOverrideInputSerializer,
        responses={201: EmergencyOverrideReceiptSerializer},
        description="Apply an emergency override, driving the beneficiary balance negative"
    )
    def post(self, request):
        serializer = EmergencyOverrideInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        receipt = apply_emergency_override(
            store=self.get_store(),
            beneficiary_id=data['beneficiary_id'],
            organization_id=data['organization_id'],
            initiated_by_id=request.user.id,
            credits=data['credits'],
            justification=data['justification'],
            debt_ceiling_credits=data['debt_ceiling_credits'],
            repayment_plan=data.get('repayment_plan'),
            repayment_due_at=data.get('repayment_due_at'),
        )

        return Response(
            EmergencyOverrideReceiptSerializer(receipt).data,
            status=status.HTTP_201_CREATED
        )


class ExchangeProposalView(LedgerAPIView):
    """Propose a credit swap between two organizations."""

    ledger_action = Action.PROPOSE_EXCHANGE

    def get_policy_resource(self, request):
        return self.request_field(request, 'requesting_org_id')

    @extend_schema(
        request=ExchangeProposalInputSerializer,
        responses={201: ExchangeProposalReceiptSerializer},
    )
    def post(self, request):
        serializer = ExchangeProposalInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        receipt = create_exchange_proposal(
            store=self.get_store(),
            requesting_org_id=data['requesting_org_id'],
            offering_org_id=data['offering_org_id'],
            requested=dict(data['requested']),
            offered=dict(data['offered']),
            notes=data.get('notes'),
        )

        return Response(
            ExchangeProposalReceiptSerializer(receipt).data,
            status=status.HTTP_201_CREATED
        )


class LedgerSummaryView(LedgerAPIView):
    """A user's credit record and recent transactions."""

    ledger_action = Action.VIEW_LEDGER

    def get_policy_resource(self, request):
        return self.kwargs.get('user_id')

    @extend_schema(responses=LedgerSummarySerializer)
    def get(self, request, user_id):
        summary = get_ledger_summary(store=self.get_store(), user_id=user_id)
        return Response(LedgerSummarySerializer(summary).data)
