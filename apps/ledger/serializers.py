from rest_framework import serializers

from apps.accounts.models import User
from .choices import BloodType, BloodComponent
from .models import ConsentRequest, CreditEvent, LedgerTransaction


# =============================================================================
# INPUT SERIALIZERS
# =============================================================================

class DonationInputSerializer(serializers.Serializer):
    """Validate a donation submitted by an organization."""

    donor_id = serializers.UUIDField()
    organization_id = serializers.UUIDField()
    blood_type = serializers.ChoiceField(choices=BloodType.choices)
    component = serializers.ChoiceField(choices=BloodComponent.choices)
    credits = serializers.IntegerField(min_value=1)
    volume_ml = serializers.IntegerField(min_value=1, required=False)
    collected_at = serializers.DateTimeField(required=False)
    notes = serializers.CharField(max_length=1000, required=False, allow_blank=True)


class ConsentContextSerializer(serializers.Serializer):
    requested_blood_type = serializers.ChoiceField(choices=BloodType.choices, required=False)
    reason = serializers.CharField(max_length=2000, required=False, allow_blank=True)
    clinical_notes = serializers.CharField(max_length=2000, required=False, allow_blank=True)


class ConsentRequestInputSerializer(serializers.Serializer):
    """Validate a new consent request."""

    credit_owner_id = serializers.UUIDField()
    beneficiary_id = serializers.UUIDField()
    organization_id = serializers.UUIDField()
    credits = serializers.IntegerField(min_value=1)
    expires_at = serializers.DateTimeField(required=False)
    context = ConsentContextSerializer(required=False)


class ConsentDecisionInputSerializer(serializers.Serializer):
    """
    Validate a decision on a consent request.

    actor_id defaults to the authenticated user. Only administrators may
    name someone else.
    """

    actor_id = serializers.UUIDField(required=False)
    decision = serializers.ChoiceField(choices=['approve', 'decline'])
    note = serializers.CharField(max_length=2000, required=False, allow_blank=True)


class EmergencyOverrideInputSerializer(serializers.Serializer):
    """Validate an emergency override; the initiator is the caller."""

    beneficiary_id = serializers.UUIDField()
    organization_id = serializers.UUIDField()
    credits = serializers.IntegerField(min_value=1)
    justification = serializers.CharField(max_length=2000)
    repayment_plan = serializers.CharField(max_length=2000, required=False, allow_blank=True)
    repayment_due_at = serializers.DateTimeField(required=False)
    debt_ceiling_credits = serializers.IntegerField(min_value=1)


class ExchangeSideSerializer(serializers.Serializer):
    blood_type = serializers.ChoiceField(choices=BloodType.choices)
    credits = serializers.IntegerField(min_value=1)


class ExchangeProposalInputSerializer(serializers.Serializer):
    """Validate an exchange proposal between two organizations."""

    requesting_org_id = serializers.UUIDField()
    offering_org_id = serializers.UUIDField()
    requested = ExchangeSideSerializer()
    offered = ExchangeSideSerializer()
    notes = serializers.CharField(max_length=2000, required=False, allow_blank=True)


# =============================================================================
# OUTPUT SERIALIZERS
# =============================================================================

class ConsentRequestSerializer(serializers.ModelSerializer):
    """Consent request as stored."""

    credit_owner_id = serializers.UUIDField(read_only=True)
    beneficiary_id = serializers.UUIDField(read_only=True)
    organization_id = serializers.UUIDField(read_only=True)
    decided_by_id = serializers.UUIDField(read_only=True, allow_null=True)

    class Meta:
        model = ConsentRequest
        fields = [
            'id',
            'status',
            'credit_owner_id',
            'beneficiary_id',
            'organization_id',
            'credits',
            'expires_at',
            'context',
            'requested_at',
            'decided_by_id',
            'decided_at',
            'decision_note',
        ]
        read_only_fields = fields


class LedgerTransactionSerializer(serializers.ModelSerializer):
    """Ledger transaction with every reference as a plain id."""

    organization_id = serializers.UUIDField(read_only=True)
    donor_id = serializers.UUIDField(read_only=True, allow_null=True)
    credit_owner_id = serializers.UUIDField(read_only=True, allow_null=True)
    beneficiary_id = serializers.UUIDField(read_only=True, allow_null=True)
    initiated_by_id = serializers.UUIDField(read_only=True, allow_null=True)
    consent_request_id = serializers.UUIDField(read_only=True, allow_null=True)

    class Meta:
        model = LedgerTransaction
        fields = [
            'id',
            'type',
            'credits',
            'organization_id',
            'donor_id',
            'credit_owner_id',
            'beneficiary_id',
            'initiated_by_id',
            'consent_request_id',
            'blood_type',
            'component',
            'volume_ml',
            'collected_at',
            'notes',
            'justification',
            'repayment_plan',
            'repayment_due_at',
            'recorded_at',
        ]
        read_only_fields = fields


class CreditEventSerializer(serializers.ModelSerializer):
    organization_id = serializers.UUIDField(read_only=True)
    transaction_id = serializers.UUIDField(read_only=True)
    beneficiary_id = serializers.UUIDField(read_only=True, allow_null=True)

    class Meta:
        model = CreditEvent
        fields = ['type', 'credits', 'organization_id', 'transaction_id', 'beneficiary_id', 'at']
        read_only_fields = fields


class EmergencyRecordSerializer(serializers.Serializer):
    active = serializers.BooleanField()
    override_id = serializers.UUIDField(required=False)
    credits = serializers.IntegerField(required=False)
    initiated_at = serializers.DateTimeField(required=False)
    organization_id = serializers.UUIDField(required=False)
    justification = serializers.CharField(required=False)
    repayment_plan = serializers.CharField(required=False)
    repayment_due_at = serializers.DateTimeField(required=False)


class CreditRecordSerializer(serializers.Serializer):
    balance = serializers.IntegerField()
    total_earned = serializers.IntegerField()
    total_redeemed = serializers.IntegerField()
    emergency = EmergencyRecordSerializer()


class LedgerUserSerializer(serializers.ModelSerializer):
    name = serializers.CharField(source='get_display_name', read_only=True)

    class Meta:
        model = User
        fields = ['id', 'name', 'blood_type']
        read_only_fields = fields


class LedgerSummarySerializer(serializers.Serializer):
    user = LedgerUserSerializer()
    credits = CreditRecordSerializer()
    recent_transactions = LedgerTransactionSerializer(many=True)


class DonationReceiptSerializer(serializers.Serializer):
    transaction_id = serializers.UUIDField()
    recorded_at = serializers.DateTimeField()


class ConsentRequestReceiptSerializer(serializers.Serializer):
    request_id = serializers.UUIDField()
    status = serializers.CharField()
    requested_at = serializers.DateTimeField()


class ConsentDecisionResultSerializer(serializers.Serializer):
    request = ConsentRequestSerializer()
    transaction_id = serializers.UUIDField(allow_null=True)


class EmergencyOverrideReceiptSerializer(serializers.Serializer):
    transaction_id = serializers.UUIDField()
    case_id = serializers.UUIDField()
    balance = serializers.IntegerField()


class ExchangeProposalReceiptSerializer(serializers.Serializer):
    exchange_id = serializers.UUIDField()
    status = serializers.CharField()
    proposed_at = serializers.DateTimeField()
