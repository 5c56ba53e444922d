import uuid

import pytest
from apps.accounts.models import User
from apps.ledger.changesets import ConsentContext
from apps.ledger.models import (
    ConsentRequest,
    ConsentStatus,
    CreditEvent,
    LedgerTransaction,
    TransactionType,
)
from apps.ledger.services import (
    APPROVE,
    DECLINE,
    ConflictError,
    DomainError,
    InsufficientCreditsError,
    NotFoundError,
    create_consent_request,
    get_consent_request,
    record_donation,
    respond_to_consent_request,
)
from apps.organizations.models import InventoryMovement, InventoryRecord, MovementType


# =============================================================================
# Creating and reading requests
# =============================================================================

@pytest.mark.django_db
class TestCreateConsentRequest:
    """Tests for create_consent_request() and get_consent_request()"""

    def test_create_then_read_round_trip(self, store, donor, recipient, hospital):
        """Stored request is PENDING with the submitted fields intact."""
        receipt = create_consent_request(
            store=store,
            credit_owner_id=donor.id,
            beneficiary_id=recipient.id,
            organization_id=hospital.id,
            credits=2,
            context=ConsentContext(reason='Anemia'),
        )

        assert receipt['status'] == ConsentStatus.PENDING

        request = get_consent_request(store=store, request_id=receipt['request_id'])
        assert request.status == ConsentStatus.PENDING
        assert request.credit_owner_id == donor.id
        assert request.beneficiary_id == recipient.id
        assert request.organization_id == hospital.id
        assert request.credits == 2
        assert request.requested_at == receipt['requested_at']
        assert request.decided_by_id is None

    def test_unsupplied_context_keys_are_absent(self, store, donor, recipient, hospital):
        receipt = create_consent_request(
            store=store,
            credit_owner_id=donor.id,
            beneficiary_id=recipient.id,
            organization_id=hospital.id,
            credits=2,
            context=ConsentContext(reason='Anemia'),
        )

        request = get_consent_request(store=store, request_id=receipt['request_id'])
        assert request.context == {'reason': 'Anemia'}
        assert 'requested_blood_type' not in request.context
        assert 'clinical_notes' not in request.context
        assert request.requested_blood_type is None

    def test_no_context_stores_empty_document(self, store, donor, recipient, hospital):
        receipt = create_consent_request(
            store=store,
            credit_owner_id=donor.id,
            beneficiary_id=recipient.id,
            organization_id=hospital.id,
            credits=1,
        )

        assert ConsentRequest.objects.get(id=receipt['request_id']).context == {}

    def test_creation_touches_no_balance(self, store, funded_donor, recipient, hospital):
        create_consent_request(
            store=store,
            credit_owner_id=funded_donor.id,
            beneficiary_id=recipient.id,
            organization_id=hospital.id,
            credits=50,
        )

        funded_donor.refresh_from_db()
        assert funded_donor.credit_balance == 5

    @pytest.mark.parametrize('credits', [0, -1, True])
    def test_rejects_non_positive_credits(self, store, donor, recipient, hospital, credits):
        with pytest.raises(DomainError):
            create_consent_request(
                store=store,
                credit_owner_id=donor.id,
                beneficiary_id=recipient.id,
                organization_id=hospital.id,
                credits=credits,
            )
        assert ConsentRequest.objects.count() == 0

    def test_unknown_credit_owner(self, store, recipient, hospital):
        with pytest.raises(NotFoundError, match='Credit owner not found'):
            create_consent_request(
                store=store,
                credit_owner_id=uuid.uuid4(),
                beneficiary_id=recipient.id,
                organization_id=hospital.id,
                credits=1,
            )

    def test_unknown_request(self, store, db):
        with pytest.raises(NotFoundError, match='Consent request not found'):
            get_consent_request(store=store, request_id=uuid.uuid4())


# =============================================================================
# Responding
# =============================================================================

@pytest.mark.django_db
class TestRespondToConsentRequest:
    """Tests for respond_to_consent_request()"""

    def test_approval_scenario(self, store, funded_donor, recipient, hospital, pending_request):
        """Donate 5, approve 3: balance 2, one REDEMPTION, request APPROVED."""
        result = respond_to_consent_request(
            store=store,
            request_id=pending_request,
            actor_id=funded_donor.id,
            decision=APPROVE,
            note='Happy to help',
        )

        request = result['request']
        assert request.status == ConsentStatus.APPROVED
        assert request.decided_by_id == funded_donor.id
        assert request.decided_at is not None
        assert request.decision_note == 'Happy to help'

        funded_donor.refresh_from_db()
        assert funded_donor.credit_balance == 2
        assert funded_donor.credits_total_redeemed == 3
        assert funded_donor.credits_total_earned == 5

        redemption = LedgerTransaction.objects.get(type=TransactionType.REDEMPTION)
        assert redemption.id == result['transaction_id']
        assert redemption.credits == 3
        assert redemption.credit_owner_id == funded_donor.id
        assert redemption.beneficiary_id == recipient.id
        assert redemption.consent_request_id == pending_request

        event = CreditEvent.objects.get(type=TransactionType.REDEMPTION)
        assert event.user_id == funded_donor.id
        assert event.beneficiary_id == recipient.id

    def test_approval_fulfills_requested_blood_type(self, store, funded_donor, hospital, pending_request):
        respond_to_consent_request(
            store=store,
            request_id=pending_request,
            actor_id=funded_donor.id,
            decision=APPROVE,
        )

        record = InventoryRecord.objects.get(organization=hospital, blood_type='O+')
        assert record.available_credits == 2
        assert record.total_donated_credits == 5

        fulfillment = InventoryMovement.objects.get(type=MovementType.FULFILLMENT)
        assert fulfillment.credits == 3
        assert fulfillment.delta == -3
        assert fulfillment.consent_request_id == pending_request

    def test_approval_without_blood_type_leaves_inventory(self, store, funded_donor, recipient, hospital):
        receipt = create_consent_request(
            store=store,
            credit_owner_id=funded_donor.id,
            beneficiary_id=recipient.id,
            organization_id=hospital.id,
            credits=3,
        )

        respond_to_consent_request(
            store=store,
            request_id=receipt['request_id'],
            actor_id=funded_donor.id,
            decision=APPROVE,
        )

        funded_donor.refresh_from_db()
        assert funded_donor.credit_balance == 2
        assert InventoryRecord.objects.get(organization=hospital).available_credits == 5
        assert not InventoryMovement.objects.filter(type=MovementType.FULFILLMENT).exists()

    def test_approval_with_missing_inventory_record(self, store, funded_donor, recipient, other_hospital):
        """Owner is still debited when the organization holds no such record."""
        receipt = create_consent_request(
            store=store,
            credit_owner_id=funded_donor.id,
            beneficiary_id=recipient.id,
            organization_id=other_hospital.id,
            credits=2,
            context=ConsentContext(requested_blood_type='AB-'),
        )

        result = respond_to_consent_request(
            store=store,
            request_id=receipt['request_id'],
            actor_id=funded_donor.id,
            decision=APPROVE,
        )

        assert result['request'].status == ConsentStatus.APPROVED
        funded_donor.refresh_from_db()
        assert funded_donor.credit_balance == 3
        assert not InventoryRecord.objects.filter(organization=other_hospital).exists()

    def test_decline_changes_no_balance(self, store, funded_donor, pending_request):
        result = respond_to_consent_request(
            store=store,
            request_id=pending_request,
            actor_id=funded_donor.id,
            decision=DECLINE,
            note='Not now',
        )

        assert result['request'].status == ConsentStatus.DECLINED
        assert result['transaction_id'] is None
        funded_donor.refresh_from_db()
        assert funded_donor.credit_balance == 5
        assert not LedgerTransaction.objects.filter(type=TransactionType.REDEMPTION).exists()

    def test_insufficient_credits_changes_nothing(self, store, funded_donor, recipient, hospital):
        receipt = create_consent_request(
            store=store,
            credit_owner_id=funded_donor.id,
            beneficiary_id=recipient.id,
            organization_id=hospital.id,
            credits=6,
            context=ConsentContext(requested_blood_type='O+'),
        )

        with pytest.raises(InsufficientCreditsError) as exc_info:
            respond_to_consent_request(
                store=store,
                request_id=receipt['request_id'],
                actor_id=funded_donor.id,
                decision=APPROVE,
            )

        assert exc_info.value.code == 'INSUFFICIENT_CREDITS'
        assert exc_info.value.status_code == 409

        request = ConsentRequest.objects.get(id=receipt['request_id'])
        assert request.status == ConsentStatus.PENDING
        assert request.decided_by_id is None
        funded_donor.refresh_from_db()
        assert funded_donor.credit_balance == 5
        assert funded_donor.credits_total_redeemed == 0
        assert InventoryRecord.objects.get(organization=hospital).available_credits == 5
        assert not LedgerTransaction.objects.filter(type=TransactionType.REDEMPTION).exists()

    def test_exact_balance_can_be_redeemed(self, store, funded_donor, recipient, hospital):
        receipt = create_consent_request(
            store=store,
            credit_owner_id=funded_donor.id,
            beneficiary_id=recipient.id,
            organization_id=hospital.id,
            credits=5,
        )

        respond_to_consent_request(
            store=store,
            request_id=receipt['request_id'],
            actor_id=funded_donor.id,
            decision=APPROVE,
        )

        assert User.objects.get(id=funded_donor.id).credit_balance == 0

    @pytest.mark.parametrize('second', [APPROVE, DECLINE])
    def test_second_response_conflicts(self, store, funded_donor, pending_request, second):
        respond_to_consent_request(
            store=store,
            request_id=pending_request,
            actor_id=funded_donor.id,
            decision=APPROVE,
        )

        with pytest.raises(ConflictError, match='already resolved'):
            respond_to_consent_request(
                store=store,
                request_id=pending_request,
                actor_id=funded_donor.id,
                decision=second,
            )

        funded_donor.refresh_from_db()
        assert funded_donor.credit_balance == 2
        assert LedgerTransaction.objects.filter(type=TransactionType.REDEMPTION).count() == 1
        assert ConsentRequest.objects.get(id=pending_request).status == ConsentStatus.APPROVED

    def test_unknown_decision(self, store, funded_donor, pending_request):
        with pytest.raises(DomainError, match='Unknown decision'):
            respond_to_consent_request(
                store=store,
                request_id=pending_request,
                actor_id=funded_donor.id,
                decision='maybe',
            )

        assert ConsentRequest.objects.get(id=pending_request).is_pending

    def test_unknown_request(self, store, funded_donor):
        with pytest.raises(NotFoundError):
            respond_to_consent_request(
                store=store,
                request_id=uuid.uuid4(),
                actor_id=funded_donor.id,
                decision=APPROVE,
            )

    @pytest.mark.parametrize('decision', [APPROVE, DECLINE])
    def test_unknown_actor_changes_nothing(self, store, funded_donor, pending_request, decision):
        with pytest.raises(NotFoundError, match='Actor not found'):
            respond_to_consent_request(
                store=store,
                request_id=pending_request,
                actor_id=uuid.uuid4(),
                decision=decision,
            )

        assert ConsentRequest.objects.get(id=pending_request).is_pending
        funded_donor.refresh_from_db()
        assert funded_donor.credit_balance == 5
        assert not LedgerTransaction.objects.filter(type=TransactionType.REDEMPTION).exists()

    def test_donations_after_approval_top_up_balance(self, store, funded_donor, hospital, pending_request):
        respond_to_consent_request(
            store=store,
            request_id=pending_request,
            actor_id=funded_donor.id,
            decision=APPROVE,
        )
        record_donation(
            store=store,
            donor_id=funded_donor.id,
            organization_id=hospital.id,
            blood_type='O+',
            component='plasma',
            credits=1,
        )

        funded_donor.refresh_from_db()
        assert funded_donor.credit_balance == 3
        assert funded_donor.credit_balance == (
            funded_donor.credits_total_earned - funded_donor.credits_total_redeemed
        )
