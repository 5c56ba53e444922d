"""
Race tests for the ledger services.

These run on TransactionTestCase so each thread commits real transactions
against the shared test database.
"""

import threading

from django.db import connection
from django.test import TransactionTestCase

from apps.accounts.models import User, Role
from apps.ledger.changesets import ConsentContext
from apps.ledger.models import ConsentRequest, ConsentStatus, LedgerTransaction, TransactionType
from apps.ledger.services import (
    APPROVE,
    ConflictError,
    InsufficientCreditsError,
    create_consent_request,
    record_donation,
    respond_to_consent_request,
)
from apps.ledger.store import LedgerStore
from apps.organizations.models import InventoryRecord, Organization, OrganizationStatus


class TestConcurrency(TransactionTestCase):
    """Concurrent calls serialize on row locks and never double-apply."""

    def setUp(self):
        self.store = LedgerStore()
        self.hospital = Organization.objects.create(
            name='City Hospital',
            status=OrganizationStatus.ACTIVE,
        )
        self.donor = User.objects.create_user(
            email='donor@test.com',
            password='TestPass123!',
            roles=[Role.DONOR],
        )
        self.recipient = User.objects.create_user(
            email='recipient@test.com',
            password='TestPass123!',
            roles=[Role.RECIPIENT],
        )
        record_donation(
            store=self.store,
            donor_id=self.donor.id,
            organization_id=self.hospital.id,
            blood_type='O+',
            component='whole_blood',
            credits=5,
        )

    def open_request(self, credits):
        return create_consent_request(
            store=self.store,
            credit_owner_id=self.donor.id,
            beneficiary_id=self.recipient.id,
            organization_id=self.hospital.id,
            credits=credits,
            context=ConsentContext(requested_blood_type='O+'),
        )['request_id']

    def run_in_threads(self, calls):
        """Run each callable in its own thread; collect results and errors."""
        results = []
        errors = []
        start = threading.Barrier(len(calls))

        def target(call):
            try:
                start.wait()
                results.append(call())
            except (ConflictError, InsufficientCreditsError) as e:
                errors.append(e)
            except Exception as e:
                errors.append(RuntimeError(f"Unexpected error: {e!r}"))
            finally:
                connection.close()

        threads = [threading.Thread(target=target, args=(call,)) for call in calls]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        return results, errors

    def approve(self, request_id):
        return lambda: respond_to_consent_request(
            store=self.store,
            request_id=request_id,
            actor_id=self.donor.id,
            decision=APPROVE,
        )

    def test_concurrent_approvals_of_one_request(self):
        """Exactly one approval wins; the other sees a resolved request."""
        request_id = self.open_request(credits=3)

        results, errors = self.run_in_threads([self.approve(request_id), self.approve(request_id)])

        assert len(results) == 1, f"Expected one approval, got {len(results)}"
        assert len(errors) == 1
        assert isinstance(errors[0], ConflictError), errors[0]
        assert not isinstance(errors[0], InsufficientCreditsError)

        assert User.objects.get(id=self.donor.id).credit_balance == 2
        assert LedgerTransaction.objects.filter(type=TransactionType.REDEMPTION).count() == 1
        assert ConsentRequest.objects.get(id=request_id).status == ConsentStatus.APPROVED
        assert InventoryRecord.objects.get(organization=self.hospital).available_credits == 2

    def test_concurrent_approvals_draining_one_owner(self):
        """Two requests of 3 against a balance of 5: one is refused."""
        first = self.open_request(credits=3)
        second = self.open_request(credits=3)

        results, errors = self.run_in_threads([self.approve(first), self.approve(second)])

        assert len(results) == 1
        assert len(errors) == 1
        assert isinstance(errors[0], InsufficientCreditsError), errors[0]

        donor = User.objects.get(id=self.donor.id)
        assert donor.credit_balance == 2
        assert donor.credits_total_redeemed == 3
        statuses = sorted(
            ConsentRequest.objects.filter(id__in=[first, second]).values_list('status', flat=True)
        )
        assert statuses == [ConsentStatus.APPROVED, ConsentStatus.PENDING]

    def test_concurrent_donations_all_counted(self):
        def donate():
            return record_donation(
                store=self.store,
                donor_id=self.donor.id,
                organization_id=self.hospital.id,
                blood_type='O+',
                component='plasma',
                credits=1,
            )

        results, errors = self.run_in_threads([donate for _ in range(4)])

        assert len(errors) == 0, f"Expected no errors, got: {errors}"
        assert len(results) == 4

        donor = User.objects.get(id=self.donor.id)
        assert donor.credit_balance == 9
        assert donor.credits_total_earned == 9
        record = InventoryRecord.objects.get(organization=self.hospital, blood_type='O+')
        assert record.available_credits == 9
        assert LedgerTransaction.objects.filter(type=TransactionType.DONATION).count() == 5
