import pytest
from django.db import DatabaseError
from apps.accounts.models import User
from apps.ledger.exceptions import ConflictError, TransactionError
from apps.ledger.store import LedgerStore


def test_from_settings_uses_configured_alias(settings):
    settings.LEDGER = {**settings.LEDGER, 'DATABASE_ALIAS': 'default'}

    assert LedgerStore.from_settings().using == 'default'


@pytest.mark.django_db
class TestRunAtomic:

    def test_returns_work_result(self, store, donor):
        result = store.run_atomic(lambda s: s.users.get(id=donor.id).email)

        assert result == 'donor@example.com'

    def test_domain_error_rolls_back_and_propagates(self, store, donor):
        def work(s):
            s.users.filter(id=donor.id).update(credit_balance=10)
            raise ConflictError("Stop here")

        with pytest.raises(ConflictError, match='Stop here'):
            store.run_atomic(work)

        assert User.objects.get(id=donor.id).credit_balance == 0

    def test_none_result_is_a_transaction_error(self, store, donor):
        def work(s):
            s.users.filter(id=donor.id).update(credit_balance=10)
            return None

        with pytest.raises(TransactionError):
            store.run_atomic(work)

        assert User.objects.get(id=donor.id).credit_balance == 0

    def test_database_error_becomes_transaction_error(self, store):
        def work(s):
            raise DatabaseError("disk I/O error")

        with pytest.raises(TransactionError, match='disk I/O error'):
            store.run_atomic(work)

    def test_store_is_reachable(self, store):
        assert store.is_reachable() is True

    def test_querysets_bound_to_alias(self, store):
        assert store.users.db == 'default'
        assert store.transactions.db == 'default'
