"""Read-only views of a user's credit record."""

from uuid import UUID

from django.conf import settings
from django.db.models import Q

from apps.accounts.models import User
from apps.ledger.exceptions import NotFoundError
from apps.ledger.store import LedgerStore


def get_ledger_summary(*, store: LedgerStore, user_id: UUID, limit: int = None) -> dict:
    """
    Get a user's credit record and their most recent transactions.

    Transactions are those where the user is donor, credit owner or
    beneficiary, newest first.

    Raises:
        NotFoundError: If the user doesn't exist
    """
    if limit is None:
        limit = settings.LEDGER['RECENT_TRANSACTIONS_LIMIT']

    try:
        user = store.users.get(id=user_id)
    except User.DoesNotExist:
        raise NotFoundError("User not found")

    transactions = list(
        store.transactions
        .filter(Q(donor_id=user.id) | Q(credit_owner_id=user.id) | Q(beneficiary_id=user.id))
        .order_by('-recorded_at')[:limit]
    )

    return {
        'user': user,
        'credits': user.credit_record(),
        'recent_transactions': transactions,
    }
