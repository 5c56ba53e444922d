"""
Ledger store handle and transaction coordinator.

A LedgerStore is constructed explicitly and passed to every service call.
It binds the ledger tables to one database alias and owns the atomic
unit-of-work boundary; there is no module-level connection state.

Example::

    with LedgerStore.from_settings() as store:
        receipt = record_donation(store=store, donor_id=..., ...)
"""

import logging

from django.conf import settings
from django.db import DEFAULT_DB_ALIAS, DatabaseError, connections, transaction

from apps.accounts.models import User
from apps.organizations.models import InventoryMovement, InventoryRecord, Organization

from .exceptions import TransactionError
from .models import (
    ConsentRequest,
    CreditEvent,
    EmergencyCase,
    ExchangeProposal,
    LedgerTransaction,
)

logger = logging.getLogger(__name__)


class LedgerStore:
    """Access to the ledger tables on a single database alias."""

    def __init__(self, using=DEFAULT_DB_ALIAS):
        self.using = using

    @classmethod
    def from_settings(cls):
        return cls(using=settings.LEDGER['DATABASE_ALIAS'])

    def __repr__(self):
        return f"LedgerStore(using={self.using!r})"

    # -------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------

    def open(self):
        """Establish the underlying connection eagerly."""
        connections[self.using].ensure_connection()
        return self

    def close(self):
        connections[self.using].close()

    def __enter__(self):
        return self.open()

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False

    def is_reachable(self):
        """Round-trip a trivial query; used by the health check."""
        try:
            with connections[self.using].cursor() as cursor:
                cursor.execute('SELECT 1')
                cursor.fetchone()
        except DatabaseError:
            logger.exception("Ledger store %s is unreachable", self.using)
            return False
        return True

    # -------------------------------------------------------------------
    # Tables
    # -------------------------------------------------------------------

    @property
    def users(self):
        return User.objects.using(self.using)

    @property
    def organizations(self):
        return Organization.objects.using(self.using)

    @property
    def inventory(self):
        return InventoryRecord.objects.using(self.using)

    @property
    def movements(self):
        return InventoryMovement.objects.using(self.using)

    @property
    def transactions(self):
        return LedgerTransaction.objects.using(self.using)

    @property
    def credit_events(self):
        return CreditEvent.objects.using(self.using)

    @property
    def consent_requests(self):
        return ConsentRequest.objects.using(self.using)

    @property
    def emergency_cases(self):
        return EmergencyCase.objects.using(self.using)

    @property
    def exchanges(self):
        return ExchangeProposal.objects.using(self.using)

    # -------------------------------------------------------------------
    # Transaction coordinator
    # -------------------------------------------------------------------

    def run_atomic(self, work):
        """
        Run ``work(store)`` as one all-or-nothing unit.

        Domain errors raised by ``work`` roll the unit back and propagate
        unchanged. Storage failures roll it back and surface as
        TransactionError. Nothing is retried here.

        Args:
            work: Callable taking this store and returning the unit's result.

        Returns:
            Whatever ``work`` returns.

        Raises:
            TransactionError: If the store could not commit, or ``work``
                returned None.
        """
        try:
            with transaction.atomic(using=self.using):
                result = work(self)
                if result is None:
                    raise TransactionError("Unit of work did not return a result")
        except DatabaseError as exc:
            logger.error(
                "Ledger unit of work rolled back on %s: %s",
                self.using, exc, exc_info=True
            )
            raise TransactionError(str(exc)) from exc
        return result
