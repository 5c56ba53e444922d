"""
Ledger services layer.

Every operation takes an explicit LedgerStore. Operations that change
balances, inventory or request state run as one atomic unit through
LedgerStore.run_atomic().
"""

from apps.ledger.exceptions import (
    DomainError,
    NotFoundError,
    ConflictError,
    InsufficientCreditsError,
    PermissionDeniedError,
    TransactionError,
)

from .donation_recording import (
    record_donation,
)

from .consent_workflow import (
    APPROVE,
    DECLINE,
    create_consent_request,
    get_consent_request,
    respond_to_consent_request,
)

from .emergency_override import (
    apply_emergency_override,
)

from .exchange_proposals import (
    create_exchange_proposal,
)

from .ledger_queries import (
    get_ledger_summary,
)


__all__ = [
    # Exceptions
    'DomainError',
    'NotFoundError',
    'ConflictError',
    'InsufficientCreditsError',
    'PermissionDeniedError',
    'TransactionError',

    # Donations
    'record_donation',

    # Consent workflow
    'APPROVE',
    'DECLINE',
    'create_consent_request',
    'get_consent_request',
    'respond_to_consent_request',

    # Emergency override
    'apply_emergency_override',

    # Exchanges
    'create_exchange_proposal',

    # Queries
    'get_ledger_summary',
]
