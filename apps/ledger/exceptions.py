"""
Domain exceptions for the ledger.

Every expected business-rule outcome is raised as a DomainError subclass.
Each carries an HTTP status hint and a machine-readable code, so the API
layer can render it without inspecting the service that raised it.

TransactionError sits outside that taxonomy: it signals that the store
could not commit a unit of work, and is rendered as an opaque 500.
"""
from rest_framework import status
from rest_framework.exceptions import APIException


class DomainError(APIException):
    """Validation or business failure."""
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'The request violates a ledger rule.'
    default_code = 'DOMAIN_ERROR'

    @property
    def code(self):
        return self.detail.code

    @property
    def message(self):
        return str(self.detail)


class NotFoundError(DomainError):
    """Referenced entity does not exist."""
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = 'Resource not found.'
    default_code = 'NOT_FOUND'


class ConflictError(DomainError):
    """State transition or business rule conflict."""
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'The request conflicts with the current ledger state.'
    default_code = 'CONFLICT'


class InsufficientCreditsError(ConflictError):
    """Credit owner's balance does not cover the requested credits."""
    default_detail = 'Insufficient credits.'
    default_code = 'INSUFFICIENT_CREDITS'


class PermissionDeniedError(DomainError):
    """Actor's capabilities do not cover the requested action."""
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = 'You are not permitted to perform this action.'
    default_code = 'FORBIDDEN'


class TransactionError(Exception):
    """Store failed to commit a unit of work atomically."""
    pass
