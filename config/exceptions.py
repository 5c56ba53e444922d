"""
Project-wide DRF exception handler.

Every error response has the shape ``{"error": message, "code": code}``;
validation failures add a ``fields`` mapping. Anything that is not an
APIException is logged and reported as an opaque 500.
"""
import logging

from django.core.exceptions import PermissionDenied
from django.http import Http404
from rest_framework import exceptions, status
from rest_framework.response import Response
from rest_framework.views import exception_handler, set_rollback

from apps.ledger.exceptions import DomainError

logger = logging.getLogger(__name__)


def api_exception_handler(exc, context):
    view = context.get('view')
    view_name = view.__class__.__name__ if view is not None else None

    if isinstance(exc, DomainError):
        logger.info("%s rejected in %s: %s", exc.code, view_name, exc.message)
        set_rollback()
        return Response(
            {'error': exc.message, 'code': exc.code},
            status=exc.status_code
        )

    if isinstance(exc, exceptions.ValidationError):
        set_rollback()
        return Response(
            {
                'error': 'Request validation failed',
                'code': 'VALIDATION_ERROR',
                'fields': exc.detail,
            },
            status=status.HTTP_400_BAD_REQUEST
        )

    if isinstance(exc, Http404):
        exc = exceptions.NotFound()
    elif isinstance(exc, PermissionDenied):
        exc = exceptions.PermissionDenied()

    if isinstance(exc, exceptions.APIException):
        response = exception_handler(exc, context)
        detail = exc.detail if isinstance(exc.detail, str) else exc.default_detail
        response.data = {'error': str(detail), 'code': exc.default_code.upper()}
        return response

    logger.error("Unhandled error in %s", view_name, exc_info=exc)
    set_rollback()
    return Response(
        {'error': 'Internal server error'},
        status=status.HTTP_500_INTERNAL_SERVER_ERROR
    )
