from django.http import JsonResponse
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema, inline_serializer
from rest_framework import serializers, status

from apps.ledger.store import LedgerStore


@extend_schema(
    responses=inline_serializer(
        name='HealthResponse',
        fields={
            'status': serializers.CharField(),
            'database': serializers.CharField(),
        },
    ),
    tags=['health'],
)
@api_view(['GET'])
@permission_classes([AllowAny])
def health_check(request):
    """Report whether the ledger store answers queries."""
    if LedgerStore.from_settings().is_reachable():
        return Response({'status': 'ok', 'database': 'ok'})
    return Response(
        {'status': 'error', 'database': 'unreachable'},
        status=status.HTTP_503_SERVICE_UNAVAILABLE
    )


def error_404(request, exception):
    """Custom 404 handler."""
    return JsonResponse({
        'error': 'Not found',
        'status': 404
    }, status=404)


def error_500(request):
    """Custom 500 handler."""
    return JsonResponse({
        'error': 'Internal server error',
        'status': 500
    }, status=500)
