from django.contrib import admin
from django.utils.html import format_html
from .models import (
    ConsentRequest,
    ConsentStatus,
    CreditEvent,
    EmergencyCase,
    ExchangeProposal,
    LedgerTransaction,
)


class ReadOnlyLedgerAdmin(admin.ModelAdmin):
    """Ledger rows are written only by the services."""

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(LedgerTransaction)
class LedgerTransactionAdmin(ReadOnlyLedgerAdmin):
    list_display = [
        'id',
        'type',
        'credits',
        'organization',
        'donor',
        'credit_owner',
        'beneficiary',
        'recorded_at',
    ]
    list_filter = ['type', 'blood_type', 'recorded_at']
    search_fields = ['id', 'donor__email', 'credit_owner__email', 'beneficiary__email']
    date_hierarchy = 'recorded_at'
    ordering = ['-recorded_at']

    def get_queryset(self, request):
        qs = super().get_queryset(request)
        return qs.select_related('organization', 'donor', 'credit_owner', 'beneficiary')


@admin.register(CreditEvent)
class CreditEventAdmin(ReadOnlyLedgerAdmin):
    list_display = ['user', 'type', 'credits', 'organization', 'transaction', 'at']
    list_filter = ['type']
    search_fields = ['user__email']
    ordering = ['-at']


@admin.register(ConsentRequest)
class ConsentRequestAdmin(ReadOnlyLedgerAdmin):
    """
    Consent requests with their decision state.

    Decisions go through the API so the redemption runs atomically.
    """

    list_display = [
        'id',
        'status_badge',
        'credit_owner',
        'beneficiary',
        'organization',
        'credits',
        'requested_at',
        'decided_at',
    ]
    list_filter = ['status', 'requested_at']
    search_fields = ['credit_owner__email', 'beneficiary__email', 'organization__name']
    ordering = ['-requested_at']

    def status_badge(self, obj):
        """Display consent status as colored badge."""
        colors = {
            ConsentStatus.PENDING: '#E5C49A',
            ConsentStatus.APPROVED: '#6B8E5E',
            ConsentStatus.DECLINED: '#B85C5C',
        }
        return format_html(
            '<span style="background: {}; color: white; padding: 3px 8px; '
            'border-radius: 10px; font-size: 11px;">{}</span>',
            colors.get(obj.status, '#ccc'),
            obj.get_status_display(),
        )
    status_badge.short_description = 'Status'
    status_badge.admin_order_field = 'status'


@admin.register(EmergencyCase)
class EmergencyCaseAdmin(ReadOnlyLedgerAdmin):
    list_display = ['id', 'beneficiary', 'organization', 'credits', 'status', 'repayment_due_at', 'created_at']
    list_filter = ['status']
    search_fields = ['beneficiary__email', 'organization__name']
    ordering = ['-created_at']


@admin.register(ExchangeProposal)
class ExchangeProposalAdmin(ReadOnlyLedgerAdmin):
    list_display = [
        'id',
        'requesting_organization',
        'requested_blood_type',
        'requested_credits',
        'offering_organization',
        'offered_blood_type',
        'offered_credits',
        'status',
        'proposed_at',
    ]
    list_filter = ['status']
    ordering = ['-proposed_at']
