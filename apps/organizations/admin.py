from django.contrib import admin
from django.utils.html import format_html

from apps.ledger.store import LedgerStore
from apps.ledger.exceptions import DomainError
from .models import Organization, OrganizationStatus, InventoryRecord, InventoryMovement
from .services import activate_organization


class InventoryRecordInline(admin.TabularInline):
    model = InventoryRecord
    extra = 0
    fields = ['blood_type', 'available_credits', 'total_donated_credits', 'updated_at']
    readonly_fields = fields
    can_delete = False

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Organization)
class OrganizationAdmin(admin.ModelAdmin):
    """
    Admin interface for organizations.

    Inventory is shown read-only; it changes only through donations and
    approved consent requests.
    """

    list_display = ['name', 'city', 'status_badge', 'verified_at', 'created_at']
    list_filter = ['status', 'city']
    search_fields = ['name', 'city', 'contact_email']
    readonly_fields = ['status', 'verified_at', 'created_at', 'updated_at']
    ordering = ['name']
    inlines = [InventoryRecordInline]

    def status_badge(self, obj):
        """Display onboarding status as colored badge."""
        if obj.status == OrganizationStatus.ACTIVE:
            return format_html(
                '<span style="background: #6B8E5E; color: white; padding: 3px 8px; '
                'border-radius: 10px; font-size: 11px;">Active</span>'
            )
        return format_html(
            '<span style="background: #E5C49A; color: #2C1810; padding: 3px 8px; '
            'border-radius: 10px; font-size: 11px;">Pending</span>'
        )
    status_badge.short_description = 'Status'
    status_badge.admin_order_field = 'status'

    actions = ['activate_organizations']

    @admin.action(description='Activate selected organizations')
    def activate_organizations(self, request, queryset):
        store = LedgerStore.from_settings()
        activated = 0
        for organization in queryset.filter(status=OrganizationStatus.PENDING):
            try:
                activate_organization(store=store, organization_id=organization.id)
            except DomainError as exc:
                self.message_user(request, f'{organization.name}: {exc.message}')
                continue
            activated += 1
        self.message_user(request, f'Activated {activated} organization(s).')


@admin.register(InventoryMovement)
class InventoryMovementAdmin(admin.ModelAdmin):
    list_display = ['record', 'type', 'credits', 'transaction_id', 'consent_request_id', 'at']
    list_filter = ['type']
    ordering = ['-at']

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
