# ==========================================
# apps/accounts/admin.py
# ==========================================

from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from django.utils.html import format_html
from .models import User


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    """
    Admin interface for ledger participants.

    Roles, blood type and organization are editable here. The credit and
    emergency columns are read-only: they change only through the ledger
    services.
    """

    list_display = [
        'email',
        'display_name',
        'roles',
        'blood_type',
        'organization',
        'credit_balance',
        'emergency_badge',
        'created_at',
    ]

    list_filter = [
        'is_active',
        'is_staff',
        'blood_type',
        'emergency_active',
        'created_at',
    ]

    search_fields = [
        'email',
        'display_name',
    ]

    ordering = ['-created_at']
    date_hierarchy = 'created_at'

    fieldsets = (
        ('Basic Information', {
            'fields': ('email', 'display_name', 'password')
        }),
        ('Ledger Profile', {
            'fields': ('roles', 'blood_type', 'organization'),
        }),
        ('Credit Record', {
            'fields': (
                'credit_balance',
                'credits_total_earned',
                'credits_total_redeemed',
            ),
        }),
        ('Emergency', {
            'fields': (
                'emergency_active',
                'emergency_override_id',
                'emergency_credits',
                'emergency_initiated_at',
                'emergency_organization',
                'emergency_justification',
                'emergency_repayment_plan',
                'emergency_repayment_due_at',
            ),
            'classes': ('collapse',),
        }),
        ('Permissions', {
            'fields': ('is_active', 'is_staff', 'is_superuser', 'groups', 'user_permissions'),
        }),
        ('Timestamps', {
            'fields': ('created_at', 'last_login'),
            'classes': ('collapse',),
        }),
    )

    add_fieldsets = (
        ('Create User', {
            'classes': ('wide',),
            'fields': ('email', 'display_name', 'password1', 'password2'),
        }),
        ('Ledger Profile', {
            'fields': ('roles', 'blood_type', 'organization'),
        }),
    )

    readonly_fields = [
        'credit_balance',
        'credits_total_earned',
        'credits_total_redeemed',
        'emergency_active',
        'emergency_override_id',
        'emergency_credits',
        'emergency_initiated_at',
        'emergency_organization',
        'emergency_justification',
        'emergency_repayment_plan',
        'emergency_repayment_due_at',
        'created_at',
        'last_login',
    ]

    filter_horizontal = ['groups', 'user_permissions']

    def emergency_badge(self, obj):
        """Display outstanding emergency debt as colored badge."""
        if obj.emergency_active:
            return format_html(
                '<span style="background: #B85C5C; color: white; padding: 3px 8px; '
                'border-radius: 10px; font-size: 11px;">Emergency</span>'
            )
        return format_html(
            '<span style="background: #ccc; color: #666; padding: 3px 8px; '
            'border-radius: 10px; font-size: 11px;">None</span>'
        )
    emergency_badge.short_description = 'Emergency'
    emergency_badge.admin_order_field = 'emergency_active'

    actions = [
        'activate_users',
        'deactivate_users',
    ]

    @admin.action(description='Activate selected users')
    def activate_users(self, request, queryset):
        count = queryset.update(is_active=True)
        self.message_user(request, f'Activated {count} user(s).')

    @admin.action(description='Deactivate selected users')
    def deactivate_users(self, request, queryset):
        """Deactivate selected users (excludes superusers)."""
        safe_queryset = queryset.filter(is_superuser=False)
        count = safe_queryset.update(is_active=False)
        skipped = queryset.count() - count
        msg = f'Deactivated {count} user(s).'
        if skipped:
            msg += f' Skipped {skipped} superuser(s).'
        self.message_user(request, msg)

    def get_queryset(self, request):
        qs = super().get_queryset(request)
        return qs.select_related('organization')
