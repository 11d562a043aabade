from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from django.utils.html import format_html
from .models import User, AuditLog, UserStatus


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    """
    Admin interface for staff users.

    Users log in by email and carry a single role; status replaces
    Django's is_active flag.
    """

    list_display = [
        'email',
        'name',
        'role',
        'status_badge',
        'mess_facility',
        'last_login',
    ]

    list_filter = ['role', 'status', 'mess_facility']
    search_fields = ['email', 'name', 'phone']
    ordering = ['name']

    fieldsets = (
        ('Basic Information', {
            'fields': ('email', 'name', 'phone', 'password')
        }),
        ('Access', {
            'fields': ('role', 'status', 'mess_facility', 'is_staff', 'is_superuser'),
        }),
        ('Timestamps', {
            'fields': ('created_at', 'updated_at', 'last_login'),
            'classes': ('collapse',),
        }),
    )

    add_fieldsets = (
        ('Create User', {
            'classes': ('wide',),
            'fields': ('email', 'name', 'role', 'password1', 'password2'),
        }),
    )

    readonly_fields = ['created_at', 'updated_at', 'last_login']
    filter_horizontal = []

    def status_badge(self, obj):
        """Display account status as colored badge."""
        color = '#6B8E5E' if obj.status == UserStatus.ACTIVE else '#B85C5C'
        return format_html(
            '<span style="background: {}; color: white; padding: 3px 8px; '
            'border-radius: 10px; font-size: 11px;">{}</span>',
            color,
            obj.get_status_display(),
        )
    status_badge.short_description = 'Status'
    status_badge.admin_order_field = 'status'

    actions = ['activate_users', 'deactivate_users']

    @admin.action(description='Activate selected users')
    def activate_users(self, request, queryset):
        count = queryset.update(status=UserStatus.ACTIVE)
        self.message_user(request, f'Activated {count} user(s).')

    @admin.action(description='Deactivate selected users')
    def deactivate_users(self, request, queryset):
        """Deactivate selected users (excludes superusers)."""
        safe_queryset = queryset.filter(is_superuser=False)
        count = safe_queryset.update(status=UserStatus.INACTIVE)
        self.message_user(request, f'Deactivated {count} user(s).')

    def get_queryset(self, request):
        return super().get_queryset(request).select_related('mess_facility')


@admin.register(AuditLog)
class AuditLogAdmin(admin.ModelAdmin):
    list_display = ['created_at', 'user', 'action', 'entity', 'entity_id']
    list_filter = ['action', 'entity']
    search_fields = ['entity_id', 'user__email']
    readonly_fields = ['user', 'action', 'entity', 'entity_id', 'details', 'created_at']
    date_hierarchy = 'created_at'
