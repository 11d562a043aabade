from django.contrib import admin
from django.utils.html import format_html
from .models import PaymentGateway


@admin.register(PaymentGateway)
class PaymentGatewayAdmin(admin.ModelAdmin):
    list_display = ['name', 'type', 'key_id', 'active_badge', 'updated_at']
    list_filter = ['type', 'is_active']
    search_fields = ['name', 'key_id']
    readonly_fields = ['id', 'created_at', 'updated_at']

    def active_badge(self, obj):
        color = '#28a745' if obj.is_active else '#6c757d'
        return format_html(
            '<span style="background-color: {}; color: white; padding: 3px 10px; border-radius: 3px;">{}</span>',
            color,
            'Active' if obj.is_active else 'Inactive'
        )
    active_badge.short_description = 'Status'
