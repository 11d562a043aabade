from django.contrib import admin
from django.utils.html import format_html
from .models import Student, Subscription, SubscriptionStatus, SubscriptionTransaction


@admin.register(Student)
class StudentAdmin(admin.ModelAdmin):
    list_display = ['register_number', 'name', 'user_type', 'department', 'mobile_number', 'is_hosteler', 'mess_facility']
    list_filter = ['user_type', 'is_hosteler', 'mobile_login_enabled', 'mess_facility']
    search_fields = ['register_number', 'name', 'mobile_number', 'email']
    readonly_fields = ['qr_code', 'created_at', 'updated_at']


class SubscriptionTransactionInline(admin.TabularInline):
    model = SubscriptionTransaction
    extra = 0
    readonly_fields = ['razorpay_order_id', 'razorpay_payment_id', 'amount', 'status', 'created_at']
    exclude = ['webhook_data']


@admin.register(Subscription)
class SubscriptionAdmin(admin.ModelAdmin):
    list_display = ['student', 'package', 'mess_facility', 'start_date', 'end_date', 'status_badge', 'amount_paid']
    list_filter = ['status', 'mess_facility', 'package']
    search_fields = ['student__name', 'student__register_number', 'razorpay_order_id']
    date_hierarchy = 'start_date'
    inlines = [SubscriptionTransactionInline]

    def get_queryset(self, request):
        return super().get_queryset(request).select_related('student', 'package', 'mess_facility')

    def status_badge(self, obj):
        colors = {
            SubscriptionStatus.ACTIVE: '#28a745',
            SubscriptionStatus.SUSPENDED: '#ffc107',
            SubscriptionStatus.CANCELLED: '#dc3545',
            SubscriptionStatus.EXPIRED: '#6c757d',
        }
        return format_html(
            '<span style="background-color: {}; color: white; padding: 3px 10px; border-radius: 3px;">{}</span>',
            colors.get(obj.status, '#6c757d'),
            obj.get_status_display()
        )
    status_badge.short_description = 'Status'
