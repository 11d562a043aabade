from django.contrib import admin
from django.utils.html import format_html
from .models import MessFacility, Package, MenuItem, Order, OrderItem, OrderQRCode, OrderPaymentStatus


@admin.register(MessFacility)
class MessFacilityAdmin(admin.ModelAdmin):
    list_display = ['name', 'location', 'capacity', 'is_active']
    list_filter = ['is_active']
    search_fields = ['name', 'location']


@admin.register(Package)
class PackageAdmin(admin.ModelAdmin):
    list_display = ['name', 'mess_facility', 'duration_days', 'price', 'is_active']
    list_filter = ['mess_facility', 'is_active']
    search_fields = ['name']


@admin.register(MenuItem)
class MenuItemAdmin(admin.ModelAdmin):
    list_display = ['name', 'mess_facility', 'meal_type', 'price', 'is_available']
    list_filter = ['mess_facility', 'meal_type', 'is_available']
    search_fields = ['name']


class OrderItemInline(admin.TabularInline):
    model = OrderItem
    extra = 0
    readonly_fields = ['menu_item', 'quantity', 'unit_price', 'total_price']


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = ['order_number', 'student', 'mess_facility', 'meal_type', 'total_amount', 'status', 'payment_badge', 'created_at']
    list_filter = ['status', 'payment_status', 'meal_type', 'mess_facility']
    search_fields = ['order_number', 'student__name', 'student__register_number']
    readonly_fields = ['order_number', 'razorpay_order_id', 'razorpay_payment_id', 'served_at', 'created_at']
    inlines = [OrderItemInline]

    def payment_badge(self, obj):
        colors = {
            OrderPaymentStatus.PENDING: '#ffc107',
            OrderPaymentStatus.PAID: '#28a745',
            OrderPaymentStatus.FAILED: '#dc3545',
        }
        return format_html(
            '<span style="background-color: {}; color: white; padding: 3px 10px; border-radius: 3px;">{}</span>',
            colors.get(obj.payment_status, '#6c757d'),
            obj.get_payment_status_display()
        )
    payment_badge.short_description = 'Payment'

    def get_queryset(self, request):
        qs = super().get_queryset(request)
        return qs.select_related('student', 'mess_facility')


@admin.register(OrderQRCode)
class OrderQRCodeAdmin(admin.ModelAdmin):
    list_display = ['qr_code_data', 'order', 'expires_at']
    search_fields = ['qr_code_data', 'order__order_number']
