from django.contrib import admin
from django.utils.html import format_html
from .models import (
    VendorCategory,
    Vendor,
    PurchaseOrder,
    PurchaseOrderItem,
    POStatus,
    GoodsReceipt,
    GoodsReceiptItem,
)


@admin.register(VendorCategory)
class VendorCategoryAdmin(admin.ModelAdmin):
    list_display = ['name', 'description']
    search_fields = ['name']


@admin.register(Vendor)
class VendorAdmin(admin.ModelAdmin):
    list_display = ['name', 'category', 'contact_person', 'phone', 'gst_no']
    list_filter = ['category']
    search_fields = ['name', 'gst_no', 'contact_person']


class PurchaseOrderItemInline(admin.TabularInline):
    model = PurchaseOrderItem
    extra = 0
    fields = ['item', 'ordered_qty', 'received_qty', 'unit_cost', 'tax_rate']
    readonly_fields = ['received_qty']


@admin.register(PurchaseOrder)
class PurchaseOrderAdmin(admin.ModelAdmin):
    list_display = ['po_no', 'vendor', 'status_badge', 'total', 'created_by', 'created_at']
    list_filter = ['status', 'created_at']
    search_fields = ['po_no', 'vendor__name']
    readonly_fields = ['po_no', 'subtotal', 'tax', 'total', 'created_at', 'updated_at']
    inlines = [PurchaseOrderItemInline]

    def status_badge(self, obj):
        colors = {
            POStatus.OPEN: '#17a2b8',
            POStatus.PARTIAL: '#ffc107',
            POStatus.CLOSED: '#28a745',
        }
        return format_html(
            '<span style="background-color: {}; color: white; padding: 3px 10px; border-radius: 3px;">{}</span>',
            colors.get(obj.status, '#6c757d'),
            obj.get_status_display()
        )
    status_badge.short_description = 'Status'

    def get_queryset(self, request):
        qs = super().get_queryset(request)
        return qs.select_related('vendor', 'created_by')


class GoodsReceiptItemInline(admin.TabularInline):
    model = GoodsReceiptItem
    extra = 0
    can_delete = False
    readonly_fields = ['po_item', 'item', 'batch', 'batch_no', 'mfg_date', 'exp_date', 'received_qty', 'unit_cost']


@admin.register(GoodsReceipt)
class GoodsReceiptAdmin(admin.ModelAdmin):
    """GRNs are posted through the API; the admin is read-only."""

    list_display = ['grn_no', 'purchase_order', 'invoice_no', 'received_by', 'received_at']
    search_fields = ['grn_no', 'invoice_no', 'purchase_order__po_no']
    readonly_fields = ['grn_no', 'purchase_order', 'invoice_no', 'notes', 'received_by', 'received_at']
    inlines = [GoodsReceiptItemInline]

    def has_add_permission(self, request):
        return False

    def get_queryset(self, request):
        qs = super().get_queryset(request)
        return qs.select_related('purchase_order', 'received_by')
