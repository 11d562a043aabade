from django.contrib import admin
from django.utils.html import format_html
from .models import (
    Unit,
    StorageType,
    ItemCategory,
    Item,
    ItemBatch,
    StockLedger,
    Alert,
    AlertStatus,
)


@admin.register(Unit)
class UnitAdmin(admin.ModelAdmin):
    list_display = ['name', 'symbol', 'is_active']
    search_fields = ['name', 'symbol']


@admin.register(StorageType)
class StorageTypeAdmin(admin.ModelAdmin):
    list_display = ['name', 'description', 'is_active']
    search_fields = ['name']


@admin.register(ItemCategory)
class ItemCategoryAdmin(admin.ModelAdmin):
    list_display = ['name', 'description', 'created_at']
    search_fields = ['name']


class ItemBatchInline(admin.TabularInline):
    model = ItemBatch
    extra = 0
    fields = ['batch_no', 'qty_on_hand', 'unit_cost', 'mfg_date', 'exp_date']
    readonly_fields = ['qty_on_hand']


@admin.register(Item)
class ItemAdmin(admin.ModelAdmin):
    """
    Admin for stock items.

    Batch quantities are read-only here: stock only moves through GRNs
    and issues so the ledger stays consistent.
    """

    list_display = ['name', 'sku', 'category', 'unit', 'reorder_point', 'perishable']
    list_filter = ['category', 'perishable', 'storage_type']
    search_fields = ['name', 'sku', 'barcode']
    inlines = [ItemBatchInline]

    def get_queryset(self, request):
        qs = super().get_queryset(request)
        return qs.select_related('category', 'unit', 'storage_type')


@admin.register(StockLedger)
class StockLedgerAdmin(admin.ModelAdmin):
    list_display = ['created_at', 'item', 'batch', 'txn_type', 'qty', 'ref_type', 'ref_id']
    list_filter = ['txn_type', 'ref_type']
    search_fields = ['item__name', 'ref_id', 'batch__batch_no']
    date_hierarchy = 'created_at'

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(Alert)
class AlertAdmin(admin.ModelAdmin):
    list_display = ['item', 'type', 'message', 'status_badge', 'created_at']
    list_filter = ['type', 'status']
    actions = ['dismiss_alerts']

    def status_badge(self, obj):
        """Display alert status as colored badge."""
        color = '#B85C5C' if obj.status == AlertStatus.OPEN else '#ccc'
        return format_html(
            '<span style="background: {}; color: white; padding: 3px 8px; '
            'border-radius: 10px; font-size: 11px;">{}</span>',
            color,
            obj.get_status_display(),
        )
    status_badge.short_description = 'Status'

    @admin.action(description='Dismiss selected alerts')
    def dismiss_alerts(self, request, queryset):
        count = queryset.update(status=AlertStatus.DISMISSED)
        self.message_user(request, f'Dismissed {count} alert(s).')
