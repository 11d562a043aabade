from decimal import Decimal, ROUND_HALF_UP

from rest_framework import serializers

from .models import (
    Unit,
    StorageType,
    ItemCategory,
    Item,
    ItemBatch,
    StockLedger,
    Alert,
    AlertStatus,
    AlertType,
)


# =============================================================================
# Input Serializers
# =============================================================================

class ItemFilterSerializer(serializers.Serializer):
    """
    Validate query parameters for item listing.

    Query Parameters:
        category (UUID): Filter by category
        search (str): Match name or SKU
        low_stock (bool): Only items at or below their reorder point
    """

    category = serializers.UUIDField(required=False)
    search = serializers.CharField(max_length=100, required=False)
    low_stock = serializers.BooleanField(required=False)


class AlertFilterSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=AlertStatus.choices, required=False, default=AlertStatus.OPEN)
    type = serializers.ChoiceField(choices=AlertType.choices, required=False)


# =============================================================================
# Master data
# =============================================================================

class ItemCountMixin(serializers.Serializer):
    items_count = serializers.SerializerMethodField()

    def get_items_count(self, obj):
        count = getattr(obj, 'items_count', None)
        return count if count is not None else obj.items.count()


class UnitSerializer(ItemCountMixin, serializers.ModelSerializer):
    class Meta:
        model = Unit
        fields = ['id', 'name', 'symbol', 'is_active', 'items_count', 'created_at']
        read_only_fields = ['id', 'created_at']


class StorageTypeSerializer(ItemCountMixin, serializers.ModelSerializer):
    class Meta:
        model = StorageType
        fields = ['id', 'name', 'description', 'is_active', 'items_count', 'created_at']
        read_only_fields = ['id', 'created_at']


class ItemCategorySerializer(ItemCountMixin, serializers.ModelSerializer):
    class Meta:
        model = ItemCategory
        fields = ['id', 'name', 'description', 'items_count', 'created_at']
        read_only_fields = ['id', 'created_at']


# =============================================================================
# Items & stock
# =============================================================================

class ItemSerializer(serializers.ModelSerializer):
    """
    Item with computed stock figures.

    total_stock, avg_cost and has_alerts come from queryset annotations
    (see ItemViewSet.get_queryset); they fall back to per-object queries
    for freshly created items.
    """

    category_name = serializers.CharField(source='category.name', read_only=True)
    unit_name = serializers.CharField(source='unit.name', read_only=True)
    unit_symbol = serializers.CharField(source='unit.symbol', read_only=True)
    storage_type_name = serializers.CharField(source='storage_type.name', read_only=True, default=None)
    preferred_vendor_name = serializers.CharField(source='preferred_vendor.name', read_only=True, default=None)
    total_stock = serializers.SerializerMethodField()
    avg_cost = serializers.SerializerMethodField()
    has_alerts = serializers.SerializerMethodField()

    class Meta:
        model = Item
        fields = [
            'id',
            'name',
            'sku',
            'category',
            'category_name',
            'unit',
            'unit_name',
            'unit_symbol',
            'storage_type',
            'storage_type_name',
            'preferred_vendor',
            'preferred_vendor_name',
            'moq',
            'reorder_point',
            'perishable',
            'cost_per_unit',
            'points_value',
            'barcode',
            'image_url',
            'total_stock',
            'avg_cost',
            'has_alerts',
            'created_at',
            'updated_at',
        ]
        read_only_fields = ['id', 'created_at', 'updated_at']

    def get_total_stock(self, obj):
        total = getattr(obj, 'total_stock', None)
        return total if total is not None else obj.get_total_stock()

    def get_avg_cost(self, obj):
        """Quantity-weighted unit cost of stock on hand."""
        total = self.get_total_stock(obj)
        if not total:
            return Decimal('0.00')
        value = getattr(obj, 'stock_value', None)
        if value is None:
            value = sum(
                (b.qty_on_hand * b.unit_cost for b in obj.batches.filter(qty_on_hand__gt=0)),
                Decimal('0')
            )
        return (Decimal(value) / total).quantize(Decimal('0.01'), rounding=ROUND_HALF_UP)

    def get_has_alerts(self, obj):
        flag = getattr(obj, 'has_alerts', None)
        if flag is not None:
            return flag
        return obj.alerts.filter(status=AlertStatus.OPEN).exists()


class ItemBatchSerializer(serializers.ModelSerializer):
    item_name = serializers.CharField(source='item.name', read_only=True)

    class Meta:
        model = ItemBatch
        fields = [
            'id',
            'item',
            'item_name',
            'batch_no',
            'qty_on_hand',
            'unit_cost',
            'mfg_date',
            'exp_date',
            'created_at',
        ]
        read_only_fields = fields


class StockLedgerSerializer(serializers.ModelSerializer):
    batch_no = serializers.CharField(source='batch.batch_no', read_only=True, default=None)
    created_by_name = serializers.CharField(source='created_by.name', read_only=True, default=None)

    class Meta:
        model = StockLedger
        fields = [
            'id',
            'item',
            'batch',
            'batch_no',
            'txn_type',
            'qty',
            'unit_cost',
            'ref_type',
            'ref_id',
            'created_by_name',
            'created_at',
        ]
        read_only_fields = fields


class AlertSerializer(serializers.ModelSerializer):
    item_name = serializers.CharField(source='item.name', read_only=True)
    item_sku = serializers.CharField(source='item.sku', read_only=True)

    class Meta:
        model = Alert
        fields = ['id', 'item', 'item_name', 'item_sku', 'type', 'message', 'status', 'created_at']
        read_only_fields = fields


class GenerateAlertsResponseSerializer(serializers.Serializer):
    message = serializers.CharField()
    count = serializers.IntegerField()
    alerts = AlertSerializer(many=True)
