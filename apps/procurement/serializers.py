from decimal import Decimal

from rest_framework import serializers

from apps.inventory.models import Item

from .models import (
    VendorCategory,
    Vendor,
    PurchaseOrder,
    PurchaseOrderItem,
    POStatus,
    GoodsReceipt,
    GoodsReceiptItem,
)


# =============================================================================
# Input Serializers
# =============================================================================

class PurchaseOrderFilterSerializer(serializers.Serializer):
    """
    Validate query parameters for purchase order listing.

    Query Parameters:
        status (str): Comma separated statuses, e.g. ``OPEN,PARTIAL``
        vendor (UUID): Filter by vendor
    """

    status = serializers.CharField(required=False)
    vendor = serializers.UUIDField(required=False)

    def validate_status(self, value):
        statuses = [s.strip().upper() for s in value.split(',') if s.strip()]
        invalid = [s for s in statuses if s not in POStatus.values]
        if invalid:
            raise serializers.ValidationError(f"Invalid status: {', '.join(invalid)}")
        return statuses


class GoodsReceiptFilterSerializer(serializers.Serializer):
    purchase_order = serializers.UUIDField(required=False)


class PurchaseOrderLineInputSerializer(serializers.Serializer):
    item = serializers.PrimaryKeyRelatedField(queryset=Item.objects.all())
    ordered_qty = serializers.DecimalField(max_digits=12, decimal_places=3, min_value=Decimal('0.001'))
    unit_cost = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=Decimal('0'))
    tax_rate = serializers.DecimalField(max_digits=5, decimal_places=2, min_value=Decimal('0'), required=False)


class PurchaseOrderInputSerializer(serializers.Serializer):
    """Body for creating or replacing a purchase order."""

    vendor = serializers.PrimaryKeyRelatedField(queryset=Vendor.objects.all())
    notes = serializers.CharField(required=False, allow_blank=True, default='')
    items = PurchaseOrderLineInputSerializer(many=True, allow_empty=False)


class GoodsReceiptLineInputSerializer(serializers.Serializer):
    po_item = serializers.UUIDField()
    batch_no = serializers.CharField(max_length=100)
    mfg_date = serializers.DateField(required=False, allow_null=True)
    exp_date = serializers.DateField(required=False, allow_null=True)
    received_qty = serializers.DecimalField(max_digits=12, decimal_places=3, min_value=Decimal('0.001'))

    def validate(self, attrs):
        mfg_date = attrs.get('mfg_date')
        exp_date = attrs.get('exp_date')
        if mfg_date and exp_date and exp_date < mfg_date:
            raise serializers.ValidationError({
                'exp_date': 'Expiry date must be after manufacturing date'
            })
        return attrs


class GoodsReceiptInputSerializer(serializers.Serializer):
    purchase_order = serializers.UUIDField()
    invoice_no = serializers.CharField(max_length=100, required=False, allow_blank=True, default='')
    notes = serializers.CharField(required=False, allow_blank=True, default='')
    items = GoodsReceiptLineInputSerializer(many=True, allow_empty=False)


# =============================================================================
# Vendors
# =============================================================================

class VendorCategorySerializer(serializers.ModelSerializer):
    vendors_count = serializers.SerializerMethodField()

    class Meta:
        model = VendorCategory
        fields = ['id', 'name', 'description', 'vendors_count', 'created_at']
        read_only_fields = ['id', 'created_at']

    def get_vendors_count(self, obj):
        count = getattr(obj, 'vendors_count', None)
        return count if count is not None else obj.vendors.count()


class VendorSerializer(serializers.ModelSerializer):
    category_name = serializers.CharField(source='category.name', read_only=True, default=None)
    items_count = serializers.IntegerField(read_only=True, default=0)
    purchase_orders_count = serializers.IntegerField(read_only=True, default=0)

    class Meta:
        model = Vendor
        fields = [
            'id',
            'name',
            'category',
            'category_name',
            'gst_no',
            'contact_person',
            'phone',
            'email',
            'address',
            'items_count',
            'purchase_orders_count',
            'created_at',
            'updated_at',
        ]
        read_only_fields = ['id', 'created_at', 'updated_at']


class VendorMinimalSerializer(serializers.ModelSerializer):
    class Meta:
        model = Vendor
        fields = ['id', 'name', 'gst_no', 'contact_person', 'phone', 'email', 'address']
        read_only_fields = fields


# =============================================================================
# Purchase orders
# =============================================================================

class PurchaseOrderItemSerializer(serializers.ModelSerializer):
    item_name = serializers.CharField(source='item.name', read_only=True)
    item_sku = serializers.CharField(source='item.sku', read_only=True)
    unit_symbol = serializers.CharField(source='item.unit.symbol', read_only=True)
    line_total = serializers.DecimalField(max_digits=14, decimal_places=2, read_only=True)
    outstanding_qty = serializers.DecimalField(max_digits=12, decimal_places=3, read_only=True)

    class Meta:
        model = PurchaseOrderItem
        fields = [
            'id',
            'item',
            'item_name',
            'item_sku',
            'unit_symbol',
            'ordered_qty',
            'received_qty',
            'outstanding_qty',
            'unit_cost',
            'tax_rate',
            'line_total',
        ]
        read_only_fields = fields


class PurchaseOrderListSerializer(serializers.ModelSerializer):
    """Lightweight serializer for list views."""

    vendor_name = serializers.CharField(source='vendor.name', read_only=True)
    items_count = serializers.SerializerMethodField()

    class Meta:
        model = PurchaseOrder
        fields = ['id', 'po_no', 'vendor', 'vendor_name', 'status', 'total', 'items_count', 'created_at']
        read_only_fields = fields

    def get_items_count(self, obj):
        count = getattr(obj, 'items_count', None)
        return count if count is not None else obj.items.count()


class PurchaseOrderSerializer(serializers.ModelSerializer):
    vendor_name = serializers.CharField(source='vendor.name', read_only=True)
    created_by_name = serializers.CharField(source='created_by.name', read_only=True, default=None)
    items = PurchaseOrderItemSerializer(many=True, read_only=True)

    class Meta:
        model = PurchaseOrder
        fields = [
            'id',
            'po_no',
            'vendor',
            'vendor_name',
            'status',
            'subtotal',
            'tax',
            'total',
            'notes',
            'created_by_name',
            'items',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields


class PurchaseOrderPrintSerializer(PurchaseOrderSerializer):
    """Full PO with vendor contact details for printing."""

    vendor = VendorMinimalSerializer(read_only=True)

    class Meta(PurchaseOrderSerializer.Meta):
        pass


class SuggestionLineSerializer(serializers.Serializer):
    item = serializers.UUIDField()
    name = serializers.CharField()
    sku = serializers.CharField()
    unit_symbol = serializers.CharField()
    current_stock = serializers.DecimalField(max_digits=14, decimal_places=3)
    reorder_point = serializers.DecimalField(max_digits=12, decimal_places=3)
    moq = serializers.DecimalField(max_digits=12, decimal_places=3)
    suggested_qty = serializers.DecimalField(max_digits=14, decimal_places=3)
    unit_cost = serializers.DecimalField(max_digits=10, decimal_places=2)


class SuggestionVendorSerializer(serializers.Serializer):
    id = serializers.UUIDField()
    name = serializers.CharField()


class ReorderSuggestionSerializer(serializers.Serializer):
    vendor = SuggestionVendorSerializer()
    items = SuggestionLineSerializer(many=True)


# =============================================================================
# Goods receipts
# =============================================================================

class GoodsReceiptItemSerializer(serializers.ModelSerializer):
    item_name = serializers.CharField(source='item.name', read_only=True)

    class Meta:
        model = GoodsReceiptItem
        fields = [
            'id',
            'po_item',
            'item',
            'item_name',
            'batch',
            'batch_no',
            'mfg_date',
            'exp_date',
            'received_qty',
            'unit_cost',
        ]
        read_only_fields = fields


class GoodsReceiptSerializer(serializers.ModelSerializer):
    po_no = serializers.CharField(source='purchase_order.po_no', read_only=True)
    vendor_name = serializers.CharField(source='purchase_order.vendor.name', read_only=True)
    received_by_name = serializers.CharField(source='received_by.name', read_only=True, default=None)
    items = GoodsReceiptItemSerializer(many=True, read_only=True)

    class Meta:
        model = GoodsReceipt
        fields = [
            'id',
            'grn_no',
            'purchase_order',
            'po_no',
            'vendor_name',
            'invoice_no',
            'notes',
            'received_by_name',
            'received_at',
            'items',
        ]
        read_only_fields = fields


class GoodsReceiptPrintSerializer(GoodsReceiptSerializer):
    vendor = VendorMinimalSerializer(source='purchase_order.vendor', read_only=True)

    class Meta(GoodsReceiptSerializer.Meta):
        fields = GoodsReceiptSerializer.Meta.fields + ['vendor']
        read_only_fields = fields
