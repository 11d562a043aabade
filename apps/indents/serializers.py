from decimal import Decimal

from rest_framework import serializers

from apps.inventory.models import Item, ItemBatch
from apps.meals.models import MealType

from .models import Indent, IndentItem, IndentStatus, Issue, IssueItem


# =============================================================================
# Input Serializers
# =============================================================================

class IndentFilterSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=IndentStatus.choices, required=False)
    requested_for_date = serializers.DateField(required=False)


class IssueFilterSerializer(serializers.Serializer):
    indent = serializers.UUIDField(required=False)


class IndentLineInputSerializer(serializers.Serializer):
    item = serializers.PrimaryKeyRelatedField(queryset=Item.objects.all())
    requested_qty = serializers.DecimalField(max_digits=12, decimal_places=3, min_value=Decimal('0.001'))


class IndentInputSerializer(serializers.Serializer):
    """Body for raising or editing an indent."""

    requested_for_date = serializers.DateField()
    meal = serializers.ChoiceField(choices=MealType.choices)
    notes = serializers.CharField(required=False, allow_blank=True, default='')
    items = IndentLineInputSerializer(many=True, allow_empty=False)


class IssueLineInputSerializer(serializers.Serializer):
    item = serializers.PrimaryKeyRelatedField(queryset=Item.objects.all())
    qty = serializers.DecimalField(max_digits=12, decimal_places=3, min_value=Decimal('0.001'))
    batch = serializers.PrimaryKeyRelatedField(queryset=ItemBatch.objects.all(), required=False, allow_null=True)


class IssueInputSerializer(serializers.Serializer):
    indent = serializers.UUIDField()
    notes = serializers.CharField(required=False, allow_blank=True, default='')
    items = IssueLineInputSerializer(many=True, allow_empty=False)


# =============================================================================
# Output Serializers
# =============================================================================

class IndentItemSerializer(serializers.ModelSerializer):
    item_name = serializers.CharField(source='item.name', read_only=True)
    unit_symbol = serializers.CharField(source='item.unit.symbol', read_only=True)
    outstanding_qty = serializers.DecimalField(max_digits=12, decimal_places=3, read_only=True)

    class Meta:
        model = IndentItem
        fields = ['id', 'item', 'item_name', 'unit_symbol', 'requested_qty', 'issued_qty', 'outstanding_qty']
        read_only_fields = fields


class IndentSerializer(serializers.ModelSerializer):
    requested_by_name = serializers.CharField(source='requested_by.name', read_only=True)
    approved_by_name = serializers.CharField(source='approved_by.name', read_only=True, default=None)
    items = IndentItemSerializer(many=True, read_only=True)

    class Meta:
        model = Indent
        fields = [
            'id',
            'requested_by',
            'requested_by_name',
            'requested_for_date',
            'meal',
            'notes',
            'status',
            'approved_by_name',
            'approved_at',
            'items',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields


class IssueItemSerializer(serializers.ModelSerializer):
    item_name = serializers.CharField(source='item.name', read_only=True)
    batch_no = serializers.CharField(source='batch.batch_no', read_only=True)

    class Meta:
        model = IssueItem
        fields = ['id', 'item', 'item_name', 'batch', 'batch_no', 'qty']
        read_only_fields = fields


class IssueSerializer(serializers.ModelSerializer):
    issued_by_name = serializers.CharField(source='issued_by.name', read_only=True, default=None)
    indent_status = serializers.CharField(source='indent.status', read_only=True)
    items = IssueItemSerializer(many=True, read_only=True)

    class Meta:
        model = Issue
        fields = ['id', 'indent', 'indent_status', 'issued_by_name', 'notes', 'issued_at', 'items']
        read_only_fields = fields
