from rest_framework import serializers

from apps.meals.models import MealType

from .models import (
    MessFacility,
    Package,
    MenuItem,
    Order,
    OrderItem,
    OrderQRCode,
    OrderStatus,
)


# =============================================================================
# Input Serializers
# =============================================================================

class PackageFilterSerializer(serializers.Serializer):
    mess_facility = serializers.UUIDField(required=False)


class MenuItemFilterSerializer(serializers.Serializer):
    mess_facility = serializers.UUIDField(required=False)
    meal_type = serializers.ChoiceField(choices=MealType.choices, required=False)


class OrderFilterSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=OrderStatus.choices, required=False)
    meal_type = serializers.ChoiceField(choices=MealType.choices, required=False)
    mess_facility = serializers.UUIDField(required=False)


class OrderStatusUpdateSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=OrderStatus.choices)


class OrderLineInputSerializer(serializers.Serializer):
    menu_item = serializers.UUIDField()
    quantity = serializers.IntegerField(min_value=1)
    special_instructions = serializers.CharField(max_length=255, required=False, allow_blank=True, default='')


class OrderCreateSerializer(serializers.Serializer):
    """Body for a student placing an order; prices come from the menu."""

    mess_facility = serializers.PrimaryKeyRelatedField(queryset=MessFacility.objects.filter(is_active=True))
    meal_type = serializers.ChoiceField(choices=MealType.choices)
    items = OrderLineInputSerializer(many=True, allow_empty=False)
    special_instructions = serializers.CharField(required=False, allow_blank=True, default='')


# =============================================================================
# Facilities, packages, menu
# =============================================================================

class MessFacilitySerializer(serializers.ModelSerializer):
    packages_count = serializers.IntegerField(read_only=True, default=0)
    subscriptions_count = serializers.IntegerField(read_only=True, default=0)

    class Meta:
        model = MessFacility
        fields = [
            'id',
            'name',
            'location',
            'capacity',
            'is_active',
            'image_url',
            'packages_count',
            'subscriptions_count',
            'created_at',
            'updated_at',
        ]
        read_only_fields = ['id', 'created_at', 'updated_at']


class MessFacilityMinimalSerializer(serializers.ModelSerializer):
    class Meta:
        model = MessFacility
        fields = ['id', 'name', 'location', 'capacity', 'image_url']
        read_only_fields = fields


class PackageSerializer(serializers.ModelSerializer):
    mess_facility_name = serializers.CharField(source='mess_facility.name', read_only=True)
    subscriptions_count = serializers.IntegerField(read_only=True, default=0)
    meals_included = serializers.ListField(
        child=serializers.ChoiceField(choices=MealType.choices),
        allow_empty=False
    )

    class Meta:
        model = Package
        fields = [
            'id',
            'name',
            'description',
            'mess_facility',
            'mess_facility_name',
            'duration_days',
            'price',
            'meals_included',
            'is_active',
            'subscriptions_count',
            'created_at',
            'updated_at',
        ]
        read_only_fields = ['id', 'created_at', 'updated_at']

    def validate_meals_included(self, value):
        # Keep serving order and drop duplicates
        return [meal for meal in MealType.values if meal in value]


class MenuItemSerializer(serializers.ModelSerializer):
    mess_facility_name = serializers.CharField(source='mess_facility.name', read_only=True)

    class Meta:
        model = MenuItem
        fields = [
            'id',
            'mess_facility',
            'mess_facility_name',
            'name',
            'description',
            'price',
            'meal_type',
            'is_available',
            'image_url',
            'created_at',
            'updated_at',
        ]
        read_only_fields = ['id', 'created_at', 'updated_at']


# =============================================================================
# Orders
# =============================================================================

class OrderItemSerializer(serializers.ModelSerializer):
    menu_item_name = serializers.CharField(source='menu_item.name', read_only=True)

    class Meta:
        model = OrderItem
        fields = ['id', 'menu_item', 'menu_item_name', 'quantity', 'unit_price', 'total_price', 'special_instructions']
        read_only_fields = fields


class OrderQRCodeSerializer(serializers.ModelSerializer):
    class Meta:
        model = OrderQRCode
        fields = ['qr_code_data', 'expires_at', 'created_at']
        read_only_fields = fields


class OrderSerializer(serializers.ModelSerializer):
    mess_facility_name = serializers.CharField(source='mess_facility.name', read_only=True)
    student_name = serializers.CharField(source='student.name', read_only=True)
    register_number = serializers.CharField(source='student.register_number', read_only=True)
    user_type = serializers.CharField(source='student.user_type', read_only=True)
    items = OrderItemSerializer(many=True, read_only=True)
    qr_code = serializers.SerializerMethodField()

    class Meta:
        model = Order
        fields = [
            'id',
            'order_number',
            'student',
            'student_name',
            'register_number',
            'user_type',
            'mess_facility',
            'mess_facility_name',
            'meal_type',
            'total_amount',
            'special_instructions',
            'status',
            'payment_status',
            'razorpay_order_id',
            'served_at',
            'items',
            'qr_code',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields

    def get_qr_code(self, obj):
        """Latest QR payload for the order, if any."""
        codes = list(obj.qr_codes.all())
        if not codes:
            return None
        latest = max(codes, key=lambda qr: qr.created_at)
        return OrderQRCodeSerializer(latest).data
