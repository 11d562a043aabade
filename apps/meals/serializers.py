from decimal import Decimal

from rest_framework import serializers

from apps.inventory.models import Item

from .models import Dish, Recipe, MealPlan, MealPlanDish, MealType, DayOfWeek


# =============================================================================
# Input Serializers
# =============================================================================

class RecipeInputSerializer(serializers.Serializer):
    item = serializers.PrimaryKeyRelatedField(queryset=Item.objects.all())
    qty_per_5_students = serializers.DecimalField(max_digits=12, decimal_places=3, min_value=Decimal('0.001'))


class MealPlanFilterSerializer(serializers.Serializer):
    mess_facility = serializers.UUIDField(required=False)
    day = serializers.ChoiceField(choices=DayOfWeek.choices, required=False)
    meal = serializers.ChoiceField(choices=MealType.choices, required=False)


class MealPlanDishInputSerializer(serializers.Serializer):
    dish = serializers.PrimaryKeyRelatedField(queryset=Dish.objects.all())
    sequence_order = serializers.IntegerField(min_value=1, required=False)
    is_main_dish = serializers.BooleanField(required=False, default=False)


class MealPlanInputSerializer(serializers.Serializer):
    """
    Body for POST /api/meals/plans/.

    The same plan is written to every facility in ``mess_facility_ids``.
    """

    mess_facility_ids = serializers.ListField(child=serializers.UUIDField(), allow_empty=False)
    day = serializers.ChoiceField(choices=DayOfWeek.choices)
    meal = serializers.ChoiceField(choices=MealType.choices)
    dishes = MealPlanDishInputSerializer(many=True, allow_empty=False)

    def validate_dishes(self, value):
        ids = [entry['dish'].pk for entry in value]
        if len(ids) != len(set(ids)):
            raise serializers.ValidationError('A dish can appear only once in a meal plan')
        return value


# =============================================================================
# Dishes
# =============================================================================

class RecipeSerializer(serializers.ModelSerializer):
    item_name = serializers.CharField(source='item.name', read_only=True)
    unit_symbol = serializers.CharField(source='item.unit.symbol', read_only=True)

    class Meta:
        model = Recipe
        fields = ['id', 'item', 'item_name', 'unit_symbol', 'qty_per_5_students']
        read_only_fields = fields


class DishSerializer(serializers.ModelSerializer):
    recipes = RecipeSerializer(many=True, read_only=True)

    class Meta:
        model = Dish
        fields = [
            'id',
            'name',
            'category',
            'cost_per_5_students',
            'image_url',
            'recipes',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields


class DishInputSerializer(serializers.ModelSerializer):
    """Create/update body; ``recipes`` replaces the dish's recipe lines."""

    recipes = RecipeInputSerializer(many=True, required=False)

    class Meta:
        model = Dish
        fields = ['name', 'category', 'cost_per_5_students', 'image_url', 'recipes']


class DishImageUploadSerializer(serializers.Serializer):
    image = serializers.ImageField()


# =============================================================================
# Meal plans
# =============================================================================

class MealPlanDishSerializer(serializers.ModelSerializer):
    dish_name = serializers.CharField(source='dish.name', read_only=True)
    dish_category = serializers.CharField(source='dish.category', read_only=True)

    class Meta:
        model = MealPlanDish
        fields = ['id', 'dish', 'dish_name', 'dish_category', 'sequence_order', 'is_main_dish']
        read_only_fields = fields


class MealPlanSerializer(serializers.ModelSerializer):
    mess_facility_name = serializers.CharField(source='mess_facility.name', read_only=True)
    day_name = serializers.CharField(source='get_day_display', read_only=True)
    dishes = MealPlanDishSerializer(source='plan_dishes', many=True, read_only=True)

    class Meta:
        model = MealPlan
        fields = [
            'id',
            'mess_facility',
            'mess_facility_name',
            'day',
            'day_name',
            'meal',
            'planned_students',
            'dishes',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields


class RequirementLineSerializer(serializers.Serializer):
    item = serializers.UUIDField()
    item_name = serializers.CharField()
    unit_symbol = serializers.CharField()
    required_qty = serializers.DecimalField(max_digits=14, decimal_places=3)
    dishes = serializers.ListField(child=serializers.CharField())


class MealRequirementsSerializer(serializers.Serializer):
    meal_plan = serializers.UUIDField()
    planned_students = serializers.IntegerField()
    items = RequirementLineSerializer(many=True)
    estimated_cost = serializers.DecimalField(max_digits=14, decimal_places=2)
