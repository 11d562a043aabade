from django.contrib import admin
from .models import Dish, Recipe, MealPlan, MealPlanDish, MealAttendance, MealRating, RatingRequest


class RecipeInline(admin.TabularInline):
    model = Recipe
    extra = 1


@admin.register(Dish)
class DishAdmin(admin.ModelAdmin):
    list_display = ['name', 'category', 'cost_per_5_students']
    list_filter = ['category']
    search_fields = ['name']
    inlines = [RecipeInline]


class MealPlanDishInline(admin.TabularInline):
    model = MealPlanDish
    extra = 0


@admin.register(MealPlan)
class MealPlanAdmin(admin.ModelAdmin):
    list_display = ['mess_facility', 'day', 'meal', 'planned_students']
    list_filter = ['mess_facility', 'day', 'meal']
    inlines = [MealPlanDishInline]


@admin.register(MealAttendance)
class MealAttendanceAdmin(admin.ModelAdmin):
    list_display = ['student', 'meal_plan', 'meal_date', 'will_attend', 'attended', 'scanner_verified']
    list_filter = ['attended', 'will_attend', 'meal_date']
    search_fields = ['student__name', 'student__register_number']

    def get_queryset(self, request):
        qs = super().get_queryset(request)
        return qs.select_related('student', 'meal_plan__mess_facility')


@admin.register(MealRating)
class MealRatingAdmin(admin.ModelAdmin):
    list_display = ['student', 'meal_plan', 'meal_date', 'rating', 'created_at']
    list_filter = ['rating', 'meal_date']
    search_fields = ['student__name', 'comment']


@admin.register(RatingRequest)
class RatingRequestAdmin(admin.ModelAdmin):
    list_display = ['student', 'meal_plan', 'meal_date', 'notification_sent_at']
