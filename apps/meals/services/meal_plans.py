"""
Meal plan service.

A meal plan is the weekly menu slot for (facility, weekday, meal).
``planned_students`` is the head count the kitchen cooks for: the number
of ACTIVE subscriptions at the facility whose package includes the meal.
"""

import logging
from collections import OrderedDict
from decimal import Decimal, ROUND_HALF_UP

from django.db import transaction

from apps.accounts.services import record_activity
from apps.meals.models import MealPlan, MealPlanDish
from apps.mess.models import MessFacility
from apps.students.models import Subscription, SubscriptionStatus

from .exceptions import FacilityNotFoundError

logger = logging.getLogger(__name__)

RECIPE_BATCH_SIZE = Decimal('5')


def count_planned_students(*, mess_facility, meal: str) -> int:
    """
    Active subscriptions at the facility whose package covers ``meal``.

    Package.meals_included is a JSON list, so the membership test runs in
    Python to stay portable across database backends.
    """
    subscriptions = (
        Subscription.objects
        .filter(mess_facility=mess_facility, status=SubscriptionStatus.ACTIVE)
        .select_related('package')
    )
    return sum(1 for sub in subscriptions if sub.package.includes_meal(meal))


@transaction.atomic
def save_meal_plans(*, facility_ids, day: int, meal: str, dishes, user=None):
    """
    Create or replace the plan for (facility, day, meal) at each facility.

    Replacing keeps the plan row (and its attendance history) and swaps
    its dishes.

    Args:
        facility_ids: Facilities to write the plan for
        day: Weekday, 0 = Monday
        meal: Meal type
        dishes: Dicts with dish, sequence_order, is_main_dish
        user: Acting staff user

    Returns:
        List of saved MealPlan objects

    Raises:
        FacilityNotFoundError: If any facility id is unknown
    """
    facilities = {f.id: f for f in MessFacility.objects.filter(id__in=facility_ids)}
    missing = [str(fid) for fid in facility_ids if fid not in facilities]
    if missing:
        raise FacilityNotFoundError(f"Mess facility not found: {', '.join(missing)}")

    plans = []
    for facility_id in facility_ids:
        facility = facilities[facility_id]
        planned = count_planned_students(mess_facility=facility, meal=meal)

        plan, _ = MealPlan.objects.update_or_create(
            mess_facility=facility,
            day=day,
            meal=meal,
            defaults={'planned_students': planned},
        )
        plan.plan_dishes.all().delete()
        MealPlanDish.objects.bulk_create([
            MealPlanDish(
                meal_plan=plan,
                dish=entry['dish'],
                sequence_order=entry.get('sequence_order', index + 1),
                is_main_dish=entry.get('is_main_dish', False),
            )
            for index, entry in enumerate(dishes)
        ])
        plans.append(plan)

        record_activity(
            user=user,
            action='UPDATE',
            entity='MealPlan',
            entity_id=plan.id,
            details={'facility': facility.name, 'day': day, 'meal': meal, 'planned_students': planned},
        )

    logger.info("Saved %s meal plans for day %s %s", len(plans), day, meal)
    return plans


def meal_requirements(meal_plan: MealPlan) -> dict:
    """
    Ingredients and cost needed to cook a meal plan.

    Each recipe quantity is per 5 students, so an item needs
    qty_per_5_students / 5 * planned_students, summed across dishes.
    """
    students = Decimal(meal_plan.planned_students)
    requirements = OrderedDict()
    estimated_cost = Decimal('0')

    plan_dishes = (
        meal_plan.plan_dishes
        .select_related('dish')
        .prefetch_related('dish__recipes__item__unit')
    )
    for plan_dish in plan_dishes:
        dish = plan_dish.dish
        estimated_cost += dish.cost_per_5_students / RECIPE_BATCH_SIZE * students

        for recipe in dish.recipes.all():
            qty = recipe.qty_per_5_students / RECIPE_BATCH_SIZE * students
            entry = requirements.get(recipe.item_id)
            if entry is None:
                entry = requirements[recipe.item_id] = {
                    'item': recipe.item_id,
                    'item_name': recipe.item.name,
                    'unit_symbol': recipe.item.unit.symbol,
                    'required_qty': Decimal('0'),
                    'dishes': [],
                }
            entry['required_qty'] += qty
            entry['dishes'].append(dish.name)

    items = []
    for entry in requirements.values():
        entry['required_qty'] = entry['required_qty'].quantize(Decimal('0.001'), rounding=ROUND_HALF_UP)
        items.append(entry)

    return {
        'meal_plan': meal_plan.id,
        'planned_students': meal_plan.planned_students,
        'items': items,
        'estimated_cost': estimated_cost.quantize(Decimal('0.01'), rounding=ROUND_HALF_UP),
    }
