"""Dish and recipe maintenance."""

from django.db import transaction

from apps.meals.models import Dish, Recipe

from .exceptions import DuplicateRecipeItemError


def _set_recipes(dish: Dish, recipes):
    item_ids = [r['item'].pk for r in recipes]
    if len(item_ids) != len(set(item_ids)):
        raise DuplicateRecipeItemError("Each item can appear only once in a recipe")

    dish.recipes.all().delete()
    Recipe.objects.bulk_create([
        Recipe(dish=dish, item=r['item'], qty_per_5_students=r['qty_per_5_students'])
        for r in recipes
    ])


@transaction.atomic
def create_dish(*, recipes=None, **fields) -> Dish:
    """Create a dish with its recipe lines."""
    dish = Dish.objects.create(**fields)
    _set_recipes(dish, recipes or [])
    return dish


@transaction.atomic
def update_dish(*, dish: Dish, recipes=None, **fields) -> Dish:
    """
    Update a dish. When ``recipes`` is given it replaces the existing
    recipe lines entirely.
    """
    for name, value in fields.items():
        setattr(dish, name, value)
    dish.save()

    if recipes is not None:
        _set_recipes(dish, recipes)
    return dish
