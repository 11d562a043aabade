"""Services for dishes, meal planning and student attendance."""

from .exceptions import (
    MealsServiceError,
    DuplicateRecipeItemError,
    FacilityNotFoundError,
    MealPlanNotFoundError,
    AttendanceClosedError,
    AlreadyRatedError,
    MealDateMismatchError,
)
from .dishes import create_dish, update_dish
from .meal_plans import count_planned_students, save_meal_plans, meal_requirements
from .attendance import next_meal_date, last_meal_date, set_intent, set_intents, rate_meal

__all__ = [
    # Exceptions
    'MealsServiceError',
    'DuplicateRecipeItemError',
    'FacilityNotFoundError',
    'MealPlanNotFoundError',
    'AttendanceClosedError',
    'AlreadyRatedError',
    'MealDateMismatchError',
    # Services
    'create_dish',
    'update_dish',
    'count_planned_students',
    'save_meal_plans',
    'meal_requirements',
    'next_meal_date',
    'last_meal_date',
    'set_intent',
    'set_intents',
    'rate_meal',
]
