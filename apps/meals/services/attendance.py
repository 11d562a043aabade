"""
Student meal attendance: intent from the mobile app and ratings.

Meal plans repeat every week, so each attendance or rating row is keyed by
(student, meal plan, meal_date). A ``meal_date`` must fall on the plan's
weekday. When the client omits it, intents use the next occurrence of that
weekday and ratings the most recent one (today included in both cases).
"""

import logging
from datetime import date, timedelta

from django.db import IntegrityError, transaction
from django.utils import timezone

from apps.meals.models import MealAttendance, MealPlan, MealRating
from apps.systemconfig.models import MealAttendanceSettings

from .exceptions import (
    AlreadyRatedError,
    AttendanceClosedError,
    MealDateMismatchError,
    MealPlanNotFoundError,
)

logger = logging.getLogger(__name__)


def next_meal_date(plan: MealPlan, today=None) -> date:
    today = today or timezone.localdate()
    return today + timedelta(days=(plan.day - today.weekday()) % 7)


def last_meal_date(plan: MealPlan, today=None) -> date:
    today = today or timezone.localdate()
    return today - timedelta(days=(today.weekday() - plan.day) % 7)


def _get_plan(plan_id) -> MealPlan:
    try:
        return MealPlan.objects.get(id=plan_id)
    except MealPlan.DoesNotExist:
        raise MealPlanNotFoundError(f"Meal plan with ID {plan_id} not found")


def _check_meal_date(plan: MealPlan, meal_date: date) -> date:
    if meal_date.weekday() != plan.day:
        raise MealDateMismatchError(
            f"{meal_date.isoformat()} is a {meal_date.strftime('%A')}, "
            f"but this meal is served on {plan.get_day_display()}"
        )
    return meal_date


def set_intent(*, student, meal_plan_id, will_attend: bool, meal_date=None) -> MealAttendance:
    """
    Record whether a student will attend one meal.

    Raises:
        MealPlanNotFoundError: If the plan doesn't exist
        MealDateMismatchError: If meal_date is not on the plan's weekday
    """
    plan = _get_plan(meal_plan_id)
    meal_date = _check_meal_date(plan, meal_date) if meal_date else next_meal_date(plan)
    attendance, _ = MealAttendance.objects.update_or_create(
        student=student,
        meal_plan=plan,
        meal_date=meal_date,
        defaults={'will_attend': will_attend, 'marked_at': timezone.now()},
    )
    return attendance


@transaction.atomic
def set_intents(*, student, entries, now=None) -> int:
    """
    Bulk-record attendance intent, honouring the configured cut-off.

    Args:
        student: Student marking attendance
        entries: Dicts with meal_plan, will_attend and optional meal_date
        now: Override for the current local time

    Raises:
        AttendanceClosedError: After the daily cut-off time
        MealPlanNotFoundError: If any plan doesn't exist
        MealDateMismatchError: If any meal_date is not on its plan's weekday
    """
    attendance_settings = MealAttendanceSettings.load()
    now = now or timezone.localtime()
    if now.time().replace(second=0, microsecond=0) > attendance_settings.cutoff_time:
        raise AttendanceClosedError(
            'Meal attendance marking is closed for today. Please try again tomorrow.'
        )

    for entry in entries:
        plan = _get_plan(entry['meal_plan'])
        meal_date = entry.get('meal_date')
        meal_date = _check_meal_date(plan, meal_date) if meal_date else next_meal_date(plan, now.date())
        MealAttendance.objects.update_or_create(
            student=student,
            meal_plan=plan,
            meal_date=meal_date,
            defaults={
                'will_attend': entry['will_attend'],
                'marked_at': timezone.now(),
                'is_mandatory_marked': attendance_settings.is_mandatory,
            },
        )

    logger.info("%s marked attendance for %d meals", student.register_number, len(entries))
    return len(entries)


def rate_meal(*, student, meal_plan_id, rating: int, comment: str = '', meal_date=None) -> MealRating:
    """
    Rate a meal once per (plan, date).

    Raises:
        MealPlanNotFoundError: If the plan doesn't exist
        MealDateMismatchError: If meal_date is not on the plan's weekday
        AlreadyRatedError: If the student already rated this meal
    """
    plan = _get_plan(meal_plan_id)
    meal_date = _check_meal_date(plan, meal_date) if meal_date else last_meal_date(plan)
    try:
        with transaction.atomic():
            return MealRating.objects.create(
                student=student,
                meal_plan=plan,
                meal_date=meal_date,
                rating=rating,
                comment=comment,
            )
    except IntegrityError:
        raise AlreadyRatedError('You have already rated this meal')
