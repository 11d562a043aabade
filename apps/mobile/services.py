"""
Read models for the student mobile app.

Meal listings are scoped to the student's active subscription: only the
subscription's facility and the meals its package includes are shown.
"""

from datetime import timedelta

from django.utils import timezone

from apps.meals.models import MEAL_ORDER, DayOfWeek, MealAttendance, MealPlan, MealRating
from apps.systemconfig.services import get_meal_times, meal_time_range


def _included_plans(subscription, days):
    plans = (
        MealPlan.objects
        .filter(mess_facility=subscription.mess_facility, day__in=days)
        .prefetch_related('plan_dishes__dish')
    )
    included = [plan for plan in plans if subscription.package.includes_meal(plan.meal)]
    return sorted(included, key=lambda plan: (plan.day, MEAL_ORDER.index(plan.meal)))


def weekly_plan(student, today=None):
    """
    The current week (Monday first) of included meals with attendance state.

    ``will_attend`` defaults to True when the student hasn't answered.
    """
    today = today or timezone.localdate()
    subscription = student.get_active_subscription(today)
    if subscription is None:
        return []

    monday = today - timedelta(days=today.weekday())
    week = [monday + timedelta(days=offset) for offset in range(7)]
    plans = _included_plans(subscription, range(7))
    meal_times = get_meal_times()

    attendances = {
        (a.meal_plan_id, a.meal_date): a
        for a in MealAttendance.objects.filter(
            student=student,
            meal_plan__in=plans,
            meal_date__range=(week[0], week[-1]),
        )
    }

    days = []
    for day, meal_date in enumerate(week):
        meals = []
        for plan in (p for p in plans if p.day == day):
            attendance = attendances.get((plan.id, meal_date))
            will_attend = attendance.will_attend if attendance else None
            meals.append({
                'id': plan.id,
                'meal_type': plan.meal,
                'dish_name': plan.dish_names(),
                'time': meal_time_range(plan.meal, meal_times),
                'meal_date': meal_date,
                'attended': bool(attendance and attendance.attended),
                'will_attend': True if will_attend is None else will_attend,
            })
        days.append({
            'day': day,
            'day_name': DayOfWeek(day).label,
            'date': meal_date,
            'meals': meals,
        })
    return days


def today_meals(student, today=None):
    """Today's included meals with attended / rated flags."""
    today = today or timezone.localdate()
    subscription = student.get_active_subscription(today)
    if subscription is None:
        return []

    plans = _included_plans(subscription, [today.weekday()])
    meal_times = get_meal_times()
    attended = set(
        MealAttendance.objects
        .filter(student=student, meal_date=today, attended=True)
        .values_list('meal_plan_id', flat=True)
    )
    ratings = dict(
        MealRating.objects
        .filter(student=student, meal_date=today)
        .values_list('meal_plan_id', 'rating')
    )

    return [
        {
            'id': plan.id,
            'meal_type': plan.meal,
            'dish_name': plan.dish_names(),
            'time': meal_time_range(plan.meal, meal_times),
            'meal_date': today,
            'attended': plan.id in attended,
            'rated': plan.id in ratings,
            'rating': ratings.get(plan.id),
        }
        for plan in plans
    ]
