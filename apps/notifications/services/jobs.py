"""
Periodic notification jobs.

Run from cron through ``manage.py run_notification_jobs`` or the admin
endpoints. Each job returns the number of notifications sent. Rating
requests are sent once per meal through RatingRequest rows. Attendance
requests go to every subscriber who has not answered yet and expiry
reminders to every expiring subscription, on each run, so schedule those
once a day.
"""

import logging
from datetime import timedelta

from django.conf import settings
from django.db.models import Exists, OuterRef
from django.utils import timezone

from apps.meals.models import MealAttendance, MealPlan, MealRating, RatingRequest
from apps.notifications.models import NotificationType
from apps.students.models import Subscription, SubscriptionStatus

from .push import notify

logger = logging.getLogger(__name__)

RATING_WINDOW_START = timedelta(minutes=30)
RATING_WINDOW_END = timedelta(minutes=25)


def send_rating_requests(now=None) -> int:
    """Ask students who ate 25-30 minutes ago to rate the meal."""
    now = now or timezone.now()

    rated = MealRating.objects.filter(
        student=OuterRef('student'),
        meal_plan=OuterRef('meal_plan'),
        meal_date=OuterRef('meal_date'),
    )
    requested = RatingRequest.objects.filter(
        student=OuterRef('student'),
        meal_plan=OuterRef('meal_plan'),
        meal_date=OuterRef('meal_date'),
    )
    attendances = (
        MealAttendance.objects
        .filter(
            attended=True,
            attended_at__gte=now - RATING_WINDOW_START,
            attended_at__lte=now - RATING_WINDOW_END,
        )
        .annotate(is_rated=Exists(rated), is_requested=Exists(requested))
        .filter(is_rated=False, is_requested=False)
        .select_related('student', 'meal_plan')
        .prefetch_related('meal_plan__plan_dishes__dish')
    )

    sent = 0
    for attendance in attendances:
        plan = attendance.meal_plan
        RatingRequest.objects.create(
            student=attendance.student,
            meal_plan=plan,
            meal_date=attendance.meal_date,
        )
        meal = plan.get_meal_display().lower()
        notify(
            student=attendance.student,
            title='Rate Your Meal',
            message=f'How was your {meal}? Please rate "{plan.dish_names()}" to help us improve.',
            type=NotificationType.RATING,
            meal_plan=plan,
            data={'meal_date': attendance.meal_date.isoformat()},
        )
        sent += 1

    logger.info("Sent %d rating request notifications", sent)
    return sent


def send_attendance_requests(today=None) -> int:
    """
    Ask active subscribers to confirm tomorrow's meals.

    One notification per (subscriber, meal plan) for plans at the
    subscriber's facility whose meal is in their package and that the
    student has not answered yet.
    """
    today = today or timezone.localdate()
    tomorrow = today + timedelta(days=1)

    subscriptions = (
        Subscription.objects
        .active_on(tomorrow)
        .select_related('student', 'package')
    )
    plans_by_facility = {}
    for plan in (
        MealPlan.objects
        .filter(day=tomorrow.weekday())
        .prefetch_related('plan_dishes__dish')
    ):
        plans_by_facility.setdefault(plan.mess_facility_id, []).append(plan)

    answered = set(
        MealAttendance.objects
        .filter(meal_date=tomorrow, will_attend__isnull=False)
        .values_list('student_id', 'meal_plan_id')
    )

    sent = 0
    notified = set()
    for subscription in subscriptions:
        student = subscription.student
        for plan in plans_by_facility.get(subscription.mess_facility_id, []):
            key = (student.id, plan.id)
            if key in answered or key in notified:
                continue
            if not subscription.package.includes_meal(plan.meal):
                continue
            notify(
                student=student,
                title="Confirm Tomorrow's Attendance",
                message=(
                    f"Will you be attending {plan.get_meal_display().lower()} tomorrow? "
                    f"Dish: {plan.dish_names()}"
                ),
                type=NotificationType.ATTENDANCE,
                meal_plan=plan,
                data={'meal_date': tomorrow.isoformat()},
            )
            notified.add(key)
            sent += 1

    logger.info("Sent %d attendance confirmation notifications", sent)
    return sent


def send_expiry_reminders(today=None) -> int:
    """Remind students whose ACTIVE subscription ends within the reminder window."""
    today = today or timezone.localdate()
    horizon = today + timedelta(days=settings.SUBSCRIPTION_EXPIRY_REMINDER_DAYS)

    subscriptions = (
        Subscription.objects
        .filter(status=SubscriptionStatus.ACTIVE, end_date__gte=today, end_date__lte=horizon)
        .select_related('student', 'package')
    )

    sent = 0
    for subscription in subscriptions:
        days_left = subscription.days_remaining(today)
        notify(
            student=subscription.student,
            title='Subscription Expiring Soon',
            message=(
                f"Your {subscription.package.name} subscription expires in {days_left} "
                f"day{'s' if days_left != 1 else ''} on {subscription.end_date:%d %b %Y}. "
                "Renew to keep your mess access."
            ),
            type=NotificationType.SUBSCRIPTION,
            data={'subscription_id': str(subscription.id)},
        )
        sent += 1

    logger.info("Sent %d subscription expiry reminders", sent)
    return sent


JOBS = {
    'rating-requests': send_rating_requests,
    'attendance-requests': send_attendance_requests,
    'expiry-reminders': send_expiry_reminders,
}
