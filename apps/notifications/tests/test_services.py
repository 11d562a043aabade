import pytest
from datetime import timedelta
from io import StringIO
from unittest.mock import patch
import requests
from django.core.management import call_command
from django.db import transaction
from django.utils import timezone
from apps.meals.models import MealAttendance, MealPlan, MealPlanDish, MealType, RatingRequest
from apps.notifications.models import Notification, NotificationType, PushToken
from apps.notifications.services import (
    NotificationNotFoundError,
    mark_read,
    notify,
    register_push_token,
    send_attendance_requests,
    send_expiry_reminders,
    send_push,
    send_rating_requests,
    unread_count,
)


@pytest.fixture
def device(student):
    return PushToken.objects.create(student=student, token='ExponentPushToken[abc]')


@pytest.fixture
def expo():
    with patch('apps.notifications.services.push.requests.post') as mock_post:
        mock_post.return_value.raise_for_status.return_value = None
        yield mock_post


@pytest.mark.django_db
class TestPush:

    def test_no_devices_skips_request(self, student, expo):
        assert send_push(student, 'Hi', 'Body') == 0
        expo.assert_not_called()

    def test_sends_to_active_devices(self, student, device, expo):
        PushToken.objects.create(student=student, token='ExponentPushToken[old]', is_active=False)

        assert send_push(student, 'Hi', 'Body', {'k': 'v'}) == 1
        messages = expo.call_args.kwargs['json']
        assert messages == [{
            'to': 'ExponentPushToken[abc]',
            'title': 'Hi',
            'body': 'Body',
            'data': {'k': 'v'},
            'sound': 'default',
        }]

    def test_failure_is_swallowed(self, student, device, expo):
        expo.side_effect = requests.Timeout('slow')

        assert send_push(student, 'Hi', 'Body') == 0

    def test_notify_stores_and_pushes(self, student, device, expo, django_capture_on_commit_callbacks):
        with django_capture_on_commit_callbacks(execute=True):
            notification = notify(student=student, title='Hello', message='World', type=NotificationType.ORDER)
            expo.assert_not_called()

        assert Notification.objects.get() == notification
        data = expo.call_args.kwargs['json'][0]['data']
        assert data == {'type': NotificationType.ORDER, 'notification_id': str(notification.id)}

    def test_rolled_back_notify_is_not_pushed(self, student, device, expo, django_capture_on_commit_callbacks):
        with django_capture_on_commit_callbacks(execute=True) as callbacks:
            with pytest.raises(RuntimeError):
                with transaction.atomic():
                    notify(student=student, title='Hello', message='World')
                    raise RuntimeError('caller failed')

        assert callbacks == []
        assert not Notification.objects.exists()
        expo.assert_not_called()

    def test_broadcast_is_not_pushed(self, student, device, expo):
        notification = notify(student=None, title='Holiday', message='Mess closed Sunday')

        assert notification.student is None
        expo.assert_not_called()


@pytest.mark.django_db
class TestInbox:

    def test_mark_read(self, student):
        notification = Notification.objects.create(student=student, title='A', message='a')
        Notification.objects.create(student=None, title='B', message='b')

        assert unread_count(student) == 2
        mark_read(notification_id=notification.id, student=student)
        assert unread_count(student) == 1

    def test_mark_read_other_student(self, student, day_scholar):
        notification = Notification.objects.create(student=day_scholar, title='A', message='a')

        with pytest.raises(NotificationNotFoundError):
            mark_read(notification_id=notification.id, student=student)

    def test_register_reactivates_token(self, student):
        PushToken.objects.create(student=student, token='tok', is_active=False)

        token = register_push_token(student=student, token='tok', platform='android')

        assert token.is_active is True
        assert token.platform == 'android'
        assert PushToken.objects.count() == 1


@pytest.mark.django_db
class TestRatingRequests:

    def test_asks_recent_diners_once(self, student, lunch_plan):
        now = timezone.now()
        MealAttendance.objects.create(
            student=student,
            meal_plan=lunch_plan,
            meal_date=timezone.localdate(),
            attended=True,
            attended_at=now - timedelta(minutes=27),
        )

        assert send_rating_requests(now) == 1
        assert send_rating_requests(now) == 0
        assert RatingRequest.objects.count() == 1
        notification = Notification.objects.get()
        assert notification.type == NotificationType.RATING
        assert 'Veg Biryani' in notification.message

    def test_outside_window(self, student, lunch_plan):
        now = timezone.now()
        MealAttendance.objects.create(
            student=student,
            meal_plan=lunch_plan,
            meal_date=timezone.localdate(),
            attended=True,
            attended_at=now - timedelta(minutes=10),
        )

        assert send_rating_requests(now) == 0


@pytest.mark.django_db
class TestAttendanceRequests:

    @pytest.fixture
    def tomorrow_plans(self, facility, dish):
        tomorrow = timezone.localdate() + timedelta(days=1)
        plans = {}
        for meal in (MealType.LUNCH, MealType.SNACKS):
            plan = MealPlan.objects.create(mess_facility=facility, day=tomorrow.weekday(), meal=meal)
            MealPlanDish.objects.create(meal_plan=plan, dish=dish, sequence_order=1, is_main_dish=True)
            plans[meal] = plan
        return plans

    def test_only_meals_in_package(self, subscription, tomorrow_plans):
        assert send_attendance_requests() == 1
        notification = Notification.objects.get()
        assert notification.meal_plan == tomorrow_plans[MealType.LUNCH]

    def test_skips_answered(self, subscription, tomorrow_plans):
        MealAttendance.objects.create(
            student=subscription.student,
            meal_plan=tomorrow_plans[MealType.LUNCH],
            meal_date=timezone.localdate() + timedelta(days=1),
            will_attend=False,
        )

        assert send_attendance_requests() == 0


@pytest.mark.django_db
class TestExpiryReminders:

    def test_within_window(self, subscription):
        subscription.end_date = timezone.localdate() + timedelta(days=2)
        subscription.save()

        assert send_expiry_reminders() == 1
        assert 'expires in 2 days' in Notification.objects.get().message

    def test_far_from_expiry(self, subscription):
        assert send_expiry_reminders() == 0


@pytest.mark.django_db
def test_run_notification_jobs_command(subscription):
    subscription.end_date = timezone.localdate() + timedelta(days=1)
    subscription.save()
    out = StringIO()

    call_command('run_notification_jobs', '--job', 'expiry-reminders', stdout=out)

    assert 'expiry-reminders: sent 1 notifications' in out.getvalue()
