import pytest
from datetime import time, timedelta
from decimal import Decimal
from unittest.mock import patch
from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from apps.meals.models import MealAttendance, MealRating
from apps.notifications.models import Notification, PushToken
from apps.students.models import StudentOTP
from apps.systemconfig.models import MealAttendanceSettings


@pytest.mark.django_db
class TestOTPLogin:
    """Tests for /api/mobile/auth/"""

    def test_send_otp(self, api_client, student, settings):
        settings.SMS_API_URL = 'https://sms.example.com/send'
        url = reverse('mobile:send-otp')
        with patch('apps.students.services.sms.requests.get') as mock_get:
            mock_get.return_value.text = 'OK'
            response = api_client.post(url, {'identifier': '21CS001'}, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert StudentOTP.objects.filter(student=student).exists()

    def test_send_otp_unknown_student(self, api_client, db):
        url = reverse('mobile:send-otp')
        response = api_client.post(url, {'identifier': 'NOPE'}, format='json')

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_send_otp_gateway_down(self, api_client, student, settings):
        settings.SMS_API_URL = ''
        url = reverse('mobile:send-otp')
        response = api_client.post(url, {'identifier': '21CS001'}, format='json')

        assert response.status_code == status.HTTP_502_BAD_GATEWAY

    def test_verify_otp_returns_token(self, api_client, student):
        otp = StudentOTP.issue(student)
        url = reverse('mobile:verify-otp')
        response = api_client.post(url, {'register_number': '21CS001', 'otp': otp.code}, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['user']['register_number'] == '21CS001'

        api_client.credentials(HTTP_AUTHORIZATION=f"Bearer {response.data['token']}")
        profile = api_client.get(reverse('mobile:profile'))
        assert profile.status_code == status.HTTP_200_OK

    def test_verify_wrong_otp(self, api_client, student):
        StudentOTP.issue(student)
        url = reverse('mobile:verify-otp')
        response = api_client.post(url, {'register_number': '21CS001', 'otp': '000000'}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['error'] == 'Invalid OTP'


@pytest.mark.django_db
class TestProfile:
    """Tests for /api/mobile/profile/"""

    def test_get_profile(self, student_api_client, student):
        response = student_api_client.get(reverse('mobile:profile'))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['name'] == 'Asha Kumar'
        assert response.data['mess_facility_name'] == 'North Mess'
        assert response.data['attendance_count'] == 0

    def test_update_contact_fields(self, student_api_client, student):
        response = student_api_client.put(reverse('mobile:profile'), {'room_number': 'C-303'}, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['room_number'] == 'C-303'

    def test_staff_token_rejected(self, admin_client):
        response = admin_client.get(reverse('mobile:profile'))

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_unauthenticated(self, api_client):
        response = api_client.get(reverse('mobile:profile'))

        assert response.status_code == status.HTTP_401_UNAUTHORIZED


@pytest.mark.django_db
class TestMeals:
    """Tests for /api/mobile/meals/"""

    def test_weekly_menu(self, student_api_client, subscription, lunch_plan):
        response = student_api_client.get(reverse('mobile:meals-weekly'))

        assert response.status_code == status.HTTP_200_OK
        assert len(response.data) == 7
        assert response.data[0]['day_name'] == 'Monday'
        today = response.data[timezone.localdate().weekday()]
        assert today['meals'][0]['dish_name'] == 'Veg Biryani'
        assert today['meals'][0]['will_attend'] is True

    def test_weekly_menu_without_subscription(self, student_api_client, lunch_plan):
        response = student_api_client.get(reverse('mobile:meals-weekly'))

        assert response.data == []

    def test_todays_meals(self, student_api_client, subscription, lunch_plan):
        response = student_api_client.get(reverse('mobile:meals-today'))

        assert response.status_code == status.HTTP_200_OK
        assert len(response.data) == 1
        assert response.data[0]['time'] == '12:00 - 14:00'
        assert response.data[0]['rated'] is False

    def test_single_attendance_intent(self, student_api_client, student, lunch_plan):
        url = reverse('mobile:meals-attendance')
        response = student_api_client.post(url, {
            'meal_plan': str(lunch_plan.id),
            'will_attend': False,
        }, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert MealAttendance.objects.get(student=student).will_attend is False

    def test_bulk_attendance(self, student_api_client, student, lunch_plan):
        MealAttendanceSettings.objects.create(cutoff_time=time(23, 59))
        next_week = timezone.localdate() + timedelta(days=7)

        url = reverse('mobile:meals-set-attendance')
        response = student_api_client.post(url, {
            'attendance': [
                {'meal_plan': str(lunch_plan.id), 'will_attend': True, 'meal_date': next_week.isoformat()},
            ],
        }, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert MealAttendance.objects.get(student=student).meal_date == next_week

    def test_rate_once(self, student_api_client, student, lunch_plan):
        url = reverse('mobile:meals-rate')
        body = {'meal_plan': str(lunch_plan.id), 'rating': 4, 'comment': 'Good'}

        first = student_api_client.post(url, body, format='json')
        second = student_api_client.post(url, body, format='json')

        assert first.status_code == status.HTTP_201_CREATED
        assert second.status_code == status.HTTP_400_BAD_REQUEST
        assert MealRating.objects.filter(student=student).count() == 1

    def test_rating_out_of_range(self, student_api_client, lunch_plan):
        url = reverse('mobile:meals-rate')
        response = student_api_client.post(url, {'meal_plan': str(lunch_plan.id), 'rating': 6}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_attendance_on_wrong_weekday(self, student_api_client, student, lunch_plan):
        tomorrow = timezone.localdate() + timedelta(days=1)

        url = reverse('mobile:meals-attendance')
        response = student_api_client.post(url, {
            'meal_plan': str(lunch_plan.id),
            'will_attend': True,
            'meal_date': tomorrow.isoformat(),
        }, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert not MealAttendance.objects.filter(student=student).exists()

    def test_bulk_attendance_on_wrong_weekday(self, student_api_client, student, lunch_plan):
        MealAttendanceSettings.objects.create(cutoff_time=time(23, 59))
        tomorrow = timezone.localdate() + timedelta(days=1)

        url = reverse('mobile:meals-set-attendance')
        response = student_api_client.post(url, {
            'attendance': [
                {'meal_plan': str(lunch_plan.id), 'will_attend': True},
                {'meal_plan': str(lunch_plan.id), 'will_attend': True, 'meal_date': tomorrow.isoformat()},
            ],
        }, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert not MealAttendance.objects.filter(student=student).exists()

    def test_rate_on_wrong_weekday(self, student_api_client, student, lunch_plan):
        yesterday = timezone.localdate() - timedelta(days=1)

        url = reverse('mobile:meals-rate')
        response = student_api_client.post(url, {
            'meal_plan': str(lunch_plan.id),
            'rating': 3,
            'meal_date': yesterday.isoformat(),
        }, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert not MealRating.objects.filter(student=student).exists()

    def test_meal_times_defaults(self, student_api_client):
        response = student_api_client.get(reverse('mobile:meal-times'))

        assert response.data['breakfast_start'] == '07:30'


@pytest.mark.django_db
class TestOrdering:
    """Tests for /api/mobile/orders/"""

    def test_menu_for_facility(self, student_api_client, facility, menu_item):
        url = reverse('mobile:menu-items')
        response = student_api_client.get(url, {'facility': str(facility.id), 'meal_type': 'LUNCH'})

        assert response.status_code == status.HTTP_200_OK
        assert [item['name'] for item in response.data] == ['Veg Thali']

    def test_menu_requires_facility(self, student_api_client):
        response = student_api_client.get(reverse('mobile:menu-items'))

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_place_order(self, student_api_client, facility, menu_item):
        url = reverse('mobile:orders')
        response = student_api_client.post(url, {
            'mess_facility': str(facility.id),
            'meal_type': 'LUNCH',
            'items': [{'menu_item': str(menu_item.id), 'quantity': 2}],
        }, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert Decimal(str(response.data['order']['total_amount'])) == Decimal('180.00')
        assert response.data['qr_code']

    def test_order_history_is_own_only(self, student_api_client, day_scholar_client, facility, menu_item):
        day_scholar_client.post(reverse('mobile:orders'), {
            'mess_facility': str(facility.id),
            'meal_type': 'LUNCH',
            'items': [{'menu_item': str(menu_item.id), 'quantity': 1}],
        }, format='json')

        response = student_api_client.get(reverse('mobile:orders'))

        assert response.data == []

    def test_order_qr_image(self, student_api_client, facility, menu_item):
        created = student_api_client.post(reverse('mobile:orders'), {
            'mess_facility': str(facility.id),
            'meal_type': 'LUNCH',
            'items': [{'menu_item': str(menu_item.id), 'quantity': 1}],
        }, format='json')

        url = reverse('mobile:order-qr-image', args=[created.data['order']['id']])
        response = student_api_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert response['Content-Type'] == 'image/png'
        assert response.content.startswith(b'\x89PNG')


@pytest.mark.django_db
class TestCouponAndSubscriptions:

    def test_qr_code_active(self, student_api_client, subscription):
        response = student_api_client.get(reverse('mobile:qr-code'))

        assert response.data['status'] == 'active'
        assert response.data['coupon_code'] == 'SUB-21CS001'
        assert response.data['subscription']['package_name'] == 'Monthly Veg'

    def test_qr_code_inactive(self, student_api_client):
        response = student_api_client.get(reverse('mobile:qr-code'))

        assert response.data['status'] == 'inactive'

    def test_packages_for_hosteler(self, student_api_client, package):
        response = student_api_client.get(reverse('mobile:packages'))

        assert [p['name'] for p in response.data] == ['Monthly Veg']

    def test_packages_hidden_from_day_scholar(self, day_scholar_client, package):
        response = day_scholar_client.get(reverse('mobile:packages'))

        assert response.data['packages'] == []

    def test_current_subscription(self, student_api_client, subscription):
        response = student_api_client.get(reverse('mobile:subscription'))

        assert response.data['days_remaining'] == 25

    def test_subscription_history(self, student_api_client, subscription):
        response = student_api_client.get(reverse('mobile:subscription-history'))

        assert len(response.data) == 1


@pytest.mark.django_db
class TestNotificationInbox:

    def test_inbox_includes_broadcasts(self, student_api_client, student, day_scholar):
        Notification.objects.create(student=student, title='Mine', message='x')
        Notification.objects.create(student=None, title='Everyone', message='x')
        Notification.objects.create(student=day_scholar, title='Theirs', message='x')

        response = student_api_client.get(reverse('mobile:notifications'))

        assert {n['title'] for n in response.data} == {'Mine', 'Everyone'}

    def test_unread_count_and_mark_read(self, student_api_client, student):
        notification = Notification.objects.create(student=student, title='Mine', message='x')

        assert student_api_client.get(reverse('mobile:notifications-unread-count')).data['count'] == 1

        url = reverse('mobile:notification-read', args=[notification.id])
        response = student_api_client.put(url)

        assert response.status_code == status.HTTP_200_OK
        assert student_api_client.get(reverse('mobile:notifications-unread-count')).data['count'] == 0

    def test_cannot_read_other_students_notification(self, student_api_client, day_scholar):
        notification = Notification.objects.create(student=day_scholar, title='Theirs', message='x')

        url = reverse('mobile:notification-read', args=[notification.id])
        response = student_api_client.put(url)

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_register_push_token(self, student_api_client, student):
        url = reverse('mobile:register-push-token')
        student_api_client.post(url, {'token': 'ExponentPushToken[abc]'}, format='json')
        response = student_api_client.post(url, {'token': 'ExponentPushToken[abc]'}, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert PushToken.objects.filter(student=student).count() == 1
