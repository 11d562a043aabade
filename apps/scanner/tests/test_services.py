import pytest
from datetime import datetime
from unittest.mock import patch
from django.utils import timezone
from apps.meals.models import MealAttendance, MealType
from apps.mess.models import OrderStatus
from apps.mess.services import create_order
from apps.notifications.models import Notification
from apps.scanner.models import ScannerLog, ScanResult
from apps.scanner.services import NotMealTimeError, current_meal_type, recent_scans, scan


class TestCurrentMealType:

    @pytest.mark.parametrize('hour, minute, expected', [
        (7, 0, MealType.BREAKFAST),
        (9, 59, MealType.BREAKFAST),
        (10, 0, None),
        (12, 30, MealType.LUNCH),
        (17, 0, MealType.SNACKS),
        (20, 45, MealType.DINNER),
        (21, 0, None),
    ])
    def test_windows(self, hour, minute, expected):
        now = datetime(2026, 10, 19, hour, minute)
        assert current_meal_type(now) == expected


@pytest.mark.django_db
class TestCouponScan:

    def test_serves_subscriber(self, lunch_time, subscription, lunch_plan, scanner_user):
        result = scan(qr_code='SUB-21CS001', device_id='counter-1', user=scanner_user)

        assert result['valid'] is True
        assert result['type'] == 'MESS_COUPON'
        assert result['meal_type'] == MealType.LUNCH
        attendance = MealAttendance.objects.get(student=subscription.student)
        assert attendance.attended is True
        assert attendance.scanner_device_id == 'counter-1'
        log = ScannerLog.objects.get()
        assert log.scan_result == ScanResult.MESS_COUPON_VALID
        assert log.scanned_by == scanner_user
        assert Notification.objects.filter(title='Meal Served').count() == 1

    def test_second_scan_rejected(self, lunch_time, subscription, lunch_plan):
        scan(qr_code='SUB-21CS001')
        result = scan(qr_code='SUB-21CS001')

        assert result == {'valid': False, 'error': 'Already served for this meal'}
        assert ScannerLog.objects.count() == 1

    def test_unknown_student(self, lunch_time, db):
        result = scan(qr_code='SUB-NOBODY')

        assert result['valid'] is False
        assert result['error'] == 'Invalid QR or Order Number'

    def test_no_subscription(self, lunch_time, student, lunch_plan):
        result = scan(qr_code='SUB-21CS001')

        assert result['error'] == 'No active subscription found for student'

    def test_no_meal_plan(self, lunch_time, subscription):
        result = scan(qr_code='SUB-21CS001')

        assert result['error'] == 'No meal plan available for this meal'

    def test_outside_meal_time(self, between_meals, subscription, lunch_plan):
        with pytest.raises(NotMealTimeError):
            scan(qr_code='SUB-21CS001')


@pytest.mark.django_db
class TestOrderScan:

    def test_serves_by_qr(self, lunch_time, paid_order):
        qr = paid_order.qr_codes.first()

        result = scan(qr_code=qr.qr_code_data)

        assert result['valid'] is True
        assert result['order']['items'] == [{'name': 'Veg Thali', 'quantity': 1}]
        paid_order.refresh_from_db()
        assert paid_order.status == OrderStatus.SERVED
        assert paid_order.served_at is not None

    def test_serves_by_order_number(self, lunch_time, paid_order):
        result = scan(qr_code=paid_order.order_number)

        assert result['valid'] is True
        assert ScannerLog.objects.get().scan_result == ScanResult.ORDER_VALID

    def test_already_served(self, lunch_time, paid_order):
        scan(qr_code=paid_order.order_number)
        result = scan(qr_code=paid_order.order_number)

        assert result['error'] == 'Order already served'

    def test_unpaid_order_rejected(self, lunch_time, student, facility, menu_item):
        order, _ = create_order(
            student=student, mess_facility=facility, meal_type=MealType.LUNCH,
            lines=[{'menu_item': menu_item, 'quantity': 1}],
        )

        result = scan(qr_code=order.order_number)

        assert result['error'] == 'Order has not been paid'


@pytest.mark.django_db
class TestRecentScans:

    def test_stats_for_current_meal(self, lunch_time, subscription, lunch_plan, facility):
        scan(qr_code='SUB-21CS001')

        data = recent_scans(mess_facility=facility)

        assert len(data['scans']) == 1
        assert data['stats'] == {
            'expected_to_come': 1,
            'served': 1,
            'meal_type': MealType.LUNCH,
            'total_scans_today': 1,
        }

    def test_snacks_not_in_package(self, subscription, facility):
        snacks = timezone.localtime().replace(hour=16, minute=30)
        with patch('apps.scanner.services.local_now', return_value=snacks):
            data = recent_scans(mess_facility=facility)

        assert data['stats']['expected_to_come'] == 0
