"""
Counter scanning for mess coupons and food orders.

Two kinds of code are presented at the counter:

* ``SUB-<register number>``: the student's mess coupon. Valid when the
  student has an ACTIVE subscription covering today and the facility has a
  meal plan for the current meal.
* An order QR (``ORDER_<order id>_<millis>``) or an order number: marks a
  paid order SERVED.

Meal windows for scanning are fixed local hours, separate from the display
times configured in system config.
"""

import logging
from datetime import time

from django.db import transaction
from django.db.models import Q
from django.utils import timezone

from apps.meals.models import MealAttendance, MealPlan, MealType
from apps.mess.models import Order, OrderPaymentStatus, OrderQRCode, OrderStatus
from apps.notifications.models import NotificationType
from apps.notifications.services import notify
from apps.students.models import Student, Subscription

from .models import ScannerLog, ScanResult

logger = logging.getLogger(__name__)

COUPON_PREFIX = 'SUB-'
ORDER_PREFIX_LENGTH = 6

SCAN_WINDOWS = [
    (MealType.BREAKFAST, time(7), time(10)),
    (MealType.LUNCH, time(12), time(15)),
    (MealType.SNACKS, time(16), time(18)),
    (MealType.DINNER, time(19), time(21)),
]

INVALID_CODE = {'valid': False, 'error': 'Invalid QR or Order Number'}


class ScannerServiceError(Exception):
    """Base exception for scanner services."""
    pass


class NotMealTimeError(ScannerServiceError):
    """Raised when scanning outside every meal window."""
    pass


def local_now():
    return timezone.localtime()


def current_meal_type(now=None):
    """Meal being served at ``now`` (local time), or None between meals."""
    now = now or local_now()
    for meal, start, end in SCAN_WINDOWS:
        if start <= now.time() < end:
            return meal
    return None


def _rejected(error):
    return {'valid': False, 'error': error}


def _scan_coupon(*, register_number, meal_type, now, device_id, user):
    student = Student.objects.filter(register_number=register_number).first()
    if student is None:
        return INVALID_CODE

    today = now.date()
    subscriptions = Subscription.objects.active_on(today).filter(student=student)
    if student.mess_facility_id:
        subscriptions = subscriptions.filter(mess_facility_id=student.mess_facility_id)
    subscription = subscriptions.select_related('package', 'mess_facility').order_by('-start_date').first()
    if subscription is None:
        return _rejected('No active subscription found for student')

    plan = MealPlan.objects.filter(
        mess_facility=subscription.mess_facility,
        day=today.weekday(),
        meal=meal_type,
    ).first()
    if plan is None:
        return _rejected('No meal plan available for this meal')

    attendance, _ = MealAttendance.objects.select_for_update().get_or_create(
        student=student,
        meal_plan=plan,
        meal_date=today,
    )
    if attendance.attended:
        return _rejected('Already served for this meal')

    attendance.attended = True
    attendance.attended_at = timezone.now()
    attendance.scanner_verified = True
    attendance.scanner_device_id = device_id
    attendance.save()

    ScannerLog.objects.create(
        device_id=device_id,
        student=student,
        mess_facility=subscription.mess_facility,
        qr_code_scanned=register_number,
        scan_result=ScanResult.MESS_COUPON_VALID,
        meal_type=meal_type,
        student_name=student.name,
        student_photo_url=student.photo_url,
        scanned_by=user,
    )
    notify(
        student=student,
        title='Meal Served',
        message=f'Your {MealType(meal_type).label.lower()} has been served.',
        type=NotificationType.GENERAL,
        meal_plan=plan,
    )
    logger.info("Coupon %s served %s at %s", register_number, meal_type, subscription.mess_facility)

    return {
        'valid': True,
        'type': 'MESS_COUPON',
        'message': 'Subscription valid, meal served',
        'student': {
            'name': student.name,
            'register_number': student.register_number,
            'photo_url': student.photo_url,
        },
        'meal_type': meal_type,
    }


def _find_order(code):
    qr = OrderQRCode.objects.filter(qr_code_data=code).select_related('order').first()
    if qr is not None:
        return qr.order
    candidates = {code[ORDER_PREFIX_LENGTH:], code}
    return Order.objects.filter(order_number__in=candidates).first()


def _scan_order(*, code, device_id, user):
    order = _find_order(code)
    if order is None:
        return INVALID_CODE

    order = (
        Order.objects
        .select_for_update()
        .select_related('student', 'mess_facility')
        .get(pk=order.pk)
    )
    if order.status == OrderStatus.SERVED:
        return _rejected('Order already served')
    if order.payment_status != OrderPaymentStatus.PAID:
        return _rejected('Order has not been paid')

    order.status = OrderStatus.SERVED
    order.served_at = timezone.now()
    order.save(update_fields=['status', 'served_at', 'updated_at'])

    student = order.student
    ScannerLog.objects.create(
        device_id=device_id,
        student=student,
        mess_facility=order.mess_facility,
        qr_code_scanned=order.order_number,
        scan_result=ScanResult.ORDER_VALID,
        meal_type=order.meal_type,
        student_name=student.name,
        student_photo_url=student.photo_url,
        scanned_by=user,
    )
    notify(
        student=student,
        title='Order Served',
        message=f'Your order {order.order_number} has been served.',
        type=NotificationType.ORDER,
    )
    logger.info("Order %s served", order.order_number)

    items = order.items.select_related('menu_item')
    return {
        'valid': True,
        'type': 'ORDER',
        'message': 'Order validated and marked served',
        'order': {
            'order_number': order.order_number,
            'student_name': student.name,
            'register_number': student.register_number,
            'photo_url': student.photo_url,
            'total_amount': order.total_amount,
            'meal_type': order.meal_type,
            'items': [{'name': i.menu_item.name, 'quantity': i.quantity} for i in items],
        },
    }


@transaction.atomic
def scan(*, qr_code: str, device_id: str = '', user=None) -> dict:
    """
    Validate a code presented at the counter and record the serving.

    Returns:
        Result dict with ``valid`` and either the served details or ``error``

    Raises:
        NotMealTimeError: Outside every meal window
    """
    now = local_now()
    meal_type = current_meal_type(now)
    if meal_type is None:
        raise NotMealTimeError('Not meal time now')

    code = qr_code.strip()
    if code.startswith(COUPON_PREFIX):
        return _scan_coupon(
            register_number=code[len(COUPON_PREFIX):],
            meal_type=meal_type,
            now=now,
            device_id=device_id,
            user=user,
        )
    return _scan_order(code=code, device_id=device_id, user=user)


def recent_scans(*, limit: int = 20, mess_facility=None):
    """Today's latest scans with serving stats for the current meal."""
    now = local_now()
    today = now.date()
    meal_type = current_meal_type(now)

    todays = ScannerLog.objects.filter(scanned_at__date=today)
    if mess_facility is not None:
        todays = todays.filter(Q(mess_facility=mess_facility) | Q(mess_facility__isnull=True))

    subscriptions = Subscription.objects.active_on(today).select_related('package')
    served = MealAttendance.objects.filter(attended=True, meal_date=today, meal_plan__meal=meal_type)
    if mess_facility is not None:
        subscriptions = subscriptions.filter(mess_facility=mess_facility)
        served = served.filter(meal_plan__mess_facility=mess_facility)

    expected = sum(
        1 for sub in subscriptions
        if meal_type is None or sub.package.includes_meal(meal_type)
    )

    return {
        'scans': todays.select_related('student').order_by('-scanned_at')[:limit],
        'stats': {
            'expected_to_come': expected,
            'served': served.count() if meal_type else 0,
            'meal_type': meal_type,
            'total_scans_today': todays.count(),
        },
    }
