import pytest
from django.utils import timezone
from apps.meals.models import MealType
from apps.mess.models import OrderStatus
from apps.mess.services import create_order, mark_order_paid


def place_order(student, facility, menu_item, quantity=1, paid=True, served=False):
    order, _ = create_order(
        student=student, mess_facility=facility, meal_type=MealType.LUNCH,
        lines=[{'menu_item': menu_item, 'quantity': quantity}],
    )
    if paid:
        order, _ = mark_order_paid(order=order, payment_id=f'pay_{order.order_number}')
    if served:
        order.status = OrderStatus.SERVED
        order.served_at = timezone.now()
        order.save()
    return order


@pytest.fixture
def served_order(student, facility, menu_item):
    """Paid and served: 2 x Veg Thali = 180.00"""
    return place_order(student, facility, menu_item, quantity=2, served=True)
