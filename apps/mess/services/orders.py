"""
Food order service.

Order totals are always recomputed from current menu prices; any totals
sent by the client are ignored.
"""

import logging
from decimal import Decimal
from uuid import UUID

from django.db import transaction
from django.utils import timezone

from apps.mess.models import (
    MenuItem,
    Order,
    OrderItem,
    OrderPaymentStatus,
    OrderQRCode,
    OrderStatus,
)
from apps.notifications.models import NotificationType
from apps.notifications.services import notify

from .exceptions import EmptyOrderError, MenuItemUnavailableError, OrderNotFoundError

logger = logging.getLogger(__name__)


@transaction.atomic
def create_order(
    *,
    student,
    mess_facility,
    meal_type: str,
    lines: list,
    special_instructions: str = ''
):
    """
    Place a food order for a student.

    Args:
        student: Ordering student
        mess_facility: Facility serving the order
        meal_type: Meal the order is for
        lines: Dicts with menu_item (id or instance), quantity and optional
            special_instructions
        special_instructions: Order-level note

    Returns:
        Tuple of (Order, OrderQRCode)

    Raises:
        EmptyOrderError: If lines is empty
        MenuItemUnavailableError: If an item is unknown, unavailable or
            belongs to another facility
    """
    if not lines:
        raise EmptyOrderError("Order must contain at least one item")

    menu_ids = [
        line['menu_item'].pk if isinstance(line['menu_item'], MenuItem) else line['menu_item']
        for line in lines
    ]
    menu = {
        m.id: m for m in MenuItem.objects.filter(
            id__in=menu_ids,
            mess_facility=mess_facility,
            is_available=True,
        )
    }

    order = Order.objects.create(
        student=student,
        mess_facility=mess_facility,
        meal_type=meal_type,
        special_instructions=special_instructions,
    )

    total = Decimal('0.00')
    order_items = []
    for menu_id, line in zip(menu_ids, lines):
        menu_item = menu.get(menu_id)
        if menu_item is None:
            raise MenuItemUnavailableError(f"Menu item {menu_id} is not available at {mess_facility.name}")

        quantity = int(line['quantity'])
        line_total = menu_item.price * quantity
        total += line_total
        order_items.append(OrderItem(
            order=order,
            menu_item=menu_item,
            quantity=quantity,
            unit_price=menu_item.price,
            total_price=line_total,
            special_instructions=line.get('special_instructions', ''),
        ))

    OrderItem.objects.bulk_create(order_items)
    order.total_amount = total
    order.save(update_fields=['total_amount', 'updated_at'])

    qr = OrderQRCode.issue_for(order)
    logger.info("Order %s created for %s (total %s)", order.order_number, student.register_number, total)
    return order, qr


@transaction.atomic
def update_order_status(*, order_id: UUID, status: str) -> Order:
    """
    Move an order along the kitchen workflow.

    Orders are pre-cooked: a requested CONFIRMED is stored as PREPARED.
    Moving to SERVED stamps served_at.

    Raises:
        OrderNotFoundError: If the order doesn't exist
    """
    try:
        order = Order.objects.select_for_update().get(id=order_id)
    except Order.DoesNotExist:
        raise OrderNotFoundError(f"Order with ID {order_id} not found")

    if status == OrderStatus.CONFIRMED:
        status = OrderStatus.PREPARED

    order.status = status
    fields = ['status', 'updated_at']
    if status == OrderStatus.SERVED:
        order.served_at = timezone.now()
        fields.append('served_at')
    order.save(update_fields=fields)

    logger.info("Order %s moved to %s", order.order_number, status)
    return order


@transaction.atomic
def mark_order_paid(*, order: Order, payment_id: str):
    """
    Record a successful payment: PAID + CONFIRMED with a fresh collection QR.

    Repeated confirmations for the same payment (checkout callback and
    webhook) return the existing QR without notifying again.

    Returns:
        Tuple of (Order, OrderQRCode)
    """
    order = Order.objects.select_for_update().select_related('student').get(pk=order.pk)
    if order.payment_status == OrderPaymentStatus.PAID and order.razorpay_payment_id == payment_id:
        return order, order.qr_codes.order_by('-created_at').first()

    order.payment_status = OrderPaymentStatus.PAID
    order.status = OrderStatus.CONFIRMED
    order.razorpay_payment_id = payment_id
    order.save(update_fields=['payment_status', 'status', 'razorpay_payment_id', 'updated_at'])

    qr = OrderQRCode.issue_for(order)
    notify(
        student=order.student,
        title='Order Confirmed',
        message=f'Your order #{order.order_number} has been confirmed and is being prepared.',
        type=NotificationType.ORDER,
        data={'order_id': str(order.id)},
    )
    logger.info("Order %s paid with %s", order.order_number, payment_id)
    return order, qr
