"""
Online payment flows for subscriptions and food orders.

1. The app asks for a Razorpay order (create_subscription_order /
   create_food_payment_order) and opens the checkout.
2. The app posts back the payment id and signature (verify_* functions).
3. Razorpay independently calls the webhook; handle_webhook applies the
   same state change, so whichever arrives first wins and the second is a
   no-op.
"""

import json
import logging
import secrets

from apps.mess.models import Order, OrderPaymentStatus, Package
from apps.mess.services import mark_order_paid
from apps.students.models import Subscription, SubscriptionTransaction, TransactionStatus
from apps.students.services import activate_subscription, start_checkout

from .exceptions import (
    PackageNotFoundError,
    PaymentServiceError,
    PaymentTargetNotFoundError,
)
from .razorpay import RazorpayClient

logger = logging.getLogger(__name__)

PAYMENT_CAPTURED = 'payment.captured'
PAYMENT_FAILED = 'payment.failed'


def create_subscription_order(*, student, package_id) -> dict:
    """
    Start buying a package: Razorpay order plus a SUSPENDED subscription.

    Raises:
        PackageNotFoundError: Unknown or inactive package
        GatewayNotConfiguredError: No active gateway
        GatewayRequestError: Razorpay call failed
    """
    package = (
        Package.objects
        .select_related('mess_facility')
        .filter(id=package_id, is_active=True)
        .first()
    )
    if package is None:
        raise PackageNotFoundError('Package not found')

    client = RazorpayClient.active()
    razorpay_order = client.create_order(
        amount=package.price,
        receipt=f"SUB_{secrets.token_hex(8)}",
        notes={
            'package_name': package.name,
            'mess_facility': package.mess_facility.name,
            'student_id': str(student.id),
        },
    )
    subscription = start_checkout(
        student=student,
        package=package,
        razorpay_order_id=razorpay_order['id'],
    )
    logger.info("Checkout %s started for %s (%s)", razorpay_order['id'], student.register_number, package.name)

    return {
        'razorpay_order_id': razorpay_order['id'],
        'amount': razorpay_order['amount'],
        'currency': razorpay_order['currency'],
        'key_id': client.gateway.key_id,
        'subscription_id': subscription.id,
        'package_name': package.name,
        'mess_facility_name': package.mess_facility.name,
    }


def _student_order(student, order_id) -> Order:
    order = (
        Order.objects
        .select_related('mess_facility')
        .filter(id=order_id, student=student)
        .first()
    )
    if order is None:
        raise PaymentTargetNotFoundError('Order not found')
    return order


def create_food_payment_order(*, student, order_id) -> dict:
    """
    Razorpay order for paying an existing food order.

    Raises:
        PaymentTargetNotFoundError: Not the student's order
        PaymentServiceError: Order already paid
    """
    order = _student_order(student, order_id)
    if order.payment_status == OrderPaymentStatus.PAID:
        raise PaymentServiceError('Order is already paid')

    client = RazorpayClient.active()
    razorpay_order = client.create_order(
        amount=order.total_amount,
        receipt=f"ORDER_{order.order_number}",
        notes={
            'order_number': order.order_number,
            'mess_facility': order.mess_facility.name,
            'student_id': str(student.id),
        },
    )
    order.razorpay_order_id = razorpay_order['id']
    order.save(update_fields=['razorpay_order_id', 'updated_at'])

    return {
        'razorpay_order_id': razorpay_order['id'],
        'amount': razorpay_order['amount'],
        'currency': razorpay_order['currency'],
        'key_id': client.gateway.key_id,
        'order_number': order.order_number,
        'mess_facility_name': order.mess_facility.name,
    }


def verify_subscription_payment(
    *,
    student,
    subscription_id,
    razorpay_order_id: str,
    razorpay_payment_id: str,
    razorpay_signature: str
) -> Subscription:
    """
    Verify the checkout signature and activate the subscription.

    Raises:
        InvalidSignatureError: Signature mismatch
        PaymentTargetNotFoundError: Subscription not found for this student and order
    """
    RazorpayClient.active().verify_payment(
        order_id=razorpay_order_id,
        payment_id=razorpay_payment_id,
        signature=razorpay_signature,
    )

    subscription = Subscription.objects.filter(
        id=subscription_id,
        student=student,
        razorpay_order_id=razorpay_order_id,
    ).first()
    if subscription is None:
        raise PaymentTargetNotFoundError('Subscription not found')

    return activate_subscription(subscription=subscription, payment_id=razorpay_payment_id)


def verify_food_payment(
    *,
    student,
    order_id,
    razorpay_order_id: str,
    razorpay_payment_id: str,
    razorpay_signature: str
):
    """
    Verify the checkout signature and confirm the food order.

    Returns:
        Tuple of (Order, OrderQRCode)

    Raises:
        InvalidSignatureError: Signature mismatch
        PaymentTargetNotFoundError: Order not found for this student and payment
    """
    RazorpayClient.active().verify_payment(
        order_id=razorpay_order_id,
        payment_id=razorpay_payment_id,
        signature=razorpay_signature,
    )

    order = _student_order(student, order_id)
    if order.razorpay_order_id != razorpay_order_id:
        raise PaymentTargetNotFoundError('Order not found')

    return mark_order_paid(order=order, payment_id=razorpay_payment_id)


def _payment_captured(payment: dict) -> None:
    order_id = payment.get('order_id')
    subscription = Subscription.objects.filter(razorpay_order_id=order_id).first()
    if subscription is not None:
        activate_subscription(subscription=subscription, payment_id=payment.get('id', ''), webhook_data=payment)
        return

    order = Order.objects.filter(razorpay_order_id=order_id).first()
    if order is not None:
        mark_order_paid(order=order, payment_id=payment.get('id', ''))
        return

    logger.warning("Captured payment for unknown Razorpay order %s", order_id)


def _payment_failed(payment: dict) -> None:
    order_id = payment.get('order_id')
    SubscriptionTransaction.objects.filter(razorpay_order_id=order_id).update(
        status=TransactionStatus.FAILED,
        webhook_data=payment,
    )
    Order.objects.filter(razorpay_order_id=order_id).exclude(
        payment_status=OrderPaymentStatus.PAID
    ).update(payment_status=OrderPaymentStatus.FAILED)
    logger.info("Payment failed for Razorpay order %s", order_id)


WEBHOOK_HANDLERS = {
    PAYMENT_CAPTURED: _payment_captured,
    PAYMENT_FAILED: _payment_failed,
}


def handle_webhook(*, body: bytes, signature: str) -> str:
    """
    Verify and apply a Razorpay webhook.

    Returns:
        The event name (unhandled events are acknowledged and ignored)

    Raises:
        GatewayNotConfiguredError: No active gateway or webhook secret
        InvalidSignatureError: Signature mismatch
        PaymentServiceError: Body is not a valid event
    """
    RazorpayClient.active().verify_webhook(body=body, signature=signature)

    try:
        event = json.loads(body)
        name = event['event']
    except (ValueError, KeyError, TypeError):
        raise PaymentServiceError('Invalid webhook payload')

    handler = WEBHOOK_HANDLERS.get(name)
    if handler is None:
        logger.info("Ignoring Razorpay webhook event %s", name)
        return name

    try:
        payment = event['payload']['payment']['entity']
    except (KeyError, TypeError):
        raise PaymentServiceError('Invalid webhook payload')

    logger.info("Razorpay webhook %s for order %s", name, payment.get('order_id'))
    handler(payment)
    return name
