"""
Subscription lifecycle.

A subscription bought online starts SUSPENDED with a PENDING transaction
and becomes ACTIVE once the payment is verified (client callback or
gateway webhook, whichever arrives first).
"""

import csv
import logging
from datetime import timedelta
from uuid import UUID

from django.db import transaction
from django.utils import timezone

from apps.notifications.models import NotificationType
from apps.notifications.services import notify
from apps.students.models import (
    Subscription,
    SubscriptionStatus,
    SubscriptionTransaction,
    TransactionStatus,
)

from .exceptions import SubscriptionNotFoundError

logger = logging.getLogger(__name__)

NOTIFY_ON_STATUS = (SubscriptionStatus.SUSPENDED, SubscriptionStatus.CANCELLED)

EXPORT_COLUMNS = [
    'register_number',
    'student_name',
    'user_type',
    'department',
    'package_name',
    'mess_facility',
    'start_date',
    'end_date',
    'status',
    'amount_paid',
    'created_at',
]


@transaction.atomic
def update_subscription_status(*, subscription_id: UUID, status: str) -> Subscription:
    """
    Change a subscription's status; suspension and cancellation notify the student.

    Raises:
        SubscriptionNotFoundError: If the subscription doesn't exist
    """
    try:
        subscription = (
            Subscription.objects
            .select_for_update()
            .select_related('student', 'package', 'mess_facility')
            .get(id=subscription_id)
        )
    except Subscription.DoesNotExist:
        raise SubscriptionNotFoundError(f"Subscription with ID {subscription_id} not found")

    subscription.status = status
    subscription.save(update_fields=['status', 'updated_at'])

    if status in NOTIFY_ON_STATUS:
        label = subscription.get_status_display().lower()
        notify(
            student=subscription.student,
            title=f'Subscription {label}',
            message=f'Your {subscription.package.name} subscription has been {label}.',
            type=NotificationType.SUBSCRIPTION,
        )

    logger.info("Subscription %s set to %s", subscription.id, status)
    return subscription


@transaction.atomic
def start_checkout(*, student, package, razorpay_order_id: str) -> Subscription:
    """Create a SUSPENDED subscription and PENDING transaction awaiting payment."""
    start = timezone.localdate()
    subscription = Subscription.objects.create(
        student=student,
        package=package,
        mess_facility=package.mess_facility,
        start_date=start,
        end_date=start + timedelta(days=package.duration_days),
        status=SubscriptionStatus.SUSPENDED,
        amount_paid=package.price,
        razorpay_order_id=razorpay_order_id,
    )
    SubscriptionTransaction.objects.create(
        subscription=subscription,
        razorpay_order_id=razorpay_order_id,
        amount=package.price,
        status=TransactionStatus.PENDING,
    )
    return subscription


@transaction.atomic
def activate_subscription(*, subscription: Subscription, payment_id: str, webhook_data=None) -> Subscription:
    """
    Mark a paid subscription ACTIVE and its transactions SUCCESS.

    Safe to call twice for the same payment (callback and webhook); the
    student is only notified on the first activation.
    """
    subscription = (
        Subscription.objects
        .select_for_update()
        .select_related('student', 'package', 'mess_facility')
        .get(pk=subscription.pk)
    )
    already_active = (
        subscription.status == SubscriptionStatus.ACTIVE
        and subscription.razorpay_payment_id == payment_id
    )

    subscription.status = SubscriptionStatus.ACTIVE
    subscription.razorpay_payment_id = payment_id
    subscription.save(update_fields=['status', 'razorpay_payment_id', 'updated_at'])

    transactions = subscription.transactions.filter(razorpay_order_id=subscription.razorpay_order_id)
    update = {'status': TransactionStatus.SUCCESS, 'razorpay_payment_id': payment_id}
    if webhook_data is not None:
        update['webhook_data'] = webhook_data
    if not transactions.update(**update):
        SubscriptionTransaction.objects.create(
            subscription=subscription,
            razorpay_order_id=subscription.razorpay_order_id,
            razorpay_payment_id=payment_id,
            amount=subscription.amount_paid,
            status=TransactionStatus.SUCCESS,
            webhook_data=webhook_data,
        )

    if not already_active:
        notify(
            student=subscription.student,
            title='Subscription Activated',
            message=(
                f'Your {subscription.package.name} subscription for '
                f'{subscription.mess_facility.name} is now active!'
            ),
            type=NotificationType.SUBSCRIPTION,
            data={'subscription_id': str(subscription.id)},
        )
        logger.info("Subscription %s activated by payment %s", subscription.id, payment_id)
    return subscription


def write_subscriptions_csv(stream, subscriptions) -> int:
    """
    Write subscriptions as CSV to a file-like object.

    Returns:
        Number of data rows written
    """
    writer = csv.writer(stream)
    writer.writerow(EXPORT_COLUMNS)
    count = 0
    for sub in subscriptions.select_related('student', 'package', 'mess_facility'):
        writer.writerow([
            sub.student.register_number,
            sub.student.name,
            sub.student.user_type,
            sub.student.department,
            sub.package.name,
            sub.mess_facility.name,
            sub.start_date.isoformat(),
            sub.end_date.isoformat(),
            sub.status,
            sub.amount_paid,
            timezone.localtime(sub.created_at).strftime('%Y-%m-%d %H:%M:%S'),
        ])
        count += 1
    return count
