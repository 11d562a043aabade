"""Stock alert generation service."""

import logging
from datetime import timedelta
from typing import List
from uuid import UUID

from django.conf import settings
from django.db import transaction
from django.utils import timezone

from apps.inventory.models import Alert, AlertStatus, AlertType, Item, ItemBatch

from .exceptions import AlertNotFoundError

logger = logging.getLogger(__name__)


@transaction.atomic
def generate_alerts(*, today=None) -> List[Alert]:
    """
    Raise LOW_STOCK and EXPIRY alerts that are not already open.

    LOW_STOCK: total stock on hand is at or below the item's reorder point.
    EXPIRY: a batch with stock expires within EXPIRY_ALERT_DAYS days
    (already-expired batches are ignored). At most one open alert of each
    type exists per item.

    Returns:
        Newly created alerts
    """
    today = today or timezone.localdate()
    created = []

    open_low_stock = set(
        Alert.objects
        .filter(status=AlertStatus.OPEN, type=AlertType.LOW_STOCK)
        .values_list('item_id', flat=True)
    )
    for item in Item.objects.with_stock().select_related('unit'):
        if item.id in open_low_stock or item.total_stock > item.reorder_point:
            continue
        created.append(Alert.objects.create(
            item=item,
            type=AlertType.LOW_STOCK,
            message=(
                f"{item.name} is low on stock: {item.total_stock} {item.unit.symbol} "
                f"(reorder point {item.reorder_point})"
            ),
        ))

    open_expiry = set(
        Alert.objects
        .filter(status=AlertStatus.OPEN, type=AlertType.EXPIRY)
        .values_list('item_id', flat=True)
    )
    horizon = today + timedelta(days=settings.EXPIRY_ALERT_DAYS)
    expiring = (
        ItemBatch.objects
        .filter(qty_on_hand__gt=0, exp_date__gt=today, exp_date__lte=horizon)
        .select_related('item')
        .order_by('exp_date')
    )
    for batch in expiring:
        if batch.item_id in open_expiry:
            continue
        days = (batch.exp_date - today).days
        created.append(Alert.objects.create(
            item=batch.item,
            type=AlertType.EXPIRY,
            message=f"{batch.item.name} batch {batch.batch_no} expires in {days} day(s)",
        ))
        open_expiry.add(batch.item_id)

    logger.info("Generated %d stock alerts", len(created))
    return created


@transaction.atomic
def dismiss_alert(*, alert_id: UUID) -> Alert:
    """
    Mark an alert as dismissed.

    Raises:
        AlertNotFoundError: If the alert doesn't exist
    """
    try:
        alert = Alert.objects.select_for_update().get(id=alert_id)
    except Alert.DoesNotExist:
        raise AlertNotFoundError(f"Alert with ID {alert_id} not found")

    alert.status = AlertStatus.DISMISSED
    alert.save(update_fields=['status', 'updated_at'])
    return alert
