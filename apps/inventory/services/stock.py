"""
Stock movement service.

Every change to a batch quantity goes through ``receive_stock`` or
``issue_stock`` so that the stock ledger always sums to the quantity on
hand. Callers are expected to run inside their own transaction (GRN or
issue posting); each function is also atomic on its own.
"""

import logging
from decimal import Decimal
from typing import List, Optional, Tuple

from django.db import transaction
from django.db.models import F
from django.utils import timezone

from apps.inventory.models import (
    Item,
    ItemBatch,
    StockLedger,
    LedgerTxnType,
    LedgerRefType,
)

from .exceptions import (
    InvalidQuantityError,
    InsufficientStockError,
    BatchMismatchError,
)

logger = logging.getLogger(__name__)


def fifo_batches(item: Item):
    """Batches with stock, earliest expiry first, undated batches last."""
    return (
        ItemBatch.objects
        .filter(item=item, qty_on_hand__gt=0)
        .order_by(F('exp_date').asc(nulls_last=True), 'created_at')
    )


@transaction.atomic
def receive_stock(
    *,
    item: Item,
    batch_no: str,
    qty: Decimal,
    unit_cost: Decimal,
    ref_id,
    ref_type: str = LedgerRefType.GRN,
    mfg_date=None,
    exp_date=None,
    user=None,
) -> ItemBatch:
    """
    Add quantity to the item's batch, creating the batch on first receipt.

    A batch is identified by (item, batch_no). Receiving into an existing
    batch adds to its quantity and keeps its original dates and cost.

    Args:
        item: Item being received
        batch_no: Supplier batch/lot number
        qty: Quantity received (must be positive)
        unit_cost: Cost per unit for this receipt
        ref_id: Id of the document causing the receipt (GRN id)
        ref_type: Ledger reference type
        mfg_date: Manufacturing date for a new batch
        exp_date: Expiry date for a new batch
        user: Acting user

    Returns:
        The updated ItemBatch

    Raises:
        InvalidQuantityError: If qty is not positive
    """
    if qty is None or qty <= 0:
        raise InvalidQuantityError("Received quantity must be greater than zero")

    batch, created = (
        ItemBatch.objects
        .select_for_update()
        .get_or_create(
            item=item,
            batch_no=batch_no,
            defaults={
                'qty_on_hand': Decimal('0'),
                'unit_cost': unit_cost,
                'mfg_date': mfg_date,
                'exp_date': exp_date,
            }
        )
    )

    batch.qty_on_hand += qty
    batch.save(update_fields=['qty_on_hand', 'updated_at'])

    StockLedger.objects.create(
        item=item,
        batch=batch,
        txn_type=LedgerTxnType.RECEIPT,
        qty=qty,
        unit_cost=unit_cost,
        ref_type=ref_type,
        ref_id=str(ref_id),
        created_by=user,
    )

    logger.info(
        "Received %s of %s into batch %s (%s)",
        qty, item.sku, batch_no, 'new' if created else 'existing'
    )
    return batch


@transaction.atomic
def issue_stock(
    *,
    batch: ItemBatch,
    qty: Decimal,
    ref_id,
    ref_type: str = LedgerRefType.ISSUE,
    item: Optional[Item] = None,
    user=None,
) -> ItemBatch:
    """
    Take quantity out of a single batch and record it in the ledger.

    Raises:
        InvalidQuantityError: If qty is not positive
        BatchMismatchError: If the batch belongs to a different item
        InsufficientStockError: If the batch holds less than qty
    """
    if qty is None or qty <= 0:
        raise InvalidQuantityError("Issued quantity must be greater than zero")

    locked = ItemBatch.objects.select_for_update().select_related('item').get(pk=batch.pk)

    if item is not None and locked.item_id != item.pk:
        raise BatchMismatchError(
            f"Batch {locked.batch_no} does not belong to item {item.name}"
        )

    if qty > locked.qty_on_hand:
        raise InsufficientStockError(
            f"Insufficient stock in batch {locked.batch_no}: "
            f"available {locked.qty_on_hand}, requested {qty}"
        )

    locked.qty_on_hand -= qty
    locked.save(update_fields=['qty_on_hand', 'updated_at'])

    StockLedger.objects.create(
        item=locked.item,
        batch=locked,
        txn_type=LedgerTxnType.ISSUE,
        qty=-qty,
        unit_cost=locked.unit_cost,
        ref_type=ref_type,
        ref_id=str(ref_id),
        created_by=user,
    )
    return locked


def allocate_fifo(*, item: Item, qty: Decimal, on_date=None) -> List[Tuple[ItemBatch, Decimal]]:
    """
    Split a quantity across an item's batches in FIFO order.

    Expired batches are skipped; they stay on hand until written off.
    Must be called inside a transaction: the batches are locked until commit.

    Returns:
        List of (batch, qty) pairs summing to qty

    Raises:
        InvalidQuantityError: If qty is not positive
        InsufficientStockError: If usable stock is below qty
    """
    if qty is None or qty <= 0:
        raise InvalidQuantityError("Quantity must be greater than zero")

    on_date = on_date or timezone.localdate()
    batches = (
        fifo_batches(item)
        .exclude(exp_date__lt=on_date)
        .select_for_update()
    )

    allocations = []
    remaining = qty
    for batch in batches:
        take = min(remaining, batch.qty_on_hand)
        allocations.append((batch, take))
        remaining -= take
        if remaining <= 0:
            break

    if remaining > 0:
        available = qty - remaining
        raise InsufficientStockError(
            f"Insufficient stock for {item.name}: available {available}, requested {qty}"
        )

    return allocations
