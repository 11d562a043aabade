"""
Purchase order service.

Creates and edits purchase orders with server-side totals:

    subtotal = sum(ordered_qty * unit_cost)
    tax      = subtotal * GST_RATE
    total    = subtotal + tax

A purchase order can only be edited or deleted while nothing has been
received against it.
"""

import logging
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Optional
from uuid import UUID

from django.conf import settings
from django.db import transaction, IntegrityError
from django.db.models import F

from apps.accounts.services import record_activity
from apps.inventory.models import Item
from apps.procurement.models import PurchaseOrder, PurchaseOrderItem, POStatus, Vendor

from .exceptions import (
    PurchaseOrderNotFoundError,
    EmptyOrderError,
    DuplicateLineError,
    PurchaseOrderLockedError,
)
from .numbering import next_sequence, format_number

logger = logging.getLogger(__name__)

CENT = Decimal('0.01')


def calculate_totals(lines: Iterable[dict]):
    """
    Compute (subtotal, tax, total) for PO lines.

    Args:
        lines: Dicts with ordered_qty and unit_cost

    Returns:
        Tuple of Decimals rounded to 2 places
    """
    subtotal = sum(
        (Decimal(line['ordered_qty']) * Decimal(line['unit_cost']) for line in lines),
        Decimal('0')
    ).quantize(CENT, rounding=ROUND_HALF_UP)
    tax = (subtotal * settings.GST_RATE).quantize(CENT, rounding=ROUND_HALF_UP)
    return subtotal, tax, subtotal + tax


def _validate_lines(lines):
    if not lines:
        raise EmptyOrderError("Purchase order must have at least one item")

    seen = set()
    for line in lines:
        item_id = line['item'].pk if isinstance(line['item'], Item) else line['item']
        if item_id in seen:
            raise DuplicateLineError("Each item can appear only once per purchase order")
        seen.add(item_id)


def _create_lines(po: PurchaseOrder, lines):
    default_rate = (settings.GST_RATE * 100).quantize(CENT)
    PurchaseOrderItem.objects.bulk_create([
        PurchaseOrderItem(
            purchase_order=po,
            item=line['item'],
            ordered_qty=line['ordered_qty'],
            unit_cost=line['unit_cost'],
            tax_rate=line.get('tax_rate', default_rate),
        )
        for line in lines
    ])


def create_purchase_order(
    *,
    vendor: Vendor,
    lines: list,
    user,
    notes: str = '',
    max_retries: int = 5
) -> PurchaseOrder:
    """
    Create a purchase order numbered PO + next 6 digit sequence.

    Args:
        vendor: Supplier
        lines: Dicts with item, ordered_qty, unit_cost and optional tax_rate
        user: Creating user
        notes: Free text
        max_retries: Attempts when two requests race for the same number

    Returns:
        Created PurchaseOrder with status OPEN

    Raises:
        EmptyOrderError: If lines is empty
        DuplicateLineError: If an item is repeated
    """
    _validate_lines(lines)
    subtotal, tax, total = calculate_totals(lines)

    for attempt in range(max_retries):
        try:
            with transaction.atomic():
                sequence = next_sequence(PurchaseOrder)
                po = PurchaseOrder.objects.create(
                    sequence=sequence,
                    po_no=format_number('PO', sequence),
                    vendor=vendor,
                    status=POStatus.OPEN,
                    subtotal=subtotal,
                    tax=tax,
                    total=total,
                    notes=notes,
                    created_by=user,
                )
                _create_lines(po, lines)
                record_activity(
                    user=user,
                    action='CREATE',
                    entity='PurchaseOrder',
                    entity_id=po.id,
                    details={'po_no': po.po_no, 'total': str(total)},
                )
        except IntegrityError:
            # Sequence collision with a concurrent request
            if attempt == max_retries - 1:
                raise
            continue

        logger.info("Created purchase order %s for %s (total %s)", po.po_no, vendor.name, total)
        return po

    raise RuntimeError("Unexpected error in purchase order creation")


def _get_locked_po(po_id: UUID) -> PurchaseOrder:
    try:
        return PurchaseOrder.objects.select_for_update().get(id=po_id)
    except PurchaseOrder.DoesNotExist:
        raise PurchaseOrderNotFoundError(f"Purchase order with ID {po_id} not found")


@transaction.atomic
def update_purchase_order(
    *,
    po_id: UUID,
    lines: list,
    user,
    vendor: Optional[Vendor] = None,
    notes: Optional[str] = None,
) -> PurchaseOrder:
    """
    Replace a purchase order's lines and recompute totals.

    Raises:
        PurchaseOrderNotFoundError: If the PO doesn't exist
        PurchaseOrderLockedError: If the PO is not OPEN or has receipts
        EmptyOrderError / DuplicateLineError: On invalid lines
    """
    po = _get_locked_po(po_id)

    if po.status != POStatus.OPEN or po.has_receipts():
        raise PurchaseOrderLockedError("Cannot modify a purchase order that has received goods")

    _validate_lines(lines)
    po.subtotal, po.tax, po.total = calculate_totals(lines)
    if vendor is not None:
        po.vendor = vendor
    if notes is not None:
        po.notes = notes
    po.save()

    po.items.all().delete()
    _create_lines(po, lines)

    record_activity(
        user=user,
        action='UPDATE',
        entity='PurchaseOrder',
        entity_id=po.id,
        details={'po_no': po.po_no, 'total': str(po.total)},
    )
    return po


@transaction.atomic
def delete_purchase_order(*, po_id: UUID, user) -> None:
    """
    Delete a purchase order that has nothing received.

    Raises:
        PurchaseOrderNotFoundError: If the PO doesn't exist
        PurchaseOrderLockedError: If goods were received against it
    """
    po = _get_locked_po(po_id)

    if po.receipts.exists() or po.has_receipts():
        raise PurchaseOrderLockedError("Cannot delete a purchase order that has received goods")

    po_no = po.po_no
    po.delete()
    record_activity(user=user, action='DELETE', entity='PurchaseOrder', entity_id=po_id, details={'po_no': po_no})


def reorder_suggestions():
    """
    Items at or below their reorder point that have a preferred vendor.

    Returns:
        List of ``{'vendor': {...}, 'items': [...]}`` groups, one per vendor.
        Suggested quantity is max(moq, reorder_point - stock).
    """
    items = (
        Item.objects
        .with_stock()
        .filter(preferred_vendor__isnull=False, total_stock__lte=F('reorder_point'))
        .select_related('preferred_vendor', 'unit')
        .order_by('preferred_vendor__name', 'name')
    )

    groups = {}
    for item in items:
        suggested = max(item.moq, item.reorder_point - item.total_stock)
        if suggested <= 0:
            continue
        vendor = item.preferred_vendor
        group = groups.setdefault(vendor.id, {
            'vendor': {'id': vendor.id, 'name': vendor.name},
            'items': [],
        })
        group['items'].append({
            'item': item.id,
            'name': item.name,
            'sku': item.sku,
            'unit_symbol': item.unit.symbol,
            'current_stock': item.total_stock,
            'reorder_point': item.reorder_point,
            'moq': item.moq,
            'suggested_qty': suggested,
            'unit_cost': item.cost_per_unit,
        })

    return list(groups.values())
