"""
Goods receipt (GRN) posting.

Receiving goods is the only way stock enters the store: every GRN line
creates or tops up a batch, writes a RECEIPT ledger row referencing the
GRN and advances the purchase order line's received quantity.
"""

import logging
from decimal import Decimal
from uuid import UUID

from django.db import transaction, IntegrityError

from apps.accounts.services import record_activity
from apps.inventory.models import LedgerRefType
from apps.inventory.services import receive_stock
from apps.procurement.models import (
    PurchaseOrder,
    PurchaseOrderItem,
    POStatus,
    GoodsReceipt,
    GoodsReceiptItem,
)

from .exceptions import (
    PurchaseOrderNotFoundError,
    PurchaseOrderClosedError,
    EmptyOrderError,
    InvalidReceiptLineError,
    OverReceiptError,
)
from .numbering import next_sequence, format_number

logger = logging.getLogger(__name__)


def _resolve_po_status(po: PurchaseOrder) -> str:
    lines = list(po.items.all())
    if lines and all(line.is_fully_received() for line in lines):
        return POStatus.CLOSED
    if any(line.received_qty > 0 for line in lines):
        return POStatus.PARTIAL
    return POStatus.OPEN


def _post_receipt(*, po, invoice_no, notes, lines, user) -> GoodsReceipt:
    sequence = next_sequence(GoodsReceipt)
    grn = GoodsReceipt.objects.create(
        sequence=sequence,
        grn_no=format_number('GRN', sequence),
        purchase_order=po,
        invoice_no=invoice_no,
        notes=notes,
        received_by=user,
    )

    for line in lines:
        po_item_id = line['po_item'].pk if isinstance(line['po_item'], PurchaseOrderItem) else line['po_item']
        try:
            po_item = (
                PurchaseOrderItem.objects
                .select_for_update()
                .select_related('item')
                .get(pk=po_item_id, purchase_order=po)
            )
        except PurchaseOrderItem.DoesNotExist:
            raise InvalidReceiptLineError(
                f"Line {po_item_id} does not belong to purchase order {po.po_no}"
            )

        qty = Decimal(line['received_qty'])
        if qty > po_item.outstanding_qty:
            raise OverReceiptError(
                f"Cannot receive {qty} of {po_item.item.name}: "
                f"only {po_item.outstanding_qty} outstanding"
            )

        batch = receive_stock(
            item=po_item.item,
            batch_no=line['batch_no'],
            qty=qty,
            unit_cost=po_item.unit_cost,
            ref_id=grn.id,
            ref_type=LedgerRefType.GRN,
            mfg_date=line.get('mfg_date'),
            exp_date=line.get('exp_date'),
            user=user,
        )

        GoodsReceiptItem.objects.create(
            goods_receipt=grn,
            po_item=po_item,
            item=po_item.item,
            batch=batch,
            batch_no=line['batch_no'],
            mfg_date=line.get('mfg_date'),
            exp_date=line.get('exp_date'),
            received_qty=qty,
            unit_cost=po_item.unit_cost,
        )

        po_item.received_qty += qty
        po_item.save(update_fields=['received_qty'])

    return grn


def create_goods_receipt(
    *,
    purchase_order_id: UUID,
    lines: list,
    user,
    invoice_no: str = '',
    notes: str = '',
    max_retries: int = 5
) -> GoodsReceipt:
    """
    Post a goods receipt against a purchase order.

    Args:
        purchase_order_id: PO being received
        lines: Dicts with po_item, batch_no, received_qty and optional
            mfg_date / exp_date
        user: Receiving store user
        invoice_no: Supplier invoice reference
        notes: Free text
        max_retries: Attempts when two receipts race for the same number

    Returns:
        Created GoodsReceipt

    Raises:
        PurchaseOrderNotFoundError: If the PO doesn't exist
        PurchaseOrderClosedError: If the PO is already CLOSED
        EmptyOrderError: If no lines are given
        InvalidReceiptLineError: If a line belongs to another PO
        OverReceiptError: If a line exceeds the outstanding quantity
    """
    if not lines:
        raise EmptyOrderError("Goods receipt must have at least one item")

    for attempt in range(max_retries):
        try:
            with transaction.atomic():
                try:
                    po = PurchaseOrder.objects.select_for_update().get(id=purchase_order_id)
                except PurchaseOrder.DoesNotExist:
                    raise PurchaseOrderNotFoundError(
                        f"Purchase order with ID {purchase_order_id} not found"
                    )

                if po.status == POStatus.CLOSED:
                    raise PurchaseOrderClosedError(f"Purchase order {po.po_no} is already closed")

                grn = _post_receipt(po=po, invoice_no=invoice_no, notes=notes, lines=lines, user=user)

                po.status = _resolve_po_status(po)
                po.save(update_fields=['status', 'updated_at'])

                record_activity(
                    user=user,
                    action='CREATE',
                    entity='GoodsReceipt',
                    entity_id=grn.id,
                    details={'grn_no': grn.grn_no, 'po_no': po.po_no, 'po_status': po.status},
                )
        except IntegrityError:
            if attempt == max_retries - 1:
                raise
            continue

        logger.info("Posted %s against %s; PO now %s", grn.grn_no, po.po_no, po.status)
        return grn

    raise RuntimeError("Unexpected error in goods receipt creation")
