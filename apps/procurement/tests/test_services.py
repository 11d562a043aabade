import pytest
from decimal import Decimal
from apps.inventory.models import ItemBatch, StockLedger
from apps.procurement.models import GoodsReceipt, POStatus, PurchaseOrder
from apps.procurement.services import (
    calculate_totals,
    create_goods_receipt,
    create_purchase_order,
    delete_purchase_order,
    reorder_suggestions,
    update_purchase_order,
    DuplicateLineError,
    EmptyOrderError,
    InvalidReceiptLineError,
    OverReceiptError,
    PurchaseOrderClosedError,
    PurchaseOrderLockedError,
)


def _receive(po, qty, batch_no='LOT-1', user=None):
    line = po.items.get()
    return create_goods_receipt(
        purchase_order_id=po.id,
        lines=[{'po_item': line.id, 'batch_no': batch_no, 'received_qty': Decimal(qty)}],
        user=user,
    )


class TestCalculateTotals:

    def test_adds_gst(self, settings):
        settings.GST_RATE = Decimal('0.18')
        subtotal, tax, total = calculate_totals([
            {'ordered_qty': '10', 'unit_cost': '12.50'},
            {'ordered_qty': '3', 'unit_cost': '99.99'},
        ])

        assert subtotal == Decimal('424.97')
        assert tax == Decimal('76.49')
        assert total == Decimal('501.46')


@pytest.mark.django_db
class TestPurchaseOrders:

    def test_numbering_and_totals(self, purchase_order, vendor, item, store_user):
        assert purchase_order.po_no == 'PO000001'
        assert purchase_order.status == POStatus.OPEN
        assert purchase_order.total == purchase_order.subtotal + purchase_order.tax

        second = create_purchase_order(
            vendor=vendor,
            lines=[{'item': item, 'ordered_qty': Decimal('1'), 'unit_cost': Decimal('1')}],
            user=store_user,
        )
        assert second.po_no == 'PO000002'

    def test_empty_lines(self, vendor, store_user):
        with pytest.raises(EmptyOrderError):
            create_purchase_order(vendor=vendor, lines=[], user=store_user)

    def test_duplicate_item(self, vendor, item, store_user):
        line = {'item': item, 'ordered_qty': Decimal('1'), 'unit_cost': Decimal('1')}
        with pytest.raises(DuplicateLineError):
            create_purchase_order(vendor=vendor, lines=[line, dict(line)], user=store_user)

    def test_update_replaces_lines(self, purchase_order, item, store_user):
        po = update_purchase_order(
            po_id=purchase_order.id,
            lines=[{'item': item, 'ordered_qty': Decimal('20'), 'unit_cost': Decimal('10.00')}],
            user=store_user,
        )

        assert po.subtotal == Decimal('200.00')
        assert po.items.get().ordered_qty == Decimal('20')

    def test_update_locked_after_receipt(self, purchase_order, item, store_user):
        _receive(purchase_order, '10', user=store_user)

        with pytest.raises(PurchaseOrderLockedError):
            update_purchase_order(
                po_id=purchase_order.id,
                lines=[{'item': item, 'ordered_qty': Decimal('20'), 'unit_cost': Decimal('10.00')}],
                user=store_user,
            )

    def test_delete(self, purchase_order, store_user):
        delete_purchase_order(po_id=purchase_order.id, user=store_user)
        assert not PurchaseOrder.objects.filter(id=purchase_order.id).exists()

    def test_delete_locked_after_receipt(self, purchase_order, store_user):
        _receive(purchase_order, '10', user=store_user)

        with pytest.raises(PurchaseOrderLockedError):
            delete_purchase_order(po_id=purchase_order.id, user=store_user)


@pytest.mark.django_db
class TestGoodsReceipts:

    def test_partial_then_closed(self, purchase_order, store_user):
        grn = _receive(purchase_order, '40', user=store_user)
        purchase_order.refresh_from_db()

        assert grn.grn_no == 'GRN000001'
        assert purchase_order.status == POStatus.PARTIAL

        _receive(purchase_order, '60', batch_no='LOT-2', user=store_user)
        purchase_order.refresh_from_db()
        assert purchase_order.status == POStatus.CLOSED

    def test_stock_and_ledger(self, purchase_order, item, store_user):
        grn = _receive(purchase_order, '40', user=store_user)

        batch = ItemBatch.objects.get(item=item, batch_no='LOT-1')
        assert batch.qty_on_hand == Decimal('40')
        assert batch.unit_cost == Decimal('50.00')
        assert StockLedger.objects.filter(ref_id=str(grn.id)).count() == 1

    def test_over_receipt(self, purchase_order, store_user):
        with pytest.raises(OverReceiptError):
            _receive(purchase_order, '100.001', user=store_user)
        assert not ItemBatch.objects.exists()

    def test_closed_po(self, purchase_order, store_user):
        _receive(purchase_order, '100', user=store_user)

        with pytest.raises(PurchaseOrderClosedError):
            _receive(purchase_order, '1', batch_no='LOT-2', user=store_user)

    def test_line_from_another_order(self, purchase_order, other_vendor_order, store_user):
        foreign_line = other_vendor_order.items.get()

        with pytest.raises(InvalidReceiptLineError):
            create_goods_receipt(
                purchase_order_id=purchase_order.id,
                lines=[{'po_item': foreign_line.id, 'batch_no': 'LOT-9', 'received_qty': Decimal('5')}],
                user=store_user,
            )

        assert not GoodsReceipt.objects.exists()
        assert not ItemBatch.objects.exists()
        foreign_line.refresh_from_db()
        assert foreign_line.received_qty == Decimal('0')

    def test_failing_line_rolls_back_earlier_lines(self, two_line_order, item, dal, store_user):
        rice_line = two_line_order.items.get(item=item)
        dal_line = two_line_order.items.get(item=dal)
        create_goods_receipt(
            purchase_order_id=two_line_order.id,
            lines=[{'po_item': rice_line.id, 'batch_no': 'LOT-1', 'received_qty': Decimal('40')}],
            user=store_user,
        )

        with pytest.raises(OverReceiptError):
            create_goods_receipt(
                purchase_order_id=two_line_order.id,
                lines=[
                    {'po_item': rice_line.id, 'batch_no': 'LOT-1', 'received_qty': Decimal('10')},
                    {'po_item': dal_line.id, 'batch_no': 'DAL-1', 'received_qty': Decimal('25')},
                ],
                user=store_user,
            )

        assert ItemBatch.objects.get(item=item, batch_no='LOT-1').qty_on_hand == Decimal('40')
        assert not ItemBatch.objects.filter(item=dal).exists()
        assert StockLedger.objects.count() == 1
        assert GoodsReceipt.objects.count() == 1
        rice_line.refresh_from_db()
        assert rice_line.received_qty == Decimal('40')
        two_line_order.refresh_from_db()
        assert two_line_order.status == POStatus.PARTIAL


@pytest.mark.django_db
class TestReorderSuggestions:

    def test_suggests_preferred_vendor_items(self, item, vendor):
        item.preferred_vendor = vendor
        item.save()

        groups = reorder_suggestions()

        assert len(groups) == 1
        assert groups[0]['vendor']['name'] == vendor.name
        line = groups[0]['items'][0]
        # max(moq 100, reorder 50 - stock 0)
        assert line['suggested_qty'] == Decimal('100')

    def test_ignores_items_without_vendor(self, item):
        assert reorder_suggestions() == []
