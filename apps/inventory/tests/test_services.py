import pytest
from datetime import timedelta
from decimal import Decimal
from django.utils import timezone
from apps.inventory.models import Alert, AlertStatus, AlertType, Item, ItemBatch, StockLedger
from apps.inventory.services import (
    allocate_fifo,
    generate_alerts,
    issue_stock,
    receive_stock,
    BatchMismatchError,
    InsufficientStockError,
    InvalidQuantityError,
)


@pytest.mark.django_db
class TestReceiveStock:

    def test_creates_batch_and_ledger(self, item, store_user):
        batch = receive_stock(
            item=item, batch_no='B1', qty=Decimal('25'), unit_cost=Decimal('40.00'),
            ref_id='grn-1', user=store_user,
        )

        assert batch.qty_on_hand == Decimal('25')
        entry = StockLedger.objects.get(batch=batch)
        assert entry.qty == Decimal('25')
        assert entry.created_by == store_user

    def test_same_batch_number_adds_quantity(self, item):
        receive_stock(item=item, batch_no='B1', qty=Decimal('10'), unit_cost=Decimal('40.00'), ref_id='1')
        batch = receive_stock(item=item, batch_no='B1', qty=Decimal('5'), unit_cost=Decimal('45.00'), ref_id='2')

        assert batch.qty_on_hand == Decimal('15')
        assert batch.unit_cost == Decimal('40.00')
        assert ItemBatch.objects.filter(item=item).count() == 1

    def test_rejects_zero_quantity(self, item):
        with pytest.raises(InvalidQuantityError):
            receive_stock(item=item, batch_no='B1', qty=Decimal('0'), unit_cost=Decimal('1'), ref_id='1')


@pytest.mark.django_db
class TestIssueStock:

    def test_issue_reduces_batch(self, stocked_item):
        batch = ItemBatch.objects.get(batch_no='B-LATE')
        issue_stock(batch=batch, qty=Decimal('20'), ref_id='issue-1', item=stocked_item)

        batch.refresh_from_db()
        assert batch.qty_on_hand == Decimal('50')
        assert StockLedger.objects.filter(batch=batch, qty=Decimal('-20')).exists()

    def test_issue_more_than_batch(self, stocked_item):
        batch = ItemBatch.objects.get(batch_no='B-EARLY')
        with pytest.raises(InsufficientStockError):
            issue_stock(batch=batch, qty=Decimal('31'), ref_id='issue-1')

    def test_batch_of_other_item(self, stocked_item, unit, category):
        dal = Item.objects.create(name='Dal', sku='DAL-01', category=category, unit=unit)
        batch = ItemBatch.objects.get(batch_no='B-EARLY')

        with pytest.raises(BatchMismatchError):
            issue_stock(batch=batch, qty=Decimal('1'), ref_id='issue-1', item=dal)


@pytest.mark.django_db
class TestAllocateFifo:

    def test_earliest_expiry_first(self, stocked_item):
        allocations = allocate_fifo(item=stocked_item, qty=Decimal('40'))

        assert [(b.batch_no, q) for b, q in allocations] == [
            ('B-EARLY', Decimal('30')),
            ('B-LATE', Decimal('10')),
        ]

    def test_skips_expired_batches(self, stocked_item):
        later = timezone.localdate() + timedelta(days=20)
        allocations = allocate_fifo(item=stocked_item, qty=Decimal('40'), on_date=later)

        assert [(b.batch_no, q) for b, q in allocations] == [('B-LATE', Decimal('40'))]

    def test_insufficient_stock(self, stocked_item):
        with pytest.raises(InsufficientStockError):
            allocate_fifo(item=stocked_item, qty=Decimal('101'))


@pytest.mark.django_db
class TestGenerateAlerts:

    def test_low_stock_alert(self, item):
        alerts = generate_alerts()

        assert [a.type for a in alerts] == [AlertType.LOW_STOCK]
        assert alerts[0].item == item

    def test_no_duplicate_open_alert(self, item):
        generate_alerts()
        assert generate_alerts() == []
        assert Alert.objects.filter(item=item, status=AlertStatus.OPEN).count() == 1

    def test_expiry_alert(self, item):
        today = timezone.localdate()
        receive_stock(
            item=item, batch_no='SOON', qty=Decimal('80'), unit_cost=Decimal('1'),
            ref_id='1', exp_date=today + timedelta(days=3),
        )

        alerts = generate_alerts(today=today)

        assert [a.type for a in alerts] == [AlertType.EXPIRY]
        assert 'expires in 3 day(s)' in alerts[0].message
