import pytest
from decimal import Decimal
from django.utils import timezone
from apps.indents.models import IndentStatus, Issue, IssueItem
from apps.indents.services import (
    approve_indent,
    create_indent,
    create_issue,
    reject_indent,
    update_indent,
    EmptyIndentError,
    IndentPermissionError,
    IndentStateError,
    OverIssueError,
)
from apps.inventory.models import Item, ItemBatch, LedgerRefType, StockLedger
from apps.inventory.services import receive_stock
from apps.meals.models import MealType


@pytest.mark.django_db
class TestIndentLifecycle:

    def test_repeated_items_are_merged(self, chef_user, item):
        indent = create_indent(
            user=chef_user,
            requested_for_date=timezone.localdate(),
            meal=MealType.DINNER,
            lines=[
                {'item': item, 'requested_qty': Decimal('5')},
                {'item': item, 'requested_qty': Decimal('2.5')},
            ],
        )

        line = indent.items.get()
        assert line.requested_qty == Decimal('7.5')
        assert indent.status == IndentStatus.PENDING

    def test_empty_indent(self, chef_user):
        with pytest.raises(EmptyIndentError):
            create_indent(user=chef_user, requested_for_date=timezone.localdate(), meal=MealType.LUNCH, lines=[])

    def test_only_requester_or_admin_edits(self, pending_indent, cook_user, stocked_item):
        with pytest.raises(IndentPermissionError):
            update_indent(
                indent_id=pending_indent.id,
                user=cook_user,
                lines=[{'item': stocked_item, 'requested_qty': Decimal('1')}],
            )

    def test_admin_edits(self, pending_indent, admin_user, stocked_item):
        indent = update_indent(
            indent_id=pending_indent.id,
            user=admin_user,
            lines=[{'item': stocked_item, 'requested_qty': Decimal('12')}],
        )
        assert indent.items.get().requested_qty == Decimal('12')

    def test_cannot_edit_after_approval(self, approved_indent, chef_user, stocked_item):
        with pytest.raises(IndentStateError):
            update_indent(
                indent_id=approved_indent.id,
                user=chef_user,
                lines=[{'item': stocked_item, 'requested_qty': Decimal('1')}],
            )

    def test_approve_records_approver(self, approved_indent, admin_user):
        assert approved_indent.status == IndentStatus.APPROVED
        assert approved_indent.approved_by == admin_user
        assert approved_indent.approved_at is not None

    def test_cannot_reject_approved(self, approved_indent, admin_user):
        with pytest.raises(IndentStateError):
            reject_indent(indent_id=approved_indent.id, user=admin_user)

    def test_reject(self, pending_indent, chef_user):
        indent = reject_indent(indent_id=pending_indent.id, user=chef_user)
        assert indent.status == IndentStatus.REJECTED


@pytest.mark.django_db
class TestCreateIssue:

    def test_fifo_issue_spans_batches(self, approved_indent, stocked_item, store_user):
        issue = create_issue(
            indent_id=approved_indent.id,
            lines=[{'item': stocked_item, 'qty': Decimal('40')}],
            user=store_user,
        )

        rows = {row.batch.batch_no: row.qty for row in IssueItem.objects.filter(issue=issue)}
        assert rows == {'B-EARLY': Decimal('30'), 'B-LATE': Decimal('10')}

        approved_indent.refresh_from_db()
        assert approved_indent.status == IndentStatus.ISSUED

    def test_partial_issue_keeps_approved(self, approved_indent, stocked_item, store_user):
        create_issue(
            indent_id=approved_indent.id,
            lines=[{'item': stocked_item, 'qty': Decimal('10')}],
            user=store_user,
        )

        approved_indent.refresh_from_db()
        assert approved_indent.status == IndentStatus.APPROVED
        assert approved_indent.items.get().issued_qty == Decimal('10')

    def test_chosen_batch(self, approved_indent, stocked_item, store_user):
        batch = ItemBatch.objects.get(batch_no='B-LATE')
        create_issue(
            indent_id=approved_indent.id,
            lines=[{'item': stocked_item, 'qty': Decimal('15'), 'batch': batch}],
            user=store_user,
        )

        batch.refresh_from_db()
        assert batch.qty_on_hand == Decimal('55')

    def test_over_issue(self, approved_indent, stocked_item, store_user):
        with pytest.raises(OverIssueError):
            create_issue(
                indent_id=approved_indent.id,
                lines=[{'item': stocked_item, 'qty': Decimal('41')}],
                user=store_user,
            )

    def test_pending_indent(self, pending_indent, stocked_item, store_user):
        with pytest.raises(IndentStateError):
            create_issue(
                indent_id=pending_indent.id,
                lines=[{'item': stocked_item, 'qty': Decimal('1')}],
                user=store_user,
            )

    def test_failing_line_rolls_back_earlier_lines(
        self, chef_user, admin_user, store_user, stocked_item, unit, category
    ):
        dal = Item.objects.create(name='Toor Dal', sku='DAL-01', category=category, unit=unit)
        receive_stock(item=dal, batch_no='D-1', qty=Decimal('10'), unit_cost=Decimal('120.00'), ref_id='seed')
        indent = create_indent(
            user=chef_user,
            requested_for_date=timezone.localdate(),
            meal=MealType.DINNER,
            lines=[
                {'item': stocked_item, 'requested_qty': Decimal('20')},
                {'item': dal, 'requested_qty': Decimal('5')},
            ],
        )
        approve_indent(indent_id=indent.id, user=admin_user)

        with pytest.raises(OverIssueError):
            create_issue(
                indent_id=indent.id,
                lines=[
                    {'item': stocked_item, 'qty': Decimal('20')},
                    {'item': dal, 'qty': Decimal('8')},
                ],
                user=store_user,
            )

        assert ItemBatch.objects.get(batch_no='B-EARLY').qty_on_hand == Decimal('30')
        assert ItemBatch.objects.get(batch_no='D-1').qty_on_hand == Decimal('10')
        assert not StockLedger.objects.filter(ref_type=LedgerRefType.ISSUE).exists()
        assert not Issue.objects.exists()
        assert not IssueItem.objects.exists()
        indent.refresh_from_db()
        assert indent.status == IndentStatus.APPROVED
        assert all(line.issued_qty == Decimal('0') for line in indent.items.all())
