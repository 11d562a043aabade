"""
Store issues against approved indents.

Each issue line is satisfied either from the batch the store keeper
picked or, when no batch is given, by FIFO allocation across batches.
"""

import logging
from decimal import Decimal
from uuid import UUID

from django.db import transaction

from apps.accounts.services import record_activity
from apps.inventory.models import ItemBatch, LedgerRefType
from apps.inventory.services import issue_stock, allocate_fifo, BatchMismatchError
from apps.indents.models import Indent, IndentStatus, Issue, IssueItem

from .exceptions import (
    IndentNotFoundError,
    EmptyIndentError,
    IndentStateError,
    OverIssueError,
)

logger = logging.getLogger(__name__)


@transaction.atomic
def create_issue(*, indent_id: UUID, lines: list, user, notes: str = '') -> Issue:
    """
    Issue stock for an APPROVED indent.

    Args:
        indent_id: Indent being fulfilled
        lines: Dicts with item, qty and optional batch
        user: Store user issuing the stock
        notes: Free text

    Returns:
        Created Issue

    Raises:
        IndentNotFoundError: If the indent doesn't exist
        IndentStateError: If the indent is not APPROVED
        EmptyIndentError: If no lines are given
        OverIssueError: If an item is not on the indent or would exceed
            the requested quantity
        InventoryServiceError: On insufficient stock or batch mismatch
    """
    if not lines:
        raise EmptyIndentError("Issue must have at least one item")

    try:
        indent = Indent.objects.select_for_update().get(id=indent_id)
    except Indent.DoesNotExist:
        raise IndentNotFoundError(f"Indent with ID {indent_id} not found")

    if indent.status != IndentStatus.APPROVED:
        raise IndentStateError("Stock can only be issued against an approved indent")

    indent_lines = {line.item_id: line for line in indent.items.select_for_update().select_related('item')}
    issue = Issue.objects.create(indent=indent, issued_by=user, notes=notes)

    for line in lines:
        item = line['item']
        qty = Decimal(line['qty'])
        indent_line = indent_lines.get(item.pk)

        if indent_line is None:
            raise OverIssueError(f"{item.name} is not on this indent")
        if qty > indent_line.outstanding_qty:
            raise OverIssueError(
                f"Cannot issue {qty} of {item.name}: only {indent_line.outstanding_qty} outstanding"
            )

        batch = line.get('batch')
        if batch is not None:
            if isinstance(batch, ItemBatch) and batch.item_id != item.pk:
                raise BatchMismatchError(f"Batch {batch.batch_no} does not belong to item {item.name}")
            allocations = [(batch, qty)]
        else:
            allocations = allocate_fifo(item=item, qty=qty)

        for alloc_batch, alloc_qty in allocations:
            issue_stock(
                batch=alloc_batch,
                qty=alloc_qty,
                item=item,
                ref_id=issue.id,
                ref_type=LedgerRefType.ISSUE,
                user=user,
            )
            IssueItem.objects.create(issue=issue, item=item, batch=alloc_batch, qty=alloc_qty)

        indent_line.issued_qty += qty
        indent_line.save(update_fields=['issued_qty'])

    if all(line.issued_qty >= line.requested_qty for line in indent_lines.values()):
        indent.status = IndentStatus.ISSUED
        indent.save(update_fields=['status', 'updated_at'])

    record_activity(
        user=user,
        action='ISSUE',
        entity='Indent',
        entity_id=indent.id,
        details={'issue_id': str(issue.id), 'indent_status': indent.status},
    )
    logger.info("Issue %s posted against indent %s (now %s)", issue.id, indent.id, indent.status)
    return issue
