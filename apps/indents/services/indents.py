"""
Indent lifecycle.

    PENDING --approve--> APPROVED --issue (fully)--> ISSUED
       |
       +----reject-----> REJECTED

Lines can only be edited while the indent is PENDING.
"""

import logging
from uuid import UUID

from django.db import transaction
from django.utils import timezone

from apps.accounts.models import Role
from apps.accounts.services import record_activity
from apps.indents.models import Indent, IndentItem, IndentStatus

from .exceptions import (
    IndentNotFoundError,
    EmptyIndentError,
    IndentStateError,
    IndentPermissionError,
)

logger = logging.getLogger(__name__)


def _get_locked_indent(indent_id: UUID) -> Indent:
    try:
        return Indent.objects.select_for_update().get(id=indent_id)
    except Indent.DoesNotExist:
        raise IndentNotFoundError(f"Indent with ID {indent_id} not found")


def _replace_lines(indent: Indent, lines):
    if not lines:
        raise EmptyIndentError("Indent must have at least one item")

    merged = {}
    for line in lines:
        item = line['item']
        if item.pk in merged:
            merged[item.pk].requested_qty += line['requested_qty']
        else:
            merged[item.pk] = IndentItem(indent=indent, item=item, requested_qty=line['requested_qty'])

    indent.items.all().delete()
    IndentItem.objects.bulk_create(merged.values())


@transaction.atomic
def create_indent(*, user, requested_for_date, meal: str, lines: list, notes: str = '') -> Indent:
    """
    Raise a PENDING indent.

    Args:
        user: Requesting kitchen user
        requested_for_date: Date the items are needed for
        meal: Meal type
        lines: Dicts with item and requested_qty; repeated items are merged
        notes: Free text

    Raises:
        EmptyIndentError: If lines is empty
    """
    indent = Indent.objects.create(
        requested_by=user,
        requested_for_date=requested_for_date,
        meal=meal,
        notes=notes,
    )
    _replace_lines(indent, lines)

    record_activity(user=user, action='CREATE', entity='Indent', entity_id=indent.id)
    logger.info("Indent %s raised by %s for %s %s", indent.id, user.email, requested_for_date, meal)
    return indent


@transaction.atomic
def update_indent(
    *,
    indent_id: UUID,
    user,
    lines: list,
    requested_for_date=None,
    meal=None,
    notes=None
) -> Indent:
    """
    Replace a PENDING indent's lines.

    Only the requester or an admin can edit.

    Raises:
        IndentNotFoundError, IndentPermissionError, IndentStateError,
        EmptyIndentError
    """
    indent = _get_locked_indent(indent_id)

    if indent.requested_by_id != user.id and not user.has_role(Role.ADMIN):
        raise IndentPermissionError("Only the requester or an admin can edit this indent")
    if indent.status != IndentStatus.PENDING:
        raise IndentStateError("Only pending indents can be edited")

    if requested_for_date is not None:
        indent.requested_for_date = requested_for_date
    if meal is not None:
        indent.meal = meal
    if notes is not None:
        indent.notes = notes
    indent.save()

    _replace_lines(indent, lines)
    record_activity(user=user, action='UPDATE', entity='Indent', entity_id=indent.id)
    return indent


def _decide(indent_id: UUID, user, new_status: str, action: str) -> Indent:
    indent = _get_locked_indent(indent_id)

    if indent.status != IndentStatus.PENDING:
        raise IndentStateError(f"Cannot {action.lower()} an indent that is {indent.status}")

    indent.status = new_status
    indent.approved_by = user
    indent.approved_at = timezone.now()
    indent.save(update_fields=['status', 'approved_by', 'approved_at', 'updated_at'])

    record_activity(user=user, action=action, entity='Indent', entity_id=indent.id)
    logger.info("Indent %s %s by %s", indent.id, new_status, user.email)
    return indent


@transaction.atomic
def approve_indent(*, indent_id: UUID, user) -> Indent:
    """Approve a PENDING indent."""
    return _decide(indent_id, user, IndentStatus.APPROVED, 'APPROVE')


@transaction.atomic
def reject_indent(*, indent_id: UUID, user) -> Indent:
    """Reject a PENDING indent."""
    return _decide(indent_id, user, IndentStatus.REJECTED, 'REJECT')
