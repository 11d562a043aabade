"""Audit trail helpers."""

from apps.accounts.models import AuditLog, User


def record_activity(*, user, action: str, entity: str, entity_id=None, details=None) -> AuditLog:
    """
    Append an entry to the audit log.

    Args:
        user: Acting staff user (None for system jobs)
        action: Verb such as CREATE, UPDATE, APPROVE
        entity: Model name the action applies to
        entity_id: Primary key of the affected row
        details: Extra JSON-serialisable context
    """
    return AuditLog.objects.create(
        user=user if isinstance(user, User) else None,
        action=action,
        entity=entity,
        entity_id=str(entity_id) if entity_id is not None else '',
        details=details or {},
    )
