"""Document numbering (PO000001, GRN000001)."""

from django.db.models import Max


def next_sequence(model) -> int:
    """Next free sequence value for a numbered document model."""
    current = model.objects.aggregate(last=Max('sequence'))['last']
    return (current or 0) + 1


def format_number(prefix: str, sequence: int) -> str:
    return f"{prefix}{sequence:06d}"
