from django.db import models
from django.core.validators import MinValueValidator
from decimal import Decimal
import uuid

from apps.meals.models import MealType


class IndentStatus(models.TextChoices):
    PENDING = 'PENDING', 'Pending'
    APPROVED = 'APPROVED', 'Approved'
    REJECTED = 'REJECTED', 'Rejected'
    ISSUED = 'ISSUED', 'Issued'


class Indent(models.Model):
    """Kitchen request for store items for a given date and meal."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    requested_by = models.ForeignKey(
        'accounts.User',
        on_delete=models.PROTECT,
        related_name='indents'
    )
    requested_for_date = models.DateField()
    meal = models.CharField(max_length=10, choices=MealType.choices)
    notes = models.TextField(blank=True)
    status = models.CharField(max_length=10, choices=IndentStatus.choices, default=IndentStatus.PENDING)

    approved_by = models.ForeignKey(
        'accounts.User',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='approved_indents'
    )
    approved_at = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'indents'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['status', 'requested_for_date'], name='indents_status_date_idx'),
        ]

    def __str__(self):
        return f"Indent {self.requested_for_date} {self.meal} ({self.status})"

    def is_fully_issued(self):
        return all(line.issued_qty >= line.requested_qty for line in self.items.all())


class IndentItem(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    indent = models.ForeignKey(Indent, on_delete=models.CASCADE, related_name='items')
    item = models.ForeignKey('inventory.Item', on_delete=models.PROTECT, related_name='indent_lines')
    requested_qty = models.DecimalField(
        max_digits=12,
        decimal_places=3,
        validators=[MinValueValidator(Decimal('0.001'))]
    )
    issued_qty = models.DecimalField(max_digits=12, decimal_places=3, default=Decimal('0'))

    class Meta:
        db_table = 'indent_items'
        unique_together = [['indent', 'item']]

    def __str__(self):
        return f"{self.item.name} {self.issued_qty}/{self.requested_qty}"

    @property
    def outstanding_qty(self):
        return max(Decimal('0'), self.requested_qty - self.issued_qty)


class Issue(models.Model):
    """Store issue of stock against an approved indent."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    indent = models.ForeignKey(Indent, on_delete=models.PROTECT, related_name='issues')
    issued_by = models.ForeignKey(
        'accounts.User',
        on_delete=models.SET_NULL,
        null=True,
        related_name='issues'
    )
    notes = models.TextField(blank=True)
    issued_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'issues'
        ordering = ['-issued_at']

    def __str__(self):
        return f"Issue {self.id} for {self.indent}"


class IssueItem(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    issue = models.ForeignKey(Issue, on_delete=models.CASCADE, related_name='items')
    item = models.ForeignKey('inventory.Item', on_delete=models.PROTECT, related_name='issue_lines')
    batch = models.ForeignKey('inventory.ItemBatch', on_delete=models.PROTECT, related_name='issue_lines')
    qty = models.DecimalField(
        max_digits=12,
        decimal_places=3,
        validators=[MinValueValidator(Decimal('0.001'))]
    )

    class Meta:
        db_table = 'issue_items'

    def __str__(self):
        return f"{self.item.name} x {self.qty} from {self.batch.batch_no}"
