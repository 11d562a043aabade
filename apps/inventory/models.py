from django.db import models
from django.db.models import Sum, F, Q
from django.core.validators import MinValueValidator
from decimal import Decimal
import uuid


# =============================================================================
# Master data
# =============================================================================

class Unit(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=50, unique=True)
    symbol = models.CharField(max_length=10)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'units'
        ordering = ['name']

    def __str__(self):
        return f"{self.name} ({self.symbol})"


class StorageType(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=50, unique=True)
    description = models.CharField(max_length=255, blank=True)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'storage_types'
        ordering = ['name']

    def __str__(self):
        return self.name


class ItemCategory(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=100, unique=True)
    description = models.CharField(max_length=255, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'item_categories'
        ordering = ['name']
        verbose_name_plural = 'item categories'

    def __str__(self):
        return self.name


class ItemQuerySet(models.QuerySet):
    def with_stock(self):
        """Annotate total_stock and stock_value from batches with stock on hand."""
        in_stock = Q(batches__qty_on_hand__gt=0)
        return self.annotate(
            total_stock=Sum('batches__qty_on_hand', filter=in_stock, default=Decimal('0')),
            stock_value=Sum(
                F('batches__qty_on_hand') * F('batches__unit_cost'),
                filter=in_stock,
                default=Decimal('0'),
                output_field=models.DecimalField(max_digits=18, decimal_places=5),
            ),
        )


class Item(models.Model):
    """Stock-keeping item (raw material) held in the store."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=200)
    sku = models.CharField(max_length=50, unique=True)
    category = models.ForeignKey(ItemCategory, on_delete=models.PROTECT, related_name='items')
    unit = models.ForeignKey(Unit, on_delete=models.PROTECT, related_name='items')
    storage_type = models.ForeignKey(
        StorageType,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='items'
    )
    preferred_vendor = models.ForeignKey(
        'procurement.Vendor',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='preferred_items'
    )

    # Replenishment
    moq = models.DecimalField(
        max_digits=12,
        decimal_places=3,
        default=Decimal('0'),
        validators=[MinValueValidator(Decimal('0'))]
    )
    reorder_point = models.DecimalField(
        max_digits=12,
        decimal_places=3,
        default=Decimal('0'),
        validators=[MinValueValidator(Decimal('0'))]
    )

    perishable = models.BooleanField(default=False)
    cost_per_unit = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal('0.00'))
    points_value = models.PositiveIntegerField(default=0)
    barcode = models.CharField(max_length=100, blank=True)
    image_url = models.CharField(max_length=500, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = ItemQuerySet.as_manager()

    class Meta:
        db_table = 'items'
        ordering = ['name']
        indexes = [
            models.Index(fields=['category'], name='items_category_idx'),
            models.Index(fields=['name'], name='items_name_idx'),
        ]

    def __str__(self):
        return f"{self.name} [{self.sku}]"

    def get_total_stock(self):
        return self.batches.filter(qty_on_hand__gt=0).aggregate(
            total=Sum('qty_on_hand')
        )['total'] or Decimal('0')


# =============================================================================
# Stock
# =============================================================================

class ItemBatch(models.Model):
    """A lot of an item received together; consumed FIFO by expiry."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    item = models.ForeignKey(Item, on_delete=models.PROTECT, related_name='batches')
    batch_no = models.CharField(max_length=100)
    qty_on_hand = models.DecimalField(
        max_digits=12,
        decimal_places=3,
        default=Decimal('0'),
        validators=[MinValueValidator(Decimal('0'))]
    )
    unit_cost = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal('0.00'))
    mfg_date = models.DateField(null=True, blank=True)
    exp_date = models.DateField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'item_batches'
        unique_together = [['item', 'batch_no']]
        ordering = [F('exp_date').asc(nulls_last=True), 'created_at']
        indexes = [
            models.Index(fields=['item', 'exp_date'], name='batches_item_exp_idx'),
        ]
        constraints = [
            models.CheckConstraint(
                check=Q(qty_on_hand__gte=0),
                name='item_batch_qty_non_negative',
            ),
        ]
        verbose_name_plural = 'item batches'

    def __str__(self):
        return f"{self.item.name} / {self.batch_no} ({self.qty_on_hand})"


class LedgerTxnType(models.TextChoices):
    RECEIPT = 'RECEIPT', 'Receipt'
    ISSUE = 'ISSUE', 'Issue'
    ADJUSTMENT = 'ADJUSTMENT', 'Adjustment'


class LedgerRefType(models.TextChoices):
    GRN = 'GRN', 'Goods receipt'
    ISSUE = 'ISSUE', 'Issue'
    ADJUSTMENT = 'ADJUSTMENT', 'Adjustment'


class StockLedger(models.Model):
    """
    Append-only log of stock movements.

    ``qty`` is signed: receipts are positive, issues negative. The sum of
    a batch's ledger rows equals its qty_on_hand.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    item = models.ForeignKey(Item, on_delete=models.PROTECT, related_name='ledger_entries')
    batch = models.ForeignKey(
        ItemBatch,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name='ledger_entries'
    )
    txn_type = models.CharField(max_length=12, choices=LedgerTxnType.choices)
    qty = models.DecimalField(max_digits=12, decimal_places=3)
    unit_cost = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal('0.00'))
    ref_type = models.CharField(max_length=12, choices=LedgerRefType.choices)
    ref_id = models.CharField(max_length=64)
    created_by = models.ForeignKey(
        'accounts.User',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='ledger_entries'
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'stock_ledger'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['item', 'created_at'], name='ledger_item_created_idx'),
            models.Index(fields=['ref_type', 'ref_id'], name='ledger_ref_idx'),
        ]

    def __str__(self):
        return f"{self.txn_type} {self.qty} {self.item.name}"


# =============================================================================
# Alerts
# =============================================================================

class AlertType(models.TextChoices):
    LOW_STOCK = 'LOW_STOCK', 'Low stock'
    EXPIRY = 'EXPIRY', 'Expiry'
    MOQ = 'MOQ', 'Minimum order quantity'


class AlertStatus(models.TextChoices):
    OPEN = 'OPEN', 'Open'
    DISMISSED = 'DISMISSED', 'Dismissed'


class Alert(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    item = models.ForeignKey(Item, on_delete=models.CASCADE, related_name='alerts')
    type = models.CharField(max_length=10, choices=AlertType.choices)
    message = models.CharField(max_length=255)
    status = models.CharField(max_length=10, choices=AlertStatus.choices, default=AlertStatus.OPEN)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'alerts'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['status', 'type'], name='alerts_status_type_idx'),
        ]

    def __str__(self):
        return f"{self.type}: {self.message}"
