from django.db import models
from django.core.validators import MinValueValidator
from decimal import Decimal
import uuid


# =============================================================================
# Vendors
# =============================================================================

class VendorCategory(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=100, unique=True)
    description = models.CharField(max_length=255, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'vendor_categories'
        ordering = ['name']
        verbose_name_plural = 'vendor categories'

    def __str__(self):
        return self.name


class Vendor(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=200)
    category = models.ForeignKey(
        VendorCategory,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='vendors'
    )
    gst_no = models.CharField(max_length=20, blank=True)
    contact_person = models.CharField(max_length=150, blank=True)
    phone = models.CharField(max_length=20, blank=True)
    email = models.EmailField(blank=True)
    address = models.TextField(blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'vendors'
        ordering = ['name']

    def __str__(self):
        return self.name


# =============================================================================
# Purchase orders
# =============================================================================

class POStatus(models.TextChoices):
    OPEN = 'OPEN', 'Open'
    PARTIAL = 'PARTIAL', 'Partially received'
    CLOSED = 'CLOSED', 'Closed'


class PurchaseOrder(models.Model):
    """Order placed with a vendor; received through one or more GRNs."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    sequence = models.PositiveIntegerField(unique=True, editable=False)
    po_no = models.CharField(max_length=20, unique=True, editable=False)
    vendor = models.ForeignKey(Vendor, on_delete=models.PROTECT, related_name='purchase_orders')
    status = models.CharField(max_length=10, choices=POStatus.choices, default=POStatus.OPEN)

    subtotal = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))
    tax = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))
    total = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))
    notes = models.TextField(blank=True)

    created_by = models.ForeignKey(
        'accounts.User',
        on_delete=models.SET_NULL,
        null=True,
        related_name='purchase_orders'
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'purchase_orders'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['status'], name='po_status_idx'),
            models.Index(fields=['vendor', 'status'], name='po_vendor_status_idx'),
        ]

    def __str__(self):
        return self.po_no

    def has_receipts(self):
        return self.items.filter(received_qty__gt=0).exists()


class PurchaseOrderItem(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    purchase_order = models.ForeignKey(PurchaseOrder, on_delete=models.CASCADE, related_name='items')
    item = models.ForeignKey('inventory.Item', on_delete=models.PROTECT, related_name='po_lines')
    ordered_qty = models.DecimalField(
        max_digits=12,
        decimal_places=3,
        validators=[MinValueValidator(Decimal('0.001'))]
    )
    received_qty = models.DecimalField(max_digits=12, decimal_places=3, default=Decimal('0'))
    unit_cost = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.00'))]
    )
    tax_rate = models.DecimalField(max_digits=5, decimal_places=2, default=Decimal('0.00'))

    class Meta:
        db_table = 'purchase_order_items'
        ordering = ['item__name']

    def __str__(self):
        return f"{self.purchase_order.po_no}: {self.item.name} x {self.ordered_qty}"

    @property
    def line_total(self):
        return self.ordered_qty * self.unit_cost

    @property
    def outstanding_qty(self):
        return max(Decimal('0'), self.ordered_qty - self.received_qty)

    def is_fully_received(self):
        return self.received_qty >= self.ordered_qty


# =============================================================================
# Goods receipt
# =============================================================================

class GoodsReceipt(models.Model):
    """Goods Receipt Note: items physically received against a PO."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    sequence = models.PositiveIntegerField(unique=True, editable=False)
    grn_no = models.CharField(max_length=20, unique=True, editable=False)
    purchase_order = models.ForeignKey(PurchaseOrder, on_delete=models.PROTECT, related_name='receipts')
    invoice_no = models.CharField(max_length=100, blank=True)
    notes = models.TextField(blank=True)
    received_by = models.ForeignKey(
        'accounts.User',
        on_delete=models.SET_NULL,
        null=True,
        related_name='goods_receipts'
    )
    received_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'goods_receipts'
        ordering = ['-received_at']

    def __str__(self):
        return self.grn_no


class GoodsReceiptItem(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    goods_receipt = models.ForeignKey(GoodsReceipt, on_delete=models.CASCADE, related_name='items')
    po_item = models.ForeignKey(PurchaseOrderItem, on_delete=models.PROTECT, related_name='receipts')
    item = models.ForeignKey('inventory.Item', on_delete=models.PROTECT, related_name='grn_lines')
    batch = models.ForeignKey('inventory.ItemBatch', on_delete=models.PROTECT, related_name='grn_lines')
    batch_no = models.CharField(max_length=100)
    mfg_date = models.DateField(null=True, blank=True)
    exp_date = models.DateField(null=True, blank=True)
    received_qty = models.DecimalField(
        max_digits=12,
        decimal_places=3,
        validators=[MinValueValidator(Decimal('0.001'))]
    )
    unit_cost = models.DecimalField(max_digits=10, decimal_places=2)

    class Meta:
        db_table = 'goods_receipt_items'

    def __str__(self):
        return f"{self.goods_receipt.grn_no}: {self.item.name} x {self.received_qty}"
