from django.db import models
from django.core.validators import MinValueValidator
from django.utils import timezone
from datetime import timedelta
from decimal import Decimal
import secrets
import string
import uuid

from apps.meals.models import MealType


class MessFacility(models.Model):
    """A physical dining hall with its own menu, packages and subscribers."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=200, unique=True)
    location = models.CharField(max_length=255, blank=True)
    capacity = models.PositiveIntegerField(default=0)
    is_active = models.BooleanField(default=True)
    image_url = models.CharField(max_length=500, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'mess_facilities'
        ordering = ['name']
        verbose_name_plural = 'mess facilities'

    def __str__(self):
        return self.name


class Package(models.Model):
    """Subscription package sold for a facility."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=200)
    description = models.TextField(blank=True)
    mess_facility = models.ForeignKey(MessFacility, on_delete=models.CASCADE, related_name='packages')
    duration_days = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.00'))]
    )
    # List of MealType values, e.g. ["BREAKFAST", "LUNCH"]
    meals_included = models.JSONField(default=list)
    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'packages'
        ordering = ['mess_facility__name', 'price']

    def __str__(self):
        return f"{self.name} ({self.mess_facility.name})"

    def includes_meal(self, meal):
        return meal in (self.meals_included or [])


class MenuItem(models.Model):
    """À la carte item students can order and pay for."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    mess_facility = models.ForeignKey(MessFacility, on_delete=models.CASCADE, related_name='menu_items')
    name = models.CharField(max_length=200)
    description = models.TextField(blank=True)
    price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.00'))]
    )
    meal_type = models.CharField(max_length=10, choices=MealType.choices)
    is_available = models.BooleanField(default=True)
    image_url = models.CharField(max_length=500, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'menu_items'
        ordering = ['name']

    def __str__(self):
        return f"{self.name} - {self.price}"


class OrderStatus(models.TextChoices):
    PENDING = 'PENDING', 'Pending'
    CONFIRMED = 'CONFIRMED', 'Confirmed'
    PREPARED = 'PREPARED', 'Prepared'
    SERVED = 'SERVED', 'Served'
    CANCELLED = 'CANCELLED', 'Cancelled'


class OrderPaymentStatus(models.TextChoices):
    PENDING = 'PENDING', 'Pending'
    PAID = 'PAID', 'Paid'
    FAILED = 'FAILED', 'Failed'


def generate_order_number():
    """ORD + epoch milliseconds + 4 random uppercase alphanumerics."""
    millis = int(timezone.now().timestamp() * 1000)
    alphabet = string.ascii_uppercase + string.digits
    suffix = ''.join(secrets.choice(alphabet) for _ in range(4))
    return f"ORD{millis}{suffix}"


class Order(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    order_number = models.CharField(max_length=40, unique=True, default=generate_order_number)
    student = models.ForeignKey('students.Student', on_delete=models.CASCADE, related_name='orders')
    mess_facility = models.ForeignKey(MessFacility, on_delete=models.PROTECT, related_name='orders')
    meal_type = models.CharField(max_length=10, choices=MealType.choices)
    total_amount = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal('0.00'))
    special_instructions = models.TextField(blank=True)

    status = models.CharField(max_length=10, choices=OrderStatus.choices, default=OrderStatus.PENDING)
    payment_status = models.CharField(
        max_length=10,
        choices=OrderPaymentStatus.choices,
        default=OrderPaymentStatus.PENDING
    )
    razorpay_order_id = models.CharField(max_length=100, blank=True, db_index=True)
    razorpay_payment_id = models.CharField(max_length=100, blank=True)

    served_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'orders'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['status', 'payment_status'], name='orders_status_idx'),
            models.Index(fields=['mess_facility', 'created_at'], name='orders_facility_created_idx'),
        ]

    def __str__(self):
        return self.order_number


class OrderItem(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    order = models.ForeignKey(Order, on_delete=models.CASCADE, related_name='items')
    menu_item = models.ForeignKey(MenuItem, on_delete=models.PROTECT, related_name='order_items')
    quantity = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    unit_price = models.DecimalField(max_digits=10, decimal_places=2)
    total_price = models.DecimalField(max_digits=10, decimal_places=2)
    special_instructions = models.CharField(max_length=255, blank=True)

    class Meta:
        db_table = 'order_items'

    def __str__(self):
        return f"{self.quantity} x {self.menu_item.name}"


ORDER_QR_VALIDITY = timedelta(hours=24)


class OrderQRCode(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    order = models.ForeignKey(Order, on_delete=models.CASCADE, related_name='qr_codes')
    qr_code_data = models.CharField(max_length=120, unique=True)
    expires_at = models.DateTimeField()
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'order_qr_codes'
        ordering = ['-created_at']

    @classmethod
    def issue_for(cls, order):
        now = timezone.now()
        stamp = int(now.timestamp() * 1000)
        # codes are unique; two issues in the same millisecond take the next one
        while cls.objects.filter(qr_code_data=f"ORDER_{order.id}_{stamp}").exists():
            stamp += 1
        return cls.objects.create(
            order=order,
            qr_code_data=f"ORDER_{order.id}_{stamp}",
            expires_at=now + ORDER_QR_VALIDITY,
        )

    def is_expired(self):
        return timezone.now() >= self.expires_at
