from django.db import models
from django.conf import settings
from django.utils import timezone
from datetime import timedelta
from decimal import Decimal
import secrets
import string
import uuid


class UserType(models.TextChoices):
    STUDENT = 'STUDENT', 'Student'
    EMPLOYEE = 'EMPLOYEE', 'Employee'


def _random_token(length):
    alphabet = string.ascii_uppercase + string.digits
    return ''.join(secrets.choice(alphabet) for _ in range(length))


class Student(models.Model):
    """
    Mess customer (student or employee) using the mobile app.

    Students are not Django users: they authenticate with an OTP and a
    separate student JWT, so the model exposes ``is_authenticated`` for
    DRF's request.user contract.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    register_number = models.CharField(max_length=50, unique=True)
    name = models.CharField(max_length=150)
    mobile_number = models.CharField(max_length=20, blank=True, db_index=True)
    email = models.EmailField(blank=True)
    room_number = models.CharField(max_length=20, blank=True)
    department = models.CharField(max_length=100, blank=True)

    user_type = models.CharField(max_length=10, choices=UserType.choices, default=UserType.STUDENT)
    employee_id = models.CharField(max_length=50, blank=True)
    is_hosteler = models.BooleanField(default=False)
    mobile_login_enabled = models.BooleanField(default=True)

    mess_facility = models.ForeignKey(
        'mess.MessFacility',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='students'
    )

    qr_code = models.CharField(max_length=100, unique=True, editable=False)
    photo_url = models.CharField(max_length=500, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'students'
        ordering = ['name']
        indexes = [
            models.Index(fields=['user_type', 'is_hosteler'], name='students_type_hosteler_idx'),
        ]

    def __str__(self):
        return f"{self.name} ({self.register_number})"

    def save(self, *args, **kwargs):
        if not self.qr_code:
            self.qr_code = f"QR_{self.register_number}_{_random_token(8)}"
        super().save(*args, **kwargs)

    @property
    def is_authenticated(self):
        return True

    @property
    def is_anonymous(self):
        return False

    @property
    def coupon_code(self):
        """Code encoded in the mess coupon QR shown by the app."""
        return f"SUB-{self.register_number}"

    def get_active_subscription(self, on_date=None):
        on_date = on_date or timezone.localdate()
        return (
            self.subscriptions
            .active_on(on_date)
            .select_related('package', 'mess_facility')
            .order_by('-start_date')
            .first()
        )


class StudentOTP(models.Model):
    """One-time password issued for mobile login."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    student = models.ForeignKey(Student, on_delete=models.CASCADE, related_name='otps')
    code = models.CharField(max_length=6)
    expires_at = models.DateTimeField()
    attempts = models.PositiveSmallIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'student_otps'
        ordering = ['-created_at']

    @classmethod
    def issue(cls, student):
        """Replace any outstanding OTP with a fresh 6 digit code."""
        cls.objects.filter(student=student).delete()
        return cls.objects.create(
            student=student,
            code=f"{secrets.randbelow(900000) + 100000}",
            expires_at=timezone.now() + timedelta(minutes=settings.OTP_TTL_MINUTES),
        )

    def is_expired(self):
        return timezone.now() > self.expires_at


class SubscriptionStatus(models.TextChoices):
    ACTIVE = 'ACTIVE', 'Active'
    EXPIRED = 'EXPIRED', 'Expired'
    SUSPENDED = 'SUSPENDED', 'Suspended'
    CANCELLED = 'CANCELLED', 'Cancelled'


class SubscriptionQuerySet(models.QuerySet):
    def active_on(self, on_date):
        return self.filter(
            status=SubscriptionStatus.ACTIVE,
            start_date__lte=on_date,
            end_date__gte=on_date,
        )


class Subscription(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    student = models.ForeignKey(Student, on_delete=models.CASCADE, related_name='subscriptions')
    package = models.ForeignKey('mess.Package', on_delete=models.PROTECT, related_name='subscriptions')
    mess_facility = models.ForeignKey(
        'mess.MessFacility',
        on_delete=models.PROTECT,
        related_name='subscriptions'
    )
    start_date = models.DateField()
    end_date = models.DateField()
    status = models.CharField(
        max_length=10,
        choices=SubscriptionStatus.choices,
        default=SubscriptionStatus.ACTIVE
    )
    amount_paid = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal('0.00'))

    razorpay_order_id = models.CharField(max_length=100, blank=True, db_index=True)
    razorpay_payment_id = models.CharField(max_length=100, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = SubscriptionQuerySet.as_manager()

    class Meta:
        db_table = 'subscriptions'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['status', 'start_date', 'end_date'], name='subs_status_dates_idx'),
            models.Index(fields=['mess_facility', 'status'], name='subs_facility_status_idx'),
        ]

    def __str__(self):
        return f"{self.student} - {self.package.name} ({self.status})"

    def days_remaining(self, on_date=None):
        on_date = on_date or timezone.localdate()
        return max(0, (self.end_date - on_date).days)


class TransactionStatus(models.TextChoices):
    PENDING = 'PENDING', 'Pending'
    SUCCESS = 'SUCCESS', 'Success'
    FAILED = 'FAILED', 'Failed'


class SubscriptionTransaction(models.Model):
    """Payment attempt recorded against a subscription."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    subscription = models.ForeignKey(Subscription, on_delete=models.CASCADE, related_name='transactions')
    razorpay_order_id = models.CharField(max_length=100, blank=True, db_index=True)
    razorpay_payment_id = models.CharField(max_length=100, blank=True)
    amount = models.DecimalField(max_digits=10, decimal_places=2)
    status = models.CharField(
        max_length=10,
        choices=TransactionStatus.choices,
        default=TransactionStatus.PENDING
    )
    webhook_data = models.JSONField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'subscription_transactions'
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.razorpay_order_id} {self.amount} ({self.status})"
