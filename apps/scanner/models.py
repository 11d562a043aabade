from django.db import models
import uuid

from apps.meals.models import MealType


class ScanResult(models.TextChoices):
    MESS_COUPON_VALID = 'MESS_COUPON_VALID', 'Mess coupon valid'
    ORDER_VALID = 'ORDER_VALID', 'Order valid'


class ScannerLog(models.Model):
    """Successful scan recorded at a mess counter."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    device_id = models.CharField(max_length=100, blank=True)
    student = models.ForeignKey(
        'students.Student',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='scan_logs'
    )
    mess_facility = models.ForeignKey(
        'mess.MessFacility',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='scan_logs'
    )
    qr_code_scanned = models.CharField(max_length=120)
    scan_result = models.CharField(max_length=20, choices=ScanResult.choices)
    meal_type = models.CharField(max_length=10, choices=MealType.choices)
    access_granted = models.BooleanField(default=True)

    # Snapshot for the counter display
    student_name = models.CharField(max_length=150, blank=True)
    student_photo_url = models.CharField(max_length=500, blank=True)

    scanned_by = models.ForeignKey(
        'accounts.User',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='scan_logs'
    )
    scanned_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'scanner_logs'
        ordering = ['-scanned_at']
        indexes = [
            models.Index(fields=['scanned_at'], name='scans_scanned_at_idx'),
            models.Index(fields=['meal_type', 'scan_result'], name='scans_meal_result_idx'),
        ]

    def __str__(self):
        return f"{self.scan_result} {self.qr_code_scanned}"
