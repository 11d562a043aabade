from django.db import models
import uuid


class UploadType(models.TextChoices):
    ITEMS = 'items', 'Items'
    CATEGORIES = 'categories', 'Categories'
    RECIPES = 'recipes', 'Recipes'
    STUDENTS = 'students', 'Students'
    DISHES = 'dishes', 'Dishes'
    VENDORS = 'vendors', 'Vendors'
    UNITS = 'units', 'Units'
    STORAGE_TYPES = 'storage_types', 'Storage types'
    MEALPLANS = 'mealplans', 'Meal plans'
    SUBSCRIPTIONS = 'subscriptions', 'Subscriptions'


class UploadStatus(models.TextChoices):
    PROCESSING = 'PROCESSING', 'Processing'
    COMPLETED = 'COMPLETED', 'Completed'
    FAILED = 'FAILED', 'Failed'


class CsvUpload(models.Model):
    """Bulk import run with per-row error report."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    upload_type = models.CharField(max_length=20, choices=UploadType.choices)
    filename = models.CharField(max_length=255)
    uploaded_by = models.ForeignKey(
        'accounts.User',
        on_delete=models.SET_NULL,
        null=True,
        related_name='csv_uploads'
    )
    status = models.CharField(max_length=12, choices=UploadStatus.choices, default=UploadStatus.PROCESSING)
    total_rows = models.PositiveIntegerField(default=0)
    successful_rows = models.PositiveIntegerField(default=0)
    failed_rows = models.PositiveIntegerField(default=0)
    # [{"row": 3, "error": "...", "data": {...}}]
    error_log = models.JSONField(default=list, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    completed_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        db_table = 'csv_uploads'
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.upload_type} {self.filename} ({self.status})"
