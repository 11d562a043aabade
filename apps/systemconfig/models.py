from django.db import models
from datetime import time
import uuid


class SystemConfig(models.Model):
    """Key/value runtime setting editable by admins."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    key = models.CharField(max_length=100, unique=True)
    value = models.TextField(blank=True)
    category = models.CharField(max_length=50, default='general')
    description = models.CharField(max_length=255, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'system_config'
        ordering = ['category', 'key']

    def __str__(self):
        return f"{self.key}={self.value}"


class MealAttendanceSettings(models.Model):
    """Singleton controlling when students may mark tomorrow's attendance."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    is_mandatory = models.BooleanField(default=False)
    reminder_start_time = models.TimeField(default=time(15, 0))
    reminder_end_time = models.TimeField(default=time(22, 0))
    cutoff_time = models.TimeField(default=time(23, 0))

    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'meal_attendance_settings'
        verbose_name_plural = 'meal attendance settings'

    def __str__(self):
        return f"Attendance cut-off {self.cutoff_time:%H:%M}"

    @classmethod
    def load(cls):
        """Return the stored settings or an unsaved instance with defaults."""
        return cls.objects.order_by('-updated_at').first() or cls()
