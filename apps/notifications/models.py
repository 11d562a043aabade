from django.db import models
import uuid


class NotificationType(models.TextChoices):
    GENERAL = 'general', 'General'
    RATING = 'rating', 'Rating request'
    ATTENDANCE = 'attendance', 'Attendance request'
    SUBSCRIPTION = 'subscription', 'Subscription'
    ORDER = 'order', 'Order'
    PAYMENT = 'payment', 'Payment'


class Notification(models.Model):
    """In-app notification; a null student means it is broadcast to everyone."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    student = models.ForeignKey(
        'students.Student',
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name='notifications'
    )
    title = models.CharField(max_length=200)
    message = models.TextField()
    type = models.CharField(max_length=20, choices=NotificationType.choices, default=NotificationType.GENERAL)
    meal_plan = models.ForeignKey(
        'meals.MealPlan',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='notifications'
    )
    is_read = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'notifications'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['student', 'is_read'], name='notif_student_read_idx'),
        ]

    def __str__(self):
        return self.title


class PushToken(models.Model):
    """Expo push token registered by a student's device."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    student = models.ForeignKey('students.Student', on_delete=models.CASCADE, related_name='push_tokens')
    token = models.CharField(max_length=255)
    platform = models.CharField(max_length=20, default='expo')
    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'push_tokens'
        unique_together = [['student', 'token']]

    def __str__(self):
        return f"{self.student} {self.platform}"
