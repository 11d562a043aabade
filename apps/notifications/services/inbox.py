"""Student-facing notification inbox."""

from django.db.models import Q

from apps.notifications.models import Notification, PushToken

from .exceptions import NotificationNotFoundError

INBOX_LIMIT = 50


def visible_to(student):
    """Notifications addressed to the student plus broadcasts."""
    return Notification.objects.filter(Q(student=student) | Q(student__isnull=True))


def inbox(student, limit=INBOX_LIMIT):
    return visible_to(student).select_related('meal_plan').order_by('-created_at')[:limit]


def unread_count(student) -> int:
    return visible_to(student).filter(is_read=False).count()


def mark_read(*, notification_id, student) -> Notification:
    """
    Mark a notification as read.

    Raises:
        NotificationNotFoundError: If the notification isn't visible to the student
    """
    try:
        notification = visible_to(student).get(id=notification_id)
    except Notification.DoesNotExist:
        raise NotificationNotFoundError('Notification not found')

    if not notification.is_read:
        notification.is_read = True
        notification.save(update_fields=['is_read'])
    return notification


def register_push_token(*, student, token: str, platform: str = 'expo') -> PushToken:
    """Upsert a device token and re-activate it."""
    push_token, _ = PushToken.objects.update_or_create(
        student=student,
        token=token,
        defaults={'platform': platform, 'is_active': True},
    )
    return push_token
