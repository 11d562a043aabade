"""
Expo push delivery.

Push is best effort: the in-app Notification row is the source of truth,
so delivery failures are logged and never raised to the caller.
"""

import logging

import requests
from django.conf import settings
from django.db import transaction

from apps.notifications.models import Notification, NotificationType, PushToken

logger = logging.getLogger(__name__)


def send_push(student, title: str, body: str, data=None) -> int:
    """
    Send a push message to every active device of a student.

    Returns:
        Number of devices the message was handed to
    """
    tokens = list(
        PushToken.objects.filter(student=student, is_active=True).values_list('token', flat=True)
    )
    if not tokens:
        return 0

    messages = [
        {'to': token, 'title': title, 'body': body, 'data': data or {}, 'sound': 'default'}
        for token in tokens
    ]
    try:
        response = requests.post(
            settings.EXPO_PUSH_URL,
            json=messages,
            headers={'Accept': 'application/json'},
            timeout=settings.OUTBOUND_HTTP_TIMEOUT,
        )
        response.raise_for_status()
    except requests.RequestException as e:
        logger.warning("Push to %s failed: %s", student.register_number, e)
        return 0

    return len(tokens)


def notify(
    *,
    student,
    title: str,
    message: str,
    type: str = NotificationType.GENERAL,
    meal_plan=None,
    push: bool = True,
    data=None
) -> Notification:
    """
    Store an in-app notification and optionally push it to the student's devices.

    The push is sent once the surrounding transaction commits, so a rolled
    back caller never reaches the student. A ``student`` of None creates a
    broadcast notification (never pushed).
    """
    notification = Notification.objects.create(
        student=student,
        title=title,
        message=message,
        type=type,
        meal_plan=meal_plan,
    )
    if push and student is not None:
        payload = {'type': type, 'notification_id': str(notification.id)}
        payload.update(data or {})
        transaction.on_commit(lambda: send_push(student, title, message, payload))
    return notification
