"""Services for in-app notifications, push delivery and reminder jobs."""

from .exceptions import NotificationServiceError, NotificationNotFoundError
from .push import send_push, notify
from .inbox import inbox, unread_count, mark_read, register_push_token
from .jobs import (
    JOBS,
    send_rating_requests,
    send_attendance_requests,
    send_expiry_reminders,
)

__all__ = [
    # Exceptions
    'NotificationServiceError',
    'NotificationNotFoundError',
    # Services
    'send_push',
    'notify',
    'inbox',
    'unread_count',
    'mark_read',
    'register_push_token',
    # Jobs
    'JOBS',
    'send_rating_requests',
    'send_attendance_requests',
    'send_expiry_reminders',
]
