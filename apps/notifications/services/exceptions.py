"""Domain-specific exceptions for notification services."""


class NotificationServiceError(Exception):
    """Base exception for notification services."""
    pass


class NotificationNotFoundError(NotificationServiceError):
    """Raised when a notification doesn't exist or belongs to another student."""
    pass
