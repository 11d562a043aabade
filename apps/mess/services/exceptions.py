"""Domain-specific exceptions for mess services."""


class MessServiceError(Exception):
    """Base exception for mess services."""
    pass


class EmptyOrderError(MessServiceError):
    """Raised when an order has no items."""
    pass


class MenuItemUnavailableError(MessServiceError):
    """Raised when an ordered menu item is unknown, unavailable or served elsewhere."""
    pass


class OrderNotFoundError(MessServiceError):
    """Raised when an order does not exist."""
    pass
