"""Domain-specific exceptions for inventory services."""


class InventoryServiceError(Exception):
    """Base exception for inventory services."""
    pass


class InvalidQuantityError(InventoryServiceError):
    """Raised when a stock movement quantity is not positive."""
    pass


class InsufficientStockError(InventoryServiceError):
    """Raised when a batch or item cannot cover the requested quantity."""
    pass


class BatchMismatchError(InventoryServiceError):
    """Raised when a batch does not belong to the item being moved."""
    pass


class AlertNotFoundError(InventoryServiceError):
    """Raised when an alert does not exist."""
    pass
