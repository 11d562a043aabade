"""Services for inventory business logic."""

from .exceptions import (
    InventoryServiceError,
    InvalidQuantityError,
    InsufficientStockError,
    BatchMismatchError,
    AlertNotFoundError,
)
from .stock import fifo_batches, receive_stock, issue_stock, allocate_fifo
from .alerts import generate_alerts, dismiss_alert

__all__ = [
    # Exceptions
    'InventoryServiceError',
    'InvalidQuantityError',
    'InsufficientStockError',
    'BatchMismatchError',
    'AlertNotFoundError',
    # Services
    'fifo_batches',
    'receive_stock',
    'issue_stock',
    'allocate_fifo',
    'generate_alerts',
    'dismiss_alert',
]
