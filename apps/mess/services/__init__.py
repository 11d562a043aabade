"""Services for mess facilities and food orders."""

from .exceptions import (
    MessServiceError,
    EmptyOrderError,
    MenuItemUnavailableError,
    OrderNotFoundError,
)
from .orders import create_order, update_order_status, mark_order_paid
from .qr import render_qr_png

__all__ = [
    # Exceptions
    'MessServiceError',
    'EmptyOrderError',
    'MenuItemUnavailableError',
    'OrderNotFoundError',
    # Services
    'create_order',
    'update_order_status',
    'mark_order_paid',
    'render_qr_png',
]
