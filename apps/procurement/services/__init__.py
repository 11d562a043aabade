"""Services for procurement business logic."""

from .exceptions import (
    ProcurementServiceError,
    PurchaseOrderNotFoundError,
    EmptyOrderError,
    DuplicateLineError,
    PurchaseOrderLockedError,
    PurchaseOrderClosedError,
    InvalidReceiptLineError,
    OverReceiptError,
)
from .purchase_orders import (
    calculate_totals,
    create_purchase_order,
    update_purchase_order,
    delete_purchase_order,
    reorder_suggestions,
)
from .goods_receipts import create_goods_receipt

__all__ = [
    # Exceptions
    'ProcurementServiceError',
    'PurchaseOrderNotFoundError',
    'EmptyOrderError',
    'DuplicateLineError',
    'PurchaseOrderLockedError',
    'PurchaseOrderClosedError',
    'InvalidReceiptLineError',
    'OverReceiptError',
    # Services
    'calculate_totals',
    'create_purchase_order',
    'update_purchase_order',
    'delete_purchase_order',
    'reorder_suggestions',
    'create_goods_receipt',
]
