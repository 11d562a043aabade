"""Domain-specific exceptions for procurement services."""


class ProcurementServiceError(Exception):
    """Base exception for procurement services."""
    pass


class PurchaseOrderNotFoundError(ProcurementServiceError):
    """Raised when a purchase order does not exist."""
    pass


class EmptyOrderError(ProcurementServiceError):
    """Raised when a purchase order or GRN has no lines."""
    pass


class DuplicateLineError(ProcurementServiceError):
    """Raised when the same item appears twice in one document."""
    pass


class PurchaseOrderLockedError(ProcurementServiceError):
    """Raised when editing or deleting a PO that already has receipts."""
    pass


class PurchaseOrderClosedError(ProcurementServiceError):
    """Raised when receiving against a CLOSED purchase order."""
    pass


class InvalidReceiptLineError(ProcurementServiceError):
    """Raised when a GRN line references a line of another purchase order."""
    pass


class OverReceiptError(ProcurementServiceError):
    """Raised when a GRN line exceeds the PO line's outstanding quantity."""
    pass
