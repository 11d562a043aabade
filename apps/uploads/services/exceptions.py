"""Domain-specific exceptions for CSV import services."""


class UploadServiceError(Exception):
    """Base exception for upload services."""
    pass


class InvalidUploadTypeError(UploadServiceError):
    """Raised when the upload type has no processor."""
    pass


class RowError(UploadServiceError):
    """Raised by a row processor; the message lands in the upload's error log."""
    pass
