"""Services for bulk CSV imports."""

from .exceptions import (
    UploadServiceError,
    InvalidUploadTypeError,
    RowError,
)
from .csv_import import PROCESSORS, process_csv

__all__ = [
    # Exceptions
    'UploadServiceError',
    'InvalidUploadTypeError',
    'RowError',
    # Services
    'PROCESSORS',
    'process_csv',
]
