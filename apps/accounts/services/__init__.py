"""Services for accounts business logic."""

from .exceptions import (
    AccountsServiceError,
    InvalidCredentialsError,
    InactiveAccountError,
    DuplicateEmailError,
    PasswordConfirmationError,
)
from .user_authentication import authenticate_user
from .account_management import create_staff_user, create_scanner_user, change_password
from .audit import record_activity

__all__ = [
    # Exceptions
    'AccountsServiceError',
    'InvalidCredentialsError',
    'InactiveAccountError',
    'DuplicateEmailError',
    'PasswordConfirmationError',
    # Services
    'authenticate_user',
    'create_staff_user',
    'create_scanner_user',
    'change_password',
    'record_activity',
]
