"""Staff account management service."""

import logging
from typing import Optional

from django.db import transaction
from django.contrib.auth import get_user_model

from apps.accounts.models import Role, UserStatus

from .audit import record_activity
from .exceptions import DuplicateEmailError, PasswordConfirmationError

User = get_user_model()

logger = logging.getLogger(__name__)


@transaction.atomic
def create_staff_user(
    *,
    email: str,
    password: str,
    name: str,
    role: str,
    phone: str = '',
    status: str = UserStatus.ACTIVE,
    mess_facility=None,
    created_by: Optional[User] = None,
) -> User:
    """
    Create a back-office user.

    Raises:
        DuplicateEmailError: If a user with this email exists
    """
    if User.objects.filter(email__iexact=email).exists():
        raise DuplicateEmailError("User already exists")

    user = User.objects.create_user(
        email=email,
        password=password,
        name=name,
        role=role,
        phone=phone,
        status=status,
        mess_facility=mess_facility,
    )
    record_activity(
        user=created_by,
        action='CREATE',
        entity='User',
        entity_id=user.id,
        details={'email': user.email, 'role': user.role},
    )
    logger.info("Created %s user %s", role, user.email)
    return user


def create_scanner_user(*, email: str, password: str, name: str, mess_facility, created_by: User) -> User:
    """
    Create a SCANNER account bound to a mess facility.

    Scanner devices log in with these credentials and can only validate
    meal coupons and orders.
    """
    return create_staff_user(
        email=email,
        password=password,
        name=name,
        role=Role.SCANNER,
        mess_facility=mess_facility,
        created_by=created_by,
    )


@transaction.atomic
def change_password(*, user: User, current_password: str, new_password: str) -> None:
    """
    Change a user's password after confirming the current one.

    Raises:
        PasswordConfirmationError: If current_password is incorrect
    """
    user = User.objects.select_for_update().get(id=user.id)

    if not user.check_password(current_password):
        raise PasswordConfirmationError("Current password is incorrect")

    user.set_password(new_password)
    user.save(update_fields=['password', 'updated_at'])
