import pytest
from apps.accounts.models import User, Role, UserStatus


@pytest.fixture
def inactive_user(db):
    """Create and return a deactivated staff user."""
    return User.objects.create_user(
        email='inactive@example.com',
        password='TestPass123!',
        name='Inactive User',
        role=Role.STORE,
        status=UserStatus.INACTIVE,
    )
