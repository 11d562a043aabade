import pytest
from unittest.mock import patch
from django.utils import timezone
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import Role, User
from apps.mess.services import create_order, mark_order_paid
from apps.meals.models import MealType


def _at(hour):
    return timezone.localtime().replace(hour=hour, minute=0, second=0, microsecond=0)


@pytest.fixture
def lunch_time():
    """Freeze the scanner clock at 13:00 today."""
    with patch('apps.scanner.services.local_now', return_value=_at(13)):
        yield


@pytest.fixture
def between_meals():
    with patch('apps.scanner.services.local_now', return_value=_at(11)):
        yield


@pytest.fixture
def scanner_user(facility):
    return User.objects.create_user(
        email='scanner@example.com',
        password='TestPass123!',
        name='Counter One',
        role=Role.SCANNER,
        mess_facility=facility,
    )


@pytest.fixture
def scanner_client(scanner_user):
    client = APIClient()
    refresh = RefreshToken.for_user(scanner_user)
    client.credentials(HTTP_AUTHORIZATION=f"Bearer {refresh.access_token}")
    return client


@pytest.fixture
def paid_order(student, facility, menu_item):
    order, _ = create_order(
        student=student, mess_facility=facility, meal_type=MealType.LUNCH,
        lines=[{'menu_item': menu_item, 'quantity': 1}],
    )
    order, _ = mark_order_paid(order=order, payment_id='pay_1')
    return order
