import pytest
from decimal import Decimal
from django.utils import timezone
from apps.indents.services import approve_indent, create_indent
from apps.meals.models import MealType


@pytest.fixture
def pending_indent(chef_user, stocked_item):
    """Chef's indent for 40 kg of rice for today's lunch."""
    return create_indent(
        user=chef_user,
        requested_for_date=timezone.localdate(),
        meal=MealType.LUNCH,
        lines=[{'item': stocked_item, 'requested_qty': Decimal('40')}],
    )


@pytest.fixture
def approved_indent(pending_indent, admin_user):
    return approve_indent(indent_id=pending_indent.id, user=admin_user)
