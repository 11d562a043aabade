import pytest
from datetime import timedelta
from decimal import Decimal
from django.utils import timezone
from rest_framework.test import APIClient
from rest_framework_simplejwt.tokens import RefreshToken
from apps.accounts.models import User, Role
from apps.inventory.models import Item, ItemCategory, Unit
from apps.inventory.services import receive_stock
from apps.mess.models import MenuItem, MessFacility, Package
from apps.meals.models import Dish, MealPlan, MealPlanDish, MealType
from apps.students.authentication import StudentAccessToken
from apps.students.models import Student, Subscription, SubscriptionStatus


def staff_client(user):
    """Return an API client authenticated as a staff user."""
    client = APIClient()
    refresh = RefreshToken.for_user(user)
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {refresh.access_token}')
    return client


def student_client(student):
    """Return an API client authenticated with a student token."""
    client = APIClient()
    token = StudentAccessToken.for_student(student)
    client.credentials(HTTP_AUTHORIZATION=f'Bearer {token}')
    return client


@pytest.fixture
def api_client():
    """Return an unauthenticated API client."""
    return APIClient()


# =============================================================================
# Staff users
# =============================================================================

def _make_user(role, email):
    return User.objects.create_user(
        email=email,
        password='TestPass123!',
        name=f'{role.title()} User',
        role=role,
    )


@pytest.fixture
def admin_user(db):
    return _make_user(Role.ADMIN, 'admin@example.com')


@pytest.fixture
def store_user(db):
    return _make_user(Role.STORE, 'store@example.com')


@pytest.fixture
def chef_user(db):
    return _make_user(Role.CHEF, 'chef@example.com')


@pytest.fixture
def cook_user(db):
    return _make_user(Role.COOK, 'cook@example.com')


@pytest.fixture
def fnb_user(db):
    return _make_user(Role.FNB_MANAGER, 'fnb@example.com')


@pytest.fixture
def superadmin_user(db):
    return _make_user(Role.SUPERADMIN, 'superadmin@example.com')


@pytest.fixture
def admin_client(admin_user):
    return staff_client(admin_user)


@pytest.fixture
def store_client(store_user):
    return staff_client(store_user)


@pytest.fixture
def chef_client(chef_user):
    return staff_client(chef_user)


@pytest.fixture
def cook_client(cook_user):
    return staff_client(cook_user)


@pytest.fixture
def fnb_client(fnb_user):
    return staff_client(fnb_user)


@pytest.fixture
def superadmin_client(superadmin_user):
    return staff_client(superadmin_user)


# =============================================================================
# Mess and students
# =============================================================================

@pytest.fixture
def facility(db):
    """Create an active mess facility."""
    return MessFacility.objects.create(name='North Mess', location='Block A', capacity=200)


@pytest.fixture
def package(facility):
    """Create a 30-day package with breakfast, lunch and dinner."""
    return Package.objects.create(
        name='Monthly Veg',
        mess_facility=facility,
        duration_days=30,
        price=Decimal('3000.00'),
        meals_included=[MealType.BREAKFAST, MealType.LUNCH, MealType.DINNER],
    )


@pytest.fixture
def student(facility):
    """Create a hosteler assigned to the facility."""
    return Student.objects.create(
        register_number='21CS001',
        name='Asha Kumar',
        mobile_number='9876543210',
        email='asha@example.com',
        room_number='A-101',
        is_hosteler=True,
        mess_facility=facility,
    )


@pytest.fixture
def day_scholar(db):
    """Create a non-hosteler student."""
    return Student.objects.create(
        register_number='21CS002',
        name='Ravi Das',
        mobile_number='9876500000',
        is_hosteler=False,
    )


@pytest.fixture
def subscription(student, package):
    """Create an ACTIVE subscription covering today."""
    today = timezone.localdate()
    return Subscription.objects.create(
        student=student,
        package=package,
        mess_facility=package.mess_facility,
        start_date=today - timedelta(days=5),
        end_date=today + timedelta(days=25),
        status=SubscriptionStatus.ACTIVE,
        amount_paid=package.price,
    )


@pytest.fixture
def student_api_client(student):
    return student_client(student)


# =============================================================================
# Inventory
# =============================================================================

@pytest.fixture
def unit(db):
    return Unit.objects.create(name='Kilogram', symbol='kg')


@pytest.fixture
def category(db):
    return ItemCategory.objects.create(name='Grains')


@pytest.fixture
def item(unit, category):
    """Create a rice item with reorder point 50 and no stock."""
    return Item.objects.create(
        name='Rice',
        sku='RICE-01',
        category=category,
        unit=unit,
        moq=Decimal('100'),
        reorder_point=Decimal('50'),
        cost_per_unit=Decimal('50.00'),
    )


@pytest.fixture
def stocked_item(item, store_user):
    """Rice with two batches: 30 expiring in 10 days, 70 expiring in 60."""
    today = timezone.localdate()
    receive_stock(
        item=item, batch_no='B-EARLY', qty=Decimal('30'), unit_cost=Decimal('48.00'),
        ref_id='seed', exp_date=today + timedelta(days=10), user=store_user,
    )
    receive_stock(
        item=item, batch_no='B-LATE', qty=Decimal('70'), unit_cost=Decimal('52.00'),
        ref_id='seed', exp_date=today + timedelta(days=60), user=store_user,
    )
    return item


# =============================================================================
# Meals
# =============================================================================

@pytest.fixture
def dish(db):
    return Dish.objects.create(name='Veg Biryani', category='Main', cost_per_5_students=Decimal('150.00'))


@pytest.fixture
def lunch_plan(facility, dish):
    """Lunch plan for today's weekday at the facility."""
    plan = MealPlan.objects.create(
        mess_facility=facility,
        day=timezone.localdate().weekday(),
        meal=MealType.LUNCH,
        planned_students=10,
    )
    MealPlanDish.objects.create(meal_plan=plan, dish=dish, sequence_order=1, is_main_dish=True)
    return plan


@pytest.fixture
def menu_item(facility):
    return MenuItem.objects.create(
        mess_facility=facility,
        name='Veg Thali',
        price=Decimal('90.00'),
        meal_type=MealType.LUNCH,
    )


@pytest.fixture
def day_scholar_client(day_scholar):
    return student_client(day_scholar)
