import pytest
from decimal import Decimal
from django.urls import reverse
from rest_framework import status
from apps.meals.models import MealType
from apps.mess.models import MessFacility, Order, OrderPaymentStatus, OrderStatus, Package
from apps.mess.services import create_order, mark_order_paid


@pytest.fixture
def paid_order(student, facility, menu_item):
    order, _ = create_order(
        student=student, mess_facility=facility, meal_type=MealType.LUNCH,
        lines=[{'menu_item': menu_item, 'quantity': 2}],
    )
    order, _ = mark_order_paid(order=order, payment_id='pay_1')
    return order


@pytest.mark.django_db
class TestFacilities:
    """Tests for /api/mess/facilities/"""

    def test_chef_can_list(self, chef_client, facility):
        url = reverse('mess:facility-list')
        response = chef_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data[0]['name'] == facility.name

    def test_chef_cannot_create(self, chef_client):
        url = reverse('mess:facility-list')
        response = chef_client.post(url, {'name': 'East Mess'})

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_fnb_creates(self, fnb_client):
        url = reverse('mess:facility-list')
        response = fnb_client.post(url, {'name': 'East Mess', 'location': 'Block E', 'capacity': 120})

        assert response.status_code == status.HTTP_201_CREATED
        assert MessFacility.objects.filter(name='East Mess').exists()

    def test_delete_deactivates(self, fnb_client, facility):
        url = reverse('mess:facility-detail', args=[facility.id])
        response = fnb_client.delete(url)

        assert response.status_code == status.HTTP_204_NO_CONTENT
        facility.refresh_from_db()
        assert facility.is_active is False

    def test_delete_blocked_by_active_subscription(self, fnb_client, subscription):
        url = reverse('mess:facility-detail', args=[subscription.mess_facility_id])
        response = fnb_client.delete(url)

        assert response.status_code == status.HTTP_400_BAD_REQUEST


@pytest.mark.django_db
class TestPackages:
    """Tests for /api/mess/packages/"""

    def test_meals_kept_in_serving_order(self, fnb_client, facility):
        url = reverse('mess:package-list')
        response = fnb_client.post(url, {
            'name': 'Evening Pack',
            'mess_facility': str(facility.id),
            'duration_days': 30,
            'price': '1800.00',
            'meals_included': [MealType.DINNER, MealType.SNACKS, MealType.DINNER],
        }, format='json')

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['meals_included'] == [MealType.SNACKS, MealType.DINNER]

    def test_invalid_meal(self, fnb_client, facility):
        url = reverse('mess:package-list')
        response = fnb_client.post(url, {
            'name': 'Bad Pack',
            'mess_facility': str(facility.id),
            'duration_days': 30,
            'price': '100.00',
            'meals_included': ['BRUNCH'],
        }, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_filter_by_facility(self, fnb_client, package):
        other = MessFacility.objects.create(name='South Mess')
        Package.objects.create(
            name='Other', mess_facility=other, duration_days=7, price=Decimal('700'),
            meals_included=[MealType.LUNCH],
        )

        url = reverse('mess:package-list')
        response = fnb_client.get(url, {'mess_facility': str(package.mess_facility_id)})

        assert [p['name'] for p in response.data] == ['Monthly Veg']

    def test_store_forbidden(self, store_client):
        url = reverse('mess:package-list')
        response = store_client.get(url)

        assert response.status_code == status.HTTP_403_FORBIDDEN


@pytest.mark.django_db
class TestOrders:
    """Tests for /api/mess/orders/"""

    def test_lists_paid_orders_only(self, fnb_client, paid_order, student, facility, menu_item):
        create_order(
            student=student, mess_facility=facility, meal_type=MealType.LUNCH,
            lines=[{'menu_item': menu_item, 'quantity': 1}],
        )

        url = reverse('mess:order-list')
        response = fnb_client.get(url)

        assert response.data['count'] == 1
        assert response.data['results'][0]['order_number'] == paid_order.order_number

    def test_update_confirmed_becomes_prepared(self, fnb_client, paid_order):
        url = reverse('mess:order-detail', args=[paid_order.id])
        response = fnb_client.put(url, {'status': OrderStatus.CONFIRMED}, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['status'] == OrderStatus.PREPARED

    def test_update_invalid_status(self, fnb_client, paid_order):
        url = reverse('mess:order-detail', args=[paid_order.id])
        response = fnb_client.put(url, {'status': 'EATEN'}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert Order.objects.get(pk=paid_order.pk).payment_status == OrderPaymentStatus.PAID
