import pytest
from decimal import Decimal
from django.urls import reverse
from rest_framework import status
from apps.inventory.models import Alert, AlertStatus, AlertType, Item, Unit


# =============================================================================
# Master Data Tests
# =============================================================================

@pytest.mark.django_db
class TestMasterData:
    """Tests for /api/inventory/units/ and friends."""

    def test_staff_can_list_units(self, cook_client, unit):
        url = reverse('inventory:unit-list')
        response = cook_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data[0]['symbol'] == 'kg'

    def test_admin_creates_unit(self, admin_client):
        url = reverse('inventory:unit-list')
        response = admin_client.post(url, {'name': 'Litre', 'symbol': 'L'})

        assert response.status_code == status.HTTP_201_CREATED
        assert Unit.objects.filter(name='Litre').exists()

    def test_store_cannot_create_unit(self, store_client):
        url = reverse('inventory:unit-list')
        response = store_client.post(url, {'name': 'Litre', 'symbol': 'L'})

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_cannot_delete_unit_in_use(self, admin_client, item):
        url = reverse('inventory:unit-detail', args=[item.unit_id])
        response = admin_client.delete(url)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['error'] == 'Cannot delete unit with existing items'

    def test_delete_unused_category(self, admin_client, category):
        url = reverse('inventory:category-detail', args=[category.id])
        response = admin_client.delete(url)

        assert response.status_code == status.HTTP_204_NO_CONTENT


# =============================================================================
# Item Tests
# =============================================================================

@pytest.mark.django_db
class TestItems:
    """Tests for /api/inventory/items/"""

    def test_list_includes_stock(self, store_client, stocked_item):
        url = reverse('inventory:item-list')
        response = store_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        row = response.data['results'][0]
        assert Decimal(str(row['total_stock'])) == Decimal('100')
        assert row['has_alerts'] is False

    def test_low_stock_filter(self, store_client, item, stocked_item, unit, category):
        Item.objects.create(name='Dal', sku='DAL-01', category=category, unit=unit, reorder_point=Decimal('5'))
        url = reverse('inventory:item-list')
        response = store_client.get(url, {'low_stock': 'true'})

        # Dal has no stock (0 <= 5), rice holds 100 (> 50)
        assert [row['sku'] for row in response.data['results']] == ['DAL-01']

    def test_search(self, store_client, item):
        url = reverse('inventory:item-list')
        response = store_client.get(url, {'search': 'rice-0'})

        assert response.data['count'] == 1

    def test_store_creates_item(self, store_client, unit, category):
        url = reverse('inventory:item-list')
        response = store_client.post(url, {
            'name': 'Sugar',
            'sku': 'SUG-01',
            'category': str(category.id),
            'unit': str(unit.id),
            'reorder_point': '10',
        })

        assert response.status_code == status.HTTP_201_CREATED
        assert Item.objects.filter(sku='SUG-01').exists()

    def test_cook_cannot_create_item(self, cook_client, unit, category):
        url = reverse('inventory:item-list')
        response = cook_client.post(url, {
            'name': 'Sugar',
            'sku': 'SUG-01',
            'category': str(category.id),
            'unit': str(unit.id),
        })

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_cannot_delete_item_with_history(self, store_client, stocked_item):
        url = reverse('inventory:item-detail', args=[stocked_item.id])
        response = store_client.delete(url)

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_batches_in_fifo_order(self, store_client, stocked_item):
        url = reverse('inventory:item-batches', args=[stocked_item.id])
        response = store_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert [b['batch_no'] for b in response.data] == ['B-EARLY', 'B-LATE']

    def test_ledger(self, store_client, stocked_item):
        url = reverse('inventory:item-ledger', args=[stocked_item.id])
        response = store_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert len(response.data) == 2

    def test_unauthenticated(self, api_client):
        url = reverse('inventory:item-list')
        response = api_client.get(url)

        assert response.status_code == status.HTTP_401_UNAUTHORIZED


# =============================================================================
# Alert Tests
# =============================================================================

@pytest.mark.django_db
class TestAlerts:
    """Tests for /api/inventory/alerts/"""

    def test_generate(self, store_client, item):
        url = reverse('inventory:alert-generate')
        response = store_client.post(url)

        assert response.status_code == status.HTTP_201_CREATED
        assert response.data['count'] == 1
        assert response.data['alerts'][0]['type'] == AlertType.LOW_STOCK

    def test_list_open_only(self, store_client, item):
        Alert.objects.create(item=item, type=AlertType.LOW_STOCK, message='low')
        Alert.objects.create(item=item, type=AlertType.EXPIRY, message='old', status=AlertStatus.DISMISSED)

        url = reverse('inventory:alert-list')
        response = store_client.get(url)

        assert [a['message'] for a in response.data] == ['low']

    def test_dismiss(self, chef_client, item):
        alert = Alert.objects.create(item=item, type=AlertType.LOW_STOCK, message='low')
        url = reverse('inventory:alert-dismiss', args=[alert.id])
        response = chef_client.post(url)

        assert response.status_code == status.HTTP_200_OK
        alert.refresh_from_db()
        assert alert.status == AlertStatus.DISMISSED
