import pytest
from datetime import time
from django.urls import reverse
from rest_framework import status
from apps.systemconfig.models import MealAttendanceSettings, SystemConfig
from apps.systemconfig.services import get_meal_times, meal_time_range


@pytest.mark.django_db
class TestConfigAPI:
    """Tests for /api/system-config/"""

    def test_put_creates_then_updates(self, admin_client):
        url = reverse('systemconfig:config-detail', args=['support_phone'])

        created = admin_client.put(url, {'value': '044-1234'}, format='json')
        updated = admin_client.put(url, {'value': '044-9999', 'category': 'contact'}, format='json')

        assert created.status_code == status.HTTP_200_OK
        assert created.data['category'] == 'general'
        assert updated.data['value'] == '044-9999'
        assert SystemConfig.objects.get(key='support_phone').category == 'contact'

    def test_staff_can_read(self, chef_client):
        SystemConfig.objects.create(key='support_phone', value='044-1234')

        url = reverse('systemconfig:config-detail', args=['support_phone'])
        response = chef_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['value'] == '044-1234'

    def test_staff_cannot_write(self, chef_client):
        url = reverse('systemconfig:config-detail', args=['support_phone'])
        response = chef_client.put(url, {'value': 'x'}, format='json')

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_missing_key(self, admin_client):
        url = reverse('systemconfig:config-detail', args=['nope'])
        response = admin_client.get(url)

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_delete(self, admin_client):
        SystemConfig.objects.create(key='banner', value='hi')

        url = reverse('systemconfig:config-detail', args=['banner'])
        response = admin_client.delete(url)

        assert response.status_code == status.HTTP_200_OK
        assert not SystemConfig.objects.exists()

    def test_list_admin_only(self, admin_client, fnb_client):
        SystemConfig.objects.create(key='b', value='2', category='x')
        SystemConfig.objects.create(key='a', value='1', category='x')

        response = admin_client.get(reverse('systemconfig:config-list'))

        assert [c['key'] for c in response.data] == ['a', 'b']
        assert fnb_client.get(reverse('systemconfig:config-list')).status_code == status.HTTP_403_FORBIDDEN

    def test_bulk_update(self, admin_client):
        url = reverse('systemconfig:bulk-update')
        response = admin_client.post(url, {
            'settings': [
                {'key': 'a', 'value': '1'},
                {'key': 'b', 'value': '2', 'category': 'ui'},
            ],
        }, format='json')

        assert response.data['count'] == 2
        assert SystemConfig.objects.count() == 2


@pytest.mark.django_db
class TestMealTimesAPI:
    """Tests for /api/system-config/meal-times/"""

    def test_public_read_with_defaults(self, api_client):
        response = api_client.get(reverse('systemconfig:meal-times'))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['lunch_start'] == '12:00'
        assert len(response.data) == 8

    def test_admin_partial_update(self, admin_client):
        url = reverse('systemconfig:meal-times')
        response = admin_client.post(url, {'lunch_start': '12:30'}, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['meal_times']['lunch_start'] == '12:30'
        assert response.data['meal_times']['lunch_end'] == '14:00'
        assert SystemConfig.objects.get(key='lunch_start').category == 'meal_times'
        assert meal_time_range('LUNCH') == '12:30 - 14:00'

    def test_rejects_bad_format(self, admin_client):
        url = reverse('systemconfig:meal-times')
        response = admin_client.post(url, {'dinner_end': '9pm'}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert get_meal_times()['dinner_end'] == '21:00'

    def test_unknown_keys_ignored(self, admin_client):
        url = reverse('systemconfig:meal-times')
        admin_client.post(url, {'brunch_start': '10:00'}, format='json')

        assert not SystemConfig.objects.filter(key='brunch_start').exists()

    def test_update_requires_admin(self, chef_client):
        url = reverse('systemconfig:meal-times')
        response = chef_client.post(url, {'lunch_start': '12:30'}, format='json')

        assert response.status_code == status.HTTP_403_FORBIDDEN


@pytest.mark.django_db
class TestAttendanceSettingsAPI:
    """Tests for /api/system-config/meal-attendance-settings/"""

    def test_defaults(self, chef_client):
        response = chef_client.get(reverse('systemconfig:meal-attendance-settings'))

        assert response.status_code == status.HTTP_200_OK
        assert response.data['cutoff_time'] == '23:00'
        assert response.data['is_mandatory'] is False

    def test_update_creates_singleton(self, admin_client):
        url = reverse('systemconfig:meal-attendance-settings')
        admin_client.post(url, {'cutoff_time': '21:30'}, format='json')
        response = admin_client.post(url, {'is_mandatory': True}, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['settings']['cutoff_time'] == '21:30'
        assert MealAttendanceSettings.objects.count() == 1
        assert MealAttendanceSettings.load().cutoff_time == time(21, 30)

    def test_student_token_rejected(self, student_api_client):
        response = student_api_client.get(reverse('systemconfig:meal-attendance-settings'))

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
