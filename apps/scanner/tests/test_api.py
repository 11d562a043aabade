import pytest
from django.urls import reverse
from rest_framework import status
from apps.mess.models import MessFacility
from apps.scanner.models import ScannerLog, ScanResult

LOG = {'scan_result': ScanResult.MESS_COUPON_VALID, 'meal_type': 'LUNCH'}


@pytest.mark.django_db
class TestScanAPI:
    """Tests for /api/scanner/scan/"""

    def test_scanner_serves_coupon(self, scanner_client, lunch_time, subscription, lunch_plan):
        url = reverse('scanner:scan')
        response = scanner_client.post(url, {'qr_code': 'SUB-21CS001', 'device_id': 'gate-2'}, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['valid'] is True
        assert response.data['student']['register_number'] == '21CS001'

    def test_invalid_code_is_200(self, scanner_client, lunch_time):
        url = reverse('scanner:scan')
        response = scanner_client.post(url, {'qr_code': 'garbage'}, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['valid'] is False

    def test_not_meal_time(self, scanner_client, between_meals):
        url = reverse('scanner:scan')
        response = scanner_client.post(url, {'qr_code': 'SUB-21CS001'}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['error'] == 'Not meal time now'

    def test_missing_code(self, scanner_client):
        url = reverse('scanner:scan')
        response = scanner_client.post(url, {}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_chef_cannot_scan(self, chef_client):
        url = reverse('scanner:scan')
        response = chef_client.post(url, {'qr_code': 'SUB-21CS001'}, format='json')

        assert response.status_code == status.HTTP_403_FORBIDDEN


@pytest.mark.django_db
class TestRecentScansAPI:
    """Tests for /api/scanner/recent-scans/"""

    def test_scoped_to_scanner_facility(self, scanner_client, lunch_time, facility, student):
        other = MessFacility.objects.create(name='South Mess')
        ScannerLog.objects.create(student=student, mess_facility=facility, qr_code_scanned='SUB-21CS001', **LOG)
        ScannerLog.objects.create(student=student, mess_facility=other, qr_code_scanned='SUB-21CS001', **LOG)

        url = reverse('scanner:recent-scans')
        response = scanner_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert len(response.data['scans']) == 1
        assert response.data['stats']['total_scans_today'] == 1
        assert response.data['stats']['meal_type'] == 'LUNCH'

    def test_limit_validated(self, scanner_client):
        url = reverse('scanner:recent-scans')
        response = scanner_client.get(url, {'limit': 500})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
