import pytest
from datetime import timedelta
from django.urls import reverse
from django.utils import timezone
from rest_framework import status


@pytest.mark.django_db
class TestJobEndpoints:
    """Tests for /api/notifications/"""

    def test_expiry_reminders(self, fnb_client, subscription):
        subscription.end_date = timezone.localdate() + timedelta(days=3)
        subscription.save()

        url = reverse('notifications:send-expiry-reminders')
        response = fnb_client.post(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['count'] == 1

    def test_rating_requests_none_due(self, admin_client):
        url = reverse('notifications:send-rating-requests')
        response = admin_client.post(url)

        assert response.data == {'message': 'Sent 0 rating request notifications', 'count': 0}

    def test_attendance_requests(self, fnb_client):
        url = reverse('notifications:send-attendance-requests')
        response = fnb_client.post(url)

        assert response.status_code == status.HTTP_200_OK

    def test_chef_forbidden(self, chef_client):
        url = reverse('notifications:send-rating-requests')
        response = chef_client.post(url)

        assert response.status_code == status.HTTP_403_FORBIDDEN
