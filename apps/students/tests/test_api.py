import base64
import io
import pytest
from django.core.files.uploadedfile import SimpleUploadedFile
from django.urls import reverse
from PIL import Image
from rest_framework import status
from apps.notifications.models import Notification
from apps.students.models import Student, SubscriptionStatus, UserType


def png_bytes():
    buffer = io.BytesIO()
    Image.new('RGB', (2, 2), color='blue').save(buffer, format='PNG')
    return buffer.getvalue()


@pytest.mark.django_db
class TestStudentAPI:
    """Tests for /api/students/students/"""

    def test_list_is_paginated(self, fnb_client, student, day_scholar):
        url = reverse('students:student-list')
        response = fnb_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['count'] == 2
        assert [s['name'] for s in response.data['results']] == ['Asha Kumar', 'Ravi Das']

    def test_search_by_register_number(self, fnb_client, student, day_scholar):
        url = reverse('students:student-list')
        response = fnb_client.get(url, {'search': '21CS002'})

        assert response.data['count'] == 1
        assert response.data['results'][0]['register_number'] == '21CS002'

    def test_filter_by_user_type(self, fnb_client, student):
        Student.objects.create(register_number='EMP-9', name='Mani', user_type=UserType.EMPLOYEE)

        url = reverse('students:student-list')
        response = fnb_client.get(url, {'user_type': UserType.EMPLOYEE})

        assert response.data['count'] == 1
        assert response.data['results'][0]['name'] == 'Mani'

    def test_store_cannot_list(self, store_client):
        url = reverse('students:student-list')
        response = store_client.get(url)

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_update_profile(self, admin_client, student):
        url = reverse('students:student-detail', args=[student.id])
        response = admin_client.put(url, {
            'name': 'Asha K',
            'room_number': 'B-202',
        }, format='json')

        assert response.status_code == status.HTTP_200_OK
        student.refresh_from_db()
        assert student.name == 'Asha K'
        assert student.register_number == '21CS001'

    def test_upload_photo_file(self, fnb_client, student, settings, tmp_path):
        settings.MEDIA_ROOT = tmp_path
        url = reverse('students:student-photo', args=[student.id])
        photo = SimpleUploadedFile('me.png', png_bytes(), content_type='image/png')
        response = fnb_client.post(url, {'photo': photo}, format='multipart')

        assert response.status_code == status.HTTP_200_OK
        student.refresh_from_db()
        assert student.photo_url == response.data['photo_url']
        assert student.photo_url.endswith('.png')

    def test_upload_photo_base64(self, fnb_client, student, settings, tmp_path):
        settings.MEDIA_ROOT = tmp_path
        data_url = 'data:image/png;base64,' + base64.b64encode(png_bytes()).decode()

        url = reverse('students:student-photo', args=[student.id])
        response = fnb_client.post(url, {'photo_data': data_url}, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert 'student-photos/' in response.data['photo_url']

    def test_upload_photo_requires_data(self, fnb_client, student):
        url = reverse('students:student-photo', args=[student.id])
        response = fnb_client.post(url, {}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_remove_photo(self, fnb_client, student, settings, tmp_path):
        settings.MEDIA_ROOT = tmp_path
        student.photo_url = '/media/student-photos/old.png'
        student.save()

        url = reverse('students:student-photo', args=[student.id])
        response = fnb_client.delete(url)

        assert response.status_code == status.HTTP_200_OK
        student.refresh_from_db()
        assert student.photo_url == ''


@pytest.mark.django_db
class TestSubscriptionAPI:
    """Tests for /api/students/subscriptions/"""

    def test_list(self, fnb_client, subscription):
        url = reverse('students:subscription-list')
        response = fnb_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['count'] == 1
        row = response.data['results'][0]
        assert row['register_number'] == '21CS001'
        assert row['package_name'] == 'Monthly Veg'

    def test_filter_by_status(self, fnb_client, subscription):
        url = reverse('students:subscription-list')
        response = fnb_client.get(url, {'status': SubscriptionStatus.EXPIRED})

        assert response.data['count'] == 0

    def test_invalid_status_filter(self, fnb_client, subscription):
        url = reverse('students:subscription-list')
        response = fnb_client.get(url, {'status': 'PAUSED'})

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_cancel_notifies_student(self, fnb_client, subscription):
        url = reverse('students:subscription-detail', args=[subscription.id])
        response = fnb_client.put(url, {'status': SubscriptionStatus.CANCELLED}, format='json')

        assert response.status_code == status.HTTP_200_OK
        assert response.data['status'] == SubscriptionStatus.CANCELLED
        assert Notification.objects.filter(student=subscription.student).count() == 1

    def test_update_unknown_subscription(self, fnb_client, db):
        url = reverse('students:subscription-detail', args=['00000000-0000-0000-0000-000000000000'])
        response = fnb_client.put(url, {'status': SubscriptionStatus.ACTIVE}, format='json')

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_export_csv(self, fnb_client, subscription):
        url = reverse('students:subscription-export')
        response = fnb_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert response['Content-Type'] == 'text/csv'
        assert 'attachment; filename="subscriptions-' in response['Content-Disposition']
        lines = response.content.decode().splitlines()
        assert len(lines) == 2
        assert lines[1].startswith('21CS001,')

    def test_student_token_rejected(self, student_api_client, subscription):
        url = reverse('students:subscription-list')
        response = student_api_client.get(url)

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
