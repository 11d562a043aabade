import uuid
import pytest
from django.urls import reverse
from rest_framework import status
from apps.accounts.models import AuditLog, Role, User, UserStatus


# =============================================================================
# Login Tests
# =============================================================================

@pytest.mark.django_db
class TestLogin:
    """Tests for POST /api/auth/login/"""

    def test_login_success(self, api_client, store_user):
        """Valid credentials return access and refresh tokens."""
        url = reverse('accounts:login')
        response = api_client.post(url, {
            'email': store_user.email,
            'password': 'TestPass123!',
        })

        assert response.status_code == status.HTTP_200_OK
        assert response.data['message'] == 'Login successful'
        assert 'token' in response.data
        assert 'refresh' in response.data
        assert response.data['user']['role'] == Role.STORE

    def test_login_email_case_insensitive(self, api_client, store_user):
        url = reverse('accounts:login')
        response = api_client.post(url, {
            'email': store_user.email.upper(),
            'password': 'TestPass123!',
        })

        assert response.status_code == status.HTTP_200_OK

    def test_login_sets_last_login(self, api_client, store_user):
        url = reverse('accounts:login')
        api_client.post(url, {'email': store_user.email, 'password': 'TestPass123!'})

        store_user.refresh_from_db()
        assert store_user.last_login is not None

    def test_login_wrong_password(self, api_client, store_user):
        url = reverse('accounts:login')
        response = api_client.post(url, {
            'email': store_user.email,
            'password': 'WrongPass123!',
        })

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.data['error'] == 'Invalid credentials'

    def test_login_unknown_email(self, api_client, db):
        url = reverse('accounts:login')
        response = api_client.post(url, {
            'email': 'nobody@example.com',
            'password': 'TestPass123!',
        })

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_login_inactive_user(self, api_client, inactive_user):
        """Inactive accounts get the same answer as unknown ones."""
        url = reverse('accounts:login')
        response = api_client.post(url, {
            'email': inactive_user.email,
            'password': 'TestPass123!',
        })

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.data['error'] == 'Invalid credentials'

    def test_login_missing_fields(self, api_client, db):
        url = reverse('accounts:login')
        response = api_client.post(url, {'email': 'store@example.com'})

        assert response.status_code == status.HTTP_400_BAD_REQUEST


# =============================================================================
# Current User Tests
# =============================================================================

@pytest.mark.django_db
class TestCurrentUser:
    """Tests for GET /api/auth/me/"""

    def test_me(self, store_client, store_user):
        url = reverse('accounts:me')
        response = store_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        assert response.data['email'] == store_user.email
        assert response.data['name'] == store_user.name

    def test_me_unauthenticated(self, api_client):
        url = reverse('accounts:me')
        response = api_client.get(url)

        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_me_rejects_student_token(self, student_api_client):
        """Student tokens are not valid staff credentials."""
        url = reverse('accounts:me')
        response = student_api_client.get(url)

        assert response.status_code == status.HTTP_401_UNAUTHORIZED


# =============================================================================
# Change Password Tests
# =============================================================================

@pytest.mark.django_db
class TestChangePassword:
    """Tests for POST /api/auth/change-password/"""

    def test_change_password(self, store_client, store_user):
        url = reverse('accounts:change-password')
        response = store_client.post(url, {
            'current_password': 'TestPass123!',
            'new_password': 'BrandNewPass456!',
        })

        assert response.status_code == status.HTTP_200_OK
        store_user.refresh_from_db()
        assert store_user.check_password('BrandNewPass456!')

    def test_change_password_wrong_current(self, store_client, store_user):
        url = reverse('accounts:change-password')
        response = store_client.post(url, {
            'current_password': 'NotMyPassword1!',
            'new_password': 'BrandNewPass456!',
        })

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.data['error'] == 'Current password is incorrect'


# =============================================================================
# Scanner Account Tests
# =============================================================================

@pytest.mark.django_db
class TestCreateScanner:
    """Tests for POST /api/auth/create-scanner/"""

    def test_fnb_manager_creates_scanner(self, fnb_client, facility):
        url = reverse('accounts:create-scanner')
        response = fnb_client.post(url, {
            'name': 'Counter 1',
            'email': 'scanner1@example.com',
            'password': 'scan123',
            'mess_facility': str(facility.id),
        })

        assert response.status_code == status.HTTP_201_CREATED
        user = User.objects.get(email='scanner1@example.com')
        assert user.role == Role.SCANNER
        assert user.mess_facility == facility

    def test_duplicate_email(self, fnb_client, facility, store_user):
        url = reverse('accounts:create-scanner')
        response = fnb_client.post(url, {
            'name': 'Counter 1',
            'email': store_user.email,
            'password': 'scan123',
            'mess_facility': str(facility.id),
        })

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_unknown_facility(self, fnb_client, db):
        url = reverse('accounts:create-scanner')
        response = fnb_client.post(url, {
            'name': 'Counter 1',
            'email': 'scanner1@example.com',
            'password': 'scan123',
            'mess_facility': str(uuid.uuid4()),
        })

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_store_cannot_create_scanner(self, store_client, facility):
        url = reverse('accounts:create-scanner')
        response = store_client.post(url, {
            'name': 'Counter 1',
            'email': 'scanner1@example.com',
            'password': 'scan123',
            'mess_facility': str(facility.id),
        })

        assert response.status_code == status.HTTP_403_FORBIDDEN


# =============================================================================
# User Administration Tests
# =============================================================================

@pytest.mark.django_db
class TestUserAdministration:
    """Tests for /api/auth/users/"""

    def test_admin_lists_users(self, admin_client, store_user, chef_user):
        url = reverse('accounts:user-list')
        response = admin_client.get(url)

        assert response.status_code == status.HTTP_200_OK
        emails = [u['email'] for u in response.data]
        assert store_user.email in emails
        assert chef_user.email in emails

    def test_filter_by_role(self, admin_client, store_user, chef_user):
        url = reverse('accounts:user-list')
        response = admin_client.get(url, {'role': Role.CHEF})

        assert response.status_code == status.HTTP_200_OK
        assert {u['role'] for u in response.data} == {Role.CHEF}

    def test_non_admin_forbidden(self, store_client):
        url = reverse('accounts:user-list')
        response = store_client.get(url)

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_superadmin_allowed(self, superadmin_client):
        """SUPERADMIN passes every role check."""
        url = reverse('accounts:user-list')
        response = superadmin_client.get(url)

        assert response.status_code == status.HTTP_200_OK

    def test_admin_creates_user(self, admin_client):
        url = reverse('accounts:user-list')
        response = admin_client.post(url, {
            'email': 'cook2@example.com',
            'password': 'CookPass123!',
            'name': 'Second Cook',
            'role': Role.COOK,
        })

        assert response.status_code == status.HTTP_201_CREATED
        assert User.objects.get(email='cook2@example.com').role == Role.COOK
        assert AuditLog.objects.filter(action='CREATE', entity='User').exists()

    def test_admin_updates_role(self, admin_client, store_user):
        url = reverse('accounts:user-detail', args=[store_user.id])
        response = admin_client.patch(url, {'role': Role.CHEF}, format='json')

        assert response.status_code == status.HTTP_200_OK
        store_user.refresh_from_db()
        assert store_user.role == Role.CHEF

    def test_update_duplicate_email(self, admin_client, store_user, chef_user):
        url = reverse('accounts:user-detail', args=[store_user.id])
        response = admin_client.patch(url, {'email': chef_user.email}, format='json')

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_delete_deactivates(self, admin_client, store_user):
        url = reverse('accounts:user-detail', args=[store_user.id])
        response = admin_client.delete(url)

        assert response.status_code == status.HTTP_204_NO_CONTENT
        store_user.refresh_from_db()
        assert store_user.status == UserStatus.INACTIVE
        assert not store_user.is_active
