"""
Role-based permission classes shared by every staff-facing app.

Staff users carry a single ``role``; each endpoint lists the roles allowed
to call it. SUPERADMIN passes every role check.

Usage:
    from apps.accounts.permissions import HasRole, role_required
    from apps.accounts.models import Role

    class ItemViewSet(viewsets.ModelViewSet):
        def get_permissions(self):
            if self.action in ['create', 'update', 'partial_update', 'destroy']:
                return [role_required(Role.ADMIN, Role.STORE)()]
            return [IsStaffUser()]
"""

from rest_framework.permissions import BasePermission, SAFE_METHODS

from .models import Role, User


class IsStaffUser(BasePermission):
    """
    Permission: request must be authenticated as a back-office User.

    Student tokens authenticate to a Student instance and are rejected here.
    """

    message = 'Staff authentication required'

    def has_permission(self, request, view):
        user = request.user
        return isinstance(user, User) and user.is_authenticated and user.is_active


class HasRole(IsStaffUser):
    """
    Permission: staff user whose role is in ``allowed_roles``.

    Subclass and set ``allowed_roles`` or build one with ``role_required``.
    """

    allowed_roles = ()
    message = 'Insufficient permissions'

    def has_permission(self, request, view):
        if not super().has_permission(request, view):
            return False
        return request.user.has_role(*self.allowed_roles)


def role_required(*roles):
    """Build a HasRole subclass restricted to ``roles``."""
    name = 'Has' + ''.join(role.title().replace('_', '') for role in roles) + 'Role'
    return type(name, (HasRole,), {'allowed_roles': tuple(roles)})


class IsAdmin(HasRole):
    """Permission: ADMIN (or SUPERADMIN) only."""

    allowed_roles = (Role.ADMIN,)


class IsAdminOrStore(HasRole):
    """Permission: store keepers and admins."""

    allowed_roles = (Role.ADMIN, Role.STORE)


class IsFnbManager(HasRole):
    """Permission: F&B managers and admins."""

    allowed_roles = (Role.ADMIN, Role.FNB_MANAGER)


class IsAdminOrReadOnly(BasePermission):
    """Permission: anyone may read; writes need ADMIN."""

    message = 'Insufficient permissions'

    def has_permission(self, request, view):
        if request.method in SAFE_METHODS:
            return True
        return IsAdmin().has_permission(request, view)


class IsAdminOrStaffReadOnly(IsStaffUser):
    """Permission: staff may read; writes need ADMIN."""

    message = 'Insufficient permissions'

    def has_permission(self, request, view):
        if request.method in SAFE_METHODS:
            return super().has_permission(request, view)
        return IsAdmin().has_permission(request, view)
