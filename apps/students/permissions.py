from rest_framework.permissions import BasePermission

from .models import Student


class IsStudent(BasePermission):
    """Permission: request authenticated with a student token."""

    message = 'Student authentication required'

    def has_permission(self, request, view):
        return isinstance(request.user, Student)


class IsHosteler(IsStudent):
    """Permission: hostel residents only (they may buy mess packages)."""

    message = 'Only hostelers can purchase mess subscriptions'

    def has_permission(self, request, view):
        return super().has_permission(request, view) and request.user.is_hosteler
