from rest_framework import serializers
from django.contrib.auth.password_validation import validate_password
from .models import User, Role, UserStatus, AuditLog


class UserSerializer(serializers.ModelSerializer):
    """Staff user profile returned by login and /me."""

    mess_facility_name = serializers.CharField(source='mess_facility.name', read_only=True, default=None)

    class Meta:
        model = User
        fields = [
            'id',
            'email',
            'name',
            'phone',
            'role',
            'status',
            'mess_facility',
            'mess_facility_name',
            'created_at',
            'last_login',
        ]
        read_only_fields = ['id', 'created_at', 'last_login']


class UserCreateSerializer(serializers.ModelSerializer):
    """Admin-side user creation."""

    password = serializers.CharField(
        write_only=True,
        required=True,
        validators=[validate_password],
        style={'input_type': 'password'}
    )

    class Meta:
        model = User
        fields = ['email', 'password', 'name', 'phone', 'role', 'status', 'mess_facility']


class UserUpdateSerializer(serializers.ModelSerializer):
    """Admin-side user update. Password changes go through change-password."""

    class Meta:
        model = User
        fields = ['email', 'name', 'phone', 'role', 'status', 'mess_facility']

    def validate_email(self, value):
        qs = User.objects.filter(email__iexact=value)
        if self.instance is not None:
            qs = qs.exclude(pk=self.instance.pk)
        if qs.exists():
            raise serializers.ValidationError('User with this email already exists')
        return value


class UserLoginSerializer(serializers.Serializer):
    """Serializer for user login."""

    email = serializers.EmailField(required=True)
    password = serializers.CharField(
        required=True,
        write_only=True,
        style={'input_type': 'password'}
    )


class ChangePasswordSerializer(serializers.Serializer):
    current_password = serializers.CharField(required=True, style={'input_type': 'password'})
    new_password = serializers.CharField(
        required=True,
        validators=[validate_password],
        style={'input_type': 'password'}
    )


class CreateScannerSerializer(serializers.Serializer):
    """Input for creating a scanner device account."""

    name = serializers.CharField(max_length=150)
    email = serializers.EmailField()
    password = serializers.CharField(min_length=6, style={'input_type': 'password'})
    mess_facility = serializers.UUIDField()


class UserFilterSerializer(serializers.Serializer):
    """
    Validate query parameters for user listing.

    Query Parameters:
        role (str): Filter by role
        status (str): Filter by status
    """

    role = serializers.ChoiceField(choices=Role.choices, required=False)
    status = serializers.ChoiceField(choices=UserStatus.choices, required=False)


class UserMinimalSerializer(serializers.ModelSerializer):
    """Minimal user info for nested serialization."""

    class Meta:
        model = User
        fields = ['id', 'name', 'email', 'role']
        read_only_fields = fields


class AuditLogSerializer(serializers.ModelSerializer):
    user = UserMinimalSerializer(read_only=True)

    class Meta:
        model = AuditLog
        fields = ['id', 'user', 'action', 'entity', 'entity_id', 'details', 'created_at']
        read_only_fields = fields
