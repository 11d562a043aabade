from rest_framework import viewsets, status, serializers
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework_simplejwt.tokens import RefreshToken
from django.shortcuts import get_object_or_404
from drf_spectacular.utils import extend_schema

from apps.mess.models import MessFacility

from .models import User, Role, UserStatus
from .permissions import IsAdmin, IsStaffUser, role_required
from .serializers import (
    UserSerializer,
    UserCreateSerializer,
    UserUpdateSerializer,
    UserLoginSerializer,
    UserFilterSerializer,
    ChangePasswordSerializer,
    CreateScannerSerializer,
)
from .services import (
    authenticate_user,
    change_password,
    create_scanner_user,
    create_staff_user,
    record_activity,
    InvalidCredentialsError,
    InactiveAccountError,
    DuplicateEmailError,
    PasswordConfirmationError,
)


# Response serializers for API documentation
class AuthResponseSerializer(serializers.Serializer):
    message = serializers.CharField()
    token = serializers.CharField(help_text='Access token')
    refresh = serializers.CharField()
    user = UserSerializer()


class MessageResponseSerializer(serializers.Serializer):
    message = serializers.CharField()


class ErrorResponseSerializer(serializers.Serializer):
    error = serializers.CharField()


@extend_schema(
    request=UserLoginSerializer,
    responses={
        200: AuthResponseSerializer,
        400: ErrorResponseSerializer,
        401: ErrorResponseSerializer,
    },
    description="Authenticate a staff user and receive JWT tokens (8 hour access token).",
    tags=['auth'],
)
@api_view(['POST'])
@permission_classes([AllowAny])
def login(request):
    """Login with email and password."""
    serializer = UserLoginSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    try:
        user = authenticate_user(
            email=serializer.validated_data['email'],
            password=serializer.validated_data['password'],
        )
    except (InvalidCredentialsError, InactiveAccountError):
        # Inactive accounts get the same answer as unknown ones
        return Response({'error': 'Invalid credentials'}, status=status.HTTP_401_UNAUTHORIZED)

    refresh = RefreshToken.for_user(user)

    return Response({
        'message': 'Login successful',
        'token': str(refresh.access_token),
        'refresh': str(refresh),
        'user': UserSerializer(user).data,
    })


@extend_schema(
    responses={200: UserSerializer},
    description="Get the current staff user's profile.",
    tags=['auth'],
)
@api_view(['GET'])
@permission_classes([IsStaffUser])
def get_current_user(request):
    """Get current authenticated user profile."""
    return Response(UserSerializer(request.user).data)


@extend_schema(
    request=ChangePasswordSerializer,
    responses={
        200: MessageResponseSerializer,
        400: ErrorResponseSerializer,
    },
    description="Change the current user's password.",
    tags=['auth'],
)
@api_view(['POST'])
@permission_classes([IsStaffUser])
def change_password_view(request):
    """Change password after verifying the current one."""
    serializer = ChangePasswordSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    try:
        change_password(
            user=request.user,
            current_password=serializer.validated_data['current_password'],
            new_password=serializer.validated_data['new_password'],
        )
    except PasswordConfirmationError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

    return Response({'message': 'Password changed successfully'})


@extend_schema(
    request=CreateScannerSerializer,
    responses={
        201: UserSerializer,
        400: ErrorResponseSerializer,
        404: ErrorResponseSerializer,
    },
    description="Create a scanner device account bound to a mess facility.",
    tags=['auth'],
)
@api_view(['POST'])
@permission_classes([role_required(Role.FNB_MANAGER, Role.ADMIN)])
def create_scanner(request):
    """Create a SCANNER user (F&B manager, admin)."""
    serializer = CreateScannerSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    data = serializer.validated_data

    facility = get_object_or_404(MessFacility, id=data['mess_facility'])

    try:
        user = create_scanner_user(
            email=data['email'],
            password=data['password'],
            name=data['name'],
            mess_facility=facility,
            created_by=request.user,
        )
    except DuplicateEmailError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

    return Response(UserSerializer(user).data, status=status.HTTP_201_CREATED)


class UserViewSet(viewsets.ModelViewSet):
    """
    ViewSet for staff user administration (ADMIN only).

    list: All users ordered by name (filter by role/status)
    create: Create a user with any role
    retrieve: Get a user
    update: Update name, email, phone, role, status
    destroy: Deactivate the user (status INACTIVE)
    """

    queryset = User.objects.select_related('mess_facility')
    serializer_class = UserSerializer
    permission_classes = [IsAuthenticated, IsAdmin]

    def get_queryset(self):
        queryset = super().get_queryset()

        filter_serializer = UserFilterSerializer(data=self.request.query_params)
        filter_serializer.is_valid(raise_exception=True)
        params = filter_serializer.validated_data

        if 'role' in params:
            queryset = queryset.filter(role=params['role'])
        if 'status' in params:
            queryset = queryset.filter(status=params['status'])

        return queryset.order_by('name')

    def get_serializer_class(self):
        if self.action == 'create':
            return UserCreateSerializer
        if self.action in ['update', 'partial_update']:
            return UserUpdateSerializer
        return UserSerializer

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            user = create_staff_user(created_by=request.user, **serializer.validated_data)
        except DuplicateEmailError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(UserSerializer(user).data, status=status.HTTP_201_CREATED)

    def perform_update(self, serializer):
        user = serializer.save()
        record_activity(
            user=self.request.user,
            action='UPDATE',
            entity='User',
            entity_id=user.id,
            details={'role': user.role, 'status': user.status},
        )

    def perform_destroy(self, instance):
        instance.status = UserStatus.INACTIVE
        instance.save(update_fields=['status', 'updated_at'])
        record_activity(
            user=self.request.user,
            action='DEACTIVATE',
            entity='User',
            entity_id=instance.id,
        )
