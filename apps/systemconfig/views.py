from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema

from apps.accounts.permissions import IsAdmin, IsAdminOrReadOnly, IsAdminOrStaffReadOnly

from .models import SystemConfig, MealAttendanceSettings
from .serializers import (
    SystemConfigSerializer,
    ConfigValueInputSerializer,
    BulkConfigInputSerializer,
    MealTimesSerializer,
    MealAttendanceSettingsSerializer,
)
from .services import (
    get_meal_times,
    upsert_config,
    bulk_upsert,
    save_meal_times,
    save_attendance_settings,
)


@extend_schema(responses={200: SystemConfigSerializer(many=True)})
@api_view(['GET'])
@permission_classes([IsAdmin])
def config_list(request):
    """All settings ordered by category and key."""
    configs = SystemConfig.objects.order_by('category', 'key')
    return Response(SystemConfigSerializer(configs, many=True).data)


@extend_schema(request=ConfigValueInputSerializer, responses={200: SystemConfigSerializer})
@api_view(['GET', 'PUT', 'DELETE'])
@permission_classes([IsAdminOrStaffReadOnly])
def config_detail(request, key):
    """Read, upsert or delete one setting."""
    if request.method == 'PUT':
        serializer = ConfigValueInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        config = upsert_config(key=key, **serializer.validated_data)
        return Response(SystemConfigSerializer(config).data)

    try:
        config = SystemConfig.objects.get(key=key)
    except SystemConfig.DoesNotExist:
        return Response({'error': 'Configuration not found'}, status=status.HTTP_404_NOT_FOUND)

    if request.method == 'DELETE':
        config.delete()
        return Response({'message': 'Configuration deleted successfully'})

    return Response(SystemConfigSerializer(config).data)


@extend_schema(request=BulkConfigInputSerializer)
@api_view(['POST'])
@permission_classes([IsAdmin])
def bulk_update(request):
    serializer = BulkConfigInputSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    count = bulk_upsert(serializer.validated_data['settings'])
    return Response({'message': 'Settings updated successfully', 'count': count})


@extend_schema(request=MealTimesSerializer, responses={200: MealTimesSerializer})
@api_view(['GET', 'POST'])
@permission_classes([IsAdminOrReadOnly])
def meal_times(request):
    """
    Meal serving windows.

    GET is public (used by the scanner and mobile clients); POST needs ADMIN.
    """
    if request.method == 'GET':
        return Response(get_meal_times())

    serializer = MealTimesSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    result = save_meal_times(serializer.validated_data)
    return Response({'message': 'Meal times updated successfully', 'meal_times': result})


@extend_schema(request=MealAttendanceSettingsSerializer, responses={200: MealAttendanceSettingsSerializer})
@api_view(['GET', 'POST'])
@permission_classes([IsAdminOrStaffReadOnly])
def meal_attendance_settings(request):
    if request.method == 'GET':
        return Response(MealAttendanceSettingsSerializer(MealAttendanceSettings.load()).data)

    serializer = MealAttendanceSettingsSerializer(data=request.data, partial=True)
    serializer.is_valid(raise_exception=True)
    settings_obj = save_attendance_settings(**serializer.validated_data)
    return Response({
        'message': 'Meal attendance settings updated successfully',
        'settings': MealAttendanceSettingsSerializer(settings_obj).data,
    })
