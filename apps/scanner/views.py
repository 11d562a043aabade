from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema

from .permissions import IsScannerOperator
from .serializers import ScanInputSerializer, RecentScansQuerySerializer, RecentScansSerializer
from .services import NotMealTimeError, scan as scan_code, recent_scans as load_recent_scans


@extend_schema(request=ScanInputSerializer, tags=['scanner'])
@api_view(['POST'])
@permission_classes([IsScannerOperator])
def scan(request):
    """
    Validate a mess coupon or order QR at the counter.

    Invalid or already-served codes return 200 with ``valid: false`` so
    the counter display can show the reason.
    """
    serializer = ScanInputSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    try:
        result = scan_code(user=request.user, **serializer.validated_data)
    except NotMealTimeError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
    return Response(result)


@extend_schema(parameters=[RecentScansQuerySerializer], responses={200: RecentScansSerializer}, tags=['scanner'])
@api_view(['GET'])
@permission_classes([IsScannerOperator])
def recent_scans(request):
    """Today's scans (newest first) and serving stats for the current meal."""
    query = RecentScansQuerySerializer(data=request.query_params)
    query.is_valid(raise_exception=True)

    data = load_recent_scans(
        limit=query.validated_data['limit'],
        mess_facility=request.user.mess_facility,
    )
    return Response(RecentScansSerializer(data).data)
