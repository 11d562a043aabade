from django.http import HttpResponse
from django.shortcuts import get_object_or_404
from django.utils import timezone
from rest_framework.decorators import api_view, permission_classes
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema, OpenApiParameter
from drf_spectacular.types import OpenApiTypes

from apps.accounts.permissions import IsFnbManager, IsStaffUser
from apps.mess.models import MessFacility
from apps.mess.serializers import OrderSerializer

from .reports import ReportQueries
from .serializers import (
    DateRangeQuerySerializer,
    FacilityReportQuerySerializer,
    OrderReportQuerySerializer,
)

DATE_RANGE_PARAMETERS = [
    OpenApiParameter('start_date', OpenApiTypes.DATE, description='Start date (YYYY-MM-DD)'),
    OpenApiParameter('end_date', OpenApiTypes.DATE, description='End date (YYYY-MM-DD)'),
]
FACILITY_PARAMETERS = DATE_RANGE_PARAMETERS + [
    OpenApiParameter('mess_facility', OpenApiTypes.UUID, description='Limit to one facility'),
]


def _query(serializer_class, request):
    serializer = serializer_class(data=request.query_params)
    serializer.is_valid(raise_exception=True)
    return serializer.validated_data


# =============================================================================
# Store dashboard
# =============================================================================

@extend_schema(responses={200: OpenApiTypes.OBJECT}, tags=['reports'])
@api_view(['GET'])
@permission_classes([IsStaffUser])
def dashboard_overview(request):
    """Store counters, recent activity, expiring batches and top stock by value."""
    return Response(ReportQueries.dashboard_overview())


@extend_schema(responses={200: OpenApiTypes.OBJECT}, tags=['reports'])
@api_view(['GET'])
@permission_classes([IsStaffUser])
def stock_analysis(request):
    return Response(ReportQueries.stock_analysis())


# =============================================================================
# Mess reports
# =============================================================================

@extend_schema(responses={200: OpenApiTypes.OBJECT}, tags=['reports'])
@api_view(['GET'])
@permission_classes([IsFnbManager])
def fnb_dashboard(request):
    return Response(ReportQueries.fnb_dashboard())


@extend_schema(responses={200: OpenApiTypes.OBJECT}, tags=['reports'])
@api_view(['GET'])
@permission_classes([IsFnbManager])
def today_overview(request):
    """Per facility and meal: planned, served and order counts for today."""
    return Response(ReportQueries.today_overview())


@extend_schema(
    parameters=DATE_RANGE_PARAMETERS,
    responses={200: OpenApiTypes.OBJECT},
    description='Detailed facility report; defaults to the last 7 days.',
    tags=['reports'],
)
@api_view(['GET'])
@permission_classes([IsFnbManager])
def mess_report(request, facility_id):
    facility = get_object_or_404(MessFacility, id=facility_id)
    params = _query(DateRangeQuerySerializer, request)
    return Response(ReportQueries.mess_report(
        facility,
        start_date=params.get('start_date'),
        end_date=params.get('end_date'),
    ))


@extend_schema(parameters=FACILITY_PARAMETERS, responses={200: OpenApiTypes.OBJECT}, tags=['reports'])
@api_view(['GET'])
@permission_classes([IsFnbManager])
def meal_report(request):
    params = _query(FacilityReportQuerySerializer, request)
    return Response(ReportQueries.meal_report(
        start_date=params.get('start_date'),
        end_date=params.get('end_date'),
        mess_facility_id=params.get('mess_facility'),
    ))


@extend_schema(
    parameters=FACILITY_PARAMETERS + [
        OpenApiParameter('status', OpenApiTypes.STR, description='Order status'),
    ],
    responses={200: OpenApiTypes.OBJECT},
    tags=['reports'],
)
@api_view(['GET'])
@permission_classes([IsFnbManager])
def order_report(request):
    params = _query(OrderReportQuerySerializer, request)
    data = ReportQueries.order_report(
        start_date=params.get('start_date'),
        end_date=params.get('end_date'),
        mess_facility_id=params.get('mess_facility'),
        status=params.get('status'),
    )
    data['orders'] = OrderSerializer(data['orders'], many=True).data
    return Response(data)


@extend_schema(parameters=FACILITY_PARAMETERS, responses={200: OpenApiTypes.OBJECT}, tags=['reports'])
@api_view(['GET'])
@permission_classes([IsFnbManager])
def feedback_report(request):
    params = _query(FacilityReportQuerySerializer, request)
    return Response(ReportQueries.feedback_report(
        start_date=params.get('start_date'),
        end_date=params.get('end_date'),
        mess_facility_id=params.get('mess_facility'),
    ))


# =============================================================================
# Transactions
# =============================================================================

@extend_schema(parameters=DATE_RANGE_PARAMETERS, responses={200: OpenApiTypes.OBJECT}, tags=['reports'])
@api_view(['GET'])
@permission_classes([IsFnbManager])
def transaction_report(request):
    """Subscription payments and paid orders with revenue breakdowns."""
    params = _query(DateRangeQuerySerializer, request)
    return Response(ReportQueries.transaction_report(
        start_date=params.get('start_date'),
        end_date=params.get('end_date'),
    ))


@extend_schema(parameters=DATE_RANGE_PARAMETERS, responses={(200, 'text/csv'): OpenApiTypes.STR}, tags=['reports'])
@api_view(['GET'])
@permission_classes([IsFnbManager])
def export_transactions(request):
    params = _query(DateRangeQuerySerializer, request)
    filename = f"transactions-{timezone.localdate():%Y-%m-%d}.csv"
    response = HttpResponse(content_type='text/csv')
    response['Content-Disposition'] = f'attachment; filename="{filename}"'
    ReportQueries.write_transactions_csv(
        response,
        start_date=params.get('start_date'),
        end_date=params.get('end_date'),
    )
    return response
