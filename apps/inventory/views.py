from rest_framework import viewsets, status, mixins
from rest_framework.decorators import action
from rest_framework.response import Response
from rest_framework.pagination import PageNumberPagination
from django.db.models import Count, Exists, OuterRef, F, Q, ProtectedError
from drf_spectacular.utils import extend_schema

from apps.accounts.permissions import IsStaffUser, IsAdmin, IsAdminOrStore

from .models import Unit, StorageType, ItemCategory, Item, Alert, AlertStatus
from .serializers import (
    UnitSerializer,
    StorageTypeSerializer,
    ItemCategorySerializer,
    ItemSerializer,
    ItemBatchSerializer,
    StockLedgerSerializer,
    AlertSerializer,
    ItemFilterSerializer,
    AlertFilterSerializer,
    GenerateAlertsResponseSerializer,
)
from .services import fifo_batches, generate_alerts, dismiss_alert, AlertNotFoundError


LEDGER_HISTORY_LIMIT = 50


class InventoryPagination(PageNumberPagination):
    """Custom pagination for inventory lists."""
    page_size = 20
    page_size_query_param = 'page_size'
    max_page_size = 100


class MasterDataViewSet(viewsets.ModelViewSet):
    """
    Base for lookup tables referenced by items.

    Any staff user can read; writes are admin only. Rows still referenced
    by items cannot be deleted.
    """

    entity_label = 'record'

    def get_permissions(self):
        if self.action in ['create', 'update', 'partial_update', 'destroy']:
            return [IsAdmin()]
        return [IsStaffUser()]

    def get_queryset(self):
        return super().get_queryset().annotate(items_count=Count('items'))

    def destroy(self, request, *args, **kwargs):
        instance = self.get_object()
        try:
            instance.delete()
        except ProtectedError:
            return Response(
                {'error': f'Cannot delete {self.entity_label} with existing items'},
                status=status.HTTP_400_BAD_REQUEST
            )
        return Response(status=status.HTTP_204_NO_CONTENT)


class UnitViewSet(MasterDataViewSet):
    """Units of measure (kg, litre, piece...)."""

    queryset = Unit.objects.all()
    serializer_class = UnitSerializer
    entity_label = 'unit'


class StorageTypeViewSet(MasterDataViewSet):
    """Storage types (dry, chilled, frozen...)."""

    queryset = StorageType.objects.all()
    serializer_class = StorageTypeSerializer
    entity_label = 'storage type'

    def destroy(self, request, *args, **kwargs):
        # Items keep their row with storage_type cleared, so only guard on usage
        instance = self.get_object()
        if instance.items.exists():
            return Response(
                {'error': 'Cannot delete storage type with existing items'},
                status=status.HTTP_400_BAD_REQUEST
            )
        instance.delete()
        return Response(status=status.HTTP_204_NO_CONTENT)


class ItemCategoryViewSet(MasterDataViewSet):
    """Item categories with item counts."""

    queryset = ItemCategory.objects.all()
    serializer_class = ItemCategorySerializer
    entity_label = 'category'


class ItemViewSet(viewsets.ModelViewSet):
    """
    ViewSet for stock items.

    list: Items ordered by name with total_stock, avg_cost, has_alerts
    create/update/destroy: ADMIN or STORE
    batches: Batches with stock in FIFO order
    ledger: Latest stock ledger entries
    """

    queryset = Item.objects.select_related('category', 'unit', 'storage_type', 'preferred_vendor')
    serializer_class = ItemSerializer
    pagination_class = InventoryPagination

    def get_permissions(self):
        if self.action in ['create', 'update', 'partial_update', 'destroy']:
            return [IsAdminOrStore()]
        return [IsStaffUser()]

    def get_queryset(self):
        queryset = super().get_queryset().with_stock().annotate(
            has_alerts=Exists(
                Alert.objects.filter(item=OuterRef('pk'), status=AlertStatus.OPEN)
            )
        )

        if self.action != 'list':
            return queryset

        filter_serializer = ItemFilterSerializer(data=self.request.query_params)
        filter_serializer.is_valid(raise_exception=True)
        params = filter_serializer.validated_data

        if 'category' in params:
            queryset = queryset.filter(category_id=params['category'])
        if params.get('search'):
            queryset = queryset.filter(
                Q(name__icontains=params['search']) | Q(sku__icontains=params['search'])
            )
        if params.get('low_stock'):
            queryset = queryset.filter(total_stock__lte=F('reorder_point'))

        return queryset.order_by('name')

    def destroy(self, request, *args, **kwargs):
        instance = self.get_object()
        try:
            instance.delete()
        except ProtectedError:
            return Response(
                {'error': 'Cannot delete item with stock history'},
                status=status.HTTP_400_BAD_REQUEST
            )
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=True, methods=['get'])
    def batches(self, request, pk=None):
        """
        Batches with stock on hand, earliest expiry first.

        GET /api/inventory/items/{id}/batches/
        """
        item = self.get_object()
        serializer = ItemBatchSerializer(fifo_batches(item).select_related('item'), many=True)
        return Response(serializer.data)

    @action(detail=True, methods=['get'])
    def ledger(self, request, pk=None):
        """
        Latest stock movements for the item.

        GET /api/inventory/items/{id}/ledger/
        """
        item = self.get_object()
        entries = (
            item.ledger_entries
            .select_related('batch', 'created_by')
            .order_by('-created_at')[:LEDGER_HISTORY_LIMIT]
        )
        return Response(StockLedgerSerializer(entries, many=True).data)


class AlertViewSet(mixins.ListModelMixin, mixins.RetrieveModelMixin, viewsets.GenericViewSet):
    """
    Stock alerts.

    list: OPEN alerts newest first (filter with ?status= / ?type=)
    generate: Scan items and batches for new alerts (ADMIN, STORE)
    dismiss: Dismiss an alert
    """

    queryset = Alert.objects.select_related('item')
    serializer_class = AlertSerializer
    permission_classes = [IsStaffUser]

    def get_permissions(self):
        if self.action == 'generate':
            return [IsAdminOrStore()]
        return super().get_permissions()

    def get_queryset(self):
        queryset = super().get_queryset()
        if self.action != 'list':
            return queryset

        filter_serializer = AlertFilterSerializer(data=self.request.query_params)
        filter_serializer.is_valid(raise_exception=True)
        params = filter_serializer.validated_data

        queryset = queryset.filter(status=params['status'])
        if 'type' in params:
            queryset = queryset.filter(type=params['type'])
        return queryset.order_by('-created_at')

    @extend_schema(request=None, responses={201: GenerateAlertsResponseSerializer})
    @action(detail=False, methods=['post'])
    def generate(self, request):
        """
        Generate LOW_STOCK and EXPIRY alerts.

        POST /api/inventory/alerts/generate/
        """
        alerts = generate_alerts()
        return Response({
            'message': f'Generated {len(alerts)} alerts',
            'count': len(alerts),
            'alerts': AlertSerializer(alerts, many=True).data,
        }, status=status.HTTP_201_CREATED)

    @extend_schema(request=None, responses={200: AlertSerializer})
    @action(detail=True, methods=['post'])
    def dismiss(self, request, pk=None):
        """
        Dismiss an alert.

        POST /api/inventory/alerts/{id}/dismiss/
        """
        try:
            alert = dismiss_alert(alert_id=pk)
        except AlertNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        return Response(AlertSerializer(alert).data)
