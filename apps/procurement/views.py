import logging

from rest_framework import viewsets, status, mixins
from rest_framework.decorators import action
from rest_framework.response import Response
from django.db.models import Count, ProtectedError
from drf_spectacular.utils import extend_schema

from apps.accounts.models import Role
from apps.accounts.permissions import IsStaffUser, IsAdmin, IsAdminOrStore, role_required
from apps.inventory.views import InventoryPagination

from .models import VendorCategory, Vendor, PurchaseOrder, GoodsReceipt
from .serializers import (
    VendorCategorySerializer,
    VendorSerializer,
    PurchaseOrderFilterSerializer,
    PurchaseOrderInputSerializer,
    PurchaseOrderListSerializer,
    PurchaseOrderSerializer,
    PurchaseOrderPrintSerializer,
    ReorderSuggestionSerializer,
    GoodsReceiptFilterSerializer,
    GoodsReceiptInputSerializer,
    GoodsReceiptSerializer,
    GoodsReceiptPrintSerializer,
)
from .services import (
    ProcurementServiceError,
    PurchaseOrderNotFoundError,
    create_purchase_order,
    update_purchase_order,
    delete_purchase_order,
    reorder_suggestions,
    create_goods_receipt,
)

logger = logging.getLogger(__name__)


class VendorCategoryViewSet(viewsets.ModelViewSet):
    """Vendor categories (write: ADMIN)."""

    queryset = VendorCategory.objects.annotate(vendors_count=Count('vendors'))
    serializer_class = VendorCategorySerializer

    def get_permissions(self):
        if self.action in ['create', 'update', 'partial_update', 'destroy']:
            return [IsAdmin()]
        return [IsStaffUser()]


class VendorViewSet(viewsets.ModelViewSet):
    """
    Suppliers with item and purchase order counts.

    create/update/destroy: ADMIN or STORE
    """

    queryset = Vendor.objects.select_related('category')
    serializer_class = VendorSerializer
    pagination_class = InventoryPagination

    def get_permissions(self):
        if self.action in ['create', 'update', 'partial_update', 'destroy']:
            return [IsAdminOrStore()]
        return [IsStaffUser()]

    def get_queryset(self):
        queryset = super().get_queryset().annotate(
            items_count=Count('preferred_items', distinct=True),
            purchase_orders_count=Count('purchase_orders', distinct=True),
        )
        search = self.request.query_params.get('search')
        if search:
            queryset = queryset.filter(name__icontains=search)
        return queryset.order_by('name')

    def destroy(self, request, *args, **kwargs):
        instance = self.get_object()
        try:
            instance.delete()
        except ProtectedError:
            return Response(
                {'error': 'Cannot delete vendor with purchase orders'},
                status=status.HTTP_400_BAD_REQUEST
            )
        return Response(status=status.HTTP_204_NO_CONTENT)


class PurchaseOrderViewSet(viewsets.ModelViewSet):
    """
    Purchase orders.

    list: Newest first, ?status=OPEN,PARTIAL&vendor=<id>
    create/update/destroy: ADMIN or STORE; totals are computed server side
    print: Full PO with vendor details
    suggestions: Reorder suggestions grouped by preferred vendor
    """

    queryset = PurchaseOrder.objects.select_related('vendor', 'created_by')
    serializer_class = PurchaseOrderSerializer
    pagination_class = InventoryPagination
    http_method_names = ['get', 'post', 'put', 'delete', 'head', 'options']

    def get_permissions(self):
        if self.action in ['create', 'update', 'destroy']:
            return [IsAdminOrStore()]
        return [IsStaffUser()]

    def get_queryset(self):
        queryset = super().get_queryset()

        if self.action == 'list':
            filter_serializer = PurchaseOrderFilterSerializer(data=self.request.query_params)
            filter_serializer.is_valid(raise_exception=True)
            params = filter_serializer.validated_data

            if params.get('status'):
                queryset = queryset.filter(status__in=params['status'])
            if 'vendor' in params:
                queryset = queryset.filter(vendor_id=params['vendor'])
            return queryset.annotate(items_count=Count('items')).order_by('-created_at')

        return queryset.prefetch_related('items__item__unit')

    def get_serializer_class(self):
        if self.action == 'list':
            return PurchaseOrderListSerializer
        if self.action in ['create', 'update']:
            return PurchaseOrderInputSerializer
        if self.action == 'print':
            return PurchaseOrderPrintSerializer
        return PurchaseOrderSerializer

    def _refetch(self, po_id):
        return self.get_queryset().get(pk=po_id)

    @extend_schema(request=PurchaseOrderInputSerializer, responses={201: PurchaseOrderSerializer})
    def create(self, request, *args, **kwargs):
        serializer = PurchaseOrderInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            po = create_purchase_order(
                vendor=data['vendor'],
                lines=data['items'],
                notes=data['notes'],
                user=request.user,
            )
        except ProcurementServiceError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(PurchaseOrderSerializer(self._refetch(po.id)).data, status=status.HTTP_201_CREATED)

    @extend_schema(request=PurchaseOrderInputSerializer, responses={200: PurchaseOrderSerializer})
    def update(self, request, *args, **kwargs):
        serializer = PurchaseOrderInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            po = update_purchase_order(
                po_id=kwargs['pk'],
                lines=data['items'],
                vendor=data['vendor'],
                notes=data['notes'],
                user=request.user,
            )
        except PurchaseOrderNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except ProcurementServiceError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(PurchaseOrderSerializer(self._refetch(po.id)).data)

    def destroy(self, request, *args, **kwargs):
        try:
            delete_purchase_order(po_id=kwargs['pk'], user=request.user)
        except PurchaseOrderNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except ProcurementServiceError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=True, methods=['get'])
    def print(self, request, pk=None):
        """
        Printable purchase order.

        GET /api/procurement/purchase-orders/{id}/print/
        """
        po = self.get_object()
        return Response(PurchaseOrderPrintSerializer(po).data)

    @extend_schema(responses={200: ReorderSuggestionSerializer(many=True)})
    @action(detail=False, methods=['get'])
    def suggestions(self, request):
        """
        Items to reorder grouped by preferred vendor.

        GET /api/procurement/purchase-orders/suggestions/
        """
        return Response(ReorderSuggestionSerializer(reorder_suggestions(), many=True).data)


class GoodsReceiptViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.CreateModelMixin,
    viewsets.GenericViewSet
):
    """
    Goods receipt notes.

    list/retrieve: any staff user
    create: STORE (and ADMIN); posts stock into batches
    print: Printable GRN
    """

    queryset = (
        GoodsReceipt.objects
        .select_related('purchase_order__vendor', 'received_by')
        .prefetch_related('items__item')
    )
    serializer_class = GoodsReceiptSerializer
    pagination_class = InventoryPagination

    def get_permissions(self):
        if self.action == 'create':
            return [role_required(Role.STORE, Role.ADMIN)()]
        return [IsStaffUser()]

    def get_queryset(self):
        queryset = super().get_queryset()
        if self.action != 'list':
            return queryset

        filter_serializer = GoodsReceiptFilterSerializer(data=self.request.query_params)
        filter_serializer.is_valid(raise_exception=True)
        params = filter_serializer.validated_data

        if 'purchase_order' in params:
            queryset = queryset.filter(purchase_order_id=params['purchase_order'])
        return queryset.order_by('-received_at')

    @extend_schema(request=GoodsReceiptInputSerializer, responses={201: GoodsReceiptSerializer})
    def create(self, request, *args, **kwargs):
        serializer = GoodsReceiptInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            grn = create_goods_receipt(
                purchase_order_id=data['purchase_order'],
                lines=data['items'],
                invoice_no=data['invoice_no'],
                notes=data['notes'],
                user=request.user,
            )
        except PurchaseOrderNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        except ProcurementServiceError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        grn = self.get_queryset().get(pk=grn.pk)
        return Response(GoodsReceiptSerializer(grn).data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=['get'])
    def print(self, request, pk=None):
        """
        Printable goods receipt.

        GET /api/procurement/grns/{id}/print/
        """
        grn = self.get_object()
        return Response(GoodsReceiptPrintSerializer(grn).data)
