from rest_framework import viewsets, status, mixins
from rest_framework.response import Response
from django.db.models import Count
from drf_spectacular.utils import extend_schema

from apps.accounts.models import Role
from apps.accounts.permissions import IsFnbManager, role_required
from apps.inventory.views import InventoryPagination
from apps.students.models import SubscriptionStatus

from .models import MessFacility, Package, MenuItem, Order, OrderPaymentStatus
from .serializers import (
    MessFacilitySerializer,
    PackageSerializer,
    PackageFilterSerializer,
    MenuItemSerializer,
    MenuItemFilterSerializer,
    OrderSerializer,
    OrderFilterSerializer,
    OrderStatusUpdateSerializer,
)
from .services import OrderNotFoundError, update_order_status


class MessFacilityViewSet(viewsets.ModelViewSet):
    """
    Mess facilities with package and subscription counts.

    list: FNB_MANAGER, ADMIN, CHEF
    everything else: FNB_MANAGER (and ADMIN)
    """

    queryset = MessFacility.objects.all()
    serializer_class = MessFacilitySerializer

    def get_permissions(self):
        if self.action == 'list':
            return [role_required(Role.FNB_MANAGER, Role.ADMIN, Role.CHEF)()]
        return [IsFnbManager()]

    def get_queryset(self):
        return super().get_queryset().annotate(
            packages_count=Count('packages', distinct=True),
            subscriptions_count=Count('subscriptions', distinct=True),
        ).order_by('name')

    def destroy(self, request, *args, **kwargs):
        facility = self.get_object()
        if facility.subscriptions.filter(status=SubscriptionStatus.ACTIVE).exists():
            return Response(
                {'error': 'Cannot delete a facility with active subscriptions'},
                status=status.HTTP_400_BAD_REQUEST
            )
        facility.is_active = False
        facility.save(update_fields=['is_active', 'updated_at'])
        return Response(status=status.HTTP_204_NO_CONTENT)


class PackageViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.CreateModelMixin,
    mixins.UpdateModelMixin,
    viewsets.GenericViewSet
):
    """Subscription packages (?mess_facility= filter)."""

    queryset = Package.objects.select_related('mess_facility')
    serializer_class = PackageSerializer
    permission_classes = [IsFnbManager]

    def get_queryset(self):
        queryset = super().get_queryset().annotate(subscriptions_count=Count('subscriptions'))
        if self.action != 'list':
            return queryset

        filter_serializer = PackageFilterSerializer(data=self.request.query_params)
        filter_serializer.is_valid(raise_exception=True)
        params = filter_serializer.validated_data

        if 'mess_facility' in params:
            queryset = queryset.filter(mess_facility_id=params['mess_facility'])
        return queryset.order_by('name')


class MenuItemViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.CreateModelMixin,
    mixins.UpdateModelMixin,
    viewsets.GenericViewSet
):
    """À la carte menu items (?mess_facility=&meal_type=)."""

    queryset = MenuItem.objects.select_related('mess_facility')
    serializer_class = MenuItemSerializer
    permission_classes = [IsFnbManager]

    def get_queryset(self):
        queryset = super().get_queryset()
        if self.action != 'list':
            return queryset

        filter_serializer = MenuItemFilterSerializer(data=self.request.query_params)
        filter_serializer.is_valid(raise_exception=True)
        params = filter_serializer.validated_data

        if 'mess_facility' in params:
            queryset = queryset.filter(mess_facility_id=params['mess_facility'])
        if 'meal_type' in params:
            queryset = queryset.filter(meal_type=params['meal_type'])
        return queryset.order_by('name')


class OrderViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    viewsets.GenericViewSet
):
    """
    Paid food orders for the kitchen.

    list: PAID orders newest first (?status=&meal_type=&mess_facility=)
    update: PUT {"status": ...}; CONFIRMED is stored as PREPARED
    """

    queryset = (
        Order.objects
        .filter(payment_status=OrderPaymentStatus.PAID)
        .select_related('student', 'mess_facility')
        .prefetch_related('items__menu_item', 'qr_codes')
    )
    serializer_class = OrderSerializer
    permission_classes = [IsFnbManager]
    pagination_class = InventoryPagination

    def get_queryset(self):
        queryset = super().get_queryset()
        if self.action != 'list':
            return queryset

        filter_serializer = OrderFilterSerializer(data=self.request.query_params)
        filter_serializer.is_valid(raise_exception=True)
        params = filter_serializer.validated_data

        if 'status' in params:
            queryset = queryset.filter(status=params['status'])
        if 'meal_type' in params:
            queryset = queryset.filter(meal_type=params['meal_type'])
        if 'mess_facility' in params:
            queryset = queryset.filter(mess_facility_id=params['mess_facility'])
        return queryset.order_by('-created_at')

    @extend_schema(request=OrderStatusUpdateSerializer, responses={200: OrderSerializer})
    def update(self, request, pk=None):
        serializer = OrderStatusUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            order = update_order_status(order_id=pk, status=serializer.validated_data['status'])
        except OrderNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)

        order = Order.objects.select_related('student', 'mess_facility').prefetch_related(
            'items__menu_item', 'qr_codes'
        ).get(pk=order.pk)
        return Response(OrderSerializer(order).data)
