from rest_framework import viewsets, status, mixins
from rest_framework.decorators import action
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema

from apps.accounts.models import Role
from apps.accounts.permissions import IsStaffUser, role_required
from apps.inventory.services import InventoryServiceError
from apps.inventory.views import InventoryPagination

from .models import Indent, Issue
from .serializers import (
    IndentFilterSerializer,
    IndentInputSerializer,
    IndentSerializer,
    IssueFilterSerializer,
    IssueInputSerializer,
    IssueSerializer,
)
from .services import (
    IndentServiceError,
    IndentNotFoundError,
    IndentPermissionError,
    create_indent,
    update_indent,
    approve_indent,
    reject_indent,
    create_issue,
)


def _error_response(e):
    if isinstance(e, IndentNotFoundError):
        code = status.HTTP_404_NOT_FOUND
    elif isinstance(e, IndentPermissionError):
        code = status.HTTP_403_FORBIDDEN
    else:
        code = status.HTTP_400_BAD_REQUEST
    return Response({'error': str(e)}, status=code)


class IndentViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    viewsets.GenericViewSet
):
    """
    Kitchen indents.

    list: Newest first, ?status=
    create: CHEF, COOK or ADMIN
    update: Requester or ADMIN while PENDING
    approve/reject: ADMIN or CHEF while PENDING
    """

    queryset = (
        Indent.objects
        .select_related('requested_by', 'approved_by')
        .prefetch_related('items__item__unit')
    )
    serializer_class = IndentSerializer
    pagination_class = InventoryPagination

    def get_permissions(self):
        if self.action in ['create', 'update']:
            return [role_required(Role.CHEF, Role.COOK, Role.ADMIN)()]
        if self.action in ['approve', 'reject']:
            return [role_required(Role.ADMIN, Role.CHEF)()]
        return [IsStaffUser()]

    def get_queryset(self):
        queryset = super().get_queryset()
        if self.action != 'list':
            return queryset

        filter_serializer = IndentFilterSerializer(data=self.request.query_params)
        filter_serializer.is_valid(raise_exception=True)
        params = filter_serializer.validated_data

        if 'status' in params:
            queryset = queryset.filter(status=params['status'])
        if 'requested_for_date' in params:
            queryset = queryset.filter(requested_for_date=params['requested_for_date'])
        return queryset.order_by('-created_at')

    def _detail(self, indent):
        return IndentSerializer(self.get_queryset().get(pk=indent.pk)).data

    @extend_schema(request=IndentInputSerializer, responses={201: IndentSerializer})
    def create(self, request):
        serializer = IndentInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            indent = create_indent(
                user=request.user,
                requested_for_date=data['requested_for_date'],
                meal=data['meal'],
                notes=data['notes'],
                lines=data['items'],
            )
        except IndentServiceError as e:
            return _error_response(e)

        return Response(self._detail(indent), status=status.HTTP_201_CREATED)

    @extend_schema(request=IndentInputSerializer, responses={200: IndentSerializer})
    def update(self, request, pk=None):
        serializer = IndentInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            indent = update_indent(
                indent_id=pk,
                user=request.user,
                requested_for_date=data['requested_for_date'],
                meal=data['meal'],
                notes=data['notes'],
                lines=data['items'],
            )
        except IndentServiceError as e:
            return _error_response(e)

        return Response(self._detail(indent))

    @extend_schema(request=None, responses={200: IndentSerializer})
    @action(detail=True, methods=['post'])
    def approve(self, request, pk=None):
        """
        Approve a pending indent.

        POST /api/indents/{id}/approve/
        """
        try:
            indent = approve_indent(indent_id=pk, user=request.user)
        except IndentServiceError as e:
            return _error_response(e)
        return Response(self._detail(indent))

    @extend_schema(request=None, responses={200: IndentSerializer})
    @action(detail=True, methods=['post'])
    def reject(self, request, pk=None):
        """
        Reject a pending indent.

        POST /api/indents/{id}/reject/
        """
        try:
            indent = reject_indent(indent_id=pk, user=request.user)
        except IndentServiceError as e:
            return _error_response(e)
        return Response(self._detail(indent))


class IssueViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    viewsets.GenericViewSet
):
    """
    Stock issues against approved indents.

    create: STORE (and ADMIN)
    """

    queryset = (
        Issue.objects
        .select_related('indent', 'issued_by')
        .prefetch_related('items__item', 'items__batch')
    )
    serializer_class = IssueSerializer
    pagination_class = InventoryPagination

    def get_permissions(self):
        if self.action == 'create':
            return [role_required(Role.STORE, Role.ADMIN)()]
        return [IsStaffUser()]

    def get_queryset(self):
        queryset = super().get_queryset()
        if self.action != 'list':
            return queryset

        filter_serializer = IssueFilterSerializer(data=self.request.query_params)
        filter_serializer.is_valid(raise_exception=True)
        params = filter_serializer.validated_data

        if 'indent' in params:
            queryset = queryset.filter(indent_id=params['indent'])
        return queryset.order_by('-issued_at')

    @extend_schema(request=IssueInputSerializer, responses={201: IssueSerializer})
    def create(self, request):
        serializer = IssueInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            issue = create_issue(
                indent_id=data['indent'],
                lines=data['items'],
                notes=data['notes'],
                user=request.user,
            )
        except IndentServiceError as e:
            return _error_response(e)
        except InventoryServiceError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        issue = self.get_queryset().get(pk=issue.pk)
        return Response(IssueSerializer(issue).data, status=status.HTTP_201_CREATED)
