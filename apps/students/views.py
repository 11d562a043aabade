from django.db.models import Q
from django.http import HttpResponse
from django.utils import timezone
from rest_framework import viewsets, status, mixins
from rest_framework.decorators import action
from rest_framework.parsers import JSONParser, MultiPartParser, FormParser
from rest_framework.response import Response
from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import extend_schema

from apps.accounts.permissions import IsFnbManager
from apps.inventory.views import InventoryPagination
from apps.uploads.images import InvalidImageError, delete_image, save_base64_image, save_uploaded_image

from .models import Student, Subscription
from .serializers import (
    StudentSerializer,
    StudentFilterSerializer,
    StudentPhotoUploadSerializer,
    SubscriptionSerializer,
    SubscriptionFilterSerializer,
    SubscriptionStatusUpdateSerializer,
)
from .services import SubscriptionNotFoundError, update_subscription_status, write_subscriptions_csv

PHOTO_FOLDER = 'student-photos'


class StudentViewSet(mixins.ListModelMixin,
                     mixins.RetrieveModelMixin,
                     mixins.UpdateModelMixin,
                     viewsets.GenericViewSet):
    """
    Student records for F&B managers and admins.

    list: Students by name (?search= name/register/mobile, ?user_type=)
    update: Edit profile fields
    photo: POST upload (file or base64) / DELETE remove
    """

    queryset = Student.objects.select_related('mess_facility')
    serializer_class = StudentSerializer
    permission_classes = [IsFnbManager]
    pagination_class = InventoryPagination
    http_method_names = ['get', 'put', 'post', 'delete', 'head', 'options']

    def get_queryset(self):
        queryset = super().get_queryset()
        if self.action != 'list':
            return queryset

        filter_serializer = StudentFilterSerializer(data=self.request.query_params)
        filter_serializer.is_valid(raise_exception=True)
        params = filter_serializer.validated_data

        if params.get('search'):
            term = params['search']
            queryset = queryset.filter(
                Q(name__icontains=term)
                | Q(register_number__icontains=term)
                | Q(mobile_number__icontains=term)
            )
        if 'user_type' in params:
            queryset = queryset.filter(user_type=params['user_type'])
        return queryset.order_by('name')

    @extend_schema(request=StudentPhotoUploadSerializer, responses={200: StudentSerializer})
    @action(
        detail=True,
        methods=['post', 'delete'],
        parser_classes=[MultiPartParser, FormParser, JSONParser]
    )
    def photo(self, request, pk=None):
        """
        Upload or remove a student's photo.

        POST   /api/students/students/{id}/photo/   (multipart "photo" or JSON "photo_data")
        DELETE /api/students/students/{id}/photo/
        """
        student = self.get_object()

        if request.method == 'DELETE':
            delete_image(student.photo_url)
            student.photo_url = ''
            student.save(update_fields=['photo_url', 'updated_at'])
            return Response({'message': 'Photo removed successfully'})

        serializer = StudentPhotoUploadSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        try:
            if data.get('photo'):
                url = save_uploaded_image(data['photo'], PHOTO_FOLDER)
            else:
                url = save_base64_image(data['photo_data'], PHOTO_FOLDER)
        except InvalidImageError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        delete_image(student.photo_url)
        student.photo_url = url
        student.save(update_fields=['photo_url', 'updated_at'])
        return Response({
            'message': 'Photo uploaded successfully',
            'photo_url': url,
            'student': StudentSerializer(student).data,
        })


class SubscriptionViewSet(mixins.ListModelMixin,
                          mixins.RetrieveModelMixin,
                          viewsets.GenericViewSet):
    """
    Subscriptions for F&B managers.

    list: Newest first (?status=, ?user_type=, ?mess_facility=)
    update: PUT {"status": ...}; SUSPENDED/CANCELLED notify the student
    export: CSV download of every subscription
    """

    queryset = Subscription.objects.select_related('student', 'package', 'mess_facility')
    serializer_class = SubscriptionSerializer
    permission_classes = [IsFnbManager]
    pagination_class = InventoryPagination

    def get_queryset(self):
        queryset = super().get_queryset()
        if self.action != 'list':
            return queryset

        filter_serializer = SubscriptionFilterSerializer(data=self.request.query_params)
        filter_serializer.is_valid(raise_exception=True)
        params = filter_serializer.validated_data

        if 'status' in params:
            queryset = queryset.filter(status=params['status'])
        if 'user_type' in params:
            queryset = queryset.filter(student__user_type=params['user_type'])
        if 'mess_facility' in params:
            queryset = queryset.filter(mess_facility_id=params['mess_facility'])
        return queryset.order_by('-created_at')

    @extend_schema(request=SubscriptionStatusUpdateSerializer, responses={200: SubscriptionSerializer})
    def update(self, request, pk=None):
        serializer = SubscriptionStatusUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            subscription = update_subscription_status(
                subscription_id=pk,
                status=serializer.validated_data['status'],
            )
        except SubscriptionNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)
        return Response(SubscriptionSerializer(subscription).data)

    @extend_schema(responses={(200, 'text/csv'): OpenApiTypes.STR})
    @action(detail=False, methods=['get'])
    def export(self, request):
        """
        Download subscriptions as CSV.

        GET /api/students/subscriptions/export/
        """
        filename = f"subscriptions-{timezone.localdate():%Y-%m-%d}.csv"
        response = HttpResponse(content_type='text/csv')
        response['Content-Disposition'] = f'attachment; filename="{filename}"'
        write_subscriptions_csv(response, Subscription.objects.order_by('-created_at'))
        return response
