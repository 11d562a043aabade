from rest_framework import viewsets, status, mixins
from rest_framework.decorators import action
from rest_framework.parsers import MultiPartParser, FormParser
from rest_framework.response import Response
from django.db.models import ProtectedError
from drf_spectacular.utils import extend_schema

from apps.accounts.models import Role
from apps.accounts.permissions import IsStaffUser, role_required
from apps.uploads.images import save_uploaded_image, InvalidImageError

from .models import Dish, MealPlan
from .serializers import (
    DishSerializer,
    DishInputSerializer,
    DishImageUploadSerializer,
    MealPlanFilterSerializer,
    MealPlanInputSerializer,
    MealPlanSerializer,
    MealRequirementsSerializer,
)
from .services import (
    MealsServiceError,
    FacilityNotFoundError,
    create_dish,
    update_dish,
    save_meal_plans,
    meal_requirements,
)

MEAL_PLANNERS = (Role.CHEF, Role.ADMIN, Role.FNB_MANAGER)


class DishViewSet(viewsets.ModelViewSet):
    """
    Dishes with their recipes (quantities per 5 students).

    create/update/destroy/upload_image: CHEF or ADMIN
    """

    queryset = Dish.objects.prefetch_related('recipes__item__unit')
    serializer_class = DishSerializer

    def get_permissions(self):
        if self.action in ['create', 'update', 'partial_update', 'destroy', 'upload_image']:
            return [role_required(Role.CHEF, Role.ADMIN)()]
        return [IsStaffUser()]

    def get_queryset(self):
        queryset = super().get_queryset()
        category = self.request.query_params.get('category')
        if category:
            queryset = queryset.filter(category=category)
        return queryset.order_by('name')

    @extend_schema(request=DishInputSerializer, responses={201: DishSerializer})
    def create(self, request, *args, **kwargs):
        serializer = DishInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            dish = create_dish(**serializer.validated_data)
        except MealsServiceError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        dish = self.get_queryset().get(pk=dish.pk)
        return Response(DishSerializer(dish).data, status=status.HTTP_201_CREATED)

    @extend_schema(request=DishInputSerializer, responses={200: DishSerializer})
    def update(self, request, *args, **kwargs):
        dish = self.get_object()
        serializer = DishInputSerializer(dish, data=request.data, partial=kwargs.get('partial', False))
        serializer.is_valid(raise_exception=True)

        try:
            dish = update_dish(dish=dish, **serializer.validated_data)
        except MealsServiceError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        dish = self.get_queryset().get(pk=dish.pk)
        return Response(DishSerializer(dish).data)

    def destroy(self, request, *args, **kwargs):
        dish = self.get_object()
        try:
            dish.delete()
        except ProtectedError:
            return Response(
                {'error': 'Cannot delete a dish used in meal plans'},
                status=status.HTTP_400_BAD_REQUEST
            )
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(request={'multipart/form-data': DishImageUploadSerializer}, responses={200: DishSerializer})
    @action(
        detail=True,
        methods=['post'],
        url_path='upload-image',
        parser_classes=[MultiPartParser, FormParser]
    )
    def upload_image(self, request, pk=None):
        """
        Attach a photo to a dish.

        POST /api/meals/dishes/{id}/upload-image/
        """
        dish = self.get_object()
        serializer = DishImageUploadSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            dish.image_url = save_uploaded_image(serializer.validated_data['image'], 'dishes')
        except InvalidImageError as e:
            return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

        dish.save(update_fields=['image_url', 'updated_at'])
        return Response(DishSerializer(dish).data)


class MealPlanViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.DestroyModelMixin,
    viewsets.GenericViewSet
):
    """
    Weekly meal plans per facility.

    list: Ordered by day then meal, ?mess_facility=
    create: Write one plan to several facilities (CHEF, ADMIN, FNB_MANAGER)
    requirements: Ingredients and cost for the planned head count
    """

    queryset = MealPlan.objects.select_related('mess_facility').prefetch_related('plan_dishes__dish')
    serializer_class = MealPlanSerializer

    def get_permissions(self):
        if self.action in ['create', 'destroy']:
            return [role_required(*MEAL_PLANNERS)()]
        return [IsStaffUser()]

    def get_queryset(self):
        queryset = super().get_queryset()
        if self.action != 'list':
            return queryset

        filter_serializer = MealPlanFilterSerializer(data=self.request.query_params)
        filter_serializer.is_valid(raise_exception=True)
        params = filter_serializer.validated_data

        if 'mess_facility' in params:
            queryset = queryset.filter(mess_facility_id=params['mess_facility'])
        if 'day' in params:
            queryset = queryset.filter(day=params['day'])
        if 'meal' in params:
            queryset = queryset.filter(meal=params['meal'])
        return queryset.order_by('day', 'meal')

    @extend_schema(request=MealPlanInputSerializer, responses={201: MealPlanSerializer(many=True)})
    def create(self, request):
        serializer = MealPlanInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            plans = save_meal_plans(
                facility_ids=data['mess_facility_ids'],
                day=data['day'],
                meal=data['meal'],
                dishes=data['dishes'],
                user=request.user,
            )
        except FacilityNotFoundError as e:
            return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)

        plans = self.get_queryset().filter(pk__in=[p.pk for p in plans])
        return Response({
            'message': f'Saved meal plans for {len(plans)} facilities',
            'plans': MealPlanSerializer(plans, many=True).data,
        }, status=status.HTTP_201_CREATED)

    @extend_schema(responses={200: MealRequirementsSerializer})
    @action(detail=True, methods=['get'])
    def requirements(self, request, pk=None):
        """
        Ingredient requirements for a meal plan.

        GET /api/meals/plans/{id}/requirements/
        """
        plan = self.get_object()
        return Response(MealRequirementsSerializer(meal_requirements(plan)).data)
