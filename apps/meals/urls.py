from django.urls import path, include
from rest_framework.routers import DefaultRouter

from . import views

app_name = 'meals'

router = DefaultRouter()
router.register(r'dishes', views.DishViewSet, basename='dish')
router.register(r'plans', views.MealPlanViewSet, basename='meal-plan')

urlpatterns = [
    path('', include(router.urls)),
]

# Available endpoints:
# GET/POST          /api/meals/dishes/
# GET/PUT/DELETE    /api/meals/dishes/{id}/
# POST              /api/meals/dishes/{id}/upload-image/
# GET/POST          /api/meals/plans/            ?mess_facility=<id>
# GET/DELETE        /api/meals/plans/{id}/
# GET               /api/meals/plans/{id}/requirements/
