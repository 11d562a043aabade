from django.urls import path, include
from rest_framework.routers import DefaultRouter

from . import views

app_name = 'mess'

router = DefaultRouter()
router.register(r'facilities', views.MessFacilityViewSet, basename='facility')
router.register(r'packages', views.PackageViewSet, basename='package')
router.register(r'menu-items', views.MenuItemViewSet, basename='menu-item')
router.register(r'orders', views.OrderViewSet, basename='order')

urlpatterns = [
    path('', include(router.urls)),
]

# Available endpoints:
# GET/POST        /api/mess/facilities/
# GET/PUT/DELETE  /api/mess/facilities/{id}/
# GET/POST        /api/mess/packages/               ?mess_facility=<id>
# GET/PUT         /api/mess/packages/{id}/
# GET/POST        /api/mess/menu-items/             ?mess_facility=<id>&meal_type=LUNCH
# GET/PUT         /api/mess/menu-items/{id}/
# GET             /api/mess/orders/                 ?status=&meal_type=
# GET/PUT         /api/mess/orders/{id}/           PUT {"status": ...}
