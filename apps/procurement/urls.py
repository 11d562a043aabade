from django.urls import path, include
from rest_framework.routers import DefaultRouter

from . import views

app_name = 'procurement'

router = DefaultRouter()
router.register(r'vendor-categories', views.VendorCategoryViewSet, basename='vendor-category')
router.register(r'vendors', views.VendorViewSet, basename='vendor')
router.register(r'purchase-orders', views.PurchaseOrderViewSet, basename='purchase-order')
router.register(r'grns', views.GoodsReceiptViewSet, basename='grn')

urlpatterns = [
    path('', include(router.urls)),
]

# Available endpoints:
# GET/POST   /api/procurement/vendor-categories/
# GET/POST   /api/procurement/vendors/
# GET/POST   /api/procurement/purchase-orders/              ?status=OPEN,PARTIAL&vendor=<id>
# GET/PUT/DELETE /api/procurement/purchase-orders/{id}/
# GET        /api/procurement/purchase-orders/{id}/print/
# GET        /api/procurement/purchase-orders/suggestions/
# GET/POST   /api/procurement/grns/
# GET        /api/procurement/grns/{id}/
# GET        /api/procurement/grns/{id}/print/
