from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'inventory'

router = DefaultRouter()
router.register(r'units', views.UnitViewSet, basename='unit')
router.register(r'storage-types', views.StorageTypeViewSet, basename='storage-type')
router.register(r'categories', views.ItemCategoryViewSet, basename='category')
router.register(r'items', views.ItemViewSet, basename='item')
router.register(r'alerts', views.AlertViewSet, basename='alert')

urlpatterns = [
    # Master data (read: staff, write: ADMIN)
    # /api/inventory/units/, /storage-types/, /categories/

    # Items (write: ADMIN, STORE)
    # GET  /api/inventory/items/                 - List with stock figures
    # GET  /api/inventory/items/{id}/batches/    - FIFO batches with stock
    # GET  /api/inventory/items/{id}/ledger/     - Last 50 ledger entries

    # Alerts
    # GET  /api/inventory/alerts/                - Open alerts
    # POST /api/inventory/alerts/generate/       - Generate alerts
    # POST /api/inventory/alerts/{id}/dismiss/   - Dismiss alert
    path('', include(router.urls)),
]
