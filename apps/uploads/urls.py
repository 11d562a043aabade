from django.urls import path, include
from rest_framework.routers import SimpleRouter

from . import views

app_name = 'uploads'

router = SimpleRouter()
router.register(r'', views.CsvUploadViewSet, basename='upload')

urlpatterns = [
    path('', include(router.urls)),
]

# Available endpoints:
# GET   /api/uploads/         history, newest first
# POST  /api/uploads/         multipart: csv=<file>, type=items|categories|recipes|students|dishes|
#                             vendors|units|storage_types|mealplans|subscriptions
# GET   /api/uploads/{id}/    row counts and error log
