from django.urls import path, include
from rest_framework.routers import DefaultRouter

from . import views

app_name = 'students'

router = DefaultRouter()
router.register(r'students', views.StudentViewSet, basename='student')
router.register(r'subscriptions', views.SubscriptionViewSet, basename='subscription')

urlpatterns = [
    path('', include(router.urls)),
]

# Available endpoints:
# GET              /api/students/students/                ?search=&user_type=
# GET/PUT          /api/students/students/{id}/
# POST/DELETE      /api/students/students/{id}/photo/
# GET              /api/students/subscriptions/           ?status=&user_type=&mess_facility=
# GET/PUT          /api/students/subscriptions/{id}/      PUT {"status": ...}
# GET              /api/students/subscriptions/export/
