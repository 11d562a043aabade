from django.urls import path, include
from rest_framework.routers import SimpleRouter

from . import views

app_name = 'indents'

# SimpleRouter: a root view would shadow the indent list at the empty prefix
router = SimpleRouter()
# issues must be registered before the empty prefix so it is not read as an indent id
router.register(r'issues', views.IssueViewSet, basename='issue')
router.register(r'', views.IndentViewSet, basename='indent')

urlpatterns = [
    path('', include(router.urls)),
]

# Available endpoints:
# GET/POST   /api/indents/                  ?status=PENDING
# GET/PUT    /api/indents/{id}/
# POST       /api/indents/{id}/approve/
# POST       /api/indents/{id}/reject/
# GET/POST   /api/indents/issues/
# GET        /api/indents/issues/{id}/
