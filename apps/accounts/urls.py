from django.urls import path, include
from rest_framework.routers import DefaultRouter
from . import views

app_name = 'accounts'

router = DefaultRouter()
router.register(r'users', views.UserViewSet, basename='user')

urlpatterns = [
    # Authentication
    path('login/', views.login, name='login'),
    path('me/', views.get_current_user, name='me'),
    path('change-password/', views.change_password_view, name='change-password'),
    path('create-scanner/', views.create_scanner, name='create-scanner'),

    # User administration
    # GET    /api/auth/users/       - List users (ADMIN)
    # POST   /api/auth/users/       - Create user
    # PUT    /api/auth/users/{id}/  - Update user
    # DELETE /api/auth/users/{id}/  - Deactivate user
    path('', include(router.urls)),
]
