"""
URL configuration for the Mess Management project.

Every API lives under /api/; each app ships its own router-based urls.py.
"""
from django.contrib import admin
from django.urls import path, include
from django.conf import settings
from django.conf.urls.static import static
from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView
from rest_framework_simplejwt.views import TokenRefreshView

from config.views import health_check

urlpatterns = [
    # Health check
    path('api/health/', health_check, name='health-check'),

    # Admin
    path('admin/', admin.site.urls),

    # API Documentation
    path('api/schema/', SpectacularAPIView.as_view(), name='api-schema'),
    path('api/docs/', SpectacularSwaggerView.as_view(url_name='api-schema'), name='api-docs'),

    # Authentication
    path('api/auth/token/refresh/', TokenRefreshView.as_view(), name='token_refresh'),
    path('api/auth/', include('apps.accounts.urls')),

    # Store & kitchen
    path('api/inventory/', include('apps.inventory.urls')),
    path('api/procurement/', include('apps.procurement.urls')),
    path('api/indents/', include('apps.indents.urls')),
    path('api/meals/', include('apps.meals.urls')),

    # Mess operations
    path('api/mess/', include('apps.mess.urls')),
    path('api/students/', include('apps.students.urls')),
    path('api/scanner/', include('apps.scanner.urls')),
    path('api/payments/', include('apps.payments.urls')),
    path('api/notifications/', include('apps.notifications.urls')),
    path('api/uploads/', include('apps.uploads.urls')),
    path('api/reports/', include('apps.reports.urls')),
    path('api/system-config/', include('apps.systemconfig.urls')),

    # Student mobile app
    path('api/mobile/', include('apps.mobile.urls')),
]

# Media files (development only)
if settings.DEBUG:
    urlpatterns += static(settings.MEDIA_URL, document_root=settings.MEDIA_ROOT)


# Custom error handlers
handler404 = 'config.views.error_404'
handler500 = 'config.views.error_500'
