from django.urls import path

from . import views

app_name = 'scanner'

urlpatterns = [
    path('scan/', views.scan, name='scan'),
    path('recent-scans/', views.recent_scans, name='recent-scans'),
]

# Available endpoints:
# POST   /api/scanner/scan/            {"qr_code": "...", "device_id": "..."}
# GET    /api/scanner/recent-scans/    ?limit=20
