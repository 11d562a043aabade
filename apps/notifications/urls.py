from django.urls import path

from . import views

app_name = 'notifications'

urlpatterns = [
    path('send-rating-requests/', views.rating_requests, name='send-rating-requests'),
    path('send-attendance-requests/', views.attendance_requests, name='send-attendance-requests'),
    path('send-expiry-reminders/', views.expiry_reminders, name='send-expiry-reminders'),
]

# Available endpoints:
# POST   /api/notifications/send-rating-requests/
# POST   /api/notifications/send-attendance-requests/
# POST   /api/notifications/send-expiry-reminders/
