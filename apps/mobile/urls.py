from django.urls import path

from . import views

app_name = 'mobile'

urlpatterns = [
    # Auth
    path('auth/send-otp/', views.send_otp, name='send-otp'),
    path('auth/verify-otp/', views.verify_otp, name='verify-otp'),

    # Profile
    path('profile/', views.profile, name='profile'),
    path('upload-photo/', views.upload_photo, name='upload-photo'),

    # Meals
    path('meals/weekly/', views.weekly_meals, name='meals-weekly'),
    path('meals/today/', views.todays_meals, name='meals-today'),
    path('meals/attendance/', views.meal_attendance, name='meals-attendance'),
    path('meals/set-attendance/', views.set_attendance, name='meals-set-attendance'),
    path('meals/rate/', views.rate, name='meals-rate'),
    path('attendance-settings/', views.attendance_settings, name='attendance-settings'),
    path('meal-times/', views.meal_times, name='meal-times'),

    # Ordering
    path('mess-facilities/', views.mess_facilities, name='mess-facilities'),
    path('menu-items/', views.menu_items, name='menu-items'),
    path('orders/', views.orders, name='orders'),
    path('orders/<uuid:pk>/', views.order_detail, name='order-detail'),
    path('orders/<uuid:pk>/qr-image/', views.order_qr_image, name='order-qr-image'),

    # Coupon & subscriptions
    path('qr-code/', views.qr_code, name='qr-code'),
    path('qr-code/image/', views.coupon_qr_image, name='qr-code-image'),
    path('packages/', views.packages, name='packages'),
    path('subscription/', views.subscription, name='subscription'),
    path('subscription-history/', views.subscription_history, name='subscription-history'),

    # Notifications
    path('notifications/', views.notifications, name='notifications'),
    path('notifications/unread-count/', views.notifications_unread_count, name='notifications-unread-count'),
    path('notifications/<uuid:pk>/read/', views.notification_read, name='notification-read'),
    path('register-push-token/', views.push_token, name='register-push-token'),
]

# Available endpoints (student token unless noted):
# POST      /api/mobile/auth/send-otp/           (public)
# POST      /api/mobile/auth/verify-otp/         (public)
# GET/PUT   /api/mobile/profile/
# POST      /api/mobile/upload-photo/
# GET       /api/mobile/meals/weekly/
# GET       /api/mobile/meals/today/
# POST      /api/mobile/meals/attendance/
# POST      /api/mobile/meals/set-attendance/
# POST      /api/mobile/meals/rate/
# GET       /api/mobile/attendance-settings/
# GET       /api/mobile/meal-times/
# GET       /api/mobile/mess-facilities/
# GET       /api/mobile/menu-items/              ?facility=<id>&meal_type=
# GET/POST  /api/mobile/orders/
# GET       /api/mobile/orders/{id}/
# GET       /api/mobile/orders/{id}/qr-image/
# GET       /api/mobile/qr-code/
# GET       /api/mobile/qr-code/image/
# GET       /api/mobile/packages/
# GET       /api/mobile/subscription/
# GET       /api/mobile/subscription-history/
# GET       /api/mobile/notifications/
# GET       /api/mobile/notifications/unread-count/
# PUT       /api/mobile/notifications/{id}/read/
# POST      /api/mobile/register-push-token/
