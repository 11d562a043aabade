from django.urls import path, include
from rest_framework.routers import DefaultRouter

from . import views

app_name = 'payments'

router = DefaultRouter()
router.register(r'gateways', views.PaymentGatewayViewSet, basename='gateway')

urlpatterns = [
    path('create-order/', views.create_order, name='create-order'),
    path('create-food-order/', views.create_food_order, name='create-food-order'),
    path('verify-payment/', views.verify_payment, name='verify-payment'),
    path('verify-food-payment/', views.verify_food_payment_view, name='verify-food-payment'),
    path('webhook/', views.webhook, name='webhook'),
    path('', include(router.urls)),
]

# Available endpoints:
# GET/POST        /api/payments/gateways/
# GET/PUT/DELETE  /api/payments/gateways/{id}/
# POST            /api/payments/create-order/          {"package": "<id>"}            (hostelers)
# POST            /api/payments/create-food-order/     {"order": "<id>"}
# POST            /api/payments/verify-payment/        {"subscription", "razorpay_order_id", "razorpay_payment_id", "razorpay_signature"}
# POST            /api/payments/verify-food-payment/   {"order", "razorpay_order_id", "razorpay_payment_id", "razorpay_signature"}
# POST            /api/payments/webhook/               X-Razorpay-Signature header
