import logging

from rest_framework import status, viewsets
from rest_framework.decorators import api_view, authentication_classes, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import extend_schema

from apps.accounts.permissions import IsAdmin
from apps.mess.serializers import OrderQRCodeSerializer, OrderSerializer
from apps.students.authentication import StudentJWTAuthentication
from apps.students.permissions import IsHosteler, IsStudent
from apps.students.serializers import SubscriptionSerializer

from .models import PaymentGateway
from .serializers import (
    PaymentGatewaySerializer,
    CreateSubscriptionOrderSerializer,
    CreateFoodOrderSerializer,
    VerifySubscriptionPaymentSerializer,
    VerifyFoodPaymentSerializer,
)
from .services import (
    PaymentServiceError,
    GatewayNotConfiguredError,
    GatewayRequestError,
    InvalidSignatureError,
    PackageNotFoundError,
    PaymentTargetNotFoundError,
    create_subscription_order,
    create_food_payment_order,
    verify_subscription_payment,
    verify_food_payment,
    handle_webhook,
)

logger = logging.getLogger(__name__)

SIGNATURE_HEADER = 'HTTP_X_RAZORPAY_SIGNATURE'


def _error_response(error: PaymentServiceError) -> Response:
    """Map a payment service error to an HTTP response."""
    if isinstance(error, (PackageNotFoundError, PaymentTargetNotFoundError)):
        code = status.HTTP_404_NOT_FOUND
    elif isinstance(error, GatewayNotConfiguredError):
        code = status.HTTP_503_SERVICE_UNAVAILABLE
    elif isinstance(error, GatewayRequestError):
        code = status.HTTP_502_BAD_GATEWAY
    else:
        code = status.HTTP_400_BAD_REQUEST
    return Response({'error': str(error)}, status=code)


class PaymentGatewayViewSet(viewsets.ModelViewSet):
    """Payment gateway credentials (ADMIN only)."""

    queryset = PaymentGateway.objects.all()
    serializer_class = PaymentGatewaySerializer
    permission_classes = [IsAdmin]


# =============================================================================
# Student checkout
# =============================================================================

@extend_schema(request=CreateSubscriptionOrderSerializer, tags=['payments'])
@api_view(['POST'])
@authentication_classes([StudentJWTAuthentication])
@permission_classes([IsHosteler])
def create_order(request):
    """Start a package purchase; returns the Razorpay order for checkout."""
    serializer = CreateSubscriptionOrderSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    try:
        result = create_subscription_order(
            student=request.user,
            package_id=serializer.validated_data['package'],
        )
    except PaymentServiceError as e:
        return _error_response(e)

    return Response(result, status=status.HTTP_201_CREATED)


@extend_schema(request=CreateFoodOrderSerializer, tags=['payments'])
@api_view(['POST'])
@authentication_classes([StudentJWTAuthentication])
@permission_classes([IsStudent])
def create_food_order(request):
    serializer = CreateFoodOrderSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    try:
        result = create_food_payment_order(
            student=request.user,
            order_id=serializer.validated_data['order'],
        )
    except PaymentServiceError as e:
        return _error_response(e)

    return Response(result, status=status.HTTP_201_CREATED)


@extend_schema(request=VerifySubscriptionPaymentSerializer, tags=['payments'])
@api_view(['POST'])
@authentication_classes([StudentJWTAuthentication])
@permission_classes([IsStudent])
def verify_payment(request):
    """Confirm a package payment from the checkout callback."""
    serializer = VerifySubscriptionPaymentSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    data = serializer.validated_data

    try:
        subscription = verify_subscription_payment(
            student=request.user,
            subscription_id=data['subscription'],
            razorpay_order_id=data['razorpay_order_id'],
            razorpay_payment_id=data['razorpay_payment_id'],
            razorpay_signature=data['razorpay_signature'],
        )
    except PaymentServiceError as e:
        return _error_response(e)

    return Response({
        'message': 'Payment verified, subscription activated',
        'subscription': SubscriptionSerializer(subscription).data,
    })


@extend_schema(request=VerifyFoodPaymentSerializer, tags=['payments'])
@api_view(['POST'])
@authentication_classes([StudentJWTAuthentication])
@permission_classes([IsStudent])
def verify_food_payment_view(request):
    """Confirm a food order payment; returns the order and its pickup QR."""
    serializer = VerifyFoodPaymentSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    data = serializer.validated_data

    try:
        order, qr = verify_food_payment(
            student=request.user,
            order_id=data['order'],
            razorpay_order_id=data['razorpay_order_id'],
            razorpay_payment_id=data['razorpay_payment_id'],
            razorpay_signature=data['razorpay_signature'],
        )
    except PaymentServiceError as e:
        return _error_response(e)

    return Response({
        'message': 'Payment verified, order confirmed',
        'order': OrderSerializer(order).data,
        'qr_code': OrderQRCodeSerializer(qr).data,
    })


# =============================================================================
# Gateway callbacks
# =============================================================================

@extend_schema(request=OpenApiTypes.OBJECT, tags=['payments'])
@api_view(['POST'])
@authentication_classes([])
@permission_classes([AllowAny])
def webhook(request):
    """Razorpay webhook; authenticated by the X-Razorpay-Signature header."""
    signature = request.META.get(SIGNATURE_HEADER, '')
    if not signature:
        return Response({'error': 'Missing signature'}, status=status.HTTP_400_BAD_REQUEST)

    try:
        event = handle_webhook(body=request.body, signature=signature)
    except InvalidSignatureError as e:
        logger.warning("Rejected Razorpay webhook: %s", e)
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
    except GatewayNotConfiguredError as e:
        return Response({'error': str(e)}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)
    except PaymentServiceError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)

    return Response({'status': 'ok', 'event': event})
