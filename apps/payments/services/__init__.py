"""Services for online payments through Razorpay."""

from .exceptions import (
    PaymentServiceError,
    GatewayNotConfiguredError,
    GatewayRequestError,
    InvalidSignatureError,
    PackageNotFoundError,
    PaymentTargetNotFoundError,
)
from .razorpay import RazorpayClient
from .checkout import (
    create_subscription_order,
    create_food_payment_order,
    verify_subscription_payment,
    verify_food_payment,
    handle_webhook,
)

__all__ = [
    # Exceptions
    'PaymentServiceError',
    'GatewayNotConfiguredError',
    'GatewayRequestError',
    'InvalidSignatureError',
    'PackageNotFoundError',
    'PaymentTargetNotFoundError',
    # Services
    'RazorpayClient',
    'create_subscription_order',
    'create_food_payment_order',
    'verify_subscription_payment',
    'verify_food_payment',
    'handle_webhook',
]
