"""Services for students: OTP login, SMS delivery and subscriptions."""

from .exceptions import (
    StudentServiceError,
    StudentNotFoundError,
    MissingMobileNumberError,
    OTPError,
    SubscriptionNotFoundError,
    SmsDeliveryError,
)
from .sms import send_sms
from .otp import send_otp, verify_otp
from .subscriptions import (
    update_subscription_status,
    start_checkout,
    activate_subscription,
    write_subscriptions_csv,
)

__all__ = [
    # Exceptions
    'StudentServiceError',
    'StudentNotFoundError',
    'MissingMobileNumberError',
    'OTPError',
    'SubscriptionNotFoundError',
    'SmsDeliveryError',
    # Services
    'send_sms',
    'send_otp',
    'verify_otp',
    'update_subscription_status',
    'start_checkout',
    'activate_subscription',
    'write_subscriptions_csv',
]
