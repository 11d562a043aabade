"""Domain-specific exceptions for student services."""

from rest_framework import status
from rest_framework.exceptions import APIException


class StudentServiceError(Exception):
    """Base exception for student services."""
    pass


class StudentNotFoundError(StudentServiceError):
    """Raised when no student matches (or mobile login is disabled)."""
    pass


class MissingMobileNumberError(StudentServiceError):
    """Raised when a student has no mobile number to send an OTP to."""
    pass


class OTPError(StudentServiceError):
    """Raised when an OTP is missing, expired, invalid or over its attempt limit."""
    pass


class SubscriptionNotFoundError(StudentServiceError):
    """Raised when a subscription doesn't exist."""
    pass


class SmsDeliveryError(APIException):
    """The SMS gateway did not accept the message."""
    status_code = status.HTTP_502_BAD_GATEWAY
    default_detail = 'Failed to send OTP. Please try again or contact support.'
    default_code = 'sms_delivery_failed'
