"""Domain-specific exceptions for payment services."""


class PaymentServiceError(Exception):
    """Base exception for payment services."""
    pass


class GatewayNotConfiguredError(PaymentServiceError):
    """Raised when no active payment gateway (or webhook secret) is configured."""
    pass


class GatewayRequestError(PaymentServiceError):
    """Raised when the payment provider rejects or fails a request."""
    pass


class InvalidSignatureError(PaymentServiceError):
    """Raised when a payment or webhook signature does not match."""
    pass


class PackageNotFoundError(PaymentServiceError):
    """Raised when a package doesn't exist or is inactive."""
    pass


class PaymentTargetNotFoundError(PaymentServiceError):
    """Raised when the subscription or order being paid for doesn't exist."""
    pass
