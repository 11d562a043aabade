"""
Minimal Razorpay client.

Only the Orders API and signature checks are needed: the checkout itself
runs in the mobile app, which returns the payment id and signature.
"""

import hashlib
import hmac
import logging
from decimal import Decimal, ROUND_HALF_UP

import requests
from django.conf import settings

from apps.payments.models import PaymentGateway

from .exceptions import GatewayNotConfiguredError, GatewayRequestError, InvalidSignatureError

logger = logging.getLogger(__name__)

CURRENCY = 'INR'


def to_paise(amount: Decimal) -> int:
    return int((Decimal(amount) * 100).quantize(Decimal('1'), rounding=ROUND_HALF_UP))


def _hmac_sha256(secret: str, payload: bytes) -> str:
    return hmac.new(secret.encode(), payload, hashlib.sha256).hexdigest()


def signatures_match(expected: str, given: str) -> bool:
    return hmac.compare_digest(expected, given or '')


class RazorpayClient:
    """Razorpay REST client bound to one gateway's credentials."""

    def __init__(self, gateway: PaymentGateway):
        self.gateway = gateway

    @classmethod
    def active(cls):
        gateway = PaymentGateway.get_active()
        if gateway is None:
            raise GatewayNotConfiguredError('No active payment gateway configured')
        return cls(gateway)

    def create_order(self, *, amount: Decimal, receipt: str, notes=None) -> dict:
        """
        Create a Razorpay order for ``amount`` rupees.

        Returns:
            Razorpay order JSON (id, amount in paise, currency, ...)

        Raises:
            GatewayRequestError: On network failure or a non-2xx response
        """
        payload = {
            'amount': to_paise(amount),
            'currency': CURRENCY,
            'receipt': receipt[:40],
            'notes': notes or {},
        }
        try:
            response = requests.post(
                f"{settings.RAZORPAY_API_URL}/orders",
                json=payload,
                auth=(self.gateway.key_id, self.gateway.key_secret),
                timeout=settings.OUTBOUND_HTTP_TIMEOUT,
            )
            response.raise_for_status()
        except requests.RequestException as e:
            logger.warning("Razorpay order creation failed for %s: %s", receipt, e)
            raise GatewayRequestError('Payment gateway request failed')

        return response.json()

    def verify_payment(self, *, order_id: str, payment_id: str, signature: str) -> None:
        """
        Check the checkout signature: HMAC-SHA256 of ``order_id|payment_id``.

        Raises:
            InvalidSignatureError: If the signature does not match
        """
        expected = _hmac_sha256(self.gateway.key_secret, f"{order_id}|{payment_id}".encode())
        if not signatures_match(expected, signature):
            raise InvalidSignatureError('Invalid payment signature')

    def verify_webhook(self, *, body: bytes, signature: str) -> None:
        """
        Check a webhook's ``X-Razorpay-Signature`` against the raw body.

        Raises:
            GatewayNotConfiguredError: No webhook secret configured
            InvalidSignatureError: If the signature does not match
        """
        if not self.gateway.webhook_secret:
            raise GatewayNotConfiguredError('Webhook secret not configured')
        expected = _hmac_sha256(self.gateway.webhook_secret, body)
        if not signatures_match(expected, signature):
            raise InvalidSignatureError('Invalid signature')
