import hashlib
import hmac
import pytest
from unittest.mock import patch
from apps.payments.models import PaymentGateway

KEY_SECRET = 'rzp_secret'
WEBHOOK_SECRET = 'whsec_test'


def sign(secret, payload):
    if isinstance(payload, str):
        payload = payload.encode()
    return hmac.new(secret.encode(), payload, hashlib.sha256).hexdigest()


@pytest.fixture
def gateway(db):
    return PaymentGateway.objects.create(
        name='Razorpay',
        key_id='rzp_test_key',
        key_secret=KEY_SECRET,
        webhook_secret=WEBHOOK_SECRET,
    )


@pytest.fixture
def razorpay_api():
    """Stub the Razorpay Orders API; every call returns order_RZP1."""
    with patch('apps.payments.services.razorpay.requests.post') as mock_post:
        mock_post.return_value.raise_for_status.return_value = None
        mock_post.return_value.json.return_value = {
            'id': 'order_RZP1',
            'amount': 300000,
            'currency': 'INR',
        }
        yield mock_post
