"""Bulk SMS gateway client (HTTP GET with query parameters)."""

import logging

import requests
from django.conf import settings

from .exceptions import SmsDeliveryError

logger = logging.getLogger(__name__)

OTP_MESSAGE = 'Dear {name}, your mess app login OTP is {otp}. It is valid for {minutes} minutes. {sender}'


def otp_message(name: str, otp: str) -> str:
    return OTP_MESSAGE.format(
        name=name or 'Student',
        otp=otp,
        minutes=settings.OTP_TTL_MINUTES,
        sender=settings.SMS_SENDER,
    ).strip()


def send_sms(number: str, message: str) -> str:
    """
    Send a text message through the configured gateway.

    Returns:
        Raw gateway response body

    Raises:
        SmsDeliveryError: If the gateway is not configured or the request fails
    """
    if not settings.SMS_API_URL:
        logger.error("SMS_API_URL is not configured; cannot send SMS to %s", number)
        raise SmsDeliveryError()

    try:
        response = requests.get(
            settings.SMS_API_URL,
            params={
                'apikey': settings.SMS_API_KEY,
                'sender': settings.SMS_SENDER,
                'number': number,
                'message': message,
            },
            timeout=settings.OUTBOUND_HTTP_TIMEOUT,
        )
        response.raise_for_status()
    except requests.RequestException as e:
        logger.warning("SMS to %s failed: %s", number, e)
        raise SmsDeliveryError()

    return response.text
