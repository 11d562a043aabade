import io
import uuid
import pytest
from datetime import timedelta
from unittest.mock import patch
from django.utils import timezone
from apps.notifications.models import Notification, NotificationType
from apps.students.models import (
    StudentOTP,
    Subscription,
    SubscriptionStatus,
    SubscriptionTransaction,
    TransactionStatus,
)
from apps.students.services import (
    MissingMobileNumberError,
    OTPError,
    SmsDeliveryError,
    StudentNotFoundError,
    SubscriptionNotFoundError,
    activate_subscription,
    send_otp,
    start_checkout,
    update_subscription_status,
    verify_otp,
    write_subscriptions_csv,
)


@pytest.fixture
def sms_gateway(settings):
    settings.SMS_API_URL = 'https://sms.example.com/send'
    settings.SMS_API_KEY = 'test-key'
    with patch('apps.students.services.sms.requests.get') as mock_get:
        mock_get.return_value.text = 'OK'
        mock_get.return_value.raise_for_status.return_value = None
        yield mock_get


@pytest.mark.django_db
class TestSendOTP:

    def test_by_register_number(self, student, sms_gateway):
        result = send_otp('21CS001')

        assert result == student
        otp = StudentOTP.objects.get(student=student)
        params = sms_gateway.call_args.kwargs['params']
        assert params['number'] == '9876543210'
        assert otp.code in params['message']

    def test_by_mobile_number(self, student, sms_gateway):
        assert send_otp(' 9876543210 ') == student

    def test_replaces_outstanding_code(self, student, sms_gateway):
        send_otp('21CS001')
        send_otp('21CS001')

        assert StudentOTP.objects.filter(student=student).count() == 1

    def test_mobile_login_disabled(self, student, sms_gateway):
        student.mobile_login_enabled = False
        student.save()

        with pytest.raises(StudentNotFoundError):
            send_otp('21CS001')

    def test_missing_mobile_number(self, student, sms_gateway):
        student.mobile_number = ''
        student.save()

        with pytest.raises(MissingMobileNumberError):
            send_otp('21CS001')

    def test_gateway_not_configured(self, student, settings):
        settings.SMS_API_URL = ''

        with pytest.raises(SmsDeliveryError):
            send_otp('21CS001')


@pytest.mark.django_db
class TestVerifyOTP:

    @pytest.fixture
    def otp(self, student):
        return StudentOTP.issue(student)

    def test_success_returns_token(self, student, otp):
        result, token = verify_otp('21CS001', otp.code)

        assert result == student
        assert token['student_id'] == str(student.id)
        assert not StudentOTP.objects.filter(student=student).exists()

    def test_wrong_code_counts_attempt(self, otp):
        with pytest.raises(OTPError, match='Invalid OTP'):
            verify_otp('21CS001', '000000')

        otp.refresh_from_db()
        assert otp.attempts == 1

    def test_too_many_attempts(self, otp, settings):
        otp.attempts = settings.OTP_MAX_ATTEMPTS
        otp.save()

        with pytest.raises(OTPError, match='Too many attempts'):
            verify_otp('21CS001', otp.code)
        assert not StudentOTP.objects.filter(pk=otp.pk).exists()

    def test_expired(self, otp):
        otp.expires_at = timezone.now() - timedelta(seconds=1)
        otp.save()

        with pytest.raises(OTPError, match='OTP expired'):
            verify_otp('21CS001', otp.code)

    def test_no_code_issued(self, student):
        with pytest.raises(OTPError, match='not found'):
            verify_otp('21CS001', '123456')


@pytest.mark.django_db
class TestSubscriptionStatus:

    def test_suspend_notifies_student(self, subscription):
        result = update_subscription_status(
            subscription_id=subscription.id,
            status=SubscriptionStatus.SUSPENDED,
        )

        assert result.status == SubscriptionStatus.SUSPENDED
        notification = Notification.objects.get(student=subscription.student)
        assert notification.title == 'Subscription suspended'
        assert notification.type == NotificationType.SUBSCRIPTION

    def test_expire_does_not_notify(self, subscription):
        update_subscription_status(subscription_id=subscription.id, status=SubscriptionStatus.EXPIRED)

        assert not Notification.objects.exists()

    def test_unknown_subscription(self, db):
        with pytest.raises(SubscriptionNotFoundError):
            update_subscription_status(subscription_id=uuid.uuid4(), status=SubscriptionStatus.ACTIVE)


@pytest.mark.django_db
class TestCheckout:

    def test_start_checkout_creates_pending(self, student, package):
        subscription = start_checkout(student=student, package=package, razorpay_order_id='order_1')

        assert subscription.status == SubscriptionStatus.SUSPENDED
        assert subscription.end_date - subscription.start_date == timedelta(days=30)
        transaction = subscription.transactions.get()
        assert transaction.status == TransactionStatus.PENDING
        assert transaction.amount == package.price

    def test_activate_is_idempotent(self, student, package):
        subscription = start_checkout(student=student, package=package, razorpay_order_id='order_1')

        activate_subscription(subscription=subscription, payment_id='pay_1')
        activate_subscription(subscription=subscription, payment_id='pay_1')

        subscription.refresh_from_db()
        assert subscription.status == SubscriptionStatus.ACTIVE
        assert subscription.razorpay_payment_id == 'pay_1'
        assert SubscriptionTransaction.objects.filter(status=TransactionStatus.SUCCESS).count() == 1
        assert Notification.objects.filter(title='Subscription Activated').count() == 1


@pytest.mark.django_db
def test_write_subscriptions_csv(subscription):
    stream = io.StringIO()

    count = write_subscriptions_csv(stream, Subscription.objects.all())

    lines = stream.getvalue().splitlines()
    assert count == 1
    assert lines[0].startswith('register_number,student_name')
    assert lines[1].startswith('21CS001,Asha Kumar')
