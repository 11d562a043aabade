"""
OTP login for the student mobile app.

Codes are stored in StudentOTP (one outstanding code per student) so they
survive restarts and work across worker processes.
"""

import logging

from django.conf import settings
from django.db.models import F, Q

from apps.students.authentication import StudentAccessToken
from apps.students.models import Student, StudentOTP

from .exceptions import StudentNotFoundError, MissingMobileNumberError, OTPError
from .sms import send_sms, otp_message

logger = logging.getLogger(__name__)


def send_otp(identifier: str) -> Student:
    """
    Issue a 6 digit OTP and text it to the student's mobile number.

    Args:
        identifier: Register number or mobile number

    Raises:
        StudentNotFoundError: Unknown student or mobile login disabled
        MissingMobileNumberError: Student has no mobile number on file
        SmsDeliveryError: SMS gateway failure
    """
    identifier = identifier.strip()
    student = (
        Student.objects
        .filter(Q(register_number=identifier) | Q(mobile_number=identifier), mobile_login_enabled=True)
        .first()
    )
    if student is None:
        raise StudentNotFoundError(
            'Student not found or mobile login disabled. Please contact administration.'
        )
    if not student.mobile_number:
        raise MissingMobileNumberError(
            'Phone number not found for student. Please contact administration.'
        )

    otp = StudentOTP.issue(student)
    send_sms(student.mobile_number, otp_message(student.name, otp.code))
    logger.info("OTP sent to %s", student.register_number)
    return student


def verify_otp(register_number: str, code: str):
    """
    Check an OTP and exchange it for a student token.

    Returns:
        Tuple of (Student, StudentAccessToken)

    Raises:
        OTPError: Not found, expired, too many attempts or invalid code
    """
    otp = (
        StudentOTP.objects
        .select_related('student')
        .filter(student__register_number=register_number)
        .first()
    )
    if otp is None:
        raise OTPError('OTP not found or expired')

    if otp.is_expired():
        otp.delete()
        raise OTPError('OTP expired')

    if otp.attempts >= settings.OTP_MAX_ATTEMPTS:
        otp.delete()
        raise OTPError('Too many attempts')

    if otp.code != code.strip():
        StudentOTP.objects.filter(pk=otp.pk).update(attempts=F('attempts') + 1)
        raise OTPError('Invalid OTP')

    student = otp.student
    otp.delete()
    logger.info("Student %s logged in with OTP", student.register_number)
    return student, StudentAccessToken.for_student(student)
