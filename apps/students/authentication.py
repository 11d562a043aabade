"""
JWT authentication for the student mobile app.

Students are not ``accounts.User`` rows, so they get their own token type
carrying a ``student_id`` claim. Staff tokens (type ``access``) are
rejected here and student tokens (type ``student``) are rejected by the
staff ``JWTAuthentication``.
"""

from datetime import timedelta

from django.conf import settings
from django.utils.translation import gettext_lazy as _
from rest_framework_simplejwt.authentication import JWTAuthentication
from rest_framework_simplejwt.exceptions import AuthenticationFailed, InvalidToken, TokenError
from rest_framework_simplejwt.tokens import Token

from .models import Student

STUDENT_ID_CLAIM = 'student_id'


class StudentAccessToken(Token):
    token_type = 'student'
    lifetime = timedelta(days=settings.STUDENT_TOKEN_LIFETIME_DAYS)

    @classmethod
    def for_student(cls, student):
        token = cls()
        token[STUDENT_ID_CLAIM] = str(student.id)
        token['register_number'] = student.register_number
        return token


class StudentJWTAuthentication(JWTAuthentication):
    """Authenticate ``Authorization: Bearer <student token>`` to a Student."""

    def get_validated_token(self, raw_token):
        try:
            return StudentAccessToken(raw_token)
        except TokenError as e:
            raise InvalidToken({
                'detail': _('Given token not valid for any token type'),
                'messages': [{'token_class': 'StudentAccessToken', 'message': e.args[0]}],
            })

    def get_user(self, validated_token):
        try:
            student_id = validated_token[STUDENT_ID_CLAIM]
        except KeyError:
            raise InvalidToken(_('Token contained no recognizable student identification'))

        try:
            return Student.objects.select_related('mess_facility').get(id=student_id)
        except (Student.DoesNotExist, ValueError):
            raise AuthenticationFailed(_('Student not found'), code='user_not_found')
