from rest_framework import serializers

from .models import Student, Subscription, SubscriptionStatus, SubscriptionTransaction, UserType


# =============================================================================
# Input Serializers
# =============================================================================

class SubscriptionFilterSerializer(serializers.Serializer):
    """
    Validate query parameters for subscription listing.

    Query Parameters:
        status (str): ACTIVE, EXPIRED, SUSPENDED or CANCELLED
        user_type (str): STUDENT or EMPLOYEE
        mess_facility (UUID): Filter by facility
    """

    status = serializers.ChoiceField(choices=SubscriptionStatus.choices, required=False)
    user_type = serializers.ChoiceField(choices=UserType.choices, required=False)
    mess_facility = serializers.UUIDField(required=False)


class StudentFilterSerializer(serializers.Serializer):
    search = serializers.CharField(max_length=100, required=False)
    user_type = serializers.ChoiceField(choices=UserType.choices, required=False)


class SubscriptionStatusUpdateSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=SubscriptionStatus.choices)


class StudentPhotoUploadSerializer(serializers.Serializer):
    """Either a multipart ``photo`` file or a base64 ``photo_data`` string."""

    photo = serializers.ImageField(required=False)
    photo_data = serializers.CharField(required=False, trim_whitespace=True)

    def validate(self, attrs):
        if not attrs.get('photo') and not attrs.get('photo_data'):
            raise serializers.ValidationError('No photo uploaded')
        return attrs


# =============================================================================
# Students
# =============================================================================

class StudentSerializer(serializers.ModelSerializer):
    mess_facility_name = serializers.CharField(source='mess_facility.name', read_only=True, default=None)

    class Meta:
        model = Student
        fields = [
            'id',
            'register_number',
            'name',
            'mobile_number',
            'email',
            'room_number',
            'department',
            'user_type',
            'employee_id',
            'is_hosteler',
            'mobile_login_enabled',
            'mess_facility',
            'mess_facility_name',
            'qr_code',
            'photo_url',
            'created_at',
            'updated_at',
        ]
        read_only_fields = ['id', 'register_number', 'qr_code', 'photo_url', 'created_at', 'updated_at']


# =============================================================================
# Subscriptions
# =============================================================================

class SubscriptionSerializer(serializers.ModelSerializer):
    student_name = serializers.CharField(source='student.name', read_only=True)
    register_number = serializers.CharField(source='student.register_number', read_only=True)
    user_type = serializers.CharField(source='student.user_type', read_only=True)
    employee_id = serializers.CharField(source='student.employee_id', read_only=True)
    department = serializers.CharField(source='student.department', read_only=True)
    package_name = serializers.CharField(source='package.name', read_only=True)
    meals_included = serializers.JSONField(source='package.meals_included', read_only=True)
    mess_facility_name = serializers.CharField(source='mess_facility.name', read_only=True)
    days_remaining = serializers.SerializerMethodField()

    class Meta:
        model = Subscription
        fields = [
            'id',
            'student',
            'student_name',
            'register_number',
            'user_type',
            'employee_id',
            'department',
            'package',
            'package_name',
            'meals_included',
            'mess_facility',
            'mess_facility_name',
            'start_date',
            'end_date',
            'status',
            'amount_paid',
            'days_remaining',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields

    def get_days_remaining(self, obj):
        return obj.days_remaining()


class SubscriptionTransactionSerializer(serializers.ModelSerializer):
    class Meta:
        model = SubscriptionTransaction
        fields = [
            'id',
            'subscription',
            'razorpay_order_id',
            'razorpay_payment_id',
            'amount',
            'status',
            'created_at',
        ]
        read_only_fields = fields
