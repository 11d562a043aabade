from rest_framework import serializers

from apps.meals.models import MealType
from apps.mess.models import Package
from apps.students.models import Student, Subscription


# =============================================================================
# Auth
# =============================================================================

class SendOTPSerializer(serializers.Serializer):
    identifier = serializers.CharField(max_length=50, help_text='Register number or mobile number')


class VerifyOTPSerializer(serializers.Serializer):
    register_number = serializers.CharField(max_length=50)
    otp = serializers.CharField(max_length=6, min_length=6)


# =============================================================================
# Profile
# =============================================================================

class StudentProfileSerializer(serializers.ModelSerializer):
    mess_facility_name = serializers.CharField(source='mess_facility.name', read_only=True, default=None)
    attendance_count = serializers.IntegerField(read_only=True, default=0)
    rating_count = serializers.IntegerField(read_only=True, default=0)

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
            'mess_facility',
            'mess_facility_name',
            'qr_code',
            'photo_url',
            'attendance_count',
            'rating_count',
            'created_at',
        ]
        read_only_fields = fields


class ProfileUpdateSerializer(serializers.ModelSerializer):
    """Fields a student may edit on their own profile."""

    class Meta:
        model = Student
        fields = ['name', 'mobile_number', 'email', 'room_number']
        extra_kwargs = {field: {'required': False} for field in fields}


class PhotoDataSerializer(serializers.Serializer):
    photo_data = serializers.CharField(help_text='Base64 image, bare or as a data URL')


# =============================================================================
# Meals
# =============================================================================

class AttendanceIntentSerializer(serializers.Serializer):
    meal_plan = serializers.UUIDField()
    will_attend = serializers.BooleanField(default=True)
    meal_date = serializers.DateField(required=False)


class BulkAttendanceSerializer(serializers.Serializer):
    attendance = AttendanceIntentSerializer(many=True, allow_empty=False)


class MealRatingInputSerializer(serializers.Serializer):
    meal_plan = serializers.UUIDField()
    rating = serializers.IntegerField(min_value=1, max_value=5)
    comment = serializers.CharField(required=False, allow_blank=True, default='')
    meal_date = serializers.DateField(required=False)


class WeeklyMealSerializer(serializers.Serializer):
    id = serializers.UUIDField()
    meal_type = serializers.ChoiceField(choices=MealType.choices)
    dish_name = serializers.CharField()
    time = serializers.CharField()
    meal_date = serializers.DateField()
    attended = serializers.BooleanField()
    will_attend = serializers.BooleanField()


class WeeklyDaySerializer(serializers.Serializer):
    day = serializers.IntegerField()
    day_name = serializers.CharField()
    date = serializers.DateField()
    meals = WeeklyMealSerializer(many=True)


class TodayMealSerializer(serializers.Serializer):
    id = serializers.UUIDField()
    meal_type = serializers.ChoiceField(choices=MealType.choices)
    dish_name = serializers.CharField()
    time = serializers.CharField()
    meal_date = serializers.DateField()
    attended = serializers.BooleanField()
    rated = serializers.BooleanField()
    rating = serializers.IntegerField(allow_null=True)


class MenuQuerySerializer(serializers.Serializer):
    facility = serializers.UUIDField()
    meal_type = serializers.ChoiceField(choices=MealType.choices, required=False)


# =============================================================================
# Subscriptions
# =============================================================================

class MobilePackageSerializer(serializers.ModelSerializer):
    mess_facility_name = serializers.CharField(source='mess_facility.name', read_only=True)
    mess_facility_location = serializers.CharField(source='mess_facility.location', read_only=True)

    class Meta:
        model = Package
        fields = [
            'id',
            'name',
            'description',
            'mess_facility',
            'mess_facility_name',
            'mess_facility_location',
            'duration_days',
            'price',
            'meals_included',
        ]
        read_only_fields = fields


class MobileSubscriptionSerializer(serializers.ModelSerializer):
    package_name = serializers.CharField(source='package.name', read_only=True)
    meals_included = serializers.JSONField(source='package.meals_included', read_only=True)
    duration_days = serializers.IntegerField(source='package.duration_days', read_only=True)
    mess_facility_name = serializers.CharField(source='mess_facility.name', read_only=True)
    mess_facility_location = serializers.CharField(source='mess_facility.location', read_only=True)
    days_remaining = serializers.SerializerMethodField()

    class Meta:
        model = Subscription
        fields = [
            'id',
            'package',
            'package_name',
            'meals_included',
            'duration_days',
            'mess_facility',
            'mess_facility_name',
            'mess_facility_location',
            'start_date',
            'end_date',
            'status',
            'amount_paid',
            'days_remaining',
            'created_at',
        ]
        read_only_fields = fields

    def get_days_remaining(self, obj):
        return obj.days_remaining()
