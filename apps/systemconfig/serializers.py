import re

from rest_framework import serializers

from .models import SystemConfig, MealAttendanceSettings
from .services import DEFAULT_MEAL_TIMES

HHMM_RE = re.compile(r'^([01]\d|2[0-3]):[0-5]\d$')


class SystemConfigSerializer(serializers.ModelSerializer):
    class Meta:
        model = SystemConfig
        fields = ['id', 'key', 'value', 'category', 'description', 'created_at', 'updated_at']
        read_only_fields = ['id', 'key', 'created_at', 'updated_at']


class ConfigValueInputSerializer(serializers.Serializer):
    value = serializers.CharField(allow_blank=True)
    category = serializers.CharField(max_length=50, required=False)
    description = serializers.CharField(max_length=255, required=False, allow_blank=True)


class BulkConfigEntrySerializer(ConfigValueInputSerializer):
    key = serializers.CharField(max_length=100)


class BulkConfigInputSerializer(serializers.Serializer):
    settings = BulkConfigEntrySerializer(many=True, allow_empty=False)


class MealTimesSerializer(serializers.Serializer):
    """All eight start/end keys as HH:MM strings; partial on update."""

    def get_fields(self):
        return {
            key: serializers.CharField(required=False)
            for key in DEFAULT_MEAL_TIMES
        }

    def validate(self, attrs):
        errors = {key: 'Use HH:MM format' for key, value in attrs.items() if not HHMM_RE.match(value)}
        if errors:
            raise serializers.ValidationError(errors)
        return attrs


class MealAttendanceSettingsSerializer(serializers.ModelSerializer):
    reminder_start_time = serializers.TimeField(format='%H:%M')
    reminder_end_time = serializers.TimeField(format='%H:%M')
    cutoff_time = serializers.TimeField(format='%H:%M')

    class Meta:
        model = MealAttendanceSettings
        fields = ['is_mandatory', 'reminder_start_time', 'reminder_end_time', 'cutoff_time', 'updated_at']
        read_only_fields = ['updated_at']
