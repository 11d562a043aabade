from rest_framework import serializers

from .models import Notification, PushToken


class NotificationSerializer(serializers.ModelSerializer):
    is_global = serializers.SerializerMethodField()

    class Meta:
        model = Notification
        fields = ['id', 'title', 'message', 'type', 'meal_plan', 'is_read', 'is_global', 'created_at']
        read_only_fields = fields

    def get_is_global(self, obj):
        return obj.student_id is None


class PushTokenInputSerializer(serializers.Serializer):
    token = serializers.CharField(max_length=255)
    platform = serializers.CharField(max_length=20, required=False, default='expo')


class PushTokenSerializer(serializers.ModelSerializer):
    class Meta:
        model = PushToken
        fields = ['id', 'token', 'platform', 'is_active', 'updated_at']
        read_only_fields = fields


class JobResultSerializer(serializers.Serializer):
    message = serializers.CharField()
    count = serializers.IntegerField()
