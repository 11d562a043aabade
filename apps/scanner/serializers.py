from rest_framework import serializers

from .models import ScannerLog


class ScanInputSerializer(serializers.Serializer):
    qr_code = serializers.CharField(max_length=120)
    device_id = serializers.CharField(max_length=100, required=False, allow_blank=True, default='')


class RecentScansQuerySerializer(serializers.Serializer):
    limit = serializers.IntegerField(min_value=1, max_value=100, required=False, default=20)


class ScannerLogSerializer(serializers.ModelSerializer):
    register_number = serializers.CharField(source='student.register_number', read_only=True, default=None)

    class Meta:
        model = ScannerLog
        fields = [
            'id',
            'device_id',
            'student',
            'student_name',
            'register_number',
            'student_photo_url',
            'mess_facility',
            'qr_code_scanned',
            'scan_result',
            'meal_type',
            'access_granted',
            'scanned_at',
        ]
        read_only_fields = fields


class ScanStatsSerializer(serializers.Serializer):
    expected_to_come = serializers.IntegerField()
    served = serializers.IntegerField()
    meal_type = serializers.CharField(allow_null=True)
    total_scans_today = serializers.IntegerField()


class RecentScansSerializer(serializers.Serializer):
    scans = ScannerLogSerializer(many=True)
    stats = ScanStatsSerializer()
