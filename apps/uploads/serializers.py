from rest_framework import serializers

from .models import CsvUpload, UploadType


class CsvUploadInputSerializer(serializers.Serializer):
    csv = serializers.FileField(
        required=True,
        error_messages={'required': 'No file uploaded'}
    )
    type = serializers.ChoiceField(
        choices=UploadType.choices,
        error_messages={'invalid_choice': 'Invalid upload type'}
    )

    def validate_csv(self, value):
        if not value.name.lower().endswith('.csv') and value.content_type != 'text/csv':
            raise serializers.ValidationError('Only CSV files are allowed')
        return value


class UploaderSerializer(serializers.Serializer):
    id = serializers.UUIDField()
    name = serializers.CharField()
    email = serializers.EmailField()


class CsvUploadSerializer(serializers.ModelSerializer):
    uploader = UploaderSerializer(source='uploaded_by', read_only=True)

    class Meta:
        model = CsvUpload
        fields = [
            'id',
            'upload_type',
            'filename',
            'uploader',
            'status',
            'total_rows',
            'successful_rows',
            'failed_rows',
            'error_log',
            'created_at',
            'completed_at',
        ]
        read_only_fields = fields
