"""
Serializers for the reports app.

Only query parameters are validated here; report payloads are the plain
dicts built by ReportQueries.
"""

from rest_framework import serializers

from apps.mess.models import OrderStatus


class DateRangeQuerySerializer(serializers.Serializer):
    """
    Optional ``start_date`` / ``end_date`` (YYYY-MM-DD), inclusive.
    """

    start_date = serializers.DateField(required=False)
    end_date = serializers.DateField(required=False)

    def validate(self, attrs):
        start = attrs.get('start_date')
        end = attrs.get('end_date')
        if start and end and start > end:
            raise serializers.ValidationError({
                'start_date': 'Start date must be before end date'
            })
        return attrs


class FacilityReportQuerySerializer(DateRangeQuerySerializer):
    mess_facility = serializers.UUIDField(required=False)


class OrderReportQuerySerializer(FacilityReportQuerySerializer):
    status = serializers.ChoiceField(choices=OrderStatus.choices, required=False)
