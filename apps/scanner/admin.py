from django.contrib import admin
from django.utils.html import format_html
from .models import ScannerLog, ScanResult


@admin.register(ScannerLog)
class ScannerLogAdmin(admin.ModelAdmin):
    list_display = ['scanned_at', 'result_badge', 'student_name', 'meal_type', 'mess_facility', 'device_id']
    list_filter = ['scan_result', 'meal_type', 'mess_facility']
    search_fields = ['student_name', 'qr_code_scanned', 'device_id']
    date_hierarchy = 'scanned_at'
    readonly_fields = [field.name for field in ScannerLog._meta.fields]

    def result_badge(self, obj):
        color = '#28a745' if obj.scan_result == ScanResult.MESS_COUPON_VALID else '#17a2b8'
        return format_html(
            '<span style="background-color: {}; color: white; padding: 3px 10px; border-radius: 3px;">{}</span>',
            color,
            obj.get_scan_result_display()
        )
    result_badge.short_description = 'Result'
