from django.contrib import admin
from django.utils.html import format_html
from .models import CsvUpload, UploadStatus


@admin.register(CsvUpload)
class CsvUploadAdmin(admin.ModelAdmin):
    list_display = ['filename', 'upload_type', 'status_badge', 'total_rows', 'failed_rows', 'uploaded_by', 'created_at']
    list_filter = ['upload_type', 'status']
    search_fields = ['filename']
    readonly_fields = [field.name for field in CsvUpload._meta.fields]

    def status_badge(self, obj):
        colors = {
            UploadStatus.PROCESSING: '#17a2b8',
            UploadStatus.COMPLETED: '#28a745' if not obj.failed_rows else '#ffc107',
            UploadStatus.FAILED: '#dc3545',
        }
        return format_html(
            '<span style="background-color: {}; color: white; padding: 3px 10px; border-radius: 3px;">{}</span>',
            colors.get(obj.status, '#6c757d'),
            obj.get_status_display()
        )
    status_badge.short_description = 'Status'
