from django.contrib import admin
from .models import SystemConfig, MealAttendanceSettings


@admin.register(SystemConfig)
class SystemConfigAdmin(admin.ModelAdmin):
    list_display = ['key', 'value', 'category', 'updated_at']
    list_filter = ['category']
    search_fields = ['key', 'description']


@admin.register(MealAttendanceSettings)
class MealAttendanceSettingsAdmin(admin.ModelAdmin):
    list_display = ['is_mandatory', 'reminder_start_time', 'reminder_end_time', 'cutoff_time', 'updated_at']
