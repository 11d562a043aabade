from django.urls import path

from . import views

app_name = 'systemconfig'

# Fixed paths first: anything else is treated as a config key
urlpatterns = [
    path('', views.config_list, name='config-list'),
    path('bulk-update/', views.bulk_update, name='bulk-update'),
    path('meal-times/', views.meal_times, name='meal-times'),
    path('meal-attendance-settings/', views.meal_attendance_settings, name='meal-attendance-settings'),
    path('<str:key>/', views.config_detail, name='config-detail'),
]

# Available endpoints:
# GET                /api/system-config/
# POST               /api/system-config/bulk-update/
# GET/POST           /api/system-config/meal-times/
# GET/POST           /api/system-config/meal-attendance-settings/
# GET/PUT/DELETE     /api/system-config/{key}/
