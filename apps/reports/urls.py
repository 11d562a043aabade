from django.urls import path
from . import views

app_name = 'reports'

urlpatterns = [
    # Store dashboard
    path('dashboard/overview/', views.dashboard_overview, name='dashboard-overview'),
    path('dashboard/stock-analysis/', views.stock_analysis, name='stock-analysis'),

    # Mess dashboards
    path('fnb-dashboard/', views.fnb_dashboard, name='fnb-dashboard'),
    path('today-overview/', views.today_overview, name='today-overview'),
    path('mess/<uuid:facility_id>/', views.mess_report, name='mess-report'),

    # Reports
    path('meals/', views.meal_report, name='meal-report'),
    path('orders/', views.order_report, name='order-report'),
    path('feedback/', views.feedback_report, name='feedback-report'),
    path('transactions/', views.transaction_report, name='transaction-report'),
    path('transactions/export/', views.export_transactions, name='transaction-export'),
]

# Available endpoints:
# GET  /api/reports/dashboard/overview/
# GET  /api/reports/dashboard/stock-analysis/
# GET  /api/reports/fnb-dashboard/
# GET  /api/reports/today-overview/
# GET  /api/reports/mess/{id}/              ?start_date=&end_date=
# GET  /api/reports/meals/                  ?start_date=&end_date=&mess_facility=
# GET  /api/reports/orders/                 ?start_date=&end_date=&mess_facility=&status=
# GET  /api/reports/feedback/               ?start_date=&end_date=&mess_facility=
# GET  /api/reports/transactions/           ?start_date=&end_date=
# GET  /api/reports/transactions/export/    CSV
