import io
import pytest
from datetime import timedelta
from decimal import Decimal
from django.utils import timezone
from apps.inventory.services import receive_stock
from apps.meals.models import MealAttendance, MealRating, MealType
from apps.reports.reports import ReportQueries
from apps.reports.tests.conftest import place_order
from apps.students.models import SubscriptionTransaction, TransactionStatus


@pytest.mark.django_db
class TestStoreDashboard:

    def test_overview(self, stocked_item, store_user):
        receive_stock(
            item=stocked_item, batch_no='B-SOON', qty=Decimal('5'), unit_cost=Decimal('50.00'),
            ref_id='seed', exp_date=timezone.localdate() + timedelta(days=3), user=store_user,
        )

        data = ReportQueries.dashboard_overview()

        assert data['stats']['total_items'] == 1
        assert data['stats']['pending_indents'] == 0
        assert [b['batch_no'] for b in data['expiring_items']] == ['B-SOON']
        assert data['top_items'][0]['value'] == Decimal('3640.00')

    def test_stock_analysis(self, stocked_item):
        data = ReportQueries.stock_analysis()

        assert data['category_wise_stock']['Grains']['value'] == Decimal('5080.00')
        assert data['total_stock_value'] == Decimal('5080.00')
        assert data['total_items'] == 2


@pytest.mark.django_db
class TestMessDashboards:

    def test_fnb_dashboard(self, subscription):
        data = ReportQueries.fnb_dashboard()

        assert data['stats']['total_subscriptions'] == 1
        assert data['stats']['active_subscriptions'] == 1
        assert data['stats']['expiring_subscriptions'] == 0
        assert data['stats']['monthly_revenue'] == Decimal('3000.00')
        assert data['package_stats'] == [{'name': 'Monthly Veg', 'subscriptions': 1}]

    def test_today_overview(self, subscription, lunch_plan, served_order):
        MealAttendance.objects.create(
            student=subscription.student,
            meal_plan=lunch_plan,
            meal_date=timezone.localdate(),
            attended=True,
        )

        data = ReportQueries.today_overview()

        meals = data['facilities'][0]['meals']
        assert meals[MealType.LUNCH]['dishes'] == 'Veg Biryani'
        assert meals[MealType.LUNCH]['total_planned'] == 1
        assert meals[MealType.LUNCH]['subscription_served'] == 1
        assert meals[MealType.LUNCH]['subscription_percentage'] == 100.0
        assert meals[MealType.LUNCH]['order_revenue'] == Decimal('180.00')
        assert meals[MealType.LUNCH]['total_served'] == 2
        assert meals[MealType.SNACKS]['dishes'] == 'Not Planned'
        assert meals[MealType.SNACKS]['total_planned'] == 0


@pytest.mark.django_db
class TestMessReport:

    def test_summary(self, facility, student, lunch_plan, menu_item, served_order):
        place_order(student, facility, menu_item)
        MealRating.objects.create(student=student, meal_plan=lunch_plan, meal_date=timezone.localdate(), rating=5)

        data = ReportQueries.mess_report(facility)

        summary = data['summary']
        assert summary['total_orders'] == 2
        assert summary['served_orders'] == 1
        assert summary['total_revenue'] == Decimal('180.00')
        assert summary['average_order_value'] == 180.0
        assert summary['satisfaction_rate'] == 100.0
        assert len(data['daily_stats']) == 8
        assert data['popular_items'][0] == {
            'name': 'Veg Thali', 'quantity': 3, 'orders': 2, 'revenue': Decimal('270.00'),
        }
        assert data['top_rated_dishes'][0]['name'] == 'Veg Biryani'

    def test_no_served_orders(self, facility):
        data = ReportQueries.mess_report(facility)

        assert data['summary']['average_order_value'] == 0
        assert data['summary']['average_rating'] == 0


@pytest.mark.django_db
class TestCrossFacilityReports:

    def test_meal_report(self, subscription, lunch_plan, served_order):
        MealAttendance.objects.create(
            student=subscription.student,
            meal_plan=lunch_plan,
            meal_date=timezone.localdate(),
            attended=True,
        )

        data = ReportQueries.meal_report()

        assert data['summary']['subscription_meals'] == 1
        assert data['summary']['individual_orders'] == 1
        assert data['summary']['total_meals_served'] == 2
        assert {'meal_type': MealType.LUNCH, 'count': 2} in data['meal_type_stats']

    def test_order_report(self, student, facility, menu_item, served_order):
        place_order(student, facility, menu_item, paid=False)

        data = ReportQueries.order_report()

        assert data['summary']['total_orders'] == 2
        assert data['summary']['completion_rate'] == 50.0
        assert data['summary']['average_order_value'] == 90.0

    def test_feedback_filtered_by_date(self, student, lunch_plan):
        today = timezone.localdate()
        MealRating.objects.create(student=student, meal_plan=lunch_plan, meal_date=today, rating=2, comment='Cold')
        MealRating.objects.create(
            student=student, meal_plan=lunch_plan, meal_date=today - timedelta(days=30), rating=5,
        )

        data = ReportQueries.feedback_report(start_date=today - timedelta(days=1))

        assert data['summary']['total_ratings'] == 1
        assert data['summary']['satisfaction_rate'] == 0
        assert data['recent_feedback'][0]['comment'] == 'Cold'


@pytest.mark.django_db
class TestTransactions:

    def test_report(self, subscription, student, facility, menu_item, served_order):
        SubscriptionTransaction.objects.create(
            subscription=subscription,
            razorpay_order_id='order_1',
            amount=Decimal('3000.00'),
            status=TransactionStatus.SUCCESS,
        )
        place_order(student, facility, menu_item)

        data = ReportQueries.transaction_report()

        stats = data['stats']
        assert stats['total_transactions'] == 3
        assert stats['successful_transactions'] == 2
        assert stats['total_revenue'] == Decimal('3180.00')
        assert stats['subscription_count'] == 1
        assert stats['order_count'] == 2
        assert {'status': TransactionStatus.PENDING, 'count': 1} in data['status_data']
        assert data['package_data'] == [{'name': 'Monthly Veg', 'revenue': Decimal('3000.00')}]

    def test_unpaid_orders_excluded(self, student, facility, menu_item):
        place_order(student, facility, menu_item, paid=False)

        assert ReportQueries.transactions() == []

    def test_csv(self, served_order):
        stream = io.StringIO()

        count = ReportQueries.write_transactions_csv(stream)

        lines = stream.getvalue().splitlines()
        assert count == 1
        assert lines[0].startswith('type,date,student_name')
        assert lines[1].startswith('Order,')
        assert ',SUCCESS,' in lines[1]
