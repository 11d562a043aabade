"""
Reports Module
==============

Read-only aggregate queries behind the store dashboard and the F&B
manager's reports.

Classes:
    ReportQueries: Static methods for dashboard and report queries.

Example:
    Detailed report for one dining hall::

        from apps.reports.reports import ReportQueries

        report = ReportQueries.mess_report(
            facility,
            start_date=date.today() - timedelta(days=7),
            end_date=date.today(),
        )
        print(report['summary']['total_meals_served'])

Note:
    Every method returns plain dicts and lists. Money is returned as
    Decimal; averages and percentages as floats rounded for display.
"""

import csv
from datetime import timedelta
from decimal import Decimal

from django.db.models import Avg, Count, DecimalField, ExpressionWrapper, F, Q, Sum
from django.db.models.functions import Coalesce, ExtractHour, TruncDate
from django.utils import timezone

from apps.accounts.models import AuditLog
from apps.indents.models import Indent, IndentStatus
from apps.inventory.models import Alert, AlertStatus, AlertType, Item, ItemBatch
from apps.meals.models import MEAL_ORDER, MealAttendance, MealPlan, MealRating
from apps.mess.models import (
    MessFacility,
    Order,
    OrderItem,
    OrderPaymentStatus,
    OrderStatus,
    Package,
)
from apps.procurement.models import POStatus, PurchaseOrder
from apps.students.models import (
    Student,
    Subscription,
    SubscriptionStatus,
    SubscriptionTransaction,
    TransactionStatus,
)

ZERO = Decimal('0.00')

EXPIRING_BATCH_DAYS = 7
EXPIRING_SUBSCRIPTION_DAYS = 3
DEFAULT_REPORT_DAYS = 7
TRANSACTION_LIST_LIMIT = 100

BATCH_VALUE = ExpressionWrapper(
    F('qty_on_hand') * F('unit_cost'),
    output_field=DecimalField(max_digits=18, decimal_places=5)
)

# Order states that count as a real order for the day
LIVE_ORDER_STATUSES = [OrderStatus.CONFIRMED, OrderStatus.PREPARED, OrderStatus.SERVED]

TRANSACTION_EXPORT_COLUMNS = [
    'type',
    'date',
    'student_name',
    'register_number',
    'user_type',
    'department',
    'mess_facility',
    'description',
    'meal_type',
    'items',
    'amount',
    'status',
    'razorpay_order_id',
    'razorpay_payment_id',
    'created_at',
]


def _percentage(part, whole):
    return round(part / whole * 100, 1) if whole else 0


def _average(total, count):
    return round(float(total) / count, 2) if count else 0


def _date_range(queryset, field, start_date, end_date):
    if start_date:
        queryset = queryset.filter(**{f'{field}__gte': start_date})
    if end_date:
        queryset = queryset.filter(**{f'{field}__lte': end_date})
    return queryset


def _order_transaction_status(order):
    if order.status == OrderStatus.SERVED:
        return TransactionStatus.SUCCESS
    if order.status == OrderStatus.CANCELLED:
        return TransactionStatus.FAILED
    return TransactionStatus.PENDING


class ReportQueries:
    """
    Aggregate queries for dashboards and reports.

    Methods:
        dashboard_overview: Store dashboard counters and lists.
        stock_analysis: Stock value per item category.
        fnb_dashboard: Subscription counters for the F&B manager.
        today_overview: Per facility, per meal serving status for today.
        mess_report: Detailed report for one facility over a date range.
        meal_report: Meals served across facilities.
        order_report: Food order statistics.
        feedback_report: Meal rating statistics.
        transactions: Subscription payments and paid orders as one list.
        transaction_report: Revenue statistics over transactions().
        write_transactions_csv: CSV export of transactions().
    """

    # =========================================================================
    # Store dashboard
    # =========================================================================

    @staticmethod
    def dashboard_overview(today=None):
        """
        Counters and short lists for the store dashboard.

        Returns:
            dict: ``stats`` (total_items, low_stock_alerts, pending_indents,
            open_pos), ``recent_activities`` (last 10 audit entries),
            ``expiring_items`` (batches expiring within 7 days) and
            ``top_items`` (5 most valuable batches).
        """
        today = today or timezone.localdate()

        stats = {
            'total_items': Item.objects.count(),
            'low_stock_alerts': Alert.objects.filter(
                status=AlertStatus.OPEN,
                type__in=[AlertType.LOW_STOCK, AlertType.MOQ],
            ).count(),
            'pending_indents': Indent.objects.filter(status=IndentStatus.PENDING).count(),
            'open_pos': PurchaseOrder.objects.filter(
                status__in=[POStatus.OPEN, POStatus.PARTIAL]
            ).count(),
        }

        activities = AuditLog.objects.select_related('user').order_by('-created_at')[:10]

        in_stock = ItemBatch.objects.filter(qty_on_hand__gt=0).select_related('item__unit')
        expiring = in_stock.filter(
            exp_date__gte=today,
            exp_date__lte=today + timedelta(days=EXPIRING_BATCH_DAYS),
        ).order_by('exp_date')
        top_batches = in_stock.annotate(value=BATCH_VALUE).order_by('-value')[:5]

        return {
            'stats': stats,
            'recent_activities': [
                {
                    'id': entry.id,
                    'action': entry.action,
                    'entity': entry.entity,
                    'user_name': entry.user.name if entry.user else None,
                    'created_at': entry.created_at,
                }
                for entry in activities
            ],
            'expiring_items': [
                {
                    'item_name': batch.item.name,
                    'batch_no': batch.batch_no,
                    'qty': batch.qty_on_hand,
                    'unit': batch.item.unit.symbol,
                    'exp_date': batch.exp_date,
                }
                for batch in expiring
            ],
            'top_items': [
                {
                    'name': batch.item.name,
                    'unit': batch.item.unit.symbol,
                    'qty': batch.qty_on_hand,
                    'unit_cost': batch.unit_cost,
                    'value': batch.value.quantize(ZERO),
                }
                for batch in top_batches
            ],
        }

    @staticmethod
    def stock_analysis():
        """
        Value and quantity of stock on hand per item category.

        Returns:
            dict: ``category_wise_stock`` mapping category name to
            ``{value, qty}``, ``total_stock_value`` and ``total_items``
            (number of batches with stock).
        """
        in_stock = ItemBatch.objects.filter(qty_on_hand__gt=0)
        rows = (
            in_stock
            .values('item__category__name')
            .annotate(
                value=Coalesce(Sum(BATCH_VALUE), Decimal('0')),
                qty=Coalesce(Sum('qty_on_hand'), Decimal('0')),
            )
            .order_by('item__category__name')
        )

        categories = {
            row['item__category__name']: {
                'value': row['value'].quantize(ZERO),
                'qty': row['qty'],
            }
            for row in rows
        }

        return {
            'category_wise_stock': categories,
            'total_stock_value': sum((c['value'] for c in categories.values()), ZERO),
            'total_items': in_stock.count(),
        }

    # =========================================================================
    # Mess dashboards
    # =========================================================================

    @staticmethod
    def fnb_dashboard(today=None):
        """
        Subscription counters for the F&B manager.

        Monthly revenue sums ``amount_paid`` of ACTIVE and EXPIRED
        subscriptions created since the first of the current month.
        """
        today = today or timezone.localdate()
        month_start = today.replace(day=1)
        active = Subscription.objects.filter(status=SubscriptionStatus.ACTIVE)

        monthly_revenue = Subscription.objects.filter(
            created_at__date__gte=month_start,
            status__in=[SubscriptionStatus.ACTIVE, SubscriptionStatus.EXPIRED],
        ).aggregate(total=Coalesce(Sum('amount_paid'), ZERO))['total']

        user_types = Student.objects.values('user_type').annotate(count=Count('id')).order_by('user_type')
        packages = Package.objects.annotate(subscriptions_count=Count('subscriptions')).order_by('name')
        facilities = MessFacility.objects.annotate(
            active_count=Count('subscriptions', filter=Q(subscriptions__status=SubscriptionStatus.ACTIVE))
        ).order_by('name')

        return {
            'stats': {
                'total_subscriptions': Subscription.objects.count(),
                'active_subscriptions': active.count(),
                'expiring_subscriptions': active.filter(
                    end_date__gte=today,
                    end_date__lte=today + timedelta(days=EXPIRING_SUBSCRIPTION_DAYS),
                ).count(),
                'monthly_revenue': monthly_revenue,
            },
            'user_type_stats': [
                {'user_type': row['user_type'], 'count': row['count']}
                for row in user_types
            ],
            'package_stats': [
                {'name': package.name, 'subscriptions': package.subscriptions_count}
                for package in packages
            ],
            'messwise_active_counts': [
                {'id': facility.id, 'name': facility.name, 'active_count': facility.active_count}
                for facility in facilities
            ],
        }

    @staticmethod
    def today_overview(today=None):
        """
        Serving status of every active facility for each meal today.

        ``total_planned`` counts subscriptions active today whose package
        includes the meal; ``order_revenue`` covers served orders only.
        """
        today = today or timezone.localdate()
        facilities = []

        for facility in MessFacility.objects.filter(is_active=True).order_by('name'):
            subscriptions = list(
                Subscription.objects.active_on(today)
                .filter(mess_facility=facility)
                .select_related('package')
            )
            plans = {
                plan.meal: plan
                for plan in MealPlan.objects.filter(mess_facility=facility, day=today.weekday())
                .prefetch_related('plan_dishes__dish')
            }
            orders = Order.objects.filter(
                mess_facility=facility,
                created_at__date=today,
                status__in=LIVE_ORDER_STATUSES,
            )

            meals = {}
            for meal in MEAL_ORDER:
                plan = plans.get(meal)
                planned = sum(1 for sub in subscriptions if sub.package.includes_meal(meal))
                served = 0
                if plan is not None:
                    served = MealAttendance.objects.filter(
                        meal_plan=plan,
                        meal_date=today,
                        attended=True,
                    ).count()

                meal_orders = orders.filter(meal_type=meal)
                served_orders = meal_orders.filter(status=OrderStatus.SERVED)
                revenue = served_orders.aggregate(total=Coalesce(Sum('total_amount'), ZERO))['total']
                served_order_count = served_orders.count()

                meals[meal] = {
                    'dishes': (plan.dish_names() if plan else '') or 'Not Planned',
                    'total_planned': planned,
                    'subscription_served': served,
                    'subscription_percentage': _percentage(served, planned),
                    'total_orders': meal_orders.count(),
                    'order_revenue': revenue,
                    'total_served': served + served_order_count,
                }

            facilities.append({
                'id': facility.id,
                'name': facility.name,
                'location': facility.location,
                'capacity': facility.capacity,
                'meals': meals,
            })

        return {'date': today, 'facilities': facilities}

    # =========================================================================
    # Ratings (shared by mess and feedback reports)
    # =========================================================================

    @staticmethod
    def _rating_summary(ratings):
        totals = ratings.aggregate(count=Count('id'), average=Avg('rating'))
        count = totals['count']
        distribution = {value: 0 for value in range(1, 6)}
        for row in ratings.values('rating').annotate(count=Count('id')):
            distribution[row['rating']] = row['count']

        # A rating applies to every dish on the rated meal plan
        dishes = list(
            ratings
            .filter(meal_plan__plan_dishes__isnull=False)
            .values('meal_plan__plan_dishes__dish__name', 'meal_plan__meal')
            .annotate(count=Count('id'), average=Avg('rating'))
        )
        dish_rows = [
            {
                'name': row['meal_plan__plan_dishes__dish__name'],
                'meal_type': row['meal_plan__meal'],
                'count': row['count'],
                'average': round(row['average'], 2),
            }
            for row in dishes
        ]

        return {
            'summary': {
                'total_ratings': count,
                'average_rating': round(totals['average'] or 0, 2),
                'satisfaction_rate': _percentage(distribution[4] + distribution[5], count),
            },
            'rating_distribution': [
                {'rating': value, 'count': total} for value, total in distribution.items()
            ],
            'top_rated_dishes': sorted(dish_rows, key=lambda d: (-d['average'], d['name']))[:10],
            'low_rated_dishes': sorted(dish_rows, key=lambda d: (d['average'], d['name']))[:5],
        }

    @staticmethod
    def _popular_items(order_items, limit=10):
        rows = (
            order_items
            .values('menu_item__name')
            .annotate(
                quantity=Sum('quantity'),
                orders=Count('order', distinct=True),
                revenue=Sum('total_price'),
            )
            .order_by('-quantity', 'menu_item__name')[:limit]
        )
        return [
            {
                'name': row['menu_item__name'],
                'quantity': row['quantity'],
                'orders': row['orders'],
                'revenue': row['revenue'],
            }
            for row in rows
        ]

    # =========================================================================
    # Facility report
    # =========================================================================

    @staticmethod
    def mess_report(facility, start_date=None, end_date=None):
        """
        Detailed report for one facility.

        Args:
            facility (MessFacility): The dining hall.
            start_date (date, optional): Defaults to 7 days before end_date.
            end_date (date, optional): Defaults to today.

        Returns:
            dict: ``summary``, ``daily_stats`` (one row per date in range),
            ``meal_type_stats``, ``popular_items``, ``rating_distribution``,
            ``top_rated_dishes``, ``low_rated_dishes``,
            ``order_status_stats`` and ``hourly_order_stats``.

        Note:
            Orders are paid orders created in the range; revenue and the
            average order value count served orders only.
        """
        end_date = end_date or timezone.localdate()
        start_date = start_date or end_date - timedelta(days=DEFAULT_REPORT_DAYS)

        attendances = MealAttendance.objects.filter(
            attended=True,
            meal_plan__mess_facility=facility,
            meal_date__gte=start_date,
            meal_date__lte=end_date,
        )
        orders = Order.objects.filter(
            mess_facility=facility,
            payment_status=OrderPaymentStatus.PAID,
            created_at__date__gte=start_date,
            created_at__date__lte=end_date,
        )
        served_orders = orders.filter(status=OrderStatus.SERVED)
        ratings = MealRating.objects.filter(
            meal_plan__mess_facility=facility,
            meal_date__gte=start_date,
            meal_date__lte=end_date,
        )

        revenue = served_orders.aggregate(total=Coalesce(Sum('total_amount'), ZERO))['total']
        served_count = served_orders.count()
        rating_data = ReportQueries._rating_summary(ratings)

        # Daily breakdown over the full range, including empty days
        daily = {}
        day = start_date
        while day <= end_date:
            daily[day] = {
                'date': day,
                'subscription_meals': 0,
                'orders': 0,
                'revenue': ZERO,
                'ratings': 0,
                'avg_rating': 0,
            }
            day += timedelta(days=1)

        for row in attendances.values('meal_date').annotate(count=Count('id')):
            daily[row['meal_date']]['subscription_meals'] = row['count']
        for row in (
            orders
            .annotate(day=TruncDate('created_at'))
            .values('day')
            .annotate(
                count=Count('id'),
                revenue=Coalesce(Sum('total_amount', filter=Q(status=OrderStatus.SERVED)), ZERO),
            )
        ):
            if row['day'] in daily:
                daily[row['day']]['orders'] = row['count']
                daily[row['day']]['revenue'] = row['revenue']
        for row in ratings.values('meal_date').annotate(count=Count('id'), average=Avg('rating')):
            daily[row['meal_date']]['ratings'] = row['count']
            daily[row['meal_date']]['avg_rating'] = round(row['average'], 2)

        meal_type_stats = []
        for meal in MEAL_ORDER:
            subscriptions = attendances.filter(meal_plan__meal=meal).count()
            meal_orders = orders.filter(meal_type=meal).count()
            meal_type_stats.append({
                'meal_type': meal,
                'subscriptions': subscriptions,
                'orders': meal_orders,
                'total': subscriptions + meal_orders,
            })

        active_subscriptions = Subscription.objects.filter(
            mess_facility=facility,
            status=SubscriptionStatus.ACTIVE,
            start_date__lte=end_date,
            end_date__gte=start_date,
        ).count()

        return {
            'mess_facility': {
                'id': facility.id,
                'name': facility.name,
                'location': facility.location,
                'capacity': facility.capacity,
                'image_url': facility.image_url,
            },
            'date_range': {'start_date': start_date, 'end_date': end_date},
            'summary': {
                'total_meals_served': attendances.count(),
                'total_orders': orders.count(),
                'served_orders': served_count,
                'total_revenue': revenue,
                'average_order_value': _average(revenue, served_count),
                'active_subscriptions': active_subscriptions,
                **rating_data['summary'],
            },
            'daily_stats': list(daily.values()),
            'meal_type_stats': meal_type_stats,
            'popular_items': ReportQueries._popular_items(OrderItem.objects.filter(order__in=orders)),
            'order_status_stats': [
                {'status': row['status'], 'count': row['count']}
                for row in orders.values('status').annotate(count=Count('id')).order_by('status')
            ],
            'rating_distribution': rating_data['rating_distribution'],
            'top_rated_dishes': rating_data['top_rated_dishes'],
            'low_rated_dishes': rating_data['low_rated_dishes'],
            'hourly_order_stats': [
                {'hour': row['hour'], 'count': row['count']}
                for row in (
                    orders
                    .annotate(hour=ExtractHour('created_at'))
                    .values('hour')
                    .annotate(count=Count('id'))
                    .order_by('hour')
                )
            ],
        }

    # =========================================================================
    # Cross-facility reports
    # =========================================================================

    @staticmethod
    def meal_report(start_date=None, end_date=None, mess_facility_id=None):
        """
        Subscription meals and served orders across facilities.

        Subscription meals are attended attendances by meal date; orders are
        SERVED orders by the date they were served.
        """
        attendances = _date_range(
            MealAttendance.objects.filter(attended=True),
            'meal_date', start_date, end_date
        )
        orders = _date_range(
            Order.objects.filter(status=OrderStatus.SERVED),
            'served_at__date', start_date, end_date
        )
        if mess_facility_id:
            attendances = attendances.filter(meal_plan__mess_facility_id=mess_facility_id)
            orders = orders.filter(mess_facility_id=mess_facility_id)

        revenue = orders.aggregate(total=Coalesce(Sum('total_amount'), ZERO))['total']
        attendance_count = attendances.count()
        order_count = orders.count()

        daily = {}
        for row in attendances.values('meal_date').annotate(count=Count('id')):
            daily[row['meal_date']] = {'subscription': row['count'], 'orders': 0, 'revenue': ZERO}
        for row in (
            orders
            .annotate(day=TruncDate('served_at'))
            .values('day')
            .annotate(count=Count('id'), revenue=Sum('total_amount'))
        ):
            entry = daily.setdefault(row['day'], {'subscription': 0, 'orders': 0, 'revenue': ZERO})
            entry['orders'] = row['count']
            entry['revenue'] = row['revenue']

        meal_types = {meal: 0 for meal in MEAL_ORDER}
        for row in attendances.values('meal_plan__meal').annotate(count=Count('id')):
            meal_types[row['meal_plan__meal']] += row['count']
        for row in orders.values('meal_type').annotate(count=Count('id')):
            meal_types[row['meal_type']] += row['count']

        user_types = {}
        for row in attendances.values('student__user_type').annotate(count=Count('id')):
            user_types[row['student__user_type']] = row['count']
        for row in orders.values('student__user_type').annotate(count=Count('id')):
            user_types[row['student__user_type']] = user_types.get(row['student__user_type'], 0) + row['count']

        return {
            'summary': {
                'total_meals_served': attendance_count + order_count,
                'total_revenue': revenue,
                'subscription_meals': attendance_count,
                'individual_orders': order_count,
                'average_order_value': _average(revenue, order_count),
            },
            'daily_stats': [
                {'date': day, **stats, 'total': stats['subscription'] + stats['orders']}
                for day, stats in sorted(daily.items())
            ],
            'meal_type_stats': [
                {'meal_type': meal, 'count': count} for meal, count in meal_types.items()
            ],
            'user_type_stats': [
                {'user_type': user_type, 'count': count} for user_type, count in sorted(user_types.items())
            ],
        }

    @staticmethod
    def order_report(start_date=None, end_date=None, mess_facility_id=None, status=None):
        """
        Food order statistics.

        Returns:
            dict: ``summary``, ``status_stats``, ``meal_type_stats``,
            ``popular_items`` and ``orders`` (queryset, newest first).
        """
        orders = _date_range(Order.objects.all(), 'created_at__date', start_date, end_date)
        if mess_facility_id:
            orders = orders.filter(mess_facility_id=mess_facility_id)
        if status:
            orders = orders.filter(status=status)

        total = orders.count()
        revenue = orders.filter(status=OrderStatus.SERVED).aggregate(
            total=Coalesce(Sum('total_amount'), ZERO)
        )['total']
        status_stats = {
            row['status']: row['count']
            for row in orders.values('status').annotate(count=Count('id'))
        }

        return {
            'summary': {
                'total_orders': total,
                'total_revenue': revenue,
                'average_order_value': _average(revenue, total),
                'completion_rate': _percentage(status_stats.get(OrderStatus.SERVED, 0), total),
            },
            'status_stats': [
                {'status': value, 'count': count} for value, count in sorted(status_stats.items())
            ],
            'meal_type_stats': [
                {'meal_type': row['meal_type'], 'count': row['count']}
                for row in orders.values('meal_type').annotate(count=Count('id')).order_by('meal_type')
            ],
            'popular_items': ReportQueries._popular_items(OrderItem.objects.filter(order__in=orders)),
            'orders': (
                orders
                .select_related('student', 'mess_facility')
                .prefetch_related('items__menu_item', 'qr_codes')
                .order_by('-created_at')
            ),
        }

    @staticmethod
    def feedback_report(start_date=None, end_date=None, mess_facility_id=None):
        """Meal rating statistics with the 20 most recent comments."""
        ratings = _date_range(MealRating.objects.all(), 'meal_date', start_date, end_date)
        if mess_facility_id:
            ratings = ratings.filter(meal_plan__mess_facility_id=mess_facility_id)

        data = ReportQueries._rating_summary(ratings)
        recent = (
            ratings
            .select_related('student', 'meal_plan__mess_facility')
            .order_by('-created_at')[:20]
        )
        data['recent_feedback'] = [
            {
                'id': rating.id,
                'student_name': rating.student.name,
                'register_number': rating.student.register_number,
                'mess_facility': rating.meal_plan.mess_facility.name,
                'meal_type': rating.meal_plan.meal,
                'meal_date': rating.meal_date,
                'rating': rating.rating,
                'comment': rating.comment,
                'created_at': rating.created_at,
            }
            for rating in recent
        ]
        return data

    # =========================================================================
    # Transactions
    # =========================================================================

    @staticmethod
    def transactions(start_date=None, end_date=None):
        """
        Subscription payments and paid food orders, newest first.

        Order rows take their status from the order: SERVED is SUCCESS,
        CANCELLED is FAILED, anything else PENDING.
        """
        subscription_txns = _date_range(
            SubscriptionTransaction.objects.select_related(
                'subscription__student',
                'subscription__package',
                'subscription__mess_facility',
            ),
            'created_at__date', start_date, end_date
        )
        paid_orders = _date_range(
            Order.objects.filter(payment_status=OrderPaymentStatus.PAID)
            .select_related('student', 'mess_facility')
            .prefetch_related('items__menu_item'),
            'created_at__date', start_date, end_date
        )

        rows = []
        for txn in subscription_txns:
            subscription = txn.subscription
            student = subscription.student
            rows.append({
                'id': txn.id,
                'type': 'SUBSCRIPTION',
                'student_name': student.name,
                'register_number': student.register_number,
                'user_type': student.user_type,
                'department': student.department,
                'mess_facility': subscription.mess_facility.name,
                'description': subscription.package.name,
                'meal_type': None,
                'items': '',
                'amount': txn.amount,
                'status': txn.status,
                'razorpay_order_id': txn.razorpay_order_id,
                'razorpay_payment_id': txn.razorpay_payment_id,
                'created_at': txn.created_at,
            })
        for order in paid_orders:
            student = order.student
            rows.append({
                'id': order.id,
                'type': 'ORDER',
                'student_name': student.name,
                'register_number': student.register_number,
                'user_type': student.user_type,
                'department': student.department,
                'mess_facility': order.mess_facility.name,
                'description': f"{order.meal_type} Order",
                'meal_type': order.meal_type,
                'items': '; '.join(line.menu_item.name for line in order.items.all()),
                'amount': order.total_amount,
                'status': _order_transaction_status(order),
                'razorpay_order_id': order.razorpay_order_id,
                'razorpay_payment_id': order.razorpay_payment_id,
                'created_at': order.created_at,
            })

        rows.sort(key=lambda row: row['created_at'], reverse=True)
        return rows

    @staticmethod
    def transaction_report(start_date=None, end_date=None):
        """
        Revenue statistics over every transaction in range.

        Returns:
            dict: ``stats``, ``transactions`` (latest 100), ``monthly_data``,
            ``daily_data``, ``status_data``, ``type_data``,
            ``package_data`` and ``meal_type_data``.
        """
        rows = ReportQueries.transactions(start_date, end_date)
        successful = [row for row in rows if row['status'] == TransactionStatus.SUCCESS]

        subscription_revenue = sum((r['amount'] for r in successful if r['type'] == 'SUBSCRIPTION'), ZERO)
        order_revenue = sum((r['amount'] for r in successful if r['type'] == 'ORDER'), ZERO)
        total_revenue = subscription_revenue + order_revenue
        subscription_count = sum(1 for r in rows if r['type'] == 'SUBSCRIPTION')

        monthly = {}
        daily = {}
        packages = {}
        meal_types = {}
        for row in successful:
            local = timezone.localtime(row['created_at'])
            revenue_key = 'subscription_revenue' if row['type'] == 'SUBSCRIPTION' else 'order_revenue'
            for buckets, key, label in (
                (monthly, local.strftime('%Y-%m'), 'month'),
                (daily, local.date().isoformat(), 'date'),
            ):
                bucket = buckets.setdefault(key, {
                    label: key,
                    'subscription_revenue': ZERO,
                    'order_revenue': ZERO,
                    'total_revenue': ZERO,
                })
                bucket[revenue_key] += row['amount']
                bucket['total_revenue'] += row['amount']

            if row['type'] == 'SUBSCRIPTION':
                packages[row['description']] = packages.get(row['description'], ZERO) + row['amount']
            else:
                meal = row['meal_type'] or 'Other'
                meal_types[meal] = meal_types.get(meal, ZERO) + row['amount']

        return {
            'stats': {
                'total_revenue': total_revenue,
                'total_transactions': len(rows),
                'successful_transactions': len(successful),
                'failed_transactions': sum(1 for r in rows if r['status'] == TransactionStatus.FAILED),
                'average_transaction_value': _average(total_revenue, len(successful)),
                'subscription_revenue': subscription_revenue,
                'order_revenue': order_revenue,
                'subscription_count': subscription_count,
                'order_count': len(rows) - subscription_count,
            },
            'transactions': rows[:TRANSACTION_LIST_LIMIT],
            'monthly_data': [monthly[key] for key in sorted(monthly)],
            'daily_data': [daily[key] for key in sorted(daily)],
            'status_data': [
                {'status': value, 'count': sum(1 for r in rows if r['status'] == value)}
                for value in (TransactionStatus.SUCCESS, TransactionStatus.FAILED, TransactionStatus.PENDING)
            ],
            'type_data': [
                {'type': 'Subscription', 'count': subscription_count, 'revenue': subscription_revenue},
                {'type': 'Order', 'count': len(rows) - subscription_count, 'revenue': order_revenue},
            ],
            'package_data': [{'name': name, 'revenue': value} for name, value in sorted(packages.items())],
            'meal_type_data': [{'name': name, 'revenue': value} for name, value in sorted(meal_types.items())],
        }

    @staticmethod
    def write_transactions_csv(stream, start_date=None, end_date=None):
        """Write transactions() as CSV to ``stream``; returns the row count."""
        rows = ReportQueries.transactions(start_date, end_date)
        writer = csv.writer(stream)
        writer.writerow(TRANSACTION_EXPORT_COLUMNS)
        for row in rows:
            local = timezone.localtime(row['created_at'])
            writer.writerow([
                'Subscription' if row['type'] == 'SUBSCRIPTION' else 'Order',
                local.date().isoformat(),
                row['student_name'],
                row['register_number'],
                row['user_type'],
                row['department'],
                row['mess_facility'],
                row['description'],
                row['meal_type'] or '',
                row['items'],
                row['amount'],
                row['status'],
                row['razorpay_order_id'],
                row['razorpay_payment_id'],
                local.strftime('%Y-%m-%d %H:%M:%S'),
            ])
        return len(rows)
