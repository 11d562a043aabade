"""
Bulk CSV import.

Every upload type has a row processor registered with the columns it
requires. Rows missing a required column are skipped silently (blank
trailing lines in spreadsheets export that way); rows that fail are
recorded in the upload's error log as ``{row, error, data}`` with a
1-based data row number. Each row runs in its own savepoint so one bad
row never undoes the others.
"""

import csv
import io
import logging
from datetime import date
from decimal import Decimal, InvalidOperation

from django.core.exceptions import ValidationError
from django.db import IntegrityError, transaction
from django.utils import timezone

from apps.inventory.models import Item, ItemCategory, StorageType, Unit
from apps.meals.models import Dish, MealPlan, MealPlanDish, MealType, Recipe
from apps.mess.models import MessFacility, Package
from apps.procurement.models import Vendor, VendorCategory
from apps.students.models import Student, Subscription, SubscriptionStatus, UserType

from ..models import CsvUpload, UploadStatus, UploadType
from .exceptions import InvalidUploadTypeError, RowError

logger = logging.getLogger(__name__)

DEFAULT_PACKAGE_MEALS = [MealType.BREAKFAST, MealType.LUNCH, MealType.DINNER]

PROCESSORS = {}


def processor(upload_type, *, required):
    """Register a row processor for ``upload_type``."""
    def register(func):
        PROCESSORS[upload_type] = (func, tuple(required))
        return func
    return register


# =============================================================================
# Cell parsing
# =============================================================================

def _text(row, column):
    return (row.get(column) or '').strip()


def _flag(row, column, default=False):
    value = _text(row, column).lower()
    if not value:
        return default
    return value in ('true', '1', 'yes')


def _decimal(row, column, default=Decimal('0')):
    value = _text(row, column)
    if not value:
        return default
    try:
        return Decimal(value)
    except InvalidOperation:
        raise RowError(f"Invalid number in '{column}': {value}")


def _int(row, column, default=0):
    value = _text(row, column)
    if not value:
        return default
    try:
        return int(value)
    except ValueError:
        raise RowError(f"Invalid integer in '{column}': {value}")


def _date(row, column):
    value = _text(row, column)
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise RowError('Invalid date format. Use YYYY-MM-DD format')


def _meal(value):
    meal = value.strip().upper()
    if meal not in MealType.values:
        raise RowError(f"Invalid meal type: {value}. Must be one of: {', '.join(MealType.values)}")
    return meal


# =============================================================================
# Row processors
# =============================================================================

@processor(UploadType.CATEGORIES, required=['name'])
def import_category(row):
    ItemCategory.objects.update_or_create(
        name=_text(row, 'name'),
        defaults={'description': _text(row, 'description')},
    )


@processor(UploadType.UNITS, required=['name', 'symbol'])
def import_unit(row):
    Unit.objects.update_or_create(
        name=_text(row, 'name'),
        defaults={
            'symbol': _text(row, 'symbol'),
            'is_active': _flag(row, 'active', default=True),
        },
    )


@processor(UploadType.STORAGE_TYPES, required=['name'])
def import_storage_type(row):
    StorageType.objects.update_or_create(
        name=_text(row, 'name'),
        defaults={
            'description': _text(row, 'description'),
            'is_active': _flag(row, 'active', default=True),
        },
    )


@processor(UploadType.VENDORS, required=['name', 'category_name', 'gst_no', 'phone', 'email', 'address'])
def import_vendor(row):
    category, _ = VendorCategory.objects.get_or_create(name=_text(row, 'category_name'))
    Vendor.objects.create(
        name=_text(row, 'name'),
        category=category,
        gst_no=_text(row, 'gst_no'),
        contact_person=_text(row, 'contact_person'),
        phone=_text(row, 'phone'),
        email=_text(row, 'email'),
        address=_text(row, 'address'),
    )


@processor(UploadType.ITEMS, required=['name', 'sku', 'category_name', 'unit_name'])
def import_item(row):
    category, _ = ItemCategory.objects.get_or_create(name=_text(row, 'category_name'))
    unit, _ = Unit.objects.get_or_create(
        name=_text(row, 'unit_name'),
        defaults={'symbol': _text(row, 'unit_symbol') or _text(row, 'unit_name')},
    )

    storage_type = None
    if _text(row, 'storage_type_name'):
        storage_type, _ = StorageType.objects.get_or_create(
            name=_text(row, 'storage_type_name'),
            defaults={'description': _text(row, 'storage_type_description')},
        )

    vendor = None
    if _text(row, 'vendor_name'):
        vendor = Vendor.objects.filter(name=_text(row, 'vendor_name')).first()

    Item.objects.update_or_create(
        sku=_text(row, 'sku'),
        defaults={
            'name': _text(row, 'name'),
            'category': category,
            'unit': unit,
            'storage_type': storage_type,
            'preferred_vendor': vendor,
            'moq': _decimal(row, 'moq'),
            'reorder_point': _decimal(row, 'reorder_point'),
            'perishable': _flag(row, 'perishable'),
            'cost_per_unit': _decimal(row, 'cost_per_unit'),
            'points_value': _int(row, 'points_value'),
            'barcode': _text(row, 'barcode'),
            'image_url': _text(row, 'image_url'),
        },
    )


@processor(UploadType.DISHES, required=['name'])
def import_dish(row):
    Dish.objects.update_or_create(
        name=_text(row, 'name'),
        defaults={
            'category': _text(row, 'category'),
            'cost_per_5_students': _decimal(row, 'cost_per_5_students'),
            'image_url': _text(row, 'image_url'),
        },
    )


@processor(UploadType.RECIPES, required=['dish_name', 'item_name', 'qty_per_5_students'])
def import_recipe(row):
    item = Item.objects.filter(name=_text(row, 'item_name')).first()
    if item is None:
        raise RowError(f"Item '{_text(row, 'item_name')}' not found")

    dish, _ = Dish.objects.get_or_create(name=_text(row, 'dish_name'))
    Recipe.objects.update_or_create(
        dish=dish,
        item=item,
        defaults={'qty_per_5_students': _decimal(row, 'qty_per_5_students')},
    )


@processor(UploadType.STUDENTS, required=['register_number', 'name'])
def import_student(row):
    user_type = _text(row, 'user_type').upper()
    if user_type not in UserType.values:
        user_type = UserType.STUDENT

    facility = None
    if _text(row, 'mess_name'):
        facility = MessFacility.objects.filter(name=_text(row, 'mess_name')).first()

    Student.objects.update_or_create(
        register_number=_text(row, 'register_number'),
        defaults={
            'name': _text(row, 'name'),
            'mobile_number': _text(row, 'mobile_number'),
            'email': _text(row, 'email'),
            'room_number': _text(row, 'room_number'),
            'department': _text(row, 'department'),
            'user_type': user_type,
            'employee_id': _text(row, 'employee_id'),
            'photo_url': _text(row, 'photo_url'),
            'is_hosteler': _flag(row, 'is_hosteler'),
            'mobile_login_enabled': _flag(row, 'mobile_login_enabled', default=True),
            'mess_facility': facility,
        },
    )


@processor(UploadType.MEALPLANS, required=['mess_facility_name', 'day', 'meal', 'planned_students'])
def import_meal_plan(row):
    day = _int(row, 'day')
    if not 0 <= day <= 6:
        raise RowError(f"Invalid day: {row['day']}. Must be 0-6 (0=Monday, 6=Sunday)")
    meal = _meal(row['meal'])

    facility, _ = MessFacility.objects.get_or_create(name=_text(row, 'mess_facility_name'))
    plan, _ = MealPlan.objects.update_or_create(
        mess_facility=facility,
        day=day,
        meal=meal,
        defaults={'planned_students': _int(row, 'planned_students')},
    )

    # "Dal, Rice, Curd": first dish is the main dish
    names = [name.strip() for name in _text(row, 'dishes').split(',') if name.strip()]
    if names:
        plan.plan_dishes.all().delete()
        for position, name in enumerate(dict.fromkeys(names), start=1):
            dish, _ = Dish.objects.get_or_create(name=name)
            MealPlanDish.objects.create(
                meal_plan=plan,
                dish=dish,
                sequence_order=position,
                is_main_dish=position == 1,
            )


@processor(
    UploadType.SUBSCRIPTIONS,
    required=['student_register_number', 'package_name', 'mess_facility_name', 'start_date', 'end_date', 'amount_paid'],
)
def import_subscription(row):
    student = Student.objects.filter(register_number=_text(row, 'student_register_number')).first()
    if student is None:
        raise RowError(f"Student with register number '{_text(row, 'student_register_number')}' not found")

    facility, _ = MessFacility.objects.get_or_create(
        name=_text(row, 'mess_facility_name'),
        defaults={
            'location': _text(row, 'mess_facility_location'),
            'capacity': _int(row, 'mess_facility_capacity', default=100),
        },
    )

    amount_paid = _decimal(row, 'amount_paid')
    package = Package.objects.filter(name=_text(row, 'package_name'), mess_facility=facility).first()
    if package is None:
        meals = DEFAULT_PACKAGE_MEALS
        if _text(row, 'meals_included'):
            wanted = {meal.strip().upper() for meal in row['meals_included'].split(',')}
            meals = [meal for meal in MealType.values if meal in wanted]
        package = Package.objects.create(
            name=_text(row, 'package_name'),
            description=_text(row, 'package_description'),
            mess_facility=facility,
            duration_days=_int(row, 'duration_days', default=30),
            price=_decimal(row, 'package_price', default=amount_paid),
            meals_included=meals,
        )

    start_date = _date(row, 'start_date')
    end_date = _date(row, 'end_date')
    if end_date < start_date:
        raise RowError('end_date is before start_date')

    status = _text(row, 'status').upper()
    if status not in SubscriptionStatus.values:
        status = SubscriptionStatus.ACTIVE

    Subscription.objects.create(
        student=student,
        package=package,
        mess_facility=facility,
        start_date=start_date,
        end_date=end_date,
        status=status,
        amount_paid=amount_paid,
        razorpay_order_id=_text(row, 'razorpay_order_id'),
        razorpay_payment_id=_text(row, 'razorpay_payment_id'),
    )


# =============================================================================
# Driver
# =============================================================================

def _run_rows(rows, func, required):
    """Apply ``func`` to every row; returns (total, error log)."""
    errors = []
    total = 0
    for index, row in enumerate(rows, start=1):
        total += 1
        if any(not _text(row, column) for column in required):
            continue
        try:
            with transaction.atomic():
                func(row)
        except (RowError, IntegrityError, ValidationError, ValueError) as e:
            errors.append({'row': index, 'error': str(e), 'data': dict(row)})
    return total, errors


def process_csv(*, upload_type: str, file, filename: str, user=None) -> CsvUpload:
    """
    Import an uploaded CSV file and record the outcome.

    Args:
        upload_type: One of UploadType values
        file: File-like object with the raw CSV bytes
        filename: Original file name, kept for the upload history
        user: Staff user running the import

    Returns:
        CsvUpload with COMPLETED status and row counts, or FAILED when the
        file could not be read at all

    Raises:
        InvalidUploadTypeError: No processor for upload_type
    """
    if upload_type not in PROCESSORS:
        raise InvalidUploadTypeError('Invalid upload type')
    func, required = PROCESSORS[upload_type]

    upload = CsvUpload.objects.create(
        upload_type=upload_type,
        filename=filename,
        uploaded_by=user,
        status=UploadStatus.PROCESSING,
    )

    try:
        text = file.read().decode('utf-8-sig')
        total, errors = _run_rows(csv.DictReader(io.StringIO(text)), func, required)
    except (UnicodeDecodeError, csv.Error) as e:
        logger.warning("CSV upload %s (%s) could not be parsed: %s", upload.id, filename, e)
        upload.status = UploadStatus.FAILED
        upload.error_log = [{'error': str(e)}]
    else:
        upload.status = UploadStatus.COMPLETED
        upload.total_rows = total
        upload.failed_rows = len(errors)
        upload.successful_rows = total - len(errors)
        upload.error_log = errors
        logger.info(
            "CSV upload %s (%s): %d rows, %d failed",
            upload.id, upload_type, total, len(errors)
        )

    upload.completed_at = timezone.now()
    upload.save()
    return upload
