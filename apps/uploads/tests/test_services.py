import io
import pytest
from decimal import Decimal
from apps.inventory.models import Item, ItemCategory, Unit
from apps.meals.models import Dish, MealPlan, MealType, Recipe
from apps.mess.models import Package
from apps.students.models import Student, Subscription, SubscriptionStatus, UserType
from apps.uploads.images import InvalidImageError, save_base64_image
from apps.uploads.models import UploadStatus, UploadType
from apps.uploads.services import InvalidUploadTypeError, process_csv


def upload(upload_type, text, user=None):
    return process_csv(
        upload_type=upload_type,
        file=io.BytesIO(text.encode('utf-8')),
        filename=f'{upload_type}.csv',
        user=user,
    )


@pytest.mark.django_db
class TestProcessCsv:

    def test_categories_with_bom(self, fnb_user):
        result = upload(UploadType.CATEGORIES, '\ufeffname,description\nSpices,Whole and ground\nOils,\n', fnb_user)

        assert result.status == UploadStatus.COMPLETED
        assert result.total_rows == 2
        assert result.successful_rows == 2
        assert result.uploaded_by == fnb_user
        assert result.completed_at is not None
        assert set(ItemCategory.objects.values_list('name', flat=True)) == {'Spices', 'Oils'}

    def test_units_upsert(self, unit):
        upload(UploadType.UNITS, 'name,symbol,active\nKilogram,KG,false\n')

        unit.refresh_from_db()
        assert unit.symbol == 'KG'
        assert unit.is_active is False

    def test_items_create_masters(self, db):
        result = upload(
            UploadType.ITEMS,
            'name,sku,category_name,unit_name,unit_symbol,reorder_point,perishable,cost_per_unit\n'
            'Toor Dal,DAL-01,Pulses,Kilogram,kg,40,no,120.50\n',
        )

        assert result.failed_rows == 0
        item = Item.objects.get(sku='DAL-01')
        assert item.category.name == 'Pulses'
        assert item.unit.symbol == 'kg'
        assert item.reorder_point == Decimal('40')
        assert item.perishable is False
        assert item.cost_per_unit == Decimal('120.50')

    def test_bad_number_logged_with_row(self, db):
        result = upload(
            UploadType.ITEMS,
            'name,sku,category_name,unit_name,cost_per_unit\n'
            'Dal,DAL-01,Pulses,Kilogram,12\n'
            'Salt,SALT-01,Spices,Kilogram,cheap\n',
        )

        assert result.total_rows == 2
        assert result.failed_rows == 1
        assert result.successful_rows == 1
        error = result.error_log[0]
        assert error['row'] == 2
        assert "Invalid number in 'cost_per_unit'" in error['error']
        assert error['data']['sku'] == 'SALT-01'
        assert not Item.objects.filter(sku='SALT-01').exists()

    def test_rows_missing_required_columns_skipped(self, db):
        result = upload(UploadType.DISHES, 'name,category\nIdli,Breakfast\n,Orphan\n')

        assert result.total_rows == 2
        assert result.failed_rows == 0
        assert Dish.objects.count() == 1

    def test_recipe_needs_existing_item(self, dish, item):
        result = upload(
            UploadType.RECIPES,
            'dish_name,item_name,qty_per_5_students\nVeg Biryani,Rice,0.75\nVeg Biryani,Saffron,0.01\n',
        )

        assert Recipe.objects.get().qty_per_5_students == Decimal('0.75')
        assert result.error_log[0]['error'] == "Item 'Saffron' not found"

    def test_students(self, facility):
        upload(
            UploadType.STUDENTS,
            'register_number,name,mobile_number,user_type,is_hosteler,mess_name\n'
            '22CS9,Nila,9000000009,employee,yes,North Mess\n'
            '22CS10,Tara,,weird,,\n',
        )

        nila = Student.objects.get(register_number='22CS9')
        assert nila.user_type == UserType.EMPLOYEE
        assert nila.is_hosteler is True
        assert nila.mess_facility == facility
        assert Student.objects.get(register_number='22CS10').user_type == UserType.STUDENT

    def test_meal_plans(self, facility):
        result = upload(
            UploadType.MEALPLANS,
            'mess_facility_name,day,meal,planned_students,dishes\n'
            'North Mess,0,lunch,120,"Rice, Sambar, Rice"\n'
            'North Mess,9,LUNCH,10,Rice\n'
            'North Mess,1,BRUNCH,10,Rice\n',
        )

        plan = MealPlan.objects.get(mess_facility=facility, day=0, meal=MealType.LUNCH)
        assert plan.planned_students == 120
        assert plan.dish_names() == 'Rice, Sambar'
        assert plan.plan_dishes.get(is_main_dish=True).dish.name == 'Rice'
        assert [e['row'] for e in result.error_log] == [2, 3]

    def test_subscriptions_create_package(self, student):
        result = upload(
            UploadType.SUBSCRIPTIONS,
            'student_register_number,package_name,mess_facility_name,start_date,end_date,amount_paid,meals_included\n'
            '21CS001,Dinner Plan,North Mess,2026-10-01,2026-10-31,1200,"dinner, lunch"\n'
            '21CS999,Dinner Plan,North Mess,2026-10-01,2026-10-31,1200,\n'
            '21CS001,Dinner Plan,North Mess,01/10/2026,2026-10-31,1200,\n',
        )

        subscription = Subscription.objects.get()
        assert subscription.status == SubscriptionStatus.ACTIVE
        assert subscription.amount_paid == Decimal('1200')
        package = Package.objects.get(name='Dinner Plan')
        assert package.meals_included == [MealType.LUNCH, MealType.DINNER]
        assert package.price == Decimal('1200')
        errors = {e['row']: e['error'] for e in result.error_log}
        assert "not found" in errors[2]
        assert errors[3] == 'Invalid date format. Use YYYY-MM-DD format'

    def test_undecodable_file_fails(self, db):
        result = process_csv(
            upload_type=UploadType.UNITS,
            file=io.BytesIO(b'\xff\xfe\x00bad'),
            filename='units.csv',
        )

        assert result.status == UploadStatus.FAILED
        assert Unit.objects.count() == 0

    def test_unknown_type(self, db):
        with pytest.raises(InvalidUploadTypeError):
            upload('widgets', 'name\nx\n')


@pytest.mark.django_db
class TestImages:

    def test_rejects_non_image_extension(self, settings, tmp_path):
        settings.MEDIA_ROOT = tmp_path
        with pytest.raises(InvalidImageError):
            save_base64_image('data:image/svg+xml;base64,PHN2Zz48L3N2Zz4=', 'dishes')

    def test_rejects_bad_base64(self, settings, tmp_path):
        settings.MEDIA_ROOT = tmp_path
        with pytest.raises(InvalidImageError, match='Invalid base64'):
            save_base64_image('not base64!!', 'dishes')
