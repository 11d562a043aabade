"""
Management command to create sample data for trying out the API.

Usage:
    python manage.py create_sample_data

This creates:
- One staff user per role
- 2 mess facilities with packages and a scanner account each
- Units, categories, vendors and 8 stock items with opening batches
- Dishes with recipes and a weekly meal plan for the first mess
- 6 students, 4 of them hostelers with active subscriptions
"""

from django.core.management.base import BaseCommand
from django.db import transaction
from django.utils import timezone
from decimal import Decimal
from datetime import timedelta

from apps.accounts.models import User, Role
from apps.inventory.models import Item, ItemCategory, StorageType, Unit
from apps.inventory.services import receive_stock
from apps.meals.models import Dish, MealPlan, MealPlanDish, MealType, Recipe
from apps.mess.models import MenuItem, MessFacility, Package
from apps.procurement.models import Vendor, VendorCategory
from apps.students.models import Student, Subscription, SubscriptionStatus

STAFF_PASSWORD = 'password123'

WEEKLY_MENU = {
    MealType.BREAKFAST: ['Idli', 'Sambar', 'Coconut Chutney'],
    MealType.LUNCH: ['Veg Biryani', 'Dal Tadka', 'Curd Rice'],
    MealType.SNACKS: ['Samosa', 'Masala Tea'],
    MealType.DINNER: ['Chapati', 'Paneer Butter Masala', 'Dal Tadka'],
}


class Command(BaseCommand):
    help = 'Create sample data for trying out the API'

    def add_arguments(self, parser):
        parser.add_argument(
            '--clear',
            action='store_true',
            help='Clear existing sample data before creating it again',
        )

    @transaction.atomic
    def handle(self, *args, **options):
        if options['clear']:
            self.stdout.write('Clearing existing data...')
            self.clear_data()

        self.stdout.write('Creating sample data...')

        users = self.create_users()
        facilities = self.create_facilities()
        self.create_scanners(facilities)
        items = self.create_inventory(users[Role.STORE])
        dishes = self.create_dishes(items)
        self.create_meal_plans(facilities[0], dishes)
        self.create_students(facilities)

        self.stdout.write(self.style.SUCCESS('Sample data created successfully!'))
        self.stdout.write('')
        self.stdout.write('Staff accounts (password: %s):' % STAFF_PASSWORD)
        for role in users:
            self.stdout.write(f'  {role.lower()}@mess.local')

    def clear_data(self):
        """Remove the rows this command creates."""
        Subscription.objects.all().delete()
        Student.objects.all().delete()
        MealPlan.objects.all().delete()
        Recipe.objects.all().delete()
        Dish.objects.all().delete()
        MessFacility.objects.all().delete()
        User.objects.filter(email__endswith='@mess.local').delete()

    def create_users(self):
        """One staff account per back-office role."""
        self.stdout.write('  Creating staff users...')

        users = {}
        for role in (Role.ADMIN, Role.STORE, Role.CHEF, Role.COOK, Role.FNB_MANAGER):
            user, created = User.objects.get_or_create(
                email=f'{role.lower()}@mess.local',
                defaults={'name': f'{role.label} User', 'role': role},
            )
            if created:
                user.set_password(STAFF_PASSWORD)
                user.save()
            users[role] = user
        return users

    def create_facilities(self):
        self.stdout.write('  Creating mess facilities...')

        facilities = []
        for name, location, capacity in (
            ('North Mess', 'Hostel Block A', 400),
            ('South Mess', 'Hostel Block D', 250),
        ):
            facility, _ = MessFacility.objects.get_or_create(
                name=name,
                defaults={'location': location, 'capacity': capacity},
            )
            facilities.append(facility)

            Package.objects.get_or_create(
                name='Monthly Full Board',
                mess_facility=facility,
                defaults={
                    'description': 'All four meals for 30 days',
                    'duration_days': 30,
                    'price': Decimal('3600.00'),
                    'meals_included': list(WEEKLY_MENU),
                },
            )
            Package.objects.get_or_create(
                name='Lunch Only',
                mess_facility=facility,
                defaults={
                    'duration_days': 30,
                    'price': Decimal('1500.00'),
                    'meals_included': [MealType.LUNCH],
                },
            )
            for dish_name, price, meal in (
                ('Masala Dosa', Decimal('45.00'), MealType.BREAKFAST),
                ('Veg Thali', Decimal('90.00'), MealType.LUNCH),
                ('Egg Fried Rice', Decimal('70.00'), MealType.DINNER),
            ):
                MenuItem.objects.get_or_create(
                    mess_facility=facility,
                    name=dish_name,
                    defaults={'price': price, 'meal_type': meal},
                )
        return facilities

    def create_scanners(self, facilities):
        self.stdout.write('  Creating scanner accounts...')

        for index, facility in enumerate(facilities, start=1):
            user, created = User.objects.get_or_create(
                email=f'scanner{index}@mess.local',
                defaults={
                    'name': f'{facility.name} Scanner',
                    'role': Role.SCANNER,
                    'mess_facility': facility,
                },
            )
            if created:
                user.set_password(STAFF_PASSWORD)
                user.save()

    def create_inventory(self, store_user):
        """Item master plus an opening batch for every item."""
        self.stdout.write('  Creating inventory...')

        kg, _ = Unit.objects.get_or_create(name='Kilogram', defaults={'symbol': 'kg'})
        litre, _ = Unit.objects.get_or_create(name='Litre', defaults={'symbol': 'L'})
        dry, _ = StorageType.objects.get_or_create(name='Dry Store')
        cold, _ = StorageType.objects.get_or_create(name='Cold Room')
        grains, _ = ItemCategory.objects.get_or_create(name='Grains & Pulses')
        dairy, _ = ItemCategory.objects.get_or_create(name='Dairy')
        produce, _ = ItemCategory.objects.get_or_create(name='Vegetables')

        wholesale, _ = VendorCategory.objects.get_or_create(name='Wholesale Grocer')
        vendor, _ = Vendor.objects.get_or_create(
            name='Sri Lakshmi Traders',
            defaults={
                'category': wholesale,
                'gst_no': '33ABCDE1234F1Z5',
                'phone': '9840012345',
                'email': 'orders@srilakshmi.example',
                'address': 'Market Road, Chennai',
            },
        )

        today = timezone.localdate()
        items_data = [
            # sku, name, category, unit, storage, perishable, cost, reorder point, stock
            ('RICE-01', 'Sona Masoori Rice', grains, kg, dry, False, '52.00', '100', '400'),
            ('DAL-01', 'Toor Dal', grains, kg, dry, False, '120.00', '40', '80'),
            ('ATTA-01', 'Wheat Flour', grains, kg, dry, False, '38.00', '60', '150'),
            ('MILK-01', 'Milk', dairy, litre, cold, True, '48.00', '50', '30'),
            ('PANEER-01', 'Paneer', dairy, kg, cold, True, '320.00', '10', '12'),
            ('CURD-01', 'Curd', dairy, kg, cold, True, '60.00', '20', '25'),
            ('ONION-01', 'Onion', produce, kg, dry, True, '30.00', '50', '90'),
            ('POTATO-01', 'Potato', produce, kg, dry, True, '25.00', '50', '70'),
        ]

        items = {}
        for sku, name, category, unit, storage, perishable, cost, reorder, stock in items_data:
            item, created = Item.objects.get_or_create(
                sku=sku,
                defaults={
                    'name': name,
                    'category': category,
                    'unit': unit,
                    'storage_type': storage,
                    'preferred_vendor': vendor,
                    'perishable': perishable,
                    'cost_per_unit': Decimal(cost),
                    'reorder_point': Decimal(reorder),
                    'moq': Decimal(reorder),
                },
            )
            if created:
                receive_stock(
                    item=item,
                    batch_no=f'OPEN-{sku}',
                    qty=Decimal(stock),
                    unit_cost=Decimal(cost),
                    ref_id='opening-stock',
                    exp_date=today + timedelta(days=5 if perishable else 180),
                    user=store_user,
                )
            items[sku] = item
        return items

    def create_dishes(self, items):
        self.stdout.write('  Creating dishes and recipes...')

        recipes = {
            'Veg Biryani': [('RICE-01', '0.75'), ('ONION-01', '0.25'), ('POTATO-01', '0.25')],
            'Dal Tadka': [('DAL-01', '0.40'), ('ONION-01', '0.10')],
            'Curd Rice': [('RICE-01', '0.50'), ('CURD-01', '0.50')],
            'Chapati': [('ATTA-01', '0.60')],
            'Paneer Butter Masala': [('PANEER-01', '0.50'), ('ONION-01', '0.20'), ('MILK-01', '0.20')],
            'Masala Tea': [('MILK-01', '0.50')],
        }

        dishes = {}
        names = {name for menu in WEEKLY_MENU.values() for name in menu}
        for name in sorted(names):
            dish, _ = Dish.objects.get_or_create(name=name)
            for sku, qty in recipes.get(name, []):
                Recipe.objects.get_or_create(
                    dish=dish,
                    item=items[sku],
                    defaults={'qty_per_5_students': Decimal(qty)},
                )
            dishes[name] = dish
        return dishes

    def create_meal_plans(self, facility, dishes):
        """Same menu every day of the week."""
        self.stdout.write('  Creating meal plans...')

        for day in range(7):
            for meal, menu in WEEKLY_MENU.items():
                plan, created = MealPlan.objects.get_or_create(
                    mess_facility=facility,
                    day=day,
                    meal=meal,
                    defaults={'planned_students': 150},
                )
                if not created:
                    continue
                for position, name in enumerate(menu, start=1):
                    MealPlanDish.objects.create(
                        meal_plan=plan,
                        dish=dishes[name],
                        sequence_order=position,
                        is_main_dish=position == 1,
                    )

    def create_students(self, facilities):
        self.stdout.write('  Creating students and subscriptions...')

        today = timezone.localdate()
        students_data = [
            ('22CS101', 'Arjun Menon', '9000000101', True),
            ('22CS102', 'Divya Nair', '9000000102', True),
            ('22EC103', 'Karthik Raja', '9000000103', True),
            ('22ME104', 'Meera Iyer', '9000000104', True),
            ('22CS105', 'Rahul Verma', '9000000105', False),
            ('22EC106', 'Sneha Pillai', '9000000106', False),
        ]

        for index, (register_number, name, mobile, hosteler) in enumerate(students_data):
            facility = facilities[index % len(facilities)] if hosteler else None
            student, _ = Student.objects.get_or_create(
                register_number=register_number,
                defaults={
                    'name': name,
                    'mobile_number': mobile,
                    'is_hosteler': hosteler,
                    'mess_facility': facility,
                },
            )
            if not hosteler or student.subscriptions.exists():
                continue

            package = facility.packages.get(name='Monthly Full Board')
            Subscription.objects.create(
                student=student,
                package=package,
                mess_facility=facility,
                start_date=today - timedelta(days=3),
                end_date=today + timedelta(days=package.duration_days - 4),
                status=SubscriptionStatus.ACTIVE,
                amount_paid=package.price,
            )
