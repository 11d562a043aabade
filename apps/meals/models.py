from django.db import models
from django.core.validators import MinValueValidator, MaxValueValidator
from decimal import Decimal
import uuid


class MealType(models.TextChoices):
    BREAKFAST = 'BREAKFAST', 'Breakfast'
    LUNCH = 'LUNCH', 'Lunch'
    SNACKS = 'SNACKS', 'Snacks'
    DINNER = 'DINNER', 'Dinner'


# Serving order within a day
MEAL_ORDER = [MealType.BREAKFAST, MealType.LUNCH, MealType.SNACKS, MealType.DINNER]


class DayOfWeek(models.IntegerChoices):
    MONDAY = 0, 'Monday'
    TUESDAY = 1, 'Tuesday'
    WEDNESDAY = 2, 'Wednesday'
    THURSDAY = 3, 'Thursday'
    FRIDAY = 4, 'Friday'
    SATURDAY = 5, 'Saturday'
    SUNDAY = 6, 'Sunday'


class Dish(models.Model):
    """A dish with a recipe scaled per 5 students."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=200, unique=True)
    category = models.CharField(max_length=100, blank=True)
    cost_per_5_students = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=Decimal('0.00'),
        validators=[MinValueValidator(Decimal('0.00'))]
    )
    image_url = models.CharField(max_length=500, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'dishes'
        ordering = ['name']

    def __str__(self):
        return self.name


class Recipe(models.Model):
    """Ingredient quantity needed to cook a dish for 5 students."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    dish = models.ForeignKey(Dish, on_delete=models.CASCADE, related_name='recipes')
    item = models.ForeignKey('inventory.Item', on_delete=models.PROTECT, related_name='recipes')
    qty_per_5_students = models.DecimalField(
        max_digits=12,
        decimal_places=3,
        validators=[MinValueValidator(Decimal('0.001'))]
    )

    class Meta:
        db_table = 'recipes'
        unique_together = [['dish', 'item']]

    def __str__(self):
        return f"{self.dish.name}: {self.qty_per_5_students} {self.item.name}"


class MealPlan(models.Model):
    """Weekly menu slot: what a facility serves on a weekday for a meal."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    mess_facility = models.ForeignKey(
        'mess.MessFacility',
        on_delete=models.CASCADE,
        related_name='meal_plans'
    )
    day = models.PositiveSmallIntegerField(choices=DayOfWeek.choices)
    meal = models.CharField(max_length=10, choices=MealType.choices)
    planned_students = models.PositiveIntegerField(default=0)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'meal_plans'
        unique_together = [['mess_facility', 'day', 'meal']]
        ordering = ['day', 'meal']
        indexes = [
            models.Index(fields=['mess_facility', 'day'], name='meal_plans_facility_day_idx'),
        ]

    def __str__(self):
        return f"{self.mess_facility} - {self.get_day_display()} {self.get_meal_display()}"

    def dish_names(self):
        return ', '.join(pd.dish.name for pd in self.plan_dishes.all())


class MealPlanDish(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    meal_plan = models.ForeignKey(MealPlan, on_delete=models.CASCADE, related_name='plan_dishes')
    dish = models.ForeignKey(Dish, on_delete=models.PROTECT, related_name='plan_entries')
    sequence_order = models.PositiveSmallIntegerField(default=1)
    is_main_dish = models.BooleanField(default=False)

    class Meta:
        db_table = 'meal_plan_dishes'
        ordering = ['sequence_order']
        unique_together = [['meal_plan', 'dish']]

    def __str__(self):
        return f"{self.meal_plan} #{self.sequence_order} {self.dish.name}"


class MealAttendance(models.Model):
    """A student's intent and actual attendance for one meal plan slot."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    student = models.ForeignKey('students.Student', on_delete=models.CASCADE, related_name='attendances')
    meal_plan = models.ForeignKey(MealPlan, on_delete=models.CASCADE, related_name='attendances')
    # Plans repeat weekly; each attendance row is for one calendar date
    meal_date = models.DateField()

    # Intent (mobile app); None means the student never answered
    will_attend = models.BooleanField(null=True, blank=True)
    marked_at = models.DateTimeField(null=True, blank=True)
    is_mandatory_marked = models.BooleanField(default=False)

    # Actual attendance (scanner)
    attended = models.BooleanField(default=False)
    attended_at = models.DateTimeField(null=True, blank=True)
    scanner_verified = models.BooleanField(default=False)
    scanner_device_id = models.CharField(max_length=100, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'meal_attendance'
        unique_together = [['student', 'meal_plan', 'meal_date']]
        indexes = [
            models.Index(fields=['attended', 'attended_at'], name='attendance_attended_idx'),
        ]

    def __str__(self):
        return f"{self.student} @ {self.meal_plan}"


class MealRating(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    student = models.ForeignKey('students.Student', on_delete=models.CASCADE, related_name='meal_ratings')
    meal_plan = models.ForeignKey(MealPlan, on_delete=models.CASCADE, related_name='ratings')
    meal_date = models.DateField()
    rating = models.PositiveSmallIntegerField(
        validators=[MinValueValidator(1), MaxValueValidator(5)]
    )
    comment = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'meal_ratings'
        unique_together = [['student', 'meal_plan', 'meal_date']]
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.student} rated {self.meal_plan}: {self.rating}"


class RatingRequest(models.Model):
    """Marks that a student was already asked to rate a meal."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    student = models.ForeignKey('students.Student', on_delete=models.CASCADE, related_name='rating_requests')
    meal_date = models.DateField()
    meal_plan = models.ForeignKey(MealPlan, on_delete=models.CASCADE, related_name='rating_requests')
    notification_sent_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'rating_requests'
        unique_together = [['student', 'meal_plan', 'meal_date']]
