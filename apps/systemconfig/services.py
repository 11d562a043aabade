"""
Runtime configuration helpers.

Values live in the SystemConfig key/value table; meal serving windows are
stored under the ``meal_times`` category and fall back to the defaults
below when an admin has not overridden them.
"""

import logging

from django.db import transaction

from .models import SystemConfig, MealAttendanceSettings

logger = logging.getLogger(__name__)

MEAL_TIMES_CATEGORY = 'meal_times'

DEFAULT_MEAL_TIMES = {
    'breakfast_start': '07:30',
    'breakfast_end': '09:30',
    'lunch_start': '12:00',
    'lunch_end': '14:00',
    'snacks_start': '16:00',
    'snacks_end': '17:30',
    'dinner_start': '19:00',
    'dinner_end': '21:00',
}


def get_meal_times() -> dict:
    """Configured meal windows, defaults filled in for missing keys."""
    stored = dict(
        SystemConfig.objects
        .filter(key__in=DEFAULT_MEAL_TIMES.keys())
        .values_list('key', 'value')
    )
    return {key: stored.get(key, default) for key, default in DEFAULT_MEAL_TIMES.items()}


def meal_time_range(meal: str, meal_times=None) -> str:
    """Display range for a meal type, e.g. ``07:30 - 09:30``."""
    meal_times = meal_times or get_meal_times()
    prefix = meal.lower()
    return f"{meal_times[prefix + '_start']} - {meal_times[prefix + '_end']}"


def upsert_config(*, key: str, value: str, category=None, description=None) -> SystemConfig:
    """Create or update a single setting; new keys default to ``general``."""
    defaults = {'value': value}
    if category:
        defaults['category'] = category
    if description is not None:
        defaults['description'] = description

    config, created = SystemConfig.objects.update_or_create(key=key, defaults=defaults)
    logger.info("%s system config %s", 'Created' if created else 'Updated', key)
    return config


@transaction.atomic
def bulk_upsert(settings_list) -> int:
    for entry in settings_list:
        upsert_config(
            key=entry['key'],
            value=entry['value'],
            category=entry.get('category'),
            description=entry.get('description'),
        )
    return len(settings_list)


@transaction.atomic
def save_meal_times(meal_times: dict) -> dict:
    for key, value in meal_times.items():
        upsert_config(key=key, value=value, category=MEAL_TIMES_CATEGORY)
    return get_meal_times()


def save_attendance_settings(**values) -> MealAttendanceSettings:
    """Update the attendance settings singleton, creating it on first save."""
    settings_obj = MealAttendanceSettings.load()
    for name, value in values.items():
        setattr(settings_obj, name, value)
    settings_obj.save()
    return settings_obj
