"""Domain-specific exceptions for meal services."""


class MealsServiceError(Exception):
    """Base exception for meal services."""
    pass


class DuplicateRecipeItemError(MealsServiceError):
    """Raised when a dish lists the same item twice."""
    pass


class FacilityNotFoundError(MealsServiceError):
    """Raised when a meal plan targets an unknown facility."""
    pass


class MealPlanNotFoundError(MealsServiceError):
    """Raised when a meal plan doesn't exist."""
    pass


class AttendanceClosedError(MealsServiceError):
    """Raised when attendance is marked after the daily cut-off."""
    pass


class AlreadyRatedError(MealsServiceError):
    """Raised when a student rates the same meal twice."""
    pass


class MealDateMismatchError(MealsServiceError):
    """Raised when a meal date falls on a different weekday than its plan."""
    pass
