from apps.accounts.models import Role
from apps.accounts.permissions import HasRole


class IsScannerOperator(HasRole):
    """Permission: counter scanner accounts, F&B managers and admins."""

    allowed_roles = (Role.SCANNER, Role.FNB_MANAGER, Role.ADMIN)
