# permissions/roles.py

from __future__ import annotations

from typing import Mapping, Optional

from django.conf import settings
from rest_framework.permissions import SAFE_METHODS, BasePermission


# =========================================================
# ROLE CONSTANTS
# =========================================================
ROLE_SUPERADMIN = "superadmin"
ROLE_ADMIN = "admin"
ROLE_MANAGER = "manager"
ROLE_USER = "user"

ROLE_CHOICES = [
    (ROLE_SUPERADMIN, "Super Admin"),
    (ROLE_ADMIN, "Admin"),
    (ROLE_MANAGER, "Manager"),
    (ROLE_USER, "User"),
]

ALL_ROLES = {value for value, _label in ROLE_CHOICES}


# =========================================================
# Hierarchy helpers
# =========================================================
def get_role_hierarchy() -> Mapping[str, int]:
    """
    Configured role -> level mapping (settings.ROLE_HIERARCHY).
    """
    return getattr(settings, "ROLE_HIERARCHY", {})


def get_user_role(user) -> Optional[str]:
    return getattr(user, "role", None)


def role_satisfies(
    user_role: Optional[str],
    minimum_role: str,
    hierarchy: Mapping[str, int],
) -> bool:
    """
    True when `user_role` sits at or above `minimum_role` in `hierarchy`.

    Unknown roles (on either side) never satisfy anything.
    """
    if not user_role or user_role not in hierarchy or minimum_role not in hierarchy:
        return False
    return hierarchy[user_role] >= hierarchy[minimum_role]


# =========================================================
# Permissions
# =========================================================
class HasMinimumRole(BasePermission):
    """
    Require a minimum role tier.

    Usage:
        permission_classes = [IsAuthenticated, HasMinimumRole]
        view.minimum_role = ROLE_ADMIN

    Optional:
        view.role_hierarchy = {...}       # overrides settings.ROLE_HIERARCHY
        view.write_minimum_role = ROLE_ADMIN  # stricter tier for unsafe methods
    """

    message = "Insufficient role for this action"

    def _required_role(self, request, view) -> Optional[str]:
        if request.method not in SAFE_METHODS:
            write_role = getattr(view, "write_minimum_role", None)
            if write_role:
                return write_role
        return getattr(view, "minimum_role", None)

    def has_permission(self, request, view):
        user = request.user
        if not user or not user.is_authenticated:
            return False

        required = self._required_role(request, view)
        if not required:
            # Deny-by-default so a view cannot be opened by omission.
            return False

        hierarchy = getattr(view, "role_hierarchy", None) or get_role_hierarchy()
        return role_satisfies(get_user_role(user), required, hierarchy)


class BaseRoleTier(HasMinimumRole):
    """
    Fixed-tier permission, for views that do not declare `minimum_role`.
    """

    tier: str = ROLE_USER

    def _required_role(self, request, view) -> Optional[str]:
        return self.tier


class IsSuperAdmin(BaseRoleTier):
    tier = ROLE_SUPERADMIN

