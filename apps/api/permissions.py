"""DRF permission classes aligned with the application's role model."""

from __future__ import annotations

from rest_framework.permissions import BasePermission

from apps.users.constants import UserRole
from apps.users.permissions import user_has_role


class _RolePermission(BasePermission):
    """Base class delegating permission checks to ``user_has_role``."""

    role: UserRole

    def has_permission(self, request, view):  # type: ignore[override]
        user = request.user
        return user_has_role(user, self.role)


class IsEmployeeUserRole(_RolePermission):
    """Allow access to users mapped to the Employee role."""

    role = UserRole.EMPLOYEE


class IsHRUserRole(_RolePermission):
    """Allow access to users mapped to the HR role."""

    role = UserRole.HR
