"""Helpers for working with user roles and permissions."""

from __future__ import annotations

from typing import Set, Union

from .constants import ROLE_GROUP_MAP, UserRole


RoleLike = Union[UserRole, str]


def _normalise_role(role: RoleLike) -> UserRole:
    if isinstance(role, UserRole):
        return role

    if isinstance(role, str):
        try:
            return UserRole(role.lower())
        except ValueError as exc:
            raise KeyError(f"Unknown role: {role}") from exc

    raise TypeError(f"Role must be a UserRole or string, got {type(role)!r}")


def user_has_role(user, role: RoleLike) -> bool:
    """Return ``True`` if the user belongs to any group mapped to ``role``."""

    if not getattr(user, "is_authenticated", False):
        return False

    if getattr(user, "is_superuser", False):
        return True

    role_groups = ROLE_GROUP_MAP.get(_normalise_role(role), set())
    if not role_groups:
        return False

    return user.groups.filter(name__in=role_groups).exists()


def roles_for_user(user) -> Set[UserRole]:
    """Return every role the user currently holds."""

    return {role for role in UserRole if user_has_role(user, role)}
