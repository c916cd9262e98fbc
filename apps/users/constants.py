"""Constants and role/group mappings for the users app."""

from enum import Enum
from typing import Dict, Iterable, Set


EMPLOYEES_GROUP_NAME = "Employees"
HR_GROUP_NAME = "HR"
HR_MANAGERS_GROUP_NAME = "HRManagers"


class UserRole(str, Enum):
    """High-level roles recognised by the application."""

    EMPLOYEE = "employee"
    HR = "hr"


ROLE_GROUP_MAP: Dict[UserRole, Set[str]] = {
    UserRole.EMPLOYEE: {EMPLOYEES_GROUP_NAME},
    UserRole.HR: {HR_GROUP_NAME, HR_MANAGERS_GROUP_NAME},
}


def groups_for_roles(roles: Iterable[UserRole]) -> Set[str]:
    """Return the set of concrete group names for the given roles."""

    groups: Set[str] = set()
    for role in roles:
        groups.update(ROLE_GROUP_MAP.get(role, set()))
    return groups
