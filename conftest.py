import os

import pytest


os.environ.setdefault("DJANGO_SETTINGS_MODULE", "backend.settings.test")

import django  # noqa: E402

django.setup()


from django.contrib.auth import get_user_model  # noqa: E402
from django.contrib.auth.models import Group  # noqa: E402
from rest_framework.test import APIClient  # noqa: E402

from apps.users.constants import ROLE_GROUP_MAP, UserRole as Roles  # noqa: E402


User = get_user_model()


@pytest.fixture
def user_factory(db):
    def create_user(username="testuser", role=Roles.EMPLOYEE, **extra):
        extra.setdefault("email", f"{username}@example.com")
        user = User.objects.create_user(username=username, password="password123", **extra)

        for group_name in ROLE_GROUP_MAP.get(role, set()):
            group, _ = Group.objects.get_or_create(name=group_name)
            user.groups.add(group)

        return user

    return create_user


@pytest.fixture
def api_client() -> APIClient:
    return APIClient()


@pytest.fixture
def employee(user_factory):
    return user_factory(username="employee", role=Roles.EMPLOYEE)


@pytest.fixture
def hr_user(user_factory):
    return user_factory(username="hr", role=Roles.HR)
