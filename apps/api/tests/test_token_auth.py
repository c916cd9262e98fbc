import pytest
from django.urls import reverse
from rest_framework import status

from apps.users.jwt_utils import decode_token, issue_token


@pytest.mark.django_db
def test_token_exchange_returns_roles(api_client, hr_user):
    response = api_client.post(
        reverse("api:auth-token"), {"username": "hr", "password": "password123"}, format="json"
    )

    assert response.status_code == status.HTTP_200_OK
    body = response.json()
    assert body["roles"] == ["hr"]
    assert decode_token(body["token"])["sub"] == str(hr_user.pk)


@pytest.mark.django_db
def test_bad_credentials_are_refused(api_client, hr_user):
    response = api_client.post(
        reverse("api:auth-token"), {"username": "hr", "password": "wrong"}, format="json"
    )

    assert response.status_code == status.HTTP_401_UNAUTHORIZED


@pytest.mark.django_db
def test_bearer_token_authenticates_api_requests(api_client, hr_user):
    api_client.credentials(HTTP_AUTHORIZATION=f"Bearer {issue_token(hr_user)}")

    response = api_client.get(reverse("api:hr-applications-list"))

    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"status": "pending", "results": []}


@pytest.mark.django_db
def test_tampered_token_is_rejected(api_client, hr_user):
    api_client.credentials(HTTP_AUTHORIZATION=f"Bearer {issue_token(hr_user)}x")

    response = api_client.get(reverse("api:hr-applications-list"))

    assert response.status_code == status.HTTP_401_UNAUTHORIZED


@pytest.mark.django_db
def test_expired_token_is_rejected(api_client, hr_user, settings):
    settings.JWT_TOKEN_TTL_SECONDS = -60
    api_client.credentials(HTTP_AUTHORIZATION=f"Bearer {issue_token(hr_user)}")

    response = api_client.get(reverse("api:hr-applications-list"))

    assert response.status_code == status.HTTP_401_UNAUTHORIZED


def test_health_endpoint(client, db):
    response = client.get(reverse("health"))

    assert response.status_code == 200
    assert response.json() == {"status": "ok", "database": "ok"}
