import jwt
import pytest

from apps.users.jwt_utils import (
    JWTValidationError,
    decode_token,
    extract_bearer_token,
    issue_token,
)
from apps.users.constants import UserRole


@pytest.mark.parametrize(
    "header, expected",
    [
        ("Bearer abc.def.ghi", "abc.def.ghi"),
        ("bearer token", "token"),
        ("Token abc", None),
        ("Bearer", None),
        ("", None),
        (None, None),
    ],
)
def test_extract_bearer_token(header, expected):
    assert extract_bearer_token(header) == expected


@pytest.mark.django_db
def test_issued_token_carries_user_claims(user_factory):
    user = user_factory("jwt-employee", role=UserRole.EMPLOYEE)

    claims = decode_token(issue_token(user))

    assert claims["sub"] == str(user.pk)
    assert claims["username"] == "jwt-employee"
    assert claims["roles"] == ["employee"]
    assert claims["exp"] > claims["iat"]


@pytest.mark.django_db
def test_token_signed_with_another_secret_is_rejected(user_factory, settings):
    user = user_factory("jwt-other")
    token = issue_token(user)
    settings.JWT_AUTH_SECRET = "rotated-secret"

    with pytest.raises(JWTValidationError):
        decode_token(token)


def test_token_with_non_numeric_subject_is_rejected(settings):
    token = jwt.encode(
        {"sub": "someone", "exp": 4102444800},
        settings.JWT_AUTH_SECRET,
        algorithm="HS256",
    )

    with pytest.raises(JWTValidationError, match="subject"):
        decode_token(token)


def test_missing_token_is_rejected():
    with pytest.raises(JWTValidationError, match="missing"):
        decode_token("")
