"""Utilities for issuing, decoding and validating JWT bearer tokens."""

from __future__ import annotations

from datetime import timedelta
from typing import Any, Dict, Iterable, Sequence

import jwt
from django.conf import settings
from django.utils import timezone
from jwt import InvalidTokenError

from apps.users.permissions import roles_for_user


class JWTValidationError(Exception):
    """Raised when a JWT token cannot be decoded or validated."""


def _normalise_algorithms(value: Iterable[str] | str | None) -> Sequence[str]:
    if not value:
        return ("HS256",)

    if isinstance(value, str):
        return (value,)

    return tuple(value)


def _signing_secret() -> str:
    return getattr(settings, "JWT_AUTH_SECRET", None) or settings.SECRET_KEY


def _algorithms() -> Sequence[str]:
    return _normalise_algorithms(getattr(settings, "JWT_AUTH_ALGORITHM", None))


def extract_bearer_token(auth_header: str | None) -> str | None:
    """Return the JWT token from a standard ``Authorization`` header."""

    if not auth_header:
        return None

    parts = auth_header.split()
    if len(parts) != 2:
        return None

    prefix, token = parts
    if prefix.lower() != "bearer" or not token:
        return None

    return token


def issue_token(user) -> str:
    """Sign a bearer token for ``user`` carrying its id and current roles."""

    now = timezone.now()
    ttl = int(getattr(settings, "JWT_TOKEN_TTL_SECONDS", 3600))
    payload = {
        "sub": str(user.pk),
        "username": user.get_username(),
        "roles": sorted(role.value for role in roles_for_user(user)),
        "iat": int(now.timestamp()),
        "exp": int((now + timedelta(seconds=ttl)).timestamp()),
    }
    return jwt.encode(payload, _signing_secret(), algorithm=_algorithms()[0])


def decode_token(token: str) -> Dict[str, Any]:
    """Decode ``token`` and return its claims."""

    if not token:
        raise JWTValidationError("Bearer token is missing.")

    try:
        payload = jwt.decode(
            token,
            _signing_secret(),
            algorithms=list(_algorithms()),
            options={"verify_aud": False, "require": ["sub", "exp"]},
        )
    except InvalidTokenError as exc:
        raise JWTValidationError("Invalid JWT token") from exc

    if not str(payload.get("sub", "")).isdigit():
        raise JWTValidationError("Token subject must be a user id.")

    return payload
