"""Bearer token authentication for the REST API."""

from __future__ import annotations

from django.contrib.auth import get_user_model
from rest_framework import exceptions
from rest_framework.authentication import BaseAuthentication, get_authorization_header

from apps.users.jwt_utils import JWTValidationError, decode_token, extract_bearer_token


class BearerTokenAuthentication(BaseAuthentication):
    """Authenticate requests carrying ``Authorization: Bearer <jwt>``."""

    keyword = "Bearer"

    def authenticate(self, request):
        header = get_authorization_header(request).decode("latin-1")
        if not header.lower().startswith("bearer"):
            return None

        token = extract_bearer_token(header)
        if token is None:
            raise exceptions.AuthenticationFailed("Malformed bearer token header.")

        try:
            claims = decode_token(token)
        except JWTValidationError as exc:
            raise exceptions.AuthenticationFailed(str(exc)) from exc

        user = get_user_model()._default_manager.filter(pk=int(claims["sub"])).first()
        if user is None or not user.is_active:
            raise exceptions.AuthenticationFailed("User is inactive or no longer exists.")
        return user, claims

    def authenticate_header(self, request):
        return self.keyword
