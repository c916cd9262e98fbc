"""HTTP client for the onboarding API.

Used by the client-side workflow (:mod:`apps.onboarding.wizard`) and the
management commands. HTTP failures come back as the same exceptions the
server raises, so callers handle one error vocabulary.
"""
from __future__ import annotations

import logging
from typing import Any, BinaryIO, Dict, List, Mapping, Optional
from urllib.parse import urljoin

import requests
from django.conf import settings

from .documents import DocumentReference
from .errors import (
    InvalidStateTransition,
    NetworkFailure,
    PersistFailure,
    UploadFailure,
    ValidationFailure,
)

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10


class OnboardingAPI:
    """Thin wrapper around the onboarding REST endpoints."""

    def __init__(
        self,
        base_url: str,
        *,
        token: Optional[str] = None,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip("/") + "/"
        self.token = token
        if timeout is None:
            timeout = getattr(settings, "ONBOARDING_API_TIMEOUT", DEFAULT_TIMEOUT)
        self.timeout = timeout
        self.session = session or requests.Session()

    def _url(self, path: str) -> str:
        return urljoin(self.base_url, path.lstrip("/"))

    def _headers(self) -> Dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def _request(self, method: str, path: str, **kwargs) -> requests.Response:
        try:
            return self.session.request(
                method,
                self._url(path),
                headers=self._headers(),
                timeout=self.timeout,
                **kwargs,
            )
        except requests.RequestException as exc:
            logger.warning("%s %s failed: %s", method, path, exc)
            raise NetworkFailure(f"{method} {path} failed: {exc}") from exc

    @staticmethod
    def _json(response: requests.Response) -> Any:
        try:
            return response.json()
        except ValueError:
            return {}

    def _raise_for_status(self, response: requests.Response) -> None:
        if response.ok:
            return

        body = self._json(response)
        if not isinstance(body, Mapping):
            body = {}

        if response.status_code == 400 and isinstance(body.get("errors"), Mapping):
            raise ValidationFailure(body["errors"])
        if response.status_code == 409 and body.get("transition"):
            raise InvalidStateTransition(body.get("status", ""), body["transition"])

        detail = body.get("detail") or f"HTTP {response.status_code}"
        raise PersistFailure(str(detail), status_code=response.status_code)

    def _send(self, method: str, path: str, **kwargs) -> Any:
        response = self._request(method, path, **kwargs)
        self._raise_for_status(response)
        return self._json(response)

    # Auth -----------------------------------------------------------------

    def login(self, username: str, password: str) -> Dict[str, Any]:
        body = self._send(
            "POST", "api/auth/token/", json={"username": username, "password": password}
        )
        self.token = body["token"]
        return body

    # Employee -------------------------------------------------------------

    def fetch_application(self) -> Optional[Dict[str, Any]]:
        """Return the caller's record, or ``None`` if they never submitted."""

        response = self._request("GET", "api/onboarding/application/")
        if response.status_code == 404:
            return None
        self._raise_for_status(response)
        return self._json(response)

    def submit_application(self, payload: Mapping[str, Any]) -> Dict[str, Any]:
        return self._send("POST", "api/onboarding/application/", json=dict(payload))

    def visa_status(self) -> Dict[str, Any]:
        return self._send("GET", "api/onboarding/visa-status/")

    def upload_file(
        self, content: BinaryIO, file_name: str, document_type: str
    ) -> DocumentReference:
        response = self._request(
            "POST", "api/files/upload/", files={"file": (file_name, content)}
        )
        if not response.ok:
            body = self._json(response)
            errors = body.get("errors", {}) if isinstance(body, Mapping) else {}
            messages = errors.get("file") if isinstance(errors, Mapping) else None
            reason = "; ".join(messages) if messages else f"HTTP {response.status_code}"
            raise UploadFailure(file_name, reason)

        body = self._json(response)
        if not isinstance(body, Mapping) or not body.get("fileUrl"):
            raise UploadFailure(file_name, "Upload response did not include a file URL.")
        return DocumentReference.from_payload({**body, "type": document_type})

    # HR -------------------------------------------------------------------

    def list_applications(self, status: str = "pending") -> List[Dict[str, Any]]:
        body = self._send("GET", "api/hr/applications/", params={"status": status})
        return body.get("results", [])

    def get_application(self, application_id: int) -> Dict[str, Any]:
        return self._send("GET", f"api/hr/applications/{application_id}/")

    def approve(self, application_id: int) -> Dict[str, Any]:
        return self._send("POST", f"api/hr/applications/{application_id}/approve/")

    def reject(self, application_id: int, feedback: str) -> Dict[str, Any]:
        return self._send(
            "POST",
            f"api/hr/applications/{application_id}/reject/",
            json={"feedback": feedback},
        )

    def visa_statuses(self) -> List[Dict[str, Any]]:
        body = self._send("GET", "api/hr/visa-status/")
        return body.get("results", [])
