"""Exceptions raised by the onboarding submission and review workflow."""

from __future__ import annotations

from typing import Mapping, Sequence, TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover - used for type checkers only
    from .documents import DocumentReference


class OnboardingError(Exception):
    """Base class for every onboarding workflow failure."""


class ValidationFailure(OnboardingError):
    """Local validation rejected the payload; no network call was made."""

    def __init__(self, errors: Mapping[str, Sequence[str] | str]):
        self.errors: dict[str, list[str]] = {}
        for field, messages in errors.items():
            if isinstance(messages, str):
                messages = [messages]
            self.errors[field] = [str(message) for message in messages]
        summary = "; ".join(
            f"{field}: {', '.join(messages)}" for field, messages in self.errors.items()
        )
        super().__init__(summary or "Validation failed.")


class UploadFailure(OnboardingError):
    """A staged file could not be uploaded.

    Files uploaded earlier in the same batch are kept in ``uploaded``; they are
    stored remotely but not attached to any application.
    """

    def __init__(
        self,
        file_name: str,
        reason: str = "",
        *,
        uploaded: Sequence["DocumentReference"] = (),
    ):
        self.file_name = file_name
        self.reason = reason
        self.uploaded = list(uploaded)
        message = f"Failed to upload {file_name}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class PersistFailure(OnboardingError):
    """The record store refused to save the application."""

    def __init__(self, detail: str, *, status_code: int | None = None):
        self.detail = detail
        self.status_code = status_code
        super().__init__(detail)


class InvalidStateTransition(OnboardingError):
    """The requested transition is not legal from the current status."""

    def __init__(self, current: str, transition: str):
        self.current = str(current)
        self.transition = str(transition)
        super().__init__(
            f"Cannot {self.transition} an application that is {self.current}."
        )


class NetworkFailure(OnboardingError):
    """The API could not be reached or did not answer in time."""


class SubmissionInProgress(OnboardingError):
    """A submission is already in flight for this session."""
