"""Client-side state for the onboarding form and the HR review screen.

Both containers are plain objects holding an :class:`OnboardingAPI`; callers
create one per user session and pass it around explicitly.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, BinaryIO, Dict, List, Mapping, Optional

from . import lifecycle
from .client import OnboardingAPI
from .constants import ApplicationStatus, DocumentType
from .documents import DocumentReference, merge_documents
from .errors import (
    InvalidStateTransition,
    NetworkFailure,
    SubmissionInProgress,
    UploadFailure,
    ValidationFailure,
)
from .lifecycle import ApplicationState, Transition
from .validation import validate_submission

logger = logging.getLogger(__name__)


@dataclass
class StagedDocument:
    """A local file waiting to be uploaded on the next submit."""

    document_type: str
    file_name: str
    content: BinaryIO

    def rewind(self) -> None:
        seek = getattr(self.content, "seek", None)
        if seek is not None:
            seek(0)

    def release(self) -> None:
        close = getattr(self.content, "close", None)
        if close is not None:
            close()


class OnboardingSession:
    """State of one employee's onboarding form."""

    def __init__(self, api: OnboardingAPI):
        self.api = api
        self.application: Optional[Dict[str, Any]] = None
        self.staged: Dict[str, StagedDocument] = {}
        self.in_flight = False

    @property
    def status(self) -> ApplicationState:
        return lifecycle.state_of(self.application.get("status") if self.application else None)

    @property
    def rejection_feedback(self) -> str:
        if self.status != ApplicationState.REJECTED:
            return ""
        return self.application.get("rejectionFeedback", "")

    @property
    def persisted_documents(self) -> List[DocumentReference]:
        if not self.application:
            return []
        return [
            DocumentReference.from_payload(document)
            for document in self.application.get("documents") or []
        ]

    def load(self) -> Optional[Dict[str, Any]]:
        self.application = self.api.fetch_application()
        return self.application

    def stage_document(self, document_type: str, file_name: str, content: BinaryIO) -> StagedDocument:
        """Stage ``content`` for upload; replaces any file staged for the same type."""

        document_type = DocumentType(document_type).value
        self.discard_document(document_type)
        staged = StagedDocument(document_type=document_type, file_name=file_name, content=content)
        self.staged[document_type] = staged
        return staged

    def discard_document(self, document_type: str) -> None:
        previous = self.staged.pop(str(document_type), None)
        if previous is not None:
            previous.release()

    def clear_staged(self) -> None:
        for document_type in list(self.staged):
            self.discard_document(document_type)

    def submit(self, values: Mapping[str, Any]) -> Dict[str, Any]:
        """Validate, upload staged files, then save the application.

        Nothing touches the network when local validation fails. Staged files
        are released only after the record was saved.
        """

        if self.in_flight:
            raise SubmissionInProgress("A submission is already in progress.")

        self.in_flight = True
        try:
            lifecycle.next_state(self.status, Transition.SUBMIT)
            persisted = self.persisted_documents
            validate_submission(
                values,
                persisted_documents=persisted,
                staged_types=self.staged.keys(),
            )

            uploaded = self._upload_staged()
            submitted = [
                DocumentReference.from_payload(document)
                for document in values.get("documents") or []
            ]
            payload = dict(values)
            payload["documents"] = [
                document.to_payload()
                for document in merge_documents(uploaded, submitted, persisted)
            ]

            self.application = self.api.submit_application(payload)
            self.clear_staged()
            logger.info(
                "Submitted onboarding application %s",
                self.application.get("id"),
                extra={"context": {"uploaded": [document.file_name for document in uploaded]}},
            )
            return self.application
        finally:
            self.in_flight = False

    def _upload_staged(self) -> List[DocumentReference]:
        uploaded: List[DocumentReference] = []
        for staged in list(self.staged.values()):
            staged.rewind()
            try:
                uploaded.append(
                    self.api.upload_file(staged.content, staged.file_name, staged.document_type)
                )
            except (UploadFailure, NetworkFailure) as exc:
                reason = getattr(exc, "reason", "") or str(exc)
                raise UploadFailure(staged.file_name, reason, uploaded=uploaded) from exc
        return uploaded


class ReviewBoard:
    """State of the HR review screen: one status filter and a selection."""

    def __init__(self, api: OnboardingAPI, status: str = ApplicationStatus.PENDING):
        self.api = api
        self.status = ApplicationStatus(status).value
        self.applications: List[Dict[str, Any]] = []
        self.selected: Optional[Dict[str, Any]] = None

    @property
    def can_review(self) -> bool:
        return self.status == ApplicationStatus.PENDING

    def set_status(self, status: str) -> List[Dict[str, Any]]:
        if status not in ApplicationStatus.values:
            raise ValidationFailure(
                {"status": [f"Select one of: {', '.join(ApplicationStatus.values)}."]}
            )
        self.status = status
        self.selected = None
        return self.refresh()

    def refresh(self) -> List[Dict[str, Any]]:
        self.applications = self.api.list_applications(self.status)
        return self.applications

    def select(self, application_id: int) -> Dict[str, Any]:
        self.selected = self.api.get_application(application_id)["application"]
        return self.selected

    def _target(self, application_id: Optional[int], transition: Transition) -> int:
        if not self.can_review:
            raise InvalidStateTransition(self.status, transition.value)
        if application_id is None:
            if not self.selected:
                raise ValueError("No application selected.")
            application_id = self.selected["id"]
        return application_id

    def approve(self, application_id: Optional[int] = None) -> Dict[str, Any]:
        application_id = self._target(application_id, Transition.APPROVE)
        self.selected = self.api.approve(application_id)
        self.refresh()
        return self.selected

    def reject(self, feedback: str, application_id: Optional[int] = None) -> Dict[str, Any]:
        application_id = self._target(application_id, Transition.REJECT)
        if not (feedback or "").strip():
            raise ValidationFailure(
                {"feedback": ["Feedback is required when rejecting an application."]}
            )
        self.selected = self.api.reject(application_id, feedback.strip())
        self.refresh()
        return self.selected
