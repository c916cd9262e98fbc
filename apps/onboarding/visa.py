"""Work authorization tracking for applicants who are not permanent residents."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import List, Optional

from django.conf import settings
from django.utils import timezone

from .citizenship import WorkAuthorization, from_application
from .constants import ApplicationStatus, DocumentType
from .documents import DocumentReference
from .models import OnboardingApplication

DEFAULT_EXPIRY_WARNING_DAYS = 60

VISA_DOCUMENT_TYPES = frozenset({DocumentType.WORK_AUTHORIZATION, DocumentType.OPT_RECEIPT})


@dataclass(frozen=True)
class VisaStatus:
    application_id: int
    employee_name: str
    email: str
    work_authorization_type: str
    work_authorization_other: str
    start_date: date
    expiration_date: date
    days_remaining: int
    expiring_soon: bool
    documents: List[DocumentReference] = field(default_factory=list)

    @property
    def expired(self) -> bool:
        return self.days_remaining < 0


def warning_days() -> int:
    return getattr(settings, "ONBOARDING_VISA_EXPIRY_WARNING_DAYS", DEFAULT_EXPIRY_WARNING_DAYS)


def visa_status_for(
    application: OnboardingApplication, *, today: Optional[date] = None
) -> Optional[VisaStatus]:
    """Return the work authorization window, or ``None`` for permanent residents."""

    citizenship = from_application(application)
    if not isinstance(citizenship, WorkAuthorization):
        return None

    today = today or timezone.localdate()
    days_remaining = (citizenship.expiration_date - today).days
    return VisaStatus(
        application_id=application.pk,
        employee_name=application.full_name,
        email=application.email,
        work_authorization_type=citizenship.visa_type.value,
        work_authorization_other=citizenship.other_description,
        start_date=citizenship.start_date,
        expiration_date=citizenship.expiration_date,
        days_remaining=days_remaining,
        expiring_soon=days_remaining <= warning_days(),
        documents=[
            DocumentReference.from_model(document)
            for document in application.documents.all()
            if document.document_type in VISA_DOCUMENT_TYPES
        ],
    )


def work_authorization_statuses(*, today: Optional[date] = None) -> List[VisaStatus]:
    """Visa holders still on file, soonest expiration first."""

    applications = (
        OnboardingApplication.objects.filter(is_permanent_resident=False)
        .exclude(status=ApplicationStatus.REJECTED)
        .prefetch_related("documents")
        .order_by("work_authorization_expiration_date", "id")
    )
    statuses = []
    for application in applications:
        status = visa_status_for(application, today=today)
        if status is not None:
            statuses.append(status)
    return statuses
