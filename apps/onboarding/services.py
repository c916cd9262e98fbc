"""Service layer for onboarding submissions and HR decisions.

Every write goes through a conditional ``UPDATE`` so that two concurrent
requests cannot both move an application out of the same state.
"""
from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping, Optional, TYPE_CHECKING

from django.db import IntegrityError, transaction
from django.db.models import F, QuerySet
from django.utils import timezone

from . import lifecycle
from .constants import ApplicationStatus, ContactKind, ReviewActionType
from .documents import DocumentReference, merge_documents
from .errors import InvalidStateTransition, PersistFailure, ValidationFailure
from .lifecycle import ApplicationState, Transition
from .models import ApplicationDocument, Contact, OnboardingApplication, ReviewAction
from .tasks import send_decision_email_task
from .validation import ValidatedSubmission, validate_submission

if TYPE_CHECKING:  # pragma: no cover - used for type checkers only
    from django.contrib.auth.models import AbstractBaseUser as User
else:  # pragma: no cover - runtime typing fallback
    from typing import Any as User

logger = logging.getLogger(__name__)

DECISION_ACTIONS = {
    Transition.APPROVE: ReviewActionType.APPROVED,
    Transition.REJECT: ReviewActionType.REJECTED,
}


def _with_relations(queryset: QuerySet) -> QuerySet:
    return queryset.select_related("user", "reviewed_by").prefetch_related("contacts", "documents")


def get_application_for_user(user: User) -> Optional[OnboardingApplication]:
    """Return the user's application, or ``None`` if they never submitted."""

    return _with_relations(OnboardingApplication.objects.filter(user=user)).first()


def get_application(application_id: int) -> OnboardingApplication:
    return _with_relations(OnboardingApplication.objects.all()).get(pk=application_id)


def list_applications(status: str = ApplicationStatus.PENDING) -> QuerySet:
    """Applications in ``status``, most recently submitted first."""

    if status not in ApplicationStatus.values:
        raise ValidationFailure(
            {"status": [f"Select one of: {', '.join(ApplicationStatus.values)}."]}
        )
    return (
        OnboardingApplication.objects.filter(status=status)
        .select_related("user")
        .order_by("-submitted_at", "-id")
    )


def list_employees() -> QuerySet:
    """Employees whose onboarding was approved."""

    return _with_relations(
        OnboardingApplication.objects.filter(status=ApplicationStatus.APPROVED)
    ).order_by("last_name", "first_name", "id")


def _persisted_documents(application: Optional[OnboardingApplication]) -> list[DocumentReference]:
    if application is None:
        return []
    return [DocumentReference.from_model(document) for document in application.documents.all()]


def _replace_contacts(application: OnboardingApplication, submission: ValidatedSubmission) -> None:
    application.contacts.all().delete()
    contacts = []
    if submission.reference:
        contacts.append(Contact(application=application, kind=ContactKind.REFERENCE, **submission.reference))
    for position, contact in enumerate(submission.emergency_contacts):
        contacts.append(
            Contact(
                application=application,
                kind=ContactKind.EMERGENCY,
                position=position,
                **contact,
            )
        )
    Contact.objects.bulk_create(contacts)


def _replace_documents(
    application: OnboardingApplication, documents: Iterable[DocumentReference]
) -> None:
    application.documents.all().delete()
    ApplicationDocument.objects.bulk_create(
        [
            ApplicationDocument(
                application=application,
                position=position,
                document_type=document.document_type,
                file_name=document.file_name,
                file_url=document.file_url,
                upload_date=document.upload_date,
            )
            for position, document in enumerate(documents)
        ]
    )


def submit_application(user: User, payload: Mapping[str, Any]) -> OnboardingApplication:
    """Create or update the user's application and put it in ``pending``.

    Documents already on file are kept and merged with the ones listed in the
    payload, deduplicated by URL. A previous rejection's feedback stays on the
    record for reference.
    """

    application = get_application_for_user(user)
    current = application.status if application else None
    lifecycle.next_state(current, Transition.SUBMIT)

    persisted = _persisted_documents(application)
    submission = validate_submission(payload, persisted_documents=persisted)
    documents = merge_documents(persisted, submission.documents)

    now = timezone.now()
    fields = dict(submission.fields)
    fields.update(status=ApplicationStatus.PENDING, submitted_at=now)

    with transaction.atomic():
        if application is None:
            action = ReviewActionType.SUBMITTED
            try:
                with transaction.atomic():
                    application = OnboardingApplication.objects.create(user=user, **fields)
            except IntegrityError as exc:
                raise PersistFailure(
                    "An onboarding application already exists for this user.",
                    status_code=409,
                ) from exc
        else:
            action = (
                ReviewActionType.RESUBMITTED
                if lifecycle.state_of(current) == ApplicationState.REJECTED
                else ReviewActionType.SUBMITTED
            )
            updated = OnboardingApplication.objects.filter(
                pk=application.pk,
                version=application.version,
                status=current,
            ).update(version=F("version") + 1, updated_at=now, **fields)
            if not updated:
                raise PersistFailure(
                    "The application changed while it was being saved. Reload and try again.",
                    status_code=409,
                )

        _replace_contacts(application, submission)
        _replace_documents(application, documents)
        ReviewAction.objects.create(application=application, actor=user, action=action)

    logger.info(
        "Onboarding application %s %s",
        application.pk,
        action,
        extra={
            "user_id": user.pk,
            "context": {
                "application_id": application.pk,
                "previous_status": lifecycle.state_of(current).value,
                "documents": [document.document_type for document in documents],
            },
        },
    )
    return get_application_for_user(user)


def _decide(
    application: OnboardingApplication,
    actor: User,
    transition: Transition,
    *,
    feedback: str = "",
) -> OnboardingApplication:
    target = lifecycle.next_state(application.status, transition)
    action = DECISION_ACTIONS[transition]
    now = timezone.now()

    with transaction.atomic():
        updated = OnboardingApplication.objects.filter(
            pk=application.pk, status=ApplicationStatus.PENDING
        ).update(
            status=target.value,
            rejection_feedback=feedback,
            reviewed_at=now,
            reviewed_by=actor,
            version=F("version") + 1,
            updated_at=now,
        )
        if not updated:
            application.refresh_from_db(fields=["status"])
            raise InvalidStateTransition(application.status, transition.value)
        ReviewAction.objects.create(
            application=application,
            actor=actor,
            action=action,
            notes=feedback,
        )

    application.refresh_from_db()

    send_decision_email_task.delay(application.pk, target.value)

    logger.info(
        "Onboarding application %s %s by %s",
        application.pk,
        action,
        getattr(actor, "username", actor.pk),
        extra={
            "user": actor,
            "context": {"application_id": application.pk, "feedback": feedback},
        },
    )
    return application


def approve_application(application: OnboardingApplication, actor: User) -> OnboardingApplication:
    """Approve a pending application. Approved applications are final."""

    return _decide(application, actor, Transition.APPROVE)


def reject_application(
    application: OnboardingApplication, actor: User, feedback: str
) -> OnboardingApplication:
    """Reject a pending application with feedback the employee will see."""

    lifecycle.next_state(application.status, Transition.REJECT)
    feedback = (feedback or "").strip()
    if not feedback:
        raise ValidationFailure(
            {"feedback": ["Feedback is required when rejecting an application."]}
        )
    return _decide(application, actor, Transition.REJECT, feedback=feedback)
