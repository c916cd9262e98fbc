"""Background tasks for onboarding review side effects."""
from __future__ import annotations

import logging

from celery import shared_task

from .emails import send_decision_email
from .models import OnboardingApplication

logger = logging.getLogger(__name__)


@shared_task(name="onboarding.send_decision_email")
def send_decision_email_task(application_id: int, action: str):
    application = (
        OnboardingApplication.objects.select_related("user").filter(pk=application_id).first()
    )
    if application is None:
        logger.warning(
            "Skipping decision email for missing application %s",
            application_id,
            extra={"context": {"application_id": application_id, "action": action}},
        )
        return None
    return send_decision_email(application, action)
