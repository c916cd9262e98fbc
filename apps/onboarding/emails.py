"""Helpers for telling employees about HR decisions."""

from __future__ import annotations

from typing import Optional

from django.conf import settings
from django.core.mail import EmailMessage

from .constants import ApplicationStatus
from .models import OnboardingApplication


def _default_from_email() -> str:
    return getattr(settings, "DEFAULT_FROM_EMAIL", None) or "no-reply@example.com"


def _recipient(application: OnboardingApplication) -> str:
    return application.email or getattr(application.user, "email", "")


def send_decision_email(application: OnboardingApplication, action: str) -> Optional[int]:
    """
    Email the employee the outcome of their onboarding review.

    Parameters
    ----------
    application:
        The application that was decided.
    action:
        ``"approved"`` or ``"rejected"``. Any other value sends nothing.

    Returns
    -------
    Optional[int]
        The value returned by ``EmailMessage.send``, or ``None`` when no email
        was sent.
    """

    action = action.lower()
    if action not in {ApplicationStatus.APPROVED, ApplicationStatus.REJECTED}:
        return None

    recipient = _recipient(application)
    if not recipient:
        return None

    name = application.preferred_name or application.first_name
    if action == ApplicationStatus.APPROVED:
        subject = "Your onboarding application has been approved"
        body_lines = [
            f"Hello {name},",
            "",
            "HR has reviewed and approved your onboarding application.",
            "You now have full access to the employee portal.",
        ]
    else:
        subject = "Your onboarding application needs changes"
        body_lines = [
            f"Hello {name},",
            "",
            "HR has reviewed your onboarding application and asked for changes:",
            "",
            application.rejection_feedback,
            "",
            "Please update your application and submit it again.",
        ]

    body_lines.extend(
        [
            "",
            "If you have any questions, please reply to this email.",
            "",
            "Regards,",
            "HR Team",
        ]
    )

    email = EmailMessage(
        subject=subject,
        body="\n".join(body_lines),
        from_email=_default_from_email(),
        to=[recipient],
    )
    return email.send(fail_silently=False)
