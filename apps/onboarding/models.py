from django.conf import settings
from django.db import models

from .constants import (
    ApplicationStatus,
    CitizenshipType,
    ContactKind,
    DocumentType,
    Gender,
    ReviewActionType,
    WorkAuthorizationType,
)


class OnboardingApplication(models.Model):
    """The onboarding record an employee submits for HR review."""

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="onboarding_applications",
    )
    status = models.CharField(
        max_length=16,
        choices=ApplicationStatus.choices,
        default=ApplicationStatus.PENDING,
        db_index=True,
    )
    rejection_feedback = models.TextField(blank=True, default="")

    # Personal information
    first_name = models.CharField(max_length=100)
    last_name = models.CharField(max_length=100)
    middle_name = models.CharField(max_length=100, blank=True, default="")
    preferred_name = models.CharField(max_length=100, blank=True, default="")
    profile_picture = models.CharField(max_length=500, blank=True, default="")
    address_one = models.CharField(max_length=255)
    address_two = models.CharField(max_length=255, blank=True, default="")
    city = models.CharField(max_length=100)
    state = models.CharField(max_length=100)
    zip_code = models.CharField(max_length=10)
    cell_phone = models.CharField(max_length=20)
    work_phone = models.CharField(max_length=20, blank=True, default="")
    email = models.EmailField()
    ssn = models.CharField(max_length=11)
    date_of_birth = models.DateField()
    gender = models.CharField(max_length=32, choices=Gender.choices)

    # Citizenship
    is_permanent_resident = models.BooleanField(default=False)
    citizenship_type = models.CharField(max_length=32, choices=CitizenshipType.choices)
    work_authorization_type = models.CharField(
        max_length=16,
        choices=WorkAuthorizationType.choices,
        blank=True,
        default="",
        db_index=True,
    )
    work_authorization_other = models.CharField(max_length=255, blank=True, default="")
    work_authorization_start_date = models.DateField(blank=True, null=True)
    work_authorization_expiration_date = models.DateField(blank=True, null=True)

    # Review metadata
    version = models.PositiveIntegerField(default=1)
    submitted_at = models.DateTimeField(blank=True, null=True)
    reviewed_at = models.DateTimeField(blank=True, null=True)
    reviewed_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="reviewed_onboarding_applications",
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ("-submitted_at", "-id")
        constraints = [
            models.UniqueConstraint(
                fields=("user",),
                name="onboarding_unique_application_per_user",
            ),
        ]

    def __str__(self):
        return f"{self.first_name} {self.last_name} ({self.status})"

    @property
    def full_name(self) -> str:
        parts = [self.first_name, self.middle_name, self.last_name]
        return " ".join(part for part in parts if part)

    @property
    def reference(self):
        return next(
            (contact for contact in self.contacts.all() if contact.kind == ContactKind.REFERENCE),
            None,
        )

    @property
    def emergency_contacts(self):
        return [
            contact for contact in self.contacts.all() if contact.kind == ContactKind.EMERGENCY
        ]


class Contact(models.Model):
    """A reference or emergency contact listed on an application."""

    application = models.ForeignKey(
        OnboardingApplication,
        on_delete=models.CASCADE,
        related_name="contacts",
    )
    kind = models.CharField(max_length=16, choices=ContactKind.choices)
    position = models.PositiveSmallIntegerField(default=0)
    first_name = models.CharField(max_length=100)
    last_name = models.CharField(max_length=100)
    middle_name = models.CharField(max_length=100, blank=True, default="")
    phone = models.CharField(max_length=20)
    email = models.EmailField()
    relationship = models.CharField(max_length=100)

    class Meta:
        ordering = ("kind", "position", "id")

    def __str__(self) -> str:  # pragma: no cover - human readable representation
        return f"{self.get_kind_display()}: {self.first_name} {self.last_name}"


class ApplicationDocument(models.Model):
    """A stored file attached to an application, unique by URL."""

    application = models.ForeignKey(
        OnboardingApplication,
        on_delete=models.CASCADE,
        related_name="documents",
    )
    position = models.PositiveSmallIntegerField(default=0)
    document_type = models.CharField(max_length=32, choices=DocumentType.choices)
    file_name = models.CharField(max_length=255)
    file_url = models.CharField(max_length=500)
    upload_date = models.DateTimeField()

    class Meta:
        ordering = ("position", "id")
        constraints = [
            models.UniqueConstraint(
                fields=("application", "file_url"),
                name="onboarding_unique_document_url_per_application",
            ),
        ]

    def __str__(self) -> str:  # pragma: no cover - human readable representation
        return f"{self.get_document_type_display()} ({self.file_name})"


class ReviewAction(models.Model):
    """Audit trail of submissions and HR decisions."""

    application = models.ForeignKey(
        OnboardingApplication,
        on_delete=models.CASCADE,
        related_name="review_actions",
    )
    actor = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="onboarding_review_actions",
    )
    action = models.CharField(max_length=16, choices=ReviewActionType.choices)
    notes = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ("-created_at", "-id")

    def __str__(self):
        return f"{self.application} {self.action} by {self.actor} @ {self.created_at:%Y-%m-%d %H:%M}"


class LogEntry(models.Model):
    """Persisted application log record for HR observability."""

    LEVEL_CHOICES = [
        ("DEBUG", "Debug"),
        ("INFO", "Info"),
        ("WARNING", "Warning"),
        ("ERROR", "Error"),
        ("CRITICAL", "Critical"),
    ]

    timestamp = models.DateTimeField(auto_now_add=True, db_index=True)
    logger_name = models.CharField(max_length=255, db_index=True)
    level = models.CharField(max_length=16, choices=LEVEL_CHOICES)
    message = models.TextField()
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="onboarding_logs",
    )
    context = models.JSONField(blank=True, null=True)

    class Meta:
        ordering = ("-timestamp", "-id")

    def __str__(self) -> str:  # pragma: no cover - human readable representation
        return f"[{self.level}] {self.logger_name}: {self.message[:75]}"
