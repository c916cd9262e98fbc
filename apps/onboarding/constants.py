"""Choices shared by the onboarding models, serializers and workflow."""

from django.db import models


class ApplicationStatus(models.TextChoices):
    PENDING = "pending", "Pending"
    APPROVED = "approved", "Approved"
    REJECTED = "rejected", "Rejected"


class Gender(models.TextChoices):
    MALE = "male", "Male"
    FEMALE = "female", "Female"
    PREFER_NOT_TO_SAY = "prefer_not_to_say", "Prefer not to say"


class CitizenshipType(models.TextChoices):
    GREEN_CARD = "green_card", "Green card"
    CITIZEN = "citizen", "Citizen"
    WORK_AUTHORIZATION = "work_authorization", "Work authorization"


class WorkAuthorizationType(models.TextChoices):
    H1B = "H1-B", "H1-B"
    H4 = "H4", "H4"
    L2 = "L2", "L2"
    F1 = "F1", "F1 (CPT/OPT)"
    OTHER = "other", "Other"


class DocumentType(models.TextChoices):
    DRIVER_LICENSE = "driver_license", "Driver's license"
    WORK_AUTHORIZATION = "work_authorization", "Work authorization"
    OPT_RECEIPT = "opt_receipt", "OPT receipt"
    OTHER = "other", "Other"


class ContactKind(models.TextChoices):
    REFERENCE = "reference", "Reference"
    EMERGENCY = "emergency", "Emergency contact"


class ReviewActionType(models.TextChoices):
    SUBMITTED = "submitted", "Submitted"
    RESUBMITTED = "resubmitted", "Resubmitted"
    APPROVED = "approved", "Approved"
    REJECTED = "rejected", "Rejected"


PERMANENT_RESIDENT_TYPES = frozenset(
    {CitizenshipType.GREEN_CARD, CitizenshipType.CITIZEN}
)

#: Visa types whose holders must provide a work authorization document.
WORK_AUTHORIZATION_DOCUMENT_VISAS = frozenset(
    {
        WorkAuthorizationType.H1B,
        WorkAuthorizationType.H4,
        WorkAuthorizationType.L2,
        WorkAuthorizationType.OTHER,
    }
)
