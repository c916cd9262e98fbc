"""DRF serializers describing the onboarding application wire format.

The wire format is camelCase; every field maps onto the snake_case model
columns through ``source``. Address and citizenship are nested on the wire but
flattened on the model, hence ``source="*"``.
"""

from __future__ import annotations

from django.core.validators import RegexValidator
from rest_framework import serializers

from .constants import (
    CitizenshipType,
    DocumentType,
    Gender,
    PERMANENT_RESIDENT_TYPES,
    WorkAuthorizationType,
)

PHONE_VALIDATOR = RegexValidator(
    r"^\+?1?[\s.-]?\(?\d{3}\)?[\s.-]?\d{3}[\s.-]?\d{4}$",
    "Enter a valid phone number.",
)
SSN_VALIDATOR = RegexValidator(
    r"^\d{3}-\d{2}-\d{4}$",
    "SSN must use the format 123-45-6789.",
)
ZIP_CODE_VALIDATOR = RegexValidator(
    r"^\d{5}(?:-\d{4})?$",
    "Enter a 5 digit ZIP code.",
)


class BlankableDateField(serializers.DateField):
    """Date field that reads an empty string as "not provided"."""

    def to_internal_value(self, value):
        if value == "":
            return None
        return super().to_internal_value(value)


class AddressSerializer(serializers.Serializer):
    addressOne = serializers.CharField(source="address_one", max_length=255)
    addressTwo = serializers.CharField(
        source="address_two", max_length=255, required=False, allow_blank=True, default=""
    )
    city = serializers.CharField(max_length=100)
    state = serializers.CharField(max_length=100)
    zipCode = serializers.CharField(
        source="zip_code", max_length=10, validators=[ZIP_CODE_VALIDATOR]
    )


class CitizenshipStatusSerializer(serializers.Serializer):
    isPermanentResident = serializers.BooleanField(source="is_permanent_resident")
    type = serializers.ChoiceField(
        source="citizenship_type",
        choices=CitizenshipType.choices,
        required=False,
        allow_blank=True,
        allow_null=True,
    )
    workAuthorizationType = serializers.ChoiceField(
        source="work_authorization_type",
        choices=WorkAuthorizationType.choices,
        required=False,
        allow_blank=True,
        allow_null=True,
    )
    workAuthorizationOther = serializers.CharField(
        source="work_authorization_other",
        max_length=255,
        required=False,
        allow_blank=True,
        allow_null=True,
    )
    startDate = BlankableDateField(
        source="work_authorization_start_date", required=False, allow_null=True
    )
    expirationDate = BlankableDateField(
        source="work_authorization_expiration_date", required=False, allow_null=True
    )

    def validate(self, attrs):
        errors: dict[str, str] = {}

        if attrs["is_permanent_resident"]:
            if attrs.get("citizenship_type") not in PERMANENT_RESIDENT_TYPES:
                errors["type"] = "Select green card or citizen."
            attrs.update(
                work_authorization_type="",
                work_authorization_other="",
                work_authorization_start_date=None,
                work_authorization_expiration_date=None,
            )
        else:
            attrs["citizenship_type"] = CitizenshipType.WORK_AUTHORIZATION.value
            visa_type = attrs.get("work_authorization_type") or ""
            other = (attrs.get("work_authorization_other") or "").strip()

            if not visa_type:
                errors["workAuthorizationType"] = "Work authorization type is required."
            elif visa_type == WorkAuthorizationType.OTHER and not other:
                errors["workAuthorizationOther"] = "Please specify your work authorization."

            if not attrs.get("work_authorization_start_date"):
                errors["startDate"] = "Start date is required."
            if not attrs.get("work_authorization_expiration_date"):
                errors["expirationDate"] = "Expiration date is required."

            attrs["work_authorization_type"] = visa_type
            attrs["work_authorization_other"] = (
                other if visa_type == WorkAuthorizationType.OTHER else ""
            )
            attrs.setdefault("work_authorization_start_date", None)
            attrs.setdefault("work_authorization_expiration_date", None)

        if errors:
            raise serializers.ValidationError(errors)
        return attrs


class ContactSerializer(serializers.Serializer):
    firstName = serializers.CharField(source="first_name", max_length=100)
    lastName = serializers.CharField(source="last_name", max_length=100)
    middleName = serializers.CharField(
        source="middle_name", max_length=100, required=False, allow_blank=True, default=""
    )
    phone = serializers.CharField(max_length=20, validators=[PHONE_VALIDATOR])
    email = serializers.EmailField()
    relationship = serializers.CharField(max_length=100)


class DocumentSerializer(serializers.Serializer):
    type = serializers.ChoiceField(source="document_type", choices=DocumentType.choices)
    fileName = serializers.CharField(source="file_name", max_length=255)
    fileUrl = serializers.CharField(source="file_url", max_length=500)
    uploadDate = serializers.DateTimeField(source="upload_date", required=False)


class OnboardingApplicationSerializer(serializers.Serializer):
    id = serializers.IntegerField(read_only=True)
    status = serializers.CharField(read_only=True)
    rejectionFeedback = serializers.CharField(source="rejection_feedback", read_only=True)

    firstName = serializers.CharField(source="first_name", max_length=100)
    lastName = serializers.CharField(source="last_name", max_length=100)
    middleName = serializers.CharField(
        source="middle_name", max_length=100, required=False, allow_blank=True, default=""
    )
    preferredName = serializers.CharField(
        source="preferred_name", max_length=100, required=False, allow_blank=True, default=""
    )
    profilePicture = serializers.CharField(
        source="profile_picture", max_length=500, required=False, allow_blank=True, default=""
    )
    address = AddressSerializer(source="*")
    cellPhone = serializers.CharField(
        source="cell_phone", max_length=20, validators=[PHONE_VALIDATOR]
    )
    workPhone = serializers.CharField(
        source="work_phone",
        max_length=20,
        required=False,
        allow_blank=True,
        default="",
        validators=[PHONE_VALIDATOR],
    )
    email = serializers.EmailField()
    ssn = serializers.CharField(max_length=11, validators=[SSN_VALIDATOR])
    dateOfBirth = serializers.DateField(source="date_of_birth")
    gender = serializers.ChoiceField(choices=Gender.choices)

    citizenshipStatus = CitizenshipStatusSerializer(source="*")
    reference = ContactSerializer(required=False, allow_null=True)
    emergencyContacts = ContactSerializer(
        source="emergency_contacts", many=True, required=False
    )
    documents = DocumentSerializer(many=True, required=False)

    submittedAt = serializers.DateTimeField(source="submitted_at", read_only=True)
    createdAt = serializers.DateTimeField(source="created_at", read_only=True)
    updatedAt = serializers.DateTimeField(source="updated_at", read_only=True)


class ApplicationSummarySerializer(serializers.Serializer):
    id = serializers.IntegerField()
    firstName = serializers.CharField(source="first_name")
    lastName = serializers.CharField(source="last_name")
    preferredName = serializers.CharField(source="preferred_name")
    email = serializers.EmailField()
    status = serializers.CharField()
    submittedAt = serializers.DateTimeField(source="submitted_at")
    updatedAt = serializers.DateTimeField(source="updated_at")


class StoredFileSerializer(serializers.Serializer):
    fileName = serializers.CharField(source="file_name")
    fileUrl = serializers.CharField(source="file_url")
    uploadDate = serializers.DateTimeField(source="upload_date")


class VisaStatusSerializer(serializers.Serializer):
    applicationId = serializers.IntegerField(source="application_id")
    employeeName = serializers.CharField(source="employee_name")
    email = serializers.EmailField()
    workAuthorizationType = serializers.CharField(source="work_authorization_type")
    workAuthorizationOther = serializers.CharField(source="work_authorization_other")
    startDate = serializers.DateField(source="start_date")
    expirationDate = serializers.DateField(source="expiration_date")
    daysRemaining = serializers.IntegerField(source="days_remaining")
    expiringSoon = serializers.BooleanField(source="expiring_soon")
    documents = DocumentSerializer(many=True)
