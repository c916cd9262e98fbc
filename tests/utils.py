from datetime import date, timedelta
from io import BytesIO

from django.utils import timezone
from PIL import Image

from apps.onboarding.constants import ApplicationStatus, DocumentType
from apps.onboarding.models import ApplicationDocument, OnboardingApplication


def _generate_png_bytes() -> bytes:
    image = Image.new("RGB", (1, 1), color="white")
    buffer = BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()


PNG_IMAGE_BYTES = _generate_png_bytes()
PDF_BYTES = b"%PDF-1.4 test pdf content"


def document_payload(document_type=DocumentType.DRIVER_LICENSE, name="license.pdf", **overrides):
    data = {
        "type": str(document_type),
        "fileName": name,
        "fileUrl": f"https://files.example.com/{name}",
        "uploadDate": "2024-01-15T10:00:00Z",
    }
    data.update(overrides)
    return data


def citizen_status():
    return {"isPermanentResident": True, "type": "citizen"}


def visa_status(visa_type="H1-B", **overrides):
    start = date.today() - timedelta(days=30)
    data = {
        "isPermanentResident": False,
        "workAuthorizationType": visa_type,
        "startDate": start.isoformat(),
        "expirationDate": (start + timedelta(days=365)).isoformat(),
    }
    data.update(overrides)
    return data


def application_payload(**overrides):
    data = {
        "firstName": "Jamie",
        "lastName": "Rivera",
        "middleName": "",
        "preferredName": "Jay",
        "address": {
            "addressOne": "1 Main Street",
            "addressTwo": "",
            "city": "Springfield",
            "state": "IL",
            "zipCode": "62701",
        },
        "cellPhone": "(555) 123-4567",
        "workPhone": "",
        "email": "jamie@example.com",
        "ssn": "123-45-6789",
        "dateOfBirth": "1990-05-17",
        "gender": "female",
        "citizenshipStatus": citizen_status(),
        "reference": {
            "firstName": "Ref",
            "lastName": "Erence",
            "phone": "555-222-3333",
            "email": "ref@example.com",
            "relationship": "Former manager",
        },
        "emergencyContacts": [
            {
                "firstName": "Casey",
                "lastName": "Rivera",
                "phone": "555-444-5555",
                "email": "casey@example.com",
                "relationship": "Sibling",
            }
        ],
        "documents": [document_payload()],
    }
    data.update(overrides)
    return data


def create_application(user, documents=(DocumentType.DRIVER_LICENSE,), **overrides):
    defaults = {
        "status": ApplicationStatus.PENDING,
        "first_name": "Jamie",
        "last_name": "Rivera",
        "address_one": "1 Main Street",
        "city": "Springfield",
        "state": "IL",
        "zip_code": "62701",
        "cell_phone": "555-123-4567",
        "email": f"{user.username}@example.com",
        "ssn": "123-45-6789",
        "date_of_birth": date(1990, 5, 17),
        "gender": "female",
        "is_permanent_resident": True,
        "citizenship_type": "citizen",
        "submitted_at": timezone.now(),
    }
    defaults.update(overrides)
    application = OnboardingApplication.objects.create(user=user, **defaults)
    for position, document_type in enumerate(documents):
        ApplicationDocument.objects.create(
            application=application,
            position=position,
            document_type=document_type,
            file_name=f"{document_type}.pdf",
            file_url=f"https://files.example.com/{user.pk}/{document_type}.pdf",
            upload_date=timezone.now(),
        )
    return application
