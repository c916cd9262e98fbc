import pytest

from apps.onboarding.citizenship import PermanentResident, WorkAuthorization
from apps.onboarding.documents import DocumentReference
from apps.onboarding.errors import ValidationFailure
from apps.onboarding.validation import flatten_errors, validate_submission
from tests.utils import application_payload, document_payload, visa_status


def _errors_for(payload, **kwargs):
    with pytest.raises(ValidationFailure) as excinfo:
        validate_submission(payload, **kwargs)
    return excinfo.value.errors


def test_valid_citizen_payload_is_split_for_storage():
    submission = validate_submission(application_payload())

    assert isinstance(submission.citizenship, PermanentResident)
    assert submission.fields["first_name"] == "Jamie"
    assert submission.fields["zip_code"] == "62701"
    assert submission.fields["work_authorization_type"] == ""
    assert submission.fields["work_authorization_start_date"] is None
    assert "documents" not in submission.fields
    assert submission.reference["relationship"] == "Former manager"
    assert len(submission.emergency_contacts) == 1
    assert [document.document_type for document in submission.documents] == ["driver_license"]


def test_missing_driver_license_is_reported():
    errors = _errors_for(application_payload(documents=[]))

    assert errors == {"documents": ["Driver's license is required"]}


def test_driver_license_reported_alongside_schema_errors():
    errors = _errors_for(application_payload(ssn="123456789", documents=[]))

    assert errors["ssn"] == ["SSN must use the format 123-45-6789."]
    assert errors["documents"] == ["Driver's license is required"]


def test_persisted_or_staged_documents_satisfy_requirements():
    persisted = [DocumentReference.from_payload(document_payload())]

    validate_submission(application_payload(documents=[]), persisted_documents=persisted)
    validate_submission(application_payload(documents=[]), staged_types=["driver_license"])


def test_f1_without_opt_receipt():
    errors = _errors_for(application_payload(citizenshipStatus=visa_status("F1")))

    assert errors == {"documents": ["OPT Receipt is required for F1 visa holders"]}


def test_h1b_needs_work_authorization_file():
    payload = application_payload(citizenshipStatus=visa_status("H1-B"))

    errors = _errors_for(payload)
    assert errors == {"documents": ["Work authorization file is required"]}

    submission = validate_submission(payload, staged_types=["work_authorization"])
    assert isinstance(submission.citizenship, WorkAuthorization)
    assert submission.fields["citizenship_type"] == "work_authorization"


def test_other_visa_requires_description():
    errors = _errors_for(
        application_payload(citizenshipStatus=visa_status("other")),
        staged_types=["work_authorization"],
    )

    assert errors == {
        "citizenshipStatus.workAuthorizationOther": ["Please specify your work authorization."]
    }


def test_visa_holder_must_pick_work_authorization_type():
    errors = _errors_for(
        application_payload(
            citizenshipStatus=visa_status(workAuthorizationType=""),
        ),
        staged_types=["work_authorization"],
    )

    assert errors == {
        "citizenshipStatus.workAuthorizationType": ["Work authorization type is required."]
    }


def test_visa_dates_are_required():
    errors = _errors_for(
        application_payload(citizenshipStatus=visa_status("L2", startDate="", expirationDate=None)),
        staged_types=["work_authorization"],
    )

    assert errors["citizenshipStatus.startDate"] == ["Start date is required."]
    assert errors["citizenshipStatus.expirationDate"] == ["Expiration date is required."]


def test_permanent_resident_must_pick_green_card_or_citizen():
    errors = _errors_for(
        application_payload(citizenshipStatus={"isPermanentResident": True, "type": "work_authorization"})
    )

    assert errors == {"citizenshipStatus.type": ["Select green card or citizen."]}


def test_permanent_resident_drops_visa_fields():
    submission = validate_submission(
        application_payload(
            citizenshipStatus={
                "isPermanentResident": True,
                "type": "green_card",
                "workAuthorizationType": "H4",
                "startDate": "2024-01-01",
            }
        )
    )

    assert submission.fields["work_authorization_type"] == ""
    assert submission.fields["work_authorization_start_date"] is None


@pytest.mark.parametrize(
    "field, value, path",
    [
        ("email", "not-an-email", "email"),
        ("cellPhone", "12", "cellPhone"),
        ("dateOfBirth", "17/05/1990", "dateOfBirth"),
        ("gender", "unknown", "gender"),
    ],
)
def test_format_errors_use_wire_field_names(field, value, path):
    errors = _errors_for(application_payload(**{field: value}))

    assert path in errors
    assert "documents" not in errors


def test_nested_errors_are_flattened_to_dotted_paths():
    payload = application_payload()
    payload["address"]["zipCode"] = "ABCDE"
    payload["emergencyContacts"][0]["email"] = "nope"

    errors = _errors_for(payload)

    assert errors["address.zipCode"] == ["Enter a 5 digit ZIP code."]
    assert "emergencyContacts.0.email" in errors


def test_flatten_errors_handles_lists_of_objects():
    flat = flatten_errors({"items": [{}, {"name": ["Required."]}], "top": ["Bad."]})

    assert flat == {"items.1.name": ["Required."], "top": ["Bad."]}
