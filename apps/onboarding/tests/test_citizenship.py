from datetime import date

import pytest

from apps.onboarding.citizenship import (
    PermanentResident,
    WorkAuthorization,
    from_validated_data,
    required_document_types,
)
from apps.onboarding.constants import CitizenshipType, DocumentType, WorkAuthorizationType


def _visa(visa_type, other=""):
    return WorkAuthorization(
        visa_type=WorkAuthorizationType(visa_type),
        start_date=date(2024, 1, 1),
        expiration_date=date(2025, 1, 1),
        other_description=other,
    )


def test_permanent_residents_only_need_a_driver_license():
    citizenship = PermanentResident(CitizenshipType.GREEN_CARD)

    assert required_document_types(citizenship) == {DocumentType.DRIVER_LICENSE}


def test_invalid_citizenship_still_requires_driver_license():
    assert required_document_types(None) == {DocumentType.DRIVER_LICENSE}


def test_f1_requires_opt_receipt_instead_of_work_authorization():
    required = required_document_types(_visa("F1"))

    assert required == {DocumentType.DRIVER_LICENSE, DocumentType.OPT_RECEIPT}


@pytest.mark.parametrize("visa_type", ["H1-B", "H4", "L2", "other"])
def test_other_visas_require_work_authorization_file(visa_type):
    required = required_document_types(_visa(visa_type, other="TN"))

    assert required == {DocumentType.DRIVER_LICENSE, DocumentType.WORK_AUTHORIZATION}


def test_unknown_variant_is_a_type_error():
    with pytest.raises(TypeError):
        required_document_types("citizen")


def test_from_validated_data_drops_other_description_for_named_visas():
    citizenship = from_validated_data(
        {
            "is_permanent_resident": False,
            "citizenship_type": "work_authorization",
            "work_authorization_type": "L2",
            "work_authorization_other": "leftover",
            "work_authorization_start_date": date(2024, 1, 1),
            "work_authorization_expiration_date": date(2026, 1, 1),
        }
    )

    assert citizenship == WorkAuthorization(
        visa_type=WorkAuthorizationType.L2,
        start_date=date(2024, 1, 1),
        expiration_date=date(2026, 1, 1),
    )
