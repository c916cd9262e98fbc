"""Tagged representation of an applicant's citizenship status."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any, FrozenSet, Mapping, Optional, Union

from .constants import (
    CitizenshipType,
    DocumentType,
    WORK_AUTHORIZATION_DOCUMENT_VISAS,
    WorkAuthorizationType,
)


@dataclass(frozen=True)
class PermanentResident:
    """Green card holder or citizen; carries no work authorization data."""

    citizenship_type: CitizenshipType


@dataclass(frozen=True)
class WorkAuthorization:
    """Applicant working on a visa with a bounded authorization window."""

    visa_type: WorkAuthorizationType
    start_date: date
    expiration_date: date
    other_description: str = ""


Citizenship = Union[PermanentResident, WorkAuthorization]


def from_validated_data(attrs: Mapping[str, Any]) -> Citizenship:
    """Build the citizenship variant from validated (snake_case) fields."""

    if attrs["is_permanent_resident"]:
        return PermanentResident(CitizenshipType(attrs["citizenship_type"]))

    visa_type = WorkAuthorizationType(attrs["work_authorization_type"])
    return WorkAuthorization(
        visa_type=visa_type,
        start_date=attrs["work_authorization_start_date"],
        expiration_date=attrs["work_authorization_expiration_date"],
        other_description=(
            attrs.get("work_authorization_other") or ""
            if visa_type == WorkAuthorizationType.OTHER
            else ""
        ),
    )


def from_application(application) -> Citizenship:
    return from_validated_data(
        {
            "is_permanent_resident": application.is_permanent_resident,
            "citizenship_type": application.citizenship_type,
            "work_authorization_type": application.work_authorization_type,
            "work_authorization_other": application.work_authorization_other,
            "work_authorization_start_date": application.work_authorization_start_date,
            "work_authorization_expiration_date": application.work_authorization_expiration_date,
        }
    )


def required_document_types(citizenship: Optional[Citizenship]) -> FrozenSet[DocumentType]:
    """Return the document types an applicant must have on file.

    ``None`` stands for a citizenship block that did not validate; only the
    unconditional driver's license requirement applies then.
    """

    required = {DocumentType.DRIVER_LICENSE}
    if citizenship is None or isinstance(citizenship, PermanentResident):
        return frozenset(required)
    if isinstance(citizenship, WorkAuthorization):
        if citizenship.visa_type == WorkAuthorizationType.F1:
            required.add(DocumentType.OPT_RECEIPT)
        elif citizenship.visa_type in WORK_AUTHORIZATION_DOCUMENT_VISAS:
            required.add(DocumentType.WORK_AUTHORIZATION)
        return frozenset(required)
    raise TypeError(f"Unknown citizenship variant: {type(citizenship)!r}")
