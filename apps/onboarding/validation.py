"""Validation of onboarding submissions.

Schema rules live on :class:`OnboardingApplicationSerializer`; this module runs
the serializer, flattens its nested errors onto dotted camelCase paths and adds
the document requirements that depend on the applicant's citizenship.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional

from .citizenship import Citizenship, from_validated_data, required_document_types
from .constants import DocumentType
from .documents import DocumentReference
from .errors import ValidationFailure
from .serializers import OnboardingApplicationSerializer

DOCUMENT_REQUIREMENT_MESSAGES = {
    DocumentType.DRIVER_LICENSE: "Driver's license is required",
    DocumentType.OPT_RECEIPT: "OPT Receipt is required for F1 visa holders",
    DocumentType.WORK_AUTHORIZATION: "Work authorization file is required",
}

# Nested objects whose fields are stored on the application itself.
NESTED_RELATIONS = ("reference", "emergency_contacts", "documents")


@dataclass
class ValidatedSubmission:
    """A payload that passed every rule, split into what gets stored where."""

    fields: Dict[str, Any]
    citizenship: Citizenship
    reference: Optional[Dict[str, Any]] = None
    emergency_contacts: List[Dict[str, Any]] = field(default_factory=list)
    documents: List[DocumentReference] = field(default_factory=list)


def flatten_errors(errors: Any, prefix: str = "") -> Dict[str, List[str]]:
    """Flatten DRF's nested error structure to ``{"a.b.0.c": [messages]}``."""

    flat: Dict[str, List[str]] = {}
    if isinstance(errors, Mapping):
        for key, value in errors.items():
            path = key if not prefix else (prefix if key == "non_field_errors" else f"{prefix}.{key}")
            for nested_path, messages in flatten_errors(value, path).items():
                flat.setdefault(nested_path, []).extend(messages)
    elif isinstance(errors, (list, tuple)):
        if all(not isinstance(item, (Mapping, list, tuple)) for item in errors):
            if errors:
                flat[prefix] = [str(item) for item in errors]
        else:
            for index, item in enumerate(errors):
                if not item:
                    continue
                for nested_path, messages in flatten_errors(item, f"{prefix}.{index}").items():
                    flat.setdefault(nested_path, []).extend(messages)
    elif errors:
        flat[prefix] = [str(errors)]
    return flat


def payload_document_types(payload: Mapping[str, Any]) -> set[str]:
    """Document types listed in a raw payload, ignoring malformed entries."""

    documents = payload.get("documents") or []
    if not isinstance(documents, (list, tuple)):
        return set()
    return {
        str(document.get("type"))
        for document in documents
        if isinstance(document, Mapping) and document.get("type")
    }


def missing_document_messages(
    citizenship: Optional[Citizenship], available_types: Iterable[str]
) -> List[str]:
    required = required_document_types(citizenship)
    available = set(available_types)
    return [
        message
        for document_type, message in DOCUMENT_REQUIREMENT_MESSAGES.items()
        if document_type in required and document_type.value not in available
    ]


def validate_submission(
    payload: Mapping[str, Any],
    *,
    persisted_documents: Iterable[DocumentReference] = (),
    staged_types: Iterable[str] = (),
) -> ValidatedSubmission:
    """Validate ``payload`` and return the cleaned submission.

    Document requirements are checked against everything that will be on file
    after the submit: documents already persisted, documents listed in the
    payload and files still staged for upload. All failures are reported at
    once through :class:`ValidationFailure`.
    """

    serializer = OnboardingApplicationSerializer(data=payload)
    is_valid = serializer.is_valid()
    errors = {} if is_valid else flatten_errors(serializer.errors)

    citizenship: Optional[Citizenship] = None
    if is_valid:
        citizenship = from_validated_data(serializer.validated_data)

    available = payload_document_types(payload)
    available.update(document.document_type for document in persisted_documents)
    available.update(str(document_type) for document_type in staged_types)

    missing = missing_document_messages(citizenship, available)
    if missing:
        errors.setdefault("documents", []).extend(missing)

    if errors:
        raise ValidationFailure(errors)

    data = dict(serializer.validated_data)
    relations = {name: data.pop(name, None) for name in NESTED_RELATIONS}
    documents = [
        DocumentReference.from_payload(
            {
                "type": document["document_type"],
                "fileName": document["file_name"],
                "fileUrl": document["file_url"],
                "uploadDate": document.get("upload_date"),
            }
        )
        for document in relations["documents"] or []
    ]
    return ValidatedSubmission(
        fields=data,
        citizenship=citizenship,
        reference=dict(relations["reference"]) if relations["reference"] else None,
        emergency_contacts=[dict(contact) for contact in relations["emergency_contacts"] or []],
        documents=documents,
    )
