"""Document references attached to an onboarding application."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Iterable, List, Mapping

from django.utils import timezone
from django.utils.dateparse import parse_datetime


@dataclass(frozen=True)
class DocumentReference:
    """A stored file, identified by its URL."""

    document_type: str
    file_name: str
    file_url: str
    upload_date: datetime

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "DocumentReference":
        """Build a reference from the camelCase wire shape."""

        upload_date = payload.get("uploadDate")
        if isinstance(upload_date, str):
            upload_date = parse_datetime(upload_date)
        if not isinstance(upload_date, datetime):
            upload_date = timezone.now()
        return cls(
            document_type=str(payload.get("type", "")),
            file_name=str(payload.get("fileName", "")),
            file_url=str(payload.get("fileUrl", "")),
            upload_date=upload_date,
        )

    @classmethod
    def from_model(cls, document) -> "DocumentReference":
        return cls(
            document_type=document.document_type,
            file_name=document.file_name,
            file_url=document.file_url,
            upload_date=document.upload_date,
        )

    def to_payload(self) -> dict[str, str]:
        return {
            "type": self.document_type,
            "fileName": self.file_name,
            "fileUrl": self.file_url,
            "uploadDate": self.upload_date.isoformat(),
        }


def merge_documents(*groups: Iterable[DocumentReference]) -> List[DocumentReference]:
    """Concatenate ``groups`` keeping the first reference seen for each URL."""

    merged: List[DocumentReference] = []
    seen: set[str] = set()
    for group in groups:
        for document in group:
            if document.file_url in seen:
                continue
            seen.add(document.file_url)
            merged.append(document)
    return merged


def document_types(documents: Iterable[DocumentReference]) -> set[str]:
    return {document.document_type for document in documents}
