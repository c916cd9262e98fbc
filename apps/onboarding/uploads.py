"""Storage of uploaded onboarding documents."""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from django.core.files.storage import Storage, default_storage
from django.utils import timezone

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StoredFile:
    file_name: str
    file_url: str
    upload_date: datetime


def upload_path(user, filename: str) -> str:
    """Per-user storage path with a random name, keeping the extension."""

    extension = Path(filename).suffix.lower()
    return f"onboarding/{user.pk}/{uuid.uuid4().hex}{extension}"


def store_uploaded_file(uploaded_file, *, user, storage: Storage | None = None) -> StoredFile:
    storage = storage or default_storage
    stored_name = storage.save(upload_path(user, uploaded_file.name), uploaded_file)
    stored = StoredFile(
        file_name=Path(uploaded_file.name).name,
        file_url=storage.url(stored_name),
        upload_date=timezone.now(),
    )
    logger.info(
        "Stored onboarding upload %s",
        stored.file_name,
        extra={
            "user_id": user.pk,
            "context": {"stored_name": stored_name, "size": uploaded_file.size},
        },
    )
    return stored
