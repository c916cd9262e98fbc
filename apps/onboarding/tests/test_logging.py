import logging
from datetime import date

import pytest

from apps.onboarding.logging import DatabaseLogHandler
from apps.onboarding.models import LogEntry


@pytest.mark.django_db
def test_handler_persists_message_user_and_context(employee):
    logger = logging.getLogger("apps.onboarding.test")

    logger.info(
        "Stored %s",
        "license.pdf",
        extra={
            "user_id": employee.pk,
            "context": {"size": 12, "when": date(2024, 1, 2), "tags": {"a"}},
            "application": employee,
        },
    )

    entry = LogEntry.objects.get(logger_name="apps.onboarding.test")
    assert entry.message == "Stored license.pdf"
    assert entry.level == "INFO"
    assert entry.user == employee
    assert entry.context == {
        "size": 12,
        "when": "2024-01-02",
        "tags": ["a"],
        "application": employee.pk,
    }


@pytest.mark.django_db
def test_handler_without_extras_stores_no_context():
    handler = DatabaseLogHandler()
    record = logging.LogRecord("apps.onboarding.x", logging.WARNING, __file__, 1, "plain", (), None)

    handler.emit(record)

    entry = LogEntry.objects.get()
    assert entry.context is None
    assert entry.user is None
    assert entry.level == "WARNING"


@pytest.mark.django_db
def test_handler_records_exception_traceback():
    logger = logging.getLogger("apps.onboarding.failures")

    try:
        raise RuntimeError("storage offline")
    except RuntimeError:
        logger.exception("Upload failed", extra={"file_name": "license.pdf"})

    entry = LogEntry.objects.get(logger_name="apps.onboarding.failures")
    assert entry.level == "ERROR"
    assert entry.context["file_name"] == "license.pdf"
    assert "RuntimeError: storage offline" in entry.context["exception"]
