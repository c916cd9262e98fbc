"""Persist onboarding workflow log records as ``LogEntry`` rows.

Anything passed through ``extra=`` that is not a standard ``LogRecord``
attribute lands in the entry's JSON ``context``. A ``context`` dict is merged
in directly, and ``user`` or ``user_id`` link the entry to an account so HR
can see who submitted or decided what.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from django.contrib.auth import get_user_model

# Attribute names every LogRecord carries, whatever the Python version.
_RESERVED_ATTRS = frozenset(
    logging.LogRecord("", logging.INFO, "", 0, "", (), None).__dict__
) | {"message", "asctime", "context", "user", "user_id"}


def _to_json(value: Any) -> Any:
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    if isinstance(value, dict):
        return {str(key): _to_json(item) for key, item in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        return [_to_json(item) for item in value]
    if hasattr(value, "pk"):
        return value.pk
    if hasattr(value, "isoformat"):
        return value.isoformat()
    return str(value)


class DatabaseLogHandler(logging.Handler):
    """Write each record to :class:`~apps.onboarding.models.LogEntry`."""

    def emit(self, record: logging.LogRecord) -> None:
        from .models import LogEntry

        try:
            LogEntry.objects.create(
                logger_name=record.name,
                level=record.levelname.upper(),
                message=record.getMessage(),
                user=self._user_for(record),
                context=self._context_for(record),
            )
        except Exception:
            self.handleError(record)

    def _context_for(self, record: logging.LogRecord) -> Optional[Dict[str, Any]]:
        context: Dict[str, Any] = {}
        provided = getattr(record, "context", None)
        if isinstance(provided, dict):
            context.update(_to_json(provided))

        context.update(
            (key, _to_json(value))
            for key, value in vars(record).items()
            if key not in _RESERVED_ATTRS and not key.startswith("_")
        )

        if record.exc_info:
            context["exception"] = self.format_exception(record)
        return context or None

    def format_exception(self, record: logging.LogRecord) -> str:
        return logging.Formatter().formatException(record.exc_info)

    @staticmethod
    def _user_for(record: logging.LogRecord):
        user = getattr(record, "user", None)
        if user is not None and getattr(user, "pk", None):
            return user

        user_id = getattr(record, "user_id", None)
        if not user_id:
            return None
        return get_user_model()._default_manager.filter(pk=user_id).first()


__all__ = ["DatabaseLogHandler"]
