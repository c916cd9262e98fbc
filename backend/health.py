"""Simple health check view for uptime monitoring."""
from __future__ import annotations

from django.db import connections
from django.db.utils import DatabaseError
from django.http import JsonResponse


def health_view(request):
    """Return the service status along with a database round trip."""
    payload = {"status": "ok"}

    try:
        with connections["default"].cursor() as cursor:
            cursor.execute("SELECT 1")
            cursor.fetchone()
        payload["database"] = "ok"
    except DatabaseError:
        payload["status"] = "degraded"
        payload["database"] = "unavailable"

    return JsonResponse(payload, status=200 if payload["status"] == "ok" else 503)
