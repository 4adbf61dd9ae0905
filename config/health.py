from __future__ import annotations

from typing import Any

import redis
from django.conf import settings
from django.db import connection
from django.http import JsonResponse


def check_db() -> dict[str, Any]:
    try:
        with connection.cursor() as cursor:
            cursor.execute("SELECT 1;")
            cursor.fetchone()
    except Exception as exc:  # noqa: BLE001 - health must degrade, not crash
        return {"ok": False, "error": str(exc)}
    else:
        return {"ok": True}


def check_broker() -> dict[str, Any]:
    """Ping the redis instance backing Celery (notification delivery)."""
    url = getattr(settings, "REDIS_URL", None)
    if not url:
        return {"ok": False, "error": "REDIS_URL not configured"}
    try:
        client = redis.Redis.from_url(
            url,
            socket_timeout=0.5,
            socket_connect_timeout=0.5,
        )
        client.ping()
    except Exception as exc:  # noqa: BLE001 - health must degrade, not crash
        return {"ok": False, "error": str(exc)}
    else:
        return {"ok": True}


def collect_components() -> dict[str, dict[str, Any]]:
    return {"db": check_db(), "redis": check_broker()}


def overall_status(components: dict[str, dict[str, Any]]) -> str:
    flags = [c.get("ok", False) for c in components.values()]
    if all(flags):
        return "ok"
    return "degraded" if any(flags) else "down"


def health(request):
    components = collect_components()
    status = overall_status(components)
    return JsonResponse(
        {"status": status, "components": components},
        status=200 if status == "ok" else 503,
    )
