from __future__ import annotations

import logging

from django.contrib.auth import get_user_model
from django.core.serializers.json import DjangoJSONEncoder

from .models import AuditLog

logger = logging.getLogger(__name__)

_encoder = DjangoJSONEncoder()


def _jsonable(payload):
    """Decimals and datetimes are stored as their string form."""
    if payload is None:
        return None
    if isinstance(payload, dict):
        return {str(k): _jsonable(v) for k, v in payload.items()}
    if isinstance(payload, list | tuple):
        return [_jsonable(v) for v in payload]
    if isinstance(payload, str | int | float | bool):
        return payload
    return _encoder.default(payload)


def log_action(  # noqa: PLR0913
    action: str,
    *,
    actor: object | None = None,
    message: str = "",
    model_name: str = "",
    record_id: int | None = None,
    before: dict | list | None = None,
    after: dict | list | None = None,
    ip_address: str = "",
) -> AuditLog:
    user_model = get_user_model()
    actor_user = actor if isinstance(actor, user_model) and actor.pk else None
    entry = AuditLog.objects.create(
        action=action,
        actor=actor_user,
        message=message,
        model_name=model_name,
        record_id=record_id,
        before=_jsonable(before),
        after=_jsonable(after),
        ip_address=ip_address,
    )
    logger.debug("audit %s %s#%s", action, model_name, record_id)
    return entry
