"""Permission evaluator.

A user's access to a module is exactly what is stored for that (user, module)
pair. There is no inheritance from roles, groups or the staff flag, and a
missing row means ``none``.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping

from django.db import transaction

from fiscalflow.core.exceptions import AuthorizationError
from fiscalflow.core.exceptions import ValidationError
from fiscalflow.users.models import AccessLevel
from fiscalflow.users.models import ModuleKey
from fiscalflow.users.models import ModulePermission

logger = logging.getLogger(__name__)

READ_LEVELS = frozenset({AccessLevel.READ, AccessLevel.WRITE, AccessLevel.FULL})
WRITE_LEVELS = frozenset({AccessLevel.WRITE, AccessLevel.FULL})
DELETE_LEVELS = frozenset({AccessLevel.FULL})

_CACHE_ATTR = "_module_permission_cache"


def permission_map(user) -> dict[str, str]:
    """Return ``{module_key: level}`` for the stored rows of ``user``.

    The map is memoised on the user instance for the lifetime of the request.
    """
    if not getattr(user, "is_authenticated", False) or user.pk is None:
        return {}
    cached = getattr(user, _CACHE_ATTR, None)
    if cached is None:
        cached = dict(
            ModulePermission.objects.filter(user_id=user.pk).values_list(
                "module_key", "level"
            )
        )
        setattr(user, _CACHE_ATTR, cached)
    return cached


def effective_permission(user, module_key: str) -> str:
    return permission_map(user).get(module_key, AccessLevel.NONE)


def can_read(user, module_key: str) -> bool:
    return effective_permission(user, module_key) in READ_LEVELS


def can_write(user, module_key: str) -> bool:
    return effective_permission(user, module_key) in WRITE_LEVELS


def can_delete(user, module_key: str) -> bool:
    return effective_permission(user, module_key) in DELETE_LEVELS


def require_write(user, module_key: str) -> None:
    if not can_write(user, module_key):
        msg = f"Write access to {module_key} is required."
        raise AuthorizationError(msg, details={"module": module_key})


def require_delete(user, module_key: str) -> None:
    if not can_delete(user, module_key):
        msg = f"Full access to {module_key} is required."
        raise AuthorizationError(msg, details={"module": module_key})


def validate_permission_map(mapping: Mapping[str, str]) -> dict[str, str]:
    known_modules = set(ModuleKey.values)
    known_levels = set(AccessLevel.values)
    errors: dict[str, str] = {}
    for key, level in mapping.items():
        if key not in known_modules:
            errors[key] = "Unknown module."
        elif level not in known_levels:
            errors[key] = f"Unknown access level '{level}'."
    if errors:
        msg = "Invalid permission map."
        raise ValidationError(msg, details=errors)
    return dict(mapping)


@transaction.atomic
def set_permissions(user, mapping: Mapping[str, str]) -> dict[str, str]:
    """Replace the stored permission rows of ``user`` with ``mapping``."""
    cleaned = validate_permission_map(mapping)
    ModulePermission.objects.filter(user=user).exclude(
        module_key__in=list(cleaned)
    ).delete()
    for key, level in cleaned.items():
        ModulePermission.objects.update_or_create(
            user=user, module_key=key, defaults={"level": level}
        )
    if hasattr(user, _CACHE_ATTR):
        delattr(user, _CACHE_ATTR)
    logger.info("Permissions for user %s replaced (%d modules)", user.pk, len(cleaned))
    return cleaned


def access_matrix(users) -> list[dict]:
    """Rows of ``{user, permissions}`` covering every module key."""
    stored: dict[int, dict[str, str]] = {}
    user_list = list(users)
    rows = ModulePermission.objects.filter(
        user_id__in=[u.pk for u in user_list]
    ).values_list("user_id", "module_key", "level")
    for user_id, key, level in rows:
        stored.setdefault(user_id, {})[key] = level
    return [
        {
            "user": user,
            "permissions": {
                key: stored.get(user.pk, {}).get(key, AccessLevel.NONE)
                for key in ModuleKey.values
            },
        }
        for user in user_list
    ]
