"""Domain errors raised by the fiscalflow services.

Each error carries a ``kind`` that is surfaced verbatim to API clients along
with the message, so callers can branch on the failure without parsing text.
The aggregate touched by a failing operation is left unchanged.
"""

from __future__ import annotations

from typing import Any


class FiscalFlowError(Exception):
    """Base class for all fiscalflow domain errors."""

    kind: str = "error"
    status_code: int = 400
    default_message: str = "The request could not be processed."

    def __init__(self, message: str | None = None, details: dict | None = None):
        self.message = message or self.default_message
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        return {"kind": self.kind, "message": self.message, "details": self.details}


class NotFoundError(FiscalFlowError):
    """A referenced entity does not exist."""

    kind = "not_found"
    status_code = 404
    default_message = "The referenced entity does not exist."

    def __init__(self, entity_kind: str, entity_id: Any, message: str | None = None):
        self.entity_kind = entity_kind
        self.entity_id = entity_id
        super().__init__(
            message or f"{entity_kind} {entity_id} not found.",
            details={"entity": entity_kind, "id": entity_id},
        )


class ConflictError(FiscalFlowError):
    """Concurrent modification, or a delete blocked by dependants."""

    kind = "conflict"
    status_code = 409
    default_message = "The entity was modified concurrently or is still referenced."


class InvalidStateError(FiscalFlowError):
    """The operation is illegal for the entity's current lifecycle state."""

    kind = "invalid_state"
    status_code = 409
    default_message = "The operation is not allowed in the current state."


class AuthorizationError(FiscalFlowError):
    kind = "authorization"
    status_code = 403
    default_message = "You are not allowed to perform this action."


class ConfigurationError(FiscalFlowError):
    """Missing or invalid approval workflow setup."""

    kind = "configuration"
    status_code = 422
    default_message = "The approval workflow is not configured."


class ValidationError(FiscalFlowError):
    kind = "validation"
    status_code = 400
    default_message = "The submitted data is invalid."
