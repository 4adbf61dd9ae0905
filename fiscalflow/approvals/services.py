"""Approval matrix configuration.

Editing the matrix never touches sheets that are already in flight; those walk
the copy of the levels captured when they were submitted.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from collections.abc import Mapping

from django.db import transaction
from django.db.models import ProtectedError

from fiscalflow.approvals.models import ApprovalLevel
from fiscalflow.approvals.models import ApprovalWorkflow
from fiscalflow.approvals.models import ApproverRole
from fiscalflow.audit.utils import log_action
from fiscalflow.budgets.models import BudgetSheet
from fiscalflow.core.exceptions import ConfigurationError
from fiscalflow.core.exceptions import ConflictError
from fiscalflow.core.exceptions import ValidationError

logger = logging.getLogger(__name__)

# Workflow used for each budget sheet type.
SHEET_WORKFLOW = {
    "CAPEX": ApprovalWorkflow.Type.BUDGET,
    "OPEX": ApprovalWorkflow.Type.BUDGET,
}


def get_workflow(workflow_type: str) -> ApprovalWorkflow:
    if workflow_type not in ApprovalWorkflow.Type.values:
        msg = f"Unknown workflow type '{workflow_type}'."
        raise ValidationError(msg)
    workflow, _created = ApprovalWorkflow.objects.get_or_create(
        workflow_type=workflow_type
    )
    return workflow


def snapshot_levels(workflow_type: str) -> list[dict]:
    """Return the configured levels as plain data, sorted by level number.

    Raises ``ConfigurationError`` when nothing is configured or level 1 is
    missing, since level 1 is where every submission starts.
    """
    levels = list(
        ApprovalLevel.objects.filter(workflow__workflow_type=workflow_type)
        .select_related("approver_role")
        .order_by("level")
    )
    if not levels:
        msg = f"No approval levels are configured for the {workflow_type} workflow."
        raise ConfigurationError(msg, details={"workflow": workflow_type})
    if levels[0].level != 1:
        msg = f"The {workflow_type} workflow has no level 1."
        raise ConfigurationError(msg, details={"workflow": workflow_type})
    return [
        {
            "level": lvl.level,
            "role": lvl.approver_role.code,
            "role_name": lvl.approver_role.name,
            "description": lvl.description,
        }
        for lvl in levels
    ]


def _validate_levels(levels: Iterable[Mapping]) -> list[dict]:
    cleaned: list[dict] = []
    errors: dict[str, str] = {}
    seen: set[int] = set()
    for idx, entry in enumerate(levels):
        level = entry.get("level")
        if isinstance(level, bool) or not isinstance(level, int) or level < 1:
            errors[f"levels[{idx}].level"] = "Level must be a positive integer."
            continue
        if level in seen:
            errors[f"levels[{idx}].level"] = f"Level {level} is listed twice."
            continue
        seen.add(level)
        role = entry.get("approver_role")
        if not isinstance(role, ApproverRole):
            role = ApproverRole.objects.filter(code=role).first()
            if role is None:
                errors[f"levels[{idx}].approver_role"] = (
                    f"Unknown approver role '{entry.get('approver_role')}'."
                )
                continue
        cleaned.append(
            {
                "level": level,
                "approver_role": role,
                "description": (entry.get("description") or "").strip(),
            }
        )
    if cleaned and 1 not in seen and not errors:
        errors["levels"] = "Level 1 is required."
    if errors:
        msg = "Invalid approval levels."
        raise ValidationError(msg, details=errors)
    return sorted(cleaned, key=lambda e: e["level"])


@transaction.atomic
def replace_levels(workflow_type: str, levels: Iterable[Mapping], *, actor=None):
    """Replace every level of a workflow with ``levels``."""
    workflow = get_workflow(workflow_type)
    cleaned = _validate_levels(levels)
    before = [
        {"level": lvl.level, "role": lvl.approver_role.code}
        for lvl in workflow.levels.select_related("approver_role")
    ]
    workflow.levels.all().delete()
    ApprovalLevel.objects.bulk_create(
        [ApprovalLevel(workflow=workflow, **entry) for entry in cleaned]
    )
    workflow.save(update_fields=["updated_at"])
    after = [{"level": e["level"], "role": e["approver_role"].code} for e in cleaned]
    log_action(
        "approval_matrix_updated",
        actor=actor,
        message=f"{workflow_type}: {len(cleaned)} levels",
        model_name="ApprovalWorkflow",
        record_id=workflow.pk,
        before=before,
        after=after,
    )
    logger.info("Approval matrix %s replaced with %d levels", workflow_type, len(cleaned))
    return workflow


def waiting_sheet_ids(role_code: str) -> list[int]:
    """Pending sheets whose remaining levels include ``role_code``."""
    pending = BudgetSheet.objects.filter(
        status=BudgetSheet.Status.PENDING_APPROVAL
    ).values_list("pk", "current_level", "workflow_snapshot")
    return [
        pk
        for pk, current_level, snapshot in pending
        if any(
            entry.get("role") == role_code and entry.get("level", 0) >= current_level
            for entry in snapshot or []
        )
    ]


@transaction.atomic
def delete_role(role: ApproverRole, *, actor=None) -> None:
    """Delete an approver role nothing depends on any more.

    In-flight sheets reference roles by code through their snapshot, so a role
    that any of them still has to pass through is kept even after the matrix
    stops using it.
    """
    waiting = waiting_sheet_ids(role.code)
    if waiting:
        msg = f"Approver role '{role.code}' is still awaited by {len(waiting)} sheets."
        raise ConflictError(msg, details={"role": role.code, "sheets": waiting})
    role_pk = role.pk
    try:
        role.delete()
    except ProtectedError as exc:
        msg = f"Approver role '{role.code}' is still in use."
        raise ConflictError(msg, details={"role": role.code}) from exc
    log_action(
        "approver_role_deleted",
        actor=actor,
        message=role.name,
        model_name="ApproverRole",
        record_id=role_pk,
        before={"code": role.code, "name": role.name},
    )
