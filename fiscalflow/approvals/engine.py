"""Approval workflow engine for budget sheets.

States: Draft -> Pending Approval(level) -> Approved | Rejected.

A sheet walks the copy of the approval levels captured at submission time
(``BudgetSheet.workflow_snapshot``), sorted by level number. "Next level"
means the next entry of that list, so a matrix configured as 1, 3 goes
1 -> 3. Transitions are guarded by an optimistic version check; a stale
caller gets ``ConflictError`` and must retry against fresh state.

Notifications are scheduled with ``transaction.on_commit`` and never affect
the outcome of a transition.
"""

from __future__ import annotations

import logging
from functools import partial

from django.db import transaction
from django.db.models import F
from django.utils import timezone

from fiscalflow.approvals.models import ApprovalItem
from fiscalflow.approvals.services import SHEET_WORKFLOW
from fiscalflow.approvals.services import snapshot_levels
from fiscalflow.audit.utils import log_action
from fiscalflow.budgets.models import BudgetSheet
from fiscalflow.budgets.services import compute_total
from fiscalflow.budgets.services import ensure_owner
from fiscalflow.core.exceptions import AuthorizationError
from fiscalflow.core.exceptions import ConfigurationError
from fiscalflow.core.exceptions import ConflictError
from fiscalflow.core.exceptions import InvalidStateError
from fiscalflow.core.exceptions import NotFoundError
from fiscalflow.notifications.dispatch import notify_approvers
from fiscalflow.notifications.dispatch import notify_submitter
from fiscalflow.org.services import describe_chain
from fiscalflow.org.services import resolve_ancestors

logger = logging.getLogger(__name__)


def _load(sheet: BudgetSheet, version: int | None) -> tuple[BudgetSheet, int]:
    expected = sheet.version if version is None else int(version)
    try:
        current = BudgetSheet.objects.select_related(
            "organization", "department", "submitted_by"
        ).get(pk=sheet.pk)
    except BudgetSheet.DoesNotExist:
        raise NotFoundError("BudgetSheet", sheet.pk) from None
    if current.version != expected:
        msg = "The sheet was changed by someone else; reload and try again."
        raise ConflictError(
            msg, details={"expected_version": expected, "version": current.version}
        )
    return current, expected


def _commit(current: BudgetSheet, expected: int, **changes) -> None:
    updated = BudgetSheet.objects.filter(pk=current.pk, version=expected).update(
        version=F("version") + 1, updated_at=timezone.now(), **changes
    )
    if updated != 1:
        msg = "The sheet was changed by someone else; reload and try again."
        raise ConflictError(msg, details={"expected_version": expected})


def _sheet_details(sheet: BudgetSheet) -> dict:
    names = describe_chain(resolve_ancestors("department", sheet.department_id))
    return {
        "organization": names.get("organization", ""),
        "department": names.get("department", ""),
        "year": str(sheet.year),
        "totalValue": str(compute_total(sheet)),
        "sheetId": sheet.pk,
    }


def current_level_entry(sheet: BudgetSheet) -> dict:
    """The snapshot entry of the level the sheet is waiting on."""
    for entry in sheet.workflow_snapshot or []:
        if entry.get("level") == sheet.current_level:
            return entry
    msg = f"Sheet {sheet.pk} has no snapshot entry for level {sheet.current_level}."
    raise ConfigurationError(msg, details={"level": sheet.current_level})


def next_level_entry(sheet: BudgetSheet) -> dict | None:
    levels = sorted(sheet.workflow_snapshot or [], key=lambda e: e["level"])
    for idx, entry in enumerate(levels):
        if entry["level"] == sheet.current_level:
            return levels[idx + 1] if idx + 1 < len(levels) else None
    return None


def _ensure_pending(sheet: BudgetSheet) -> None:
    if sheet.status != BudgetSheet.Status.PENDING_APPROVAL:
        msg = f"Sheet {sheet.pk} is {sheet.status} and awaits no decision."
        raise InvalidStateError(msg, details={"status": sheet.status})


def _ensure_approver(sheet: BudgetSheet, entry: dict, user) -> None:
    role_code = getattr(user, "role_code", None)
    if role_code != entry["role"]:
        msg = f"Level {entry['level']} must be decided by {entry['role_name']}."
        raise AuthorizationError(
            msg, details={"level": entry["level"], "required_role": entry["role"]}
        )


def _open_item(sheet: BudgetSheet, entry: dict, total) -> ApprovalItem:
    return ApprovalItem.objects.create(
        sheet=sheet,
        item_type=sheet.sheet_type,
        organization_id=sheet.organization_id,
        department_id=sheet.department_id,
        year=sheet.year,
        total_value=total,
        level=entry["level"],
        approver_role_code=entry["role"],
        approver_role_name=entry.get("role_name", ""),
        submitted_by=sheet.submitted_by,
        submitted_on=sheet.submitted_on,
    )


def _close_item(sheet: BudgetSheet, level: int, status: str, user, comment: str):
    ApprovalItem.objects.filter(
        sheet=sheet, level=level, status=ApprovalItem.Status.PENDING
    ).update(status=status, acted_by=user, acted_on=timezone.now(), comment=comment)


@transaction.atomic
def submit(sheet: BudgetSheet, user, *, version: int | None = None) -> BudgetSheet:
    current, expected = _load(sheet, version)
    ensure_owner(current, user)
    if current.status != BudgetSheet.Status.DRAFT:
        msg = f"Sheet {current.pk} is {current.status}; only Draft sheets can be submitted."
        raise InvalidStateError(msg, details={"status": current.status})

    levels = snapshot_levels(SHEET_WORKFLOW[current.sheet_type])
    first = levels[0]
    now = timezone.now()
    _commit(
        current,
        expected,
        status=BudgetSheet.Status.PENDING_APPROVAL,
        current_level=first["level"],
        workflow_snapshot=levels,
        submitted_by=user,
        submitted_on=now,
    )
    sheet.refresh_from_db()
    total = compute_total(sheet)
    _open_item(sheet, first, total)

    log_action(
        "budget_sheet_submitted",
        actor=user,
        message=f"{sheet.sheet_type} {sheet.year} sent to {first['role_name']}",
        model_name="BudgetSheet",
        record_id=sheet.pk,
        before={"status": BudgetSheet.Status.DRAFT},
        after={"status": sheet.status, "level": first["level"]},
    )
    logger.info("Sheet %s submitted; level %s", sheet.pk, first["level"])

    details = _sheet_details(sheet)
    transaction.on_commit(
        partial(notify_approvers, first["role"], sheet.sheet_type, details)
    )
    return sheet


@transaction.atomic
def approve(
    sheet: BudgetSheet, user, *, version: int | None = None, comment: str = ""
) -> BudgetSheet:
    current, expected = _load(sheet, version)
    _ensure_pending(current)
    entry = current_level_entry(current)
    _ensure_approver(current, entry, user)
    following = next_level_entry(current)

    if following is not None:
        _commit(current, expected, current_level=following["level"])
    else:
        _commit(current, expected, status=BudgetSheet.Status.APPROVED)
    _close_item(current, entry["level"], ApprovalItem.Status.APPROVED, user, comment)
    sheet.refresh_from_db()

    log_action(
        "budget_sheet_approved",
        actor=user,
        message=f"Level {entry['level']} approved by {entry['role_name']}",
        model_name="BudgetSheet",
        record_id=sheet.pk,
        before={"status": current.status, "level": entry["level"]},
        after={"status": sheet.status, "level": sheet.current_level},
    )
    details = _sheet_details(sheet)
    if following is not None:
        _open_item(sheet, following, compute_total(sheet))
        logger.info(
            "Sheet %s approved at level %s; now at level %s",
            sheet.pk,
            entry["level"],
            following["level"],
        )
        transaction.on_commit(
            partial(notify_approvers, following["role"], sheet.sheet_type, details)
        )
    else:
        logger.info("Sheet %s fully approved", sheet.pk)
        transaction.on_commit(
            partial(
                notify_submitter,
                sheet.submitted_by_id,
                sheet.sheet_type,
                details,
                BudgetSheet.Status.APPROVED,
            )
        )
    return sheet


@transaction.atomic
def reject(
    sheet: BudgetSheet, user, *, version: int | None = None, comment: str = ""
) -> BudgetSheet:
    """Reject at the current level; remaining levels are skipped."""
    current, expected = _load(sheet, version)
    _ensure_pending(current)
    entry = current_level_entry(current)
    _ensure_approver(current, entry, user)

    _commit(current, expected, status=BudgetSheet.Status.REJECTED)
    _close_item(current, entry["level"], ApprovalItem.Status.REJECTED, user, comment)
    sheet.refresh_from_db()

    log_action(
        "budget_sheet_rejected",
        actor=user,
        message=f"Level {entry['level']} rejected by {entry['role_name']}",
        model_name="BudgetSheet",
        record_id=sheet.pk,
        before={"status": current.status, "level": entry["level"]},
        after={"status": sheet.status, "comment": comment},
    )
    logger.info("Sheet %s rejected at level %s", sheet.pk, entry["level"])
    transaction.on_commit(
        partial(
            notify_submitter,
            sheet.submitted_by_id,
            sheet.sheet_type,
            _sheet_details(sheet),
            BudgetSheet.Status.REJECTED,
        )
    )
    return sheet
