"""Fire-and-forget entry points used by the approval engine.

Meant to run from ``transaction.on_commit``. A failure here is logged and
never propagates back into the workflow transition.
"""

from __future__ import annotations

import logging

from django.conf import settings

from fiscalflow.notifications import tasks
from fiscalflow.notifications.gateway import send_approval_request_notification
from fiscalflow.notifications.gateway import send_decision_notification

logger = logging.getLogger(__name__)


def _async_enabled() -> bool:
    return bool(getattr(settings, "FISCALFLOW_NOTIFY_ASYNC", False))


def notify_approvers(approver_role: str, sheet_type: str, sheet_details: dict) -> None:
    try:
        if _async_enabled():
            tasks.send_approval_request.delay(approver_role, sheet_type, sheet_details)
        else:
            send_approval_request_notification(approver_role, sheet_type, sheet_details)
    except Exception:
        logger.exception(
            "Approval request notification to role %s failed", approver_role
        )


def notify_submitter(
    recipient_id: int | None, sheet_type: str, sheet_details: dict, decision: str
) -> None:
    try:
        if _async_enabled():
            tasks.send_decision.delay(recipient_id, sheet_type, sheet_details, decision)
        else:
            send_decision_notification(
                recipient_id, sheet_type, sheet_details, decision
            )
    except Exception:
        logger.exception("%s notification to user %s failed", decision, recipient_id)
