"""Delivery of workflow notifications.

Each notification is stored in-app and mirrored by email. These functions
raise on failure; callers that must not fail go through
``fiscalflow.notifications.dispatch``.
"""

from __future__ import annotations

import logging

from django.conf import settings
from django.contrib.auth import get_user_model
from django.core.mail import send_mail

from fiscalflow.notifications.models import Notification

logger = logging.getLogger(__name__)

APPROVAL_REQUEST_BODY = """A new {sheet_type} sheet has been submitted for your approval.

Details:
- Organization: {organization}
- Department: {department}
- Year: {year}
- Total value: {total}

Please log in to FiscalFlow to review and take action."""

DECISION_BODY = """Your {sheet_type} sheet has been {decision}.

Details:
- Organization: {organization}
- Department: {department}
- Year: {year}
- Total value: {total}"""


def _sender() -> str:
    return getattr(settings, "FISCALFLOW_SENDER_EMAIL", "noreply@fiscalflow.com")


def _link(sheet_details: dict) -> str:
    sheet_id = sheet_details.get("sheetId")
    return f"/budget-sheets/{sheet_id}" if sheet_id else ""


def _context(sheet_type: str, sheet_details: dict) -> dict:
    return {
        "sheet_type": sheet_type,
        "organization": sheet_details.get("organization", ""),
        "department": sheet_details.get("department", ""),
        "year": sheet_details.get("year", ""),
        "total": sheet_details.get("totalValue", "-"),
    }


def send_approval_request_notification(
    approver_role: str, sheet_type: str, sheet_details: dict
) -> int:
    """Notify every active user holding ``approver_role`` (a role code).

    Returns the number of users notified.
    """
    users = list(
        get_user_model().objects.filter(is_active=True, user_role__code=approver_role)
    )
    if not users:
        logger.warning("No active users hold approver role %s", approver_role)
        return 0

    subject = f"Approval Request: {sheet_type} Sheet for {sheet_details.get('year')}"
    body = APPROVAL_REQUEST_BODY.format(**_context(sheet_type, sheet_details))
    Notification.objects.bulk_create(
        [
            Notification(
                recipient=user,
                title=subject,
                message=body,
                notification_type=Notification.Type.APPROVAL_REQUEST,
                related_link=_link(sheet_details),
            )
            for user in users
        ]
    )
    emails = [user.email for user in users if user.email]
    if emails:
        send_mail(subject, body, _sender(), emails)
    logger.info(
        "Approval request for %s sheet sent to role %s (%d users)",
        sheet_type,
        approver_role,
        len(users),
    )
    return len(users)


def send_decision_notification(
    recipient_id: int | None, sheet_type: str, sheet_details: dict, decision: str
) -> bool:
    """Tell the submitter a sheet reached ``decision`` (Approved/Rejected)."""
    recipient = (
        get_user_model().objects.filter(pk=recipient_id, is_active=True).first()
        if recipient_id
        else None
    )
    if recipient is None:
        logger.warning("Submitter %s unavailable for %s notice", recipient_id, decision)
        return False

    subject = f"{sheet_type} Sheet for {sheet_details.get('year')} {decision}"
    body = DECISION_BODY.format(
        decision=decision.lower(), **_context(sheet_type, sheet_details)
    )
    notification_type = (
        Notification.Type.REJECTION
        if decision == "Rejected"
        else Notification.Type.APPROVAL
    )
    Notification.objects.create(
        recipient=recipient,
        title=subject,
        message=body,
        notification_type=notification_type,
        related_link=_link(sheet_details),
    )
    if recipient.email:
        send_mail(subject, body, _sender(), [recipient.email])
    return True
