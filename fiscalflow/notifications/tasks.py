from celery import shared_task

from fiscalflow.notifications.gateway import send_approval_request_notification
from fiscalflow.notifications.gateway import send_decision_notification


@shared_task(name="notifications.send_approval_request")
def send_approval_request(approver_role: str, sheet_type: str, sheet_details: dict):
    """Deliver an approval request notification in the worker.

    Returns:
        Number of users notified.
    """
    return send_approval_request_notification(approver_role, sheet_type, sheet_details)


@shared_task(name="notifications.send_decision")
def send_decision(
    recipient_id: int | None, sheet_type: str, sheet_details: dict, decision: str
):
    return send_decision_notification(recipient_id, sheet_type, sheet_details, decision)
