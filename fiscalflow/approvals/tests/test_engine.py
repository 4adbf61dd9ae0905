from decimal import Decimal
from unittest import mock

import pytest
from django.core import mail
from django.db.models import F

from fiscalflow.approvals import engine
from fiscalflow.approvals.models import ApprovalItem
from fiscalflow.approvals.models import ApprovalLevel
from fiscalflow.approvals.services import replace_levels
from fiscalflow.audit.models import AuditLog
from fiscalflow.budgets import services
from fiscalflow.budgets.models import BudgetSheet
from fiscalflow.core.exceptions import AuthorizationError
from fiscalflow.core.exceptions import ConfigurationError
from fiscalflow.core.exceptions import ConflictError
from fiscalflow.core.exceptions import InvalidStateError
from fiscalflow.notifications.models import Notification
from fiscalflow.users.models import AccessLevel
from fiscalflow.users.models import ModuleKey
from tests.permissions.factories import create_scope
from tests.permissions.factories import create_user_with_access
from tests.permissions.factories import ensure_roles

pytestmark = pytest.mark.django_db

Status = BudgetSheet.Status


@pytest.fixture
def sheet(scope, owner, budget_matrix):
    sheet = services.create_sheet(
        sheet_type="CAPEX",
        organization_id=scope.organization.pk,
        department_id=scope.department.pk,
        year=2025,
        created_by=owner,
    )
    services.add_item(
        sheet,
        {
            "description": "Servers",
            "amount": "1000",
            "quantity": 3,
            "priority": "High",
            "justification": "Capacity",
        },
        user=owner,
    )
    sheet.refresh_from_db()
    return sheet


def test_two_level_walkthrough(sheet, owner, head, finmgr):
    engine.submit(sheet, owner)
    assert sheet.status == Status.PENDING_APPROVAL
    assert sheet.current_level == 1
    assert [e["role"] for e in sheet.workflow_snapshot] == [
        "department-head",
        "finance-manager",
    ]

    with pytest.raises(AuthorizationError):
        engine.approve(sheet, finmgr)
    sheet.refresh_from_db()
    assert sheet.current_level == 1

    engine.approve(sheet, head)
    assert sheet.status == Status.PENDING_APPROVAL
    assert sheet.current_level == 2

    engine.approve(sheet, finmgr, comment="Fine")
    assert sheet.status == Status.APPROVED

    with pytest.raises(InvalidStateError):
        engine.approve(sheet, finmgr)
    with pytest.raises(InvalidStateError):
        engine.reject(sheet, finmgr)

    items = list(ApprovalItem.objects.filter(sheet=sheet).order_by("level"))
    assert [(i.level, i.status) for i in items] == [
        (1, ApprovalItem.Status.APPROVED),
        (2, ApprovalItem.Status.APPROVED),
    ]
    assert items[1].comment == "Fine"
    assert items[1].acted_by == finmgr


def test_submit_records_submitter_and_audit(sheet, owner):
    engine.submit(sheet, owner)
    assert sheet.submitted_by == owner
    assert sheet.submitted_on is not None
    item = ApprovalItem.objects.get(sheet=sheet)
    assert item.approver_role_code == "department-head"
    assert str(item.total_value) == "3000.00"
    assert AuditLog.objects.filter(
        action="budget_sheet_submitted", record_id=sheet.pk
    ).exists()


def test_double_submit_is_invalid(sheet, owner):
    engine.submit(sheet, owner)
    with pytest.raises(InvalidStateError):
        engine.submit(sheet, owner)


def test_only_owning_department_may_submit(sheet, owner):
    elsewhere = create_scope(department="Operations", sub_department="Logistics")
    stranger = create_user_with_access("stranger", scope=elsewhere).user
    with pytest.raises(AuthorizationError):
        engine.submit(sheet, stranger)
    sheet.refresh_from_db()
    assert sheet.status == Status.DRAFT


def test_reject_skips_remaining_levels(sheet, owner, head):
    engine.submit(sheet, owner)
    engine.reject(sheet, head, comment="Too expensive")
    assert sheet.status == Status.REJECTED
    assert sheet.current_level == 1
    item = ApprovalItem.objects.get(sheet=sheet)
    assert item.status == ApprovalItem.Status.REJECTED
    assert item.comment == "Too expensive"
    with pytest.raises(InvalidStateError):
        engine.approve(sheet, head)


def test_full_access_superuser_with_wrong_role_cannot_decide(sheet, owner, scope):
    root = create_user_with_access(
        "root",
        scope=scope,
        role="finance-manager",
        permissions=dict.fromkeys(ModuleKey.values, AccessLevel.FULL),
        is_staff=True,
    ).user
    root.is_superuser = True
    root.save()
    engine.submit(sheet, owner)

    with pytest.raises(AuthorizationError) as exc:
        engine.approve(sheet, root)
    assert exc.value.details["required_role"] == "department-head"
    with pytest.raises(AuthorizationError):
        engine.reject(sheet, root)

    sheet.refresh_from_db()
    assert sheet.status == Status.PENDING_APPROVAL
    assert sheet.current_level == 1


def test_reject_with_wrong_role_is_refused(sheet, owner, head, finmgr):
    engine.submit(sheet, owner)
    with pytest.raises(AuthorizationError):
        engine.reject(sheet, finmgr)
    engine.approve(sheet, head)
    with pytest.raises(AuthorizationError):
        engine.reject(sheet, head)
    sheet.refresh_from_db()
    assert sheet.status == Status.PENDING_APPROVAL
    assert sheet.current_level == 2


def test_stale_version_is_a_conflict(sheet, owner, head):
    engine.submit(sheet, owner)
    stale = sheet.version - 1
    with pytest.raises(ConflictError):
        engine.approve(sheet, head, version=stale)
    sheet.refresh_from_db()
    assert sheet.current_level == 1
    engine.approve(sheet, head, version=sheet.version)
    assert sheet.current_level == 2


@pytest.mark.parametrize("decide", [engine.approve, engine.reject])
def test_lost_race_at_commit_is_a_conflict(sheet, owner, head, decide):
    engine.submit(sheet, owner)
    load = engine._load

    def load_then_concurrent_write(target, version):
        current, expected = load(target, version)
        BudgetSheet.objects.filter(pk=target.pk).update(version=F("version") + 1)
        return current, expected

    with (
        mock.patch.object(engine, "_load", side_effect=load_then_concurrent_write),
        pytest.raises(ConflictError),
    ):
        decide(sheet, head)

    sheet.refresh_from_db()
    assert sheet.status == Status.PENDING_APPROVAL
    assert sheet.current_level == 1
    item = ApprovalItem.objects.get(sheet=sheet)
    assert item.status == ApprovalItem.Status.PENDING


def test_submit_without_levels_is_a_configuration_error(sheet, owner):
    replace_levels("budget", [])
    with pytest.raises(ConfigurationError):
        engine.submit(sheet, owner)
    sheet.refresh_from_db()
    assert sheet.status == Status.DRAFT


def test_submit_without_level_one_is_a_configuration_error(sheet, owner):
    ApprovalLevel.objects.filter(workflow__workflow_type="budget", level=1).delete()
    with pytest.raises(ConfigurationError):
        engine.submit(sheet, owner)


def test_in_flight_sheet_keeps_its_snapshot(sheet, owner, head, finmgr):
    engine.submit(sheet, owner)
    ensure_roles({"general-manager": "General Manager"})
    replace_levels("budget", [{"level": 1, "approver_role": "general-manager"}])

    engine.approve(sheet, head)
    assert sheet.current_level == 2
    engine.approve(sheet, finmgr)
    assert sheet.status == Status.APPROVED


def test_non_contiguous_levels_walk_in_order(sheet, owner, head, finmgr):
    replace_levels(
        "budget",
        [
            {"level": 1, "approver_role": "department-head"},
            {"level": 3, "approver_role": "finance-manager"},
        ],
    )
    engine.submit(sheet, owner)
    engine.approve(sheet, head)
    assert sheet.current_level == 3
    engine.approve(sheet, finmgr)
    assert sheet.status == Status.APPROVED


def test_notifications_follow_the_sheet(
    sheet, owner, head, finmgr, django_capture_on_commit_callbacks
):
    with django_capture_on_commit_callbacks(execute=True):
        engine.submit(sheet, owner)
    request = Notification.objects.get(recipient=head)
    assert request.notification_type == Notification.Type.APPROVAL_REQUEST
    assert request.title == "Approval Request: CAPEX Sheet for 2025"
    assert "Acme Holdings" in request.message
    assert mail.outbox[-1].to == [head.email]

    with django_capture_on_commit_callbacks(execute=True):
        engine.approve(sheet, head)
    assert Notification.objects.filter(
        recipient=finmgr, notification_type=Notification.Type.APPROVAL_REQUEST
    ).exists()

    with django_capture_on_commit_callbacks(execute=True):
        engine.approve(sheet, finmgr)
    decision = Notification.objects.get(recipient=owner)
    assert decision.notification_type == Notification.Type.APPROVAL
    assert mail.outbox[-1].to == [owner.email]


def test_failed_notification_does_not_undo_transition(
    sheet, owner, head, django_capture_on_commit_callbacks
):
    with (
        mock.patch(
            "fiscalflow.notifications.dispatch.send_approval_request_notification",
            side_effect=RuntimeError("smtp down"),
        ),
        django_capture_on_commit_callbacks(execute=True),
    ):
        engine.submit(sheet, owner)
    sheet.refresh_from_db()
    assert sheet.status == Status.PENDING_APPROVAL
    assert not Notification.objects.exists()


def test_large_sheet_total_is_carried_to_the_inbox(scope, owner, budget_matrix):
    sheet = services.create_sheet(
        sheet_type="CAPEX",
        organization_id=scope.organization.pk,
        department_id=scope.department.pk,
        year=2026,
        created_by=owner,
    )
    for description in ("Plant", "Fleet", "Campus"):
        services.add_item(
            sheet,
            {
                "description": description,
                "amount": "999999999999.99",
                "quantity": 100,
                "priority": "High",
                "justification": "Expansion",
            },
            user=owner,
        )
    sheet.refresh_from_db()
    engine.submit(sheet, owner)

    item = ApprovalItem.objects.get(sheet=sheet)
    assert item.total_value == Decimal("299999999999997.00")
    field = ApprovalItem._meta.get_field("total_value")
    assert len(str(int(item.total_value))) <= field.max_digits - field.decimal_places
