import pytest

from fiscalflow.approvals import engine
from fiscalflow.approvals.models import ApprovalLevel
from fiscalflow.approvals.models import ApprovalWorkflow
from fiscalflow.approvals.models import ApproverRole
from fiscalflow.approvals.services import delete_role
from fiscalflow.approvals.services import get_workflow
from fiscalflow.approvals.services import replace_levels
from fiscalflow.approvals.services import snapshot_levels
from fiscalflow.audit.models import AuditLog
from fiscalflow.budgets import services as budgets
from fiscalflow.core.exceptions import ConfigurationError
from fiscalflow.core.exceptions import ConflictError
from fiscalflow.core.exceptions import ValidationError

pytestmark = pytest.mark.django_db


def test_replace_levels_sorts_and_snapshots(roles):
    replace_levels(
        "budget",
        [
            {"level": 2, "approver_role": "finance-manager", "description": " Review "},
            {"level": 1, "approver_role": "department-head"},
        ],
    )
    assert snapshot_levels("budget") == [
        {
            "level": 1,
            "role": "department-head",
            "role_name": "Department Head",
            "description": "",
        },
        {
            "level": 2,
            "role": "finance-manager",
            "role_name": "Finance Manager",
            "description": "Review",
        },
    ]
    assert AuditLog.objects.filter(action="approval_matrix_updated").count() == 1


def test_replace_levels_replaces_previous_rows(budget_matrix):
    replace_levels("budget", [{"level": 1, "approver_role": "finance-manager"}])
    levels = ApprovalLevel.objects.filter(workflow__workflow_type="budget")
    assert [(lvl.level, lvl.approver_role.code) for lvl in levels] == [
        (1, "finance-manager")
    ]


@pytest.mark.parametrize(
    "levels",
    [
        [{"level": 0, "approver_role": "department-head"}],
        [{"level": "1", "approver_role": "department-head"}],
        [
            {"level": 1, "approver_role": "department-head"},
            {"level": 1, "approver_role": "finance-manager"},
        ],
        [{"level": 1, "approver_role": "ghost"}],
        [{"level": 2, "approver_role": "department-head"}],
    ],
)
def test_invalid_levels_leave_matrix_untouched(budget_matrix, levels):
    with pytest.raises(ValidationError):
        replace_levels("budget", levels)
    assert ApprovalLevel.objects.filter(workflow__workflow_type="budget").count() == 2


def test_unknown_workflow_type():
    with pytest.raises(ValidationError):
        get_workflow("travel")


def test_snapshot_of_empty_workflow_is_a_configuration_error():
    get_workflow(ApprovalWorkflow.Type.CONTRACT)
    with pytest.raises(ConfigurationError):
        snapshot_levels(ApprovalWorkflow.Type.CONTRACT)


@pytest.fixture
def submitted_sheet(scope, owner, budget_matrix):
    sheet = budgets.create_sheet(
        sheet_type="OPEX",
        organization_id=scope.organization.pk,
        department_id=scope.department.pk,
        year=2025,
        created_by=owner,
    )
    return engine.submit(sheet, owner)


def test_role_awaited_by_in_flight_sheet_cannot_be_deleted(
    submitted_sheet, head, finmgr
):
    # The matrix no longer uses finance-manager, but the sheet still has to
    # reach it at level 2.
    replace_levels("budget", [{"level": 1, "approver_role": "department-head"}])
    role = ApproverRole.objects.get(code="finance-manager")
    with pytest.raises(ConflictError) as exc:
        delete_role(role)
    assert exc.value.details["sheets"] == [submitted_sheet.pk]
    assert ApproverRole.objects.filter(code="finance-manager").exists()

    engine.approve(submitted_sheet, head)
    engine.approve(submitted_sheet, finmgr)
    finmgr.user_role = None
    finmgr.save()
    delete_role(role)
    assert not ApproverRole.objects.filter(code="finance-manager").exists()
    assert AuditLog.objects.filter(action="approver_role_deleted").exists()


def test_role_already_passed_does_not_block_deletion(submitted_sheet, head):
    engine.approve(submitted_sheet, head)
    head.user_role = None
    head.save()
    replace_levels("budget", [{"level": 1, "approver_role": "finance-manager"}])
    delete_role(ApproverRole.objects.get(code="department-head"))
    assert not ApproverRole.objects.filter(code="department-head").exists()


def test_role_used_by_matrix_cannot_be_deleted(budget_matrix):
    with pytest.raises(ConflictError):
        delete_role(ApproverRole.objects.get(code="department-head"))
