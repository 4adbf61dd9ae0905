from django.core.management import call_command

from fiscalflow.approvals.services import snapshot_levels
from fiscalflow.users import access
from fiscalflow.users.models import ModuleKey
from fiscalflow.users.models import User


def test_seed_creates_root_user_and_matrices(db):
    call_command("seed_fiscalflow", admin_password="RootPass!234")

    root = User.objects.get(username="rootuser")
    assert root.check_password("RootPass!234")
    assert root.department.name == "rootdepartment"
    assert root.role_code == "administrator"
    assert all(access.can_delete(root, key) for key in ModuleKey.values)

    assert [e["role"] for e in snapshot_levels("budget")] == [
        "department-head",
        "finance-manager",
        "general-manager",
        "director-of-finance",
    ]
    assert len(snapshot_levels("contract")) == 3


def test_seed_is_idempotent(db):
    call_command("seed_fiscalflow", admin_password="RootPass!234")
    call_command("seed_fiscalflow", admin_password="Other!234")

    assert User.objects.filter(username="rootuser").count() == 1
    assert User.objects.get(username="rootuser").check_password("RootPass!234")
    assert len(snapshot_levels("budget")) == 4
