import pytest

from fiscalflow.core.exceptions import AuthorizationError
from fiscalflow.core.exceptions import ValidationError
from fiscalflow.users import access
from fiscalflow.users.models import AccessLevel
from fiscalflow.users.models import ModuleKey
from fiscalflow.users.models import ModulePermission
from tests.permissions.factories import create_user_with_access

pytestmark = pytest.mark.django_db


def test_missing_row_means_none(user):
    assert access.effective_permission(user, ModuleKey.VENDORS) == AccessLevel.NONE
    assert not access.can_read(user, ModuleKey.VENDORS)


@pytest.mark.parametrize(
    ("level", "read", "write", "delete"),
    [
        (AccessLevel.NONE, False, False, False),
        (AccessLevel.READ, True, False, False),
        (AccessLevel.WRITE, True, True, False),
        (AccessLevel.FULL, True, True, True),
    ],
)
def test_levels(scope, level, read, write, delete):
    user = create_user_with_access(
        "someone", scope=scope, permissions={ModuleKey.CONTRACTS: level}
    ).user
    assert access.can_read(user, ModuleKey.CONTRACTS) is read
    assert access.can_write(user, ModuleKey.CONTRACTS) is write
    assert access.can_delete(user, ModuleKey.CONTRACTS) is delete


def test_staff_flag_grants_nothing(scope):
    staff = create_user_with_access("staffer", scope=scope, is_staff=True).user
    staff.is_superuser = True
    staff.save()
    assert not access.can_read(staff, ModuleKey.DASHBOARD)
    with pytest.raises(AuthorizationError):
        access.require_write(staff, ModuleKey.DASHBOARD)


def test_set_permissions_replaces_rows(user):
    access.set_permissions(
        user, {ModuleKey.VENDORS: AccessLevel.FULL, ModuleKey.REPORTS: AccessLevel.READ}
    )
    assert access.can_delete(user, ModuleKey.VENDORS)
    access.set_permissions(user, {ModuleKey.REPORTS: AccessLevel.WRITE})
    assert not access.can_read(user, ModuleKey.VENDORS)
    assert ModulePermission.objects.filter(user=user).count() == 1
    assert access.permission_map(user) == {ModuleKey.REPORTS: AccessLevel.WRITE}


def test_invalid_permission_map(user):
    with pytest.raises(ValidationError) as exc:
        access.set_permissions(
            user, {"/nowhere": AccessLevel.READ, ModuleKey.VENDORS: "admin"}
        )
    assert set(exc.value.details) == {"/nowhere", ModuleKey.VENDORS}
    assert not ModulePermission.objects.filter(user=user).exists()


def test_access_matrix_covers_every_module(user):
    access.set_permissions(user, {ModuleKey.VENDORS: AccessLevel.READ})
    [row] = access.access_matrix([user])
    assert row["user"] == user
    assert set(row["permissions"]) == set(ModuleKey.values)
    assert row["permissions"][ModuleKey.VENDORS] == AccessLevel.READ
    assert row["permissions"][ModuleKey.CONTRACTS] == AccessLevel.NONE
