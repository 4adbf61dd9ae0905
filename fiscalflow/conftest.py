import pytest

from fiscalflow.users.models import AccessLevel
from fiscalflow.users.models import ModuleKey
from tests.permissions.factories import configure_budget_matrix
from tests.permissions.factories import create_scope
from tests.permissions.factories import create_user_with_access
from tests.permissions.factories import create_vendor
from tests.permissions.factories import ensure_roles

ROLE_HEAD = "department-head"
ROLE_FINMGR = "finance-manager"


@pytest.fixture
def scope(db):
    return create_scope()


@pytest.fixture
def roles(db):
    ensure_roles({ROLE_HEAD: "Department Head", ROLE_FINMGR: "Finance Manager"})


@pytest.fixture
def budget_matrix(roles):
    configure_budget_matrix([ROLE_HEAD, ROLE_FINMGR])


@pytest.fixture
def vendor(db):
    return create_vendor()


@pytest.fixture
def user(scope):
    return create_user_with_access("user", scope=scope).user


@pytest.fixture
def owner(scope):
    return create_user_with_access(
        "owner",
        scope=scope,
        permissions={
            ModuleKey.CAPEX_REGISTRY: AccessLevel.WRITE,
            ModuleKey.OPEX_REGISTRY: AccessLevel.WRITE,
        },
    ).user


@pytest.fixture
def head(scope, roles):
    return create_user_with_access(
        "head",
        scope=scope,
        role=ROLE_HEAD,
        permissions={ModuleKey.APPROVALS_INBOX: AccessLevel.WRITE},
    ).user


@pytest.fixture
def finmgr(scope, roles):
    return create_user_with_access(
        "finmgr",
        scope=scope,
        role=ROLE_FINMGR,
        permissions={ModuleKey.APPROVALS_INBOX: AccessLevel.WRITE},
    ).user
