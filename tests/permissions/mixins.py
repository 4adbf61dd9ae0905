from __future__ import annotations

from django.contrib.auth import get_user_model
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from fiscalflow.users.models import AccessLevel
from fiscalflow.users.models import ModuleKey
from tests.permissions.factories import RoleContext
from tests.permissions.factories import configure_budget_matrix
from tests.permissions.factories import create_scope
from tests.permissions.factories import create_user_with_access
from tests.permissions.factories import create_vendor
from tests.permissions.factories import ensure_roles

User = get_user_model()

ROLE_DEPARTMENT_HEAD = "department-head"
ROLE_FINANCE_MANAGER = "finance-manager"
APPROVER_ROLES = {
    ROLE_DEPARTMENT_HEAD: "Department Head",
    ROLE_FINANCE_MANAGER: "Finance Manager",
}

FULL = AccessLevel.FULL
WRITE = AccessLevel.WRITE
READ = AccessLevel.READ


class RoleAPITestCase(APITestCase):
    """Base test case with a small organisation, its users and helpers.

    Users (keys of ``self.roles``):
    - owner: member of the Finance department, write on both registries
    - reader: Finance member with read-only registry access
    - head / finmgr: approvers for levels 1 and 2 of the budget matrix
    - admin: full on every module, staff
    - outsider: full registry access but member of another department
    - nobody: no stored permissions at all
    """

    def setUp(self):
        super().setUp()
        ensure_roles(APPROVER_ROLES)
        configure_budget_matrix([ROLE_DEPARTMENT_HEAD, ROLE_FINANCE_MANAGER])
        self.scope = create_scope()
        self.other_scope = create_scope(
            department="Operations", sub_department="Logistics"
        )
        self.vendor = create_vendor()
        registry_write = {
            ModuleKey.CAPEX_REGISTRY: WRITE,
            ModuleKey.OPEX_REGISTRY: WRITE,
        }
        approver = {ModuleKey.APPROVALS_INBOX: WRITE}
        self.roles: dict[str, RoleContext] = {
            "owner": create_user_with_access(
                "owner", scope=self.scope, permissions=registry_write
            ),
            "reader": create_user_with_access(
                "reader",
                scope=self.scope,
                permissions={
                    ModuleKey.CAPEX_REGISTRY: READ,
                    ModuleKey.OPEX_REGISTRY: READ,
                },
            ),
            "head": create_user_with_access(
                "head",
                scope=self.scope,
                role=ROLE_DEPARTMENT_HEAD,
                permissions=approver,
            ),
            "finmgr": create_user_with_access(
                "finmgr",
                scope=self.scope,
                role=ROLE_FINANCE_MANAGER,
                permissions=approver,
            ),
            "admin": create_user_with_access(
                "admin",
                scope=self.scope,
                permissions=dict.fromkeys(ModuleKey.values, FULL),
                is_staff=True,
            ),
            "outsider": create_user_with_access(
                "outsider",
                scope=self.other_scope,
                permissions={
                    ModuleKey.CAPEX_REGISTRY: FULL,
                    ModuleKey.OPEX_REGISTRY: FULL,
                },
            ),
            "nobody": create_user_with_access("nobody", scope=self.scope),
        }

    # Utilities -------------------------------------------------------------
    def authenticate(self, role: str):
        self.client.force_authenticate(user=self.roles[role].user)

    def assert_http_status(self, response, expected_status: int):
        msg = getattr(response, "data", response)
        assert response.status_code == expected_status, msg

    def get(self, url_name: str, *, role: str, reverse_kwargs=None, **kwargs):
        self.authenticate(role)
        url = reverse(url_name, kwargs=reverse_kwargs)
        return self.client.get(url, **kwargs)

    def post(
        self, url_name: str, *, role: str, payload=None, reverse_kwargs=None, **kwargs
    ):
        self.authenticate(role)
        url = reverse(url_name, kwargs=reverse_kwargs)
        return self.client.post(url, data=payload or {}, format="json", **kwargs)

    def patch(
        self, url_name: str, *, role: str, payload=None, reverse_kwargs=None, **kwargs
    ):
        self.authenticate(role)
        url = reverse(url_name, kwargs=reverse_kwargs)
        return self.client.patch(url, data=payload or {}, format="json", **kwargs)

    def put(
        self, url_name: str, *, role: str, payload=None, reverse_kwargs=None, **kwargs
    ):
        self.authenticate(role)
        url = reverse(url_name, kwargs=reverse_kwargs)
        return self.client.put(url, data=payload or {}, format="json", **kwargs)

    def delete(self, url_name: str, *, role: str, reverse_kwargs=None, **kwargs):
        self.authenticate(role)
        url = reverse(url_name, kwargs=reverse_kwargs)
        return self.client.delete(url, **kwargs)

    def assert_allowed(self, response):
        assert response.status_code in (
            status.HTTP_200_OK,
            status.HTTP_201_CREATED,
            status.HTTP_204_NO_CONTENT,
        ), response.data

    def assert_denied(self, response, code=status.HTTP_403_FORBIDDEN):
        assert response.status_code == code, response.data

    def extract_results(self, response):
        data = response.data
        if isinstance(data, dict) and "results" in data:
            return data["results"]
        return data if isinstance(data, list) else []
