from __future__ import annotations

from django.contrib.auth import get_user_model
from rest_framework import status

from fiscalflow.audit.models import AuditLog
from fiscalflow.users.access import permission_map
from fiscalflow.users.models import AccessLevel
from fiscalflow.users.models import ModuleKey
from tests.permissions.mixins import RoleAPITestCase

User = get_user_model()


class UserRegistrationPermissionTests(RoleAPITestCase):
    def registration(self, **overrides):
        data = {
            "username": "newbie",
            "email": "newbie@example.com",
            "first_name": "New",
            "last_name": "Person",
            "mobile": "5550100",
            "group": self.scope.group.pk,
            "organization": self.scope.organization.pk,
            "department": self.scope.department.pk,
            "sub_department": self.scope.sub_department.pk,
            "user_role": "finance-manager",
            "password": "Str0ngPass!",
            "confirm_password": "Str0ngPass!",
            "permissions": {ModuleKey.VENDORS: AccessLevel.READ},
        }
        data.update(overrides)
        return data

    def test_admin_registers_user_with_permissions(self):
        response = self.post("api_v1:user-list", role="admin", payload=self.registration())
        self.assert_http_status(response, status.HTTP_201_CREATED)
        assert response.data["user_role"] == "finance-manager"
        assert response.data["full_name"] == "New Person"
        assert response.data["permissions"] == {ModuleKey.VENDORS: AccessLevel.READ}
        assert "password" not in response.data

        user = User.objects.get(username="newbie")
        assert user.check_password("Str0ngPass!")
        assert AuditLog.objects.filter(action="user_registered", record_id=user.pk).exists()

    def test_registration_needs_module_write(self):
        self.assert_denied(
            self.post("api_v1:user-list", role="owner", payload=self.registration())
        )
        self.assert_denied(self.get("api_v1:user-list", role="nobody"))

    def test_registration_validation(self):
        cases = [
            ({"confirm_password": "Mismatch!1"}, "confirm_password"),
            ({"password": "short", "confirm_password": "short"}, "password"),
            ({"username": "ab"}, "username"),
            ({"username": "owner"}, "username"),
            ({"mobile": ""}, "mobile"),
            ({"department": self.other_scope.department.pk}, "sub_department"),
            ({"permissions": {"/nowhere": "read"}}, "permissions"),
            ({"user_role": "ghost"}, "user_role"),
        ]
        for overrides, field in cases:
            response = self.post(
                "api_v1:user-list", role="admin", payload=self.registration(**overrides)
            )
            self.assert_http_status(response, status.HTTP_400_BAD_REQUEST)
            assert field in response.data, (overrides, response.data)

    def test_me_is_open_to_everyone(self):
        response = self.get("api_v1:user-me", role="nobody")
        self.assert_http_status(response, status.HTTP_200_OK)
        assert response.data["username"] == "nobody"
        assert response.data["permissions"] == {}

    def test_update_keeps_password_when_blank(self):
        target = self.roles["reader"].user
        response = self.patch(
            "api_v1:user-detail",
            role="admin",
            payload={"first_name": "Rita", "password": "", "confirm_password": ""},
            reverse_kwargs={"pk": target.pk},
        )
        self.assert_http_status(response, status.HTTP_200_OK)
        target.refresh_from_db()
        assert target.first_name == "Rita"
        assert target.check_password("TestPass123!")

    def test_replace_permissions(self):
        target = self.roles["nobody"].user
        url_kwargs = {"pk": target.pk}
        response = self.put(
            "api_v1:user-permissions",
            role="admin",
            payload={"permissions": {ModuleKey.REPORTS: AccessLevel.READ}},
            reverse_kwargs=url_kwargs,
        )
        self.assert_http_status(response, status.HTTP_200_OK)
        assert response.data == {"permissions": {ModuleKey.REPORTS: AccessLevel.READ}}
        target.refresh_from_db()
        assert permission_map(target) == {ModuleKey.REPORTS: AccessLevel.READ}

        response = self.put(
            "api_v1:user-permissions",
            role="admin",
            payload={"permissions": {ModuleKey.REPORTS: "owner"}},
            reverse_kwargs=url_kwargs,
        )
        self.assert_http_status(response, status.HTTP_400_BAD_REQUEST)

    def test_cannot_delete_self(self):
        admin = self.roles["admin"].user
        response = self.delete("api_v1:user-detail", role="admin", reverse_kwargs={"pk": admin.pk})
        self.assert_http_status(response, status.HTTP_400_BAD_REQUEST)
        target = self.roles["nobody"].user
        response = self.delete("api_v1:user-detail", role="admin", reverse_kwargs={"pk": target.pk})
        self.assert_allowed(response)
        assert not User.objects.filter(pk=target.pk).exists()


class UserAccessReportTests(RoleAPITestCase):
    def test_report_lists_every_module_for_every_user(self):
        self.assert_denied(self.get("api_v1:report-user-access-rights", role="owner"))
        response = self.get("api_v1:report-user-access-rights", role="admin")
        self.assert_http_status(response, status.HTTP_200_OK)
        rows = {row["username"]: row for row in response.data}
        assert set(rows) >= {"owner", "head", "admin", "nobody"}
        assert rows["head"]["role"] == "department-head"
        assert rows["owner"]["permissions"][ModuleKey.CAPEX_REGISTRY] == AccessLevel.WRITE
        assert rows["nobody"]["permissions"][ModuleKey.CAPEX_REGISTRY] == AccessLevel.NONE
        assert len(rows["nobody"]["permissions"]) == len(ModuleKey.values)
