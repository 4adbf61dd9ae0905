from __future__ import annotations

from rest_framework import status

from fiscalflow.budgets.models import BudgetSheet
from tests.permissions.mixins import RoleAPITestCase

LIST = "api_v1:budgetsheet-list"
DETAIL = "api_v1:budgetsheet-detail"


class BudgetSheetPermissionTests(RoleAPITestCase):
    def create_sheet(self, role="owner", sheet_type="CAPEX"):
        return self.post(
            LIST,
            role=role,
            payload={
                "sheet_type": sheet_type,
                "organization": self.scope.organization.pk,
                "department": self.scope.department.pk,
                "year": 2025,
            },
        )

    def add_item(self, sheet_id, role="owner", **overrides):
        payload = {
            "description": "Servers",
            "amount": "1000.00",
            "quantity": 3,
            "priority": "High",
            "justification": "Capacity",
        }
        payload.update(overrides)
        return self.post(
            "api_v1:budgetsheet-add-item",
            role=role,
            payload=payload,
            reverse_kwargs={"pk": sheet_id},
        )

    def act(self, action, sheet_id, role, **payload):
        return self.post(
            f"api_v1:budgetsheet-{action}",
            role=role,
            payload=payload,
            reverse_kwargs={"pk": sheet_id},
        )

    def test_registry_write_is_needed_to_create(self):
        self.assert_allowed(self.create_sheet())
        self.assert_denied(self.create_sheet(role="reader"))
        self.assert_denied(self.create_sheet(role="nobody"))

    def test_list_only_shows_readable_sheet_types(self):
        self.create_sheet()
        self.create_sheet(sheet_type="OPEX")
        reader = self.extract_results(self.get(LIST, role="reader"))
        assert {s["sheet_type"] for s in reader} == {"CAPEX", "OPEX"}
        assert self.extract_results(self.get(LIST, role="nobody")) == []

    def test_other_department_cannot_edit(self):
        sheet_id = self.create_sheet().data["id"]
        response = self.add_item(sheet_id, role="outsider")
        self.assert_denied(response)
        assert response.data["kind"] == "authorization"

    def test_full_approval_flow(self):
        sheet_id = self.create_sheet().data["id"]
        response = self.add_item(sheet_id)
        self.assert_http_status(response, status.HTTP_201_CREATED)
        assert response.data["total_value"] == "3000.00"
        assert response.data["items"][0]["sequence_number"] == "ACM/FINA/2025/001"

        response = self.act("submit", sheet_id, "owner")
        self.assert_http_status(response, status.HTTP_200_OK)
        assert response.data["status"] == BudgetSheet.Status.PENDING_APPROVAL
        assert response.data["current_role"] == "department-head"

        inbox = self.extract_results(self.get("api_v1:approval-inbox", role="head"))
        assert [i["sheet"] for i in inbox] == [sheet_id]
        assert self.extract_results(self.get("api_v1:approval-inbox", role="finmgr")) == []

        response = self.act("approve", sheet_id, "finmgr")
        self.assert_denied(response)
        assert response.data["kind"] == "authorization"

        response = self.act("approve", sheet_id, "head", version=1)
        self.assert_http_status(response, status.HTTP_409_CONFLICT)
        assert response.data["kind"] == "conflict"

        version = BudgetSheet.objects.get(pk=sheet_id).version
        response = self.act("approve", sheet_id, "head", version=version)
        self.assert_http_status(response, status.HTTP_200_OK)
        assert response.data["current_level"] == 2
        assert response.data["current_role"] == "finance-manager"

        response = self.act("approve", sheet_id, "finmgr", comment="OK")
        assert response.data["status"] == BudgetSheet.Status.APPROVED

        response = self.act("reject", sheet_id, "finmgr")
        self.assert_http_status(response, status.HTTP_409_CONFLICT)
        assert response.data["kind"] == "invalid_state"

    def test_submitted_sheet_is_read_only(self):
        sheet_id = self.create_sheet().data["id"]
        item_id = self.add_item(sheet_id).data["items"][0]["id"]
        self.act("submit", sheet_id, "owner")

        response = self.patch(
            "api_v1:budgetsheet-item",
            role="owner",
            payload={"quantity": 5},
            reverse_kwargs={"pk": sheet_id, "item_id": item_id},
        )
        self.assert_http_status(response, status.HTTP_409_CONFLICT)
        response = self.delete(DETAIL, role="admin", reverse_kwargs={"pk": sheet_id})
        self.assert_http_status(response, status.HTTP_409_CONFLICT)

    def test_submit_needs_registry_write(self):
        sheet_id = self.create_sheet().data["id"]
        self.add_item(sheet_id)
        self.assert_denied(self.act("submit", sheet_id, "reader"))
        assert BudgetSheet.objects.get(pk=sheet_id).status == BudgetSheet.Status.DRAFT

    def test_item_validation_errors(self):
        sheet_id = self.create_sheet().data["id"]
        response = self.add_item(sheet_id, quantity=0, priority="Urgent")
        self.assert_http_status(response, status.HTTP_400_BAD_REQUEST)
        assert response.data["kind"] == "validation"
        assert set(response.data["details"]) == {"quantity", "priority"}

    def test_opex_items(self):
        sheet_id = self.create_sheet(sheet_type="OPEX").data["id"]
        response = self.post(
            "api_v1:budgetsheet-add-item",
            role="owner",
            payload={
                "description": "Support",
                "amount": "500",
                "period": "Quarterly",
                "implementation": "New",
                "service_status": "Active",
                "supplier": self.vendor.pk,
            },
            reverse_kwargs={"pk": sheet_id},
        )
        self.assert_http_status(response, status.HTTP_201_CREATED)
        item = response.data["items"][0]
        assert item["line_total"] == "2000.00"
        assert item["supplier_name"] == "Globex Supplies"
        assert item["sequence_number"].startswith("OPEX/")

    def test_deleting_a_draft_needs_full_access(self):
        sheet_id = self.create_sheet().data["id"]
        self.assert_denied(self.delete(DETAIL, role="owner", reverse_kwargs={"pk": sheet_id}))
        self.assert_allowed(self.delete(DETAIL, role="admin", reverse_kwargs={"pk": sheet_id}))
        assert not BudgetSheet.objects.filter(pk=sheet_id).exists()
