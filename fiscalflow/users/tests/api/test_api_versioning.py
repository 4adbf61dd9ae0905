from django.urls import resolve
from django.urls import reverse


def test_users_routes_available_v1_only():
    assert reverse("api_v1:user-list") == "/api/v1/users/"
    assert resolve("/api/v1/users/").view_name == "api_v1:user-list"


def test_budget_routes_under_v1():
    assert reverse("api_v1:budgetsheet-list") == "/api/v1/budget-sheets/"
    assert (
        reverse("api_v1:budgetsheet-submit", kwargs={"pk": 7})
        == "/api/v1/budget-sheets/7/submit/"
    )
    assert (
        reverse("api_v1:budgetsheet-item", kwargs={"pk": 7, "item_id": 3})
        == "/api/v1/budget-sheets/7/items/3/"
    )
    assert (
        reverse("api_v1:approval-workflow-detail", kwargs={"workflow_type": "budget"})
        == "/api/v1/approval-workflows/budget/"
    )


def test_schema_docs_available_under_v1():
    assert resolve("/api/v1/schema/").view_name == "api-schema-v1"
    assert resolve("/api/v1/docs/").view_name == "api-docs-v1"
