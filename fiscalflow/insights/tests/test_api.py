from unittest import mock

from django.urls import reverse
from rest_framework import status
from rest_framework.test import APITestCase

from fiscalflow.users.models import AccessLevel
from fiscalflow.users.models import ModuleKey
from tests.permissions.factories import create_scope
from tests.permissions.factories import create_user_with_access


class InsightAPITests(APITestCase):
    def setUp(self):
        scope = create_scope()
        self.analyst = create_user_with_access(
            "analyst",
            scope=scope,
            permissions={
                ModuleKey.BUDGET_FORECASTING: AccessLevel.WRITE,
                ModuleKey.CAPEX_ANALYSIS: AccessLevel.WRITE,
            },
        ).user
        self.viewer = create_user_with_access(
            "viewer",
            scope=scope,
            permissions={ModuleKey.BUDGET_FORECASTING: AccessLevel.READ},
        ).user
        self.forecast_url = reverse("api_v1:insight-budget-forecast")
        self.compare_url = reverse("api_v1:insight-capex-comparison")
        self.forecast_payload = {
            "historicalSpendingData": "2023: 1,000,000",
            "contractObligations": "Office lease 120,000",
        }

    def test_forecast_returns_503_when_model_unavailable(self):
        self.client.force_authenticate(self.analyst)
        response = self.client.post(self.forecast_url, self.forecast_payload, format="json")
        assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE
        assert response.data == {"success": False, "error": "Failed to get forecast."}

    def test_forecast_success(self):
        self.client.force_authenticate(self.analyst)
        with mock.patch(
            "fiscalflow.insights.api.views.forecast_budget",
            return_value={"forecastedBudget": "1.1M"},
        ):
            response = self.client.post(
                self.forecast_url, self.forecast_payload, format="json"
            )
        assert response.status_code == status.HTTP_200_OK
        assert response.data == {
            "success": True,
            "data": {"forecastedBudget": "1.1M"},
        }

    def test_comparison_validates_quotes(self):
        self.client.force_authenticate(self.analyst)
        response = self.client.post(
            self.compare_url, {"quotes": [], "criteria": "price"}, format="json"
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_comparison_failure_message(self):
        self.client.force_authenticate(self.analyst)
        payload = {
            "quotes": [
                {"vendor": "Globex", "description": "Racks", "price": 10, "terms": ""}
            ],
            "criteria": "price",
        }
        response = self.client.post(self.compare_url, payload, format="json")
        assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE
        assert response.data["error"] == "Failed to get analysis."

    def test_read_access_is_not_enough(self):
        self.client.force_authenticate(self.viewer)
        response = self.client.post(self.forecast_url, self.forecast_payload, format="json")
        assert response.status_code == status.HTTP_403_FORBIDDEN
