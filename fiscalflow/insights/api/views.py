from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from fiscalflow.insights.services import InsightUnavailableError
from fiscalflow.insights.services import compare_capex_quotes
from fiscalflow.insights.services import forecast_budget
from fiscalflow.users.api.permissions import HasModulePermission
from fiscalflow.users.models import ModuleKey

from .serializers import BudgetForecastRequestSerializer
from .serializers import CapexComparisonRequestSerializer


def _failure(message: str) -> Response:
    return Response(
        {"success": False, "error": message},
        status=status.HTTP_503_SERVICE_UNAVAILABLE,
    )


class BudgetForecastView(APIView):
    permission_classes = [IsAuthenticated, HasModulePermission]
    module_key = ModuleKey.BUDGET_FORECASTING

    @extend_schema(request=BudgetForecastRequestSerializer)
    def post(self, request):
        serializer = BudgetForecastRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        try:
            result = forecast_budget(
                data["historicalSpendingData"], data["contractObligations"]
            )
        except InsightUnavailableError:
            return _failure("Failed to get forecast.")
        return Response({"success": True, "data": result})


class CapexComparisonView(APIView):
    permission_classes = [IsAuthenticated, HasModulePermission]
    module_key = ModuleKey.CAPEX_ANALYSIS

    @extend_schema(request=CapexComparisonRequestSerializer)
    def post(self, request):
        serializer = CapexComparisonRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        try:
            result = compare_capex_quotes(data["quotes"], data["criteria"])
        except InsightUnavailableError:
            return _failure("Failed to get analysis.")
        return Response({"success": True, "data": result})
