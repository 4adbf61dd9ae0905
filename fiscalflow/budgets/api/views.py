from drf_spectacular.utils import extend_schema
from rest_framework import mixins
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from fiscalflow.approvals import engine
from fiscalflow.budgets import services
from fiscalflow.budgets.models import BudgetSheet
from fiscalflow.budgets.models import SheetType
from fiscalflow.users.access import can_read
from fiscalflow.users.api.permissions import HasModulePermission
from fiscalflow.users.models import ModuleKey

from .filters import BudgetSheetFilter
from .serializers import BudgetItemWriteSerializer
from .serializers import BudgetSheetCreateSerializer
from .serializers import BudgetSheetSerializer
from .serializers import WorkflowActionSerializer

MODULE_BY_TYPE = {
    SheetType.CAPEX: ModuleKey.CAPEX_REGISTRY,
    SheetType.OPEX: ModuleKey.OPEX_REGISTRY,
}

# Approvers act from the inbox; their right to decide is the role match.
DECISION_ACTIONS = {"approve", "reject"}


class BudgetSheetViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.CreateModelMixin,
    mixins.DestroyModelMixin,
    GenericViewSet,
):
    """CAPEX and OPEX budget sheets with their items and approval actions.

    Access is checked against the registry module of the sheet's type.
    """

    permission_classes = [IsAuthenticated, HasModulePermission]
    serializer_class = BudgetSheetSerializer
    filterset_class = BudgetSheetFilter
    queryset = BudgetSheet.objects.select_related("organization", "department")

    def get_queryset(self):
        qs = super().get_queryset()
        if self.action == "list":
            readable = [
                sheet_type
                for sheet_type, key in MODULE_BY_TYPE.items()
                if can_read(self.request.user, key)
            ]
            qs = qs.filter(sheet_type__in=readable)
        return qs

    def get_module_key(self):
        if self.action == "create":
            return MODULE_BY_TYPE.get(self.request.data.get("sheet_type"))
        # Everything else depends on the sheet's type.
        return None

    def get_object_module_key(self, obj):
        if self.action in DECISION_ACTIONS:
            return ModuleKey.APPROVALS_INBOX
        return MODULE_BY_TYPE[obj.sheet_type]

    def _sheet_response(self, sheet, status_code=status.HTTP_200_OK):
        sheet = self.get_queryset().get(pk=sheet.pk)
        serializer = BudgetSheetSerializer(sheet, context=self.get_serializer_context())
        return Response(serializer.data, status=status_code)

    @extend_schema(request=BudgetSheetCreateSerializer, responses={201: BudgetSheetSerializer})
    def create(self, request, *args, **kwargs):
        serializer = BudgetSheetCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        sheet = services.create_sheet(
            sheet_type=data["sheet_type"],
            organization_id=data["organization"].pk,
            department_id=data["department"].pk,
            year=data["year"],
            created_by=request.user,
        )
        return self._sheet_response(sheet, status.HTTP_201_CREATED)

    def perform_destroy(self, instance):
        services.delete_sheet(instance, user=self.request.user)

    @extend_schema(request=BudgetItemWriteSerializer, responses={201: BudgetSheetSerializer})
    @action(detail=True, methods=["post"], url_path="items")
    def add_item(self, request, pk=None):
        sheet = self.get_object()
        serializer = BudgetItemWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        services.add_item(sheet, serializer.validated_data, user=request.user)
        return self._sheet_response(sheet, status.HTTP_201_CREATED)

    @extend_schema(request=BudgetItemWriteSerializer, responses={200: BudgetSheetSerializer})
    @action(
        detail=True,
        methods=["patch", "delete"],
        url_path=r"items/(?P<item_id>[0-9]+)",
    )
    def item(self, request, pk=None, item_id=None):
        sheet = self.get_object()
        if request.method == "DELETE":
            services.remove_item(sheet, item_id, user=request.user)
            return self._sheet_response(sheet)
        serializer = BudgetItemWriteSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        services.update_item(sheet, item_id, serializer.validated_data, user=request.user)
        return self._sheet_response(sheet)

    def _transition(self, request, handler):
        sheet = self.get_object()
        serializer = WorkflowActionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        kwargs = {"version": serializer.validated_data.get("version")}
        if handler is not engine.submit:
            kwargs["comment"] = serializer.validated_data.get("comment", "")
        sheet = handler(sheet, request.user, **kwargs)
        return self._sheet_response(sheet)

    @extend_schema(request=WorkflowActionSerializer, responses={200: BudgetSheetSerializer})
    @action(detail=True, methods=["post"])
    def submit(self, request, pk=None):
        return self._transition(request, engine.submit)

    @extend_schema(request=WorkflowActionSerializer, responses={200: BudgetSheetSerializer})
    @action(detail=True, methods=["post"])
    def approve(self, request, pk=None):
        return self._transition(request, engine.approve)

    @extend_schema(request=WorkflowActionSerializer, responses={200: BudgetSheetSerializer})
    @action(detail=True, methods=["post"])
    def reject(self, request, pk=None):
        return self._transition(request, engine.reject)
