from rest_framework import serializers

from fiscalflow.budgets.models import BudgetItem
from fiscalflow.budgets.models import BudgetSheet
from fiscalflow.budgets.models import SheetType
from fiscalflow.budgets.services import compute_item_total
from fiscalflow.budgets.services import sequence_number
from fiscalflow.org.models import Department
from fiscalflow.org.models import Organization
from fiscalflow.registry.models import Vendor


class BudgetItemSerializer(serializers.ModelSerializer):
    line_total = serializers.SerializerMethodField()
    sequence_number = serializers.SerializerMethodField()
    supplier_name = serializers.CharField(
        source="supplier.company_name", read_only=True, default=None
    )

    class Meta:
        model = BudgetItem
        fields = [
            "id",
            "position",
            "sequence_number",
            "description",
            "amount",
            "line_total",
            "remarks",
            "quantity",
            "priority",
            "justification",
            "period",
            "implementation",
            "service_status",
            "supplier",
            "supplier_name",
        ]
        read_only_fields = fields

    def get_line_total(self, obj: BudgetItem) -> str:
        return str(compute_item_total(obj, obj.sheet.sheet_type))

    def get_sequence_number(self, obj: BudgetItem) -> str:
        index = self.context.get("item_index", {}).get(obj.pk, obj.position - 1)
        return sequence_number(obj.sheet, index)


class BudgetItemWriteSerializer(serializers.Serializer):
    """Field typing only; CAPEX/OPEX rules are applied by the service layer."""

    description = serializers.CharField(required=False, allow_blank=True)
    amount = serializers.DecimalField(max_digits=14, decimal_places=2, required=False)
    remarks = serializers.CharField(required=False, allow_blank=True)
    quantity = serializers.IntegerField(required=False)
    priority = serializers.CharField(required=False)
    justification = serializers.CharField(required=False, allow_blank=True)
    period = serializers.CharField(required=False)
    implementation = serializers.CharField(required=False)
    service_status = serializers.CharField(required=False)
    supplier = serializers.PrimaryKeyRelatedField(
        queryset=Vendor.objects.all(), required=False, allow_null=True
    )


class BudgetSheetSerializer(serializers.ModelSerializer):
    organization_name = serializers.CharField(
        source="organization.name", read_only=True
    )
    department_name = serializers.CharField(source="department.name", read_only=True)
    total_value = serializers.DecimalField(
        max_digits=20, decimal_places=2, read_only=True
    )
    current_role = serializers.SerializerMethodField()
    items = serializers.SerializerMethodField()

    class Meta:
        model = BudgetSheet
        fields = [
            "id",
            "sheet_type",
            "organization",
            "organization_name",
            "department",
            "department_name",
            "year",
            "status",
            "current_level",
            "current_role",
            "version",
            "total_value",
            "items",
            "workflow_snapshot",
            "created_by",
            "submitted_by",
            "submitted_on",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_current_role(self, obj: BudgetSheet) -> str | None:
        if obj.status != BudgetSheet.Status.PENDING_APPROVAL:
            return None
        for entry in obj.workflow_snapshot or []:
            if entry.get("level") == obj.current_level:
                return entry.get("role")
        return None

    def get_items(self, obj: BudgetSheet) -> list[dict]:
        items = list(obj.items.select_related("supplier"))
        for item in items:
            item.sheet = obj
        context = {
            **self.context,
            "item_index": {item.pk: idx for idx, item in enumerate(items)},
        }
        return BudgetItemSerializer(items, many=True, context=context).data


class BudgetSheetCreateSerializer(serializers.Serializer):
    sheet_type = serializers.ChoiceField(choices=SheetType.choices)
    organization = serializers.PrimaryKeyRelatedField(
        queryset=Organization.objects.all()
    )
    department = serializers.PrimaryKeyRelatedField(queryset=Department.objects.all())
    year = serializers.IntegerField(min_value=2000, max_value=2100)


class WorkflowActionSerializer(serializers.Serializer):
    version = serializers.IntegerField(
        required=False,
        min_value=1,
        help_text="Sheet version the caller last saw; stale versions are refused.",
    )
    comment = serializers.CharField(required=False, allow_blank=True, default="")
