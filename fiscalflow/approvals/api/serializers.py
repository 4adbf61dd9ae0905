from rest_framework import serializers

from fiscalflow.approvals.models import ApprovalItem
from fiscalflow.approvals.models import ApprovalLevel
from fiscalflow.approvals.models import ApprovalWorkflow
from fiscalflow.approvals.models import ApproverRole


class ApproverRoleSerializer(serializers.ModelSerializer):
    """``code`` is fixed once created; in-flight sheets refer to it."""

    class Meta:
        model = ApproverRole
        fields = ["id", "code", "name", "description"]

    def get_extra_kwargs(self):
        extra_kwargs = super().get_extra_kwargs()
        if self.instance is not None:
            extra_kwargs.setdefault("code", {})["read_only"] = True
        return extra_kwargs


class ApprovalLevelSerializer(serializers.ModelSerializer):
    approver_role = serializers.SlugRelatedField(
        slug_field="code", queryset=ApproverRole.objects.all()
    )
    approver_role_name = serializers.CharField(
        source="approver_role.name", read_only=True
    )

    class Meta:
        model = ApprovalLevel
        fields = ["level", "approver_role", "approver_role_name", "description"]


class ApprovalWorkflowSerializer(serializers.ModelSerializer):
    levels = ApprovalLevelSerializer(many=True, read_only=True)

    class Meta:
        model = ApprovalWorkflow
        fields = ["workflow_type", "levels", "updated_at"]
        read_only_fields = fields


class LevelInputSerializer(serializers.Serializer):
    level = serializers.IntegerField(min_value=1)
    approver_role = serializers.SlugRelatedField(
        slug_field="code", queryset=ApproverRole.objects.all()
    )
    description = serializers.CharField(required=False, allow_blank=True, default="")


class ApprovalMatrixUpdateSerializer(serializers.Serializer):
    levels = LevelInputSerializer(many=True)


class ApprovalItemSerializer(serializers.ModelSerializer):
    organization_name = serializers.CharField(
        source="organization.name", read_only=True
    )
    department_name = serializers.CharField(source="department.name", read_only=True)
    submitted_by_name = serializers.SerializerMethodField()
    sheet_version = serializers.IntegerField(source="sheet.version", read_only=True)

    class Meta:
        model = ApprovalItem
        fields = [
            "id",
            "sheet",
            "sheet_version",
            "item_type",
            "organization",
            "organization_name",
            "department",
            "department_name",
            "year",
            "total_value",
            "level",
            "approver_role_code",
            "approver_role_name",
            "submitted_by",
            "submitted_by_name",
            "submitted_on",
            "status",
        ]
        read_only_fields = fields

    def get_submitted_by_name(self, obj: ApprovalItem) -> str | None:
        user = obj.submitted_by
        if user is None:
            return None
        return user.name or user.username
