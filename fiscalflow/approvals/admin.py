from django.contrib import admin

from fiscalflow.approvals import models
from fiscalflow.approvals.services import waiting_sheet_ids


@admin.register(models.ApproverRole)
class ApproverRoleAdmin(admin.ModelAdmin):
    list_display = ["id", "code", "name"]
    search_fields = ["code", "name"]

    def get_readonly_fields(self, request, obj=None):
        if obj is not None:
            return ["code"]
        return []

    def has_delete_permission(self, request, obj=None):
        if obj is not None and waiting_sheet_ids(obj.code):
            return False
        return super().has_delete_permission(request, obj)


class ApprovalLevelInline(admin.TabularInline):
    model = models.ApprovalLevel
    extra = 0


@admin.register(models.ApprovalWorkflow)
class ApprovalWorkflowAdmin(admin.ModelAdmin):
    list_display = ["workflow_type", "updated_at"]
    inlines = [ApprovalLevelInline]


@admin.register(models.ApprovalItem)
class ApprovalItemAdmin(admin.ModelAdmin):
    list_display = ["id", "sheet", "level", "approver_role_code", "status"]
    list_filter = ["status", "item_type", "approver_role_code"]
