from django.contrib import admin

from fiscalflow.budgets import models


class BudgetItemInline(admin.TabularInline):
    model = models.BudgetItem
    extra = 0


@admin.register(models.BudgetSheet)
class BudgetSheetAdmin(admin.ModelAdmin):
    list_display = ["id", "sheet_type", "organization", "department", "year", "status"]
    list_filter = ["sheet_type", "status", "year"]
    readonly_fields = ["version", "workflow_snapshot", "current_level"]
    inlines = [BudgetItemInline]
