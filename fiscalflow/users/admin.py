from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin

from fiscalflow.users import models


class ModulePermissionInline(admin.TabularInline):
    model = models.ModulePermission
    extra = 0


@admin.register(models.User)
class UserAdmin(BaseUserAdmin):
    list_display = ["username", "email", "name", "department", "user_role"]
    fieldsets = (
        *BaseUserAdmin.fieldsets,
        (
            "FiscalFlow",
            {
                "fields": (
                    "mobile",
                    "group",
                    "organization",
                    "department",
                    "sub_department",
                    "user_role",
                )
            },
        ),
    )
    inlines = [ModulePermissionInline]
