from django.contrib import admin

from fiscalflow.org import models


@admin.register(models.Group)
class GroupAdmin(admin.ModelAdmin):
    list_display = ["id", "name", "created_at"]
    search_fields = ["name"]


@admin.register(models.Organization)
class OrganizationAdmin(admin.ModelAdmin):
    list_display = ["id", "name", "group"]
    search_fields = ["name", "group__name"]
    list_filter = ["group"]

    def get_readonly_fields(self, request, obj=None):
        # Same rule as services.move_organization.
        if obj is not None and obj.departments.exists():
            return ["group"]
        return []


@admin.register(models.Department)
class DepartmentAdmin(admin.ModelAdmin):
    list_display = ["id", "name", "organization"]
    search_fields = ["name", "organization__name"]
    list_filter = ["organization"]


@admin.register(models.SubDepartment)
class SubDepartmentAdmin(admin.ModelAdmin):
    list_display = ["id", "name", "department"]
    search_fields = ["name", "department__name"]
    list_filter = ["department__organization"]
