from django.contrib import admin

from fiscalflow.registry import models


@admin.register(models.Vendor)
class VendorAdmin(admin.ModelAdmin):
    list_display = ["id", "company_name", "country", "city", "email"]
    search_fields = ["company_name", "email"]


@admin.register(models.RegistryItem)
class RegistryItemAdmin(admin.ModelAdmin):
    list_display = ["id", "kind", "description", "supplier"]
    list_filter = ["kind"]


@admin.register(models.Contract)
class ContractAdmin(admin.ModelAdmin):
    list_display = ["id", "description", "supplier", "service_end_date"]
    list_filter = ["contract_status"]
