import importlib

from django.apps import AppConfig


class AuditConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "fiscalflow.audit"

    def ready(self) -> None:  # pragma: no cover
        importlib.import_module("fiscalflow.audit.signals")
        return super().ready()
