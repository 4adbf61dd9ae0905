from django.urls import path

from fiscalflow.audit.api.views import AuditLogListView

app_name = "audit"

urlpatterns = [
    path("logs/", AuditLogListView.as_view(), name="logs"),
]
