from __future__ import annotations

from django_filters import rest_framework as filters
from rest_framework.generics import ListAPIView
from rest_framework.permissions import IsAdminUser

from fiscalflow.audit.api.serializers import AuditLogSerializer
from fiscalflow.audit.models import AuditLog


class AuditLogFilter(filters.FilterSet):
    since = filters.IsoDateTimeFilter(field_name="created_at", lookup_expr="gte")

    class Meta:
        model = AuditLog
        fields = ["action", "model_name", "record_id", "actor"]


class AuditLogListView(ListAPIView):
    """Audit trail, newest first. Staff only."""

    permission_classes = [IsAdminUser]
    serializer_class = AuditLogSerializer
    filterset_class = AuditLogFilter
    queryset = AuditLog.objects.select_related("actor")
