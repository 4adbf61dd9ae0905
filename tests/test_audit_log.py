from __future__ import annotations

from decimal import Decimal

from django.utils import timezone

from fiscalflow.audit.models import AuditLog
from fiscalflow.audit.utils import log_action
from tests.permissions.mixins import RoleAPITestCase


class TestAuditLogEndpoint(RoleAPITestCase):
    def test_audit_log_requires_staff(self):
        denied = self.get("api_v1:audit:logs", role="owner")
        self.assert_http_status(denied, 403)

        allowed = self.get("api_v1:audit:logs", role="admin")
        self.assert_http_status(allowed, 200)

    def test_newest_first_and_filterable(self):
        AuditLog.objects.all().delete()
        base = timezone.now()
        created = [
            log_action(f"test_action_{i}", message=str(i), model_name="BudgetSheet")
            for i in range(3)
        ]
        for i, row in enumerate(created):
            AuditLog.objects.filter(pk=row.pk).update(
                created_at=base + timezone.timedelta(seconds=i)
            )

        res = self.get("api_v1:audit:logs", role="admin")
        actions = [r["action"] for r in res.data["results"]]
        assert actions == ["test_action_2", "test_action_1", "test_action_0"]

        res = self.get("api_v1:audit:logs", role="admin", data={"action": "test_action_1"})
        assert [r["message"] for r in res.data["results"]] == ["1"]

    def test_payloads_are_stored_as_json(self):
        entry = log_action(
            "budget_sheet_approved",
            before={"total": Decimal("10.50")},
            after={"status": "Approved"},
        )
        entry.refresh_from_db()
        assert entry.before == {"total": "10.50"}
        assert entry.actor is None
