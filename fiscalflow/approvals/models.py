from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from django.utils.translation import gettext_lazy as _


class ApproverRole(models.Model):
    """Stable approver identity; ``name`` is only a display label."""

    code = models.SlugField(max_length=64, unique=True)
    name = models.CharField(max_length=150)
    description = models.TextField(blank=True, default="")

    class Meta:
        ordering = ["name"]

    def __str__(self) -> str:  # pragma: no cover - trivial
        return self.name


class ApprovalWorkflow(models.Model):
    class Type(models.TextChoices):
        BUDGET = "budget", _("Budget")
        CONTRACT = "contract", _("Contract")

    workflow_type = models.CharField(max_length=20, choices=Type.choices, unique=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["workflow_type"]

    def __str__(self) -> str:  # pragma: no cover - trivial
        return self.get_workflow_type_display()


class ApprovalLevel(models.Model):
    workflow = models.ForeignKey(
        ApprovalWorkflow, on_delete=models.CASCADE, related_name="levels"
    )
    level = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    approver_role = models.ForeignKey(
        ApproverRole, on_delete=models.PROTECT, related_name="approval_levels"
    )
    description = models.TextField(blank=True, default="")

    class Meta:
        ordering = ["workflow", "level"]
        constraints = [
            models.UniqueConstraint(
                fields=["workflow", "level"], name="uniq_level_per_workflow"
            ),
        ]

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f"{self.workflow} L{self.level}: {self.approver_role}"


class ApprovalItem(models.Model):
    """One sheet waiting on (or decided by) one approval level."""

    class Status(models.TextChoices):
        PENDING = "Pending", _("Pending")
        APPROVED = "Approved", _("Approved")
        REJECTED = "Rejected", _("Rejected")

    sheet = models.ForeignKey(
        "budgets.BudgetSheet", on_delete=models.CASCADE, related_name="approval_items"
    )
    item_type = models.CharField(max_length=10)
    organization = models.ForeignKey(
        "org.Organization", on_delete=models.PROTECT, related_name="+"
    )
    department = models.ForeignKey(
        "org.Department", on_delete=models.PROTECT, related_name="+"
    )
    year = models.PositiveIntegerField()
    total_value = models.DecimalField(max_digits=20, decimal_places=2)
    level = models.PositiveIntegerField()
    approver_role_code = models.SlugField(max_length=64, db_index=True)
    approver_role_name = models.CharField(max_length=150, blank=True)
    submitted_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        related_name="submitted_approval_items",
    )
    submitted_on = models.DateTimeField()
    status = models.CharField(
        max_length=20, choices=Status.choices, default=Status.PENDING
    )
    acted_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="decided_approval_items",
    )
    acted_on = models.DateTimeField(null=True, blank=True)
    comment = models.TextField(blank=True, default="")

    class Meta:
        ordering = ["-submitted_on", "level"]

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f"{self.item_type} sheet {self.sheet_id} L{self.level} ({self.status})"
