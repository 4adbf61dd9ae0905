from decimal import Decimal

from django.conf import settings
from django.core.validators import MaxValueValidator
from django.core.validators import MinValueValidator
from django.db import models
from django.utils.translation import gettext_lazy as _

PERIOD_MULTIPLIERS = {"Monthly": 12, "Quarterly": 4, "Annually": 1}


class SheetType(models.TextChoices):
    CAPEX = "CAPEX", _("CAPEX")
    OPEX = "OPEX", _("OPEX")


class BudgetSheet(models.Model):
    class Status(models.TextChoices):
        DRAFT = "Draft", _("Draft")
        PENDING_APPROVAL = "Pending Approval", _("Pending Approval")
        APPROVED = "Approved", _("Approved")
        REJECTED = "Rejected", _("Rejected")

    sheet_type = models.CharField(max_length=10, choices=SheetType.choices)
    organization = models.ForeignKey(
        "org.Organization", on_delete=models.PROTECT, related_name="budget_sheets"
    )
    department = models.ForeignKey(
        "org.Department", on_delete=models.PROTECT, related_name="budget_sheets"
    )
    year = models.PositiveIntegerField(
        validators=[MinValueValidator(2000), MaxValueValidator(2100)]
    )
    status = models.CharField(
        max_length=20, choices=Status.choices, default=Status.DRAFT
    )
    current_level = models.PositiveIntegerField(
        null=True, blank=True, help_text=_("Level number while pending approval")
    )
    # Bumped on every workflow transition; used for optimistic locking.
    version = models.PositiveIntegerField(default=1)
    workflow_snapshot = models.JSONField(
        default=list,
        blank=True,
        help_text=_("Approval levels captured when the sheet was submitted"),
    )
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        related_name="created_budget_sheets",
    )
    submitted_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="submitted_budget_sheets",
    )
    submitted_on = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-year", "-created_at"]

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f"{self.sheet_type} {self.year} ({self.status})"

    @property
    def total_value(self) -> Decimal:
        from fiscalflow.budgets.services import compute_total  # noqa: PLC0415

        return compute_total(self)

    @property
    def is_terminal(self) -> bool:
        return self.status in {self.Status.APPROVED, self.Status.REJECTED}


class BudgetItem(models.Model):
    class Priority(models.TextChoices):
        HIGH = "High", _("High")
        MEDIUM = "Medium", _("Medium")
        LOW = "Low", _("Low")

    class Period(models.TextChoices):
        MONTHLY = "Monthly", _("Monthly")
        QUARTERLY = "Quarterly", _("Quarterly")
        ANNUALLY = "Annually", _("Annually")

    class Implementation(models.TextChoices):
        NEW = "New", _("New")
        RENEWAL = "Renewal", _("Renewal")
        ONGOING = "Ongoing", _("Ongoing")

    class ServiceStatus(models.TextChoices):
        ACTIVE = "Active", _("Active")
        INACTIVE = "Inactive", _("Inactive")
        TO_BE_RENEWED = "To be Renewed", _("To be Renewed")

    sheet = models.ForeignKey(BudgetSheet, on_delete=models.CASCADE, related_name="items")
    position = models.PositiveIntegerField(default=0)
    description = models.TextField()
    amount = models.DecimalField(
        max_digits=14, decimal_places=2, validators=[MinValueValidator(0)]
    )
    remarks = models.TextField(blank=True, default="")
    # CAPEX
    quantity = models.PositiveIntegerField(null=True, blank=True)
    priority = models.CharField(max_length=10, choices=Priority.choices, blank=True)
    justification = models.TextField(blank=True, default="")
    # OPEX
    period = models.CharField(max_length=20, choices=Period.choices, blank=True)
    implementation = models.CharField(
        max_length=20, choices=Implementation.choices, blank=True
    )
    service_status = models.CharField(
        max_length=20, choices=ServiceStatus.choices, blank=True
    )
    supplier = models.ForeignKey(
        "registry.Vendor",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="budget_items",
    )

    class Meta:
        ordering = ["sheet", "position", "id"]

    def __str__(self) -> str:  # pragma: no cover - trivial
        return self.description[:50]
