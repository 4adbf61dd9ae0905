from django.contrib.auth.models import AbstractUser
from django.db import models
from django.db.models import CharField
from django.db.models import EmailField
from django.utils.translation import gettext_lazy as _


class ModuleKey(models.TextChoices):
    """Screens/areas whose access is configured per user."""

    DASHBOARD = "/dashboard", _("Dashboard")
    CAPEX_ANALYSIS = "/capex-analysis", _("CAPEX Analysis")
    OPEX_TRACKER = "/opex-tracker", _("OPEX Tracker")
    OPEX_REGISTRY = "/opex-registry", _("OPEX Registry")
    CONTRACTS = "/contracts", _("Contracts")
    BUDGET_FORECASTING = "/budget-forecasting", _("Budget Forecasting")
    CAPEX_REGISTRY = "/capex-registry", _("CAPEX Registry")
    ITEM_REGISTRY = "/item-registry", _("Item Registry")
    COMPANY_PROFILE = "/master-data/company-profile", _("Company Profile")
    VENDORS = "/master-data/vendors", _("Vendors")
    APPROVALS_INBOX = "/approvals/inbox", _("Approval Inbox")
    REPORTS = "/reports", _("Reports")
    REPORTS_CAPEX = "/reports/capex", _("CAPEX Reports")
    REPORTS_OPEX = "/reports/opex", _("OPEX Reports")
    REPORTS_CONTRACTS = "/reports/contracts", _("Contract Reports")
    REPORTS_VENDORS = "/reports/vendors", _("Vendor Reports")
    REPORTS_USER_ACCESS = "/reports/user-access-rights", _("User Access Rights")
    APPROVAL_MATRIX = "/settings/approval-matrix", _("Approval Matrix")
    USER_REGISTRATION = "/settings/user-registration", _("User Registration")


class AccessLevel(models.TextChoices):
    NONE = "none", _("No access")
    READ = "read", _("Read")
    WRITE = "write", _("Write")
    FULL = "full", _("Full")


class User(AbstractUser):
    """
    Custom user model for fiscalflow.

    Users belong to one hierarchy scope and may hold one approver role, which
    is what the approval engine matches against.
    """

    # First and last name do not cover name patterns around the globe
    name = CharField(_("Full Name"), blank=True, max_length=255)
    email = EmailField(_("email address"), unique=True)
    first_name = CharField(_("First Name"), max_length=150, blank=True)
    last_name = CharField(_("Last Name"), max_length=150, blank=True)
    mobile = CharField(_("Mobile"), max_length=50, blank=True)

    group = models.ForeignKey(
        "org.Group",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="users",
    )
    organization = models.ForeignKey(
        "org.Organization",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="users",
    )
    department = models.ForeignKey(
        "org.Department",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="users",
    )
    sub_department = models.ForeignKey(
        "org.SubDepartment",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="users",
    )
    user_role = models.ForeignKey(
        "approvals.ApproverRole",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="users",
        help_text=_("Approver role used to match approval levels"),
    )
    # Audit timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def save(self, *args, **kwargs):
        full_name = f"{self.first_name} {self.last_name}".strip()
        self.name = full_name
        super().save(*args, **kwargs)

    @property
    def role_code(self) -> str | None:
        role = self.user_role
        return role.code if role is not None else None


class ModulePermission(models.Model):
    """Access level of one user on one module; absent rows mean ``none``."""

    user = models.ForeignKey(
        User, on_delete=models.CASCADE, related_name="module_permissions"
    )
    module_key = models.CharField(max_length=100, choices=ModuleKey.choices)
    level = models.CharField(
        max_length=10, choices=AccessLevel.choices, default=AccessLevel.NONE
    )
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["user_id", "module_key"]
        constraints = [
            models.UniqueConstraint(
                fields=["user", "module_key"], name="uniq_module_permission_per_user"
            ),
        ]

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f"{self.user_id} {self.module_key}={self.level}"
