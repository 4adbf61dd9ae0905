from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models
from django.utils.translation import gettext_lazy as _


class Vendor(models.Model):
    company_name = models.CharField(max_length=200, unique=True)
    address = models.CharField(max_length=255)
    country = models.CharField(max_length=100)
    city = models.CharField(max_length=100)
    email = models.EmailField()
    telephone = models.CharField(max_length=50)
    fax = models.CharField(max_length=50, blank=True)
    whatsapp = models.CharField(max_length=50, blank=True)
    website = models.URLField(blank=True)
    account_manager = models.JSONField(
        default=dict,
        help_text=_("name, designation, email, telephone, mobile, whatsapp"),
    )
    tech_support = models.JSONField(
        default=list,
        blank=True,
        help_text=_("Up to three support contacts: name, email, telephone, mobile"),
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["company_name"]

    def __str__(self) -> str:  # pragma: no cover - trivial
        return self.company_name


class RegistryItem(models.Model):
    class Kind(models.TextChoices):
        SERVICE = "service", _("Service")
        DEVICE = "device", _("Device")

    kind = models.CharField(max_length=10, choices=Kind.choices)
    description = models.TextField()
    # service
    supplier = models.ForeignKey(
        Vendor,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="registry_items",
    )
    service_start_date = models.DateField(null=True, blank=True)
    service_end_date = models.DateField(null=True, blank=True)
    # device
    model = models.CharField(max_length=100, blank=True)
    make = models.CharField(max_length=100, blank=True)
    country_of_make = models.CharField(max_length=100, blank=True)
    part_number = models.CharField(max_length=100, blank=True)
    serial_number = models.CharField(max_length=100, blank=True)
    mac_address = models.CharField(max_length=50, blank=True)
    manufacture_date = models.DateField(null=True, blank=True)
    expire_date = models.DateField(null=True, blank=True)
    end_of_sales_date = models.DateField(null=True, blank=True)
    end_of_support_date = models.DateField(null=True, blank=True)
    end_of_life_date = models.DateField(null=True, blank=True)
    warranty_start_date = models.DateField(null=True, blank=True)
    warranty_end_date = models.DateField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["kind", "description"]

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f"{self.kind}: {self.description[:40]}"

    def clean(self):
        if self.kind == self.Kind.SERVICE:
            missing = [
                f
                for f in ("supplier", "service_start_date", "service_end_date")
                if getattr(self, f) in (None, "")
            ]
            if missing:
                raise ValidationError({f: _("Required for services.") for f in missing})
            if self.service_start_date > self.service_end_date:
                raise ValidationError(_("Service start date cannot be after end date."))


class Contract(models.Model):
    description = models.TextField()
    quantity = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    supplier = models.ForeignKey(
        Vendor, on_delete=models.PROTECT, related_name="contracts"
    )
    main_department = models.ForeignKey(
        "org.Department", on_delete=models.PROTECT, related_name="contracts"
    )
    sub_department = models.ForeignKey(
        "org.SubDepartment", on_delete=models.PROTECT, related_name="contracts"
    )
    contract_period = models.CharField(max_length=100)
    contract_amount = models.DecimalField(
        max_digits=16, decimal_places=2, validators=[MinValueValidator(0)]
    )
    payment_terms = models.CharField(max_length=255)
    service_start_date = models.DateField()
    service_end_date = models.DateField()
    next_renewal_date = models.DateField(null=True, blank=True)
    contract_status = models.CharField(max_length=50, blank=True)
    # procurement milestones
    pr_create_date = models.DateField(null=True, blank=True)
    pr_approve_date = models.DateField(null=True, blank=True)
    lpo_issue_date = models.DateField(null=True, blank=True)
    lpo_number = models.CharField(max_length=100, blank=True)
    invoice_received_date = models.DateField(null=True, blank=True)
    invoice_to_finance_date = models.DateField(null=True, blank=True)
    payment_sent_date = models.DateField(null=True, blank=True)
    remarks = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["service_end_date"]

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f"{self.description[:40]} ({self.supplier})"

    def clean(self):
        if (
            self.sub_department_id
            and self.main_department_id
            and self.sub_department.department_id != self.main_department_id
        ):
            raise ValidationError(
                {"sub_department": _("Sub-department must belong to the department.")}
            )
        if (
            self.service_start_date
            and self.service_end_date
            and self.service_start_date > self.service_end_date
        ):
            raise ValidationError(_("Service start date cannot be after end date."))
