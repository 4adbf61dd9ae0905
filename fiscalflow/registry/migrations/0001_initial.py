import django.core.validators
import django.db.models.deletion
from django.db import migrations
from django.db import models


def _id():
    return models.BigAutoField(
        auto_created=True, primary_key=True, serialize=False, verbose_name="ID"
    )


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        ("org", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Vendor",
            fields=[
                ("id", _id()),
                ("company_name", models.CharField(max_length=200, unique=True)),
                ("address", models.CharField(max_length=255)),
                ("country", models.CharField(max_length=100)),
                ("city", models.CharField(max_length=100)),
                ("email", models.EmailField(max_length=254)),
                ("telephone", models.CharField(max_length=50)),
                ("fax", models.CharField(blank=True, max_length=50)),
                ("whatsapp", models.CharField(blank=True, max_length=50)),
                ("website", models.URLField(blank=True)),
                (
                    "account_manager",
                    models.JSONField(
                        default=dict,
                        help_text="name, designation, email, telephone, mobile, whatsapp",
                    ),
                ),
                (
                    "tech_support",
                    models.JSONField(
                        blank=True,
                        default=list,
                        help_text="Up to three support contacts: name, email, telephone, mobile",  # noqa: E501
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={"ordering": ["company_name"]},
        ),
        migrations.CreateModel(
            name="RegistryItem",
            fields=[
                ("id", _id()),
                (
                    "kind",
                    models.CharField(
                        choices=[("service", "Service"), ("device", "Device")],
                        max_length=10,
                    ),
                ),
                ("description", models.TextField()),
                ("service_start_date", models.DateField(blank=True, null=True)),
                ("service_end_date", models.DateField(blank=True, null=True)),
                ("model", models.CharField(blank=True, max_length=100)),
                ("make", models.CharField(blank=True, max_length=100)),
                ("country_of_make", models.CharField(blank=True, max_length=100)),
                ("part_number", models.CharField(blank=True, max_length=100)),
                ("serial_number", models.CharField(blank=True, max_length=100)),
                ("mac_address", models.CharField(blank=True, max_length=50)),
                ("manufacture_date", models.DateField(blank=True, null=True)),
                ("expire_date", models.DateField(blank=True, null=True)),
                ("end_of_sales_date", models.DateField(blank=True, null=True)),
                ("end_of_support_date", models.DateField(blank=True, null=True)),
                ("end_of_life_date", models.DateField(blank=True, null=True)),
                ("warranty_start_date", models.DateField(blank=True, null=True)),
                ("warranty_end_date", models.DateField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "supplier",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="registry_items",
                        to="registry.vendor",
                    ),
                ),
            ],
            options={"ordering": ["kind", "description"]},
        ),
        migrations.CreateModel(
            name="Contract",
            fields=[
                ("id", _id()),
                ("description", models.TextField()),
                (
                    "quantity",
                    models.PositiveIntegerField(
                        validators=[django.core.validators.MinValueValidator(1)]
                    ),
                ),
                ("contract_period", models.CharField(max_length=100)),
                (
                    "contract_amount",
                    models.DecimalField(
                        decimal_places=2,
                        max_digits=16,
                        validators=[django.core.validators.MinValueValidator(0)],
                    ),
                ),
                ("payment_terms", models.CharField(max_length=255)),
                ("service_start_date", models.DateField()),
                ("service_end_date", models.DateField()),
                ("next_renewal_date", models.DateField(blank=True, null=True)),
                ("contract_status", models.CharField(blank=True, max_length=50)),
                ("pr_create_date", models.DateField(blank=True, null=True)),
                ("pr_approve_date", models.DateField(blank=True, null=True)),
                ("lpo_issue_date", models.DateField(blank=True, null=True)),
                ("lpo_number", models.CharField(blank=True, max_length=100)),
                ("invoice_received_date", models.DateField(blank=True, null=True)),
                ("invoice_to_finance_date", models.DateField(blank=True, null=True)),
                ("payment_sent_date", models.DateField(blank=True, null=True)),
                ("remarks", models.TextField(blank=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "main_department",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="contracts",
                        to="org.department",
                    ),
                ),
                (
                    "sub_department",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="contracts",
                        to="org.subdepartment",
                    ),
                ),
                (
                    "supplier",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="contracts",
                        to="registry.vendor",
                    ),
                ),
            ],
            options={"ordering": ["service_end_date"]},
        ),
    ]
