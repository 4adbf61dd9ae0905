import copy

from django.core.exceptions import ValidationError as DjangoValidationError
from rest_framework import serializers

from fiscalflow.registry.models import Contract
from fiscalflow.registry.models import RegistryItem
from fiscalflow.registry.models import Vendor


class ModelCleanMixin:
    """Run the model's ``clean()`` against the incoming data."""

    def validate(self, attrs):
        attrs = super().validate(attrs)
        candidate = copy.copy(self.instance) if self.instance else self.Meta.model()
        for field, value in attrs.items():
            setattr(candidate, field, value)
        try:
            candidate.clean()
        except DjangoValidationError as exc:
            raise serializers.ValidationError(
                serializers.as_serializer_error(exc)
            ) from exc
        return attrs


class AccountManagerSerializer(serializers.Serializer):
    name = serializers.CharField()
    designation = serializers.CharField()
    email = serializers.EmailField()
    telephone = serializers.CharField(required=False, allow_blank=True)
    mobile = serializers.CharField(required=False, allow_blank=True)
    whatsapp = serializers.CharField(required=False, allow_blank=True)


class TechSupportSerializer(serializers.Serializer):
    name = serializers.CharField(required=False, allow_blank=True)
    email = serializers.EmailField(required=False, allow_blank=True)
    telephone = serializers.CharField(required=False, allow_blank=True)
    mobile = serializers.CharField(required=False, allow_blank=True)


class VendorSerializer(serializers.ModelSerializer):
    account_manager = AccountManagerSerializer()
    tech_support = TechSupportSerializer(many=True, required=False)

    class Meta:
        model = Vendor
        fields = [
            "id",
            "company_name",
            "address",
            "country",
            "city",
            "email",
            "telephone",
            "fax",
            "whatsapp",
            "website",
            "account_manager",
            "tech_support",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["created_at", "updated_at"]

    def validate_tech_support(self, value):
        # Blank contact slots are dropped.
        contacts = [contact for contact in value if any(contact.values())]
        if len(contacts) > 3:  # noqa: PLR2004
            msg = "At most three tech support contacts."
            raise serializers.ValidationError(msg)
        return contacts

    def create(self, validated_data):
        return Vendor.objects.create(**validated_data)

    def update(self, instance, validated_data):
        for field, value in validated_data.items():
            setattr(instance, field, value)
        instance.save()
        return instance


class RegistryItemSerializer(ModelCleanMixin, serializers.ModelSerializer):
    supplier_name = serializers.CharField(
        source="supplier.company_name", read_only=True, default=None
    )

    class Meta:
        model = RegistryItem
        fields = [
            "id",
            "kind",
            "description",
            "supplier",
            "supplier_name",
            "service_start_date",
            "service_end_date",
            "model",
            "make",
            "country_of_make",
            "part_number",
            "serial_number",
            "mac_address",
            "manufacture_date",
            "expire_date",
            "end_of_sales_date",
            "end_of_support_date",
            "end_of_life_date",
            "warranty_start_date",
            "warranty_end_date",
            "created_at",
        ]
        read_only_fields = ["created_at"]


class ContractSerializer(ModelCleanMixin, serializers.ModelSerializer):
    supplier_name = serializers.CharField(
        source="supplier.company_name", read_only=True
    )

    class Meta:
        model = Contract
        fields = [
            "id",
            "description",
            "quantity",
            "supplier",
            "supplier_name",
            "main_department",
            "sub_department",
            "contract_period",
            "contract_amount",
            "payment_terms",
            "service_start_date",
            "service_end_date",
            "next_renewal_date",
            "contract_status",
            "pr_create_date",
            "pr_approve_date",
            "lpo_issue_date",
            "lpo_number",
            "invoice_received_date",
            "invoice_to_finance_date",
            "payment_sent_date",
            "remarks",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["created_at", "updated_at"]
