from django.db.models import ProtectedError
from rest_framework import viewsets
from rest_framework.permissions import IsAuthenticated

from fiscalflow.core.exceptions import ConflictError
from fiscalflow.registry.models import Contract
from fiscalflow.registry.models import RegistryItem
from fiscalflow.registry.models import Vendor
from fiscalflow.users.api.permissions import HasModulePermission
from fiscalflow.users.models import ModuleKey

from .serializers import ContractSerializer
from .serializers import RegistryItemSerializer
from .serializers import VendorSerializer


class RegistryViewSet(viewsets.ModelViewSet):
    permission_classes = [IsAuthenticated, HasModulePermission]

    def perform_destroy(self, instance):
        try:
            instance.delete()
        except ProtectedError as exc:
            referenced_by = sorted({type(o).__name__ for o in exc.protected_objects})
            msg = f"{type(instance).__name__} '{instance}' is still referenced."
            raise ConflictError(msg, details={"referenced_by": referenced_by}) from exc


class VendorViewSet(RegistryViewSet):
    queryset = Vendor.objects.all()
    serializer_class = VendorSerializer
    module_key = ModuleKey.VENDORS
    filterset_fields = ["country", "city"]


class RegistryItemViewSet(RegistryViewSet):
    queryset = RegistryItem.objects.select_related("supplier")
    serializer_class = RegistryItemSerializer
    module_key = ModuleKey.ITEM_REGISTRY
    filterset_fields = ["kind", "supplier"]


class ContractViewSet(RegistryViewSet):
    queryset = Contract.objects.select_related(
        "supplier", "main_department", "sub_department"
    )
    serializer_class = ContractSerializer
    module_key = ModuleKey.CONTRACTS
    filterset_fields = ["supplier", "main_department", "contract_status"]
