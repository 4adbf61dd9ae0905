from drf_spectacular.utils import extend_schema
from rest_framework import viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from fiscalflow.core.exceptions import ValidationError
from fiscalflow.org import services
from fiscalflow.org.models import Department
from fiscalflow.org.models import Group
from fiscalflow.org.models import Organization
from fiscalflow.org.models import SubDepartment
from fiscalflow.users.api.permissions import HasModulePermission
from fiscalflow.users.models import ModuleKey

from .serializers import AncestorSerializer
from .serializers import DepartmentSerializer
from .serializers import GroupSerializer
from .serializers import OrganizationSerializer
from .serializers import SubDepartmentSerializer


class HierarchyNodeViewSet(viewsets.ModelViewSet):
    """Shared CRUD for the four hierarchy levels.

    Writes go through ``fiscalflow.org.services`` so parent checks and the
    no-implicit-cascade rule apply to API callers too.
    """

    permission_classes = [IsAuthenticated, HasModulePermission]
    module_key = ModuleKey.COMPANY_PROFILE
    node_kind: str = ""
    parent_field: str | None = None

    def create_node(self, name, parent):
        raise NotImplementedError

    def perform_create(self, serializer):
        data = serializer.validated_data
        parent = data.get(self.parent_field) if self.parent_field else None
        serializer.instance = self.create_node(data["name"], parent)

    def perform_update(self, serializer):
        instance = serializer.instance
        data = serializer.validated_data
        if self.parent_field and self.parent_field in data:
            self.change_parent(instance, data[self.parent_field])
        if "name" in data and data["name"] != instance.name:
            services.rename_node(instance, data["name"])

    def change_parent(self, instance, parent):
        if parent.pk != getattr(instance, f"{self.parent_field}_id"):
            msg = f"The {self.parent_field.replace('_', ' ')} cannot be changed."
            raise ValidationError(msg, details={self.parent_field: msg})

    def perform_destroy(self, instance):
        services.delete_node(instance, actor=self.request.user)

    @extend_schema(responses=AncestorSerializer(many=True))
    @action(detail=True, methods=["get"])
    def ancestors(self, request, pk=None):
        node = self.get_object()
        chain = services.resolve_ancestors(self.node_kind, node.pk)
        kinds = list(services.NODE_MODELS)
        data = [
            {"kind": kinds[depth], "id": item.pk, "name": item.name}
            for depth, item in enumerate(chain)
        ]
        return Response(AncestorSerializer(data, many=True).data)


class GroupViewSet(HierarchyNodeViewSet):
    queryset = Group.objects.all()
    serializer_class = GroupSerializer
    node_kind = "group"

    def create_node(self, name, parent):
        return services.create_group(name)


class OrganizationViewSet(HierarchyNodeViewSet):
    queryset = Organization.objects.select_related("group")
    serializer_class = OrganizationSerializer
    filterset_fields = ["group"]
    node_kind = "organization"
    parent_field = "group"

    def create_node(self, name, parent):
        return services.create_organization(name, parent.pk)

    def change_parent(self, instance, parent):
        services.move_organization(instance, parent.pk)


class DepartmentViewSet(HierarchyNodeViewSet):
    queryset = Department.objects.select_related("organization")
    serializer_class = DepartmentSerializer
    filterset_fields = ["organization"]
    node_kind = "department"
    parent_field = "organization"

    def create_node(self, name, parent):
        return services.create_department(name, parent.pk)


class SubDepartmentViewSet(HierarchyNodeViewSet):
    queryset = SubDepartment.objects.select_related("department")
    serializer_class = SubDepartmentSerializer
    filterset_fields = ["department"]
    node_kind = "sub_department"
    parent_field = "department"

    def create_node(self, name, parent):
        return services.create_sub_department(name, parent.pk)
