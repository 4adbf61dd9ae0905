from rest_framework import serializers

from fiscalflow.org.models import Department
from fiscalflow.org.models import Group
from fiscalflow.org.models import Organization
from fiscalflow.org.models import SubDepartment


class GroupSerializer(serializers.ModelSerializer):
    class Meta:
        model = Group
        fields = ["id", "name", "created_at", "updated_at"]
        read_only_fields = ["created_at", "updated_at"]


class OrganizationSerializer(serializers.ModelSerializer):
    group_name = serializers.CharField(source="group.name", read_only=True)

    class Meta:
        model = Organization
        fields = ["id", "name", "group", "group_name", "created_at", "updated_at"]
        read_only_fields = ["created_at", "updated_at"]


class DepartmentSerializer(serializers.ModelSerializer):
    organization_name = serializers.CharField(
        source="organization.name", read_only=True
    )

    class Meta:
        model = Department
        fields = [
            "id",
            "name",
            "organization",
            "organization_name",
            "created_at",
            "updated_at",
        ]
        read_only_fields = ["created_at", "updated_at"]


class SubDepartmentSerializer(serializers.ModelSerializer):
    department_name = serializers.CharField(source="department.name", read_only=True)

    class Meta:
        model = SubDepartment
        fields = ["id", "name", "department", "department_name", "created_at", "updated_at"]
        read_only_fields = ["created_at", "updated_at"]


class AncestorSerializer(serializers.Serializer):
    kind = serializers.CharField()
    id = serializers.IntegerField()
    name = serializers.CharField()
