from django.db import transaction
from rest_framework import serializers
from rest_framework.validators import UniqueValidator

from fiscalflow.approvals.models import ApproverRole
from fiscalflow.core.exceptions import ValidationError as DomainValidationError
from fiscalflow.users.access import permission_map
from fiscalflow.users.access import set_permissions
from fiscalflow.users.access import validate_permission_map
from fiscalflow.users.models import User

SCOPE_CHAIN = (
    ("organization", "group"),
    ("department", "organization"),
    ("sub_department", "department"),
)


class UserSerializer(serializers.ModelSerializer[User]):
    full_name = serializers.CharField(source="name", read_only=True)
    user_role = serializers.SlugRelatedField(slug_field="code", read_only=True)
    permissions = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = [
            "id",
            "username",
            "email",
            "first_name",
            "last_name",
            "full_name",
            "mobile",
            "group",
            "organization",
            "department",
            "sub_department",
            "user_role",
            "is_active",
            "permissions",
        ]
        read_only_fields = fields

    def get_permissions(self, obj: User) -> dict[str, str]:
        return permission_map(obj)


class UserRegistrationSerializer(serializers.ModelSerializer[User]):
    """Create or edit an account together with its scope and permissions.

    The scope must form one chain: the sub-department belongs to the
    department, the department to the organization, the organization to the
    group. The password may be left blank when editing.
    """

    username = serializers.CharField(
        min_length=3,
        max_length=150,
        validators=[UniqueValidator(queryset=User.objects.all())],
    )
    mobile = serializers.CharField(max_length=50)
    password = serializers.CharField(
        write_only=True, required=False, allow_blank=True, min_length=8
    )
    confirm_password = serializers.CharField(
        write_only=True, required=False, allow_blank=True
    )
    user_role = serializers.SlugRelatedField(
        slug_field="code",
        queryset=ApproverRole.objects.all(),
        required=False,
        allow_null=True,
    )
    permissions = serializers.DictField(
        child=serializers.CharField(), required=False, write_only=True
    )

    class Meta:
        model = User
        fields = [
            "id",
            "username",
            "email",
            "first_name",
            "last_name",
            "mobile",
            "group",
            "organization",
            "department",
            "sub_department",
            "user_role",
            "password",
            "confirm_password",
            "permissions",
        ]
        extra_kwargs = {
            "group": {"required": True, "allow_null": False},
            "organization": {"required": True, "allow_null": False},
            "department": {"required": True, "allow_null": False},
            "sub_department": {"required": True, "allow_null": False},
        }

    def validate_permissions(self, value):
        try:
            return validate_permission_map(value)
        except DomainValidationError as exc:
            raise serializers.ValidationError(exc.details) from exc

    def validate(self, attrs):
        password = attrs.get("password") or ""
        confirm = attrs.pop("confirm_password", "") or ""
        if password != confirm:
            raise serializers.ValidationError(
                {"confirm_password": "Passwords do not match."}
            )
        if self.instance is None and not password:
            raise serializers.ValidationError(
                {"password": "Password is required for new users."}
            )

        def scope(field):
            if field in attrs:
                return attrs[field]
            return getattr(self.instance, field, None)

        for child, parent in SCOPE_CHAIN:
            child_node, parent_node = scope(child), scope(parent)
            if child_node is None or parent_node is None:
                continue
            if getattr(child_node, f"{parent}_id") != parent_node.pk:
                msg = f"The {child.replace('_', ' ')} does not belong to the {parent}."
                raise serializers.ValidationError({child: msg})
        return attrs

    @transaction.atomic
    def create(self, validated_data):
        permissions = validated_data.pop("permissions", {})
        password = validated_data.pop("password")
        user = User.objects.create_user(password=password, **validated_data)
        set_permissions(user, permissions)
        return user

    @transaction.atomic
    def update(self, instance, validated_data):
        permissions = validated_data.pop("permissions", None)
        password = validated_data.pop("password", "")
        for field, value in validated_data.items():
            setattr(instance, field, value)
        if password:
            instance.set_password(password)
        instance.save()
        if permissions is not None:
            set_permissions(instance, permissions)
        return instance

    def to_representation(self, instance):
        return UserSerializer(instance, context=self.context).data


class PermissionMapSerializer(serializers.Serializer):
    permissions = serializers.DictField(child=serializers.CharField())


class AccessRightsRowSerializer(serializers.Serializer):
    id = serializers.IntegerField(source="user.id")
    username = serializers.CharField(source="user.username")
    name = serializers.CharField(source="user.name")
    role = serializers.CharField(source="user.role_code", allow_null=True)
    permissions = serializers.DictField(child=serializers.CharField())
