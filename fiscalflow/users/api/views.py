from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework import viewsets
from rest_framework.decorators import action
from rest_framework.generics import GenericAPIView
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from fiscalflow.audit.utils import log_action
from fiscalflow.core.exceptions import ValidationError
from fiscalflow.users.access import access_matrix
from fiscalflow.users.access import permission_map
from fiscalflow.users.access import set_permissions
from fiscalflow.users.api.permissions import HasModulePermission
from fiscalflow.users.models import ModuleKey
from fiscalflow.users.models import User

from .serializers import AccessRightsRowSerializer
from .serializers import PermissionMapSerializer
from .serializers import UserRegistrationSerializer
from .serializers import UserSerializer


class UserViewSet(viewsets.ModelViewSet):
    """User registration and management.

    ``/users/me/`` is open to every authenticated user; everything else
    needs access to the user registration module.
    """

    queryset = User.objects.select_related("user_role").order_by("username")
    permission_classes = [IsAuthenticated, HasModulePermission]
    filterset_fields = ["group", "organization", "department", "is_active"]

    def get_module_key(self):
        if self.action == "me":
            return None
        return ModuleKey.USER_REGISTRATION

    def get_serializer_class(self):
        if self.action in {"create", "update", "partial_update"}:
            return UserRegistrationSerializer
        return UserSerializer

    @extend_schema(responses=UserSerializer)
    @action(detail=False)
    def me(self, request):
        serializer = UserSerializer(request.user, context={"request": request})
        return Response(status=status.HTTP_200_OK, data=serializer.data)

    def perform_create(self, serializer):
        instance = serializer.save()
        log_action(
            "user_registered",
            actor=self.request.user,
            message=f"username={instance.username}",
            model_name="User",
            record_id=instance.pk,
        )

    def perform_update(self, serializer):
        instance = serializer.save()
        log_action(
            "user_updated",
            actor=self.request.user,
            message=f"username={instance.username}",
            model_name="User",
            record_id=instance.pk,
        )

    def perform_destroy(self, instance):
        if instance.pk == self.request.user.pk:
            msg = "You cannot delete your own account."
            raise ValidationError(msg)
        user_id, username = instance.pk, instance.username
        instance.delete()
        log_action(
            "user_deleted",
            actor=self.request.user,
            message=f"username={username}",
            model_name="User",
            record_id=user_id,
        )

    @extend_schema(request=PermissionMapSerializer, responses=PermissionMapSerializer)
    @action(detail=True, methods=["get", "put"])
    def permissions(self, request, pk=None):
        user = self.get_object()
        if request.method == "PUT":
            serializer = PermissionMapSerializer(data=request.data)
            serializer.is_valid(raise_exception=True)
            before = permission_map(user)
            after = set_permissions(user, serializer.validated_data["permissions"])
            log_action(
                "user_permissions_updated",
                actor=request.user,
                message=f"username={user.username}",
                model_name="User",
                record_id=user.pk,
                before=before,
                after=after,
            )
        return Response({"permissions": permission_map(user)})


class UserAccessRightsReportView(GenericAPIView):
    """Every user against every module, with the stored access level."""

    permission_classes = [IsAuthenticated, HasModulePermission]
    module_key = ModuleKey.REPORTS_USER_ACCESS
    serializer_class = AccessRightsRowSerializer
    pagination_class = None

    @extend_schema(responses=AccessRightsRowSerializer(many=True))
    def get(self, request):
        users = User.objects.select_related("user_role").order_by("username")
        rows = access_matrix(users)
        return Response(self.get_serializer(rows, many=True).data)
