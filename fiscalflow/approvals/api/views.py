from drf_spectacular.utils import extend_schema
from rest_framework import mixins
from rest_framework import viewsets
from rest_framework.generics import ListAPIView
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from fiscalflow.approvals.models import ApprovalItem
from fiscalflow.approvals.models import ApprovalWorkflow
from fiscalflow.approvals.models import ApproverRole
from fiscalflow.approvals.services import delete_role
from fiscalflow.approvals.services import get_workflow
from fiscalflow.approvals.services import replace_levels
from fiscalflow.users.api.permissions import HasModulePermission
from fiscalflow.users.models import ModuleKey

from .serializers import ApprovalItemSerializer
from .serializers import ApprovalMatrixUpdateSerializer
from .serializers import ApprovalWorkflowSerializer
from .serializers import ApproverRoleSerializer


class ApproverRoleViewSet(viewsets.ModelViewSet):
    queryset = ApproverRole.objects.all()
    serializer_class = ApproverRoleSerializer
    permission_classes = [IsAuthenticated, HasModulePermission]
    module_key = ModuleKey.APPROVAL_MATRIX
    pagination_class = None

    def perform_destroy(self, instance):
        delete_role(instance, actor=self.request.user)


class ApprovalWorkflowViewSet(
    mixins.ListModelMixin, mixins.RetrieveModelMixin, viewsets.GenericViewSet
):
    """The approval matrix: ordered approver roles per workflow type.

    ``PUT /approval-workflows/{type}/`` replaces every level. Sheets already
    in flight keep the levels captured when they were submitted.
    """

    serializer_class = ApprovalWorkflowSerializer
    permission_classes = [IsAuthenticated, HasModulePermission]
    module_key = ModuleKey.APPROVAL_MATRIX
    lookup_field = "workflow_type"
    pagination_class = None

    def get_queryset(self):
        for workflow_type in ApprovalWorkflow.Type.values:
            get_workflow(workflow_type)
        return ApprovalWorkflow.objects.prefetch_related("levels__approver_role")

    @extend_schema(
        request=ApprovalMatrixUpdateSerializer,
        responses={200: ApprovalWorkflowSerializer},
    )
    def update(self, request, workflow_type=None):
        workflow = self.get_object()
        serializer = ApprovalMatrixUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        replace_levels(
            workflow.workflow_type,
            serializer.validated_data["levels"],
            actor=request.user,
        )
        workflow = self.get_queryset().get(pk=workflow.pk)
        return Response(ApprovalWorkflowSerializer(workflow).data)


class ApprovalInboxView(ListAPIView):
    """Pending approval items waiting on the requesting user's role."""

    serializer_class = ApprovalItemSerializer
    permission_classes = [IsAuthenticated, HasModulePermission]
    module_key = ModuleKey.APPROVALS_INBOX

    def get_queryset(self):
        role_code = getattr(self.request.user, "role_code", None)
        if not role_code:
            return ApprovalItem.objects.none()
        return ApprovalItem.objects.filter(
            status=ApprovalItem.Status.PENDING, approver_role_code=role_code
        ).select_related("organization", "department", "submitted_by", "sheet")
