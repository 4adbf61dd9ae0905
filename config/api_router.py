from django.conf import settings
from django.urls import include
from django.urls import path
from rest_framework.routers import DefaultRouter
from rest_framework.routers import SimpleRouter

from fiscalflow.approvals.api.views import ApprovalInboxView
from fiscalflow.approvals.api.views import ApprovalWorkflowViewSet
from fiscalflow.approvals.api.views import ApproverRoleViewSet
from fiscalflow.budgets.api.views import BudgetSheetViewSet
from fiscalflow.insights.api.views import BudgetForecastView
from fiscalflow.insights.api.views import CapexComparisonView
from fiscalflow.notifications.api.views import NotificationViewSet
from fiscalflow.org.api.views import DepartmentViewSet
from fiscalflow.org.api.views import GroupViewSet
from fiscalflow.org.api.views import OrganizationViewSet
from fiscalflow.org.api.views import SubDepartmentViewSet
from fiscalflow.registry.api.views import ContractViewSet
from fiscalflow.registry.api.views import RegistryItemViewSet
from fiscalflow.registry.api.views import VendorViewSet
from fiscalflow.users.api.views import UserAccessRightsReportView
from fiscalflow.users.api.views import UserViewSet

router = DefaultRouter() if settings.DEBUG else SimpleRouter()

router.register("users", UserViewSet)
router.register("groups", GroupViewSet)
router.register("organizations", OrganizationViewSet)
router.register("departments", DepartmentViewSet)
router.register("sub-departments", SubDepartmentViewSet)
router.register("budget-sheets", BudgetSheetViewSet)
router.register("approver-roles", ApproverRoleViewSet)
router.register(
    "approval-workflows", ApprovalWorkflowViewSet, basename="approval-workflow"
)
router.register("vendors", VendorViewSet)
router.register("registry-items", RegistryItemViewSet)
router.register("contracts", ContractViewSet)
router.register("notifications", NotificationViewSet, basename="notifications")


app_name = "api"
urlpatterns = [
    path(
        "audit/",
        include(("fiscalflow.audit.api.urls", "audit"), namespace="audit"),
    ),
    path("approvals/inbox/", ApprovalInboxView.as_view(), name="approval-inbox"),
    path(
        "reports/user-access-rights/",
        UserAccessRightsReportView.as_view(),
        name="report-user-access-rights",
    ),
    path(
        "insights/budget-forecast/",
        BudgetForecastView.as_view(),
        name="insight-budget-forecast",
    ),
    path(
        "insights/capex-comparison/",
        CapexComparisonView.as_view(),
        name="insight-capex-comparison",
    ),
    *router.urls,
]
