import os

from django.core.management.base import BaseCommand
from django.db import transaction
from django.utils.crypto import get_random_string
from django.utils.translation import gettext as _

from fiscalflow.approvals.models import ApprovalWorkflow
from fiscalflow.approvals.models import ApproverRole
from fiscalflow.approvals.services import get_workflow
from fiscalflow.approvals.services import replace_levels
from fiscalflow.org.models import Department
from fiscalflow.org.models import Group
from fiscalflow.org.models import Organization
from fiscalflow.org.models import SubDepartment
from fiscalflow.users.access import set_permissions
from fiscalflow.users.models import AccessLevel
from fiscalflow.users.models import ModuleKey
from fiscalflow.users.models import User

ROOT_GROUP = "approotgroup"
ROOT_ORGANIZATION = "rootorg"
ROOT_DEPARTMENT = "rootdepartment"
ROOT_SUB_DEPARTMENT = "rootsubdepartment"
ROOT_USERNAME = "rootuser"

ROLES = {
    "administrator": "Administrator",
    "department-head": "Department Head",
    "finance-manager": "Finance Manager",
    "general-manager": "General Manager",
    "director-of-finance": "Director of Finance",
    "contract-manager": "Contract Manager",
    "legal-advisor": "Legal Advisor",
    "finance-director": "Finance Director",
}

DEFAULT_MATRICES = {
    ApprovalWorkflow.Type.BUDGET: [
        (
            "department-head",
            "Initial review and approval by the head of the requesting department.",
        ),
        ("finance-manager", "Financial review for budget alignment and accuracy."),
        ("general-manager", "Operational approval for strategic alignment."),
        ("director-of-finance", "Final financial sign-off for all expenditures."),
    ],
    ApprovalWorkflow.Type.CONTRACT: [
        ("contract-manager", "Initial review of contract renewal terms."),
        ("legal-advisor", "Legal review of contract clauses."),
        ("finance-director", "Final financial approval for renewal."),
    ],
}


class Command(BaseCommand):
    help = _(
        "Create the root hierarchy, default approver roles and matrices, and the "
        "root administrator"
    )

    def add_arguments(self, parser):
        parser.add_argument(
            "--admin-password",
            default=os.environ.get("FISCALFLOW_ROOT_PASSWORD"),
            help="Password for the root administrator (generated when omitted)",
        )

    @transaction.atomic
    def handle(self, *args, **options):
        group, _created = Group.objects.get_or_create(name=ROOT_GROUP)
        organization, _created = Organization.objects.get_or_create(
            name=ROOT_ORGANIZATION, group=group
        )
        department, _created = Department.objects.get_or_create(
            name=ROOT_DEPARTMENT, organization=organization
        )
        sub_department, _created = SubDepartment.objects.get_or_create(
            name=ROOT_SUB_DEPARTMENT, department=department
        )

        for code, name in ROLES.items():
            ApproverRole.objects.get_or_create(code=code, defaults={"name": name})

        for workflow_type, levels in DEFAULT_MATRICES.items():
            if get_workflow(workflow_type).levels.exists():
                continue
            replace_levels(
                workflow_type,
                [
                    {"level": idx, "approver_role": code, "description": text}
                    for idx, (code, text) in enumerate(levels, start=1)
                ],
            )
            self.stdout.write(f"Seeded {workflow_type} approval matrix")

        if not User.objects.filter(username=ROOT_USERNAME).exists():
            password = options["admin_password"] or get_random_string(16)
            user = User.objects.create_user(
                username=ROOT_USERNAME,
                email="root@example.com",
                password=password,
                mobile="1234567890",
                group=group,
                organization=organization,
                department=department,
                sub_department=sub_department,
                user_role=ApproverRole.objects.get(code="administrator"),
                is_staff=True,
            )
            set_permissions(user, dict.fromkeys(ModuleKey.values, AccessLevel.FULL))
            if not options["admin_password"]:
                self.stdout.write(f"Root administrator password: {password}")

        self.stdout.write(self.style.SUCCESS("FiscalFlow seed complete"))
