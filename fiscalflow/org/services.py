"""Hierarchy store: Group -> Organization -> Department -> Sub-Department.

Every create validates that the parent exists; every delete refuses to run
while children (or other records such as users and budget sheets) still point
at the node. Cascades are never implicit.
"""

from __future__ import annotations

import logging

from django.db import IntegrityError
from django.db import models
from django.db import transaction
from django.db.models import ProtectedError

from fiscalflow.audit.utils import log_action
from fiscalflow.core.exceptions import ConflictError
from fiscalflow.core.exceptions import NotFoundError
from fiscalflow.core.exceptions import ValidationError
from fiscalflow.org.models import Department
from fiscalflow.org.models import Group
from fiscalflow.org.models import Organization
from fiscalflow.org.models import SubDepartment

logger = logging.getLogger(__name__)

NODE_MODELS: dict[str, type[models.Model]] = {
    "group": Group,
    "organization": Organization,
    "department": Department,
    "sub_department": SubDepartment,
}

# Reverse accessor holding each node's hierarchy children.
CHILD_ACCESSORS = {
    Group: "organizations",
    Organization: "departments",
    Department: "sub_departments",
}


def _clean_name(name: str | None) -> str:
    value = (name or "").strip()
    if not value:
        msg = "Name is required."
        raise ValidationError(msg, details={"name": msg})
    return value


def get_node(kind: str, node_id):
    model = NODE_MODELS.get(kind)
    if model is None:
        msg = f"Unknown hierarchy level '{kind}'."
        raise ValidationError(msg)
    try:
        return model.objects.get(pk=node_id)
    except (model.DoesNotExist, ValueError, TypeError):
        raise NotFoundError(model.__name__, node_id) from None


def _save_new(instance):
    try:
        with transaction.atomic():
            instance.save()
    except IntegrityError as exc:
        msg = f"{type(instance).__name__} '{instance.name}' already exists here."
        raise ValidationError(msg, details={"name": msg}) from exc
    logger.info("Created %s %s (%s)", type(instance).__name__, instance.pk, instance)
    return instance


def create_group(name: str) -> Group:
    return _save_new(Group(name=_clean_name(name)))


def create_organization(name: str, group_id) -> Organization:
    group = get_node("group", group_id)
    return _save_new(Organization(name=_clean_name(name), group=group))


def create_department(name: str, organization_id) -> Department:
    organization = get_node("organization", organization_id)
    return _save_new(Department(name=_clean_name(name), organization=organization))


def create_sub_department(name: str, department_id) -> SubDepartment:
    department = get_node("department", department_id)
    return _save_new(SubDepartment(name=_clean_name(name), department=department))


def rename_node(instance, name: str):
    instance.name = _clean_name(name)
    try:
        with transaction.atomic():
            instance.save(update_fields=["name", "updated_at"])
    except IntegrityError as exc:
        msg = f"{type(instance).__name__} '{instance.name}' already exists here."
        raise ValidationError(msg, details={"name": msg}) from exc
    return instance


@transaction.atomic
def move_organization(organization: Organization, group_id) -> Organization:
    """Re-parent an organization; only allowed while it has no departments."""
    group = get_node("group", group_id)
    if group.pk == organization.group_id:
        return organization
    if organization.departments.exists():
        msg = "An organization's group cannot change once it has departments."
        raise ConflictError(msg, details={"organization": organization.pk})
    organization.group = group
    organization.save(update_fields=["group", "updated_at"])
    return organization


@transaction.atomic
def delete_node(instance, *, actor=None) -> None:
    model = type(instance)
    accessor = CHILD_ACCESSORS.get(model)
    if accessor and getattr(instance, accessor).exists():
        msg = f"{model.__name__} '{instance}' still has {accessor.replace('_', ' ')}."
        raise ConflictError(msg, details={"children": accessor})
    node_id = instance.pk
    try:
        with transaction.atomic():
            instance.delete()
    except ProtectedError as exc:
        referenced_by = sorted({type(obj).__name__ for obj in exc.protected_objects})
        msg = f"{model.__name__} '{instance}' is still referenced."
        raise ConflictError(msg, details={"referenced_by": referenced_by}) from exc
    log_action(
        "hierarchy_node_deleted",
        actor=actor,
        message=str(instance),
        model_name=model.__name__,
        record_id=node_id,
    )
    logger.info("Deleted %s %s", model.__name__, instance)


def delete_group(group: Group, *, actor=None) -> None:
    delete_node(group, actor=actor)


def delete_organization(organization: Organization, *, actor=None) -> None:
    delete_node(organization, actor=actor)


def delete_department(department: Department, *, actor=None) -> None:
    delete_node(department, actor=actor)


def delete_sub_department(sub_department: SubDepartment, *, actor=None) -> None:
    delete_node(sub_department, actor=actor)


def resolve_ancestors(kind: str, node_id) -> list:
    """Return the chain from the root Group down to (and including) the node."""
    node = get_node(kind, node_id)
    chain = [node]
    while True:
        current = chain[0]
        if isinstance(current, SubDepartment):
            parent = current.department
        elif isinstance(current, Department):
            parent = current.organization
        elif isinstance(current, Organization):
            parent = current.group
        else:
            break
        chain.insert(0, parent)
    return chain


def describe_chain(chain: list) -> dict[str, str]:
    """Map each level name of an ancestor chain to its display name."""
    labels = {}
    for node in chain:
        for kind, model in NODE_MODELS.items():
            if isinstance(node, model):
                labels[kind] = node.name
    return labels
