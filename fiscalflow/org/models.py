from django.db import models
from django.utils.translation import gettext_lazy as _


class Group(models.Model):
    """Root of the Group -> Organization -> Department -> Sub-Department tree."""

    name = models.CharField(max_length=150, unique=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["name"]

    def __str__(self) -> str:  # pragma: no cover - trivial
        return self.name


class Organization(models.Model):
    name = models.CharField(max_length=150)
    group = models.ForeignKey(
        Group,
        on_delete=models.PROTECT,
        related_name="organizations",
        help_text=_("Parent group; fixed once departments exist"),
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["name"]
        constraints = [
            models.UniqueConstraint(
                fields=["group", "name"], name="uniq_organization_name_per_group"
            ),
        ]

    def __str__(self) -> str:  # pragma: no cover - trivial
        return self.name


class Department(models.Model):
    name = models.CharField(max_length=150)
    organization = models.ForeignKey(
        Organization, on_delete=models.PROTECT, related_name="departments"
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["name"]
        constraints = [
            models.UniqueConstraint(
                fields=["organization", "name"],
                name="uniq_department_name_per_organization",
            ),
        ]

    def __str__(self) -> str:  # pragma: no cover - trivial
        return self.name


class SubDepartment(models.Model):
    name = models.CharField(max_length=150)
    department = models.ForeignKey(
        Department, on_delete=models.PROTECT, related_name="sub_departments"
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["name"]
        constraints = [
            models.UniqueConstraint(
                fields=["department", "name"],
                name="uniq_sub_department_name_per_department",
            ),
        ]

    def __str__(self) -> str:  # pragma: no cover - trivial
        return self.name
