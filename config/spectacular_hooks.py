"""Custom OpenAPI schema hooks for drf-spectacular.

Endpoints are grouped under one feature tag each (Hierarchy, Budget Sheets,
Approvals, ...) instead of the generic path-derived tags.
"""

from __future__ import annotations

from typing import Any

# Method names that contain operations in the OpenAPI path item
_HTTP_METHODS = {"get", "post", "put", "patch", "delete", "options", "head"}


PATTERN_TAGS = [
    ("/api/v1/groups", "Hierarchy"),
    ("/api/v1/organizations", "Hierarchy"),
    ("/api/v1/departments", "Hierarchy"),
    ("/api/v1/sub-departments", "Hierarchy"),
    ("/api/v1/budget-sheets", "Budget Sheets"),
    ("/api/v1/approval-workflows", "Approval Matrix"),
    ("/api/v1/approver-roles", "Approval Matrix"),
    ("/api/v1/approvals", "Approvals"),
    ("/api/v1/vendors", "Vendors"),
    ("/api/v1/registry-items", "Item Registry"),
    ("/api/v1/contracts", "Contracts"),
    ("/api/v1/insights", "Insights"),
    ("/api/v1/notifications", "Notifications"),
    ("/api/v1/audit", "Audit"),
    ("/api/v1/reports", "Reports"),
    ("/api/v1/auth/jwt", "JWT Authentication"),
    ("/api/v1/users", "Users"),
]

ALL_TAGS = list(dict.fromkeys(t for _, t in PATTERN_TAGS))


def assign_group_tag(path: str) -> str | None:
    """Return the first matching tag name for a given path."""
    for prefix, tag in PATTERN_TAGS:
        if path.startswith(prefix):
            return tag
    return None


def group_tags(result: dict[str, Any], **kwargs: Any) -> dict[str, Any]:
    """Post-processing hook to force consistent tag grouping.

    Every operation gets exactly one logical tag so the Swagger UI navigation
    follows the feature areas of the API.
    """
    paths = result.get("paths", {})
    for path, path_item in paths.items():  # type: ignore[assignment]
        tag = assign_group_tag(path)
        if not tag:
            continue
        for method, op_obj in path_item.items():
            if method.lower() not in _HTTP_METHODS:
                continue
            if not isinstance(op_obj, dict):
                continue
            op_obj["tags"] = [tag]

    existing = {t.get("name") for t in result.get("tags", [])}
    tag_list = result.setdefault("tags", [])
    for tag in ALL_TAGS:
        if tag not in existing:
            tag_list.append({"name": tag})
    return result
