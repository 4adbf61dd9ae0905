"""Budget sheet aggregate.

Sheets are edited only while in Draft and only by members of the owning
department. Totals are always derived from the items and never stored, so
``sheet.total_value`` equals the sum of the item line totals by construction.
"""

from __future__ import annotations

import logging
from decimal import Decimal
from decimal import InvalidOperation
from typing import Any

from django.db import transaction
from django.db.models import F
from django.db.models import Max

from fiscalflow.audit.utils import log_action
from fiscalflow.budgets.models import PERIOD_MULTIPLIERS
from fiscalflow.budgets.models import BudgetItem
from fiscalflow.budgets.models import BudgetSheet
from fiscalflow.budgets.models import SheetType
from fiscalflow.core.exceptions import AuthorizationError
from fiscalflow.core.exceptions import InvalidStateError
from fiscalflow.core.exceptions import NotFoundError
from fiscalflow.core.exceptions import ValidationError
from fiscalflow.org.services import get_node
from fiscalflow.registry.models import Vendor

logger = logging.getLogger(__name__)

ZERO = Decimal("0.00")

# Bounds that keep every stored amount and sheet total inside its column.
MAX_AMOUNT = Decimal("999999999999.99")
MAX_QUANTITY = 1_000_000
MAX_LINE_TOTAL = Decimal("99999999999999.99")

COMMON_FIELDS = ("description", "amount", "remarks")
CAPEX_FIELDS = ("quantity", "priority", "justification", "supplier")
OPEX_FIELDS = ("period", "implementation", "service_status", "supplier")


def period_multiplier(period: str | None) -> int:
    """Occurrences per year of an OPEX period; 0 for anything unrecognised.

    The zero is a display fallback only; item input is validated separately.
    """
    return PERIOD_MULTIPLIERS.get(period or "", 0)


def compute_item_total(item: BudgetItem, sheet_type: str | None = None) -> Decimal:
    sheet_type = sheet_type or item.sheet.sheet_type
    amount = Decimal(item.amount or 0)
    if sheet_type == SheetType.CAPEX:
        return (Decimal(item.quantity or 0) * amount).quantize(Decimal("0.01"))
    return (amount * period_multiplier(item.period)).quantize(Decimal("0.01"))


def compute_total(sheet: BudgetSheet) -> Decimal:
    if sheet.pk is None:
        return ZERO
    return sum(
        (compute_item_total(item, sheet.sheet_type) for item in sheet.items.all()),
        ZERO,
    )


def sequence_number(sheet: BudgetSheet, index: int) -> str:
    """Human-readable reference of the ``index``-th (0-based) item of a sheet.

    Built from the current organization/department names, so it changes when
    they are renamed; never use it as an identifier.
    """
    org = (sheet.organization.name or "")[:3].upper() or "ORG"
    dept = (sheet.department.name or "")[:4].upper() or "DEPT"
    code = f"{org}/{dept}/{sheet.year}/{index + 1:03d}"
    if sheet.sheet_type == SheetType.OPEX:
        return f"OPEX/{code}"
    return code


def ensure_draft(sheet: BudgetSheet) -> None:
    if sheet.status != BudgetSheet.Status.DRAFT:
        msg = f"Sheet {sheet.pk} is {sheet.status}; only Draft sheets can be edited."
        raise InvalidStateError(msg, details={"status": sheet.status})


def ensure_owner(sheet: BudgetSheet, user) -> None:
    """Only members of the sheet's department may edit or submit it."""
    if user is None or getattr(user, "department_id", None) != sheet.department_id:
        msg = "Only members of the owning department can change this sheet."
        raise AuthorizationError(msg, details={"department": sheet.department_id})


def _lock_sheet(sheet: BudgetSheet) -> BudgetSheet:
    try:
        return BudgetSheet.objects.select_for_update().get(pk=sheet.pk)
    except BudgetSheet.DoesNotExist:
        raise NotFoundError("BudgetSheet", sheet.pk) from None


def _touch(sheet: BudgetSheet) -> None:
    BudgetSheet.objects.filter(pk=sheet.pk).update(version=F("version") + 1)
    sheet.refresh_from_db(fields=["version", "updated_at"])


@transaction.atomic
def create_sheet(
    *, sheet_type: str, organization_id, department_id, year: int, created_by
) -> BudgetSheet:
    if sheet_type not in SheetType.values:
        msg = f"Unknown sheet type '{sheet_type}'."
        raise ValidationError(msg, details={"sheet_type": msg})
    organization = get_node("organization", organization_id)
    department = get_node("department", department_id)
    if department.organization_id != organization.pk:
        msg = "Department does not belong to the organization."
        raise ValidationError(msg, details={"department": msg})
    try:
        year = int(year)
    except (TypeError, ValueError):
        msg = "Year must be a number."
        raise ValidationError(msg, details={"year": msg}) from None
    sheet = BudgetSheet(
        sheet_type=sheet_type,
        organization=organization,
        department=department,
        year=year,
        created_by=created_by,
    )
    ensure_owner(sheet, created_by)
    sheet.save()
    log_action(
        "budget_sheet_created",
        actor=created_by,
        message=f"{sheet_type} {year} for {organization.name}/{department.name}",
        model_name="BudgetSheet",
        record_id=sheet.pk,
    )
    logger.info("Created %s sheet %s", sheet_type, sheet.pk)
    return sheet


def _decimal(value, field: str, errors: dict) -> Decimal | None:
    try:
        number = Decimal(str(value))
    except (InvalidOperation, TypeError, ValueError):
        errors[field] = "Must be a number."
        return None
    if not number.is_finite():
        errors[field] = "Must be a number."
        return None
    return number


def _supplier(value, errors: dict) -> Vendor | None:
    if value in (None, ""):
        return None
    if isinstance(value, Vendor):
        return value
    vendor = Vendor.objects.filter(pk=value).first()
    if vendor is None:
        errors["supplier"] = f"Vendor {value} not found."
    return vendor


def validate_item_data(
    sheet_type: str, data: dict[str, Any], *, partial_of: BudgetItem | None = None
) -> dict[str, Any]:
    """Check one item payload against the CAPEX/OPEX rules.

    With ``partial_of`` the payload is merged over that item first.
    """
    allowed = set(COMMON_FIELDS) | set(
        CAPEX_FIELDS if sheet_type == SheetType.CAPEX else OPEX_FIELDS
    )
    unknown = sorted(set(data) - allowed)
    if unknown:
        msg = f"Fields not valid for {sheet_type} items: {', '.join(unknown)}."
        raise ValidationError(msg, details={f: "Not allowed." for f in unknown})

    merged: dict[str, Any] = {}
    if partial_of is not None:
        merged = {f: getattr(partial_of, f) for f in allowed}
    merged.update(data)

    errors: dict[str, str] = {}
    cleaned: dict[str, Any] = {}

    description = (merged.get("description") or "").strip()
    if not description:
        errors["description"] = "Description is required."
    cleaned["description"] = description
    cleaned["remarks"] = (merged.get("remarks") or "").strip()

    amount = _decimal(merged.get("amount"), "amount", errors)
    if amount is not None and amount < 0:
        errors["amount"] = "Amount cannot be negative."
    elif amount is not None and (
        amount > MAX_AMOUNT or amount != amount.quantize(Decimal("0.01"))
    ):
        errors["amount"] = f"Amount must be at most {MAX_AMOUNT} with two decimals."
    cleaned["amount"] = amount
    cleaned["supplier"] = _supplier(merged.get("supplier"), errors)

    if sheet_type == SheetType.CAPEX:
        quantity = merged.get("quantity")
        if isinstance(quantity, bool) or not isinstance(quantity, int | str | Decimal):
            errors["quantity"] = "Quantity must be a whole number."
        elif isinstance(quantity, Decimal) and quantity != quantity.to_integral_value():
            errors["quantity"] = "Quantity must be a whole number."
        else:
            try:
                quantity = int(quantity)
            except (TypeError, ValueError, OverflowError):
                errors["quantity"] = "Quantity must be a whole number."
            else:
                if quantity < 1:
                    errors["quantity"] = "Quantity must be at least 1."
                elif quantity > MAX_QUANTITY:
                    errors["quantity"] = f"Quantity must be at most {MAX_QUANTITY}."
                cleaned["quantity"] = quantity
        priority = merged.get("priority")
        if priority not in BudgetItem.Priority.values:
            errors["priority"] = f"Unknown priority '{priority}'."
        cleaned["priority"] = priority
        justification = (merged.get("justification") or "").strip()
        if not justification:
            errors["justification"] = "Justification is required."
        cleaned["justification"] = justification
    else:
        period = merged.get("period")
        if period not in PERIOD_MULTIPLIERS:
            errors["period"] = f"Unknown period '{period}'."
        cleaned["period"] = period
        implementation = merged.get("implementation")
        if implementation not in BudgetItem.Implementation.values:
            errors["implementation"] = f"Unknown implementation '{implementation}'."
        cleaned["implementation"] = implementation
        service_status = merged.get("service_status")
        if service_status not in BudgetItem.ServiceStatus.values:
            errors["service_status"] = f"Unknown service status '{service_status}'."
        cleaned["service_status"] = service_status
        if cleaned["supplier"] is None and "supplier" not in errors:
            errors["supplier"] = "Supplier is required."

    if not errors:
        line_total = compute_item_total(BudgetItem(**cleaned), sheet_type)
        if line_total > MAX_LINE_TOTAL:
            errors["amount"] = f"Line total {line_total} exceeds {MAX_LINE_TOTAL}."

    if errors:
        msg = "Invalid budget item."
        raise ValidationError(msg, details=errors)
    return cleaned


@transaction.atomic
def add_item(sheet: BudgetSheet, data: dict[str, Any], *, user) -> BudgetItem:
    locked = _lock_sheet(sheet)
    ensure_owner(locked, user)
    ensure_draft(locked)
    cleaned = validate_item_data(locked.sheet_type, data)
    last = locked.items.aggregate(last=Max("position"))["last"]
    item = BudgetItem.objects.create(
        sheet=locked, position=(last or 0) + 1, **cleaned
    )
    _touch(sheet)
    return item


def _get_item(sheet: BudgetSheet, item_id) -> BudgetItem:
    try:
        return sheet.items.get(pk=item_id)
    except (BudgetItem.DoesNotExist, ValueError, TypeError):
        raise NotFoundError("BudgetItem", item_id) from None


@transaction.atomic
def update_item(
    sheet: BudgetSheet, item_id, data: dict[str, Any], *, user
) -> BudgetItem:
    locked = _lock_sheet(sheet)
    ensure_owner(locked, user)
    ensure_draft(locked)
    item = _get_item(locked, item_id)
    cleaned = validate_item_data(locked.sheet_type, data, partial_of=item)
    for field, value in cleaned.items():
        setattr(item, field, value)
    item.save()
    _touch(sheet)
    return item


@transaction.atomic
def remove_item(sheet: BudgetSheet, item_id, *, user) -> None:
    locked = _lock_sheet(sheet)
    ensure_owner(locked, user)
    ensure_draft(locked)
    _get_item(locked, item_id).delete()
    _touch(sheet)


@transaction.atomic
def delete_sheet(sheet: BudgetSheet, *, user) -> None:
    locked = _lock_sheet(sheet)
    ensure_owner(locked, user)
    ensure_draft(locked)
    sheet_id = locked.pk
    locked.delete()
    log_action(
        "budget_sheet_deleted",
        actor=user,
        message=f"{locked.sheet_type} {locked.year}",
        model_name="BudgetSheet",
        record_id=sheet_id,
    )
