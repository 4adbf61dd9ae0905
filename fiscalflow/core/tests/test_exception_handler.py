import pytest
from rest_framework import status
from rest_framework.exceptions import NotAuthenticated

from fiscalflow.core.api.exception_handler import fiscalflow_exception_handler
from fiscalflow.core.exceptions import AuthorizationError
from fiscalflow.core.exceptions import ConfigurationError
from fiscalflow.core.exceptions import ConflictError
from fiscalflow.core.exceptions import InvalidStateError
from fiscalflow.core.exceptions import NotFoundError
from fiscalflow.core.exceptions import ValidationError


@pytest.mark.parametrize(
    ("exc", "code", "kind"),
    [
        (NotFoundError("BudgetSheet", 3), status.HTTP_404_NOT_FOUND, "not_found"),
        (ConflictError(), status.HTTP_409_CONFLICT, "conflict"),
        (InvalidStateError(), status.HTTP_409_CONFLICT, "invalid_state"),
        (AuthorizationError(), status.HTTP_403_FORBIDDEN, "authorization"),
        (
            ConfigurationError(),
            status.HTTP_422_UNPROCESSABLE_ENTITY,
            "configuration",
        ),
        (ValidationError("bad", details={"f": "x"}), status.HTTP_400_BAD_REQUEST, "validation"),
    ],
)
def test_domain_errors_are_rendered(exc, code, kind):
    response = fiscalflow_exception_handler(exc, {})
    assert response.status_code == code
    assert response.data["kind"] == kind
    assert response.data["message"] == exc.message


def test_not_found_details():
    response = fiscalflow_exception_handler(NotFoundError("Vendor", 9), {})
    assert response.data == {
        "kind": "not_found",
        "message": "Vendor 9 not found.",
        "details": {"entity": "Vendor", "id": 9},
    }


def test_other_errors_use_drf_default():
    response = fiscalflow_exception_handler(NotAuthenticated(), {})
    assert response.status_code == status.HTTP_401_UNAUTHORIZED
    assert "kind" not in response.data
