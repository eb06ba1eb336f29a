from __future__ import annotations

from pos_till_sdk.exceptions import (
    ApiError,
    OperationInFlightError,
    RejectionError,
    ServerError,
    ShiftStateError,
    TransportError,
)
from pos_till_sdk.ui_errors import (
    CANCELLED_MESSAGE,
    TRANSPORT_MESSAGE,
    ErrorCategory,
    classify_error,
    to_user_facing_error,
)
from pos_till_sdk.validation import ClientValidationError, ValidationIssue


def _api(cls: type[ApiError], code: str, message: str, status: int) -> ApiError:
    return cls(code=code, message=message, details=None, trace_id="trace-1", status_code=status)


def test_classification() -> None:
    assert classify_error(ClientValidationError([ValidationIssue("items", "cart is empty")])) is ErrorCategory.VALIDATION
    assert classify_error(ShiftStateError("No open shift to close")) is ErrorCategory.VALIDATION
    assert classify_error(OperationInFlightError(("sale_commit", None))) is ErrorCategory.VALIDATION
    assert classify_error(_api(RejectionError, "REJECTED", "no", 200)) is ErrorCategory.REJECTION
    assert classify_error(_api(ServerError, "HTTP_ERROR", "boom", 502)) is ErrorCategory.TRANSPORT
    assert classify_error(_api(TransportError, "TIMEOUT", "timed out", 0)) is ErrorCategory.TRANSPORT
    assert classify_error(RuntimeError("unexpected")) is ErrorCategory.TRANSPORT


def test_rejection_message_is_shown_verbatim() -> None:
    error = to_user_facing_error(_api(RejectionError, "REJECTED", "Ya tienes un turno abierto", 200))
    assert error.message == "Ya tienes un turno abierto"
    assert error.category is ErrorCategory.REJECTION
    assert error.details == "REJECTED (HTTP 200)"
    assert error.trace_id == "trace-1"


def test_transport_message_is_generic() -> None:
    error = to_user_facing_error(_api(TransportError, "NETWORK_ERROR", "Connection refused", 0))
    assert error.message == TRANSPORT_MESSAGE
    assert "Connection refused" in error.technical_details


def test_cancelled_request() -> None:
    error = to_user_facing_error(_api(TransportError, "REQUEST_CANCELLED", "superseded", 0))
    assert error.message == CANCELLED_MESSAGE


def test_validation_error_lists_fields() -> None:
    error = to_user_facing_error(ClientValidationError([ValidationIssue("opening_balance", "must be >= 0")]))
    assert error.category is ErrorCategory.VALIDATION
    assert "opening_balance" in error.message
    assert error.details is None
