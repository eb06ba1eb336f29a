from __future__ import annotations

import pytest

from pos_till_sdk.error_mapper import map_error, map_rejection
from pos_till_sdk.exceptions import (
    ApiError,
    AuthError,
    ConflictError,
    InsufficientStockRejection,
    NotFoundError,
    PermissionError,
    RateLimitError,
    RejectionError,
    ServerError,
    ShiftAlreadyOpenError,
    ShiftNotOpenError,
    ValidationError,
)


@pytest.mark.parametrize(
    ("status", "expected"),
    [
        (401, AuthError),
        (403, PermissionError),
        (404, NotFoundError),
        (400, ValidationError),
        (422, ValidationError),
        (409, ConflictError),
        (429, RateLimitError),
        (500, ServerError),
        (503, ServerError),
        (418, ApiError),
    ],
)
def test_map_error_by_status(status, expected) -> None:
    err = map_error(status, {"code": "X", "message": "failed"}, "trace-1")
    assert type(err) is expected
    assert err.status_code == status
    assert err.trace_id == "trace-1"


def test_map_error_prefers_payload_trace_id() -> None:
    err = map_error(400, {"message": "bad", "trace_id": "server-trace"}, "client-trace")
    assert err.trace_id == "server-trace"
    assert err.code == "HTTP_ERROR"


def test_conflict_refined_to_shift_already_open() -> None:
    err = map_error(409, {"message": "Ya tienes un turno abierto"}, None)
    assert isinstance(err, ShiftAlreadyOpenError)
    assert isinstance(err, ConflictError)


@pytest.mark.parametrize(
    ("message", "expected"),
    [
        ("Ya tienes un turno abierto", ShiftAlreadyOpenError),
        ("No hay turno abierto", ShiftNotOpenError),
        ("Turno no encontrado o ya cerrado", ShiftNotOpenError),
        ("Stock insuficiente para Cola 600ml", InsufficientStockRejection),
        ("Error al crear venta: database is locked", RejectionError),
    ],
)
def test_map_rejection_keeps_message_verbatim(message, expected) -> None:
    err = map_rejection({"success": False, "data": None, "message": message}, "trace-2")
    assert type(err) is expected
    assert err.message == message
    assert err.status_code == 200
    assert err.trace_id == "trace-2"


@pytest.mark.parametrize(
    "message",
    [
        "Error al cerrar turno: cannot open database connection",
        "Error al abrir turno: database is locked",
        "Error al cerrar turno: FOREIGN KEY constraint failed",
    ],
)
def test_wrapped_database_errors_stay_plain_rejections(message) -> None:
    err = map_rejection({"success": False, "message": message}, None)
    assert type(err) is RejectionError
    assert err.message == message


def test_map_rejection_without_message() -> None:
    err = map_rejection({"success": False}, None)
    assert err.message == "Request rejected"
    assert err.code == "REJECTED"


def test_api_error_str() -> None:
    err = map_error(404, {"code": "NOT_FOUND", "message": "missing"}, "t-1")
    assert str(err) == "[404] NOT_FOUND: missing trace_id=t-1"
