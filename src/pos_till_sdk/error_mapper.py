from __future__ import annotations

import re
from typing import Mapping

from .exceptions import (
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

# Backend messages are free text (and localized); these whole phrases identify
# the rejections the client reacts to specifically. Anything else, such as a
# wrapped database error, stays a plain rejection.
_SHIFT_NOT_OPEN = re.compile(
    r"\b(no hay turno abierto|turno no encontrado o ya cerrado|shift not found|shift is not open|already closed)\b"
)
_SHIFT_ALREADY_OPEN = re.compile(r"\b(ya tienes un turno abierto|shift already open|already has an open shift)\b")
_INSUFFICIENT_STOCK = re.compile(r"\b(stock insuficiente|insufficient stock|below 0|negative stock)\b")


def _refine(message: str, fallback: type[ApiError]) -> type[ApiError]:
    text = message.lower()
    if _SHIFT_NOT_OPEN.search(text):
        return ShiftNotOpenError
    if _SHIFT_ALREADY_OPEN.search(text):
        return ShiftAlreadyOpenError
    if _INSUFFICIENT_STOCK.search(text):
        return InsufficientStockRejection
    return fallback


def map_error(status_code: int, payload: Mapping[str, object] | None, trace_id: str | None) -> ApiError:
    payload = payload or {}
    code = str(payload.get("code") or "HTTP_ERROR")
    message = str(payload.get("message") or "Request failed")
    details = payload.get("details")
    payload_trace_id = payload.get("trace_id")
    resolved_trace_id = str(payload_trace_id) if payload_trace_id is not None else trace_id
    mapped: type[ApiError]
    if status_code in {401}:
        mapped = AuthError
    elif status_code in {403}:
        mapped = PermissionError
    elif status_code in {404}:
        mapped = NotFoundError
    elif status_code in {400, 422}:
        mapped = _refine(message, ValidationError)
    elif status_code == 409:
        mapped = _refine(message, ConflictError)
    elif status_code == 429:
        mapped = RateLimitError
    elif status_code >= 500:
        mapped = ServerError
    else:
        mapped = ApiError
    return mapped(
        code=code,
        message=message,
        details=details,
        trace_id=resolved_trace_id,
        status_code=status_code,
        raw_payload=dict(payload),
    )


def map_rejection(payload: Mapping[str, object], trace_id: str | None, status_code: int = 200) -> RejectionError:
    """Map a ``{"success": false, "message": ...}`` envelope to a rejection.

    The backend message is kept verbatim so it can be shown to the operator.
    """
    message = str(payload.get("message") or "Request rejected")
    mapped = _refine(message, RejectionError)
    return mapped(
        code=str(payload.get("code") or "REJECTED"),
        message=message,
        details=payload.get("details"),
        trace_id=trace_id,
        status_code=status_code,
        raw_payload=dict(payload),
    )
