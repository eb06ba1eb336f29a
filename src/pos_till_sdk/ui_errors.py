from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from .exceptions import (
    ApiError,
    InsufficientStockError,
    OperationInFlightError,
    RejectionError,
    ServerError,
    ShiftStateError,
    TransportError,
)
from .validation import ClientValidationError

TRANSPORT_MESSAGE = "Could not reach the server. Check the connection and try again."
CANCELLED_MESSAGE = "The request was cancelled."


class ErrorCategory(str, Enum):
    VALIDATION = "validation"
    REJECTION = "rejection"
    TRANSPORT = "transport"


@dataclass(frozen=True)
class UserFacingError:
    message: str
    category: ErrorCategory
    details: str | None = None
    trace_id: str | None = None

    @property
    def technical_details(self) -> str | None:
        if self.details:
            return self.details
        return None


def classify_error(exc: BaseException) -> ErrorCategory:
    """Local input problems, backend refusals and everything ambiguous."""
    if isinstance(exc, (ClientValidationError, ShiftStateError, OperationInFlightError, InsufficientStockError)):
        return ErrorCategory.VALIDATION
    if isinstance(exc, RejectionError):
        return ErrorCategory.REJECTION
    if isinstance(exc, (TransportError, ServerError)):
        return ErrorCategory.TRANSPORT
    if isinstance(exc, ApiError):
        return ErrorCategory.REJECTION
    return ErrorCategory.TRANSPORT


def to_user_facing_error(exc: BaseException) -> UserFacingError:
    category = classify_error(exc)
    if not isinstance(exc, ApiError):
        return UserFacingError(message=str(exc) or type(exc).__name__, category=category)

    details = f"{exc.code} (HTTP {exc.status_code})"
    if exc.details:
        details = f"{details}: {exc.details}"
    if category is ErrorCategory.TRANSPORT:
        primary = CANCELLED_MESSAGE if exc.code == "REQUEST_CANCELLED" else TRANSPORT_MESSAGE
        details = f"{details} - {exc.message}" if exc.message else details
    else:
        primary = exc.message.strip() or "Request failed"
    return UserFacingError(message=primary, category=category, details=details, trace_id=exc.trace_id)
