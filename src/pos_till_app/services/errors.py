from __future__ import annotations

from dataclasses import dataclass

from pos_till_sdk.exceptions import ApiError, ServerError, TransportError
from pos_till_sdk.ui_errors import ErrorCategory, to_user_facing_error


@dataclass(frozen=True)
class TillServiceError(RuntimeError):
    message: str
    category: ErrorCategory
    details: str | None = None
    trace_id: str | None = None
    code: str | None = None

    def __str__(self) -> str:
        return self.message

    @classmethod
    def from_exception(cls, exc: Exception) -> TillServiceError:
        if isinstance(exc, TillServiceError):
            return exc
        facing = to_user_facing_error(exc)
        return cls(
            message=facing.message,
            category=facing.category,
            details=facing.details,
            trace_id=facing.trace_id,
            code=exc.code if isinstance(exc, ApiError) else type(exc).__name__,
        )


@dataclass(frozen=True)
class CheckoutServiceError(TillServiceError):
    pass


@dataclass(frozen=True)
class ShiftServiceError(TillServiceError):
    pass


@dataclass(frozen=True)
class StockServiceError(TillServiceError):
    pass


def is_unanswered(exc: Exception) -> bool:
    """True when the backend may or may not have applied the request."""
    return isinstance(exc, (TransportError, ServerError))
