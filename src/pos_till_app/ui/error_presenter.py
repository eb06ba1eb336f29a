from __future__ import annotations

from dataclasses import dataclass

from pos_till_sdk.ui_errors import ErrorCategory, to_user_facing_error

from ..services.errors import TillServiceError

_ACTIONS = {
    ErrorCategory.VALIDATION: "Correct the highlighted input",
    ErrorCategory.REJECTION: "Review the message and adjust the request",
    ErrorCategory.TRANSPORT: "Retry",
}


@dataclass(frozen=True)
class PresentedError:
    category: ErrorCategory
    message: str
    action: str
    safe_to_retry: bool
    details: str | None = None
    trace_id: str | None = None

    def banner(self) -> str:
        trace = self.trace_id or "n/a"
        return f"[{self.category.value}] {self.message} ({self.action}; trace_id={trace})"


class ErrorPresenter:
    """Turns service failures into what the till screen shows.

    Only transport failures are offered as retryable: the backend may not have
    seen the request, and a retry of the same attempt reuses its idempotency
    key. Rejections and validation failures need the operator to change
    something first.
    """

    def present(self, error: Exception) -> PresentedError:
        if isinstance(error, TillServiceError):
            category = error.category
            message = error.message
            details = error.details
            trace_id = error.trace_id
        else:
            facing = to_user_facing_error(error)
            category = facing.category
            message = facing.message
            details = facing.details
            trace_id = facing.trace_id
        return PresentedError(
            category=category,
            message=message,
            action=_ACTIONS[category],
            safe_to_retry=category is ErrorCategory.TRANSPORT,
            details=details,
            trace_id=trace_id,
        )
