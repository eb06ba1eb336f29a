from __future__ import annotations

from dataclasses import dataclass


@dataclass
class ApiError(Exception):
    code: str
    message: str
    details: object | None
    trace_id: str | None
    status_code: int
    raw_payload: object | None = None

    def __str__(self) -> str:
        trace = f" trace_id={self.trace_id}" if self.trace_id else ""
        return f"[{self.status_code}] {self.code}: {self.message}{trace}"


class RejectionError(ApiError):
    """The backend answered a well-formed request with success=false."""


class UnauthorizedError(RejectionError):
    pass


class ForbiddenError(RejectionError):
    pass


class NotFoundError(RejectionError):
    pass


class ValidationError(RejectionError):
    pass


class AuthError(UnauthorizedError):
    """Authentication failed or session is invalid."""


class PermissionError(ForbiddenError):
    """Authorization denied for the current operator."""


class ConflictError(RejectionError):
    """409 or conflict-style errors."""


class RateLimitError(RejectionError):
    """429 throttling error."""


class ShiftAlreadyOpenError(ConflictError):
    pass


class ShiftNotOpenError(RejectionError):
    pass


class InsufficientStockRejection(RejectionError):
    """Backend refused a stock mutation that would drive stock negative."""


class ServerError(ApiError):
    """5xx server-side failures."""


class TransportError(ApiError):
    """Network/transport failure before an HTTP response was returned."""


class ShiftStateError(RuntimeError):
    """A shift transition was requested from a state that does not allow it."""


class OperationInFlightError(RuntimeError):
    def __init__(self, key: tuple[str, str | None], message: str | None = None) -> None:
        self.key = key
        super().__init__(message or f"Operation already in progress: {key[0]}")


class InsufficientStockError(ValueError):
    def __init__(self, product_id: str, current: int, delta: int) -> None:
        self.product_id = product_id
        self.current = current
        self.delta = delta
        super().__init__(
            f"Stock for {product_id} cannot go below 0 (current {current}, change {delta})"
        )
