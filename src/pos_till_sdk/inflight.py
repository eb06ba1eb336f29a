from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Iterator, Optional, Tuple

from .exceptions import OperationInFlightError

SALE_COMMIT = "sale_commit"
SHIFT_OPEN = "shift_open"
SHIFT_CLOSE = "shift_close"
STOCK_ADJUST = "stock_adjust"

# An operation on a shift may not start while one of these is pending on the
# same shift.
_BLOCKED_BY: dict[str, frozenset[str]] = {
    SALE_COMMIT: frozenset({SHIFT_CLOSE}),
    SHIFT_CLOSE: frozenset({SALE_COMMIT}),
}

OperationKey = Tuple[str, Optional[str]]


class InFlightGuard:
    """Per-operation in-flight flags for network-bound submissions.

    A second submission of an operation that is still pending is refused
    locally, before any request is built. Sale commits and shift closes on the
    same shift exclude each other so the backend never sees them interleaved.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._pending: set[OperationKey] = set()

    def is_pending(self, operation: str, scope: str | None = None) -> bool:
        with self._lock:
            return (operation, scope) in self._pending

    def pending(self) -> frozenset[OperationKey]:
        with self._lock:
            return frozenset(self._pending)

    def acquire(self, operation: str, scope: str | None = None) -> OperationKey:
        key: OperationKey = (operation, scope)
        with self._lock:
            if key in self._pending:
                raise OperationInFlightError(key)
            for blocker in _BLOCKED_BY.get(operation, frozenset()):
                if scope is not None and (blocker, scope) in self._pending:
                    raise OperationInFlightError(
                        key, f"Cannot start {operation} while {blocker} is in progress for shift {scope}"
                    )
            self._pending.add(key)
        return key

    def release(self, key: OperationKey) -> None:
        with self._lock:
            self._pending.discard(key)

    @contextmanager
    def hold(self, operation: str, scope: str | None = None) -> Iterator[OperationKey]:
        key = self.acquire(operation, scope)
        try:
            yield key
        finally:
            self.release(key)
