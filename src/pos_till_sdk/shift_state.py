"""Client-side custody state of one cashier's drawer.

``NONE`` -> ``OPEN`` -> ``CLOSED``. Closed is terminal for that shift; once a
shift closes the current reference is dropped and a new shift may be opened.
Transitions only happen after the backend confirmed them, the machine never
moves optimistically.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum

from .exceptions import ShiftStateError
from .models_shifts import Shift, ShiftSummary, VarianceOutcome
from .money import ZERO, to_decimal


class ShiftState(str, Enum):
    NONE = "none"
    OPEN = "open"
    CLOSED = "closed"


@dataclass(frozen=True)
class ShiftReconciliation:
    opening_balance: Decimal
    cash_sales: Decimal
    expected_balance: Decimal
    declared_balance: Decimal
    variance: Decimal

    @property
    def outcome(self) -> VarianceOutcome:
        return variance_outcome(self.variance)


@dataclass(frozen=True)
class ShiftActionAvailability:
    can_open: bool
    can_close: bool
    sales_attach_shift: bool


def variance_outcome(variance: Decimal) -> VarianceOutcome:
    if variance > 0:
        return "overage"
    if variance < 0:
        return "shortage"
    return "balanced"


def shift_action_availability(state: ShiftState) -> ShiftActionAvailability:
    return ShiftActionAvailability(
        can_open=state in {ShiftState.NONE, ShiftState.CLOSED},
        can_close=state == ShiftState.OPEN,
        sales_attach_shift=state == ShiftState.OPEN,
    )


@dataclass
class ShiftStateMachine:
    current: Shift | None = None
    last_closed: Shift | None = None
    last_reconciliation: ShiftReconciliation | None = None
    _cash_sales: Decimal = ZERO
    _recorded_sales: set[str] = field(default_factory=set)

    @property
    def state(self) -> ShiftState:
        if self.current is not None:
            return ShiftState.OPEN
        if self.last_closed is not None:
            return ShiftState.CLOSED
        return ShiftState.NONE

    @property
    def current_shift_id(self) -> str | None:
        return self.current.id if self.current is not None else None

    @property
    def cash_sales(self) -> Decimal:
        return self._cash_sales

    def ensure_can_open(self) -> None:
        if self.current is not None:
            raise ShiftStateError(f"Shift {self.current.id} is already open")

    def ensure_can_close(self) -> Shift:
        if self.current is None:
            if self.last_closed is not None:
                raise ShiftStateError(f"Shift {self.last_closed.id} is already closed")
            raise ShiftStateError("No open shift to close")
        return self.current

    def open(self, shift: Shift) -> None:
        self.ensure_can_open()
        if not shift.is_open:
            raise ShiftStateError(f"Cannot open shift {shift.id} with status {shift.status!r}")
        self.current = shift
        self.last_closed = None
        self.last_reconciliation = None
        self._cash_sales = ZERO
        self._recorded_sales = set()

    def restore(self, shift: Shift) -> None:
        """Adopt a persisted or server-reported open shift as current."""
        if not shift.is_open:
            raise ShiftStateError(f"Shift {shift.id} is not open")
        if self.current is not None and self.current.id == shift.id:
            self.current = shift
            return
        self.open(shift)

    def forget(self) -> None:
        """Drop the current reference without closing (server says it is gone)."""
        self.current = None
        self._cash_sales = ZERO
        self._recorded_sales = set()

    def record_cash_sale(self, amount: Decimal, sale_id: str | None = None) -> None:
        if self.current is None:
            return
        if sale_id is not None:
            if sale_id in self._recorded_sales:
                return
            self._recorded_sales.add(sale_id)
        self._cash_sales += amount

    def expected_balance(self) -> Decimal:
        shift = self.ensure_can_close()
        return shift.opening_balance + self._cash_sales

    def compute_close(self, closing_balance: Decimal) -> ShiftReconciliation:
        shift = self.ensure_can_close()
        expected = shift.opening_balance + self._cash_sales
        return ShiftReconciliation(
            opening_balance=shift.opening_balance,
            cash_sales=self._cash_sales,
            expected_balance=expected,
            declared_balance=closing_balance,
            variance=closing_balance - expected,
        )

    def close(self, closing_balance: Decimal, confirmed: Shift | ShiftSummary | None = None) -> ShiftReconciliation:
        """Move to CLOSED.

        When the backend's close response is given its expected balance and
        variance are taken as-is; the local figures are only a fallback.
        """
        local = self.compute_close(closing_balance)
        shift = self.ensure_can_close()
        closed_shift = confirmed.shift if isinstance(confirmed, ShiftSummary) else confirmed
        reconciliation = local
        if closed_shift is not None:
            declared = to_decimal(closed_shift.closing_balance)
            declared = declared if declared is not None else closing_balance
            expected = to_decimal(closed_shift.expected_balance)
            expected = expected if expected is not None else local.expected_balance
            variance = to_decimal(closed_shift.difference)
            variance = variance if variance is not None else declared - expected
            reconciliation = ShiftReconciliation(
                opening_balance=closed_shift.opening_balance,
                cash_sales=expected - closed_shift.opening_balance,
                expected_balance=expected,
                declared_balance=declared,
                variance=variance,
            )
        self.last_closed = (
            closed_shift
            if closed_shift is not None
            else shift.model_copy(
                update={
                    "status": "closed",
                    "closing_balance": closing_balance,
                    "expected_balance": reconciliation.expected_balance,
                    "difference": reconciliation.variance,
                }
            )
        )
        self.last_reconciliation = reconciliation
        self.current = None
        self._cash_sales = ZERO
        self._recorded_sales = set()
        return reconciliation
