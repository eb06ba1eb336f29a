from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal

from pos_till_sdk.cart import Cart
from pos_till_sdk.idempotency import IdempotencyKeys, new_idempotency_keys
from pos_till_sdk.inflight import InFlightGuard
from pos_till_sdk.money import DEFAULT_CASH_DENOMINATION
from pos_till_sdk.session import ApiSession
from pos_till_sdk.shift_state import ShiftStateMachine
from pos_till_sdk.stock_ledger import StockLedger

from .services.checkout_service import CheckoutService
from .services.shift_service import ShiftService
from .services.stock_service import StockService


@dataclass(frozen=True)
class PendingAttempt:
    keys: IdempotencyKeys
    fingerprint: str


@dataclass
class TillContext:
    """Everything one operator's till holds for the lifetime of a session.

    One context per (operator, register); nothing here is process-global, so
    two tills in the same process never see each other's cart or shift.
    """

    session: ApiSession
    register_id: str | None = None
    cart: Cart = field(default_factory=Cart)
    machine: ShiftStateMachine = field(default_factory=ShiftStateMachine)
    ledger: StockLedger = field(default_factory=StockLedger)
    guard: InFlightGuard = field(default_factory=InFlightGuard)
    pending_attempts: dict[str, PendingAttempt] = field(default_factory=dict)
    cash_rounding: Decimal = DEFAULT_CASH_DENOMINATION
    currency_symbol: str = "$"

    @classmethod
    def create(cls, session: ApiSession, *, register_id: str | None = None) -> TillContext:
        return cls(
            session=session,
            register_id=register_id,
            cart=Cart(tax_rate=session.config.tax_fraction),
            cash_rounding=session.config.cash_rounding,
            currency_symbol=session.config.currency_symbol,
        )

    @property
    def operator_id(self) -> str | None:
        return self.session.operator_id

    def attempt_for(self, operation: str, fingerprint: str) -> IdempotencyKeys:
        """Keys for submitting ``fingerprint`` under ``operation``.

        Resubmitting the same payload after an unanswered attempt reuses its
        keys so the backend can deduplicate; a different payload starts a new
        attempt.
        """
        pending = self.pending_attempts.get(operation)
        if pending is not None and pending.fingerprint == fingerprint:
            return pending.keys
        keys = new_idempotency_keys()
        self.pending_attempts[operation] = PendingAttempt(keys=keys, fingerprint=fingerprint)
        return keys

    def clear_attempt(self, operation: str) -> None:
        self.pending_attempts.pop(operation, None)

    def checkout_service(self) -> CheckoutService:
        return CheckoutService(self)

    def shift_service(self) -> ShiftService:
        return ShiftService(self)

    def stock_service(self) -> StockService:
        return StockService(self)
