from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import TYPE_CHECKING

from pos_till_sdk.exceptions import ApiError, OperationInFlightError, ShiftNotOpenError, ShiftStateError
from pos_till_sdk.inflight import SHIFT_CLOSE, SHIFT_OPEN
from pos_till_sdk.models_shifts import CashRegister, Shift, ShiftCloseRequest, ShiftOpenRequest, ShiftSummary
from pos_till_sdk.money import to_decimal
from pos_till_sdk.shift_state import ShiftActionAvailability, ShiftReconciliation, shift_action_availability
from pos_till_sdk.validation import ClientValidationError, ValidationIssue, validate_close_shift, validate_open_shift

from .errors import ShiftServiceError, is_unanswered

if TYPE_CHECKING:
    from ..state import TillContext

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ShiftCloseResult:
    summary: ShiftSummary
    reconciliation: ShiftReconciliation

    @property
    def variance(self) -> Decimal:
        return self.reconciliation.variance

    @property
    def outcome(self) -> str:
        return self.reconciliation.outcome


class ShiftService:
    def __init__(self, till: TillContext) -> None:
        self.till = till

    @property
    def current_shift(self) -> Shift | None:
        return self.till.machine.current

    def availability(self) -> ShiftActionAvailability:
        return shift_action_availability(self.till.machine.state)

    def restore(self) -> Shift | None:
        """Adopt the persisted shift reference, if it belongs to this operator."""
        store = self.till.session.shift_store
        shift = store.load() if store else None
        if shift is None:
            return None
        operator_id = self.till.operator_id
        if operator_id and shift.user_id != operator_id:
            logger.info("shift_restore_skipped", extra={"shift_id": shift.id, "user_id": operator_id})
            return None
        self._adopt(shift)
        logger.info("shift_restored", extra={"shift_id": shift.id})
        return shift

    def refresh_current(self) -> Shift | None:
        """Ask the backend for the operator's open shift and follow its answer."""
        user_id = self._require_operator("shift_refresh")
        try:
            shift = self.till.session.shifts_client().get_current_shift(user_id)
        except Exception as exc:
            raise self._failure("shift_refresh_failure", exc) from exc
        if shift is None or not shift.is_open:
            self._drop_current()
            return None
        self._adopt(shift)
        self._save(shift)
        return shift

    def open_shift(self, opening_balance: Decimal | float | str, register_id: str | None = None) -> Shift:
        till = self.till
        register_id = register_id or till.register_id
        user_id = till.operator_id
        validation = validate_open_shift(user_id=user_id, register_id=register_id, opening_balance=opening_balance)
        if not validation.ok:
            error = ClientValidationError(validation.issues)
            logger.warning("shift_open_invalid", extra={"reason": str(error)})
            raise ShiftServiceError.from_exception(error) from error

        request = ShiftOpenRequest(user_id=user_id, register_id=register_id, opening_balance=to_decimal(opening_balance))
        logger.info("shift_open_attempt", extra={"user_id": user_id, "register_id": register_id})
        try:
            till.machine.ensure_can_open()
            with till.guard.hold(SHIFT_OPEN, register_id):
                keys = till.attempt_for(SHIFT_OPEN, request.model_dump_json())
                shift = till.session.shifts_client().open_shift(
                    request,
                    transaction_id=keys.transaction_id,
                    idempotency_key=keys.idempotency_key,
                )
        except Exception as exc:
            if isinstance(exc, ApiError) and not is_unanswered(exc):
                till.clear_attempt(SHIFT_OPEN)
            raise self._failure("shift_open_failure", exc) from exc

        till.clear_attempt(SHIFT_OPEN)
        till.machine.open(shift)
        self._save(shift)
        logger.info("shift_open_success", extra={"shift_id": shift.id, "register_id": register_id})
        return shift

    def close_shift(self, closing_balance: Decimal | float | str, notes: str | None = None) -> ShiftCloseResult:
        till = self.till
        validation = validate_close_shift(closing_balance, notes)
        if not validation.ok:
            error = ClientValidationError(validation.issues)
            logger.warning("shift_close_invalid", extra={"reason": str(error)})
            raise ShiftServiceError.from_exception(error) from error

        declared = to_decimal(closing_balance)
        request = ShiftCloseRequest(closing_balance=declared, notes=notes or None)
        try:
            shift = till.machine.ensure_can_close()
            logger.info("shift_close_attempt", extra={"shift_id": shift.id})
            with till.guard.hold(SHIFT_CLOSE, shift.id):
                keys = till.attempt_for(SHIFT_CLOSE, f"{shift.id}:{request.model_dump_json()}")
                summary = till.session.shifts_client().close_shift(
                    shift.id,
                    request,
                    transaction_id=keys.transaction_id,
                    idempotency_key=keys.idempotency_key,
                )
        except ShiftNotOpenError as exc:
            # The backend no longer has this shift open; follow it.
            till.clear_attempt(SHIFT_CLOSE)
            self._drop_current()
            raise self._failure("shift_close_failure", exc) from exc
        except Exception as exc:
            if isinstance(exc, ApiError) and not is_unanswered(exc):
                till.clear_attempt(SHIFT_CLOSE)
            raise self._failure("shift_close_failure", exc) from exc

        till.clear_attempt(SHIFT_CLOSE)
        reconciliation = till.machine.close(declared, summary)
        self._clear_saved()
        logger.info(
            "shift_close_success",
            extra={
                "shift_id": summary.shift.id,
                "expected_balance": str(reconciliation.expected_balance),
                "variance": str(reconciliation.variance),
                "outcome": reconciliation.outcome,
            },
        )
        return ShiftCloseResult(summary=summary, reconciliation=reconciliation)

    def list_registers(self) -> list[CashRegister]:
        try:
            return self.till.session.shifts_client().list_registers()
        except Exception as exc:
            raise self._failure("shift_registers_failure", exc) from exc

    def list_shifts(self) -> list[Shift]:
        try:
            return self.till.session.shifts_client().list_shifts()
        except Exception as exc:
            raise self._failure("shift_list_failure", exc) from exc

    def _require_operator(self, event: str) -> str:
        user_id = self.till.operator_id
        if not user_id:
            error = ClientValidationError([ValidationIssue(field="user_id", reason="is required")])
            logger.warning(event, extra={"reason": str(error)})
            raise ShiftServiceError.from_exception(error) from error
        return user_id

    def _adopt(self, shift: Shift) -> None:
        machine = self.till.machine
        if machine.current is not None and machine.current.id != shift.id:
            machine.forget()
        machine.restore(shift)

    def _drop_current(self) -> None:
        if self.till.machine.current is not None:
            logger.info("shift_reference_dropped", extra={"shift_id": self.till.machine.current_shift_id})
        self.till.machine.forget()
        self._clear_saved()

    def _save(self, shift: Shift) -> None:
        store = self.till.session.shift_store
        if store:
            store.save(shift)

    def _clear_saved(self) -> None:
        store = self.till.session.shift_store
        if store:
            store.clear()

    @staticmethod
    def _failure(event: str, exc: Exception) -> ShiftServiceError:
        if isinstance(exc, (ApiError, ShiftStateError, OperationInFlightError)):
            logger.warning(event, extra={"error": str(exc)})
        else:
            logger.exception(event)
        return ShiftServiceError.from_exception(exc)
