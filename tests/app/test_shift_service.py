from __future__ import annotations

from decimal import Decimal

import pytest

from pos_till_app.services import ShiftServiceError
from pos_till_app.state import TillContext
from pos_till_sdk.error_mapper import map_rejection
from pos_till_sdk.exceptions import ShiftNotOpenError, TransportError
from pos_till_sdk.inflight import SALE_COMMIT
from pos_till_sdk.models_shifts import ShiftSummary
from pos_till_sdk.shift_state import ShiftState
from pos_till_sdk.ui_errors import ErrorCategory

from .conftest import FakeSession, make_shift


def _sell_cash(till: TillContext, make_product, amount: str) -> None:
    till.cart.add_item(make_product("cash-item", price=Decimal(amount)))
    till.cart.tax_rate = Decimal("0")
    till.checkout_service().commit()


def test_open_sell_close_reconciles_locally(session: FakeSession, till: TillContext, make_product) -> None:
    service = till.shift_service()
    shift = service.open_shift("1000")
    assert shift.opening_balance == Decimal("1000")
    assert till.machine.state is ShiftState.OPEN
    assert session.shift_store.load().id == shift.id

    _sell_cash(till, make_product, "500")
    result = service.close_shift("1480", notes="faltante")

    assert result.reconciliation.expected_balance == Decimal("1500")
    assert result.variance == Decimal("-20")
    assert result.outcome == "shortage"
    assert till.machine.state is ShiftState.CLOSED
    assert session.shift_store.load() is None
    assert session.shifts.close_calls[0]["payload"].notes == "faltante"


def test_backend_variance_is_taken_verbatim(session: FakeSession, till: TillContext) -> None:
    service = till.shift_service()
    service.open_shift("1000")
    session.shifts.close_response = ShiftSummary(
        shift=make_shift(
            status="closed",
            closing_balance="1480",
            expected_balance="1490",
            difference="-10",
        ),
        cash_sales="490",
    )

    result = service.close_shift("1480")

    assert result.reconciliation.expected_balance == Decimal("1490")
    assert result.variance == Decimal("-10")


def test_second_open_is_rejected_locally(session: FakeSession, till: TillContext) -> None:
    service = till.shift_service()
    service.open_shift("100")
    with pytest.raises(ShiftServiceError) as excinfo:
        service.open_shift("100")
    assert excinfo.value.category is ErrorCategory.VALIDATION
    assert len(session.shifts.open_calls) == 1


def test_negative_opening_balance(session: FakeSession, till: TillContext) -> None:
    with pytest.raises(ShiftServiceError) as excinfo:
        till.shift_service().open_shift("-5")
    assert "opening_balance" in excinfo.value.message
    assert session.shifts.open_calls == []


def test_open_without_register(session: FakeSession, till: TillContext) -> None:
    till.register_id = None
    with pytest.raises(ShiftServiceError) as excinfo:
        till.shift_service().open_shift("0")
    assert "register_id" in excinfo.value.message
    assert session.shifts.open_calls == []


def test_open_retry_after_transport_failure_reuses_key(session: FakeSession, till: TillContext) -> None:
    service = till.shift_service()
    session.shifts.fail_open = TransportError(
        code="NETWORK_ERROR", message="Connection reset", details=None, trace_id=None, status_code=0
    )
    with pytest.raises(ShiftServiceError):
        service.open_shift("250")
    session.shifts.fail_open = None
    service.open_shift("250")

    first, second = session.shifts.open_calls
    assert first["idempotency_key"] == second["idempotency_key"]


def test_close_without_shift(session: FakeSession, till: TillContext) -> None:
    with pytest.raises(ShiftServiceError) as excinfo:
        till.shift_service().close_shift("0")
    assert excinfo.value.category is ErrorCategory.VALIDATION
    assert session.shifts.close_calls == []


def test_close_blocked_while_sale_commit_pending(session: FakeSession, till: TillContext) -> None:
    service = till.shift_service()
    shift = service.open_shift("100")
    key = till.guard.acquire(SALE_COMMIT, shift.id)
    try:
        with pytest.raises(ShiftServiceError):
            service.close_shift("100")
    finally:
        till.guard.release(key)
    assert session.shifts.close_calls == []
    assert till.machine.state is ShiftState.OPEN


def test_close_of_shift_gone_on_backend(session: FakeSession, till: TillContext) -> None:
    service = till.shift_service()
    service.open_shift("100")
    session.shifts.fail_close = ShiftNotOpenError(
        code="REJECTED", message="Turno no encontrado o ya cerrado", details=None, trace_id=None, status_code=200
    )

    with pytest.raises(ShiftServiceError) as excinfo:
        service.close_shift("100")

    assert excinfo.value.message == "Turno no encontrado o ya cerrado"
    assert service.current_shift is None
    assert session.shift_store.load() is None


def test_restore_from_store(session: FakeSession, till: TillContext) -> None:
    session.shift_store.save(make_shift())
    shift = till.shift_service().restore()
    assert shift is not None
    assert till.machine.current_shift_id == "shift-1"


def test_restore_skips_other_operator(session: FakeSession, till: TillContext) -> None:
    session.shift_store.save(make_shift(user_id="user-2"))
    assert till.shift_service().restore() is None
    assert till.machine.state is ShiftState.NONE


def test_refresh_current_follows_backend(session: FakeSession, till: TillContext) -> None:
    service = till.shift_service()
    session.shifts.current = make_shift("shift-9")

    assert service.refresh_current().id == "shift-9"
    assert till.machine.current_shift_id == "shift-9"
    assert session.shift_store.load().id == "shift-9"

    session.shifts.current = None
    assert service.refresh_current() is None
    assert till.machine.current is None
    assert session.shift_store.load() is None


def test_availability(till: TillContext) -> None:
    service = till.shift_service()
    assert service.availability().can_open
    service.open_shift("0")
    availability = service.availability()
    assert availability.can_close
    assert not availability.can_open


def test_registers_and_history(till: TillContext) -> None:
    service = till.shift_service()
    assert service.list_registers()[0].id == "reg-1"
    service.open_shift("0")
    assert [shift.id for shift in service.list_shifts()] == ["shift-1"]


def test_close_failure_from_database_keeps_shift(session: FakeSession, till: TillContext) -> None:
    service = till.shift_service()
    shift = service.open_shift("100")
    session.shifts.fail_close = map_rejection(
        {"success": False, "message": "Error al cerrar turno: cannot open database connection"}, None
    )

    with pytest.raises(ShiftServiceError) as excinfo:
        service.close_shift("100")

    assert excinfo.value.category is ErrorCategory.REJECTION
    assert service.current_shift.id == shift.id
    assert till.machine.state is ShiftState.OPEN
    assert session.shift_store.load().id == shift.id
