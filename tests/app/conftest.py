from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from pathlib import Path
from typing import Any

import pytest

from pos_till_app.state import TillContext
from pos_till_sdk.cart import Cart
from pos_till_sdk.models import Product, ProductWithCategory
from pos_till_sdk.models_sales import Sale
from pos_till_sdk.models_shifts import CashRegister, Shift, ShiftSummary
from pos_till_sdk.shift_store import ShiftStore


def make_shift(shift_id: str = "shift-1", opening_balance: str = "1000", **extra: Any) -> Shift:
    data: dict[str, Any] = {
        "id": shift_id,
        "user_id": "user-1",
        "register_id": "reg-1",
        "opening_balance": opening_balance,
        "status": "open",
    }
    data.update(extra)
    return Shift.model_validate(data)


@dataclass
class FakeSalesClient:
    fail_with: list[Exception] = field(default_factory=list)
    calls: list[dict[str, Any]] = field(default_factory=list)
    counter: int = 0

    def create_sale(self, payload: Any, transaction_id: str | None = None, idempotency_key: str | None = None) -> Sale:
        assert transaction_id
        assert idempotency_key
        self.calls.append({"payload": payload, "transaction_id": transaction_id, "idempotency_key": idempotency_key})
        if self.fail_with:
            raise self.fail_with.pop(0)
        self.counter += 1
        return Sale(id=f"sale-{self.counter}", sale_number=f"V-{self.counter:04d}", total=payload.total)


@dataclass
class FakeShiftsClient:
    current: Shift | None = None
    close_response: Shift | ShiftSummary | None = None
    fail_open: Exception | None = None
    fail_close: Exception | None = None
    open_calls: list[dict[str, Any]] = field(default_factory=list)
    close_calls: list[dict[str, Any]] = field(default_factory=list)

    def list_registers(self) -> list[CashRegister]:
        return [CashRegister(id="reg-1", name="Caja 1")]

    def list_shifts(self) -> list[Shift]:
        return [self.current] if self.current else []

    def get_current_shift(self, user_id: str) -> Shift | None:
        return self.current

    def open_shift(self, payload: Any, transaction_id: str | None = None, idempotency_key: str | None = None) -> Shift:
        self.open_calls.append({"payload": payload, "idempotency_key": idempotency_key})
        if self.fail_open:
            raise self.fail_open
        self.current = make_shift(opening_balance=str(payload.opening_balance), register_id=payload.register_id)
        return self.current

    def close_shift(
        self, shift_id: str, payload: Any, transaction_id: str | None = None, idempotency_key: str | None = None
    ) -> ShiftSummary:
        self.close_calls.append({"shift_id": shift_id, "payload": payload, "idempotency_key": idempotency_key})
        if self.fail_close:
            raise self.fail_close
        if isinstance(self.close_response, ShiftSummary):
            return self.close_response
        closed = self.close_response or self.current.model_copy(
            update={"status": "closed", "closing_balance": payload.closing_balance}
        )
        self.current = None
        return ShiftSummary(shift=closed)


@dataclass
class FakeInventoryClient:
    rows: list[ProductWithCategory] = field(default_factory=list)
    fail_adjust: Exception | None = None
    adjust_calls: list[dict[str, Any]] = field(default_factory=list)

    def list_products(self) -> list[ProductWithCategory]:
        return list(self.rows)

    def low_stock(self) -> list[ProductWithCategory]:
        return [row for row in self.rows if row.stock <= row.min_stock]

    def adjust_stock(self, payload: Any, transaction_id: str | None = None, idempotency_key: str | None = None) -> Any:
        self.adjust_calls.append({"payload": payload, "idempotency_key": idempotency_key})
        if self.fail_adjust:
            raise self.fail_adjust
        return None

    def list_movements(self) -> list[Any]:
        return []

    def list_categories(self) -> list[Any]:
        return []


@dataclass
class FakeProductsClient:
    products: dict[str, Product] = field(default_factory=dict)
    fail_get: Exception | None = None

    def get_product(self, product_id: str) -> Product:
        if self.fail_get:
            raise self.fail_get
        return self.products[product_id]


@dataclass
class FakeSession:
    operator_id: str | None = "user-1"
    shift_store: ShiftStore | None = None
    sales: FakeSalesClient = field(default_factory=FakeSalesClient)
    shifts: FakeShiftsClient = field(default_factory=FakeShiftsClient)
    inventory: FakeInventoryClient = field(default_factory=FakeInventoryClient)
    products: FakeProductsClient = field(default_factory=FakeProductsClient)

    def sales_client(self) -> FakeSalesClient:
        return self.sales

    def shifts_client(self) -> FakeShiftsClient:
        return self.shifts

    def inventory_client(self) -> FakeInventoryClient:
        return self.inventory

    def products_client(self) -> FakeProductsClient:
        return self.products


@pytest.fixture
def session(tmp_path: Path) -> FakeSession:
    return FakeSession(shift_store=ShiftStore(base_dir=tmp_path))


@pytest.fixture
def till(session: FakeSession) -> TillContext:
    return TillContext(session=session, register_id="reg-1", cart=Cart(tax_rate=Decimal("0.16")))
