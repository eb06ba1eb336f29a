"""In-progress sale: line items plus a single tax rate.

Totals are derived on every read from the current lines, so there is no
cached value that can drift from a mutation. The cart performs no stock
checks and no network calls; stock is validated by the backend at commit.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from decimal import Decimal
from typing import Any, Mapping

from .models import Product
from .money import DEFAULT_TAX_RATE, ZERO, apply_discount, calculate_tax, to_decimal

DEFAULT_TAX_FRACTION = DEFAULT_TAX_RATE / Decimal("100")


@dataclass
class LineItem:
    product_id: str
    name: str
    unit_price: Decimal
    quantity: int = 1
    discount: Decimal = ZERO
    sku: str | None = None
    notes: str | None = None

    @property
    def gross(self) -> Decimal:
        return self.unit_price * self.quantity

    @property
    def line_total(self) -> Decimal:
        # A non-positive gross only happens when the caller passed a bad
        # quantity; it is reported as-is instead of being floored away.
        gross = self.gross
        if gross <= 0:
            return gross
        return apply_discount(gross, self.discount, is_percentage=False)


class Cart:
    def __init__(self, tax_rate: Decimal | float | str = DEFAULT_TAX_FRACTION) -> None:
        rate = to_decimal(tax_rate)
        if rate is None or rate < 0:
            raise ValueError(f"Invalid cart tax rate: {tax_rate!r}")
        self.tax_rate = rate
        self._lines: dict[str, LineItem] = {}

    @property
    def items(self) -> tuple[LineItem, ...]:
        return tuple(replace(line) for line in self._lines.values())

    @property
    def is_empty(self) -> bool:
        return not self._lines

    @property
    def item_count(self) -> int:
        return sum(line.quantity for line in self._lines.values())

    def line(self, product_id: str) -> LineItem | None:
        line = self._lines.get(product_id)
        return replace(line) if line is not None else None

    def add_item(self, product: Product | Mapping[str, Any]) -> LineItem:
        product = product if isinstance(product, Product) else Product.model_validate(product)
        existing = self._lines.get(product.id)
        if existing is not None:
            existing.quantity += 1
            return replace(existing)
        line = LineItem(
            product_id=product.id,
            name=product.name,
            sku=product.sku,
            unit_price=Decimal(product.price),
        )
        self._lines[product.id] = line
        return replace(line)

    def remove_item(self, product_id: str) -> None:
        self._lines.pop(product_id, None)

    def update_quantity(self, product_id: str, quantity: int) -> None:
        value = to_decimal(quantity)
        if value is None or value != value.to_integral_value():
            raise ValueError(f"Quantity must be a whole number, got {quantity!r}")
        line = self._lines.get(product_id)
        if line is not None:
            line.quantity = int(value)

    def update_discount(self, product_id: str, discount: Decimal | float | str) -> None:
        line = self._lines.get(product_id)
        if line is None:
            return
        value = to_decimal(discount)
        line.discount = value if value is not None else ZERO

    def update_notes(self, product_id: str, notes: str | None) -> None:
        line = self._lines.get(product_id)
        if line is not None:
            line.notes = notes or None

    def clear(self) -> None:
        self._lines.clear()

    def get_subtotal(self) -> Decimal:
        return sum((line.line_total for line in self._lines.values()), ZERO)

    def get_tax_amount(self) -> Decimal:
        return calculate_tax(self.get_subtotal(), self.tax_rate * Decimal("100"))

    def get_total(self) -> Decimal:
        return self.get_subtotal() + self.get_tax_amount()

    def get_discount_total(self) -> Decimal:
        return sum((line.discount for line in self._lines.values()), ZERO)

    def __len__(self) -> int:
        return len(self._lines)
