"""Currency, tax and discount arithmetic.

Every function here is total over its input domain: anything that does not
parse as a finite number is treated as zero (or formatted as the zero/empty
display value) instead of raising. Tax rates are percentages (``16`` means
16%).
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation, localcontext
from typing import Union

Numeric = Union[Decimal, int, float, str, None]

ZERO = Decimal("0")
CENT = Decimal("0.01")
HUNDRED = Decimal("100")
DEFAULT_TAX_RATE = Decimal("16")
DEFAULT_CASH_DENOMINATION = Decimal("0.50")
# Amounts wider than this are returned unrounded.
_MAX_DIGITS = 1000


@dataclass(frozen=True)
class TaxBreakdown:
    subtotal: Decimal
    tax: Decimal


@dataclass(frozen=True)
class ProfitBreakdown:
    profit: Decimal
    margin: Decimal
    markup: Decimal


def to_decimal(value: Numeric) -> Decimal | None:
    """Parse ``value`` into a finite Decimal, or None when it cannot be."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        return value if value.is_finite() else None
    try:
        parsed = Decimal(str(value).strip()) if isinstance(value, str) else Decimal(str(value))
    except (InvalidOperation, ValueError):
        return None
    return parsed if parsed.is_finite() else None


def _num(value: Numeric) -> Decimal:
    parsed = to_decimal(value)
    return parsed if parsed is not None else ZERO


def _round(value: Decimal, exponent: Decimal = CENT) -> Decimal:
    """Quantize with enough precision for every integer digit of ``value``."""
    digits = value.adjusted() - exponent.as_tuple().exponent + 2
    if digits > _MAX_DIGITS:
        return value
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, digits)
        return value.quantize(exponent, rounding=ROUND_HALF_UP)


def quantize_money(value: Numeric) -> Decimal:
    return _round(_num(value))


def format_currency(amount: Numeric, symbol: str = "$") -> str:
    value = to_decimal(amount)
    if value is None:
        return f"{symbol}0.00"
    rounded = _round(value)
    sign = "-" if rounded < 0 else ""
    return f"{sign}{symbol}{rounded.copy_abs():,.2f}"


def format_number(value: Numeric) -> str:
    parsed = to_decimal(value)
    if parsed is None:
        return "0"
    rounded = _round(parsed)
    text = f"{rounded:,.2f}"
    return text.rstrip("0").rstrip(".") if "." in text else text


def format_percent(value: Numeric) -> str:
    parsed = to_decimal(value)
    if parsed is None:
        return "0%"
    return f"{_round(parsed)}%"


def calculate_tax(amount: Numeric, tax_rate: Numeric = DEFAULT_TAX_RATE) -> Decimal:
    return _num(amount) * _num(tax_rate) / HUNDRED


def total_with_tax(amount: Numeric, tax_rate: Numeric = DEFAULT_TAX_RATE) -> Decimal:
    return _num(amount) + calculate_tax(amount, tax_rate)


def separate_tax(total: Numeric, tax_rate: Numeric = DEFAULT_TAX_RATE) -> TaxBreakdown:
    """Split a tax-inclusive amount into its tax-exclusive subtotal and tax."""
    gross = _num(total)
    divisor = Decimal("1") + _num(tax_rate) / HUNDRED
    if divisor == 0:
        return TaxBreakdown(subtotal=gross, tax=ZERO)
    subtotal = gross / divisor
    return TaxBreakdown(subtotal=subtotal, tax=gross - subtotal)


def calculate_discount(price: Numeric, discount: Numeric, is_percentage: bool = True) -> Decimal:
    if is_percentage:
        return _num(price) * _num(discount) / HUNDRED
    return _num(discount)


def apply_discount(price: Numeric, discount: Numeric, is_percentage: bool = True) -> Decimal:
    return max(ZERO, _num(price) - calculate_discount(price, discount, is_percentage))


def round_to_nearest(value: Numeric, nearest: Numeric = DEFAULT_CASH_DENOMINATION) -> Decimal:
    """Round to the nearest cash denomination, halves rounding away from zero."""
    step = _num(nearest)
    amount = _num(value)
    if step <= 0:
        return amount
    digits = amount.adjusted() - step.adjusted() - step.as_tuple().exponent + 4
    if digits > _MAX_DIGITS:
        return amount
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, digits)
        return _round(amount / step, Decimal("1")) * step


def calculate_change(total: Numeric, received: Numeric) -> Decimal:
    return max(ZERO, _num(received) - _num(total))


def calculate_profit(sale_price: Numeric, cost_price: Numeric) -> ProfitBreakdown:
    sale = _num(sale_price)
    cost = _num(cost_price)
    profit = sale - cost
    margin = profit / sale * HUNDRED if sale != 0 else ZERO
    markup = profit / cost * HUNDRED if cost != 0 else ZERO
    return ProfitBreakdown(profit=max(ZERO, profit), margin=margin, markup=markup)
