from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Mapping

from .money import to_decimal
from .stock_ledger import AdjustmentDirection, preview_adjustment


@dataclass(frozen=True)
class ValidationIssue:
    field: str
    reason: str


@dataclass(frozen=True)
class ValidationResult:
    ok: bool
    issues: list[ValidationIssue]

    def raise_for_issues(self) -> None:
        if not self.ok:
            raise ClientValidationError(self.issues)


class ClientValidationError(ValueError):
    """Input rejected locally; no request was sent."""

    def __init__(self, issues: list[ValidationIssue]) -> None:
        self.issues = issues
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        if not self.issues:
            return "Validation failed"
        return "; ".join(f"{issue.field}: {issue.reason}" for issue in self.issues)


def _require_non_empty(value: str | None, field: str, issues: list[ValidationIssue]) -> None:
    if value is None or not str(value).strip():
        issues.append(ValidationIssue(field=field, reason="is required"))


def _require_non_negative_amount(value: object, field: str, issues: list[ValidationIssue]) -> Decimal | None:
    if value is None or (isinstance(value, str) and not value.strip()):
        issues.append(ValidationIssue(field=field, reason="is required"))
        return None
    amount = to_decimal(value)  # type: ignore[arg-type]
    if amount is None:
        issues.append(ValidationIssue(field=field, reason="must be a number"))
        return None
    if amount < 0:
        issues.append(ValidationIssue(field=field, reason="must be >= 0"))
        return None
    return amount


def validate_open_shift(
    *,
    user_id: str | None,
    register_id: str | None,
    opening_balance: object,
) -> ValidationResult:
    issues: list[ValidationIssue] = []
    _require_non_empty(user_id, "user_id", issues)
    _require_non_empty(register_id, "register_id", issues)
    _require_non_negative_amount(opening_balance, "opening_balance", issues)
    return ValidationResult(ok=not issues, issues=issues)


def validate_close_shift(closing_balance: object, notes: str | None = None, *, require_notes: bool = False) -> ValidationResult:
    issues: list[ValidationIssue] = []
    _require_non_negative_amount(closing_balance, "closing_balance", issues)
    if require_notes:
        _require_non_empty(notes, "notes", issues)
    return ValidationResult(ok=not issues, issues=issues)


def validate_stock_adjustment(
    *,
    product_id: str | None,
    user_id: str | None,
    direction: str | None,
    quantity: object,
    current_stock: int | None,
) -> ValidationResult:
    issues: list[ValidationIssue] = []
    _require_non_empty(product_id, "product_id", issues)
    _require_non_empty(user_id, "user_id", issues)

    resolved: AdjustmentDirection | None = None
    try:
        resolved = AdjustmentDirection(direction)
    except ValueError:
        issues.append(ValidationIssue(field="adjustment_type", reason="must be 'in' or 'out'"))

    magnitude: int | None = None
    parsed = to_decimal(quantity)  # type: ignore[arg-type]
    if parsed is None:
        issues.append(ValidationIssue(field="quantity", reason="is required"))
    elif parsed != parsed.to_integral_value() or parsed <= 0:
        issues.append(ValidationIssue(field="quantity", reason="must be a positive whole number"))
    else:
        magnitude = int(parsed)

    if resolved is not None and magnitude is not None and current_stock is not None:
        if preview_adjustment(current_stock, resolved, magnitude).would_go_negative:
            issues.append(ValidationIssue(field="quantity", reason="would take stock below 0"))
    return ValidationResult(ok=not issues, issues=issues)


def validate_sale_commit(
    *,
    user_id: str | None,
    line_count: int,
    quantities: Mapping[str, int] | None = None,
    total: Decimal | None = None,
    amount_received: object = None,
) -> ValidationResult:
    issues: list[ValidationIssue] = []
    _require_non_empty(user_id, "user_id", issues)
    if line_count <= 0:
        issues.append(ValidationIssue(field="items", reason="cart is empty"))
    for product_id, quantity in (quantities or {}).items():
        if quantity <= 0:
            issues.append(ValidationIssue(field=f"items.{product_id}.quantity", reason="must be > 0"))
    if amount_received is not None:
        received = _require_non_negative_amount(amount_received, "amount_received", issues)
        if received is not None and total is not None and received < total:
            issues.append(ValidationIssue(field="amount_received", reason="is less than the sale total"))
    return ValidationResult(ok=not issues, issues=issues)
