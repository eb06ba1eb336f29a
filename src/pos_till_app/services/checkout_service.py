"""Sale Commit Protocol.

A commit turns the current cart into one immutable sale payload, sends it
once and only then touches local state. On success the cart is cleared and the
cash is credited to the open shift; on any failure the cart is left exactly as
it was so the operator can retry or cancel.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import TYPE_CHECKING

from pos_till_sdk.cart import Cart
from pos_till_sdk.exceptions import ApiError, InsufficientStockError, OperationInFlightError
from pos_till_sdk.inflight import SALE_COMMIT
from pos_till_sdk.models_sales import PaymentMethod, Sale, SaleCreateRequest, SaleItemRequest
from pos_till_sdk.money import calculate_change, format_currency, quantize_money, round_to_nearest, to_decimal
from pos_till_sdk.stock_ledger import SaleLineQuantity
from pos_till_sdk.validation import ClientValidationError, validate_sale_commit

from .errors import CheckoutServiceError, is_unanswered

if TYPE_CHECKING:
    from ..state import TillContext

logger = logging.getLogger(__name__)

SHIFT_LESS_WARNING = "No shift is open: the sale was recorded without a shift."


@dataclass(frozen=True)
class CheckoutResult:
    sale: Sale
    snapshot: SaleCreateRequest
    shift_less: bool = False
    warning: str | None = None
    change: Decimal | None = None
    cash_due: Decimal | None = None
    currency_symbol: str = "$"

    @property
    def sale_id(self) -> str:
        return self.sale.id

    @property
    def sale_number(self) -> str | None:
        return self.sale.sale_number

    @property
    def total_display(self) -> str:
        amount = self.cash_due if self.cash_due is not None else self.snapshot.total
        return format_currency(amount, self.currency_symbol)

    @property
    def change_display(self) -> str | None:
        if self.change is None:
            return None
        return format_currency(self.change, self.currency_symbol)


def build_sale_snapshot(
    cart: Cart,
    *,
    user_id: str,
    shift_id: str | None,
    customer_id: str | None = None,
    payment_method: PaymentMethod = "cash",
) -> SaleCreateRequest:
    """Freeze the cart's prices, discounts and totals into a sale payload."""
    items = tuple(
        SaleItemRequest(
            product_id=line.product_id,
            quantity=line.quantity,
            unit_price=line.unit_price,
            discount_amount=line.discount,
            tax_rate=cart.tax_rate,
        )
        for line in cart.items
    )
    subtotal = quantize_money(cart.get_subtotal())
    tax_amount = quantize_money(cart.get_tax_amount())
    return SaleCreateRequest(
        user_id=user_id,
        shift_id=shift_id,
        customer_id=customer_id,
        items=items,
        subtotal=subtotal,
        tax_amount=tax_amount,
        discount_amount=quantize_money(cart.get_discount_total()),
        total=subtotal + tax_amount,
        payment_method=payment_method,
    )


class CheckoutService:
    def __init__(self, till: TillContext) -> None:
        self.till = till

    def commit(
        self,
        *,
        payment_method: PaymentMethod = "cash",
        customer_id: str | None = None,
        amount_received: Decimal | float | str | None = None,
    ) -> CheckoutResult:
        till = self.till
        cart = till.cart
        user_id = till.operator_id
        total = quantize_money(cart.get_total())
        # Cash is collected in whole denominations; the sale itself keeps the exact total.
        cash_due = round_to_nearest(total, till.cash_rounding) if payment_method == "cash" else None

        validation = validate_sale_commit(
            user_id=user_id,
            line_count=len(cart),
            quantities={line.product_id: line.quantity for line in cart.items},
            total=cash_due if cash_due is not None else total,
            amount_received=amount_received,
        )
        if not validation.ok:
            error = ClientValidationError(validation.issues)
            logger.warning("sale_commit_invalid", extra={"reason": str(error)})
            raise CheckoutServiceError.from_exception(error) from error

        shift_id = till.machine.current_shift_id
        shift_less = shift_id is None
        if shift_less:
            logger.warning("sale_without_shift", extra={"user_id": user_id, "register_id": till.register_id})

        snapshot = build_sale_snapshot(
            cart,
            user_id=user_id,
            shift_id=shift_id,
            customer_id=customer_id,
            payment_method=payment_method,
        )
        logger.info(
            "sale_commit_attempt",
            extra={"user_id": user_id, "shift_id": shift_id, "lines": len(snapshot.items), "total": str(snapshot.total)},
        )
        try:
            with till.guard.hold(SALE_COMMIT, shift_id):
                keys = till.attempt_for(SALE_COMMIT, snapshot.model_dump_json())
                sale = till.session.sales_client().create_sale(
                    snapshot,
                    transaction_id=keys.transaction_id,
                    idempotency_key=keys.idempotency_key,
                )
        except OperationInFlightError as exc:
            logger.warning("sale_commit_in_flight", extra={"user_id": user_id, "shift_id": shift_id})
            raise CheckoutServiceError.from_exception(exc) from exc
        except ApiError as exc:
            if not is_unanswered(exc):
                # Answered: a later resubmission is a new attempt.
                till.clear_attempt(SALE_COMMIT)
            logger.warning(
                "sale_commit_failure",
                extra={"user_id": user_id, "shift_id": shift_id, "code": exc.code},
            )
            raise CheckoutServiceError.from_exception(exc) from exc
        except Exception as exc:
            logger.exception("sale_commit_failure", extra={"user_id": user_id, "shift_id": shift_id})
            raise CheckoutServiceError.from_exception(exc) from exc

        till.clear_attempt(SALE_COMMIT)
        cart.clear()
        if snapshot.payment_method == "cash":
            till.machine.record_cash_sale(snapshot.total, sale_id=sale.id)
        self._record_stock(sale, snapshot)

        change = None
        received = to_decimal(amount_received)
        if received is not None:
            change = calculate_change(cash_due if cash_due is not None else snapshot.total, received)

        logger.info(
            "sale_commit_success",
            extra={"sale_id": sale.id, "sale_number": sale.sale_number, "shift_id": shift_id, "shift_less": shift_less},
        )
        return CheckoutResult(
            sale=sale,
            snapshot=snapshot,
            shift_less=shift_less,
            warning=SHIFT_LESS_WARNING if shift_less else None,
            change=change,
            cash_due=cash_due,
            currency_symbol=till.currency_symbol,
        )

    def cancel(self) -> None:
        """Abandon the in-progress sale."""
        logger.info("sale_cancelled", extra={"lines": len(self.till.cart)})
        self.till.cart.clear()

    def _record_stock(self, sale: Sale, snapshot: SaleCreateRequest) -> None:
        ledger = self.till.ledger
        if not all(ledger.tracks(item.product_id) for item in snapshot.items):
            return
        lines = [SaleLineQuantity(product_id=item.product_id, quantity=item.quantity) for item in snapshot.items]
        try:
            ledger.record_sale(sale.id, lines, user_id=snapshot.user_id)
        except InsufficientStockError as exc:
            # The backend accepted the sale; the local levels are stale until
            # the next product read re-seeds them.
            logger.warning("sale_stock_out_of_sync", extra={"sale_id": sale.id, "product_id": exc.product_id})
