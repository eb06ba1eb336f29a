from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Literal, Mapping

from pos_till_sdk.exceptions import ApiError, InsufficientStockRejection, OperationInFlightError
from pos_till_sdk.inflight import STOCK_ADJUST
from pos_till_sdk.models import Category, CategoryCreateRequest, Product, ProductWithCategory
from pos_till_sdk.models_inventory import InventoryMovement, StockAdjustmentRequest
from pos_till_sdk.money import to_decimal
from pos_till_sdk.stock_ledger import (
    AdjustmentDirection,
    StockLevelRead,
    StockPreview,
    StockStatus,
    preview_adjustment,
    stock_status,
)
from pos_till_sdk.validation import ClientValidationError, validate_stock_adjustment

from .errors import StockServiceError, is_unanswered

if TYPE_CHECKING:
    from ..state import TillContext

logger = logging.getLogger(__name__)

AdjustmentStatus = Literal["applied", "rejected"]


@dataclass(frozen=True)
class StockRow:
    product: ProductWithCategory
    status: StockStatus


@dataclass(frozen=True)
class StockAdjustmentOutcome:
    """Result of one manual adjustment.

    ``rejected`` means the backend declined the movement (for example it would
    drive stock negative); stock is then unchanged and ``message`` carries the
    backend's reason.
    """

    status: AdjustmentStatus
    product_id: str
    preview: StockPreview
    level: StockLevelRead
    message: str | None = None

    @property
    def applied(self) -> bool:
        return self.status == "applied"


class StockService:
    def __init__(self, till: TillContext) -> None:
        self.till = till

    def products(self) -> list[StockRow]:
        try:
            rows = self.till.session.inventory_client().list_products()
        except Exception as exc:
            raise self._failure("stock_products_failure", exc) from exc
        return self._rows(rows)

    def low_stock(self) -> list[StockRow]:
        try:
            rows = self.till.session.inventory_client().low_stock()
        except Exception as exc:
            raise self._failure("stock_low_stock_failure", exc) from exc
        return self._rows(rows)

    def movements(self) -> list[InventoryMovement]:
        try:
            return self.till.session.inventory_client().list_movements()
        except Exception as exc:
            raise self._failure("stock_movements_failure", exc) from exc

    def categories(self) -> list[Category]:
        try:
            return self.till.session.inventory_client().list_categories()
        except Exception as exc:
            raise self._failure("stock_categories_failure", exc) from exc

    def create_category(self, payload: CategoryCreateRequest | Mapping[str, Any]) -> Category:
        try:
            return self.till.session.inventory_client().create_category(payload)
        except Exception as exc:
            raise self._failure("stock_category_create_failure", exc) from exc

    def adjust(
        self,
        product: Product,
        direction: AdjustmentDirection | str,
        quantity: int | str,
        notes: str | None = None,
    ) -> StockAdjustmentOutcome:
        till = self.till
        user_id = till.operator_id
        ledger = till.ledger
        # The product passed in is the latest read; it is the baseline.
        current = product.stock
        if current >= 0:
            ledger.seed(product.id, current, user_id=user_id)

        raw_direction = direction.value if isinstance(direction, AdjustmentDirection) else direction
        validation = validate_stock_adjustment(
            product_id=product.id,
            user_id=user_id,
            direction=raw_direction,
            quantity=quantity,
            current_stock=current,
        )
        if not validation.ok:
            error = ClientValidationError(validation.issues)
            logger.warning("stock_adjust_invalid", extra={"product_id": product.id, "reason": str(error)})
            raise StockServiceError.from_exception(error) from error

        resolved = AdjustmentDirection(raw_direction)
        magnitude = int(to_decimal(quantity))
        preview = preview_adjustment(current, resolved, magnitude)
        request = StockAdjustmentRequest(
            product_id=product.id,
            quantity=magnitude,
            adjustment_type=resolved.value,
            notes=notes or None,
            user_id=user_id,
        )
        # One pending attempt per product, matching the guard scope.
        attempt = f"{STOCK_ADJUST}:{product.id}"
        logger.info(
            "stock_adjust_attempt",
            extra={"product_id": product.id, "direction": resolved.value, "quantity": magnitude},
        )
        try:
            with till.guard.hold(STOCK_ADJUST, product.id):
                keys = till.attempt_for(attempt, request.model_dump_json())
                till.session.inventory_client().adjust_stock(
                    request,
                    transaction_id=keys.transaction_id,
                    idempotency_key=keys.idempotency_key,
                )
        except InsufficientStockRejection as exc:
            till.clear_attempt(attempt)
            logger.warning("stock_adjust_rejected", extra={"product_id": product.id, "reason": exc.message})
            return StockAdjustmentOutcome(
                status="rejected",
                product_id=product.id,
                preview=preview,
                level=StockLevelRead(product_id=product.id, estimated=current),
                message=exc.message,
            )
        except Exception as exc:
            if isinstance(exc, ApiError) and not is_unanswered(exc):
                till.clear_attempt(attempt)
            raise self._failure("stock_adjust_failure", exc) from exc

        till.clear_attempt(attempt)
        if ledger.tracks(product.id):
            ledger.record_adjustment(product.id, resolved, magnitude, user_id=user_id, notes=request.notes)
        level = StockLevelRead(product_id=product.id, estimated=preview.projected)
        level = self._confirm(level)
        logger.info(
            "stock_adjust_success",
            extra={"product_id": product.id, "estimated": level.estimated, "confirmed": level.confirmed},
        )
        return StockAdjustmentOutcome(status="applied", product_id=product.id, preview=preview, level=level)

    def _confirm(self, level: StockLevelRead) -> StockLevelRead:
        """Replace the estimate with the backend's level when it can be read."""
        try:
            fresh = self.till.session.products_client().get_product(level.product_id)
        except ApiError as exc:
            logger.warning("stock_adjust_reread_failed", extra={"product_id": level.product_id, "code": exc.code})
            return level
        if fresh.stock >= 0:
            self.till.ledger.seed(fresh.id, fresh.stock)
        return level.confirm(fresh.stock)

    def _rows(self, products: list[ProductWithCategory]) -> list[StockRow]:
        rows = []
        for product in products:
            if product.stock >= 0:
                self.till.ledger.seed(product.id, product.stock)
            rows.append(StockRow(product=product, status=stock_status(product.stock, product.min_stock)))
        return rows

    @staticmethod
    def _failure(event: str, exc: Exception) -> StockServiceError:
        if isinstance(exc, (ApiError, OperationInFlightError)):
            logger.warning(event, extra={"error": str(exc)})
        else:
            logger.exception(event)
        return StockServiceError.from_exception(exc)
