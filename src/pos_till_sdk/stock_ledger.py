from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Iterable, Literal

from .exceptions import InsufficientStockError

MovementKind = Literal["opening", "sale", "adjustment_in", "adjustment_out", "return"]

MEDIUM_STOCK_FACTOR = Decimal("1.5")


class StockStatus(str, Enum):
    OUT_OF_STOCK = "out_of_stock"
    LOW = "low"
    MEDIUM = "medium"
    NORMAL = "normal"


class AdjustmentDirection(str, Enum):
    IN = "in"
    OUT = "out"

    @property
    def sign(self) -> int:
        return 1 if self is AdjustmentDirection.IN else -1

    @property
    def movement_kind(self) -> MovementKind:
        return "adjustment_in" if self is AdjustmentDirection.IN else "adjustment_out"


def stock_status(stock: int, min_stock: int) -> StockStatus:
    if stock == 0:
        return StockStatus.OUT_OF_STOCK
    if stock <= min_stock:
        return StockStatus.LOW
    if stock <= min_stock * MEDIUM_STOCK_FACTOR:
        return StockStatus.MEDIUM
    return StockStatus.NORMAL


@dataclass(frozen=True)
class StockPreview:
    current: int
    direction: AdjustmentDirection
    magnitude: int
    projected: int

    @property
    def would_go_negative(self) -> bool:
        return self.projected < 0


def preview_adjustment(current: int, direction: AdjustmentDirection | str, magnitude: int) -> StockPreview:
    resolved = AdjustmentDirection(direction)
    return StockPreview(
        current=current,
        direction=resolved,
        magnitude=magnitude,
        projected=current + resolved.sign * magnitude,
    )


@dataclass(frozen=True)
class StockLevelRead:
    """Two-phase stock read.

    ``estimated`` is the local preview shown right away; ``confirmed`` is the
    level the backend reports after applying the movement. The confirmed value
    replaces the estimate, the two are never combined.
    """

    product_id: str
    estimated: int
    confirmed: int | None = None

    @property
    def is_confirmed(self) -> bool:
        return self.confirmed is not None

    @property
    def value(self) -> int:
        return self.confirmed if self.confirmed is not None else self.estimated

    def confirm(self, level: int) -> StockLevelRead:
        return StockLevelRead(product_id=self.product_id, estimated=self.estimated, confirmed=level)


@dataclass(frozen=True)
class StockMovement:
    product_id: str
    delta: int
    kind: MovementKind
    user_id: str | None = None
    reference_id: str | None = None
    notes: str | None = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


@dataclass(frozen=True)
class SaleLineQuantity:
    product_id: str
    quantity: int


class StockLedger:
    """Append-only movement ledger with per-product running levels.

    Each accepted movement is recorded together with its level change; a
    movement that would leave a level below zero is rejected and nothing is
    recorded.
    """

    def __init__(self) -> None:
        self._movements: list[StockMovement] = []
        self._levels: dict[str, int] = {}

    def level(self, product_id: str) -> int:
        return self._levels.get(product_id, 0)

    def tracks(self, product_id: str) -> bool:
        return product_id in self._levels

    def movements(self, product_id: str | None = None) -> tuple[StockMovement, ...]:
        if product_id is None:
            return tuple(self._movements)
        return tuple(movement for movement in self._movements if movement.product_id == product_id)

    def apply(self, movement: StockMovement) -> int:
        current = self.level(movement.product_id)
        resulting = current + movement.delta
        if resulting < 0:
            raise InsufficientStockError(movement.product_id, current, movement.delta)
        self._movements.append(movement)
        self._levels[movement.product_id] = resulting
        return resulting

    def seed(self, product_id: str, level: int, *, user_id: str | None = None) -> int:
        """Record the known starting level of a product as an opening movement."""
        if self.tracks(product_id) and self.level(product_id) == level:
            return level
        return self.apply(
            StockMovement(product_id=product_id, delta=level - self.level(product_id), kind="opening", user_id=user_id)
        )

    def can_apply(self, product_id: str, delta: int) -> bool:
        return self.level(product_id) + delta >= 0

    def record_adjustment(
        self,
        product_id: str,
        direction: AdjustmentDirection | str,
        magnitude: int,
        *,
        user_id: str | None = None,
        notes: str | None = None,
    ) -> StockMovement:
        resolved = AdjustmentDirection(direction)
        if magnitude <= 0:
            raise ValueError("Adjustment magnitude must be a positive integer")
        movement = StockMovement(
            product_id=product_id,
            delta=resolved.sign * magnitude,
            kind=resolved.movement_kind,
            user_id=user_id,
            notes=notes,
        )
        self.apply(movement)
        return movement

    def record_sale(
        self,
        sale_id: str,
        lines: Iterable[SaleLineQuantity],
        *,
        user_id: str | None = None,
    ) -> tuple[StockMovement, ...]:
        """One decrement per sold line, all applied or none."""
        movements = tuple(
            StockMovement(
                product_id=line.product_id,
                delta=-line.quantity,
                kind="sale",
                user_id=user_id,
                reference_id=sale_id,
            )
            for line in lines
        )
        demand: dict[str, int] = {}
        for movement in movements:
            demand[movement.product_id] = demand.get(movement.product_id, 0) + movement.delta
        for product_id, delta in demand.items():
            if not self.can_apply(product_id, delta):
                raise InsufficientStockError(product_id, self.level(product_id), delta)
        for movement in movements:
            self.apply(movement)
        return movements

    def record_return(
        self,
        product_id: str,
        quantity: int,
        *,
        sale_id: str | None = None,
        user_id: str | None = None,
        notes: str | None = None,
    ) -> StockMovement:
        if quantity <= 0:
            raise ValueError("Returned quantity must be a positive integer")
        movement = StockMovement(
            product_id=product_id,
            delta=quantity,
            kind="return",
            user_id=user_id,
            reference_id=sale_id,
            notes=notes,
        )
        self.apply(movement)
        return movement
