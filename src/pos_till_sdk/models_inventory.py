from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

AdjustmentType = Literal["in", "out"]


class StockAdjustmentRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    product_id: str = Field(min_length=1)
    quantity: int = Field(gt=0)
    adjustment_type: AdjustmentType
    notes: str | None = None
    user_id: str = Field(min_length=1)


class InventoryMovement(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str
    product_id: str
    product_name: str | None = None
    movement_type: str
    quantity: Decimal
    reference_id: str | None = None
    notes: str | None = None
    user_name: str | None = None
    created_at: datetime | None = None
