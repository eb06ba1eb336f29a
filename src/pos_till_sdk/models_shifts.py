from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class CashRegister(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str
    name: str
    location: str | None = None
    is_active: bool = True


class Shift(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str
    user_id: str
    user_name: str | None = None
    register_id: str
    register_name: str | None = None
    opened_at: datetime | None = None
    closed_at: datetime | None = None
    opening_balance: Decimal
    closing_balance: Decimal | None = None
    expected_balance: Decimal | None = None
    difference: Decimal | None = None
    notes: str | None = None
    status: str = "open"

    @property
    def is_open(self) -> bool:
        return self.status.lower() == "open"


class ShiftSummary(BaseModel):
    model_config = ConfigDict(extra="allow")

    shift: Shift
    total_sales: Decimal = Decimal("0")
    total_transactions: int = 0
    cash_sales: Decimal = Decimal("0")
    card_sales: Decimal = Decimal("0")
    other_sales: Decimal = Decimal("0")


class ShiftOpenRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    user_id: str = Field(min_length=1)
    register_id: str = Field(min_length=1)
    opening_balance: Decimal = Field(ge=0)


class ShiftCloseRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    closing_balance: Decimal = Field(ge=0)
    notes: str | None = None


VarianceOutcome = Literal["overage", "shortage", "balanced"]
