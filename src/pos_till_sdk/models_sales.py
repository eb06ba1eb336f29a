from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

PaymentMethod = Literal["cash", "card", "debit", "credit", "transfer", "other"]


class SaleItemRequest(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    product_id: str
    quantity: int
    unit_price: Decimal
    discount_amount: Decimal = Decimal("0")
    tax_rate: Decimal


class SaleCreateRequest(BaseModel):
    """Frozen snapshot of a cart at the moment of commit."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    user_id: str = Field(min_length=1)
    shift_id: str | None = None
    customer_id: str | None = None
    items: tuple[SaleItemRequest, ...] = Field(min_length=1)
    subtotal: Decimal
    tax_amount: Decimal
    discount_amount: Decimal = Decimal("0")
    total: Decimal
    payment_method: PaymentMethod = "cash"


class Sale(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str
    sale_number: str | None = None
    user_id: str | None = None
    customer_id: str | None = None
    shift_id: str | None = None
    subtotal: Decimal = Decimal("0")
    tax_amount: Decimal = Decimal("0")
    discount_amount: Decimal = Decimal("0")
    total: Decimal = Decimal("0")
    status: str | None = None
    payment_status: str | None = None
    created_at: datetime | None = None
