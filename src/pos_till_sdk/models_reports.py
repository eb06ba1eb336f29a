from __future__ import annotations

from datetime import date
from decimal import Decimal

from pydantic import BaseModel, ConfigDict


class ReportRange(BaseModel):
    model_config = ConfigDict(extra="forbid")

    start_date: date | None = None
    end_date: date | None = None


class SalesSummary(BaseModel):
    model_config = ConfigDict(extra="allow")

    total_sales: Decimal = Decimal("0")
    total_transactions: int = 0
    average_ticket: Decimal = Decimal("0")
    total_items_sold: Decimal = Decimal("0")
    cash_sales: Decimal = Decimal("0")
    card_sales: Decimal = Decimal("0")
    other_sales: Decimal = Decimal("0")


class TopProduct(BaseModel):
    model_config = ConfigDict(extra="allow")

    product_id: str
    product_name: str | None = None
    quantity_sold: Decimal = Decimal("0")
    total_revenue: Decimal = Decimal("0")
    times_sold: int = 0


class SalesByPaymentMethod(BaseModel):
    model_config = ConfigDict(extra="allow")

    method: str
    total: Decimal = Decimal("0")
    count: int = 0


class InventoryValue(BaseModel):
    model_config = ConfigDict(extra="allow")

    total_products: int = 0
    total_stock_value: Decimal = Decimal("0")
    low_stock_items: int = 0
    out_of_stock_items: int = 0
