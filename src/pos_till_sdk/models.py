from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ApiEnvelope(BaseModel):
    """Every backend response is wrapped as ``{success, data, message}``."""

    model_config = ConfigDict(extra="allow")

    success: bool
    data: Any = None
    message: str | None = None


class Operator(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str
    username: str | None = None
    full_name: str | None = None
    email: str | None = None
    role_id: str | None = None
    is_active: bool | None = None


class Product(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str
    sku: str | None = None
    barcode: str | None = None
    name: str = ""
    description: str | None = None
    category_id: str | None = None
    price: Decimal = Decimal("0")
    cost: Decimal | None = None
    stock: int = 0
    min_stock: int = 0
    unit: str | None = None
    image_url: str | None = None
    is_active: bool = True


class ProductWithCategory(Product):
    category_name: str | None = None
    max_stock: int | None = None
    tax_rate: Decimal | None = None


class Category(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str
    name: str
    description: str | None = None
    color: str | None = None
    icon: str | None = None
    is_active: bool = True


class CategoryCreateRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    name: str = Field(min_length=1)
    description: str | None = None
    color: str | None = None
    icon: str | None = None


class Customer(BaseModel):
    model_config = ConfigDict(extra="allow")

    id: str
    name: str
    email: str | None = None
    phone: str | None = None
    rfc: str | None = None
    address: str | None = None
    city: str | None = None
    state: str | None = None
    postal_code: str | None = None
    credit_limit: Decimal = Decimal("0")
    current_balance: Decimal = Decimal("0")
    loyalty_points: int = 0
    notes: str | None = None
    is_active: bool = True
    created_at: datetime | None = None


class CustomerStats(BaseModel):
    model_config = ConfigDict(extra="allow")

    total_purchases: int = 0
    total_spent: Decimal = Decimal("0")
    average_purchase: Decimal = Decimal("0")
    last_purchase_date: datetime | None = None
    loyalty_points: int = 0
