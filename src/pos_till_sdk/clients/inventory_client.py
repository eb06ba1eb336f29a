from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from ..idempotency import resolve_idempotency_keys
from ..models import Category, CategoryCreateRequest, ProductWithCategory
from ..models_inventory import InventoryMovement, StockAdjustmentRequest
from .base import BaseClient, _coerce_model, _expect_dict, _expect_list


@dataclass
class InventoryClient(BaseClient):
    def list_products(self) -> list[ProductWithCategory]:
        data = self._call("GET", "inventory/products", module="inventory", operation="list_products")
        return [ProductWithCategory.model_validate(row) for row in _expect_list(data, "inventory products")]

    def low_stock(self) -> list[ProductWithCategory]:
        data = self._call("GET", "inventory/products/low-stock", module="inventory", operation="low_stock")
        return [ProductWithCategory.model_validate(row) for row in _expect_list(data, "low stock")]

    def adjust_stock(
        self,
        payload: StockAdjustmentRequest | Mapping[str, Any],
        transaction_id: str | None = None,
        idempotency_key: str | None = None,
    ) -> Any:
        """Submit a manual adjustment.

        The backend answers with a confirmation message only; callers re-read
        the product for the authoritative level.
        """
        request = _coerce_model(payload, StockAdjustmentRequest)
        keys = resolve_idempotency_keys(transaction_id, idempotency_key)
        return self._call(
            "POST",
            "inventory/stock/adjust",
            json_body=request.model_dump(mode="json", exclude_none=True),
            headers=keys.headers(),
            module="inventory",
            operation="adjust_stock",
        )

    def list_movements(self) -> list[InventoryMovement]:
        data = self._call("GET", "inventory/movements", module="inventory", operation="list_movements")
        return [InventoryMovement.model_validate(row) for row in _expect_list(data, "inventory movements")]

    def list_categories(self) -> list[Category]:
        data = self._call("GET", "inventory/categories", module="inventory", operation="list_categories")
        return [Category.model_validate(row) for row in _expect_list(data, "categories")]

    def create_category(self, payload: CategoryCreateRequest | Mapping[str, Any]) -> Category:
        request = _coerce_model(payload, CategoryCreateRequest)
        data = self._call(
            "POST",
            "inventory/categories",
            json_body=request.model_dump(mode="json", exclude_none=True),
            module="inventory",
            operation="create_category",
        )
        return Category.model_validate(_expect_dict(data, "category"))
