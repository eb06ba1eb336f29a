from __future__ import annotations

from dataclasses import dataclass

from ..models import Product
from .base import BaseClient, _expect_dict, _expect_list


@dataclass
class ProductsClient(BaseClient):
    def list_products(self) -> list[Product]:
        data = self._call("GET", "products", module="products", operation="list")
        return [Product.model_validate(row) for row in _expect_list(data, "products")]

    def get_product(self, product_id: str) -> Product:
        data = self._call("GET", f"products/{product_id}", module="products", operation="get")
        return Product.model_validate(_expect_dict(data, "product"))
