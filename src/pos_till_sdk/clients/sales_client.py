from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from ..idempotency import resolve_idempotency_keys
from ..models_sales import Sale, SaleCreateRequest
from .base import BaseClient, _coerce_model, _expect_dict


@dataclass
class SalesClient(BaseClient):
    def create_sale(
        self,
        payload: SaleCreateRequest | Mapping[str, Any],
        transaction_id: str | None = None,
        idempotency_key: str | None = None,
    ) -> Sale:
        request = _coerce_model(payload, SaleCreateRequest)
        keys = resolve_idempotency_keys(transaction_id, idempotency_key)
        data = self._call(
            "POST",
            "sales",
            json_body=request.model_dump(mode="json", exclude_none=True),
            headers=keys.headers(),
            module="sales",
            operation="create",
        )
        return Sale.model_validate(_expect_dict(data, "sale"))
