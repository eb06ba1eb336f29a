from __future__ import annotations

from decimal import Decimal
from typing import Any, Callable

import pytest

from pos_till_sdk.config import ClientConfig, load_config
from pos_till_sdk.http_client import HttpClient
from pos_till_sdk.models import Product
from pos_till_sdk.tracing import TraceContext

BASE_URL = "https://pos.example.com/api"

_ENV_KEYS = (
    "POS_TILL_ENV",
    "POS_TILL_API_BASE_URL_DEV",
    "POS_TILL_TIMEOUT_SECONDS",
    "POS_TILL_CONNECT_TIMEOUT_SECONDS",
    "POS_TILL_READ_TIMEOUT_SECONDS",
    "POS_TILL_READ_RETRIES",
    "POS_TILL_RETRY_BACKOFF_SECONDS",
    "POS_TILL_MAX_CONNECTIONS",
    "POS_TILL_VERIFY_SSL",
    "POS_TILL_TAX_RATE",
    "POS_TILL_CASH_ROUNDING",
    "POS_TILL_CURRENCY_SYMBOL",
    "POS_TILL_PERSIST_SHIFT",
    "POS_TILL_PERSIST_CART",
)


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> pytest.MonkeyPatch:
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("POS_TILL_API_BASE_URL", BASE_URL)
    return monkeypatch


@pytest.fixture
def config(clean_env: pytest.MonkeyPatch) -> ClientConfig:
    return load_config()


@pytest.fixture
def http(config: ClientConfig) -> HttpClient:
    return HttpClient(config, trace=TraceContext())


@pytest.fixture
def make_product() -> Callable[..., Product]:
    def _make(product_id: str = "prod-1", **overrides: Any) -> Product:
        data: dict[str, Any] = {
            "id": product_id,
            "sku": f"SKU-{product_id}",
            "name": f"Product {product_id}",
            "price": Decimal("10.00"),
            "stock": 10,
            "min_stock": 2,
        }
        data.update(overrides)
        return Product.model_validate(data)

    return _make


def envelope(data: Any = None, *, success: bool = True, message: str | None = None) -> dict[str, Any]:
    return {"success": success, "data": data, "message": message}
