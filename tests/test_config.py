from __future__ import annotations

from decimal import Decimal

import pytest

from pos_till_sdk.config import ConfigError, load_config


def test_load_config_requires_base_url(clean_env: pytest.MonkeyPatch) -> None:
    clean_env.delenv("POS_TILL_API_BASE_URL", raising=False)
    with pytest.raises(ConfigError, match="POS_TILL_API_BASE_URL"):
        load_config()


def test_load_config_defaults(clean_env: pytest.MonkeyPatch) -> None:
    cfg = load_config()
    assert cfg.env_name == "dev"
    assert cfg.read_retries == 0
    assert cfg.connect_timeout_seconds == 5.0
    assert cfg.read_timeout_seconds == 10.0
    assert cfg.tax_rate == Decimal("16")
    assert cfg.tax_fraction == Decimal("0.16")
    assert cfg.cash_rounding == Decimal("0.50")
    assert cfg.persistence.shift is True
    assert cfg.persistence.cart is False


def test_load_config_profile(clean_env: pytest.MonkeyPatch) -> None:
    clean_env.setenv("POS_TILL_ENV", "staging")
    clean_env.setenv("POS_TILL_API_BASE_URL_STAGING", "https://staging.example.com/api/")
    cfg = load_config()
    assert cfg.api_base_url == "https://staging.example.com/api"
    assert cfg.normalized_env == "staging"


@pytest.mark.parametrize(
    ("key", "value"),
    [
        ("POS_TILL_TIMEOUT_SECONDS", "0"),
        ("POS_TILL_CONNECT_TIMEOUT_SECONDS", "0"),
        ("POS_TILL_READ_TIMEOUT_SECONDS", "-1"),
        ("POS_TILL_READ_RETRIES", "-1"),
        ("POS_TILL_READ_RETRIES", "two"),
        ("POS_TILL_RETRY_BACKOFF_SECONDS", "-0.1"),
        ("POS_TILL_MAX_CONNECTIONS", "0"),
        ("POS_TILL_TAX_RATE", "100"),
        ("POS_TILL_TAX_RATE", "-1"),
        ("POS_TILL_TAX_RATE", "sixteen"),
        ("POS_TILL_CASH_ROUNDING", "0"),
    ],
)
def test_load_config_rejects_invalid_values(clean_env: pytest.MonkeyPatch, key: str, value: str) -> None:
    clean_env.setenv(key, value)
    with pytest.raises(ConfigError, match=key):
        load_config()


def test_cart_persistence_cannot_be_enabled(clean_env: pytest.MonkeyPatch) -> None:
    clean_env.setenv("POS_TILL_PERSIST_CART", "true")
    with pytest.raises(ConfigError, match="POS_TILL_PERSIST_CART"):
        load_config()


def test_shift_persistence_can_be_disabled(clean_env: pytest.MonkeyPatch) -> None:
    clean_env.setenv("POS_TILL_PERSIST_SHIFT", "false")
    clean_env.setenv("POS_TILL_TAX_RATE", "8")
    cfg = load_config()
    assert cfg.persistence.shift is False
    assert cfg.tax_fraction == Decimal("0.08")
