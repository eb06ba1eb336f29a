from __future__ import annotations

import os
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Iterable

from dotenv import load_dotenv


class ConfigError(ValueError):
    pass


@dataclass(frozen=True)
class PersistencePolicy:
    """Which pieces of client state survive an application restart.

    The current shift reference is persisted so an operator keeps shift
    context across reloads. The in-progress cart is not: an interrupted
    session loses its uncommitted cart.
    """

    shift: bool = True
    cart: bool = False


@dataclass(frozen=True)
class ClientConfig:
    env_name: str
    api_base_url: str
    connect_timeout_seconds: float = 5.0
    read_timeout_seconds: float = 15.0
    read_retries: int = 0
    retry_backoff_seconds: float = 0.3
    max_connections: int = 20
    verify_ssl: bool = True
    tax_rate: Decimal = Decimal("16")
    cash_rounding: Decimal = Decimal("0.50")
    currency_symbol: str = "$"
    persistence: PersistencePolicy = field(default_factory=PersistencePolicy)

    @property
    def normalized_env(self) -> str:
        return self.env_name.lower().strip()

    @property
    def tax_fraction(self) -> Decimal:
        return self.tax_rate / Decimal("100")


def _require(values: dict[str, str | None], required: Iterable[str]) -> None:
    missing = [key for key in required if not values.get(key)]
    if missing:
        raise ConfigError(f"Missing required config values: {', '.join(missing)}")


def _coerce_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _read_float(name: str, default: str) -> float:
    raw = os.getenv(name, default)
    try:
        return float(raw)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"Invalid {name}: expected a number, got {raw!r}") from exc


def _read_int(name: str, default: str) -> int:
    raw = os.getenv(name, default)
    try:
        return int(raw)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"Invalid {name}: expected an integer, got {raw!r}") from exc


def _read_decimal(name: str, default: str) -> Decimal:
    raw = os.getenv(name, default)
    try:
        value = Decimal(str(raw).strip())
    except (InvalidOperation, TypeError, ValueError) as exc:
        raise ConfigError(f"Invalid {name}: expected a decimal, got {raw!r}") from exc
    if not value.is_finite():
        raise ConfigError(f"Invalid {name}: expected a finite decimal, got {raw!r}")
    return value


def _validate(condition: bool, message: str) -> None:
    if not condition:
        raise ConfigError(message)


def load_config(env_file: str | None = None) -> ClientConfig:
    """Load config from environment with optional .env override."""
    load_dotenv(env_file)

    env_name = (os.getenv("POS_TILL_ENV") or "dev").strip()
    env_key = env_name.upper()

    api_base_url = (
        (os.getenv(f"POS_TILL_API_BASE_URL_{env_key}") or "").strip()
        or (os.getenv("POS_TILL_API_BASE_URL") or "").strip()
    )

    timeout_seconds = _read_float("POS_TILL_TIMEOUT_SECONDS", "10")
    _validate(
        timeout_seconds > 0,
        f"Invalid POS_TILL_TIMEOUT_SECONDS: expected > 0, got {timeout_seconds}",
    )

    connect_timeout_seconds = _read_float(
        "POS_TILL_CONNECT_TIMEOUT_SECONDS", str(min(timeout_seconds, 5.0))
    )
    _validate(
        connect_timeout_seconds > 0,
        (
            "Invalid POS_TILL_CONNECT_TIMEOUT_SECONDS: "
            f"expected > 0, got {connect_timeout_seconds}"
        ),
    )

    read_timeout_seconds = _read_float(
        "POS_TILL_READ_TIMEOUT_SECONDS",
        str(max(timeout_seconds, connect_timeout_seconds)),
    )
    _validate(
        read_timeout_seconds > 0,
        f"Invalid POS_TILL_READ_TIMEOUT_SECONDS: expected > 0, got {read_timeout_seconds}",
    )

    read_retries = _read_int("POS_TILL_READ_RETRIES", "0")
    _validate(read_retries >= 0, f"Invalid POS_TILL_READ_RETRIES: expected >= 0, got {read_retries}")

    retry_backoff_seconds = _read_float("POS_TILL_RETRY_BACKOFF_SECONDS", "0.3")
    _validate(
        retry_backoff_seconds >= 0,
        (
            "Invalid POS_TILL_RETRY_BACKOFF_SECONDS: "
            f"expected >= 0, got {retry_backoff_seconds}"
        ),
    )

    max_connections = _read_int("POS_TILL_MAX_CONNECTIONS", "20")
    _validate(
        max_connections >= 1,
        f"Invalid POS_TILL_MAX_CONNECTIONS: expected >= 1, got {max_connections}",
    )

    verify_ssl = _coerce_bool(os.getenv("POS_TILL_VERIFY_SSL"), True)

    tax_rate = _read_decimal("POS_TILL_TAX_RATE", "16")
    _validate(
        Decimal("0") <= tax_rate < Decimal("100"),
        f"Invalid POS_TILL_TAX_RATE: expected a percentage in [0, 100), got {tax_rate}",
    )

    cash_rounding = _read_decimal("POS_TILL_CASH_ROUNDING", "0.50")
    _validate(cash_rounding > 0, f"Invalid POS_TILL_CASH_ROUNDING: expected > 0, got {cash_rounding}")

    currency_symbol = os.getenv("POS_TILL_CURRENCY_SYMBOL", "$")

    persistence = PersistencePolicy(
        shift=_coerce_bool(os.getenv("POS_TILL_PERSIST_SHIFT"), True),
        cart=_coerce_bool(os.getenv("POS_TILL_PERSIST_CART"), False),
    )
    _validate(
        not persistence.cart,
        "Invalid POS_TILL_PERSIST_CART: the in-progress cart is never persisted",
    )

    values = {"POS_TILL_API_BASE_URL": api_base_url}
    _require(values, ["POS_TILL_API_BASE_URL"])

    return ClientConfig(
        env_name=env_name,
        api_base_url=api_base_url.rstrip("/"),
        connect_timeout_seconds=connect_timeout_seconds,
        read_timeout_seconds=read_timeout_seconds,
        read_retries=read_retries,
        retry_backoff_seconds=retry_backoff_seconds,
        max_connections=max_connections,
        verify_ssl=verify_ssl,
        tax_rate=tax_rate,
        cash_rounding=cash_rounding,
        currency_symbol=currency_symbol,
        persistence=persistence,
    )
