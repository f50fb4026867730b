"""Settings loaded from ``servicebay.toml``.

Every key is optional; a missing file yields the defaults.  A file that
exists but cannot be parsed, or holds values of the wrong shape, raises
ConfigError rather than being silently ignored.

    [app]
    log_level = "INFO"

    [store]
    data_dir = "data"          # relative to the config file

    [billing]
    premium_labor_discount_rate = "0.20"
    gst_rate = "0.18"
    default_payment_method = "Card"

    [inventory]
    max_attempts = 3
"""

from __future__ import annotations

import logging
import os
import tomllib
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from pathlib import Path

from servicebay.domain.exceptions import ValidationError
from servicebay.domain.model.payment import PaymentMethod
from servicebay.domain.service.billing_calculator import (
    GST_RATE,
    PREMIUM_LABOR_DISCOUNT_RATE,
    BillingPolicy,
)
from servicebay.domain.service.inventory_ledger import DEFAULT_MAX_ATTEMPTS

CONFIG_ENV_VAR = "SERVICEBAY_CONFIG"
DEFAULT_CONFIG_NAME = "servicebay.toml"

# Project root when installed in editable mode.
_PROJECT_ROOT = Path(__file__).resolve().parents[3]


class ConfigError(Exception):
    pass


@dataclass(frozen=True)
class StoreSettings:
    data_dir: Path = _PROJECT_ROOT / "data"


@dataclass(frozen=True)
class BillingSettings:
    premium_labor_discount_rate: Decimal = PREMIUM_LABOR_DISCOUNT_RATE
    gst_rate: Decimal = GST_RATE
    default_payment_method: PaymentMethod = PaymentMethod.CARD

    def policy(self) -> BillingPolicy:
        return BillingPolicy(
            premium_labor_discount_rate=self.premium_labor_discount_rate,
            gst_rate=self.gst_rate,
        )


@dataclass(frozen=True)
class InventorySettings:
    max_attempts: int = DEFAULT_MAX_ATTEMPTS


@dataclass(frozen=True)
class Settings:
    log_level: str = "WARNING"
    store: StoreSettings = field(default_factory=StoreSettings)
    billing: BillingSettings = field(default_factory=BillingSettings)
    inventory: InventorySettings = field(default_factory=InventorySettings)


def _rate(raw: object, key: str, default: Decimal) -> Decimal:
    if raw is None:
        return default
    try:
        value = Decimal(str(raw))
    except InvalidOperation as e:
        raise ConfigError(f"billing.{key} is not a number: {raw!r}") from e
    if not value.is_finite() or not Decimal("0") <= value < Decimal("1"):
        raise ConfigError(f"billing.{key} must be a fraction in [0, 1), got {raw!r}")
    return value


def _section(data: dict, name: str) -> dict:
    section = data.get(name, {})
    if not isinstance(section, dict):
        raise ConfigError(f"[{name}] must be a table")
    return section


def resolve_config_path(path: str | Path | None = None) -> Path:
    """Explicit path, then ``$SERVICEBAY_CONFIG``, then ``./servicebay.toml``."""
    if path is not None:
        return Path(path)
    from_env = os.environ.get(CONFIG_ENV_VAR)
    if from_env:
        return Path(from_env)
    return Path.cwd() / DEFAULT_CONFIG_NAME


def load_settings(path: str | Path | None = None) -> Settings:
    p = resolve_config_path(path)
    if not p.exists():
        return Settings()

    try:
        data = tomllib.loads(p.read_text(encoding="utf-8"))
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise ConfigError(f"Failed to read config TOML {p}: {e}") from e

    app = _section(data, "app")
    store = _section(data, "store")
    billing = _section(data, "billing")
    inventory = _section(data, "inventory")

    data_dir = StoreSettings().data_dir
    if "data_dir" in store:
        data_dir = Path(str(store["data_dir"]))
        if not data_dir.is_absolute():
            data_dir = p.resolve().parent / data_dir

    method = PaymentMethod.CARD
    if "default_payment_method" in billing:
        try:
            method = PaymentMethod.parse(str(billing["default_payment_method"]))
        except ValidationError as e:
            raise ConfigError(f"billing.default_payment_method: {e}") from e

    try:
        max_attempts = int(inventory.get("max_attempts", DEFAULT_MAX_ATTEMPTS))
    except (TypeError, ValueError) as e:
        raise ConfigError(f"inventory.max_attempts must be an integer: {e}") from e
    if max_attempts < 1:
        raise ConfigError("inventory.max_attempts must be at least 1")

    log_level = str(app.get("log_level", "WARNING")).upper()
    if not isinstance(logging.getLevelName(log_level), int):
        raise ConfigError(f"app.log_level: unknown level {log_level!r}")

    return Settings(
        log_level=log_level,
        store=StoreSettings(data_dir=data_dir),
        billing=BillingSettings(
            premium_labor_discount_rate=_rate(
                billing.get("premium_labor_discount_rate"),
                "premium_labor_discount_rate",
                PREMIUM_LABOR_DISCOUNT_RATE,
            ),
            gst_rate=_rate(billing.get("gst_rate"), "gst_rate", GST_RATE),
            default_payment_method=method,
        ),
        inventory=InventorySettings(max_attempts=max_attempts),
    )
