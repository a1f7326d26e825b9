from __future__ import annotations

import os
from decimal import Decimal, InvalidOperation

from dotenv import load_dotenv
from pydantic import BaseModel, Field

from .money import DEFAULT_TOLERANCE


load_dotenv()


class SettlementConfig(BaseModel):
    # Amounts at or below this are treated as rounding noise.
    tolerance: Decimal = Field(default=DEFAULT_TOLERANCE, ge=0)
    # Iterate opposing-debt netting and cycle removal until neither changes the graph.
    simplify_until_stable: bool = True


def get_settlement_config() -> SettlementConfig:
    """
    Load engine configuration from environment variables.

    Reads:
      SETTLEMENT_TOLERANCE (decimal, default 0.01)
      SETTLEMENT_SIMPLIFY_UNTIL_STABLE (true/false, default true)
    """
    return SettlementConfig(
        tolerance=_decimal_env("SETTLEMENT_TOLERANCE", DEFAULT_TOLERANCE),
        simplify_until_stable=_bool_env("SETTLEMENT_SIMPLIFY_UNTIL_STABLE", True),
    )


def _decimal_env(name: str, default: Decimal) -> Decimal:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        value = Decimal(raw)
    except InvalidOperation as exc:
        raise ValueError(f"{name} must be a decimal number, got {raw!r}.") from exc
    if not value.is_finite() or value < 0:
        raise ValueError(f"{name} must be a non-negative decimal, got {raw!r}.")
    return value


def _bool_env(name: str, default: bool) -> bool:
    raw = os.getenv(name, "").strip().lower()
    if not raw:
        return default
    if raw in ("1", "true", "yes", "on"):
        return True
    if raw in ("0", "false", "no", "off"):
        return False
    raise ValueError(f"{name} must be 'true' or 'false', got {raw!r}.")
