from __future__ import annotations

from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Iterable, Optional

CENT = Decimal("0.01")
# Scale used for intermediate split arithmetic before the final rounding to cents.
SPLIT_PRECISION = Decimal("0.0001")
ZERO = Decimal("0.00")
DEFAULT_TOLERANCE = Decimal("0.01")


def quantize_amount(value: Decimal, quantize: Optional[Decimal] = CENT) -> Decimal:
    if quantize is None:
        return value
    return value.quantize(quantize, rounding=ROUND_HALF_UP)


def to_decimal(value: Any) -> Decimal:
    """Convert a numeric value to Decimal without binary float artifacts."""
    if isinstance(value, Decimal):
        return value
    if isinstance(value, float):
        return Decimal(str(value))
    if isinstance(value, int) and not isinstance(value, bool):
        return Decimal(value)
    if isinstance(value, str):
        return Decimal(value.strip())
    raise TypeError(f"Cannot convert {type(value).__name__} to an amount")


def sum_amounts(values: Iterable[Decimal]) -> Decimal:
    return sum(values, Decimal("0"))
