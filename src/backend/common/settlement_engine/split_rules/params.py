from __future__ import annotations

from decimal import Decimal
from typing import Annotated, Any, Dict

from pydantic import BaseModel, BeforeValidator, Field

from ..models import MemberId


def _reject_bool(value: Any) -> Any:
    if isinstance(value, bool):
        raise ValueError("booleans are not amounts")
    return value


# Accepts numbers and numeric strings (JSON clients often send decimals as strings).
NonNegativeAmount = Annotated[Decimal, BeforeValidator(_reject_bool), Field(ge=0, allow_inf_nan=False)]


class EqualSplitParams(BaseModel):
    pass


class PercentageSplitParams(BaseModel):
    # Member id -> percentage (0-100). Must sum to 100; first entry absorbs the rounding residual.
    percentages: Dict[MemberId, NonNegativeAmount]


class WeightSplitParams(BaseModel):
    # Member id -> weight. First entry absorbs the rounding residual.
    weights: Dict[MemberId, NonNegativeAmount]


class FixedAmountSplitParams(BaseModel):
    # Member id -> exact amount owed. Must sum to the expense total.
    amounts: Dict[MemberId, NonNegativeAmount]
