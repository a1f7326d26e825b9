from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict

from ..errors import InvalidPercentagesError, PercentageSumMismatchError
from ..money import quantize_amount, sum_amounts
from .base import SplitRule
from .context import SplitContext, allocate_by_ratios, resolve_entries
from .params import PercentageSplitParams
from .registry import register_split_rule

HUNDRED = Decimal("100")


@register_split_rule
class SplitByPercentages(SplitRule):
    method_id = "by_percentages"
    method_title = "Split the total by per-member percentages"
    description = "Percentages must add up to 100; the first listed member absorbs the rounding residual."
    residual_policy = "first_listed"
    params_model = PercentageSplitParams
    invalid_params_error = InvalidPercentagesError
    invalid_params_message = "Percentages must be a mapping of member id to non-negative numeric values."

    def split(self, ctx: SplitContext, params: PercentageSplitParams) -> Dict[Any, Decimal]:
        resolved = resolve_entries(ctx, params.percentages.items(), error=InvalidPercentagesError)

        pct_sum = quantize_amount(sum_amounts(pct for _, pct in resolved))
        if pct_sum != HUNDRED:
            raise PercentageSumMismatchError(f"Percentages must add up to 100% (got {pct_sum}%).")

        return allocate_by_ratios(ctx.total_amount, [(member, pct / HUNDRED) for member, pct in resolved])
