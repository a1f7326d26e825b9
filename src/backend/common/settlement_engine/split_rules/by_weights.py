from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict

from ..errors import InvalidWeightsError, ZeroWeightSumError
from ..money import sum_amounts
from .base import SplitRule
from .context import SplitContext, allocate_by_ratios, resolve_entries
from .params import WeightSplitParams
from .registry import register_split_rule


@register_split_rule
class SplitByWeights(SplitRule):
    method_id = "by_weights"
    method_title = "Split the total proportionally to per-member weights"
    description = "Each member owes weight / total weight of the expense; the first listed member absorbs the residual."
    residual_policy = "first_listed"
    params_model = WeightSplitParams
    invalid_params_error = InvalidWeightsError
    invalid_params_message = "Weights must be a mapping of member id to non-negative numeric values."

    def split(self, ctx: SplitContext, params: WeightSplitParams) -> Dict[Any, Decimal]:
        total_weight = sum_amounts(params.weights.values())
        if total_weight <= 0:
            raise ZeroWeightSumError("The sum of weights must be greater than zero.")

        resolved = resolve_entries(ctx, params.weights.items(), error=InvalidWeightsError)
        return allocate_by_ratios(
            ctx.total_amount,
            [(member, weight / total_weight) for member, weight in resolved],
        )
