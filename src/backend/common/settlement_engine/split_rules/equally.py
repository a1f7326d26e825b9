from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict

from ..money import quantize_amount
from .base import SplitRule
from .context import SplitContext
from .params import EqualSplitParams
from .registry import register_split_rule


@register_split_rule
class SplitEqually(SplitRule):
    method_id = "equally"
    method_title = "Split the total equally among all active participants"
    description = "Each participant owes the total divided by the head count, rounded to cents."
    residual_policy = "first_participant"
    params_model = EqualSplitParams

    def split(self, ctx: SplitContext, params: EqualSplitParams) -> Dict[Any, Decimal]:
        total = quantize_amount(ctx.total_amount)
        count = len(ctx.participants)
        base_amount = quantize_amount(total / count)
        # Negative when the base rounded up (20.00 / 3 -> 6.67 each, first owes 6.66).
        remainder = total - base_amount * count

        amounts = {member: base_amount for member in ctx.participants}
        if remainder != 0:
            first = ctx.participants[0]
            amounts[first] = amounts[first] + remainder
        return amounts
