from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict

from ..errors import FixedAmountSumMismatchError, InvalidFixedAmountsError
from ..money import quantize_amount, sum_amounts
from .base import SplitRule
from .context import SplitContext, resolve_entries
from .params import FixedAmountSplitParams
from .registry import register_split_rule


@register_split_rule
class SplitByFixedAmounts(SplitRule):
    method_id = "by_fixed_amounts"
    method_title = "Assign an exact amount to each member"
    description = "Amounts are taken as given and must add up to the expense total; nothing is redistributed."
    params_model = FixedAmountSplitParams
    invalid_params_error = InvalidFixedAmountsError
    invalid_params_message = "Fixed amounts must be a mapping of member id to non-negative numeric values."

    def split(self, ctx: SplitContext, params: FixedAmountSplitParams) -> Dict[Any, Decimal]:
        resolved = resolve_entries(ctx, params.amounts.items(), error=InvalidFixedAmountsError)

        amounts = {member: quantize_amount(amount) for member, amount in resolved}
        fixed_sum = sum_amounts(amounts.values())
        total = quantize_amount(ctx.total_amount)
        if fixed_sum != total:
            raise FixedAmountSumMismatchError(
                f"The fixed amounts add up to {fixed_sum}, which does not match the expense total {total}."
            )
        return amounts
