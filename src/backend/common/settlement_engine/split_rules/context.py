from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Mapping, Sequence, Tuple, Type

from ..errors import NotAParticipantError, SplitInvariantError, SplitValidationError
from ..money import SPLIT_PRECISION, quantize_amount, sum_amounts


@dataclass(frozen=True)
class SplitContext:
    total_amount: Decimal
    participants: Tuple[Any, ...]

    def resolve_participant(self, key: Any) -> Any:
        """Map a params key (a member or a member id) to the active participant it names."""
        for member in self.participants:
            if key == member:
                return member
        for member in self.participants:
            member_id = getattr(member, "id", member)
            if key == member_id:
                return member
            # JSON object keys arrive as strings.
            if isinstance(key, str) and not isinstance(member_id, str) and key == str(member_id):
                return member
        raise NotAParticipantError(f"Member with id {key!r} is not an active participant of the group.")


def resolve_entries(
    ctx: SplitContext,
    entries: Iterable[Tuple[Any, Decimal]],
    *,
    error: Type[SplitValidationError],
) -> List[Tuple[Any, Decimal]]:
    resolved: List[Tuple[Any, Decimal]] = []
    seen = set()
    for key, value in entries:
        member = ctx.resolve_participant(key)
        if member in seen:
            raise error(f"Member {member!r} appears more than once.")
        seen.add(member)
        resolved.append((member, value))
    return resolved


def allocate_by_ratios(
    total_amount: Decimal,
    ratios: Sequence[Tuple[Any, Decimal]],
) -> Dict[Any, Decimal]:
    """Split ``total_amount`` by ``ratios`` (fractions of 1) and give the residual to the first entry."""
    amounts: Dict[Any, Decimal] = {}
    for member, ratio in ratios:
        amounts[member] = quantize_amount(quantize_amount(total_amount * ratio, SPLIT_PRECISION))

    if amounts:
        residual = quantize_amount(total_amount) - sum_amounts(amounts.values())
        if residual != 0:
            first = ratios[0][0]
            amounts[first] = amounts[first] + residual
    return amounts


def validate_total_match(total_amount: Decimal, amounts: Mapping[Any, Decimal]) -> None:
    sum_of_parts = quantize_amount(sum_amounts(amounts.values()))
    expected = quantize_amount(total_amount)
    if sum_of_parts != expected:
        raise SplitInvariantError(
            f"Internal validation error: computed shares sum to {sum_of_parts}, "
            f"which does not match the expense total {expected}."
        )
