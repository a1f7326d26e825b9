from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, Iterable, Mapping, Optional

from .errors import DuplicateParticipantError, NoParticipantsError
from .models import GroupLedgerLike
from .money import to_decimal
from .split_rules import SplitContext, validate_total_match
from .split_rules.registry import SplitRuleRegistry, registry as default_registry


class SplitRuleEngine:
    """Turns one expense total into per-participant shares under a named split method."""

    def __init__(
        self,
        total_amount: Any,
        participants: Iterable[Any],
        *,
        rules: Optional[SplitRuleRegistry] = None,
    ):
        self._total_amount = to_decimal(total_amount)
        self._participants = tuple(participants)
        self._rules = rules or default_registry

    @classmethod
    def for_group(cls, total_amount: Any, group: GroupLedgerLike, **kwargs) -> "SplitRuleEngine":
        return cls(total_amount, group.active_members, **kwargs)

    @property
    def total_amount(self) -> Decimal:
        return self._total_amount

    @property
    def participants(self) -> tuple:
        return self._participants

    def apply_split(self, method: str, params: Optional[Mapping[str, Any]] = None) -> Dict[Any, Decimal]:
        if not self._participants:
            raise NoParticipantsError("There are no active participants in the group to split the expense.")
        self._check_unique_participants()

        rule = self._rules.create(str(getattr(method, "value", method)))
        parsed = rule.parse_params(params)
        ctx = SplitContext(total_amount=self._total_amount, participants=self._participants)
        amounts = rule.split(ctx, parsed)
        self.validate_total_match(amounts)
        return amounts

    def _check_unique_participants(self) -> None:
        seen = set()
        for member in self._participants:
            if member in seen:
                raise DuplicateParticipantError(f"Participant {member!r} is listed more than once.")
            seen.add(member)

    def validate_total_match(self, amounts: Mapping[Any, Decimal]) -> None:
        validate_total_match(self._total_amount, amounts)
