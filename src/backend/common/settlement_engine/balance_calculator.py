from __future__ import annotations

import logging
from decimal import Decimal
from typing import Any, Dict, Optional

from .graph import DebtGraph
from .models import GroupLedgerLike
from .money import DEFAULT_TOLERANCE, quantize_amount, sum_amounts, to_decimal

logger = logging.getLogger(__name__)


class BalanceCalculator:
    """Folds a group's expenses and payments into net balances and a pairwise debt graph."""

    def __init__(self, group: GroupLedgerLike, *, tolerance: Decimal = DEFAULT_TOLERANCE):
        self._group = group
        self._tolerance = tolerance
        self._last_adjustment: Optional[Decimal] = None

    @property
    def last_adjustment(self) -> Optional[Decimal]:
        """Discrepancy removed by the most recent ``calculate_net_balances`` call, if any."""
        return self._last_adjustment

    def calculate_net_balances(self) -> Dict[Any, Decimal]:
        balances: Dict[Any, Decimal] = {member: Decimal("0") for member in self._group.active_members}

        for expense in self._group.expenses:
            payer = expense.payer
            balances[payer] = balances.get(payer, Decimal("0")) + to_decimal(expense.total_amount)
            for share in expense.shares:
                member = share.member
                balances[member] = balances.get(member, Decimal("0")) - to_decimal(share.amount_owed)

        for payment in self._group.payments:
            amount = to_decimal(payment.amount)
            balances[payment.payer] = balances.get(payment.payer, Decimal("0")) + amount
            balances[payment.receiver] = balances.get(payment.receiver, Decimal("0")) - amount

        balances = {member: quantize_amount(amount) for member, amount in balances.items()}
        self.ensure_total_balance_is_zero(balances)
        return balances

    def ensure_total_balance_is_zero(self, balances: Dict[Any, Decimal]) -> None:
        self._last_adjustment = None
        total = sum_amounts(balances.values())
        if total == 0 or not balances:
            return

        roster = list(self._group.active_members)
        member = roster[0] if roster else next(iter(balances))
        logger.warning(
            "Net balances sum to %s instead of zero; absorbing the difference into %r.", total, member
        )
        balances[member] = balances[member] - total
        self._last_adjustment = total

    def calculate_detailed_balances(self) -> DebtGraph:
        graph = DebtGraph()

        for expense in self._group.expenses:
            payer = expense.payer
            for share in expense.shares:
                if share.member == payer:
                    continue
                graph.add(share.member, payer, to_decimal(share.amount_owed))

        for payment in self._group.payments:
            payer, receiver = payment.payer, payment.receiver
            if payer == receiver:
                continue
            delta = graph.get_amount(payer, receiver) - to_decimal(payment.amount)
            if delta >= 0:
                if delta < self._tolerance:
                    graph.remove(payer, receiver)
                else:
                    graph.set_amount(payer, receiver, delta)
            else:
                # Overpayment: the receiver now owes the payer the excess.
                graph.remove(payer, receiver)
                graph.add(receiver, payer, -delta)

        return graph.quantized()
