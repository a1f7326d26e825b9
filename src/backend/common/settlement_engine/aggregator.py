from __future__ import annotations

import logging
from decimal import Decimal
from typing import Any, Dict, Mapping, Optional, Union

from .errors import LedgerInconsistencyError
from .graph import DebtGraph
from .money import DEFAULT_TOLERANCE, quantize_amount, sum_amounts, to_decimal

logger = logging.getLogger(__name__)


class BalanceAggregator:
    """Validates net balances and turns them into a settlement graph.

    The settlement graph is derived from net balances alone, by greedily matching
    the largest debtors with the largest creditors. Each debtor pays out exactly
    its debt and each creditor receives exactly its credit (within tolerance), but
    the number of payments is not guaranteed to be minimal.
    """

    def __init__(
        self,
        net_balances: Mapping[Any, Any],
        detailed_balances: Union[DebtGraph, Mapping[Any, Mapping[Any, Any]], None] = None,
        *,
        tolerance: Decimal = DEFAULT_TOLERANCE,
    ):
        self._net_balances: Dict[Any, Decimal] = {
            member: quantize_amount(to_decimal(amount)) for member, amount in net_balances.items()
        }
        self._detailed_balances = DebtGraph(detailed_balances or {}).quantized()
        self._tolerance = tolerance
        self._adjustment: Optional[Decimal] = None

    @property
    def net_balances(self) -> Dict[Any, Decimal]:
        return dict(self._net_balances)

    @property
    def detailed_balances(self) -> DebtGraph:
        """Detailed balances after rounding cleanup; kept for audit, never used for settlement."""
        return self._detailed_balances.copy()

    @property
    def adjustment(self) -> Optional[Decimal]:
        return self._adjustment

    def aggregate_balances(self) -> DebtGraph:
        self.validate_overall_balance()
        self.handle_rounding_discrepancies()
        return self.build_simplified_debt_graph()

    def validate_overall_balance(self) -> None:
        total = sum_amounts(self._net_balances.values())
        if abs(total) > self._tolerance:
            raise LedgerInconsistencyError(
                f"Ledger inconsistency: the group's net balances do not sum to zero (difference: {total})."
            )
        if total != 0:
            self.adjust_small_discrepancy(total)

    def adjust_small_discrepancy(self, discrepancy: Decimal) -> None:
        if not self._net_balances:
            logger.warning("No members to absorb a balance discrepancy of %s; skipping adjustment.", discrepancy)
            return
        member = next(iter(self._net_balances))
        self._net_balances[member] = self._net_balances[member] - discrepancy
        self._adjustment = discrepancy

    def handle_rounding_discrepancies(self) -> None:
        # DebtGraph never holds non-positive edges, so this drops amounts strictly below tolerance.
        self._detailed_balances.prune(self._tolerance, inclusive=False)

    def build_simplified_debt_graph(self) -> DebtGraph:
        # sorted() is stable, so members with equal balances keep their input order.
        debtors = sorted(
            ((m, b) for m, b in self._net_balances.items() if b < 0),
            key=lambda item: item[1],
        )
        creditors = sorted(
            ((m, b) for m, b in self._net_balances.items() if b > 0),
            key=lambda item: item[1],
            reverse=True,
        )
        remaining_credit = dict(creditors)

        graph = DebtGraph()
        for debtor, balance in debtors:
            remaining_debt = abs(balance)
            for creditor, _ in creditors:
                credit = remaining_credit[creditor]
                if remaining_debt <= self._tolerance or credit <= self._tolerance or debtor == creditor:
                    continue
                payment = min(remaining_debt, credit)
                graph.add(debtor, creditor, payment)
                remaining_debt -= payment
                remaining_credit[creditor] = credit - payment
                if remaining_debt <= self._tolerance:
                    break

        graph.prune(self._tolerance)
        return graph
