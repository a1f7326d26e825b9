from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Any, List, Optional

from .aggregator import BalanceAggregator
from .balance_calculator import BalanceCalculator
from .config import SettlementConfig
from .graph import DebtGraph
from .models import (
    DebtEdge,
    GroupLedgerLike,
    MemberBalance,
    SettlementNote,
    SettlementReport,
    SettlementTotals,
    SuggestedPayment,
)
from .money import sum_amounts
from .simplifier import TransactionSimplifier


def graph_to_edges(graph: DebtGraph, model=DebtEdge) -> List[Any]:
    return [model(debtor=debtor, creditor=creditor, amount=amount) for debtor, creditor, amount in graph.edges()]


class SettlementRunner:
    def __init__(self, config: Optional[SettlementConfig] = None):
        self._config = config or SettlementConfig()

    @property
    def config(self) -> SettlementConfig:
        return self._config

    def run(self, group: GroupLedgerLike, *, group_id: str = "") -> SettlementReport:
        tolerance = self._config.tolerance
        calculator = BalanceCalculator(group, tolerance=tolerance)
        net_balances = calculator.calculate_net_balances()
        detailed = calculator.calculate_detailed_balances()

        simplified = TransactionSimplifier(
            detailed,
            tolerance=tolerance,
            until_stable=self._config.simplify_until_stable,
        ).simplify_transactions()

        aggregator = BalanceAggregator(net_balances, detailed, tolerance=tolerance)
        settlement = aggregator.aggregate_balances()

        notes: List[SettlementNote] = []
        if calculator.last_adjustment is not None:
            notes.append(
                SettlementNote(
                    key="net_balance_rounding",
                    message="Net balances did not sum to zero; the difference was absorbed by the first member.",
                    values={"discrepancy": str(calculator.last_adjustment)},
                )
            )
        if aggregator.adjustment is not None:
            notes.append(
                SettlementNote(
                    key="settlement_rounding",
                    message="Small discrepancy adjusted before building suggested payments.",
                    values={"discrepancy": str(aggregator.adjustment)},
                )
            )

        suggested = graph_to_edges(settlement, SuggestedPayment)
        return SettlementReport(
            run_id=str(uuid.uuid4()),
            generated_at=datetime.now(timezone.utc),
            group_id=group_id or str(getattr(group, "group_id", "") or ""),
            tolerance=tolerance,
            net_balances=[MemberBalance(member=m, balance=b) for m, b in net_balances.items()],
            detailed_balances=graph_to_edges(detailed),
            simplified_balances=graph_to_edges(simplified),
            suggested_payments=suggested,
            notes=notes,
            totals=SettlementTotals(
                total_owed=sum_amounts(p.amount for p in suggested),
                payment_count=len(suggested),
                detailed_edge_count=len(detailed.edges()),
                simplified_edge_count=len(simplified.edges()),
            ),
        )
