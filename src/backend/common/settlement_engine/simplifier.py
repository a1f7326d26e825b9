from __future__ import annotations

import logging
from decimal import Decimal
from typing import Any, List, Mapping, Optional, Union

from .graph import DebtGraph
from .money import DEFAULT_TOLERANCE

logger = logging.getLogger(__name__)

_DONE = object()


class TransactionSimplifier:
    """Reduces a debt graph by netting opposing edges and cancelling debt cycles.

    Works on a private copy of the input graph. ``simplify_transactions`` runs
    opposing-debt netting then cycle removal; with ``until_stable`` the two steps
    repeat until neither changes the graph (removing a cycle can expose a new
    opposing pair and vice versa). Zero and sub-tolerance edges are dropped last.
    """

    def __init__(
        self,
        debt_graph: Union[DebtGraph, Mapping[Any, Mapping[Any, Any]]],
        *,
        tolerance: Decimal = DEFAULT_TOLERANCE,
        until_stable: bool = True,
    ):
        self._graph = debt_graph.copy() if isinstance(debt_graph, DebtGraph) else DebtGraph(debt_graph)
        self._tolerance = tolerance
        self._until_stable = until_stable

    @property
    def graph(self) -> DebtGraph:
        return self._graph

    def simplify_transactions(self, until_stable: Optional[bool] = None) -> DebtGraph:
        if until_stable is None:
            until_stable = self._until_stable

        if until_stable:
            while True:
                netted = self.remove_direct_opposing_debts()
                cancelled = self.find_and_remove_cycles()
                if not netted and not cancelled:
                    break
        else:
            self.remove_direct_opposing_debts()
            self.find_and_remove_cycles()

        self.clean_zero_debts()
        return self._graph.copy()

    def remove_direct_opposing_debts(self) -> int:
        """Net every pair owing each other in both directions. Returns the number of pairs netted."""
        netted = 0
        for debtor in list(self._graph):
            for creditor in self._graph.creditors_of(debtor):
                forward = self._graph.get_amount(debtor, creditor)
                backward = self._graph.get_amount(creditor, debtor)
                # A negligible counter-debt is left for clean_zero_debts.
                if forward <= self._tolerance or backward <= self._tolerance:
                    continue
                if forward >= backward:
                    self._graph.set_amount(debtor, creditor, forward - backward)
                    self._graph.remove(creditor, debtor)
                else:
                    self._graph.set_amount(creditor, debtor, backward - forward)
                    self._graph.remove(debtor, creditor)
                netted += 1
        return netted

    def find_and_remove_cycles(self) -> int:
        """Cancel cycles until the graph is acyclic. Returns the number of cycles cancelled."""
        cancelled = 0
        while True:
            cycle = self._find_cycle()
            if cycle is None:
                return cancelled
            edges = list(zip(cycle, cycle[1:] + cycle[:1]))
            min_debt = min(self._graph.get_amount(debtor, creditor) for debtor, creditor in edges)
            logger.debug("Cancelling %s around debt cycle %r", min_debt, cycle)
            # At least one edge reaches zero and is removed, so the loop terminates.
            for debtor, creditor in edges:
                self._graph.subtract(debtor, creditor, min_debt)
            cancelled += 1

    def clean_zero_debts(self) -> int:
        return self._graph.prune(self._tolerance)

    def _find_cycle(self) -> Optional[List[Any]]:
        # Iterative depth-first search; `on_path` maps each node on the current path to its index.
        visited = set()
        for start in list(self._graph):
            if start in visited:
                continue
            visited.add(start)
            path = [start]
            on_path = {start: 0}
            stack = [iter(self._graph.creditors_of(start))]
            while stack:
                nxt = next(stack[-1], _DONE)
                if nxt is _DONE:
                    stack.pop()
                    on_path.pop(path.pop())
                    continue
                if nxt in on_path:
                    return path[on_path[nxt]:]
                if nxt in visited:
                    continue
                visited.add(nxt)
                on_path[nxt] = len(path)
                path.append(nxt)
                stack.append(iter(self._graph.creditors_of(nxt)))
        return None
