from __future__ import annotations

from collections.abc import Mapping as MappingABC
from decimal import Decimal
from types import MappingProxyType
from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple

from .money import ZERO, quantize_amount, to_decimal


class DebtGraph(MappingABC):
    """Directed weighted graph: ``graph[debtor][creditor]`` is what debtor owes creditor.

    All mutation goes through methods that drop an edge as soon as it reaches zero
    and drop a debtor as soon as it has no creditors left, so the structure never
    holds empty creditor maps or self-edges. Every stored amount is positive: a debt in
    the other direction is an edge from creditor to debtor, so input edges with a
    negative amount are rejected and zero amounts are skipped. Pruning of near-zero
    (but positive) edges is left to the caller, which decides on the tolerance.

    Iteration follows insertion order, which keeps every traversal deterministic.
    """

    def __init__(self, edges: Optional[Mapping[Any, Mapping[Any, Any]]] = None):
        self._adj: Dict[Any, Dict[Any, Decimal]] = {}
        if edges:
            for debtor, creditors in edges.items():
                for creditor, amount in creditors.items():
                    value = to_decimal(amount)
                    if value < 0:
                        raise ValueError(
                            f"Negative debt {debtor!r} -> {creditor!r}: {value}; record it as {creditor!r} -> {debtor!r}"
                        )
                    self.add(debtor, creditor, value)

    # Mapping protocol (read-only views)

    def __getitem__(self, debtor: Any) -> Mapping[Any, Decimal]:
        return MappingProxyType(self._adj[debtor])

    def __iter__(self) -> Iterator[Any]:
        return iter(self._adj)

    def __len__(self) -> int:
        return len(self._adj)

    def __repr__(self) -> str:
        return f"DebtGraph({self.to_dict()!r})"

    # Queries

    def get_amount(self, debtor: Any, creditor: Any) -> Decimal:
        return self._adj.get(debtor, {}).get(creditor, ZERO)

    def has_edge(self, debtor: Any, creditor: Any) -> bool:
        return creditor in self._adj.get(debtor, {})

    def creditors_of(self, debtor: Any) -> List[Any]:
        return list(self._adj.get(debtor, {}))

    def edges(self) -> List[Tuple[Any, Any, Decimal]]:
        return [
            (debtor, creditor, amount)
            for debtor, creditors in self._adj.items()
            for creditor, amount in creditors.items()
        ]

    def total_owed_by(self, debtor: Any) -> Decimal:
        return sum(self._adj.get(debtor, {}).values(), Decimal("0"))

    def total_owed_to(self, creditor: Any) -> Decimal:
        return sum(
            (creditors.get(creditor, Decimal("0")) for creditors in self._adj.values()),
            Decimal("0"),
        )

    def is_empty(self) -> bool:
        return not self._adj

    # Mutation

    def set_amount(self, debtor: Any, creditor: Any, amount: Decimal) -> None:
        if debtor == creditor:
            raise ValueError(f"Self-edge not allowed: {debtor!r}")
        if amount <= 0:
            self.remove(debtor, creditor)
            return
        self._adj.setdefault(debtor, {})[creditor] = amount

    def add(self, debtor: Any, creditor: Any, amount: Decimal) -> None:
        if debtor == creditor:
            return
        self.set_amount(debtor, creditor, self.get_amount(debtor, creditor) + amount)

    def subtract(self, debtor: Any, creditor: Any, amount: Decimal) -> None:
        self.set_amount(debtor, creditor, self.get_amount(debtor, creditor) - amount)

    def remove(self, debtor: Any, creditor: Any) -> None:
        creditors = self._adj.get(debtor)
        if creditors is None:
            return
        creditors.pop(creditor, None)
        if not creditors:
            del self._adj[debtor]

    def prune(self, tolerance: Decimal, *, inclusive: bool = True) -> int:
        """Drop edges at or below ``tolerance`` (strictly below with ``inclusive=False``)."""
        removed = 0
        for debtor, creditor, amount in self.edges():
            if amount < tolerance or (inclusive and amount == tolerance):
                self.remove(debtor, creditor)
                removed += 1
        return removed

    def copy(self) -> "DebtGraph":
        clone = DebtGraph()
        clone._adj = {debtor: dict(creditors) for debtor, creditors in self._adj.items()}
        return clone

    def quantized(self) -> "DebtGraph":
        clone = DebtGraph()
        for debtor, creditor, amount in self.edges():
            clone.add(debtor, creditor, quantize_amount(amount))
        return clone

    def to_dict(self) -> Dict[Any, Dict[Any, Decimal]]:
        return {debtor: dict(creditors) for debtor, creditors in self._adj.items()}
