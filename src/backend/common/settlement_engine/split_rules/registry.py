from __future__ import annotations

from typing import Dict, Iterable, Type

from ..errors import UnknownMethodError
from .base import SplitRule


class SplitRuleRegistry:
    def __init__(self):
        self._rules: Dict[str, Type[SplitRule]] = {}

    def register(self, rule_cls: Type[SplitRule]) -> None:
        method_id = getattr(rule_cls, "method_id", None)
        if not method_id:
            raise ValueError("Split rule class missing method_id")
        if method_id in self._rules:
            raise ValueError(f"Duplicate split method registered: {method_id}")
        self._rules[method_id] = rule_cls

    def create(self, method_id: str) -> SplitRule:
        return self.get(method_id)()

    def get(self, method_id: str) -> Type[SplitRule]:
        try:
            return self._rules[method_id]
        except KeyError:
            raise UnknownMethodError(f"Unknown split method: {method_id}") from None

    def ids(self) -> Iterable[str]:
        return self._rules.keys()


registry = SplitRuleRegistry()


def register_split_rule(rule_cls: Type[SplitRule]) -> Type[SplitRule]:
    registry.register(rule_cls)
    return rule_cls
