from .base import SplitRule
from .context import SplitContext, validate_total_match
from .registry import SplitRuleRegistry, register_split_rule, registry

# Import built-in split methods so they self-register with the global registry.
from .equally import SplitEqually
from .by_percentages import SplitByPercentages
from .by_weights import SplitByWeights
from .by_fixed_amounts import SplitByFixedAmounts

__all__ = [
    "SplitRule",
    "SplitContext",
    "SplitRuleRegistry",
    "register_split_rule",
    "registry",
    "validate_total_match",
    "SplitEqually",
    "SplitByPercentages",
    "SplitByWeights",
    "SplitByFixedAmounts",
]
