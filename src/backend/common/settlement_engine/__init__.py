"""Balance and settlement engine for group expense sharing.

This package intentionally contains only domain logic:
- Inputs are expense/payment snapshots exposed through small capability interfaces.
- No persistence, HTTP, or money movement lives here.
"""

from .aggregator import BalanceAggregator
from .balance_calculator import BalanceCalculator
from .config import SettlementConfig, get_settlement_config
from .errors import (
    DuplicateParticipantError,
    FixedAmountSumMismatchError,
    InvalidFixedAmountsError,
    InvalidPercentagesError,
    InvalidWeightsError,
    LedgerInconsistencyError,
    NoParticipantsError,
    NotAParticipantError,
    PercentageSumMismatchError,
    SettlementError,
    SplitInvariantError,
    SplitValidationError,
    UnknownMethodError,
    ZeroWeightSumError,
)
from .graph import DebtGraph
from .models import (
    ExpenseRecord,
    GroupLedger,
    PaymentRecord,
    SettlementReport,
    ShareLine,
    SuggestedPayment,
)
from .runner import SettlementRunner, graph_to_edges
from .simplifier import TransactionSimplifier
from .split_engine import SplitRuleEngine
