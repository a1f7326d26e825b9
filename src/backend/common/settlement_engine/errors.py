from __future__ import annotations


class SettlementError(Exception):
    """Base class for every error raised by the settlement engine."""


class SplitValidationError(SettlementError, ValueError):
    """Caller-supplied split input is invalid. Never retried."""


class NoParticipantsError(SplitValidationError):
    pass


class DuplicateParticipantError(SplitValidationError):
    pass


class UnknownMethodError(SplitValidationError):
    pass


class InvalidPercentagesError(SplitValidationError):
    pass


class PercentageSumMismatchError(SplitValidationError):
    pass


class InvalidWeightsError(SplitValidationError):
    pass


class ZeroWeightSumError(SplitValidationError):
    pass


class InvalidFixedAmountsError(SplitValidationError):
    pass


class FixedAmountSumMismatchError(SplitValidationError):
    pass


class NotAParticipantError(SplitValidationError):
    pass


class SplitInvariantError(SettlementError, RuntimeError):
    """Computed shares do not add up to the expense total (programming defect)."""


class LedgerInconsistencyError(SettlementError, RuntimeError):
    """Net balances of a group do not sum to zero within tolerance."""
