from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Mapping, Optional, Protocol, Sequence, Union

from pydantic import BaseModel, Field

from .money import quantize_amount

MemberId = Union[int, str]


class ShareLike(Protocol):
    member: Any
    amount_owed: Decimal


class ExpenseLike(Protocol):
    total_amount: Decimal
    payer: Any
    shares: Sequence[ShareLike]


class PaymentLike(Protocol):
    payer: Any
    receiver: Any
    amount: Decimal


class GroupLedgerLike(Protocol):
    # Roster order drives remainder and discrepancy assignment; never re-sort it.
    active_members: Sequence[Any]
    expenses: Iterable[ExpenseLike]
    payments: Iterable[PaymentLike]


class ShareLine(BaseModel):
    member: MemberId
    amount_owed: Decimal


class ExpenseRecord(BaseModel):
    total_amount: Decimal
    payer: MemberId
    shares: List[ShareLine] = Field(default_factory=list)
    description: str = ""

    @classmethod
    def from_split(
        cls,
        *,
        total_amount: Decimal,
        payer: MemberId,
        split: Mapping[MemberId, Decimal],
        description: str = "",
    ) -> "ExpenseRecord":
        return cls(
            total_amount=quantize_amount(total_amount),
            payer=payer,
            shares=[ShareLine(member=m, amount_owed=amount) for m, amount in split.items()],
            description=description,
        )


class PaymentRecord(BaseModel):
    payer: MemberId
    receiver: MemberId
    amount: Decimal


class GroupLedger(BaseModel):
    group_id: str = ""
    active_members: List[MemberId] = Field(default_factory=list)
    expenses: List[ExpenseRecord] = Field(default_factory=list)
    payments: List[PaymentRecord] = Field(default_factory=list)


class MemberBalance(BaseModel):
    member: MemberId
    balance: Decimal


class DebtEdge(BaseModel):
    debtor: MemberId
    creditor: MemberId
    amount: Decimal


class SuggestedPayment(DebtEdge):
    pass


class SettlementNote(BaseModel):
    key: str
    message: str
    values: Dict[str, Any] = Field(default_factory=dict)


class SettlementTotals(BaseModel):
    total_owed: Decimal = Decimal("0.00")
    payment_count: int = 0
    detailed_edge_count: int = 0
    simplified_edge_count: int = 0


class SettlementReport(BaseModel):
    run_id: str
    generated_at: datetime
    group_id: str = ""
    tolerance: Decimal

    net_balances: List[MemberBalance] = Field(default_factory=list)
    detailed_balances: List[DebtEdge] = Field(default_factory=list)
    simplified_balances: List[DebtEdge] = Field(default_factory=list)
    suggested_payments: List[SuggestedPayment] = Field(default_factory=list)
    notes: List[SettlementNote] = Field(default_factory=list)
    totals: SettlementTotals = Field(default_factory=SettlementTotals)

    def payments_for(self, member: MemberId) -> List[SuggestedPayment]:
        return [p for p in self.suggested_payments if p.debtor == member or p.creditor == member]

    def balance_of(self, member: MemberId) -> Optional[Decimal]:
        for entry in self.net_balances:
            if entry.member == member:
                return entry.balance
        return None
