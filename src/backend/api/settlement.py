from __future__ import annotations

from decimal import Decimal
from typing import Any, Dict, List

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from common.settlement_engine.catalog import build_catalog
from common.settlement_engine.config import get_settlement_config
from common.settlement_engine.errors import (
    LedgerInconsistencyError,
    SplitInvariantError,
    SplitValidationError,
)
from common.settlement_engine.models import GroupLedger, MemberId, SettlementReport, ShareLine
from common.settlement_engine.runner import SettlementRunner
from common.settlement_engine.split_engine import SplitRuleEngine


router = APIRouter(prefix="/settlement", tags=["settlement"])


class SplitRequest(BaseModel):
    total_amount: Decimal
    participants: List[MemberId] = Field(default_factory=list)
    method: str = "equally"
    params: Dict[str, Any] = Field(default_factory=dict)


class SplitResponse(BaseModel):
    method: str
    total_amount: Decimal
    shares: List[ShareLine] = Field(default_factory=list)


@router.get("/split-methods")
def list_split_methods():
    return [entry.model_dump() for entry in build_catalog()]


@router.post("/split", response_model=SplitResponse)
def split_expense(request: SplitRequest):
    engine = SplitRuleEngine(request.total_amount, request.participants)
    try:
        amounts = engine.apply_split(request.method, request.params)
    except SplitValidationError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    except SplitInvariantError as exc:
        raise HTTPException(status_code=500, detail=str(exc)) from exc

    return SplitResponse(
        method=request.method,
        total_amount=request.total_amount,
        shares=[ShareLine(member=member, amount_owed=amount) for member, amount in amounts.items()],
    )


@router.post("/report", response_model=SettlementReport)
def settlement_report(ledger: GroupLedger):
    runner = SettlementRunner(get_settlement_config())
    try:
        return runner.run(ledger)
    except LedgerInconsistencyError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc
