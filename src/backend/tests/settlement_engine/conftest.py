import os
import sys


# Ensure `src/backend` is on sys.path so imports like `import common...` work.
BACKEND_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), "../.."))
if BACKEND_DIR not in sys.path:
    sys.path.insert(0, BACKEND_DIR)

from dataclasses import dataclass, field
from decimal import Decimal

import pytest

from common.settlement_engine.graph import DebtGraph


@dataclass(frozen=True)
class User:
    id: int
    email: str = ""


@dataclass(frozen=True)
class Share:
    member: object
    amount_owed: Decimal


@dataclass
class Expense:
    total_amount: Decimal
    payer: object
    shares: list


@dataclass
class Payment:
    payer: object
    receiver: object
    amount: Decimal


@dataclass
class Group:
    active_members: list
    expenses: list = field(default_factory=list)
    payments: list = field(default_factory=list)


@pytest.fixture
def tolerance() -> Decimal:
    return Decimal("0.01")


@pytest.fixture
def user_a() -> User:
    return User(id=10, email="a@example.com")


@pytest.fixture
def user_b() -> User:
    return User(id=20, email="b@example.com")


@pytest.fixture
def user_c() -> User:
    return User(id=30, email="c@example.com")


@pytest.fixture
def user_d() -> User:
    return User(id=40, email="d@example.com")


@pytest.fixture
def make_expense():
    def _make(*, total, payer, shares) -> Expense:
        return Expense(
            total_amount=Decimal(total),
            payer=payer,
            shares=[Share(member=m, amount_owed=Decimal(a)) for m, a in shares],
        )

    return _make


@pytest.fixture
def make_payment():
    def _make(*, payer, receiver, amount) -> Payment:
        return Payment(payer=payer, receiver=receiver, amount=Decimal(amount))

    return _make


@pytest.fixture
def make_group():
    def _make(*, members, expenses=(), payments=()) -> Group:
        return Group(active_members=list(members), expenses=list(expenses), payments=list(payments))

    return _make


@pytest.fixture
def make_graph():
    def _make(edges: dict) -> DebtGraph:
        return DebtGraph(
            {
                debtor: {creditor: Decimal(amount) for creditor, amount in creditors.items()}
                for debtor, creditors in edges.items()
            }
        )

    return _make


def _assert_graph(result, expected: dict) -> None:
    """Compare a DebtGraph with ``{debtor: {creditor: "amount"}}`` exactly, with no extra edges."""
    actual = result.to_dict() if isinstance(result, DebtGraph) else result
    normalized = {
        debtor: {creditor: Decimal(amount) for creditor, amount in creditors.items()}
        for debtor, creditors in expected.items()
    }
    assert actual == normalized
    assert all(creditors for creditors in actual.values())


@pytest.fixture
def assert_graph():
    return _assert_graph
