import logging
from decimal import Decimal

import pytest

from common.settlement_engine.aggregator import BalanceAggregator
from common.settlement_engine.errors import LedgerInconsistencyError


def b(value) -> Decimal:
    return Decimal(str(value))


def test_validate_overall_balance_exact_zero(user_a, user_b, user_c):
    aggregator = BalanceAggregator({user_a: b("-10.00"), user_b: b("5.00"), user_c: b("5.00")}, {})
    aggregator.validate_overall_balance()
    assert aggregator.net_balances[user_a] == b("-10.00")
    assert aggregator.adjustment is None


def test_inconsistent_ledger_aborts(user_a, user_b):
    aggregator = BalanceAggregator({user_a: b("10.00"), user_b: b("-9.90")}, {})
    with pytest.raises(LedgerInconsistencyError, match="0.10"):
        aggregator.aggregate_balances()


def test_inconsistent_ledger_is_runtime_error(user_a, user_b):
    with pytest.raises(RuntimeError):
        BalanceAggregator({user_a: b("100.00"), user_b: b("-50.00")}).aggregate_balances()


def test_small_discrepancy_adjusts_first_member(user_a, user_b, assert_graph):
    aggregator = BalanceAggregator({user_a: b("50.01"), user_b: b("-50.00")}, {})
    result = aggregator.aggregate_balances()
    assert aggregator.net_balances[user_a] == b("50.00")
    assert aggregator.adjustment == b("0.01")
    assert_graph(result, {user_b: {user_a: "50.00"}})


def test_inputs_rounded_to_cents_on_entry(user_a, user_b):
    aggregator = BalanceAggregator({user_a: b("-10.00"), user_b: b("10.005")}, {})
    assert aggregator.net_balances[user_b] == b("10.01")
    aggregator.validate_overall_balance()
    assert aggregator.net_balances[user_a] == b("-10.01")
    assert sum(aggregator.net_balances.values()) == 0


def test_inputs_are_copied(user_a, user_b):
    net = {user_a: b("-1.00"), user_b: b("1.00")}
    detailed = {user_a: {user_b: b("1.00")}}
    aggregator = BalanceAggregator(net, detailed)
    aggregator.adjust_small_discrepancy(b("0.01"))
    aggregator.handle_rounding_discrepancies()
    assert net == {user_a: b("-1.00"), user_b: b("1.00")}
    assert detailed == {user_a: {user_b: b("1.00")}}


def test_adjust_small_discrepancy_on_empty_map_logs_warning(caplog):
    aggregator = BalanceAggregator({}, {})
    with caplog.at_level(logging.WARNING, logger="common.settlement_engine.aggregator"):
        aggregator.adjust_small_discrepancy(b("0.005"))
    assert aggregator.net_balances == {}
    assert "No members to absorb" in caplog.text


def test_handle_rounding_discrepancies_strips_small_debts(user_a, user_b, user_c, assert_graph):
    detailed = {user_a: {user_b: b("0.03")}, user_b: {user_c: b("10.00")}}
    aggregator = BalanceAggregator({}, detailed, tolerance=b("0.05"))
    aggregator.handle_rounding_discrepancies()
    assert_graph(aggregator.detailed_balances, {user_b: {user_c: "10.00"}})


def test_detailed_balances_do_not_feed_settlement(user_a, user_b, user_c, assert_graph):
    net = {user_a: b("100.00"), user_b: b("0.00"), user_c: b("-100.00")}
    detailed = {user_c: {user_b: b("100.00")}, user_b: {user_a: b("100.00")}}
    result = BalanceAggregator(net, detailed).aggregate_balances()
    assert_graph(result, {user_c: {user_a: "100.00"}})


def test_one_debtor_pays_several_creditors(user_a, user_b, user_c, assert_graph):
    aggregator = BalanceAggregator({user_a: b("-10.00"), user_b: b("5.00"), user_c: b("5.00")}, {})
    assert_graph(aggregator.build_simplified_debt_graph(), {user_a: {user_b: "5.00", user_c: "5.00"}})


def test_partial_payment_across_creditors(user_a, user_b, user_c, assert_graph):
    aggregator = BalanceAggregator({user_a: b("-10.00"), user_b: b("8.00"), user_c: b("2.00")}, {})
    assert_graph(aggregator.build_simplified_debt_graph(), {user_a: {user_b: "8.00", user_c: "2.00"}})


def test_zero_net_balances_settle_nothing(user_a, user_b):
    net = {user_a: b("0.00"), user_b: b("0.00")}
    detailed = {user_a: {user_b: b("5.00")}, user_b: {user_a: b("5.00")}}
    assert BalanceAggregator(net, detailed).aggregate_balances().is_empty()


def test_two_members_opposite_balances(user_a, user_b, assert_graph):
    result = BalanceAggregator({user_a: b("-100.00"), user_b: b("100.00")}).aggregate_balances()
    assert_graph(result, {user_a: {user_b: "100.00"}})


def test_multiple_debtors_and_creditors_largest_first(user_a, user_b, user_c, user_d, assert_graph):
    net = {user_a: b("100.00"), user_b: b("-50.00"), user_c: b("70.00"), user_d: b("-120.00")}
    result = BalanceAggregator(net, {}).aggregate_balances()
    assert_graph(
        result,
        {
            user_d: {user_a: "100.00", user_c: "20.00"},
            user_b: {user_c: "50.00"},
        },
    )
    assert list(result) == [user_d, user_b]


def test_ties_keep_input_order(user_a, user_b, user_c, user_d, assert_graph):
    net = {user_a: b("-5.00"), user_b: b("-5.00"), user_c: b("5.00"), user_d: b("5.00")}
    result = BalanceAggregator(net).aggregate_balances()
    assert_graph(result, {user_a: {user_c: "5.00"}, user_b: {user_d: "5.00"}})


def test_settlement_matches_every_position(user_a, user_b, user_c, user_d):
    net = {
        user_a: b("37.13"),
        user_b: b("-12.40"),
        user_c: b("-61.07"),
        user_d: b("36.34"),
    }
    result = BalanceAggregator(net).aggregate_balances()
    tolerance = b("0.01")
    for member, balance in net.items():
        if balance < 0:
            assert abs(result.total_owed_by(member) - abs(balance)) <= tolerance
        elif balance > 0:
            assert abs(result.total_owed_to(member) - balance) <= tolerance
    for debtor, creditor, amount in result.edges():
        assert debtor != creditor
        assert amount > tolerance


def test_detailed_balances_reject_negative_edges(user_a, user_b):
    with pytest.raises(ValueError, match="Negative debt"):
        BalanceAggregator({}, {user_a: {user_b: b("-0.004")}})
