from decimal import Decimal

import pytest

from common.settlement_engine.config import SettlementConfig, get_settlement_config


def test_defaults(monkeypatch):
    monkeypatch.delenv("SETTLEMENT_TOLERANCE", raising=False)
    monkeypatch.delenv("SETTLEMENT_SIMPLIFY_UNTIL_STABLE", raising=False)
    cfg = get_settlement_config()
    assert cfg.tolerance == Decimal("0.01")
    assert cfg.simplify_until_stable is True


def test_reads_environment(monkeypatch):
    monkeypatch.setenv("SETTLEMENT_TOLERANCE", "0.05")
    monkeypatch.setenv("SETTLEMENT_SIMPLIFY_UNTIL_STABLE", "false")
    cfg = get_settlement_config()
    assert cfg.tolerance == Decimal("0.05")
    assert cfg.simplify_until_stable is False


@pytest.mark.parametrize(
    "name,value",
    [
        ("SETTLEMENT_TOLERANCE", "abc"),
        ("SETTLEMENT_TOLERANCE", "-0.01"),
        ("SETTLEMENT_TOLERANCE", "NaN"),
        ("SETTLEMENT_SIMPLIFY_UNTIL_STABLE", "maybe"),
    ],
)
def test_rejects_malformed_values(monkeypatch, name, value):
    monkeypatch.setenv(name, value)
    with pytest.raises(ValueError, match=name):
        get_settlement_config()


def test_config_model_validates_from_dict():
    cfg = SettlementConfig.model_validate({"tolerance": "0.02", "simplify_until_stable": False})
    assert cfg.tolerance == Decimal("0.02")
