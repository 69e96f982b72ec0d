"""
Unit Tests for the Margin Calculator
"""

from decimal import Decimal

import pytest

from priceiq.calculators import MarginCalculator
from priceiq.normalizer import normalize_state
from priceiq.quote import QuoteEngine


@pytest.fixture
def calculator():
    return MarginCalculator()


@pytest.fixture
def engine():
    return QuoteEngine()


def summarize(calculator, engine, payload):
    state = normalize_state(payload)
    return calculator.calculate(engine.quote(state), state)


class TestMarginSummary:

    def test_on_target(self, calculator, engine):
        """9.65 / 10.00 = 96.5%"""
        summary = summarize(calculator, engine, {"margin_on": True, "margin_target_pct": 90})
        assert summary.actual_pct == Decimal("96.5")
        assert summary.delta == Decimal("6.5")
        assert summary.ok
        assert summary.badge == "On target"

    def test_exactly_on_target(self, calculator, engine):
        summary = summarize(calculator, engine, {"margin_on": True, "margin_target_pct": 96.5})
        assert summary.ok

    def test_below_target(self, calculator, engine):
        summary = summarize(calculator, engine, {"margin_on": True, "margin_target_pct": 97})
        assert not summary.ok
        assert summary.badge == "Below target"

    def test_no_goal(self, calculator, engine):
        summary = summarize(calculator, engine, {"margin_on": True, "margin_target_pct": 0})
        assert not summary.ok
        assert summary.badge == "No goal"

    def test_invalid_quote(self, calculator, engine):
        summary = summarize(
            calculator,
            engine,
            {"mode": "reverse", "fx_percent": 60, "platform_fee_percent": 40, "margin_target_pct": 50},
        )
        assert summary.badge == "Invalid"
        assert summary.actual_pct == Decimal("0")
        assert not summary.ok

    def test_zero_charge(self, calculator, engine):
        summary = summarize(calculator, engine, {"amount": 0, "margin_target_pct": 50})
        assert summary.badge == "—"
        assert summary.actual_pct == Decimal("0")

    def test_actual_margin_is_clamped(self, calculator, engine):
        """Net is negative when the fixed fee exceeds the charge."""
        summary = summarize(calculator, engine, {"amount": 0.1, "margin_target_pct": 10})
        assert summary.actual_pct == Decimal("0")
        assert summary.badge == "Below target"
