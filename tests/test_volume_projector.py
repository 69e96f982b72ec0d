"""
Unit Tests for the Volume Projector
"""

from decimal import Decimal

import pytest

from priceiq.calculators import VolumeProjector, compute_volume_projection
from priceiq.models import FeeOverrides
from priceiq.quote import quote

STANDARD_OVERRIDES = FeeOverrides(percent=Decimal("1.5"), fixed=Decimal("0.20"))


def volume_state(**kwargs):
    state = {
        "volume_on": True,
        "volume_tx_per_month": 100,
        "volume_tiers": [{"id": "t1", "share_pct": 100, "price": 10}],
    }
    state.update(kwargs)
    return state


@pytest.fixture
def projector():
    return VolumeProjector()


class TestVolumeProjection:

    def test_single_tier_aggregation(self, projector):
        """100 tx × (10 × 1.5% + 0.20) = 35.00"""
        state = volume_state()
        result = projector.calculate(state, quote("stripe", state), STANDARD_OVERRIDES)
        assert result.monthly_gross == Decimal("1000.00")
        assert result.monthly_provider_fee == Decimal("35.00")
        assert result.monthly_net_before_refunds == Decimal("965.00")
        assert result.monthly_net_after_refunds == Decimal("965.00")
        assert result.tx_per_month == 100
        assert result.symbol == "£"

    def test_refund_loss_reverses_net(self, projector):
        state = volume_state(volume_refund_rate_pct=10)
        result = projector.calculate(state, quote("stripe", state), STANDARD_OVERRIDES)
        assert result.monthly_refund_loss == Decimal("96.50")
        assert result.monthly_net_after_refunds == Decimal("868.50")

    def test_vat_extracted_from_monthly_gross(self, projector):
        """1000 × 20 / 120 = 166.67"""
        state = volume_state(vat_percent=20)
        result = projector.calculate(state, quote("stripe", state), STANDARD_OVERRIDES)
        assert result.monthly_vat == Decimal("166.67")
        assert result.monthly_gross_ex_vat == Decimal("833.33")
        assert result.monthly_net_after_vat == Decimal("798.33")
        assert result.monthly_net_after_refunds_after_vat == Decimal("798.33")

    def test_percent_inferred_from_single_transaction(self, projector):
        """No overrides: 0.35 / 10.00 = 3.5%, fixed 0."""
        state = volume_state(amount=10)
        result = projector.calculate(state, quote("stripe", state), FeeOverrides())
        assert result.provider_percent == Decimal("3.5")
        assert result.provider_fixed == Decimal("0")
        assert result.monthly_provider_fee == Decimal("35.00")

    def test_overrides_default_to_state(self, projector):
        state = volume_state(custom_provider_fee_percent=1.5, custom_fixed_fee=0.2)
        result = projector.calculate(state)
        assert result.monthly_provider_fee == Decimal("35.00")

    def test_negative_fixed_override_floored(self, projector):
        state = volume_state()
        result = projector.calculate(
            state, quote("stripe", state), FeeOverrides(percent=Decimal("1.5"), fixed=Decimal("-0.5"))
        )
        assert result.provider_fixed == Decimal("0")
        assert result.monthly_provider_fee == Decimal("15.00")

    def test_blended_tiers(self, projector):
        state = volume_state(
            volume_tiers=[
                {"id": "small", "share_pct": 50, "price": 10},
                {"id": "large", "share_pct": 50, "price": 30, "fx_percent": 2},
            ]
        )
        result = projector.calculate(state, quote("stripe", state), STANDARD_OVERRIDES)
        assert result.monthly_gross == Decimal("2000.00")
        # 50 × 0.35 + 50 × 0.65
        assert result.monthly_provider_fee == Decimal("50.00")
        # 50 × 30 × 2%
        assert result.monthly_fx_fee == Decimal("30.00")
        assert result.blended_ticket == Decimal("20.00")
        assert result.blended_fx_pct == Decimal("1")
        assert result.tiers_count == 2

    def test_platform_fee_after_provider_fee(self, projector):
        """(10 - 0.35) × 10% × 100 = 96.50"""
        state = volume_state(platform_fee_percent=10, platform_fee_base="afterStripe")
        result = projector.calculate(state, quote("stripe", state), STANDARD_OVERRIDES)
        assert result.monthly_platform_fee == Decimal("96.50")

    def test_platform_fee_from_gross(self, projector):
        state = volume_state(platform_fee_percent=10)
        result = projector.calculate(state, quote("stripe", state), STANDARD_OVERRIDES)
        assert result.monthly_platform_fee == Decimal("100.00")

    def test_tx_per_month_rounded(self, projector):
        state = volume_state(volume_tx_per_month=100.5)
        assert projector.calculate(state, None, STANDARD_OVERRIDES).tx_per_month == 101

    def test_very_large_transaction_count(self, projector):
        state = volume_state(volume_tx_per_month=1e30)
        result = projector.calculate(state, None, STANDARD_OVERRIDES)
        assert result.tx_per_month == 10**30
        assert result.monthly_gross == Decimal("1e31")
        # 1e30 × 0.35
        assert result.monthly_provider_fee == Decimal("3.5e29")

    def test_module_function_with_large_count(self):
        result = compute_volume_projection({"volume_on": True, "volume_tx_per_month": 1e30})
        assert result.monthly_gross.is_finite()


class TestVolumeDisabled:

    def test_off(self):
        assert compute_volume_projection(volume_state(volume_on=False)) is None

    def test_zero_transactions(self):
        assert compute_volume_projection(volume_state(volume_tx_per_month=0)) is None

    def test_no_tier_with_share(self):
        state = volume_state(volume_tiers=[{"share_pct": 0, "price": 10}])
        assert compute_volume_projection(state) is None

    def test_default_tier_used_when_none_given(self):
        state = volume_state(volume_tiers=[], amount=20)
        result = compute_volume_projection(state, None, STANDARD_OVERRIDES)
        assert result.monthly_gross == Decimal("2000.00")
