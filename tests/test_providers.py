"""
Unit Tests for the Provider Fee Models
"""

from dataclasses import replace
from decimal import Decimal

import pytest

from priceiq.fees import FeeCalculator
from priceiq.models import QuoteInput
from priceiq.providers import (
    DEFAULT_PROVIDER_ID,
    PROVIDERS,
    AdyenFeeModel,
    ProviderRate,
    get_provider,
    is_known_provider,
    list_providers,
)

TOLERANCE = Decimal("0.000001")


def make_input(provider_id="stripe", region="UK", product_id="cards", mode="forward", amount="10", **kwargs):
    return QuoteInput(
        provider_id=provider_id,
        region=region,
        product_id=product_id,
        mode=mode,
        amount=Decimal(amount),
        target_net=kwargs.pop("target_net", Decimal("8")),
        **kwargs,
    )


class TestRegistry:

    def test_five_providers_registered(self):
        assert set(PROVIDERS) == {"stripe", "paypal", "adyen", "checkoutcom", "custom"}

    def test_unknown_provider_falls_back_to_default(self):
        assert get_provider("square").provider_id == DEFAULT_PROVIDER_ID

    def test_is_known_provider(self):
        assert is_known_provider("adyen")
        assert not is_known_provider("square")

    def test_every_provider_has_products(self):
        for provider in list_providers():
            assert provider.products
            assert provider.get_product(provider.default_product_id) is provider.products[0]

    def test_to_dict_lists_products(self):
        data = get_provider("paypal").to_dict()
        assert data["id"] == "paypal"
        assert [p["id"] for p in data["products"]] == ["card_processing", "checkout"]


class TestStripeFeeModel:
    """Region pricing tiers chosen by pricing_id."""

    @pytest.fixture
    def provider(self):
        return get_provider("stripe")

    def test_uk_standard_on_10(self, provider):
        result = provider.quote(make_input())
        assert result.provider_fee == Decimal("0.35")
        assert result.net_before_vat == Decimal("9.65")
        assert result.denom_ok
        assert result.symbol == "£"

    def test_selected_pricing_tier(self, provider):
        """1.9% × 10 + 0.20 = 0.39"""
        result = provider.quote(make_input(pricing_id="uk_premium"))
        assert result.provider_fee == Decimal("0.39")
        assert result.meta["pricing_id"] == "uk_premium"

    def test_unknown_pricing_tier_uses_first(self, provider):
        result = provider.quote(make_input(region="US", pricing_id="uk_premium", amount="100"))
        assert result.meta["rate_label"] == "Domestic US card (typical)"
        assert result.provider_fee == Decimal("3.20")

    def test_fee_label(self, provider):
        assert provider.quote(make_input()).fees[0].label == "Stripe fee"


class TestTableFeeModels:
    """Modelled providers with per-region, per-product rate tables."""

    def test_paypal_us_checkout(self):
        """2.99% × 100 + 0.49 = 3.48"""
        result = get_provider("paypal").quote(make_input("paypal", "US", "checkout", amount="100"))
        assert result.provider_fee == Decimal("3.48")
        assert result.symbol == "$"

    def test_paypal_unknown_product_uses_checkout_rate(self):
        result = get_provider("paypal").quote(make_input("paypal", "EU", "cards", amount="100"))
        assert result.meta["rate_label"] == "PayPal Checkout (model)"
        assert result.provider_fee == Decimal("3.25")

    def test_adyen_eu_platform(self):
        result = get_provider("adyen").quote(make_input("adyen", "EU", "platform", amount="100"))
        assert result.meta["provider_percent"] == Decimal("1.85")
        assert result.meta["provider_fixed"] == Decimal("0.30")
        assert result.provider_fee == Decimal("2.15")
        assert result.symbol == "€"

    def test_checkoutcom_us_marketplace(self):
        result = get_provider("checkoutcom").quote(make_input("checkoutcom", "US", "marketplace", amount="100"))
        assert result.provider_fee == Decimal("3.05")
        assert result.fees[0].label == "Checkout.com fee"


class TestCustomFeeModel:

    @pytest.fixture
    def provider(self):
        return get_provider("custom")

    def test_no_overrides_means_no_provider_fee(self, provider):
        result = provider.quote(make_input("custom", amount="100"))
        assert result.provider_fee == Decimal("0")
        assert result.meta["requires_overrides"] is True

    def test_overrides_drive_the_fee(self, provider):
        """2.5% × 100 - 0.10 rebate = 2.40"""
        result = provider.quote(
            make_input(
                "custom",
                amount="100",
                custom_provider_fee_percent=Decimal("2.5"),
                custom_fixed_fee=Decimal("-0.10"),
                custom_provider_label="Acme Pay",
            )
        )
        assert result.provider_fee == Decimal("2.40")
        assert result.meta["custom_provider_label"] == "Acme Pay"
        assert result.meta["overrides_on"] is True


class TestOverrides:
    """Override -> table default precedence."""

    def test_percent_override_keeps_table_fixed(self):
        result = get_provider("adyen").quote(
            make_input("adyen", amount="100", custom_provider_fee_percent=Decimal("3"))
        )
        assert result.meta["provider_percent"] == Decimal("3")
        assert result.meta["provider_fixed"] == Decimal("0.20")
        assert result.meta["provider_percent_default"] == Decimal("1.5")

    def test_fixed_override_keeps_table_percent(self):
        result = get_provider("stripe").quote(make_input(amount="100", custom_fixed_fee=Decimal("0")))
        assert result.provider_fee == Decimal("1.5")

    def test_no_overrides_flag(self):
        assert get_provider("stripe").quote(make_input()).meta["overrides_on"] is False

    def test_rate_resolved_once_per_quote(self):
        calls = []

        class CountingAdyen(AdyenFeeModel):
            def resolve_rate(self, quote_input):
                calls.append(quote_input.product_id)
                return super().resolve_rate(quote_input)

        CountingAdyen().quote(make_input("adyen", amount="100"))
        assert calls == ["cards"]

    def test_rates_for_uses_given_rate(self):
        provider = get_provider("adyen")
        rate = ProviderRate(Decimal("4"), Decimal("0.50"), "Negotiated")
        rates = provider.rates_for(make_input("adyen"), rate)
        assert (rates.provider_percent, rates.provider_fixed) == (Decimal("4"), Decimal("0.50"))


class TestReverseMode:

    def test_reverse_solves_gross(self):
        result = get_provider("stripe").quote(make_input(mode="reverse", target_net=Decimal("9.65")))
        assert result.gross == Decimal("10")
        assert result.denom_ok

    def test_unsolvable_is_flagged_not_raised(self):
        result = get_provider("stripe").quote(
            make_input(
                mode="reverse",
                fx_percent=Decimal("48.5"),
                platform_fee_percent=Decimal("50"),
            )
        )
        assert not result.denom_ok
        assert result.gross.is_nan()
        assert result.net_before_vat.is_nan()
        assert all(line.amount == Decimal("0") for line in result.fees)

    def test_just_below_limit_is_solvable(self):
        result = get_provider("stripe").quote(
            make_input(
                mode="reverse",
                fx_percent=Decimal("48.499"),
                platform_fee_percent=Decimal("50"),
            )
        )
        assert result.denom_ok

    def test_after_provider_fee_meta(self):
        result = get_provider("stripe").quote(make_input(platform_fee_base="afterStripe"))
        assert result.meta["platform_fee_base"] == "after_provider_fee"

    @pytest.mark.parametrize("provider_id", sorted(PROVIDERS))
    def test_reverse_then_forward_returns_target(self, provider_id):
        quote_input = make_input(
            provider_id,
            region="EU",
            product_id=get_provider(provider_id).default_product_id,
            mode="reverse",
            target_net=Decimal("42.42"),
            fx_percent=Decimal("2"),
            platform_fee_percent=Decimal("10"),
            platform_fee_base="afterStripe",
            vat_percent=Decimal("20"),
        )
        provider = get_provider(provider_id)
        reverse = provider.quote(quote_input)
        forward = provider.quote(replace(quote_input, mode="forward", amount=reverse.gross))
        assert abs(forward.net_before_vat - Decimal("42.42")) < TOLERANCE

    def test_rates_feed_fee_calculator(self):
        provider = get_provider("checkoutcom")
        quote_input = make_input("checkoutcom", amount="80", fx_percent=Decimal("1"))
        breakdown = FeeCalculator().calculate(Decimal("80"), provider.rates_for(quote_input))
        assert breakdown.net_before_vat == provider.quote(quote_input).net_before_vat
