"""
Stripe fee model.

Rates come from the region pricing table; the caller picks the card tier
through `pricing_id`. Products do not change the rate.
"""

from ..models import QuoteInput
from ..pricing import find_pricing_option
from .base import FeeModel, ProviderProduct, ProviderRate


class StripeFeeModel(FeeModel):
    provider_id = "stripe"
    label = "Stripe"
    fee_label = "Stripe fee"
    products = (
        ProviderProduct("cards", "Cards", "Basic card processing", kind="cards"),
        ProviderProduct("connect", "Connect", "Platform / marketplace payouts", kind="connect"),
    )

    def resolve_rate(self, quote_input: QuoteInput) -> ProviderRate:
        option = find_pricing_option(quote_input.region, quote_input.pricing_id)
        return ProviderRate(percent=option.percent, fixed=option.fixed, label=option.label)

    def _build_meta(self, quote_input, rate, rates) -> dict:
        meta = super()._build_meta(quote_input, rate, rates)
        meta["pricing_id"] = find_pricing_option(quote_input.region, quote_input.pricing_id).id
        return meta
