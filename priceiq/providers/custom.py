"""
Custom fee model.

Built-in rates are always 0% + 0.00: the model is driven entirely by the
fee overrides. The user-supplied provider label is carried in the meta.
"""

from decimal import Decimal

from ..models import QuoteInput
from .base import FeeModel, ProviderProduct, ProviderRate

CUSTOM_RATES = {
    "cards": ProviderRate(Decimal("0"), Decimal("0"), "Custom Cards (override-driven)"),
    "platform": ProviderRate(Decimal("0"), Decimal("0"), "Custom Platform (override-driven)"),
}


class CustomFeeModel(FeeModel):
    provider_id = "custom"
    label = "Custom"
    fee_label = "Custom provider fee"
    products = (
        ProviderProduct("cards", "Cards", "Custom provider (override-driven)", kind="cards"),
        ProviderProduct("platform", "Platform", "Custom platform/marketplace (override-driven)", kind="connect"),
    )

    def resolve_rate(self, quote_input: QuoteInput) -> ProviderRate:
        return CUSTOM_RATES.get(quote_input.product_id) or CUSTOM_RATES["cards"]

    def _build_meta(self, quote_input, rate, rates) -> dict:
        meta = super()._build_meta(quote_input, rate, rates)
        meta["custom_provider_label"] = (quote_input.custom_provider_label or "").strip()
        meta["requires_overrides"] = True
        return meta
