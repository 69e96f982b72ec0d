"""
Adyen fee model (modelling defaults).
"""

from decimal import Decimal

from .base import ProviderProduct, ProviderRate, TableFeeModel

_CARDS = "Adyen Cards (model)"
_PLATFORM = "Adyen Platform/Marketplaces (model)"


class AdyenFeeModel(TableFeeModel):
    provider_id = "adyen"
    label = "Adyen"
    fee_label = "Adyen fee"
    products = (
        ProviderProduct("cards", "Cards", "Adyen card acquiring (model)", kind="cards"),
        ProviderProduct("platform", "Platform", "Adyen for platforms/marketplaces (model)", kind="connect"),
    )

    rates = {
        "UK": {
            "cards": ProviderRate(Decimal("1.5"), Decimal("0.20"), _CARDS),
            "platform": ProviderRate(Decimal("1.75"), Decimal("0.25"), _PLATFORM),
        },
        "EU": {
            "cards": ProviderRate(Decimal("1.6"), Decimal("0.25"), _CARDS),
            "platform": ProviderRate(Decimal("1.85"), Decimal("0.30"), _PLATFORM),
        },
        "US": {
            "cards": ProviderRate(Decimal("2.2"), Decimal("0.30"), _CARDS),
            "platform": ProviderRate(Decimal("2.4"), Decimal("0.35"), _PLATFORM),
        },
    }
