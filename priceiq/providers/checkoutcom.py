"""
Checkout.com fee model (starter modelling defaults, not plan rates).
"""

from decimal import Decimal

from .base import ProviderProduct, ProviderRate, TableFeeModel

_CARDS = "Checkout.com Cards (model)"
_MARKETPLACE = "Checkout.com Marketplace (model)"


class CheckoutComFeeModel(TableFeeModel):
    provider_id = "checkoutcom"
    label = "Checkout.com"
    fee_label = "Checkout.com fee"
    products = (
        ProviderProduct("cards", "Cards", "Checkout.com card processing (model)", kind="cards"),
        ProviderProduct("marketplace", "Marketplace", "Checkout.com marketplace/platforms (model)", kind="connect"),
    )

    rates = {
        "UK": {
            "cards": ProviderRate(Decimal("1.7"), Decimal("0.20"), _CARDS),
            "marketplace": ProviderRate(Decimal("2.0"), Decimal("0.25"), _MARKETPLACE),
        },
        "EU": {
            "cards": ProviderRate(Decimal("1.8"), Decimal("0.25"), _CARDS),
            "marketplace": ProviderRate(Decimal("2.1"), Decimal("0.30"), _MARKETPLACE),
        },
        "US": {
            "cards": ProviderRate(Decimal("2.4"), Decimal("0.30"), _CARDS),
            "marketplace": ProviderRate(Decimal("2.7"), Decimal("0.35"), _MARKETPLACE),
        },
    }
