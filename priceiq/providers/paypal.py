"""
PayPal fee model (starter modelling defaults, not plan rates).
"""

from decimal import Decimal

from .base import ProviderProduct, ProviderRate, TableFeeModel

_CHECKOUT = "PayPal Checkout (model)"
_CARDS = "PayPal Cards/PPCP (model)"


class PayPalFeeModel(TableFeeModel):
    provider_id = "paypal"
    label = "PayPal"
    fee_label = "PayPal fee"
    products = (
        ProviderProduct("card_processing", "Cards", "PayPal card processing (PPCP)", kind="cards"),
        ProviderProduct("checkout", "Checkout", "Standard PayPal checkout", kind="connect"),
    )
    fallback_product_id = "checkout"

    rates = {
        "UK": {
            "checkout": ProviderRate(Decimal("2.9"), Decimal("0.30"), _CHECKOUT),
            "card_processing": ProviderRate(Decimal("2.9"), Decimal("0.30"), _CARDS),
        },
        "EU": {
            "checkout": ProviderRate(Decimal("2.9"), Decimal("0.35"), _CHECKOUT),
            "card_processing": ProviderRate(Decimal("2.9"), Decimal("0.35"), _CARDS),
        },
        "US": {
            "checkout": ProviderRate(Decimal("2.99"), Decimal("0.49"), _CHECKOUT),
            "card_processing": ProviderRate(Decimal("2.99"), Decimal("0.49"), _CARDS),
        },
    }
