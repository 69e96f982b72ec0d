"""
Region Pricing Table

Static card-pricing tiers for the built-in provider, keyed by region.
Percent values are in percent (1.5 means 1.5%); fixed values are in major
currency units.
"""

from dataclasses import dataclass
from decimal import Decimal

REGIONS = ("UK", "EU", "US")
DEFAULT_REGION = "UK"
DEFAULT_SYMBOL = "£"


@dataclass(frozen=True)
class PricingOption:
    """A single pricing tier for one region."""

    id: str
    label: str
    percent: Decimal
    fixed: Decimal
    currency_symbol: str

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "label": self.label,
            "percent": float(self.percent),
            "fixed": float(self.fixed),
            "currency_symbol": self.currency_symbol,
        }


PRICING: dict[str, tuple[PricingOption, ...]] = {
    "UK": (
        PricingOption("uk_standard", "Standard UK card", Decimal("1.5"), Decimal("0.20"), "£"),
        PricingOption("uk_premium", "Premium UK card (typical)", Decimal("1.9"), Decimal("0.20"), "£"),
        PricingOption("uk_eu_card", "EU card (UK merchant)", Decimal("2.5"), Decimal("0.20"), "£"),
        PricingOption("uk_international", "International card (typical)", Decimal("3.25"), Decimal("0.20"), "£"),
    ),
    "EU": (
        PricingOption("eu_standard", "Standard EEA card", Decimal("1.5"), Decimal("0.25"), "€"),
        PricingOption("eu_premium", "Premium EEA card (typical)", Decimal("1.9"), Decimal("0.25"), "€"),
        PricingOption("eu_uk_card", "UK card (EU merchant)", Decimal("2.5"), Decimal("0.25"), "€"),
        PricingOption("eu_international", "International card (typical)", Decimal("3.25"), Decimal("0.25"), "€"),
    ),
    "US": (
        PricingOption("us_standard", "Domestic US card (typical)", Decimal("2.9"), Decimal("0.30"), "$"),
        PricingOption("us_international", "International (typical)", Decimal("4.4"), Decimal("0.30"), "$"),
    ),
}


def get_pricing_options(region: str) -> tuple[PricingOption, ...]:
    return PRICING.get(region, PRICING[DEFAULT_REGION])


def find_pricing_option(region: str, pricing_id: str | None) -> PricingOption:
    """Return the tier with `pricing_id`, or the region's first tier."""
    options = get_pricing_options(region)
    for option in options:
        if option.id == pricing_id:
            return option
    return options[0]


def is_pricing_id_for_region(region: str, pricing_id: str) -> bool:
    return any(option.id == pricing_id for option in PRICING.get(region, ()))


def currency_symbol(region: str) -> str:
    options = PRICING.get(region)
    if not options:
        return DEFAULT_SYMBOL
    return options[0].currency_symbol
