"""
Provider Fee Model Base

Every payment provider exposes the same `quote` operation. Concrete models
only decide which (percent, fixed) rate applies to a quote; the algebra is
shared.
"""

from dataclasses import dataclass
from decimal import Decimal

from ..fees import FeeCalculator, FeeRates, gross_from_net
from ..models import FeeLine, QuoteInput, QuoteResult
from ..money import NAN, ZERO, clamp_money_like, clamp_pct, to_decimal
from ..pricing import currency_symbol


@dataclass(frozen=True)
class ProviderProduct:
    """A provider-specific fee model variant (e.g. cards vs platform)."""

    id: str
    label: str
    description: str = ""
    kind: str = "other"  # 'cards', 'connect', 'wallet' or 'other'

    def to_dict(self) -> dict:
        return {"id": self.id, "label": self.label, "description": self.description, "kind": self.kind}


@dataclass(frozen=True)
class ProviderRate:
    """A built-in percent + fixed rate."""

    percent: Decimal
    fixed: Decimal
    label: str


class FeeModel:
    """
    Base fee model.

    Subclasses set `provider_id`, `label`, `fee_label` and `products`, and
    implement `resolve_rate`.
    """

    provider_id = ""
    label = ""
    fee_label = "Provider fee"
    products: tuple[ProviderProduct, ...] = ()

    def __init__(self):
        self.fee_calculator = FeeCalculator()

    # -------------------------------------------------------------------------
    # Products
    # -------------------------------------------------------------------------

    @property
    def default_product_id(self) -> str:
        return self.products[0].id if self.products else "cards"

    def has_product(self, product_id: str) -> bool:
        return any(p.id == product_id for p in self.products)

    def get_product(self, product_id: str) -> ProviderProduct | None:
        for product in self.products:
            if product.id == product_id:
                return product
        return self.products[0] if self.products else None

    def to_dict(self) -> dict:
        return {
            "id": self.provider_id,
            "label": self.label,
            "fee_label": self.fee_label,
            "default_product_id": self.default_product_id,
            "products": [p.to_dict() for p in self.products],
        }

    # -------------------------------------------------------------------------
    # Rates
    # -------------------------------------------------------------------------

    def resolve_rate(self, quote_input: QuoteInput) -> ProviderRate:
        raise NotImplementedError

    def rates_for(self, quote_input: QuoteInput, rate: ProviderRate | None = None) -> FeeRates:
        """
        Resolve the rates a quote is computed with.

        Priority order per component:
        1. Override (custom_provider_fee_percent / custom_fixed_fee)
        2. The provider's built-in rate

        `rate` is the already resolved built-in rate, looked up when omitted.
        """
        if rate is None:
            rate = self.resolve_rate(quote_input)

        override_pct = quote_input.custom_provider_fee_percent
        override_fixed = quote_input.custom_fixed_fee

        return FeeRates(
            provider_percent=clamp_pct(override_pct if override_pct is not None else rate.percent),
            provider_fixed=clamp_money_like(override_fixed if override_fixed is not None else rate.fixed),
            fx_percent=clamp_pct(quote_input.fx_percent),
            platform_fee_percent=clamp_pct(quote_input.platform_fee_percent),
            platform_fee_base=quote_input.platform_fee_base,
            vat_percent=clamp_pct(quote_input.vat_percent),
        )

    # -------------------------------------------------------------------------
    # Quote
    # -------------------------------------------------------------------------

    def quote(self, quote_input: QuoteInput) -> QuoteResult:
        """
        Compute one quote.

        Forward mode uses `amount` as the customer charge. Reverse mode solves
        the charge from `target_net`. Amounts are not rounded here.
        """
        rate = self.resolve_rate(quote_input)
        rates = self.rates_for(quote_input, rate)

        if quote_input.mode == "reverse":
            raw_gross = gross_from_net(quote_input.target_net, rates)
        else:
            raw_gross = to_decimal(quote_input.amount)

        breakdown = self.fee_calculator.calculate(raw_gross, rates)
        denom_ok = breakdown.is_valid

        return QuoteResult(
            symbol=currency_symbol(quote_input.region),
            gross=breakdown.gross,
            fees=[
                FeeLine("provider_fee", self.fee_label, _display(breakdown.provider_fee)),
                FeeLine("fx_fee", "FX fee", _display(breakdown.fx_fee)),
                FeeLine("platform_fee", "Platform fee", _display(breakdown.platform_fee)),
            ],
            net_before_vat=breakdown.net_before_vat if denom_ok else NAN,
            vat_percent=rates.vat_percent,
            vat_amount=breakdown.vat_amount,
            net_after_vat=breakdown.net_after_vat if denom_ok else NAN,
            denom_ok=denom_ok,
            meta=self._build_meta(quote_input, rate, rates),
        )

    def _build_meta(self, quote_input: QuoteInput, rate: ProviderRate, rates: FeeRates) -> dict:
        return {
            "provider": self.provider_id,
            "product_id": quote_input.product_id or self.default_product_id,
            "rate_label": rate.label,
            "provider_percent": rates.provider_percent,
            "provider_fixed": rates.provider_fixed,
            "provider_percent_default": rate.percent,
            "provider_fixed_default": rate.fixed,
            "fx_percent": rates.fx_percent,
            "platform_fee_percent": rates.platform_fee_percent,
            "platform_fee_base": "after_provider_fee" if rates.after_provider_fee else "gross",
            "overrides_on": (
                quote_input.custom_provider_fee_percent is not None or quote_input.custom_fixed_fee is not None
            ),
        }


class TableFeeModel(FeeModel):
    """
    Fee model backed by a per-region, per-product rate table.

    These tables are modelling defaults, not contract rates.
    """

    rates: dict[str, dict[str, ProviderRate]] = {}
    fallback_region = "UK"
    fallback_product_id = "cards"

    def resolve_rate(self, quote_input: QuoteInput) -> ProviderRate:
        by_region = self.rates.get(quote_input.region) or self.rates[self.fallback_region]
        product_id = quote_input.product_id or self.fallback_product_id
        return by_region.get(product_id) or by_region[self.fallback_product_id]


def _display(amount: Decimal) -> Decimal:
    """Fee lines show 0 when the quote is invalid; `denom_ok` carries the flag."""
    return amount if amount.is_finite() else ZERO
