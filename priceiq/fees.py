"""
Fee Algebra

Forward fee decomposition (gross -> fees -> net) and its closed-form inverse
(target net -> required gross). Every provider fee model, the sensitivity
calculator and the volume projector share these formulas.

All rates are expressed in percent (1.5 means 1.5%).
"""

from dataclasses import dataclass
from decimal import Decimal

from .money import HUNDRED, NAN, ZERO, to_decimal

ONE = Decimal("1")


@dataclass(frozen=True)
class FeeRates:
    """The resolved rates a single quote is computed with."""

    provider_percent: Decimal
    provider_fixed: Decimal
    fx_percent: Decimal = ZERO
    platform_fee_percent: Decimal = ZERO
    platform_fee_base: str = "gross"
    vat_percent: Decimal = ZERO

    @property
    def after_provider_fee(self) -> bool:
        return self.platform_fee_base == "afterStripe"


@dataclass(frozen=True)
class FeeBreakdown:
    """Fee components for one gross amount. All NaN when gross is invalid."""

    gross: Decimal
    provider_fee: Decimal
    fx_fee: Decimal
    platform_fee: Decimal
    net_before_vat: Decimal
    vat_amount: Decimal
    net_after_vat: Decimal

    @property
    def is_valid(self) -> bool:
        return self.gross.is_finite()


def vat_from_gross(gross: Decimal, vat_percent: Decimal) -> Decimal:
    """
    Extract VAT from a VAT-inclusive amount: gross * vat / (100 + vat).

    A gross of 121 at 21% holds 21 of VAT.
    """
    if not gross.is_finite() or vat_percent <= 0:
        return ZERO
    return gross * vat_percent / (HUNDRED + vat_percent)


def effective_denominator(rates: FeeRates) -> Decimal:
    """
    Share of gross left after the percentage fees.

    gross base:        1 - p - fx - plat
    after provider:    1 - p - fx - plat + p*plat
    """
    p = rates.provider_percent / HUNDRED
    fxp = rates.fx_percent / HUNDRED
    plat = rates.platform_fee_percent / HUNDRED
    denom = ONE - p - fxp - plat
    if rates.after_provider_fee:
        denom += p * plat
    return denom


def gross_from_net(target_net, rates: FeeRates) -> Decimal:
    """
    Solve the customer charge that yields `target_net` before VAT.

    gross base:      gross = (N + fixed) / denom
    after provider:  gross = (N + fixed * (1 - plat)) / denom

    Returns NaN when the target is negative/non-finite or when the
    percentage fees consume the whole charge (denom <= 0).
    """
    target = to_decimal(target_net)
    if not target.is_finite() or target < 0:
        return NAN

    denom = effective_denominator(rates)
    if denom <= 0:
        return NAN

    fixed = rates.provider_fixed
    if rates.after_provider_fee:
        plat = rates.platform_fee_percent / HUNDRED
        return (target + fixed * (ONE - plat)) / denom
    return (target + fixed) / denom


class FeeCalculator:
    """Decomposes a customer charge into provider, FX and platform fees."""

    def calculate(self, gross, rates: FeeRates) -> FeeBreakdown:
        """Calculate all fee components for `gross` (unrounded)."""
        gross = to_decimal(gross)
        if not gross.is_finite() or gross < 0:
            return FeeBreakdown(
                gross=NAN,
                provider_fee=NAN,
                fx_fee=NAN,
                platform_fee=NAN,
                net_before_vat=NAN,
                vat_amount=ZERO,
                net_after_vat=NAN,
            )

        provider_fee = self._calculate_provider(gross, rates)
        fx_fee = gross * rates.fx_percent / HUNDRED
        platform_fee = self._calculate_platform(gross, provider_fee, rates)

        net_before_vat = gross - provider_fee - fx_fee - platform_fee
        vat_amount = vat_from_gross(gross, rates.vat_percent)

        return FeeBreakdown(
            gross=gross,
            provider_fee=provider_fee,
            fx_fee=fx_fee,
            platform_fee=platform_fee,
            net_before_vat=net_before_vat,
            vat_amount=vat_amount,
            net_after_vat=net_before_vat - vat_amount,
        )

    def _calculate_provider(self, gross: Decimal, rates: FeeRates) -> Decimal:
        """Provider fee: percent of gross plus the fixed per-transaction fee."""
        return gross * rates.provider_percent / HUNDRED + rates.provider_fixed

    def _calculate_platform(self, gross: Decimal, provider_fee: Decimal, rates: FeeRates) -> Decimal:
        """Platform fee from gross, or from what is left after the provider fee."""
        base = gross - provider_fee if rates.after_provider_fee else gross
        return base * rates.platform_fee_percent / HUNDRED
