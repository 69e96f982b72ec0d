"""
Quote Engine

Runs one provider quote for a normalized state and post-processes it:
customer-charge rounding and psychological pricing, the reverse-mode
round-then-requote step, 2dp money rounding and the quote insights.
"""

from dataclasses import replace
from decimal import Decimal

from .fees import effective_denominator
from .models import CalcState, FeeLine, QuoteInput, QuoteResult
from .money import HUNDRED, NAN, ZERO, apply_psych_price, round_money, round_to_step, to_decimal
from .normalizer import normalize_state
from .pricing import find_pricing_option
from .providers import get_provider

# Percentage fees leaving less than this share of the charge are flagged
NEAR_LIMIT_DENOMINATOR = Decimal("0.2")


def customer_charge(value, step, psych_price_on: bool) -> Decimal:
    """Round a charge to the step and optionally apply the psychological ending."""
    charge = to_decimal(value)
    if not charge.is_finite():
        return charge
    charge = round_to_step(charge, step)
    if psych_price_on:
        charge = apply_psych_price(charge, step)
    return charge


class QuoteEngine:
    """
    Dispatches a state to its provider fee model.

    Forward mode quotes the rounded `amount`. Reverse mode solves the raw
    charge, rounds it to the step, then re-quotes forward at that charge so
    the breakdown matches what the customer actually pays.
    """

    def quote(self, state, provider_id: str | None = None) -> QuoteResult:
        """
        Quote a state.

        Args:
            state: CalcState or payload dict (normalized here)
            provider_id: Optional provider to quote instead of the state's own

        Returns:
            QuoteResult with money rounded to 2dp; NaN and denom_ok=False when
            the configuration is unsolvable
        """
        if state is None:
            state = CalcState()
        elif isinstance(state, dict):
            state = CalcState.from_dict(state)
        if provider_id is not None:
            state = replace(state, provider_id=provider_id)
        s = normalize_state(state)

        provider = get_provider(s.provider_id)
        quote_input = QuoteInput.from_state(s)

        if s.mode == "reverse":
            base = provider.quote(quote_input)
            raw_gross = base.gross
            charge = customer_charge(raw_gross, s.rounding_step, s.psych_price_on)
            final = base
            if charge.is_finite():
                final = provider.quote(replace(quote_input, mode="forward", amount=charge))
            denom_ok = final.denom_ok and base.denom_ok and raw_gross.is_finite()
        else:
            raw_gross = s.amount
            charge = customer_charge(s.amount, s.rounding_step, s.psych_price_on)
            final = provider.quote(replace(quote_input, amount=charge))
            denom_ok = final.denom_ok and charge.is_finite()

        meta = dict(final.meta)
        meta.update(self._insights(s, provider, quote_input, final, raw_gross))

        if not denom_ok:
            return QuoteResult(
                symbol=final.symbol,
                gross=NAN,
                fees=[FeeLine(line.key, line.label, ZERO) for line in final.fees],
                net_before_vat=NAN,
                vat_percent=final.vat_percent,
                vat_amount=ZERO,
                net_after_vat=NAN,
                denom_ok=False,
                meta=meta,
            )

        return QuoteResult(
            symbol=final.symbol,
            gross=round_money(charge),
            fees=[FeeLine(line.key, line.label, round_money(line.amount)) for line in final.fees],
            net_before_vat=round_money(final.net_before_vat),
            vat_percent=final.vat_percent,
            vat_amount=round_money(final.vat_amount),
            net_after_vat=round_money(final.net_after_vat),
            denom_ok=True,
            meta=meta,
        )

    def _insights(self, s: CalcState, provider, quote_input: QuoteInput, final: QuoteResult, raw_gross) -> dict:
        rates = provider.rates_for(quote_input)
        denom = effective_denominator(rates)
        product = provider.get_product(s.product_id)
        product_label = product.label if product else ""

        if s.provider_id == "stripe":
            tier_label = find_pricing_option(s.region, s.pricing_id).label
        else:
            tier_label = product_label or provider.label

        fx_fee = final.fx_fee
        return {
            "total_pct": rates.provider_percent + rates.fx_percent + rates.platform_fee_percent,
            "fx_dominates": (
                rates.fx_percent > 0 and fx_fee > final.provider_fee and fx_fee > final.platform_fee
            ),
            "denominator": denom,
            "near_limit": ZERO < denom < NEAR_LIMIT_DENOMINATOR,
            "pricing_tier_label": tier_label,
            "provider_label": provider.label,
            "product_label": product_label,
            "raw_gross": raw_gross,
            "rounding_step": s.rounding_step,
            "psych_price_on": s.psych_price_on,
        }


_engine = QuoteEngine()


def quote(provider_id: str, state) -> QuoteResult:
    """Quote `state` with the fee model registered under `provider_id`."""
    return _engine.quote(state, provider_id=provider_id)


def total_fee_pct(result: QuoteResult) -> Decimal:
    """Fees as a share of the customer charge (0 when there is no charge)."""
    if not result.denom_ok or result.gross <= 0:
        return ZERO
    return result.total_fees / result.gross * HUNDRED
