"""
Volume Projector

Monthly projection over a weighted basket of transaction tiers.
"""

from decimal import Decimal

from ..fees import vat_from_gross
from ..models import CalcState, FeeOverrides, QuoteResult, VolumeProjection
from ..money import HUNDRED, ZERO, clamp_non_neg, clamp_pct, quantize_to, round_money
from ..normalizer import normalize_state
from ..quote import QuoteEngine


class VolumeProjector:
    """Re-runs the per-transaction fee model across the basket tiers."""

    def __init__(self, engine: QuoteEngine | None = None):
        self.engine = engine or QuoteEngine()

    def calculate(
        self,
        state,
        per_txn: QuoteResult | None = None,
        overrides: FeeOverrides | None = None,
    ) -> VolumeProjection | None:
        """
        Project monthly totals.

        The provider model is resolved once for all tiers:
        - percent: override, else inferred as provider_fee / gross * 100 from
          the single-transaction quote
        - fixed: override (floored at 0), else 0

        Per tier:
            tier_tx = tx_per_month * share / 100
            provider fee/tx = price * percent / 100 + fixed
            fx fee/tx = price * tier fx / 100
            platform fee/tx = base * platform / 100, base = price (gross) or
                              max(0, price - provider fee/tx) (after provider fee)

        Refunds reverse the monthly net proportionally:
            refund_loss = net * refund_rate / 100

        Args:
            state: CalcState or payload dict
            per_txn: Quote for the single transaction (quoted here when omitted)
            overrides: Provider fee overrides (taken from the state when omitted)

        Returns:
            VolumeProjection, or None when volume is off, tx_per_month <= 0
            or no tier has a positive share
        """
        if isinstance(state, dict):
            state = CalcState.from_dict(state)
        s = normalize_state(state)

        tx_per_month = s.volume_tx_per_month
        tiers = [t for t in s.volume_tiers if t.share_pct > 0]
        if not s.volume_on or tx_per_month <= 0 or not tiers:
            return None

        if per_txn is None:
            per_txn = self.engine.quote(s)
        if overrides is None:
            overrides = FeeOverrides.from_state(s)

        provider_pct, provider_fixed = self._resolve_provider_model(per_txn, overrides)
        platform_pct = s.platform_fee_percent
        after_provider_fee = s.platform_fee_base == "afterStripe"

        gross_monthly = ZERO
        provider_monthly = ZERO
        fx_monthly = ZERO
        platform_monthly = ZERO

        for tier in tiers:
            tier_tx = tx_per_month * tier.share_pct / HUNDRED
            price = tier.price

            provider_per_tx = price * provider_pct / HUNDRED + provider_fixed
            fx_per_tx = price * tier.fx_percent / HUNDRED
            platform_base = max(ZERO, price - provider_per_tx) if after_provider_fee else price
            platform_per_tx = platform_base * platform_pct / HUNDRED

            gross_monthly += tier_tx * price
            provider_monthly += tier_tx * provider_per_tx
            fx_monthly += tier_tx * fx_per_tx
            platform_monthly += tier_tx * platform_per_tx

        net_monthly = gross_monthly - provider_monthly - fx_monthly - platform_monthly
        refund_loss = net_monthly * s.volume_refund_rate_pct / HUNDRED
        net_after_refunds = net_monthly - refund_loss

        vat_percent = s.vat_percent
        vat_monthly = vat_from_gross(gross_monthly, vat_percent) if gross_monthly > 0 else ZERO

        total_share = sum((t.share_pct for t in tiers), ZERO)
        blended_ticket = sum((t.share_pct * t.price for t in tiers), ZERO) / total_share
        blended_fx = sum((t.share_pct * t.fx_percent for t in tiers), ZERO) / total_share

        return VolumeProjection(
            symbol=per_txn.symbol,
            tx_per_month=int(quantize_to(tx_per_month, Decimal("1"))),
            refund_rate_pct=s.volume_refund_rate_pct,
            provider_percent=provider_pct,
            provider_fixed=provider_fixed,
            monthly_gross=round_money(gross_monthly),
            monthly_provider_fee=round_money(provider_monthly),
            monthly_fx_fee=round_money(fx_monthly),
            monthly_platform_fee=round_money(platform_monthly),
            monthly_net_before_refunds=round_money(net_monthly),
            monthly_refund_loss=round_money(refund_loss),
            monthly_net_after_refunds=round_money(net_after_refunds),
            vat_percent=vat_percent,
            monthly_vat=round_money(vat_monthly),
            monthly_gross_ex_vat=round_money(gross_monthly - vat_monthly),
            monthly_net_after_vat=round_money(net_monthly - vat_monthly),
            monthly_net_after_refunds_after_vat=round_money(net_after_refunds - vat_monthly),
            blended_ticket=round_money(blended_ticket),
            blended_fx_pct=blended_fx,
            tiers_count=len(tiers),
        )

    def _resolve_provider_model(self, per_txn: QuoteResult, overrides: FeeOverrides) -> tuple[Decimal, Decimal]:
        # Without an override the percent is backed out of the single-transaction fee,
        # which folds that transaction's fixed fee into the percentage.
        gross = per_txn.gross
        inferred_pct = ZERO
        if per_txn.denom_ok and gross.is_finite() and gross > 0:
            inferred_pct = clamp_pct(per_txn.provider_fee / gross * HUNDRED)

        percent = clamp_pct(overrides.percent) if overrides.percent is not None else inferred_pct
        fixed = clamp_non_neg(overrides.fixed) if overrides.fixed is not None else ZERO
        return percent, fixed


_projector = VolumeProjector()


def compute_volume_projection(state, per_txn: QuoteResult | None = None, overrides: FeeOverrides | None = None):
    return _projector.calculate(state, per_txn, overrides)
