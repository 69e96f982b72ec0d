"""
Output Builder

Constructs the final API response from a scenario context.
"""

from decimal import Decimal

from .models import ScenarioContext, ScenarioResult
from .money import format_money, format_pct, to_money, to_number
from .quote import total_fee_pct

_PCT = Decimal("0.01")


class OutputBuilder:
    """Builds the final output response."""

    def build(self, ctx: ScenarioContext) -> ScenarioResult:
        """Construct the complete scenario result from the processing context."""
        return ScenarioResult(
            scenario_summary=self._build_scenario_summary(ctx),
            quote=self._build_quote(ctx),
            fee_breakdown=self._build_fee_breakdown(ctx),
            normalized_state=ctx.state.to_dict(),
            break_even=self._build_break_even(ctx),
            sensitivity=self._build_sensitivity(ctx),
            volume=self._build_volume(ctx),
            margin=self._build_margin(ctx),
        )

    def _build_scenario_summary(self, ctx: ScenarioContext) -> dict:
        """Build scenario summary section."""
        s = ctx.state
        meta = ctx.quote.meta
        return {
            "provider_id": s.provider_id,
            "provider_label": meta.get("provider_label"),
            "product_id": s.product_id,
            "product_label": meta.get("product_label"),
            "custom_provider_label": s.custom_provider_label or None,
            "region": s.region,
            "currency_symbol": ctx.quote.symbol,
            "mode": s.mode,
            "pricing_tier_label": meta.get("pricing_tier_label"),
            "rate_label": meta.get("rate_label"),
            "overrides_on": meta.get("overrides_on", False),
        }

    def _build_quote(self, ctx: ScenarioContext) -> dict:
        """Per-transaction quote with the insight flags."""
        q = ctx.quote
        meta = q.meta
        out = q.to_dict()
        out.update({
            "provider_fee": to_money(q.provider_fee),
            "fx_fee": to_money(q.fx_fee),
            "platform_fee": to_money(q.platform_fee),
            "total_fees": to_money(q.total_fees) if q.denom_ok else None,
            "effective_fee_pct": to_number(total_fee_pct(q)) if q.denom_ok else None,
            "provider_percent": to_number(meta.get("provider_percent")),
            "provider_fixed": to_number(meta.get("provider_fixed")),
            "total_pct": to_number(meta.get("total_pct")),
            "fx_dominates": bool(meta.get("fx_dominates")),
            "near_limit": bool(meta.get("near_limit")),
            "raw_gross": to_number(meta.get("raw_gross")),
        })
        return out

    def _build_fee_breakdown(self, ctx: ScenarioContext) -> dict:
        """Build the breakdown with value and formula description for each line."""
        s = ctx.state
        q = ctx.quote
        meta = q.meta
        sym = q.symbol

        if not q.denom_ok:
            reason = (
                f"Fees total {format_pct(meta.get('total_pct'))} of the charge; "
                "no customer charge can cover them"
            )
            return {
                "status": "invalid",
                "customer_charge": {"value": None, "description": reason},
                "net_before_vat": {"value": None, "description": reason},
            }

        gross = q.gross
        pct = meta["provider_percent"]
        fixed = meta["provider_fixed"]
        fx_pct = meta["fx_percent"]
        plat_pct = meta["platform_fee_percent"]

        if s.mode == "reverse":
            charge_desc = (
                f"Solved from target net {format_money(sym, s.target_net)}, "
                f"rounded to {s.rounding_step} = {format_money(sym, gross)}"
            )
        else:
            charge_desc = f"Price {format_money(sym, s.amount)} rounded to {s.rounding_step} = {format_money(sym, gross)}"
        if s.psych_price_on:
            charge_desc += " (psychological ending)"

        if meta.get("platform_fee_base") == "after_provider_fee":
            platform_desc = (
                f"{format_pct(plat_pct)} × ({format_money(sym, gross)} - {format_money(sym, q.provider_fee)}) "
                f"= {format_money(sym, q.platform_fee)}"
            )
        else:
            platform_desc = f"{format_pct(plat_pct)} × {format_money(sym, gross)} = {format_money(sym, q.platform_fee)}"

        vat_desc = (
            f"{format_money(sym, gross)} × {format_pct(q.vat_percent)} / (100% + {format_pct(q.vat_percent)}) "
            f"= {format_money(sym, q.vat_amount)} (VAT included in the charge)"
            if q.vat_percent > 0
            else "No VAT"
        )

        return {
            "status": "ok",
            "customer_charge": {
                "value": to_money(gross),
                "description": charge_desc,
            },
            "provider_fee": {
                "value": to_money(q.provider_fee),
                "description": (
                    f"{format_pct(pct)} × {format_money(sym, gross)} + {format_money(sym, fixed)} "
                    f"= {format_money(sym, q.provider_fee)} ({meta.get('rate_label')})"
                ),
            },
            "fx_fee": {
                "value": to_money(q.fx_fee),
                "description": (
                    f"{format_pct(fx_pct)} × {format_money(sym, gross)} = {format_money(sym, q.fx_fee)}"
                    if fx_pct > 0
                    else "No FX surcharge"
                ),
            },
            "platform_fee": {
                "value": to_money(q.platform_fee),
                "description": platform_desc if plat_pct > 0 else "No platform fee",
            },
            "net_before_vat": {
                "value": to_money(q.net_before_vat),
                "description": (
                    f"{format_money(sym, gross)} - {format_money(sym, q.provider_fee)} - "
                    f"{format_money(sym, q.fx_fee)} - {format_money(sym, q.platform_fee)} "
                    f"= {format_money(sym, q.net_before_vat)}"
                ),
            },
            "vat_amount": {
                "value": to_money(q.vat_amount),
                "description": vat_desc,
            },
            "net_after_vat": {
                "value": to_money(q.net_after_vat),
                "description": (
                    f"{format_money(sym, q.net_before_vat)} - {format_money(sym, q.vat_amount)} "
                    f"= {format_money(sym, q.net_after_vat)}"
                ),
            },
        }

    def _build_break_even(self, ctx: ScenarioContext) -> dict | None:
        be = ctx.break_even
        if be is None:
            return None
        return {
            "target_net": to_money(be.target_net),
            "required_charge": to_money(be.required_charge),
            "denom_ok": be.denom_ok,
        }

    def _build_sensitivity(self, ctx: ScenarioContext) -> dict | None:
        sens = ctx.sensitivity
        if sens is None:
            return None
        return {
            "delta_pct": to_number(sens.delta_pct),
            "target": sens.target,
            "base_net": to_money(sens.base_net),
            "net_up": to_money(sens.net_up),
            "net_down": to_money(sens.net_down),
            "provider_net_up": to_money(sens.provider_net_up),
            "provider_net_down": to_money(sens.provider_net_down),
        }

    def _build_volume(self, ctx: ScenarioContext) -> dict | None:
        vol = ctx.volume
        if vol is None:
            return None
        return {
            "symbol": vol.symbol,
            "tx_per_month": vol.tx_per_month,
            "refund_rate_pct": to_number(vol.refund_rate_pct),
            "provider_percent": to_number(vol.provider_percent),
            "provider_fixed": to_money(vol.provider_fixed),
            "monthly_gross": to_money(vol.monthly_gross),
            "monthly_provider_fee": to_money(vol.monthly_provider_fee),
            "monthly_fx_fee": to_money(vol.monthly_fx_fee),
            "monthly_platform_fee": to_money(vol.monthly_platform_fee),
            "monthly_net_before_refunds": to_money(vol.monthly_net_before_refunds),
            "monthly_refund_loss": to_money(vol.monthly_refund_loss),
            "monthly_net_after_refunds": to_money(vol.monthly_net_after_refunds),
            "vat_percent": to_number(vol.vat_percent),
            "monthly_vat": to_money(vol.monthly_vat),
            "monthly_gross_ex_vat": to_money(vol.monthly_gross_ex_vat),
            "monthly_net_after_vat": to_money(vol.monthly_net_after_vat),
            "monthly_net_after_refunds_after_vat": to_money(vol.monthly_net_after_refunds_after_vat),
            "blended_ticket": to_money(vol.blended_ticket),
            "blended_fx_pct": to_number(vol.blended_fx_pct),
            "tiers_count": vol.tiers_count,
        }

    def _build_margin(self, ctx: ScenarioContext) -> dict | None:
        m = ctx.margin
        if m is None:
            return None
        return {
            "actual_pct": to_number(m.actual_pct.quantize(_PCT)),
            "target_pct": to_number(m.target_pct),
            "delta": to_number(m.delta.quantize(_PCT)),
            "ok": m.ok,
            "badge": m.badge,
        }
