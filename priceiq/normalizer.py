"""
State Normalizer

Repairs any configuration into a canonical, always-valid CalcState.
Normalization is total (never raises for a dict or CalcState input) and
idempotent: normalizing an already normalized state returns an equal state.
"""

import re
from decimal import Decimal

from .models import (
    MODES,
    PLATFORM_FEE_BASE_ALIASES,
    PLATFORM_FEE_BASES,
    ROUNDING_STEPS,
    SENSITIVITY_TARGET_ALIASES,
    SENSITIVITY_TARGETS,
    CalcState,
    VolumeTier,
)
from .money import ZERO, clamp_non_neg, clamp_pct, to_decimal
from .pricing import DEFAULT_REGION, REGIONS, is_pricing_id_for_region
from .providers import DEFAULT_PROVIDER_ID, get_provider, is_known_provider

CUSTOM_LABEL_MAX_LENGTH = 32
DEFAULT_TIER_PRICE = Decimal("10")

_WHITESPACE = re.compile(r"\s+")


def normalize_label(value) -> str:
    """Collapse whitespace and cap the custom provider label length."""
    if not isinstance(value, str):
        return ""
    label = _WHITESPACE.sub(" ", value).strip()
    return label[:CUSTOM_LABEL_MAX_LENGTH].strip()


def _as_enum(value, allowed, default, aliases=None):
    if aliases and value in aliases:
        value = aliases[value]
    return value if value in allowed else default


def _as_rounding_step(value) -> Decimal:
    step = to_decimal(value)
    for allowed in ROUNDING_STEPS:
        if step.is_finite() and step == allowed:
            return allowed
    return ROUNDING_STEPS[0]


def _optional_pct(value) -> Decimal | None:
    if value is None:
        return None
    v = to_decimal(value)
    if not v.is_finite():
        return None
    return clamp_pct(v)


def _optional_money(value) -> Decimal | None:
    if value is None:
        return None
    v = to_decimal(value)
    if not v.is_finite():
        return None
    return v


class StateNormalizer:
    """Clamps and defaults every field of a CalcState."""

    def normalize(self, state) -> CalcState:
        """
        Normalize a CalcState or an API payload dict.

        Args:
            state: CalcState, dict, or None (None gives the default state)

        Returns:
            A new CalcState; the input is never mutated
        """
        if state is None:
            state = CalcState()
        elif isinstance(state, dict):
            state = CalcState.from_dict(state)

        provider_id, product_id = self.normalize_provider_product(state.provider_id, state.product_id)
        region = _as_enum(state.region, REGIONS, DEFAULT_REGION)

        amount = clamp_non_neg(state.amount)
        fx_percent = clamp_pct(state.fx_percent)

        pricing_id = state.pricing_id or ""
        if provider_id != "stripe" or not is_pricing_id_for_region(region, pricing_id):
            pricing_id = ""

        label = normalize_label(state.custom_provider_label)

        return CalcState(
            provider_id=provider_id,
            product_id=product_id,
            custom_provider_label=label if provider_id == "custom" else "",
            region=region,
            pricing_id=pricing_id,
            mode=_as_enum(state.mode, MODES, "forward"),
            amount=amount,
            target_net=clamp_non_neg(state.target_net),
            fx_percent=fx_percent,
            platform_fee_percent=clamp_pct(state.platform_fee_percent),
            platform_fee_base=_as_enum(
                state.platform_fee_base, PLATFORM_FEE_BASES, "gross", PLATFORM_FEE_BASE_ALIASES
            ),
            margin_target_pct=clamp_pct(state.margin_target_pct),
            margin_on=bool(state.margin_on),
            rounding_step=_as_rounding_step(state.rounding_step),
            psych_price_on=bool(state.psych_price_on),
            vat_percent=clamp_pct(state.vat_percent),
            break_even_on=bool(state.break_even_on),
            break_even_target_net=clamp_non_neg(state.break_even_target_net),
            sensitivity_on=bool(state.sensitivity_on),
            sensitivity_delta_pct=clamp_pct(state.sensitivity_delta_pct),
            sensitivity_target=_as_enum(
                state.sensitivity_target, SENSITIVITY_TARGETS, "all", SENSITIVITY_TARGET_ALIASES
            ),
            custom_provider_fee_percent=_optional_pct(state.custom_provider_fee_percent),
            custom_fixed_fee=_optional_money(state.custom_fixed_fee),
            volume_on=bool(state.volume_on),
            volume_tx_per_month=clamp_non_neg(state.volume_tx_per_month),
            volume_refund_rate_pct=clamp_pct(state.volume_refund_rate_pct),
            volume_tiers=self.normalize_tiers(state.volume_tiers, amount, fx_percent),
        )

    def normalize_provider_product(self, provider_id, product_id) -> tuple[str, str]:
        """Unknown provider -> default provider; unknown product -> the provider's first product."""
        if not isinstance(provider_id, str) or not is_known_provider(provider_id):
            provider_id = DEFAULT_PROVIDER_ID
        provider = get_provider(provider_id)
        if not isinstance(product_id, str) or not provider.has_product(product_id):
            product_id = provider.default_product_id
        return provider_id, product_id

    def normalize_tiers(self, tiers, amount: Decimal, fx_percent: Decimal) -> list[VolumeTier]:
        """
        Clamp each tier; synthesize a single 100% tier when there are none.

        Entries that are neither a dict nor a VolumeTier are skipped.
        """
        parsed = []
        for tier in tiers if isinstance(tiers, (list, tuple)) else ():
            if isinstance(tier, dict):
                tier = VolumeTier.from_dict(tier)
            if isinstance(tier, VolumeTier):
                parsed.append(tier)

        if not parsed:
            return [
                VolumeTier(
                    id="t1",
                    share_pct=Decimal("100"),
                    price=amount if amount > ZERO else DEFAULT_TIER_PRICE,
                    fx_percent=fx_percent,
                )
            ]

        normalized = []
        for idx, tier in enumerate(parsed):
            normalized.append(
                VolumeTier(
                    id=str(tier.id or "").strip() or f"t{idx + 1}",
                    share_pct=clamp_pct(tier.share_pct),
                    price=clamp_non_neg(tier.price),
                    fx_percent=clamp_pct(tier.fx_percent),
                    label=tier.label if isinstance(tier.label, str) else None,
                )
            )
        return normalized


_normalizer = StateNormalizer()


def normalize_state(state) -> CalcState:
    """Normalize a CalcState or payload dict into canonical form."""
    return _normalizer.normalize(state)
