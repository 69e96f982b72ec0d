"""
Preset Catalog

Built-in scenario presets: four for card processing and four for
platform/marketplace (connect) models. Region is never part of a preset.
Every preset clears the fee overrides so they do not carry over between
presets.
"""

from dataclasses import dataclass, field, replace
from decimal import Decimal

from .models import CalcState
from .normalizer import normalize_state

PRESET_TAGS = ("cards", "connect")

REGION_CHOICES = (
    {"id": "UK", "name": "UK"},
    {"id": "EU", "name": "EU"},
    {"id": "US", "name": "US"},
)


@dataclass(frozen=True)
class Preset:
    """A named partial state."""

    id: str
    tag: str  # 'cards' or 'connect'
    name: str
    description: str = ""
    state: dict = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "tag": self.tag,
            "name": self.name,
            "description": self.description,
            "state": {k: float(v) if isinstance(v, Decimal) else v for k, v in self.state.items()},
        }


def _preset_state(
    fx_percent="0",
    platform_fee_percent="0",
    platform_fee_base="gross",
    psych_price_on=False,
    mode="forward",
) -> dict:
    return {
        "fx_percent": Decimal(fx_percent),
        "platform_fee_percent": Decimal(platform_fee_percent),
        "platform_fee_base": platform_fee_base,
        "rounding_step": Decimal("0.01"),
        "psych_price_on": psych_price_on,
        "mode": mode,
        "margin_on": False,
        "margin_target_pct": Decimal("0"),
        "custom_provider_fee_percent": None,
        "custom_fixed_fee": None,
    }


BUILTIN_PRESETS = (
    # Cards
    Preset(
        "cards_standard",
        "cards",
        "Standard ecommerce (no FX, no platform)",
        "Simple baseline. No FX and no platform fee.",
        _preset_state(),
    ),
    Preset(
        "cards_cross_border_fx",
        "cards",
        "Cross-border (2% FX, no platform)",
        "Common international customer mix. FX uplift on provider conversion.",
        _preset_state(fx_percent="2"),
    ),
    Preset(
        "cards_high_ticket_psych",
        "cards",
        "Popular pricing (0.01 + Psych .99)",
        "Presentation preset: 0.01 rounding + psych (.99). No FX/platform assumptions.",
        _preset_state(psych_price_on=True),
    ),
    Preset(
        "cards_reverse_clean",
        "cards",
        "Reverse mode (target net → required charge)",
        "Reverse mode with clean baseline (no FX, no platform).",
        _preset_state(mode="reverse"),
    ),
    # Connect
    Preset(
        "connect_typical_take_rate",
        "connect",
        "Typical platform (10% take rate, gross base, no FX)",
        "Common marketplace take rate. Platform fee calculated from customer charge.",
        _preset_state(platform_fee_percent="10"),
    ),
    Preset(
        "connect_after_provider_base",
        "connect",
        "Platform after provider (10% after provider fee)",
        "Platform commission calculated after the provider fee is removed.",
        _preset_state(platform_fee_percent="10", platform_fee_base="afterStripe"),
    ),
    Preset(
        "connect_marketplace_fx",
        "connect",
        "Marketplace + cross-border (10% platform + 2% FX)",
        "Common cross-border marketplace stack.",
        _preset_state(fx_percent="2", platform_fee_percent="10"),
    ),
    Preset(
        "connect_low_take_rate",
        "connect",
        "Low take rate (5% platform, no FX)",
        "Lower platform commission baseline (e.g. competitive marketplace).",
        _preset_state(platform_fee_percent="5"),
    ),
)

_PRESETS_BY_ID = {preset.id: preset for preset in BUILTIN_PRESETS}


def get_preset(preset_id: str) -> Preset | None:
    return _PRESETS_BY_ID.get(preset_id)


def get_presets_for_model(tag: str | None = None) -> list[Preset]:
    """Presets for one model tag; all presets when `tag` is empty or unknown."""
    if tag not in PRESET_TAGS:
        return list(BUILTIN_PRESETS)
    return [preset for preset in BUILTIN_PRESETS if preset.tag == tag]


def apply_preset(state, preset_id: str) -> CalcState:
    """Merge a preset over `state` and normalize. Unknown ids leave the state unchanged."""
    s = normalize_state(state)
    preset = get_preset(preset_id)
    if preset is None:
        return s
    return normalize_state(replace(s, **preset.state))
