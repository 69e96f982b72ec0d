"""
Domain Models for the PriceIQ Fee Calculator

These dataclasses provide type-safe representations of the calculator
configuration, the provider quote and the analysis results.
All monetary values and percentages use Decimal for precision.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Optional

from .money import ZERO, to_decimal, to_money, to_number

PROVIDER_IDS = ("stripe", "paypal", "adyen", "checkoutcom", "custom")
MODES = ("forward", "reverse")
PLATFORM_FEE_BASES = ("gross", "afterStripe")
SENSITIVITY_TARGETS = ("all", "provider", "fx", "platform")
ROUNDING_STEPS = (Decimal("0.01"), Decimal("0.05"), Decimal("0.10"))

# Older payloads name these differently
PLATFORM_FEE_BASE_ALIASES = {"after_provider_fee": "afterStripe", "afterProviderFee": "afterStripe"}
SENSITIVITY_TARGET_ALIASES = {"stripe": "provider"}


def _pick(data: dict, key: str, alias: str | None = None, default=None):
    """Read `key` (snake_case) or its camelCase `alias` from a payload."""
    if key in data:
        return data[key]
    if alias is not None and alias in data:
        return data[alias]
    return default


def _to_bool(value, default: bool = False) -> bool:
    if value is None:
        return default
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in ("1", "true", "yes", "on"):
            return True
        if lowered in ("0", "false", "no", "off", ""):
            return False
        return default
    return bool(value)


def _to_optional_decimal(value) -> Optional[Decimal]:
    """Blank/missing -> None (use provider default)."""
    if value is None:
        return None
    if isinstance(value, str) and not value.strip():
        return None
    return to_decimal(value)


# =============================================================================
# INPUT MODELS
# =============================================================================


@dataclass
class VolumeTier:
    """One weighted slice of the monthly transaction basket."""

    id: str
    share_pct: Decimal
    price: Decimal
    fx_percent: Decimal = ZERO
    label: Optional[str] = None

    @classmethod
    def from_dict(cls, data: dict) -> "VolumeTier":
        # avgTicket is the legacy name for price
        price = _pick(data, "price")
        if price is None:
            price = _pick(data, "avg_ticket", "avgTicket", 0)
        label = data.get("label")
        return cls(
            id=str(data.get("id") or "").strip(),
            share_pct=to_decimal(_pick(data, "share_pct", "sharePct", 0)),
            price=to_decimal(price),
            fx_percent=to_decimal(_pick(data, "fx_percent", "fxPercent", 0)),
            label=label if isinstance(label, str) else None,
        )

    def to_dict(self) -> dict:
        out = {
            "id": self.id,
            "share_pct": to_number(self.share_pct),
            "price": to_number(self.price),
            "fx_percent": to_number(self.fx_percent),
        }
        if self.label is not None:
            out["label"] = self.label
        return out


@dataclass
class CalcState:
    """A complete calculator scenario. Normalize before computing with it."""

    provider_id: str = "stripe"
    product_id: str = "cards"
    custom_provider_label: str = ""

    region: str = "UK"
    pricing_id: str = ""

    mode: str = "forward"
    amount: Decimal = Decimal("10")
    target_net: Decimal = Decimal("8")

    fx_percent: Decimal = ZERO
    platform_fee_percent: Decimal = ZERO
    platform_fee_base: str = "gross"

    margin_target_pct: Decimal = ZERO
    margin_on: bool = False

    rounding_step: Decimal = Decimal("0.01")
    psych_price_on: bool = False

    vat_percent: Decimal = ZERO

    break_even_on: bool = False
    break_even_target_net: Decimal = Decimal("10")

    sensitivity_on: bool = False
    sensitivity_delta_pct: Decimal = Decimal("1")
    sensitivity_target: str = "all"

    # None = use the provider's built-in rate
    custom_provider_fee_percent: Optional[Decimal] = None
    custom_fixed_fee: Optional[Decimal] = None

    volume_on: bool = False
    volume_tx_per_month: Decimal = Decimal("100")
    volume_refund_rate_pct: Decimal = ZERO
    volume_tiers: list[VolumeTier] = field(default_factory=list)

    @property
    def has_overrides(self) -> bool:
        return self.custom_provider_fee_percent is not None or self.custom_fixed_fee is not None

    @classmethod
    def from_dict(cls, data: dict) -> "CalcState":
        """
        Build a state from an API payload.

        Accepts snake_case keys and the camelCase keys used by the web client.
        Missing keys take the defaults; unparseable numbers become NaN and are
        repaired by the normalizer.
        """
        d = cls()
        raw_tiers = _pick(data, "volume_tiers", "volumeTiers", None)
        tiers = []
        if isinstance(raw_tiers, list):
            tiers = [VolumeTier.from_dict(t) for t in raw_tiers if isinstance(t, dict)]

        def num(key, alias, default):
            return to_decimal(_pick(data, key, alias, default))

        def text(key, alias, default):
            value = _pick(data, key, alias, default)
            return value if isinstance(value, str) else default

        return cls(
            provider_id=text("provider_id", "providerId", d.provider_id).strip(),
            product_id=text("product_id", "productId", "").strip(),
            custom_provider_label=str(_pick(data, "custom_provider_label", "customProviderLabel", "") or ""),
            region=text("region", None, d.region),
            pricing_id=text("pricing_id", "pricingId", d.pricing_id),
            mode=text("mode", None, d.mode),
            amount=num("amount", None, d.amount),
            target_net=num("target_net", "targetNet", d.target_net),
            fx_percent=num("fx_percent", "fxPercent", d.fx_percent),
            platform_fee_percent=num("platform_fee_percent", "platformFeePercent", d.platform_fee_percent),
            platform_fee_base=text("platform_fee_base", "platformFeeBase", d.platform_fee_base),
            margin_target_pct=num("margin_target_pct", "marginTargetPct", d.margin_target_pct),
            margin_on=_to_bool(_pick(data, "margin_on", "marginOn"), d.margin_on),
            rounding_step=num("rounding_step", "roundingStep", d.rounding_step),
            psych_price_on=_to_bool(_pick(data, "psych_price_on", "psychPriceOn"), d.psych_price_on),
            vat_percent=num("vat_percent", "vatPercent", d.vat_percent),
            break_even_on=_to_bool(_pick(data, "break_even_on", "breakEvenOn"), d.break_even_on),
            break_even_target_net=num("break_even_target_net", "breakEvenTargetNet", d.break_even_target_net),
            sensitivity_on=_to_bool(_pick(data, "sensitivity_on", "sensitivityOn"), d.sensitivity_on),
            sensitivity_delta_pct=num("sensitivity_delta_pct", "sensitivityDeltaPct", d.sensitivity_delta_pct),
            sensitivity_target=text("sensitivity_target", "sensitivityTarget", d.sensitivity_target),
            custom_provider_fee_percent=_to_optional_decimal(
                _pick(data, "custom_provider_fee_percent", "customProviderFeePercent")
            ),
            custom_fixed_fee=_to_optional_decimal(_pick(data, "custom_fixed_fee", "customFixedFee")),
            volume_on=_to_bool(_pick(data, "volume_on", "volumeOn"), d.volume_on),
            volume_tx_per_month=num("volume_tx_per_month", "volumeTxPerMonth", d.volume_tx_per_month),
            volume_refund_rate_pct=num("volume_refund_rate_pct", "volumeRefundRatePct", d.volume_refund_rate_pct),
            volume_tiers=tiers,
        )

    def to_dict(self) -> dict:
        return {
            "provider_id": self.provider_id,
            "product_id": self.product_id,
            "custom_provider_label": self.custom_provider_label,
            "region": self.region,
            "pricing_id": self.pricing_id,
            "mode": self.mode,
            "amount": to_number(self.amount),
            "target_net": to_number(self.target_net),
            "fx_percent": to_number(self.fx_percent),
            "platform_fee_percent": to_number(self.platform_fee_percent),
            "platform_fee_base": self.platform_fee_base,
            "margin_target_pct": to_number(self.margin_target_pct),
            "margin_on": self.margin_on,
            "rounding_step": to_number(self.rounding_step),
            "psych_price_on": self.psych_price_on,
            "vat_percent": to_number(self.vat_percent),
            "break_even_on": self.break_even_on,
            "break_even_target_net": to_number(self.break_even_target_net),
            "sensitivity_on": self.sensitivity_on,
            "sensitivity_delta_pct": to_number(self.sensitivity_delta_pct),
            "sensitivity_target": self.sensitivity_target,
            "custom_provider_fee_percent": to_number(self.custom_provider_fee_percent),
            "custom_fixed_fee": to_number(self.custom_fixed_fee),
            "volume_on": self.volume_on,
            "volume_tx_per_month": to_number(self.volume_tx_per_month),
            "volume_refund_rate_pct": to_number(self.volume_refund_rate_pct),
            "volume_tiers": [t.to_dict() for t in self.volume_tiers],
        }


@dataclass(frozen=True)
class QuoteInput:
    """What a provider fee model needs to produce one quote."""

    provider_id: str
    region: str
    product_id: str
    mode: str
    amount: Decimal
    target_net: Decimal
    pricing_id: str = ""
    fx_percent: Decimal = ZERO
    platform_fee_percent: Decimal = ZERO
    platform_fee_base: str = "gross"
    vat_percent: Decimal = ZERO
    custom_provider_fee_percent: Optional[Decimal] = None
    custom_fixed_fee: Optional[Decimal] = None
    custom_provider_label: str = ""

    @classmethod
    def from_state(cls, state: CalcState) -> "QuoteInput":
        return cls(
            provider_id=state.provider_id,
            region=state.region,
            product_id=state.product_id,
            mode=state.mode,
            amount=state.amount,
            target_net=state.target_net,
            pricing_id=state.pricing_id,
            fx_percent=state.fx_percent,
            platform_fee_percent=state.platform_fee_percent,
            platform_fee_base=state.platform_fee_base,
            vat_percent=state.vat_percent,
            custom_provider_fee_percent=state.custom_provider_fee_percent,
            custom_fixed_fee=state.custom_fixed_fee,
            custom_provider_label=state.custom_provider_label,
        )


@dataclass(frozen=True)
class FeeOverrides:
    """Provider fee overrides handed to the volume projector."""

    percent: Optional[Decimal] = None
    fixed: Optional[Decimal] = None

    @classmethod
    def from_state(cls, state: CalcState) -> "FeeOverrides":
        return cls(percent=state.custom_provider_fee_percent, fixed=state.custom_fixed_fee)


# =============================================================================
# OUTPUT / RESULT MODELS
# =============================================================================


@dataclass(frozen=True)
class FeeLine:
    """One fee component of a quote."""

    key: str  # 'provider_fee', 'fx_fee' or 'platform_fee'
    label: str
    amount: Decimal


@dataclass
class QuoteResult:
    """
    Result of one fee-model invocation.

    `denom_ok` is the validity flag: when False, `gross` and the net fields
    are NaN and the fee amounts are reported as 0.
    """

    symbol: str
    gross: Decimal
    fees: list[FeeLine]
    net_before_vat: Decimal
    vat_percent: Decimal
    vat_amount: Decimal
    net_after_vat: Decimal
    denom_ok: bool
    meta: dict = field(default_factory=dict)

    def fee_amount(self, key: str) -> Decimal:
        for line in self.fees:
            if line.key == key:
                return line.amount
        return ZERO

    @property
    def provider_fee(self) -> Decimal:
        return self.fee_amount("provider_fee")

    @property
    def fx_fee(self) -> Decimal:
        return self.fee_amount("fx_fee")

    @property
    def platform_fee(self) -> Decimal:
        return self.fee_amount("platform_fee")

    @property
    def total_fees(self) -> Decimal:
        return sum((line.amount for line in self.fees), ZERO)

    def to_dict(self) -> dict:
        return {
            "symbol": self.symbol,
            "gross": to_money(self.gross),
            "fees": [{"key": f.key, "label": f.label, "amount": to_money(f.amount)} for f in self.fees],
            "net_before_vat": to_money(self.net_before_vat),
            "vat_percent": to_number(self.vat_percent),
            "vat_amount": to_money(self.vat_amount),
            "net_after_vat": to_money(self.net_after_vat),
            "denom_ok": self.denom_ok,
        }


@dataclass(frozen=True)
class BreakEvenResult:
    target_net: Decimal
    required_charge: Decimal
    denom_ok: bool


@dataclass(frozen=True)
class SensitivityResult:
    """
    Net-before-VAT with the targeted fee percentages scaled up and down.
    Gross is held at the base quote's customer charge.
    """

    delta_pct: Decimal
    target: str
    base_net: Decimal
    net_up: Decimal
    net_down: Decimal
    # Provider-only perturbation, set when the provider rate is targeted
    provider_net_up: Optional[Decimal] = None
    provider_net_down: Optional[Decimal] = None


@dataclass(frozen=True)
class VolumeProjection:
    """Monthly totals for a blended basket of transaction tiers."""

    symbol: str
    tx_per_month: int
    refund_rate_pct: Decimal
    provider_percent: Decimal
    provider_fixed: Decimal

    monthly_gross: Decimal
    monthly_provider_fee: Decimal
    monthly_fx_fee: Decimal
    monthly_platform_fee: Decimal
    monthly_net_before_refunds: Decimal
    monthly_refund_loss: Decimal
    monthly_net_after_refunds: Decimal

    vat_percent: Decimal = ZERO
    monthly_vat: Decimal = ZERO
    monthly_gross_ex_vat: Decimal = ZERO
    monthly_net_after_vat: Decimal = ZERO
    monthly_net_after_refunds_after_vat: Decimal = ZERO

    blended_ticket: Decimal = ZERO
    blended_fx_pct: Decimal = ZERO
    tiers_count: int = 0


@dataclass(frozen=True)
class MarginSummary:
    actual_pct: Decimal
    target_pct: Decimal
    delta: Decimal
    ok: bool
    badge: str


@dataclass
class ScenarioContext:
    """
    Holds all intermediate results while a scenario is processed.
    This is the "bag" that flows through the pipeline.
    """

    state: CalcState
    quote: Optional[QuoteResult] = None
    break_even: Optional[BreakEvenResult] = None
    sensitivity: Optional[SensitivityResult] = None
    volume: Optional[VolumeProjection] = None
    margin: Optional[MarginSummary] = None


@dataclass
class ScenarioResult:
    """Final output of scenario processing."""

    scenario_summary: dict
    quote: dict
    fee_breakdown: dict
    normalized_state: dict
    break_even: Optional[dict] = None
    sensitivity: Optional[dict] = None
    volume: Optional[dict] = None
    margin: Optional[dict] = None
