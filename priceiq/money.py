"""
Money and Rounding Utilities

Pure numeric helpers shared by the fee models, the quote engine and the
analysis calculators. All arithmetic is done on Decimal; floats coming from
JSON are converted through their string form so binary representation error
never reaches a rounding step.
"""

import math
from decimal import ROUND_FLOOR, ROUND_HALF_UP, Decimal, InvalidOperation, localcontext

ZERO = Decimal("0")
HUNDRED = Decimal("100")
NAN = Decimal("NaN")
CENT = Decimal("0.01")

# Psychological price endings keyed by rounding step
PSYCH_ENDINGS = {
    Decimal("0.01"): Decimal("0.99"),
    Decimal("0.05"): Decimal("0.95"),
    Decimal("0.10"): Decimal("0.90"),
}


def to_decimal(value, default: Decimal = NAN) -> Decimal:
    """Coerce a JSON-ish value to Decimal. Unparseable input returns `default`."""
    if value is None:
        return default
    if isinstance(value, Decimal):
        return value
    if isinstance(value, bool):
        return Decimal(int(value))
    if isinstance(value, float) and not math.isfinite(value):
        return NAN
    try:
        return Decimal(str(value).strip())
    except (InvalidOperation, ValueError, TypeError):
        return default


def is_finite(value) -> bool:
    return isinstance(value, Decimal) and value.is_finite()


def clamp_pct(value) -> Decimal:
    """Clamp to [0, 100]. Non-finite values become 0."""
    v = to_decimal(value)
    if not v.is_finite():
        return ZERO
    return max(ZERO, min(HUNDRED, v))


def clamp_non_neg(value) -> Decimal:
    """Clamp to >= 0. Non-finite values become 0."""
    v = to_decimal(value)
    if not v.is_finite():
        return ZERO
    return max(ZERO, v)


def clamp_money_like(value) -> Decimal:
    """Finite check only; negative amounts (rebates) are kept."""
    v = to_decimal(value)
    if not v.is_finite():
        return ZERO
    return v


def quantize_to(value: Decimal, exp: Decimal, rounding=ROUND_HALF_UP) -> Decimal:
    """
    Quantize with enough precision for the integer part of `value`.

    The default 28-digit context rejects large amounts with InvalidOperation.
    """
    with localcontext() as ctx:
        ctx.prec = max(ctx.prec, value.adjusted() - exp.adjusted() + 2)
        return value.quantize(exp, rounding=rounding)


def quantize_money(value: Decimal) -> Decimal:
    """Round to 2 decimal places using ROUND_HALF_UP."""
    return quantize_to(value, CENT)


def round_money(value) -> Decimal:
    """
    Round to the currency minor unit (2 decimals).

    Floats go through their shortest repr first, so 1.005 rounds to 1.01
    rather than to the 1.00 its binary value would give.
    Non-finite values pass through unchanged.
    """
    v = to_decimal(value)
    if not v.is_finite():
        return v
    return quantize_money(v)


def round_to_step(value, step) -> Decimal:
    """Round to the nearest multiple of `step` (round-half-up)."""
    v = to_decimal(value)
    if not v.is_finite():
        return v
    step = to_decimal(step)
    if not step.is_finite() or step <= 0:
        return v
    units = quantize_to(v / step, Decimal("1"))
    return units * step


def apply_psych_price(value, step) -> Decimal:
    """
    Psychological price ending: floor the value and add .99, .95 or .90
    for steps 0.01, 0.05 and 0.10 respectively.
    """
    v = to_decimal(value)
    if not v.is_finite() or v <= 0:
        return v
    floor = v.to_integral_value(rounding=ROUND_FLOOR)
    return floor + PSYCH_ENDINGS.get(to_decimal(step), Decimal("0.90"))


def to_money(value):
    """Convert Decimal to float with 2 decimal places. Non-finite -> None."""
    if value is None:
        return None
    v = to_decimal(value)
    if not v.is_finite():
        return None
    return round(float(quantize_money(v)), 2)


def to_number(value):
    """Convert Decimal to float without rounding. Non-finite -> None."""
    if value is None:
        return None
    v = to_decimal(value)
    if not v.is_finite():
        return None
    return float(v)


def format_money(symbol: str, value) -> str:
    """Format as '£10.00'. Invalid values render as an em dash placeholder."""
    v = round_money(value)
    if not v.is_finite():
        return "—"
    return f"{symbol}{v:,.2f}"


def format_pct(value) -> str:
    v = to_decimal(value)
    if not v.is_finite():
        return "—"
    return f"{v:.2f}%"
