"""
Margin Calculator

Compares the achieved net margin of a quote against the margin goal.
"""

from decimal import Decimal

from ..models import CalcState, MarginSummary, QuoteResult
from ..money import HUNDRED, ZERO, clamp_pct

TOLERANCE = Decimal("0.000001")


class MarginCalculator:
    """Builds the margin-vs-goal summary for a quote."""

    def calculate(self, quote: QuoteResult, state: CalcState) -> MarginSummary:
        """
        Margin summary.

        actual_pct = net_before_vat / gross * 100, clamped to [0, 100]
        delta = actual_pct - target_pct

        Badges: "Invalid" (unsolvable), "—" (no charge), "No goal"
        (target 0), "On target" or "Below target".
        """
        gross = quote.gross
        gross_ok = quote.denom_ok and gross.is_finite() and gross > 0

        actual = ZERO
        if gross_ok and quote.net_before_vat.is_finite():
            actual = clamp_pct(quote.net_before_vat / gross * HUNDRED)

        target = clamp_pct(state.margin_target_pct)
        delta = actual - target
        ok = gross_ok and target > 0 and delta >= -TOLERANCE

        if not quote.denom_ok:
            badge = "Invalid"
        elif not gross_ok:
            badge = "—"
        elif target <= 0:
            badge = "No goal"
        elif ok:
            badge = "On target"
        else:
            badge = "Below target"

        return MarginSummary(actual_pct=actual, target_pct=target, delta=delta, ok=ok, badge=badge)
