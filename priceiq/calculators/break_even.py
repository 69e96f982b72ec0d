"""
Break-Even Calculator

Solves the customer charge needed to clear a target net.
"""

from dataclasses import replace

from ..models import BreakEvenResult, CalcState
from ..money import to_decimal
from ..normalizer import normalize_state
from ..quote import QuoteEngine


class BreakEvenCalculator:
    """Re-runs the quote engine in reverse mode at the break-even target."""

    def __init__(self, engine: QuoteEngine | None = None):
        self.engine = engine or QuoteEngine()

    def calculate(self, state) -> BreakEvenResult | None:
        """
        Calculate the required charge for `break_even_target_net`.

        Returns None when break-even is off or the raw target is negative
        or non-finite. An unsolvable target is a result with denom_ok=False,
        not None.
        """
        if isinstance(state, dict):
            state = CalcState.from_dict(state)
        if state is None or not state.break_even_on:
            return None

        target = to_decimal(state.break_even_target_net)
        if not target.is_finite() or target < 0:
            return None

        s = normalize_state(state)
        result = self.engine.quote(replace(s, mode="reverse", target_net=target))

        return BreakEvenResult(
            target_net=target,
            required_charge=result.gross,
            denom_ok=result.denom_ok,
        )


_calculator = BreakEvenCalculator()


def compute_break_even(state) -> BreakEvenResult | None:
    return _calculator.calculate(state)
