"""
Fee Sensitivity Calculator

Local "what-if" drift of the fee percentages. The customer charge of the
base quote is held fixed and only the fee composition moves; gross is not
re-solved, so in reverse mode the result answers "what if rates drift after
I set my price".
"""

from dataclasses import replace
from decimal import Decimal

from ..fees import FeeCalculator, FeeRates
from ..models import CalcState, QuoteInput, SensitivityResult
from ..money import HUNDRED, NAN, clamp_pct, round_money
from ..normalizer import normalize_state
from ..providers import get_provider
from ..quote import QuoteEngine

ONE = Decimal("1")


class SensitivityCalculator:
    """Computes net-before-VAT with the targeted fee percentages scaled by 1 +/- delta."""

    def __init__(self, engine: QuoteEngine | None = None):
        self.engine = engine or QuoteEngine()
        self.fee_calculator = FeeCalculator()

    def calculate(self, state) -> SensitivityResult | None:
        """
        Perturb the targeted percentage(s) up and down by `sensitivity_delta_pct`.

        Targets:
        - "provider": provider percent only
        - "fx": FX percent only
        - "platform": platform percent only
        - "all": all three by the same factor

        The fixed fee is held at its base value. Each perturbed percentage is
        clamped to [0, 100].
        """
        if isinstance(state, dict):
            state = CalcState.from_dict(state)
        if state is None or not state.sensitivity_on:
            return None

        s = normalize_state(state)
        delta = s.sensitivity_delta_pct
        target = s.sensitivity_target

        base = self.engine.quote(s)
        base_net = base.net_before_vat
        gross = base.gross

        if not base.denom_ok or not gross.is_finite() or gross < 0:
            return SensitivityResult(
                delta_pct=delta,
                target=target,
                base_net=base_net,
                net_up=base_net,
                net_down=base_net,
            )

        rates = get_provider(s.provider_id).rates_for(QuoteInput.from_state(s))
        up = ONE + delta / HUNDRED
        down = ONE - delta / HUNDRED

        provider_net_up = provider_net_down = None
        if target in ("provider", "all"):
            provider_net_up = self._net(gross, self._perturb(rates, up, ("provider",)))
            provider_net_down = self._net(gross, self._perturb(rates, down, ("provider",)))

        targets = ("provider", "fx", "platform") if target == "all" else (target,)
        return SensitivityResult(
            delta_pct=delta,
            target=target,
            base_net=base_net,
            net_up=self._net(gross, self._perturb(rates, up, targets)),
            net_down=self._net(gross, self._perturb(rates, down, targets)),
            provider_net_up=provider_net_up,
            provider_net_down=provider_net_down,
        )

    def _perturb(self, rates: FeeRates, factor: Decimal, targets) -> FeeRates:
        changes = {}
        if "provider" in targets:
            changes["provider_percent"] = clamp_pct(rates.provider_percent * factor)
        if "fx" in targets:
            changes["fx_percent"] = clamp_pct(rates.fx_percent * factor)
        if "platform" in targets:
            changes["platform_fee_percent"] = clamp_pct(rates.platform_fee_percent * factor)
        return replace(rates, **changes)

    def _net(self, gross: Decimal, rates: FeeRates) -> Decimal:
        breakdown = self.fee_calculator.calculate(gross, rates)
        if not breakdown.is_valid:
            return NAN
        return round_money(breakdown.net_before_vat)


_calculator = SensitivityCalculator()


def compute_sensitivity(state) -> SensitivityResult | None:
    return _calculator.calculate(state)
