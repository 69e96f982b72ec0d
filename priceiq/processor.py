"""
Scenario Processor - Main Orchestrator

Coordinates the scenario pipeline through discrete, testable steps.
"""

import json
from typing import Any, Dict, List

from .calculators import BreakEvenCalculator, MarginCalculator, SensitivityCalculator, VolumeProjector
from .models import CalcState, FeeOverrides, ScenarioContext, ScenarioResult
from .money import to_money
from .normalizer import StateNormalizer
from .output import OutputBuilder
from .quote import QuoteEngine


class ScenarioProcessor:
    """
    Main orchestrator for scenario processing.

    Implements a clear pipeline pattern:
    1. Normalize State
    2. Quote
    3. Break-Even
    4. Fee Sensitivity
    5. Volume Projection
    6. Margin Summary
    7. Build Output
    """

    def __init__(self):
        self.normalizer = StateNormalizer()
        self.engine = QuoteEngine()
        self.break_even_calculator = BreakEvenCalculator(self.engine)
        self.sensitivity_calculator = SensitivityCalculator(self.engine)
        self.volume_projector = VolumeProjector(self.engine)
        self.margin_calculator = MarginCalculator()
        self.output_builder = OutputBuilder()

    def process(self, state: CalcState) -> ScenarioResult:
        """
        Process a scenario through the complete pipeline.

        Args:
            state: CalcState (any shape; it is normalized first)

        Returns:
            ScenarioResult with the quote and every enabled analysis
        """
        # Break-even gates on the raw target, before normalization clamps it
        ctx = ScenarioContext(state=self.normalizer.normalize(state))
        ctx.quote = self.engine.quote(ctx.state)

        ctx.break_even = self.break_even_calculator.calculate(state)
        ctx.sensitivity = self.sensitivity_calculator.calculate(ctx.state)
        ctx.volume = self.volume_projector.calculate(
            ctx.state, ctx.quote, FeeOverrides.from_state(ctx.state)
        )
        if ctx.state.margin_on:
            ctx.margin = self.margin_calculator.calculate(ctx.quote, ctx.state)

        return self.output_builder.build(ctx)

    def process_from_dict(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Process a scenario from a raw dictionary.

        Convenience method for API usage.
        """
        if not isinstance(data, dict):
            raise ValueError("Scenario must be a JSON object")
        result = self.process(CalcState.from_dict(data))
        return self._result_to_dict(result)

    def compare(self, scenarios: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """
        Quote several scenarios side by side.

        Each row carries `delta_net` against the first scenario's net
        (None for the first row and when either net is invalid).
        """
        if not isinstance(scenarios, list):
            raise ValueError("scenarios must be a list")

        rows = []
        base_net = None
        for idx, data in enumerate(scenarios):
            if not isinstance(data, dict):
                raise ValueError(f"Scenario {idx + 1} must be a JSON object")
            state = self.normalizer.normalize(CalcState.from_dict(data))
            q = self.engine.quote(state)
            net = q.net_before_vat if q.denom_ok else None

            if idx == 0:
                base_net = net
                delta = None
            elif net is None or base_net is None:
                delta = None
            else:
                delta = to_money(net - base_net)

            rows.append({
                "name": str(data.get("name") or f"Scenario {idx + 1}"),
                "provider_id": state.provider_id,
                "product_id": state.product_id,
                "mode": state.mode,
                "symbol": q.symbol,
                "gross": to_money(q.gross),
                "provider_fee": to_money(q.provider_fee),
                "fx_fee": to_money(q.fx_fee),
                "platform_fee": to_money(q.platform_fee),
                "net": to_money(net),
                "net_after_vat": to_money(q.net_after_vat),
                "denom_ok": q.denom_ok,
                "delta_net": delta,
            })
        return rows

    def _result_to_dict(self, result: ScenarioResult) -> Dict[str, Any]:
        """Convert ScenarioResult to dictionary for API response."""
        return {
            "scenario_summary": result.scenario_summary,
            "quote": result.quote,
            "fee_breakdown": result.fee_breakdown,
            "break_even": result.break_even,
            "sensitivity": result.sensitivity,
            "volume": result.volume,
            "margin": result.margin,
            "normalized_state": result.normalized_state,
        }


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================

def process_scenario_from_dict(input_data: Dict[str, Any]) -> Dict[str, Any]:
    """Process a scenario from Python dict and return Python dict."""
    processor = ScenarioProcessor()
    return processor.process_from_dict(input_data)


def process_scenario_from_json(json_input: str) -> str:
    """
    Process a scenario from JSON string input and return JSON string output.
    Errors are returned as a JSON error object.
    """
    try:
        input_data = json.loads(json_input)
        processor = ScenarioProcessor()
        result = processor.process_from_dict(input_data)
        return json.dumps(result, indent=2)

    except ValueError as e:
        error_response = {"error": str(e), "status": "validation_failed"}
        return json.dumps(error_response, indent=2)

    except Exception as e:
        error_response = {"error": str(e), "status": "failed"}
        return json.dumps(error_response, indent=2)
