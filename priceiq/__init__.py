"""
PRICEIQ FEE CALCULATOR
Indicative payment-fee quotes, break-even, sensitivity and volume projections
"""

from .calculators import compute_break_even, compute_sensitivity, compute_volume_projection
from .models import CalcState, QuoteResult, ScenarioResult
from .normalizer import normalize_state
from .processor import ScenarioProcessor
from .quote import QuoteEngine, quote

__all__ = [
    'ScenarioProcessor',
    'QuoteEngine',
    'CalcState',
    'QuoteResult',
    'ScenarioResult',
    'normalize_state',
    'quote',
    'compute_break_even',
    'compute_sensitivity',
    'compute_volume_projection',
]
