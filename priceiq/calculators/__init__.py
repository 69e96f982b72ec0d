"""
Calculators Package

Analysis components built on the quote engine.
"""

from .break_even import BreakEvenCalculator, compute_break_even
from .margin import MarginCalculator
from .sensitivity import SensitivityCalculator, compute_sensitivity
from .volume import VolumeProjector, compute_volume_projection

__all__ = [
    "BreakEvenCalculator",
    "SensitivityCalculator",
    "VolumeProjector",
    "MarginCalculator",
    "compute_break_even",
    "compute_sensitivity",
    "compute_volume_projection",
]
