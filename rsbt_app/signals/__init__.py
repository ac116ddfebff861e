"""
Signal generation module.

Turns aligned price series into per-asset daily signals (score, raw weight,
stop level) and baseline regime states for the portfolio simulator.
"""

from .engine import classify_weight, compute_baseline_states, compute_signals
from .models import BaselineState, DailySignal

__all__ = [
    "DailySignal",
    "BaselineState",
    "compute_signals",
    "compute_baseline_states",
    "classify_weight",
]
