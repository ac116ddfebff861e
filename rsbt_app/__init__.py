"""
RSBT App - Relative-Strength Momentum Backtester

Backtests a cross-sectional trend / momentum / relative-strength strategy over
daily crypto price series against a baseline asset, simulates a normalized
long-only portfolio with stop-loss enforcement, and derives position-sizing
playbooks from the per-asset statistics.
"""

__version__ = "0.1.0"
__author__ = "RSBT Team"
