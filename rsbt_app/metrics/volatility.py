"""Snapshot volatility measures used for position sizing"""

import math
from collections.abc import Sequence

TRADING_DAYS_PER_YEAR = 252


def close_to_close_atr(closes: Sequence[float], period: int = 14) -> float:
    """
    ATR approximation from closes only

    Mean of the last ``period`` absolute close changes, or of all of them
    when fewer are available. 0.0 for fewer than two closes.
    """
    changes = [abs(closes[i] - closes[i - 1]) for i in range(1, len(closes))]
    if not changes:
        return 0.0

    recent = changes[-period:]
    return sum(recent) / len(recent)


def annualized_volatility(closes: Sequence[float], period: int = 14) -> float:
    """
    Annualized volatility of daily log returns

    Population std of the last ``period`` log returns scaled by sqrt(252).
    Returns 0.0 when fewer than ``period`` returns exist.
    """
    log_returns = [
        math.log(closes[i] / closes[i - 1])
        for i in range(1, len(closes))
        if closes[i] > 0 and closes[i - 1] > 0
    ]
    if period <= 0 or len(log_returns) < period:
        return 0.0

    recent = log_returns[-period:]
    mean = sum(recent) / len(recent)
    variance = sum((r - mean) ** 2 for r in recent) / len(recent)
    return math.sqrt(variance) * math.sqrt(TRADING_DAYS_PER_YEAR)
