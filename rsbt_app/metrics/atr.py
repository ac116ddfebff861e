"""True Range and ATR (Average True Range) calculations"""

from collections.abc import Sequence
from typing import Optional

from .rolling import rolling_mean


def true_range(high: float, low: float, prev_close: float) -> float:
    """
    Calculate True Range for a single bar

    TR = max(high - low, abs(high - prev_close), abs(low - prev_close))
    """
    return max(abs(high - low), abs(high - prev_close), abs(low - prev_close))


def true_ranges(
    high: Sequence[Optional[float]],
    low: Sequence[Optional[float]],
    close: Sequence[float],
) -> list[float]:
    """
    Per-bar True Range series

    The first bar uses its high-low range (0.0 without high/low). Bars that
    lack high or low fall back to the absolute close-to-close change.

    Args:
        high: Highs, None where absent
        low: Lows, None where absent
        close: Closes

    Returns:
        True Range for every bar
    """
    ranges = []
    for i in range(len(close)):
        h, lo = high[i], low[i]
        has_range = h is not None and lo is not None

        if i == 0:
            ranges.append(abs(h - lo) if has_range else 0.0)
        elif has_range:
            ranges.append(true_range(h, lo, close[i - 1]))
        else:
            ranges.append(abs(close[i] - close[i - 1]))

    return ranges


def rolling_atr(
    high: Sequence[Optional[float]],
    low: Sequence[Optional[float]],
    close: Sequence[float],
    period: int = 14,
) -> list[Optional[float]]:
    """
    ATR as the simple moving average of True Range

    Returns:
        ATR per bar, None until the window is full
    """
    return rolling_mean(true_ranges(high, low, close), period)
