"""Rolling window statistics with left-truncated (undefined until full) output"""

import math
from collections.abc import Sequence
from typing import Optional


def rolling_mean(values: Sequence[float], window: int) -> list[Optional[float]]:
    """
    Simple moving average over a trailing window

    Index i is defined only when i + 1 >= window; earlier indices are None.
    A non-positive window yields no defined values.

    Args:
        values: Input sequence in chronological order
        window: Window length

    Returns:
        List of the same length as values
    """
    result: list[Optional[float]] = [None] * len(values)
    if window <= 0:
        return result

    for i in range(window - 1, len(values)):
        result[i] = math.fsum(values[i + 1 - window:i + 1]) / window

    return result


def rolling_std(values: Sequence[float], window: int) -> list[Optional[float]]:
    """
    Population standard deviation over a trailing window

    Same left-truncation as rolling_mean; divides by the window length.
    """
    result: list[Optional[float]] = [None] * len(values)
    if window <= 0:
        return result

    for i in range(window - 1, len(values)):
        chunk = values[i + 1 - window:i + 1]
        mean = math.fsum(chunk) / window
        variance = math.fsum((v - mean) ** 2 for v in chunk) / window
        result[i] = math.sqrt(variance)

    return result


def daily_returns(closes: Sequence[float]) -> list[float]:
    """Simple close-to-close returns; the first day has return 0.0"""
    returns = [0.0] * len(closes)
    for i in range(1, len(closes)):
        prev = closes[i - 1]
        returns[i] = (closes[i] - prev) / prev if prev else 0.0
    return returns
