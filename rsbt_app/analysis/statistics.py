"""
Per-asset strategy statistics from a completed signal history.

Only days with a non-zero raw weight count as trading days. Degenerate
divisions resolve to fixed values (Sharpe 0, profit factor infinity) so no
NaN ever leaves this module.
"""

import math
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Optional

from ..signals.models import DailySignal

TRADING_DAY_EPSILON = 1e-6


@dataclass(frozen=True)
class StrategyStatistics:
    """Aggregate performance of one asset's signal history"""
    total_return: float
    win_rate: float
    avg_win: float
    avg_loss: float
    profit_factor: float
    max_drawdown: float
    sharpe_ratio: float
    trading_days: int
    asset: str = ""
    total_days: int = 0
    max_return: float = 0.0
    min_return: float = 0.0

    @property
    def is_profitable(self) -> bool:
        return self.total_return > 0 and self.win_rate > 0.5 and self.profit_factor > 1.0

    def summary_lines(self) -> list[str]:
        """Human-readable report block"""
        return [
            f"{self.asset} Analysis",
            f"   Total Days: {self.total_days}",
            f"   Trading Days: {self.trading_days}",
            f"   Total Return: {self.total_return * 100:.2f}%",
            f"   Max Return: {self.max_return * 100:.2f}%",
            f"   Min Return: {self.min_return * 100:.2f}%",
            f"   Win Rate: {self.win_rate * 100:.1f}%",
            f"   Avg Win: {self.avg_win * 100:.2f}%",
            f"   Avg Loss: {self.avg_loss * 100:.2f}%",
            f"   Profit Factor: {self.profit_factor:.2f}",
            f"   Max Drawdown: {self.max_drawdown * 100:.2f}%",
            f"   Sharpe Ratio: {self.sharpe_ratio:.2f}",
        ]


def compute_profit_factor(returns: Sequence[float]) -> float:
    """Sum of gains over absolute sum of losses; infinity without losses"""
    gains = math.fsum(r for r in returns if r > 0)
    losses = abs(math.fsum(r for r in returns if r < 0))
    if losses == 0:
        return math.inf
    return gains / losses


def compute_sharpe_ratio(returns: Sequence[float]) -> float:
    """
    Mean over sample standard deviation (n - 1 denominator).

    Returns 0.0 for fewer than two returns or zero variance.
    """
    if len(returns) < 2:
        return 0.0

    mean = math.fsum(returns) / len(returns)
    variance = math.fsum((r - mean) ** 2 for r in returns) / (len(returns) - 1)
    if variance <= 0:
        return 0.0
    return mean / math.sqrt(variance)


def compute_max_drawdown(path: Sequence[float]) -> float:
    """
    Largest peak-to-trough fractional decline along a value path.

    The peak is the running maximum; non-positive peaks contribute no drawdown.
    """
    peak: Optional[float] = None
    max_dd = 0.0
    for value in path:
        if peak is None or value > peak:
            peak = value
        if peak > 0:
            max_dd = max(max_dd, (peak - value) / peak)
    return max_dd


def trading_returns(signals: Sequence[DailySignal],
                    epsilon: float = TRADING_DAY_EPSILON) -> list[float]:
    """
    Weighted returns on trading days, measured from the first close.
    """
    if not signals:
        return []

    base = signals[0].price
    return [
        s.raw_weight * (s.price - base) / base
        for s in signals
        if abs(s.raw_weight) > epsilon
    ]


def analyze(signals: Sequence[DailySignal], asset: str = "",
            epsilon: float = TRADING_DAY_EPSILON) -> StrategyStatistics:
    """
    Compute StrategyStatistics from one asset's signal history.

    Args:
        signals: Completed signal history
        asset: Asset name carried into the result
        epsilon: Minimum absolute raw weight for a trading day

    Returns:
        Immutable statistics value
    """
    returns = trading_returns(signals, epsilon)

    cumulative = 1.0
    path = [1.0]
    for r in returns:
        cumulative *= 1.0 + r
        path.append(cumulative)

    wins = [r for r in returns if r > 0]
    losses = [r for r in returns if r < 0]

    return StrategyStatistics(
        asset=asset,
        total_days=len(signals),
        trading_days=len(returns),
        total_return=cumulative - 1.0,
        max_return=max([0.0, *returns]),
        min_return=min([0.0, *returns]),
        win_rate=len(wins) / len(returns) if returns else 0.0,
        avg_win=sum(wins) / len(wins) if wins else 0.0,
        avg_loss=sum(losses) / len(losses) if losses else 0.0,
        profit_factor=compute_profit_factor(returns),
        max_drawdown=compute_max_drawdown(path),
        sharpe_ratio=compute_sharpe_ratio(returns),
    )
