"""Summary metrics of the simulated portfolio equity curve"""

import math
from collections.abc import Sequence
from dataclasses import dataclass

from ..portfolio.simulator import PortfolioState
from .statistics import compute_max_drawdown

DAYS_PER_YEAR = 365.25


@dataclass(frozen=True)
class PortfolioMetrics:
    """Equity-curve summary"""
    days: int
    total_return: float
    cagr: float
    sharpe_annualized: float
    max_drawdown: float
    win_rate: float

    def summary_lines(self) -> list[str]:
        return [
            f"Days: {self.days}",
            f"Total Return: {self.total_return * 100:.2f}%",
            f"CAGR: {self.cagr * 100:.2f}%",
            f"Sharpe (ann.): {self.sharpe_annualized:.2f}",
            f"Max Drawdown: {self.max_drawdown * 100:.2f}%",
            f"Win Rate: {self.win_rate * 100:.2f}%",
        ]


def summarize_equity(states: Sequence[PortfolioState],
                     periods_per_year: float = DAYS_PER_YEAR) -> PortfolioMetrics:
    """
    Summarize a simulated equity curve.

    Sharpe and win rate consider only finite, non-zero daily returns, so flat
    days spent in cash do not dilute them. CAGR uses calendar years of
    ``days / periods_per_year``.
    """
    if not states:
        return PortfolioMetrics(days=0, total_return=0.0, cagr=0.0,
                                sharpe_annualized=0.0, max_drawdown=0.0, win_rate=0.0)

    final_equity = states[-1].equity
    years = len(states) / periods_per_year
    if final_equity <= 0:
        cagr = -1.0
    else:
        cagr = final_equity ** (1.0 / years) - 1.0

    returns = [s.daily_return for s in states if math.isfinite(s.daily_return) and s.daily_return != 0.0]
    mean = sum(returns) / len(returns) if returns else 0.0
    sd = 0.0
    if len(returns) > 1:
        sd = math.sqrt(sum((r - mean) ** 2 for r in returns) / (len(returns) - 1))
    sharpe = mean / sd * math.sqrt(periods_per_year) if sd > 0 else 0.0

    return PortfolioMetrics(
        days=len(states),
        total_return=final_equity - 1.0,
        cagr=cagr,
        sharpe_annualized=sharpe,
        max_drawdown=compute_max_drawdown([s.equity for s in states]),
        win_rate=sum(1 for r in returns if r > 0) / len(returns) if returns else 0.0,
    )
