"""Ranking and summary of per-asset strategy statistics"""

from collections.abc import Sequence
from dataclasses import dataclass

from .statistics import StrategyStatistics


@dataclass(frozen=True)
class StrategyOverview:
    """Counts and averages across analyzed strategies"""
    total_strategies: int
    profitable_count: int
    avg_return: float
    avg_win_rate: float
    avg_sharpe: float

    @property
    def profitable_ratio(self) -> float:
        if self.total_strategies == 0:
            return 0.0
        return self.profitable_count / self.total_strategies


def profitable_strategies(analyses: Sequence[StrategyStatistics]) -> list[StrategyStatistics]:
    """Strategies meeting the profitability rule, in input order"""
    return [a for a in analyses if a.is_profitable]


def rank_by_total_return(analyses: Sequence[StrategyStatistics]) -> list[StrategyStatistics]:
    """Descending by total return; ties keep input order"""
    return sorted(analyses, key=lambda a: a.total_return, reverse=True)


def rank_by_sharpe(analyses: Sequence[StrategyStatistics]) -> list[StrategyStatistics]:
    """Descending by Sharpe ratio; ties keep input order"""
    return sorted(analyses, key=lambda a: a.sharpe_ratio, reverse=True)


def summarize_strategies(analyses: Sequence[StrategyStatistics]) -> StrategyOverview:
    """
    Overview of an analysis batch.

    Averages are taken over the profitable strategies only; they are 0.0
    when none qualify.
    """
    profitable = profitable_strategies(analyses)
    n = len(profitable)

    return StrategyOverview(
        total_strategies=len(analyses),
        profitable_count=n,
        avg_return=sum(a.total_return for a in profitable) / n if n else 0.0,
        avg_win_rate=sum(a.win_rate for a in profitable) / n if n else 0.0,
        avg_sharpe=sum(a.sharpe_ratio for a in profitable) / n if n else 0.0,
    )
