"""Performance analysis: per-asset statistics, ranking and equity metrics"""

from .portfolio_metrics import PortfolioMetrics, summarize_equity
from .ranking import (
    StrategyOverview,
    profitable_strategies,
    rank_by_sharpe,
    rank_by_total_return,
    summarize_strategies,
)
from .statistics import (
    StrategyStatistics,
    analyze,
    compute_max_drawdown,
    compute_profit_factor,
    compute_sharpe_ratio,
    trading_returns,
)

__all__ = [
    "StrategyStatistics",
    "analyze",
    "compute_profit_factor",
    "compute_sharpe_ratio",
    "compute_max_drawdown",
    "trading_returns",
    "StrategyOverview",
    "profitable_strategies",
    "rank_by_total_return",
    "rank_by_sharpe",
    "summarize_strategies",
    "PortfolioMetrics",
    "summarize_equity",
]
