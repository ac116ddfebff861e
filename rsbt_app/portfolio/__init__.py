"""Portfolio simulation over aligned signal histories"""

from .simulator import PortfolioState, effective_weight, simulate_portfolio

__all__ = ["PortfolioState", "simulate_portfolio", "effective_weight"]
