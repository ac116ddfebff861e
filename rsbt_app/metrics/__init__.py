"""Indicator library: rolling statistics, true range and volatility measures"""

from .atr import rolling_atr, true_range, true_ranges
from .rolling import daily_returns, rolling_mean, rolling_std
from .volatility import annualized_volatility, close_to_close_atr

__all__ = [
    "rolling_mean",
    "rolling_std",
    "daily_returns",
    "true_range",
    "true_ranges",
    "rolling_atr",
    "close_to_close_atr",
    "annualized_volatility",
]
