"""
Logging configuration and utilities for the backtest pipeline.
"""
from .config import configure_logging, get_backtest_logger, get_logger

__all__ = ["configure_logging", "get_logger", "get_backtest_logger"]
