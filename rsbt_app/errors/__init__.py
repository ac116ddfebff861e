"""
Error classification system for the backtest pipeline.

This module provides a structured exception hierarchy for input data problems,
system failures, and degradable optional features.
"""

from .data_quality import (
    DataQualityError,
    MissingDataError,
    MalformedInputSeriesError,
    InsufficientHistoryError,
)
from .system_failures import (
    SystemFailureError,
    ConfigurationError,
    MetricsCalculationError,
    PersistenceError,
)
from .recovery import (
    GracefulDegradationError,
    InsightProviderError,
)

__all__ = [
    # Data Quality Errors
    "DataQualityError",
    "MissingDataError",
    "MalformedInputSeriesError",
    "InsufficientHistoryError",
    # System Failures
    "SystemFailureError",
    "ConfigurationError",
    "MetricsCalculationError",
    "PersistenceError",
    # Recovery Categories
    "GracefulDegradationError",
    "InsightProviderError",
]
