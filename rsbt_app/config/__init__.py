"""Configuration defaults, loading and validation."""

from .defaults import (
    AnalysisParams,
    DefaultConfig,
    InsightParams,
    PlaybookParams,
    StrategyParams,
    get_default_config,
)
from .loader import ConfigLoader, load_config
from .validation import ConfigValidator, ValidationError

__all__ = [
    "AnalysisParams",
    "DefaultConfig",
    "InsightParams",
    "PlaybookParams",
    "StrategyParams",
    "get_default_config",
    "ConfigLoader",
    "load_config",
    "ConfigValidator",
    "ValidationError",
]
