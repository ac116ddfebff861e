"""
Narrative insight providers.

The playbook builder depends only on TextInsightProvider; callers choose the
offline or network-backed implementation.
"""

from typing import Optional

from ..config import InsightParams
from ..errors import ConfigurationError
from .base import AssetInsights, InsightMetrics, TextInsightProvider
from .offline import (
    OfflineInsightProvider,
    build_fallback_insights,
    fallback_portfolio_summary,
    fallback_text,
)
from .openai_provider import OpenAIInsightProvider, strip_code_fence


def create_insight_provider(params: Optional[InsightParams] = None) -> TextInsightProvider:
    """Instantiate the provider named by ``params.provider``."""
    params = params or InsightParams()
    if params.provider == "offline":
        return OfflineInsightProvider()
    if params.provider == "openai":
        return OpenAIInsightProvider(params)
    raise ConfigurationError(f"Unknown insight provider: {params.provider}")


__all__ = [
    "InsightMetrics",
    "AssetInsights",
    "TextInsightProvider",
    "OfflineInsightProvider",
    "OpenAIInsightProvider",
    "build_fallback_insights",
    "fallback_text",
    "fallback_portfolio_summary",
    "strip_code_fence",
    "create_insight_provider",
]
