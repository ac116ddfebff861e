"""
Recovery strategy classifications for error handling.

Errors in this module allow the pipeline to continue with reduced
functionality through a deterministic fallback.
"""

from typing import Optional


class GracefulDegradationError(Exception):
    """Errors that allow continued operation with reduced functionality."""

    def __init__(self, message: str, degraded_functionality: Optional[str] = None,
                 fallback_strategy: Optional[str] = None, **kwargs):
        super().__init__(message)
        self.degraded_functionality = degraded_functionality
        self.fallback_strategy = fallback_strategy
        self.allows_degradation = True


class InsightProviderError(GracefulDegradationError):
    """Narrative generation failed; callers fall back to offline text."""

    def __init__(self, message: str, provider: Optional[str] = None,
                 asset: Optional[str] = None, **kwargs):
        kwargs.setdefault("degraded_functionality", "narrative_insights")
        kwargs.setdefault("fallback_strategy", "offline_summary")
        super().__init__(message, **kwargs)
        self.provider = provider
        self.asset = asset
