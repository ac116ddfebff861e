"""Base types for narrative insight providers."""

from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

from ..analysis.ranking import StrategyOverview


@dataclass(frozen=True)
class InsightMetrics:
    """
    Precomputed numbers handed to a narrative provider.

    Return, win rate and drawdown are in percent; volatility is the
    annualized fraction.
    """
    asset: str
    total_return_pct: float
    sharpe_ratio: float
    win_rate_pct: float
    max_drawdown_pct: float
    trading_days: int
    profit_factor: float
    current_price: float
    ma_long: float
    ma_short: float
    rs_ma_short: float
    rs_ma_long: float
    atr_14: float
    volatility: float


@dataclass(frozen=True)
class AssetInsights:
    """Structured narrative for one asset."""
    asset: str
    trading_notes: list[str] = field(default_factory=list)
    risk_assessment: str = ""
    execution_recommendations: list[str] = field(default_factory=list)
    market_context: str = ""

    @classmethod
    def from_payload(cls, asset: str, payload: dict[str, Any]) -> "AssetInsights":
        """
        Build from a decoded JSON answer.

        Raises:
            ValueError: If a required field is missing or has the wrong type
        """
        notes = payload.get("trading_notes")
        recs = payload.get("execution_recommendations")
        risk = payload.get("risk_assessment")
        context = payload.get("market_context")

        if not isinstance(notes, list) or not all(isinstance(n, str) for n in notes):
            raise ValueError("trading_notes must be a list of strings")
        if not isinstance(recs, list) or not all(isinstance(r, str) for r in recs):
            raise ValueError("execution_recommendations must be a list of strings")
        if not isinstance(risk, str) or not isinstance(context, str):
            raise ValueError("risk_assessment and market_context must be strings")

        return cls(asset=asset, trading_notes=notes, risk_assessment=risk,
                   execution_recommendations=recs, market_context=context)

    def to_text(self) -> str:
        """Single-line notes: trading notes, risk, recommendations, context"""
        parts = list(self.trading_notes)
        parts.append(f"Risk: {self.risk_assessment}")
        parts.extend(self.execution_recommendations)
        parts.append(f"Context: {self.market_context}")
        return "; ".join(parts)


class TextInsightProvider(ABC):
    """Narrative generator for playbook notes."""

    name = "base"

    @abstractmethod
    def summarize(self, metrics: InsightMetrics) -> str:
        """
        Produce notes for one asset.

        Args:
            metrics: Precomputed asset metrics

        Returns:
            Note text
        """
        pass

    def summarize_portfolio(
        self,
        overview: StrategyOverview,
        top_performers: Sequence[tuple[str, float]] = (),
        market_conditions: str = "Not specified",
    ) -> str:
        """Portfolio-level paragraph; deterministic unless overridden."""
        from .offline import fallback_portfolio_summary

        return fallback_portfolio_summary(overview, market_conditions)
