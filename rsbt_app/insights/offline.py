"""Deterministic, metrics-derived insight text."""

from ..analysis.ranking import StrategyOverview
from .base import AssetInsights, InsightMetrics, TextInsightProvider

FALLBACK_MARKET_CONTEXT = "Market analysis unavailable - using fallback metrics"


def build_fallback_insights(metrics: InsightMetrics) -> AssetInsights:
    """Rule-based insights from return, Sharpe, win rate and drawdown."""
    notes = []
    recommendations = []

    if metrics.total_return_pct > 1000.0:
        notes.append("Exceptional momentum - consider scaling in gradually to manage volatility risk")
        risk = "High return potential but extreme volatility risk"
    elif metrics.total_return_pct > 100.0:
        notes.append("Strong momentum trend - monitor for continuation signals")
        risk = "High return with moderate volatility"
    elif metrics.total_return_pct > 10.0:
        notes.append("Solid performance - suitable for core portfolio allocation")
        risk = "Moderate risk with good return potential"
    else:
        notes.append("Conservative performance - consider for risk management")
        risk = "Low risk, modest returns"

    if metrics.sharpe_ratio > 2.0:
        notes.append("Excellent risk-adjusted returns - increase position size")
        recommendations.append("Consider larger position size due to high Sharpe ratio")
    elif metrics.sharpe_ratio > 1.0:
        notes.append("Good risk-adjusted performance - maintain current sizing")
        recommendations.append("Standard position sizing appropriate")
    else:
        notes.append("Lower risk-adjusted returns - consider reducing position size")
        recommendations.append("Consider smaller position size due to lower Sharpe ratio")

    if metrics.win_rate_pct > 80.0:
        notes.append("High win rate suggests strong signal quality")
    elif metrics.win_rate_pct < 50.0:
        notes.append("Low win rate - review entry criteria and market conditions")

    if metrics.max_drawdown_pct > 20.0:
        notes.append("High drawdown risk - implement strict stop losses")
        recommendations.append("Use tighter stop losses to manage drawdown risk")

    return AssetInsights(
        asset=metrics.asset,
        trading_notes=notes,
        risk_assessment=risk,
        execution_recommendations=recommendations,
        market_context=FALLBACK_MARKET_CONTEXT,
    )


def fallback_text(metrics: InsightMetrics) -> str:
    insights = build_fallback_insights(metrics)
    return (
        f"{'; '.join(insights.trading_notes)}; "
        f"Risk: {insights.risk_assessment}; "
        f"Recommendations: {'; '.join(insights.execution_recommendations)}"
    )


def fallback_portfolio_summary(overview: StrategyOverview,
                               market_conditions: str = "Not specified") -> str:
    """Portfolio paragraph built from counts and averages only."""
    return (
        f"Portfolio Analysis: {overview.profitable_count} profitable strategies out of "
        f"{overview.total_strategies} total ({overview.profitable_ratio * 100:.1f}% success rate). "
        f"Average return: {overview.avg_return * 100:.1f}%, "
        f"Average Sharpe: {overview.avg_sharpe:.2f}, "
        f"Average win rate: {overview.avg_win_rate * 100:.1f}%. "
        f"Market conditions: {market_conditions}. "
        "Top performers show strong momentum characteristics."
    )


class OfflineInsightProvider(TextInsightProvider):
    """Insight provider that never touches the network."""

    name = "offline"

    def summarize(self, metrics: InsightMetrics) -> str:
        return fallback_text(metrics)
