"""
Playbook Builder: turns a signal history and its statistics into a TradePlan.

The builder is pure apart from the injected insight provider, whose failures
are absorbed by falling back to the offline notes.
"""

from collections.abc import Mapping, Sequence
from typing import Optional

from ..analysis.ranking import profitable_strategies, rank_by_total_return
from ..analysis.statistics import StrategyStatistics
from ..config import PlaybookParams
from ..insights import InsightMetrics, OfflineInsightProvider, TextInsightProvider
from ..logging import get_logger
from ..signals.models import DailySignal
from .models import (
    BacktestStats,
    ComputedValues,
    EntryRules,
    ExecutionMode,
    ExitRules,
    PositionSizing,
    SignalConditions,
    TradePlan,
)
from .sizing import compute_values, derive_risk_cap, determine_conviction, determine_execution_mode

logger = get_logger(__name__)


def insight_metrics(asset: str, stats: StrategyStatistics,
                    values: ComputedValues) -> InsightMetrics:
    """Metrics handed to the narrative provider (percent units)."""
    return InsightMetrics(
        asset=asset,
        total_return_pct=stats.total_return * 100.0,
        sharpe_ratio=stats.sharpe_ratio,
        win_rate_pct=stats.win_rate * 100.0,
        max_drawdown_pct=stats.max_drawdown * 100.0,
        trading_days=stats.trading_days,
        profit_factor=stats.profit_factor,
        current_price=values.current_price,
        ma_long=values.ma_long,
        ma_short=values.ma_short,
        rs_ma_short=values.rs_ma_short,
        rs_ma_long=values.rs_ma_long,
        atr_14=values.atr_14,
        volatility=values.volatility,
    )


def _notes(provider: TextInsightProvider, metrics: InsightMetrics) -> str:
    try:
        return provider.summarize(metrics)
    except Exception as e:
        # Narrative text is optional; any provider failure degrades to offline notes
        logger.warning(
            "Insight provider failed, using offline notes",
            asset=metrics.asset,
            provider=getattr(provider, "name", type(provider).__name__),
            error=str(e),
        )
        return OfflineInsightProvider().summarize(metrics)


def _entry_rules(mode: ExecutionMode, min_signals: int) -> EntryRules:
    if mode.pullback_to_ma:
        alt = (f"Alt entry: Limit buy at the long MA if price is extended "
               f"(>{mode.extended_threshold * 100:.0f}% above it) on signal day.")
        alternative = "Staggered entry: 50% at signal close, 50% at long-MA limit if extended."
    else:
        alt = "Use signal-at-close execution only."
        alternative = "Market-on-close entry preferred due to liquidity constraints."

    return EntryRules(
        primary=f"Go long EOD when 3/3 signals (trend + momentum + RS). {alt}",
        alternative=alternative,
        signal_conditions=SignalConditions(
            trend="close > MA_long",
            momentum="MA_short > MA_long",
            rs="RS_MA_short > RS_MA_long",
            full_weight_condition="3/3 signals = 1.00 raw weight",
            half_weight_condition=f">={min_signals}/3 AND RS bullish = 0.50 raw weight",
        ),
    )


def _exit_rules(params: PlaybookParams) -> ExitRules:
    return ExitRules(
        profit_taking=(f"Scale {params.scale_out_fraction * 100:.0f}% at "
                       f"+{params.target_r_multiple:g}R (R = initial risk from entry to stop), "
                       "then trail the rest"),
        stop_loss=f"Initial stop: close - {params.stop_atr_mult:.1f} x ATR14",
        trailing_stop=(f"Ratchet stop to max(prior stop, close - "
                       f"{params.stop_atr_mult:.1f} x ATR14) each day"),
        hard_exit_conditions="Hard exit if close < MA_long or RS flips bearish (RS_MA_short < RS_MA_long)",
    )


def build_playbook(
    signals: Sequence[DailySignal],
    stats: StrategyStatistics,
    portfolio_value: Optional[float] = None,
    *,
    params: Optional[PlaybookParams] = None,
    min_signals: int = 2,
    insight_provider: Optional[TextInsightProvider] = None,
) -> TradePlan:
    """
    Build the playbook for one asset.

    Args:
        signals: Signal history; the latest signal is the last element
        stats: Statistics of the same history
        portfolio_value: Assumed portfolio value (defaults to params)
        params: Playbook parameters
        min_signals: Signal threshold used by the signal engine
        insight_provider: Narrative generator for the notes

    Returns:
        Immutable TradePlan
    """
    params = params or PlaybookParams()
    provider = insight_provider or OfflineInsightProvider()
    asset = stats.asset

    conviction = determine_conviction(stats)
    mode = determine_execution_mode(stats)

    provisional = compute_values(signals, mode, params.provisional_risk_cap, params,
                                 min_signals, portfolio_value)
    risk_cap = derive_risk_cap(stats, provisional, params)
    values = compute_values(signals, mode, risk_cap, params, min_signals, portfolio_value)

    notes = _notes(provider, insight_metrics(asset, stats, values))

    logger.debug("Playbook built", asset=asset, risk_cap=risk_cap,
                 recommended_shares=values.recommended_shares)

    return TradePlan(
        asset=asset,
        entry_rules=_entry_rules(mode, min_signals),
        exit_rules=_exit_rules(params),
        position_sizing=PositionSizing(
            full_weight=1.0,
            half_weight=0.5,
            risk_cap_percent=risk_cap * 100.0,
            risk_calculation=(
                f"R = entry_price - stop_price; units = min(portfolio_value x position cap / "
                f"entry_price, ({risk_cap * 100:.1f}% x portfolio_value) / R). "
                f"Risk per share: ${values.risk_per_share:.2f}, "
                f"Max shares by risk: {values.max_shares_by_risk:.0f}, "
                f"Max shares by position: {values.max_shares_by_position:.0f}, "
                f"Recommended: {values.recommended_shares}"
            ),
        ),
        conviction=conviction,
        execution_mode=mode,
        backtest_stats=BacktestStats(
            total_return_percent=stats.total_return * 100.0,
            sharpe_ratio=stats.sharpe_ratio,
            win_rate_percent=stats.win_rate * 100.0,
            max_drawdown_percent=stats.max_drawdown * 100.0,
            trading_days=stats.trading_days,
            expected_return=(
                f"{stats.total_return * 100:+.2f}%, Sharpe {stats.sharpe_ratio:.2f}, "
                f"Win {stats.win_rate * 100:.1f}%, MaxDD {stats.max_drawdown * 100:.2f}%, "
                f"{stats.trading_days} days"
            ),
        ),
        computed_values=values,
        notes=notes,
    )


def build_top_playbooks(
    analyses: Sequence[StrategyStatistics],
    signals_by_asset: Mapping[str, Sequence[DailySignal]],
    top_n: int = 10,
    *,
    portfolio_value: Optional[float] = None,
    params: Optional[PlaybookParams] = None,
    min_signals: int = 2,
    insight_provider: Optional[TextInsightProvider] = None,
) -> list[TradePlan]:
    """
    Playbooks for the most profitable strategies.

    Profitable strategies are ranked by total return (stable for ties) and
    the first ``top_n`` are built. Ranked assets without signal history are
    skipped, so the list can be shorter than ``top_n`` and positions count
    only the playbooks actually built.
    """
    ranked = rank_by_total_return(profitable_strategies(analyses))[:top_n]

    playbooks = []
    for stats in ranked:
        if stats.asset not in signals_by_asset:
            logger.warning("No signal history for ranked asset", asset=stats.asset)
            continue
        playbooks.append(build_playbook(
            signals_by_asset[stats.asset],
            stats,
            portfolio_value,
            params=params,
            min_signals=min_signals,
            insight_provider=insight_provider,
        ))

    logger.info("Playbooks built", candidates=len(analyses), built=len(playbooks))
    return playbooks
