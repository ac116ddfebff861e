"""
Portfolio Simulator: day-by-day equity from per-asset signals.

Positions are decided on the prior close and earn today's close-to-close
return. Long weights are normalized across the qualifying assets; shorts are
never held. An optional baseline short hedge is applied on days following a
bear baseline state.
"""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from datetime import date
from types import MappingProxyType

from ..errors import MetricsCalculationError
from ..logging import get_backtest_logger
from ..logging.config import log_stop_trigger
from ..signals.models import BaselineState, DailySignal

logger = get_backtest_logger(__name__)


@dataclass(frozen=True)
class PortfolioState:
    """Portfolio snapshot at the close of one aligned date"""
    date: date
    equity: float
    daily_return: float
    active_position_count: int
    hedge_return: float = 0.0
    weights: Mapping[str, float] = field(default_factory=lambda: MappingProxyType({}))


def _validate_inputs(
    dates: Sequence[date],
    per_asset_signals: Mapping[str, Sequence[DailySignal]],
    baseline_states: Sequence[BaselineState],
) -> None:
    lengths = {name: len(sigs) for name, sigs in per_asset_signals.items()}
    lengths["<baseline>"] = len(baseline_states)
    mismatched = {name: n for name, n in lengths.items() if n != len(dates)}
    if mismatched:
        raise MetricsCalculationError(
            f"Signal lengths do not match the {len(dates)}-day calendar: {mismatched}",
            metric_name="portfolio",
            calculation_input={"dates": len(dates), "lengths": lengths},
        )


def effective_weight(prev: DailySignal, today: DailySignal) -> float:
    """
    Long weight held today from yesterday's signal.

    Zero when today's close breaches yesterday's stop; negative raw weights
    are clipped to zero.
    """
    if prev.stop_level is not None and today.price < prev.stop_level:
        return 0.0
    return max(prev.raw_weight, 0.0)


def simulate_portfolio(
    dates: Sequence[date],
    per_asset_signals: Mapping[str, Sequence[DailySignal]],
    baseline_states: Sequence[BaselineState],
    btc_hedge_weight: float,
) -> list[PortfolioState]:
    """
    Simulate the compounding equity curve.

    Args:
        dates: Aligned calendar
        per_asset_signals: Asset name -> signal history on the calendar
        baseline_states: Baseline regime history on the calendar
        btc_hedge_weight: Size of the baseline short applied after bear days

    Returns:
        One PortfolioState per date, starting at equity 1.0

    Raises:
        MetricsCalculationError: If any history length differs from the calendar
    """
    _validate_inputs(dates, per_asset_signals, baseline_states)
    if not dates:
        return []

    names = sorted(per_asset_signals)
    states = [PortfolioState(date=dates[0], equity=1.0, daily_return=0.0,
                             active_position_count=0)]
    stop_outs = 0

    for i in range(1, len(dates)):
        longs: dict[str, float] = {}
        for name in names:
            sigs = per_asset_signals[name]
            prev, today = sigs[i - 1], sigs[i]
            weight = effective_weight(prev, today)
            if prev.raw_weight > 0 and weight == 0.0:
                stop_outs += 1
                log_stop_trigger(logger, name, today.date, today.price, prev.stop_level)
            if weight > 0:
                longs[name] = weight

        long_sum = sum(longs.values())
        weights = {name: w / long_sum for name, w in longs.items()} if long_sum > 0 else {}

        hedge_return = 0.0
        if btc_hedge_weight > 0 and baseline_states[i - 1].bear:
            hedge_return = -btc_hedge_weight * baseline_states[i].daily_return

        daily_return = hedge_return
        for name, w in weights.items():
            sigs = per_asset_signals[name]
            daily_return += w * (sigs[i].price - sigs[i - 1].price) / sigs[i - 1].price

        states.append(PortfolioState(
            date=dates[i],
            equity=states[-1].equity * (1.0 + daily_return),
            daily_return=daily_return,
            active_position_count=len(weights),
            hedge_return=hedge_return,
            weights=MappingProxyType(weights),
        ))

    logger.info(
        "Portfolio simulated",
        days=len(states),
        assets=len(names),
        final_equity=states[-1].equity,
        stop_outs=stop_outs,
    )
    return states
