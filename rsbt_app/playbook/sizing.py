"""
Position sizing rules for playbooks.

Each quality metric maps onto a discrete multiplier through fixed
breakpoints. The risk cap is the base risk scaled by the geometric mean of
ten such multipliers and clamped to configured bounds, so no single metric can
dominate the sizing.
"""

import math
from collections.abc import Sequence
from typing import Optional

from ..analysis.statistics import StrategyStatistics
from ..config import PlaybookParams
from ..metrics import annualized_volatility, close_to_close_atr
from ..signals.models import DailySignal
from .models import ComputedValues, Conviction, ExecutionMode

# (threshold, multiplier) pairs, checked in order
SHARPE_TIERS = ((3.0, 1.5), (2.0, 1.3), (1.5, 1.1), (1.0, 1.0), (0.5, 0.8))
DRAWDOWN_TIERS = ((0.02, 1.2), (0.05, 1.0), (0.10, 0.8), (0.20, 0.6))
WIN_RATE_TIERS = ((0.80, 1.2), (0.70, 1.1), (0.60, 1.0), (0.50, 0.9))
VOLATILITY_PCT_TIERS = ((20.0, 1.1), (40.0, 1.0), (60.0, 0.9), (80.0, 0.8))
RETURN_TIERS = ((10.0, 1.1), (50.0, 1.0), (200.0, 0.9), (1000.0, 0.8))  # raw fraction, not percent
TRADING_DAY_TIERS = ((20, 1.1), (15, 1.0), (10, 0.9), (5, 0.8))
PROFIT_FACTOR_TIERS = ((5.0, 1.2), (3.0, 1.1), (2.0, 1.0), (1.5, 0.9), (1.0, 0.8))
RS_SPREAD_TIERS = ((0.1, 1.1), (0.05, 1.0), (0.02, 0.9))
EXTENSION_TIERS = ((1.05, 1.1), (1.10, 1.0), (1.20, 0.9), (1.30, 0.8))
ATR_RATIO_TIERS = ((0.02, 1.1), (0.05, 1.0), (0.10, 0.9), (0.15, 0.8))


def tier_at_least(value: float, tiers: Sequence[tuple[float, float]], default: float) -> float:
    """Multiplier of the first tier whose threshold ``value`` reaches"""
    for threshold, multiplier in tiers:
        if value >= threshold:
            return multiplier
    return default


def tier_at_most(value: float, tiers: Sequence[tuple[float, float]], default: float) -> float:
    """Multiplier of the first tier whose threshold ``value`` does not exceed"""
    for threshold, multiplier in tiers:
        if value <= threshold:
            return multiplier
    return default


def risk_adjustments(stats: StrategyStatistics, values: ComputedValues) -> list[float]:
    """The ten sizing multipliers, in a fixed order."""
    extension = values.current_price / values.ma_long if values.ma_long > 0 else 1.0
    atr_ratio = values.atr_14 / values.current_price if values.current_price > 0 else 0.0

    return [
        tier_at_least(stats.sharpe_ratio, SHARPE_TIERS, 0.6),
        tier_at_most(stats.max_drawdown, DRAWDOWN_TIERS, 0.4),
        tier_at_least(stats.win_rate, WIN_RATE_TIERS, 0.7),
        tier_at_most(values.volatility * 100.0, VOLATILITY_PCT_TIERS, 0.6),
        tier_at_most(stats.total_return, RETURN_TIERS, 0.6),
        tier_at_least(stats.trading_days, TRADING_DAY_TIERS, 0.7),
        tier_at_least(stats.profit_factor, PROFIT_FACTOR_TIERS, 0.6),
        tier_at_least(abs(values.rs_ma_short - values.rs_ma_long), RS_SPREAD_TIERS, 0.8),
        tier_at_most(extension, EXTENSION_TIERS, 0.6),
        tier_at_most(atr_ratio, ATR_RATIO_TIERS, 0.6),
    ]


def derive_risk_cap(stats: StrategyStatistics, values: ComputedValues,
                    params: PlaybookParams) -> float:
    """
    Per-asset risk cap as a fraction of portfolio value.

    Returns:
        base_risk x geometric mean of the adjustments, clamped to
        [risk_cap_floor, risk_cap_ceiling] and rounded to 0.001
    """
    adjustments = risk_adjustments(stats, values)
    combined = math.exp(sum(math.log(a) for a in adjustments) / len(adjustments))
    risk_cap = min(max(params.base_risk * combined, params.risk_cap_floor), params.risk_cap_ceiling)
    # Round half up to three decimals
    return math.floor(risk_cap * 1000.0 + 0.5) / 1000.0


def determine_conviction(stats: StrategyStatistics) -> Conviction:
    """Conviction tier from Sharpe, win rate and drawdown; first match wins."""
    sharpe, win_rate, max_dd = stats.sharpe_ratio, stats.win_rate, stats.max_drawdown

    if sharpe >= 4.0 and win_rate >= 0.95 and max_dd <= 0.01:
        return Conviction(0.95, 0.80, "Very High conviction due to exceptional Sharpe ratio and clean performance")
    if sharpe >= 2.0 and win_rate >= 0.90 and max_dd <= 0.05:
        return Conviction(0.90, 0.75, "High conviction based on strong risk-adjusted returns")
    if sharpe >= 1.5 and win_rate >= 0.85 and max_dd <= 0.10:
        return Conviction(0.85, 0.70, "High conviction with good risk management")
    if sharpe >= 1.0 and win_rate >= 0.80:
        return Conviction(0.80, 0.65, "Medium-High conviction with acceptable risk profile")
    if sharpe >= 0.5 and win_rate >= 0.70:
        return Conviction(0.75, 0.60, "Medium conviction with moderate risk")
    return Conviction(0.70, 0.55, "Lower conviction due to risk concerns")


def execution_confidence(stats: StrategyStatistics) -> float:
    """Mean of five 0-1 reliability factors."""
    factors = [
        1.0 if stats.sharpe_ratio >= 2.0 else 0.5,
        tier_at_least(stats.win_rate, ((0.80, 1.0), (0.60, 0.8)), 0.4),
        tier_at_most(stats.max_drawdown, ((0.05, 1.0), (0.15, 0.7)), 0.3),
        tier_at_least(stats.trading_days, ((15, 1.0), (10, 0.8)), 0.5),
        tier_at_least(stats.profit_factor, ((3.0, 1.0), (2.0, 0.8)), 0.5),
    ]
    return sum(factors) / len(factors)


def determine_execution_mode(stats: StrategyStatistics) -> ExecutionMode:
    """Pullback permission, extension threshold and limit duration."""
    confidence = execution_confidence(stats)

    if stats.max_drawdown <= 0.05 and stats.sharpe_ratio >= 1.5:
        extended_threshold = 0.15
    elif stats.max_drawdown <= 0.10 and stats.sharpe_ratio >= 1.0:
        extended_threshold = 0.10
    else:
        extended_threshold = 0.05

    if confidence >= 0.8:
        duration = 72
    elif confidence >= 0.6:
        duration = 48
    else:
        duration = 24

    return ExecutionMode(
        signal_at_close=True,
        pullback_to_ma=confidence >= 0.7,
        extended_threshold=extended_threshold,
        limit_order_duration_hours=duration,
        confidence=confidence,
    )


def compute_values(
    signals: Sequence[DailySignal],
    execution_mode: ExecutionMode,
    risk_cap: float,
    params: PlaybookParams,
    min_signals: int = 2,
    portfolio_value: Optional[float] = None,
) -> ComputedValues:
    """
    Derive the market snapshot and order parameters from a signal history.

    Args:
        signals: Signal history; the last entry is the latest signal
        execution_mode: Execution settings for the asset
        risk_cap: Risk cap fraction
        params: Playbook parameters
        min_signals: Signal count that qualifies a half-weight setup
        portfolio_value: Overrides params.portfolio_value when given

    Returns:
        ComputedValues (all zero for an empty history)
    """
    if not signals:
        return ComputedValues()

    portfolio = params.portfolio_value if portfolio_value is None else portfolio_value
    latest = signals[-1]
    closes = [s.price for s in signals]

    current = latest.price
    ma_long = latest.ma_long if latest.ma_long is not None else current
    ma_short = latest.ma_short if latest.ma_short is not None else current
    rs_ma_short = latest.rs_ma_short if latest.rs_ma_short is not None else 1.0
    rs_ma_long = latest.rs_ma_long if latest.rs_ma_long is not None else 1.0
    atr = close_to_close_atr(closes, params.atr_period)
    volatility = annualized_volatility(closes, params.volatility_period)

    trend = current > ma_long
    momentum = ma_short > ma_long
    rs = rs_ma_short > rs_ma_long
    all_signals = trend and momentum and rs
    partial = rs and (int(trend) + int(momentum) + int(rs)) >= min_signals

    stop_price = current - params.stop_atr_mult * atr
    risk_per_share = current - stop_price
    if risk_per_share > 0:
        max_by_risk = portfolio * risk_cap / risk_per_share
    else:
        max_by_risk = math.inf
    max_position_fraction = min(1.0, risk_cap / max(0.01, risk_per_share / current))
    max_by_position = portfolio * max_position_fraction / current
    shares = int(math.floor(min(max_by_risk, max_by_position)))
    position_value = shares * current

    profit_target = current + params.target_r_multiple * risk_per_share
    scale_out = int(shares * params.scale_out_fraction)

    is_extended = current > ma_long * (1.0 + execution_mode.extended_threshold)

    if all_signals:
        strength = 1.0
    elif partial:
        strength = 0.5
    else:
        strength = 0.0

    return ComputedValues(
        current_price=current,
        ma_long=ma_long,
        ma_short=ma_short,
        rs_ma_short=rs_ma_short,
        rs_ma_long=rs_ma_long,
        atr_14=atr,
        volatility=volatility,
        trend_signal=trend,
        momentum_signal=momentum,
        rs_signal=rs,
        all_signals=all_signals,
        partial_signals=partial,
        stop_price=stop_price,
        risk_per_share=risk_per_share,
        max_shares_by_risk=max_by_risk,
        max_shares_by_position=max_by_position,
        recommended_shares=shares,
        position_value=position_value,
        position_percent=position_value / portfolio if portfolio else 0.0,
        profit_target=profit_target,
        profit_target_percent=(profit_target / current - 1.0) * 100.0,
        scale_out_shares=scale_out,
        remaining_shares=shares - scale_out,
        scale_out_value=scale_out * profit_target,
        initial_stop=stop_price,
        stop_loss_percent=(1.0 - stop_price / current) * 100.0,
        trailing_stop=stop_price,
        stop_distance_atr=params.stop_atr_mult,
        portfolio_risk=shares * risk_per_share / portfolio if portfolio else 0.0,
        risk_reward_ratio=(profit_target - current) / risk_per_share if risk_per_share > 0 else 0.0,
        max_loss=shares * risk_per_share,
        max_gain=shares * (profit_target - current),
        is_extended=is_extended,
        pullback_price=ma_long,
        extended_percent=(current / ma_long - 1.0) * 100.0 if is_extended else 0.0,
        signal_strength=strength,
    )
