"""
Signal Engine: per-asset trend, momentum and relative-strength signals.

For every aligned date the engine scores three boolean conditions, maps the
score to a raw directional weight, and derives a stop-loss level. All
indicators are computed over the full aligned calendar before the daily pass.
"""

from collections.abc import Sequence
from datetime import date
from typing import Optional

from ..config import StrategyParams
from ..data.models import AlignedSeries
from ..errors import MetricsCalculationError
from ..logging import get_backtest_logger
from ..metrics import daily_returns, rolling_atr, rolling_mean, rolling_std
from .models import BaselineState, DailySignal

logger = get_backtest_logger(__name__)


def _greater(a: Optional[float], b: Optional[float]) -> bool:
    return a is not None and b is not None and a > b


def _less(a: Optional[float], b: Optional[float]) -> bool:
    return a is not None and b is not None and a < b


def classify_weight(
    score: int,
    rs_bull: bool,
    fully_bearish: bool,
    min_signals: int,
    short_alts: bool,
) -> float:
    """
    Map a signal score to a raw directional weight.

    1.0 for a full 3/3 score, 0.5 when at least ``min_signals`` agree and
    relative strength is one of them, -1.0 on a strictly bearish 3/3 when
    shorting is enabled, otherwise flat.
    """
    if score == 3:
        return 1.0
    if score >= min_signals and rs_bull:
        return 0.5
    if short_alts and fully_bearish:
        return -1.0
    return 0.0


def _check_lengths(dates: Sequence[date], *series: AlignedSeries) -> None:
    for s in series:
        if len(s) != len(dates):
            raise MetricsCalculationError(
                f"{s.name}: {len(s)} values for {len(dates)} aligned dates",
                metric_name="signals",
                calculation_input={"asset": s.name, "values": len(s), "dates": len(dates)},
            )


def compute_signals(
    dates: Sequence[date],
    asset: AlignedSeries,
    baseline: AlignedSeries,
    params: StrategyParams,
) -> list[DailySignal]:
    """
    Compute the daily signal history of one asset.

    Args:
        dates: Aligned calendar
        asset: Asset series on that calendar
        baseline: Baseline series on that calendar
        params: Strategy parameters

    Returns:
        One DailySignal per aligned date
    """
    _check_lengths(dates, asset, baseline)

    close = list(asset.close)
    ma_s = rolling_mean(close, params.ma_short)
    ma_l = rolling_mean(close, params.ma_long)

    rs = [c / b for c, b in zip(close, baseline.close)]
    rs_ma_s = rolling_mean(rs, params.ma_short)
    rs_ma_l = rolling_mean(rs, params.ma_long)

    atr = rolling_atr(asset.high, asset.low, close, params.stop_lookback)
    ret_std = rolling_std(daily_returns(close), params.stop_lookback)

    signals = []
    for i, day in enumerate(dates):
        trend_bull = _greater(close[i], ma_l[i])
        mom_bull = _greater(ma_s[i], ma_l[i])
        rs_bull = _greater(rs_ma_s[i], rs_ma_l[i])
        score = int(trend_bull) + int(mom_bull) + int(rs_bull)

        fully_bearish = (
            _less(close[i], ma_l[i])
            and _less(ma_s[i], ma_l[i])
            and _less(rs_ma_s[i], rs_ma_l[i])
        )
        raw_weight = classify_weight(score, rs_bull, fully_bearish,
                                     params.min_signals, params.short_alts)

        # ATR stop uses today's ATR; the volatility fallback uses yesterday's std
        stop_level = None
        if atr[i] is not None and atr[i] > 0:
            stop_level = close[i] - params.atr_mult * atr[i]
        elif i > 0 and ret_std[i - 1] is not None:
            stop_level = close[i] * (1.0 - params.vol_mult * ret_std[i - 1])

        signals.append(DailySignal(
            date=day,
            price=close[i],
            ma_short=ma_s[i],
            ma_long=ma_l[i],
            rs=rs[i],
            rs_ma_short=rs_ma_s[i],
            rs_ma_long=rs_ma_l[i],
            trend_bull=trend_bull,
            mom_bull=mom_bull,
            rs_bull=rs_bull,
            score=score,
            raw_weight=raw_weight,
            stop_level=stop_level,
        ))

    logger.debug(
        "Signals computed",
        asset=asset.name,
        days=len(signals),
        long_days=sum(1 for s in signals if s.raw_weight > 0),
        short_days=sum(1 for s in signals if s.raw_weight < 0),
    )
    return signals


def compute_baseline_states(
    dates: Sequence[date],
    baseline: AlignedSeries,
    params: StrategyParams,
) -> list[BaselineState]:
    """
    Baseline regime per date.

    The market is bear when the close is below its long MA and the short MA
    is below the long MA; undefined MAs never count as bear.
    """
    _check_lengths(dates, baseline)

    close = list(baseline.close)
    ma_s = rolling_mean(close, params.ma_short)
    ma_l = rolling_mean(close, params.ma_long)
    returns = daily_returns(close)

    return [
        BaselineState(
            date=day,
            close=close[i],
            ma_short=ma_s[i],
            ma_long=ma_l[i],
            bear=_less(close[i], ma_l[i]) and _less(ma_s[i], ma_l[i]),
            daily_return=returns[i],
        )
        for i, day in enumerate(dates)
    ]
