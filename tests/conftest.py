"""Pytest configuration and shared fixtures."""

from datetime import date, timedelta
from typing import Optional

import pytest

from rsbt_app.config import StrategyParams
from rsbt_app.data.models import AlignedSeries, PriceBar, PriceSeries
from rsbt_app.signals.models import BaselineState, DailySignal

START = date(2024, 1, 1)


def day(i: int) -> date:
    return START + timedelta(days=i)


def make_series(name: str, closes: list[float], start: int = 0,
                highs: Optional[list[float]] = None,
                lows: Optional[list[float]] = None) -> PriceSeries:
    """PriceSeries on consecutive days starting at day(start)."""
    bars = []
    for i, close in enumerate(closes):
        bars.append(PriceBar(
            date=day(start + i),
            close=close,
            high=highs[i] if highs else None,
            low=lows[i] if lows else None,
        ))
    return PriceSeries(name=name, bars=tuple(bars))


def make_aligned(name: str, closes: list[float],
                 highs: Optional[list[float]] = None,
                 lows: Optional[list[float]] = None) -> AlignedSeries:
    n = len(closes)
    return AlignedSeries(
        name=name,
        dates=tuple(day(i) for i in range(n)),
        close=tuple(closes),
        high=tuple(highs) if highs else (None,) * n,
        low=tuple(lows) if lows else (None,) * n,
    )


def make_signal(i: int, price: float, raw_weight: float = 0.0,
                stop_level: Optional[float] = None, score: int = 0,
                ma_short: Optional[float] = None, ma_long: Optional[float] = None,
                rs_ma_short: Optional[float] = None,
                rs_ma_long: Optional[float] = None) -> DailySignal:
    return DailySignal(
        date=day(i),
        price=price,
        ma_short=ma_short,
        ma_long=ma_long,
        rs=1.0,
        rs_ma_short=rs_ma_short,
        rs_ma_long=rs_ma_long,
        trend_bull=False,
        mom_bull=False,
        rs_bull=False,
        score=score,
        raw_weight=raw_weight,
        stop_level=stop_level,
    )


def make_baseline_states(closes: list[float], bear: Optional[list[bool]] = None) -> list[BaselineState]:
    states = []
    for i, close in enumerate(closes):
        ret = 0.0 if i == 0 else (close - closes[i - 1]) / closes[i - 1]
        states.append(BaselineState(
            date=day(i),
            close=close,
            ma_short=None,
            ma_long=None,
            bear=bear[i] if bear else False,
            daily_return=ret,
        ))
    return states


@pytest.fixture
def scenario_params() -> StrategyParams:
    """Parameters of the 40-day synthetic scenario."""
    return StrategyParams(ma_short=3, ma_long=7, min_signals=2, btc_hedge=0.0)


@pytest.fixture
def scenario_series() -> dict[str, PriceSeries]:
    """
    40 days: baseline rising slowly, RISE outpacing it, FLAT constant.
    """
    n = 40
    return {
        "BTC": make_series("BTC", [100.0 * 1.001 ** i for i in range(n)]),
        "RISE": make_series("RISE", [10.0 * 1.02 ** i for i in range(n)]),
        "FLAT": make_series("FLAT", [50.0] * n),
    }
