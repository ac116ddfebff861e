"""Tests for equity-curve summary metrics"""

import math

import pytest

from conftest import day
from rsbt_app.analysis import summarize_equity
from rsbt_app.portfolio import PortfolioState


def _states(returns):
    states = []
    equity = 1.0
    for i, r in enumerate(returns):
        equity *= 1.0 + r
        states.append(PortfolioState(date=day(i), equity=equity, daily_return=r,
                                     active_position_count=1 if r else 0))
    return states


class TestSummarizeEquity:

    def test_basic_curve(self):
        metrics = summarize_equity(_states([0.0, 0.1, -0.05, 0.0]))

        assert metrics.days == 4
        assert metrics.total_return == pytest.approx(1.1 * 0.95 - 1.0)
        assert metrics.max_drawdown == pytest.approx(0.05)
        # flat days are ignored
        assert metrics.win_rate == pytest.approx(0.5)

    def test_cagr_uses_calendar_years(self):
        states = _states([0.0] + [0.001] * 364)
        metrics = summarize_equity(states, periods_per_year=365.0)
        assert metrics.cagr == pytest.approx(states[-1].equity - 1.0)

    def test_sharpe_annualized(self):
        returns = [0.0, 0.02, -0.01, 0.03]
        metrics = summarize_equity(_states(returns), periods_per_year=365.25)

        active = returns[1:]
        mean = sum(active) / 3
        sd = math.sqrt(sum((r - mean) ** 2 for r in active) / 2)
        assert metrics.sharpe_annualized == pytest.approx(mean / sd * math.sqrt(365.25))

    def test_flat_curve(self):
        metrics = summarize_equity(_states([0.0] * 5))
        assert metrics.total_return == 0.0
        assert metrics.sharpe_annualized == 0.0
        assert metrics.win_rate == 0.0

    def test_wiped_out_equity(self):
        metrics = summarize_equity(_states([0.0, -1.0]))
        assert metrics.cagr == -1.0

    def test_empty(self):
        assert summarize_equity([]).days == 0

    def test_summary_lines(self):
        lines = summarize_equity(_states([0.0, 0.1])).summary_lines()
        assert lines[0] == "Days: 2"
        assert "Total Return: 10.00%" in lines
