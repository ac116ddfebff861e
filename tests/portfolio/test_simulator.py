"""Tests for the day-by-day portfolio simulation"""

import pytest

from conftest import day, make_baseline_states, make_signal
from rsbt_app.errors import MetricsCalculationError
from rsbt_app.portfolio import effective_weight, simulate_portfolio


def _dates(n):
    return [day(i) for i in range(n)]


class TestEffectiveWeight:

    def test_holds_prior_weight(self):
        prev = make_signal(0, 100.0, raw_weight=0.5, stop_level=90.0)
        today = make_signal(1, 95.0)
        assert effective_weight(prev, today) == 0.5

    def test_stop_breach_zeroes_weight(self):
        prev = make_signal(0, 100.0, raw_weight=1.0, stop_level=90.0)
        today = make_signal(1, 89.99)
        assert effective_weight(prev, today) == 0.0

    def test_close_at_stop_is_not_a_breach(self):
        prev = make_signal(0, 100.0, raw_weight=1.0, stop_level=90.0)
        today = make_signal(1, 90.0)
        assert effective_weight(prev, today) == 1.0

    def test_short_weight_clipped(self):
        prev = make_signal(0, 100.0, raw_weight=-1.0)
        assert effective_weight(prev, make_signal(1, 80.0)) == 0.0


class TestSimulatePortfolio:

    def test_starts_at_one(self):
        signals = {"A": [make_signal(0, 100.0), make_signal(1, 110.0)]}
        states = simulate_portfolio(_dates(2), signals, make_baseline_states([1.0, 1.0]), 0.0)

        assert states[0].equity == 1.0
        assert states[0].daily_return == 0.0
        assert states[0].active_position_count == 0

    def test_weights_normalized_across_longs(self):
        signals = {
            "A": [make_signal(0, 100.0, raw_weight=1.0), make_signal(1, 104.0)],
            "B": [make_signal(0, 100.0, raw_weight=0.5), make_signal(1, 102.0)],
        }
        states = simulate_portfolio(_dates(2), signals, make_baseline_states([1.0, 1.0]), 0.0)

        # 2/3 * 4% + 1/3 * 2%
        assert states[1].daily_return == pytest.approx(0.04 * 2 / 3 + 0.02 / 3)
        assert states[1].equity == pytest.approx(1.0 + 0.04 * 2 / 3 + 0.02 / 3)
        assert states[1].active_position_count == 2
        assert sum(states[1].weights.values()) == pytest.approx(1.0)

    def test_single_half_weight_is_fully_invested(self):
        signals = {"A": [make_signal(0, 100.0, raw_weight=0.5), make_signal(1, 110.0)]}
        states = simulate_portfolio(_dates(2), signals, make_baseline_states([1.0, 1.0]), 0.0)
        assert states[1].daily_return == pytest.approx(0.10)

    def test_stop_out_skips_the_day(self):
        signals = {
            "A": [make_signal(0, 100.0, raw_weight=1.0, stop_level=95.0),
                  make_signal(1, 94.0)],
        }
        states = simulate_portfolio(_dates(2), signals, make_baseline_states([1.0, 1.0]), 0.0)

        assert states[1].daily_return == 0.0
        assert states[1].equity == 1.0
        assert states[1].active_position_count == 0

    def test_shorts_never_held(self):
        signals = {
            "A": [make_signal(0, 100.0, raw_weight=-1.0), make_signal(1, 50.0)],
        }
        states = simulate_portfolio(_dates(2), signals, make_baseline_states([1.0, 1.0]), 0.0)
        assert states[1].equity == 1.0

    def test_hedge_after_bear_day(self):
        signals = {"A": [make_signal(0, 100.0), make_signal(1, 100.0)]}
        baseline = make_baseline_states([100.0, 95.0], bear=[True, False])

        states = simulate_portfolio(_dates(2), signals, baseline, 0.3)

        assert states[1].hedge_return == pytest.approx(0.015)
        assert states[1].daily_return == pytest.approx(0.015)
        assert states[1].equity == pytest.approx(1.015)

    def test_hedge_uses_prior_regime(self):
        signals = {"A": [make_signal(i, 100.0) for i in range(2)]}
        # bear only on the last day: nothing to hedge yet
        baseline = make_baseline_states([100.0, 95.0], bear=[False, True])

        states = simulate_portfolio(_dates(2), signals, baseline, 0.3)
        assert states[1].hedge_return == 0.0

    def test_no_hedge_when_weight_zero(self):
        signals = {"A": [make_signal(i, 100.0) for i in range(2)]}
        baseline = make_baseline_states([100.0, 95.0], bear=[True, True])
        states = simulate_portfolio(_dates(2), signals, baseline, 0.0)
        assert states[1].equity == 1.0

    def test_equity_compounds_on_rising_longs(self):
        n = 10
        prices = [100.0 * 1.01 ** i for i in range(n)]
        signals = {"A": [make_signal(i, p, raw_weight=1.0) for i, p in enumerate(prices)]}
        states = simulate_portfolio(_dates(n), signals, make_baseline_states([1.0] * n), 0.0)

        equities = [s.equity for s in states]
        assert equities == sorted(equities)
        assert equities[-1] == pytest.approx(1.01 ** (n - 1))

    def test_length_mismatch(self):
        signals = {"A": [make_signal(0, 100.0)]}
        with pytest.raises(MetricsCalculationError):
            simulate_portfolio(_dates(2), signals, make_baseline_states([1.0, 1.0]), 0.0)

    def test_empty_calendar(self):
        assert simulate_portfolio([], {}, [], 0.3) == []
