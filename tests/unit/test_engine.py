"""Unit tests for the backtest engine coordinator."""

from unittest.mock import Mock

import pytest

from conftest import make_series
from rsbt_app.config import load_config
from rsbt_app.engine import BacktestEngine
from rsbt_app.errors import InsufficientHistoryError, MissingDataError
from rsbt_app.insights import OfflineInsightProvider, TextInsightProvider, fallback_portfolio_summary


class RecordingProvider(TextInsightProvider):
    name = "recording"

    def __init__(self):
        self.portfolio_calls = []

    def summarize(self, metrics):
        return f"notes for {metrics.asset}"

    def summarize_portfolio(self, overview, top_performers=(), market_conditions="Not specified"):
        self.portfolio_calls.append((overview, list(top_performers), market_conditions))
        return "portfolio view"


@pytest.fixture
def engine(tmp_path):
    config = load_config(tmp_path, {"strategy": {"ma_short": 3, "ma_long": 7, "btc_hedge": 0.0}})
    return BacktestEngine(config)


class TestBacktestEngine:

    def test_default_provider_is_offline(self):
        assert isinstance(BacktestEngine().insight_provider, OfflineInsightProvider)

    def test_missing_baseline(self, engine):
        with pytest.raises(MissingDataError):
            engine.run({"ETH": make_series("ETH", [1.0] * 30)})

    def test_too_short_calendar(self, engine):
        with pytest.raises(InsufficientHistoryError):
            engine.run({"BTC": make_series("BTC", [1.0] * 10)})

    def test_excluded_assets_reported(self, engine, scenario_series):
        series = dict(scenario_series)
        series["NEW"] = make_series("NEW", [1.0] * 5)

        result = engine.run(series, excluded={"BAD": "parse error"})

        assert set(result.excluded) == {"BAD", "NEW"}
        assert sorted(result.signals) == ["FLAT", "RISE"]
        assert [a.asset for a in result.analyses] == ["FLAT", "RISE"]

    def test_result_shapes(self, engine, scenario_series):
        result = engine.run(scenario_series)

        assert result.baseline == "BTC"
        assert len(result.dates) == 40
        assert len(result.portfolio) == 40
        assert len(result.baseline_states) == 40
        assert all(len(s) == 40 for s in result.signals.values())
        assert result.metrics.days == 40

    def test_top_performers(self, engine, scenario_series):
        result = engine.run(scenario_series)
        top = result.top_performers()
        assert [asset for asset, _ in top] == ["RISE"]

    def test_portfolio_summary_delegates_to_provider(self, tmp_path, scenario_series):
        provider = RecordingProvider()
        config = load_config(tmp_path, {"strategy": {"btc_hedge": 0.0}})
        engine = BacktestEngine(config, insight_provider=provider)
        result = engine.run(scenario_series)

        assert engine.portfolio_summary(result, "Bullish") == "portfolio view"
        overview, top, conditions = provider.portfolio_calls[0]
        assert overview.total_strategies == 2
        assert top[0][0] == "RISE"
        assert conditions == "Bullish"

    def test_portfolio_summary_survives_provider_failure(self, tmp_path, scenario_series):
        provider = RecordingProvider()
        provider.summarize_portfolio = Mock(side_effect=RuntimeError("connection reset"))
        config = load_config(tmp_path, {"strategy": {"btc_hedge": 0.0}})
        engine = BacktestEngine(config, insight_provider=provider)
        result = engine.run(scenario_series)

        text = engine.portfolio_summary(result, "Choppy")

        assert text == fallback_portfolio_summary(result.overview, "Choppy")
        provider.summarize_portfolio.assert_called_once()
