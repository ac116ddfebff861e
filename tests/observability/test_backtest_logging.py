"""Tests for structured logging of backtest decisions."""

from unittest.mock import Mock, patch

import structlog

from conftest import day, make_baseline_states, make_signal
from rsbt_app.logging import configure_logging, get_backtest_logger
from rsbt_app.logging.config import log_asset_exclusion, log_stop_trigger
from rsbt_app.portfolio import simulate_portfolio


class TestLoggingHelpers:

    def teardown_method(self):
        structlog.reset_defaults()

    def test_backtest_logger_binds_subsystem(self):
        captured = []

        def capture(logger, method_name, event_dict):
            captured.append(dict(event_dict))
            raise structlog.DropEvent

        configure_logging(level="DEBUG", format_json=True, extra_processors=[capture])
        get_backtest_logger("rsbt_app.tests").warning("stop check", asset="SOL")

        assert captured[0]["event"] == "stop check"
        assert captured[0]["asset"] == "SOL"
        assert captured[0]["subsystem"] == "backtest"
        assert captured[0]["level"] == "warning"

    def test_asset_exclusion(self):
        logger = Mock()
        log_asset_exclusion(logger, "NEW", "insufficient history", {"rows": 5})

        logger.bind.assert_called_once_with(asset="NEW", reason="insufficient history",
                                            decision="excluded")
        bound = logger.bind.return_value
        bound.bind.assert_called_once_with(context={"rows": 5})
        bound.bind.return_value.warning.assert_called_once_with("Asset excluded from backtest")

    def test_asset_exclusion_without_context(self):
        logger = Mock()
        log_asset_exclusion(logger, "NEW", "parse error")
        logger.bind.return_value.warning.assert_called_once_with("Asset excluded from backtest")

    def test_stop_trigger(self):
        logger = Mock()
        log_stop_trigger(logger, "SOL", day(3), 94.0, 95.0)
        logger.debug.assert_called_once_with("Stop triggered", asset="SOL",
                                             date="2024-01-04", price=94.0, stop_level=95.0)


class TestSimulatorLogging:

    def test_stop_out_is_logged(self):
        signals = {
            "A": [make_signal(0, 100.0, raw_weight=1.0, stop_level=95.0), make_signal(1, 94.0)],
        }
        with patch("rsbt_app.portfolio.simulator.logger") as mock_logger:
            simulate_portfolio([day(0), day(1)], signals, make_baseline_states([1.0, 1.0]), 0.0)

        mock_logger.debug.assert_called_once_with(
            "Stop triggered", asset="A", date="2024-01-02", price=94.0, stop_level=95.0
        )
        mock_logger.info.assert_called_once()
        assert mock_logger.info.call_args.kwargs["stop_outs"] == 1
