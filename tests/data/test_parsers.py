"""Tests for OHLC row parsing into PriceSeries."""

from datetime import date

import orjson
import pytest

from rsbt_app.data.models import PriceBar, PriceSeries
from rsbt_app.data.parsers import (
    load_price_directory,
    parse_ohlc_candles_payload,
    parse_ohlc_csv,
    parse_ohlc_rows,
)
from rsbt_app.errors import DataQualityError, MalformedInputSeriesError


class TestPriceSeriesModel:
    """Test PriceBar and PriceSeries validation."""

    def test_duplicate_dates_rejected(self):
        bars = [PriceBar(date(2024, 1, 1), 1.0), PriceBar(date(2024, 1, 1), 2.0)]
        with pytest.raises(MalformedInputSeriesError) as exc_info:
            PriceSeries("SOL", bars)
        assert exc_info.value.asset == "SOL"

    def test_unordered_dates_rejected(self):
        bars = [PriceBar(date(2024, 1, 2), 1.0), PriceBar(date(2024, 1, 1), 2.0)]
        with pytest.raises(MalformedInputSeriesError):
            PriceSeries("SOL", bars)

    def test_list_normalized_to_tuple(self):
        series = PriceSeries("SOL", [PriceBar(date(2024, 1, 1), 1.0)])
        assert isinstance(series.bars, tuple)
        assert series.first_date == series.last_date == date(2024, 1, 1)

    @pytest.mark.parametrize("close", [0.0, -3.0, float("nan"), float("inf")])
    def test_bar_close_must_be_positive_and_finite(self, close):
        with pytest.raises(MalformedInputSeriesError):
            PriceBar(date(2024, 1, 1), close)


class TestParseRows:

    def test_valid_rows(self):
        rows = [
            {"date": "2024-01-01", "open": "1", "high": "2", "low": "0.5", "close": "1.5"},
            {"date": "2024-01-02", "open": "", "high": "", "low": "", "close": "1.7"},
        ]
        series = parse_ohlc_rows(rows, "ETH")

        assert series.name == "ETH"
        assert len(series) == 2
        assert series.bars[0].high == 2.0
        assert series.bars[1].high is None
        assert series.bars[1].close == 1.7

    def test_unparsable_close_reports_row(self):
        rows = [
            {"date": "2024-01-01", "close": "1.5"},
            {"date": "2024-01-02", "close": "abc"},
        ]
        with pytest.raises(MalformedInputSeriesError) as exc_info:
            parse_ohlc_rows(rows, "ETH")

        error = exc_info.value
        assert error.asset == "ETH"
        assert error.row_number == 2
        assert error.recoverable is True
        assert isinstance(error, DataQualityError)

    def test_non_positive_close_rejected(self):
        with pytest.raises(MalformedInputSeriesError):
            parse_ohlc_rows([{"date": "2024-01-01", "close": "0"}], "ETH")

    def test_bad_date_rejected(self):
        with pytest.raises(MalformedInputSeriesError):
            parse_ohlc_rows([{"date": "01/02/2024", "close": "1"}], "ETH")


class TestParseCsv:

    def test_name_defaults_to_file_stem(self, tmp_path):
        path = tmp_path / "SOL.csv"
        path.write_text(
            "date,open,high,low,close\n"
            "2024-01-01,10,11,9,10.5\n"
            "2024-01-02,10.5,12,10,11.5\n"
        )
        series = parse_ohlc_csv(path)

        assert series.name == "SOL"
        assert [b.close for b in series.bars] == [10.5, 11.5]

    def test_close_only_file(self, tmp_path):
        path = tmp_path / "BTC.csv"
        path.write_text("date,close\n2024-01-01,42000\n")
        series = parse_ohlc_csv(path)
        assert series.bars[0].high is None

    def test_missing_file(self, tmp_path):
        with pytest.raises(MalformedInputSeriesError):
            parse_ohlc_csv(tmp_path / "NOPE.csv")


class TestParseCandlesPayload:
    """Raw [ts_ms, o, h, l, c] candles normalize to one bar per UTC date."""

    DAY1 = 1704067200000  # 2024-01-01T00:00:00Z
    HOUR = 3600 * 1000

    def test_last_candle_of_day_wins(self):
        payload = orjson.dumps([
            [self.DAY1 + 8 * self.HOUR, 1, 2, 0.5, 1.8],
            [self.DAY1, 1, 1.5, 0.9, 1.2],
            [self.DAY1 + 24 * self.HOUR, 2, 3, 1.5, 2.5],
        ])
        series = parse_ohlc_candles_payload(payload, "ARB")

        assert series.dates == [date(2024, 1, 1), date(2024, 1, 2)]
        assert series.bars[0].close == 1.8
        assert series.bars[0].high == 2.0
        assert series.bars[1].close == 2.5

    def test_accepts_decoded_list(self):
        series = parse_ohlc_candles_payload([[self.DAY1, 1, 1, 1, 1]], "ARB")
        assert len(series) == 1

    def test_invalid_json(self):
        with pytest.raises(MalformedInputSeriesError):
            parse_ohlc_candles_payload(b"{not json", "ARB")

    def test_short_candle(self):
        with pytest.raises(MalformedInputSeriesError) as exc_info:
            parse_ohlc_candles_payload([[self.DAY1, 1, 2]], "ARB")
        assert exc_info.value.row_number == 1

    @pytest.mark.parametrize("timestamp", [float("nan"), 1e30])
    def test_unrepresentable_timestamp(self, timestamp):
        with pytest.raises(MalformedInputSeriesError) as exc_info:
            parse_ohlc_candles_payload([[self.DAY1, 1, 1, 1, 1], [timestamp, 1, 2, 0.5, 1.5]], "ARB")
        assert exc_info.value.asset == "ARB"
        assert exc_info.value.row_number == 2


class TestLoadPriceDirectory:

    def test_skips_artifacts_and_reports_failures(self, tmp_path):
        (tmp_path / "BTC.csv").write_text("date,close\n2024-01-01,1\n")
        (tmp_path / "BAD.csv").write_text("date,close\n2024-01-01,oops\n")
        (tmp_path / "signals_BTC.csv").write_text("date,close\n")
        (tmp_path / "equity_curve.csv").write_text("date,equity\n")

        series, failures = load_price_directory(tmp_path)

        assert set(series) == {"BTC"}
        assert set(failures) == {"BAD"}
        assert "BAD" in failures["BAD"]
