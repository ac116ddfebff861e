"""
Parsers for converting raw daily OHLC rows into PriceSeries objects.

Handles the CSV layout written by the OHLC exporter (date, open, high, low,
close) and raw exchange candle payloads ([ts_ms, open, high, low, close]
arrays), with type conversion and per-row error reporting.
"""

import csv
import math
from collections.abc import Iterable, Mapping
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Any, Optional, Union

import orjson

from ..errors import MalformedInputSeriesError
from .models import PriceBar, PriceSeries

DATE_FORMAT = "%Y-%m-%d"


def _parse_date(value: Any, asset: str, row_number: int) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return datetime.strptime(str(value).strip(), DATE_FORMAT).date()
    except ValueError as e:
        raise MalformedInputSeriesError(
            f"{asset}: invalid date {value!r} on row {row_number}",
            asset=asset,
            row_number=row_number,
            raw_data=str(value),
        ) from e


def _parse_price(value: Any, field_name: str, asset: str, row_number: int,
                 required: bool) -> Optional[float]:
    if value is None or (isinstance(value, str) and not value.strip()):
        if required:
            raise MalformedInputSeriesError(
                f"{asset}: missing {field_name} on row {row_number}",
                asset=asset,
                row_number=row_number,
            )
        return None

    try:
        price = float(value)
    except (TypeError, ValueError) as e:
        raise MalformedInputSeriesError(
            f"{asset}: {field_name} {value!r} is not a number on row {row_number}",
            asset=asset,
            row_number=row_number,
            raw_data=str(value),
        ) from e

    if not math.isfinite(price) or price <= 0:
        raise MalformedInputSeriesError(
            f"{asset}: {field_name} must be a positive finite number on row {row_number}",
            asset=asset,
            row_number=row_number,
            raw_data=str(value),
        )
    return price


def parse_ohlc_rows(rows: Iterable[Mapping[str, Any]], name: str) -> PriceSeries:
    """
    Parse mapping rows with date/close and optional open/high/low keys.

    Args:
        rows: Iterable of row mappings (e.g. csv.DictReader)
        name: Asset name

    Returns:
        Validated PriceSeries

    Raises:
        MalformedInputSeriesError: On any unparsable row or broken date order
    """
    bars = []
    for row_number, row in enumerate(rows, start=1):
        if "date" not in row:
            raise MalformedInputSeriesError(
                f"{name}: row {row_number} has no date column",
                asset=name,
                row_number=row_number,
            )
        bars.append(PriceBar(
            date=_parse_date(row["date"], name, row_number),
            close=_parse_price(row.get("close"), "close", name, row_number, required=True),
            high=_parse_price(row.get("high"), "high", name, row_number, required=False),
            low=_parse_price(row.get("low"), "low", name, row_number, required=False),
            open=_parse_price(row.get("open"), "open", name, row_number, required=False),
        ))

    return PriceSeries(name=name, bars=tuple(bars))


def parse_ohlc_csv(path: Union[str, Path], name: Optional[str] = None) -> PriceSeries:
    """
    Read a daily OHLC CSV file.

    The asset name defaults to the file stem (``SOL.csv`` -> ``SOL``).
    """
    path = Path(path)
    name = name or path.stem

    try:
        with open(path, newline="") as f:
            reader = csv.DictReader(f, skipinitialspace=True)
            rows = [{(k or "").strip(): v for k, v in row.items()} for row in reader]
    except (OSError, UnicodeDecodeError, csv.Error) as e:
        raise MalformedInputSeriesError(
            f"{name}: cannot read {path}: {e}",
            asset=name,
            context={"path": str(path)},
        ) from e

    return parse_ohlc_rows(rows, name)


def parse_ohlc_candles_payload(payload: Union[bytes, str, list], name: str) -> PriceSeries:
    """
    Normalize raw candle arrays into daily bars.

    Expected format (CoinGecko-style OHLC endpoint):
        [[ts_ms, open, high, low, close], ...]

    Candles are sorted by timestamp and grouped by UTC date; the last candle of
    each date becomes that day's bar.
    """
    if isinstance(payload, (bytes, str)):
        try:
            payload = orjson.loads(payload)
        except orjson.JSONDecodeError as e:
            raise MalformedInputSeriesError(
                f"{name}: candle payload is not valid JSON: {e}",
                asset=name,
            ) from e

    if not isinstance(payload, list):
        raise MalformedInputSeriesError(
            f"{name}: candle payload must be a list, got {type(payload).__name__}",
            asset=name,
        )

    candles = []
    for row_number, raw in enumerate(payload, start=1):
        if not isinstance(raw, (list, tuple)) or len(raw) < 5:
            raise MalformedInputSeriesError(
                f"{name}: candle {row_number} must have [ts, open, high, low, close]",
                asset=name,
                row_number=row_number,
                raw_data=str(raw),
            )
        try:
            ts_ms = float(raw[0])
            day = datetime.fromtimestamp(ts_ms / 1000.0, tz=timezone.utc).date()
        except (TypeError, ValueError, OverflowError, OSError) as e:
            raise MalformedInputSeriesError(
                f"{name}: invalid timestamp on candle {row_number}",
                asset=name,
                row_number=row_number,
                raw_data=str(raw[0]),
            ) from e
        candles.append((ts_ms, day, raw, row_number))

    candles.sort(key=lambda c: c[0])

    by_date: dict[date, PriceBar] = {}
    for _, day, raw, row_number in candles:
        # Later candles overwrite earlier ones on the same date
        by_date[day] = PriceBar(
            date=day,
            open=_parse_price(raw[1], "open", name, row_number, required=False),
            high=_parse_price(raw[2], "high", name, row_number, required=False),
            low=_parse_price(raw[3], "low", name, row_number, required=False),
            close=_parse_price(raw[4], "close", name, row_number, required=True),
        )

    return PriceSeries(name=name, bars=tuple(by_date[d] for d in sorted(by_date)))


def load_price_directory(
    directory: Union[str, Path],
) -> tuple[dict[str, PriceSeries], dict[str, str]]:
    """
    Load every ``<ASSET>.csv`` price file in a directory.

    Exported artifacts (``signals_*.csv``, ``equity_curve.csv``) are skipped.
    Files that fail to parse are reported in the second return value
    (asset -> reason) instead of aborting the load.
    """
    directory = Path(directory)
    series: dict[str, PriceSeries] = {}
    failures: dict[str, str] = {}

    for path in sorted(directory.glob("*.csv")):
        if path.stem.startswith("signals_") or path.stem == "equity_curve":
            continue
        try:
            series[path.stem] = parse_ohlc_csv(path)
        except MalformedInputSeriesError as e:
            failures[path.stem] = str(e)

    return series, failures
