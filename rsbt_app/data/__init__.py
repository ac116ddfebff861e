"""
Price series ingestion and alignment.

Handles parsing of daily OHLC rows into validated series and re-indexing of
those series onto the shared trading calendar used by the backtest.
"""

from .aligner import align, align_universe, intersect_dates
from .models import AlignedSeries, AlignedUniverse, PriceBar, PriceSeries
from .parsers import (
    load_price_directory,
    parse_ohlc_candles_payload,
    parse_ohlc_csv,
    parse_ohlc_rows,
)

__all__ = [
    "PriceBar",
    "PriceSeries",
    "AlignedSeries",
    "AlignedUniverse",
    "align",
    "align_universe",
    "intersect_dates",
    "parse_ohlc_rows",
    "parse_ohlc_csv",
    "parse_ohlc_candles_payload",
    "load_price_directory",
]
