"""
Data quality error classifications for price series processing.

These exceptions categorize problems with the input series. Per-asset problems
are recoverable (the asset is excluded); a calendar that is too short after
alignment is fatal to the run.
"""

from typing import Any, Optional


class DataQualityError(Exception):
    """Base class for data quality issues."""

    def __init__(self, message: str, context: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.context = context or {}
        self.recoverable = True


class MissingDataError(DataQualityError):
    """Required data is completely missing."""

    def __init__(self, message: str, data_type: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.data_type = data_type


class MalformedInputSeriesError(DataQualityError):
    """A price series row cannot be parsed or breaks the date ordering."""

    def __init__(self, message: str, asset: Optional[str] = None,
                 row_number: Optional[int] = None, raw_data: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.asset = asset
        self.row_number = row_number
        self.raw_data = raw_data


class InsufficientHistoryError(DataQualityError):
    """Not enough aligned history to run the backtest."""

    def __init__(self, message: str, required_count: Optional[int] = None,
                 available_count: Optional[int] = None,
                 date_range: Optional[tuple] = None,
                 assets: Optional[list[str]] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.required_count = required_count
        self.available_count = available_count
        self.date_range = date_range
        self.assets = assets or []
        # The run cannot continue without a usable calendar
        self.recoverable = False
