"""
Canonical data models for daily price series.

This module defines immutable data structures for the raw per-asset series and
for the series re-indexed onto the shared (aligned) trading calendar.
"""

import math
from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from ..errors import MalformedInputSeriesError


@dataclass(frozen=True)
class PriceBar:
    """One daily OHLC row; high/low/open may be absent."""
    date: date
    close: float
    high: Optional[float] = None
    low: Optional[float] = None
    open: Optional[float] = None

    def __post_init__(self):
        if not isinstance(self.close, (int, float)) or not math.isfinite(self.close) or self.close <= 0:
            raise MalformedInputSeriesError(
                f"close on {self.date} must be a positive finite number, got {self.close!r}",
                raw_data=str(self.close),
            )


@dataclass(frozen=True)
class PriceSeries:
    """Date-ordered daily bars for one asset."""
    name: str
    bars: tuple[PriceBar, ...]

    def __post_init__(self):
        # Normalize lists passed by callers into an immutable tuple
        if not isinstance(self.bars, tuple):
            object.__setattr__(self, "bars", tuple(self.bars))

        for i in range(1, len(self.bars)):
            if self.bars[i].date <= self.bars[i - 1].date:
                raise MalformedInputSeriesError(
                    f"{self.name}: dates must be strictly increasing "
                    f"({self.bars[i - 1].date} then {self.bars[i].date})",
                    asset=self.name,
                    row_number=i,
                )

    def __len__(self) -> int:
        return len(self.bars)

    @property
    def dates(self) -> list[date]:
        return [bar.date for bar in self.bars]

    @property
    def first_date(self) -> Optional[date]:
        return self.bars[0].date if self.bars else None

    @property
    def last_date(self) -> Optional[date]:
        return self.bars[-1].date if self.bars else None

    def bars_by_date(self) -> dict[date, PriceBar]:
        """Index bars by date."""
        return {bar.date: bar for bar in self.bars}


@dataclass(frozen=True)
class AlignedSeries:
    """A price series restricted to the aligned calendar."""
    name: str
    dates: tuple[date, ...]
    close: tuple[float, ...]
    high: tuple[Optional[float], ...]
    low: tuple[Optional[float], ...]

    def __len__(self) -> int:
        return len(self.dates)

    @classmethod
    def from_series(cls, series: PriceSeries, dates: list[date]) -> "AlignedSeries":
        """Project a series onto dates that are all present in it."""
        by_date = series.bars_by_date()
        bars = [by_date[d] for d in dates]
        return cls(
            name=series.name,
            dates=tuple(dates),
            close=tuple(bar.close for bar in bars),
            high=tuple(bar.high for bar in bars),
            low=tuple(bar.low for bar in bars),
        )


@dataclass(frozen=True)
class AlignedUniverse:
    """Baseline and assets sharing one trading calendar."""
    dates: tuple[date, ...]
    baseline: AlignedSeries
    assets: dict[str, AlignedSeries]
    excluded: dict[str, str] = field(default_factory=dict)  # asset -> reason

    @property
    def asset_names(self) -> list[str]:
        return sorted(self.assets)
