"""
Series alignment onto a shared trading calendar.

Every asset and the baseline must be evaluated on the same dates. Assets with
too little raw history are dropped before intersecting so that one short
series cannot truncate the calendar for everyone else.
"""

from collections.abc import Mapping
from datetime import date
from typing import Optional

from ..errors import InsufficientHistoryError, MissingDataError
from ..logging import get_backtest_logger
from ..logging.config import log_asset_exclusion
from .models import AlignedSeries, AlignedUniverse, PriceSeries

logger = get_backtest_logger(__name__)


def intersect_dates(series: list[PriceSeries]) -> list[date]:
    """Sorted dates present in every given series (empty for no series)."""
    if not series:
        return []

    common = set(series[0].dates)
    for s in series[1:]:
        common &= set(s.dates)
    return sorted(common)


def _partition_by_history(
    series: Mapping[str, PriceSeries],
    baseline_name: str,
    min_history: int,
) -> tuple[PriceSeries, dict[str, PriceSeries], dict[str, str]]:
    if baseline_name not in series:
        raise MissingDataError(
            f"Baseline series '{baseline_name}' not provided",
            data_type="baseline",
            context={"available": sorted(series)},
        )

    baseline = series[baseline_name]
    if len(baseline) < min_history:
        raise InsufficientHistoryError(
            f"Baseline {baseline_name} has {len(baseline)} rows, need {min_history}",
            required_count=min_history,
            available_count=len(baseline),
            date_range=(baseline.first_date, baseline.last_date),
            assets=[baseline_name],
        )

    kept: dict[str, PriceSeries] = {}
    excluded: dict[str, str] = {}
    for name in sorted(series):
        if name == baseline_name:
            continue
        rows = len(series[name])
        if rows < min_history:
            reason = f"insufficient history: {rows} rows, need {min_history}"
            excluded[name] = reason
            log_asset_exclusion(logger, name, reason,
                                {"rows": rows, "required": min_history})
            continue
        kept[name] = series[name]

    return baseline, kept, excluded


def align(
    series: Mapping[str, PriceSeries],
    baseline_name: str,
    min_history: int,
) -> list[date]:
    """
    Compute the aligned calendar.

    Args:
        series: Asset name -> series, including the baseline
        baseline_name: Name of the reference series
        min_history: Minimum row count (``ma_long + 10``)

    Returns:
        Sorted dates shared by the baseline and every asset with enough history

    Raises:
        MissingDataError: If the baseline is absent
        InsufficientHistoryError: If the baseline or the intersection is too short
    """
    return list(align_universe(series, baseline_name, min_history).dates)


def align_universe(
    series: Mapping[str, PriceSeries],
    baseline_name: str,
    min_history: int,
    excluded: Optional[Mapping[str, str]] = None,
) -> AlignedUniverse:
    """
    Align the baseline and all eligible assets onto one calendar.

    ``excluded`` carries assets already dropped upstream (e.g. parse
    failures) so they are reported alongside the short-history exclusions.
    """
    baseline, kept, short = _partition_by_history(series, baseline_name, min_history)
    all_excluded = dict(excluded or {})
    all_excluded.update(short)

    dates = intersect_dates([baseline, *kept.values()])
    if len(dates) < min_history:
        raise InsufficientHistoryError(
            f"Aligned calendar has {len(dates)} dates, need {min_history}",
            required_count=min_history,
            available_count=len(dates),
            date_range=(dates[0], dates[-1]) if dates else None,
            assets=[baseline_name, *kept],
        )

    if not kept:
        logger.warning("No assets left after alignment", baseline=baseline_name,
                       excluded=len(all_excluded))

    logger.info(
        "Series aligned",
        baseline=baseline_name,
        assets=len(kept),
        excluded=len(all_excluded),
        days=len(dates),
        start=str(dates[0]),
        end=str(dates[-1]),
    )

    return AlignedUniverse(
        dates=tuple(dates),
        baseline=AlignedSeries.from_series(baseline, dates),
        assets={name: AlignedSeries.from_series(s, dates) for name, s in kept.items()},
        excluded=all_excluded,
    )
