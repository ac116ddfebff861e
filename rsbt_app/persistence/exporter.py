"""File export of backtest artifacts and re-import of signal tables."""

import csv
from collections.abc import Sequence
from datetime import datetime
from pathlib import Path
from typing import Optional, Union

import orjson

from ..analysis.portfolio_metrics import PortfolioMetrics
from ..errors import MalformedInputSeriesError, PersistenceError
from ..logging import get_logger
from ..playbook.models import TradePlan
from ..playbook.render import render_playbook
from ..portfolio.simulator import PortfolioState
from ..signals.models import BaselineState, DailySignal

logger = get_logger(__name__)

SIGNAL_COLUMNS = [
    "date", "close", "ma_short", "ma_long", "rs", "rs_ma_short", "rs_ma_long",
    "trend_bull", "mom_bull", "rs_bull", "score", "raw_weight", "stop_level",
]
EQUITY_COLUMNS = ["date", "equity", "port_ret", "num_positions", "btc_close"]

PathLike = Union[str, Path]


def _fmt(value: Optional[float], digits: int = 8) -> str:
    return "" if value is None else f"{value:.{digits}f}"


def _bool(value: bool) -> str:
    return "true" if value else "false"


def signals_file_name(asset: str) -> str:
    return f"signals_{asset}.csv"


def write_signals_csv(path: PathLike, signals: Sequence[DailySignal]) -> Path:
    """Write one asset's signal table; undefined values are empty cells."""
    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", newline="") as f:
            writer = csv.writer(f)
            writer.writerow(SIGNAL_COLUMNS)
            for s in signals:
                writer.writerow([
                    s.date.isoformat(),
                    _fmt(s.price),
                    _fmt(s.ma_short),
                    _fmt(s.ma_long),
                    _fmt(s.rs),
                    _fmt(s.rs_ma_short),
                    _fmt(s.rs_ma_long),
                    _bool(s.trend_bull),
                    _bool(s.mom_bull),
                    _bool(s.rs_bull),
                    s.score,
                    _fmt(s.raw_weight, 4),
                    _fmt(s.stop_level),
                ])
    except OSError as e:
        raise PersistenceError(f"Failed to write {path}: {e}",
                               operation="write_signals", target=str(path)) from e
    return path


def write_equity_curve_csv(path: PathLike, states: Sequence[PortfolioState],
                           baseline_states: Sequence[BaselineState]) -> Path:
    """Write the equity curve with the baseline close alongside."""
    path = Path(path)
    if len(states) != len(baseline_states):
        raise PersistenceError(
            f"Equity curve has {len(states)} rows but baseline has {len(baseline_states)}",
            operation="write_equity_curve", target=str(path),
        )

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", newline="") as f:
            writer = csv.writer(f)
            writer.writerow(EQUITY_COLUMNS)
            for state, base in zip(states, baseline_states):
                writer.writerow([
                    state.date.isoformat(),
                    _fmt(state.equity),
                    _fmt(state.daily_return),
                    state.active_position_count,
                    _fmt(base.close, 2),
                ])
    except OSError as e:
        raise PersistenceError(f"Failed to write {path}: {e}",
                               operation="write_equity_curve", target=str(path)) from e
    return path


def write_metrics_summary(path: PathLike, metrics: PortfolioMetrics) -> Path:
    path = Path(path)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("\n".join(metrics.summary_lines()) + "\n")
    except OSError as e:
        raise PersistenceError(f"Failed to write {path}: {e}",
                               operation="write_metrics", target=str(path)) from e
    return path


def write_playbooks_json(path: PathLike, playbooks: Sequence[TradePlan]) -> Path:
    """
    Write playbooks as an indented JSON array.

    Each entry carries its 1-based list position as rank, the rendered summary lines and the full
    plan. Non-finite floats (e.g. an unbounded share count) become null.
    """
    path = Path(path)
    document = [
        {
            "rank": rank,
            "asset": plan.asset,
            "summary": render_playbook(plan, rank),
            "plan": plan.to_dict(),
        }
        for rank, plan in enumerate(playbooks, start=1)
    ]
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(orjson.dumps(document, option=orjson.OPT_INDENT_2))
    except (OSError, TypeError) as e:
        raise PersistenceError(f"Failed to write {path}: {e}",
                               operation="write_playbooks", target=str(path)) from e

    logger.info("Playbooks saved", path=str(path), count=len(playbooks))
    return path


def _opt_float(value: str) -> Optional[float]:
    value = value.strip()
    return float(value) if value else None


def _parse_bool(value: str) -> bool:
    normalized = value.strip().lower()
    if normalized in ("true", "1"):
        return True
    if normalized in ("false", "0", ""):
        return False
    raise ValueError(f"not a boolean: {value!r}")


def read_signals_csv(path: PathLike) -> list[DailySignal]:
    """
    Read a signal table written by write_signals_csv.

    Raises:
        PersistenceError: If the file cannot be opened
        MalformedInputSeriesError: If a row cannot be parsed
    """
    path = Path(path)
    asset = path.stem.removeprefix("signals_")

    try:
        with open(path, newline="") as f:
            rows = list(csv.DictReader(f, skipinitialspace=True))
    except OSError as e:
        raise PersistenceError(f"Failed to read {path}: {e}",
                               operation="read_signals", target=str(path)) from e

    signals = []
    for row_number, row in enumerate(rows, start=1):
        try:
            signals.append(DailySignal(
                date=datetime.strptime(row["date"].strip(), "%Y-%m-%d").date(),
                price=float(row["close"]),
                ma_short=_opt_float(row["ma_short"]),
                ma_long=_opt_float(row["ma_long"]),
                rs=float(row["rs"]),
                rs_ma_short=_opt_float(row["rs_ma_short"]),
                rs_ma_long=_opt_float(row["rs_ma_long"]),
                trend_bull=_parse_bool(row["trend_bull"]),
                mom_bull=_parse_bool(row["mom_bull"]),
                rs_bull=_parse_bool(row["rs_bull"]),
                score=int(float(row["score"])),
                raw_weight=float(row["raw_weight"]),
                stop_level=_opt_float(row["stop_level"]),
            ))
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise MalformedInputSeriesError(
                f"{path.name}: invalid signal row {row_number}: {e}",
                asset=asset,
                row_number=row_number,
                raw_data=str(row),
            ) from e

    return signals
