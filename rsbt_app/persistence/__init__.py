"""Export of signal tables, equity curve, metrics and playbooks."""

from .exporter import (
    EQUITY_COLUMNS,
    SIGNAL_COLUMNS,
    read_signals_csv,
    signals_file_name,
    write_equity_curve_csv,
    write_metrics_summary,
    write_playbooks_json,
    write_signals_csv,
)

__all__ = [
    "SIGNAL_COLUMNS",
    "EQUITY_COLUMNS",
    "signals_file_name",
    "write_signals_csv",
    "write_equity_curve_csv",
    "write_metrics_summary",
    "write_playbooks_json",
    "read_signals_csv",
]
