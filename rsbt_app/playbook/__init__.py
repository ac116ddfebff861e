"""Position sizing and trade playbook generation"""

from .builder import build_playbook, build_top_playbooks, insight_metrics
from .models import (
    BacktestStats,
    ComputedValues,
    Conviction,
    EntryRules,
    ExecutionMode,
    ExitRules,
    PositionSizing,
    SignalConditions,
    TradePlan,
)
from .render import render_execution, render_playbook, render_shared_definitions
from .sizing import (
    compute_values,
    derive_risk_cap,
    determine_conviction,
    determine_execution_mode,
    risk_adjustments,
)

__all__ = [
    "TradePlan",
    "EntryRules",
    "ExitRules",
    "SignalConditions",
    "PositionSizing",
    "Conviction",
    "BacktestStats",
    "ExecutionMode",
    "ComputedValues",
    "build_playbook",
    "build_top_playbooks",
    "insight_metrics",
    "compute_values",
    "derive_risk_cap",
    "determine_conviction",
    "determine_execution_mode",
    "risk_adjustments",
    "render_playbook",
    "render_execution",
    "render_shared_definitions",
]
