"""Data models for trade playbooks"""

from dataclasses import asdict, dataclass
from typing import Any


@dataclass(frozen=True)
class SignalConditions:
    trend: str
    momentum: str
    rs: str
    full_weight_condition: str
    half_weight_condition: str


@dataclass(frozen=True)
class EntryRules:
    primary: str
    alternative: str
    signal_conditions: SignalConditions


@dataclass(frozen=True)
class ExitRules:
    profit_taking: str
    stop_loss: str
    trailing_stop: str
    hard_exit_conditions: str


@dataclass(frozen=True)
class PositionSizing:
    full_weight: float
    half_weight: float
    risk_cap_percent: float
    risk_calculation: str


@dataclass(frozen=True)
class Conviction:
    """Conviction percentages for full (3/3) and half (min_signals + RS) setups"""
    high_conviction: float
    medium_conviction: float
    rationale: str


@dataclass(frozen=True)
class BacktestStats:
    total_return_percent: float
    sharpe_ratio: float
    win_rate_percent: float
    max_drawdown_percent: float
    trading_days: int
    expected_return: str


@dataclass(frozen=True)
class ExecutionMode:
    """How entries are executed for an asset"""
    signal_at_close: bool
    pullback_to_ma: bool
    extended_threshold: float  # fraction above the long MA
    limit_order_duration_hours: int
    confidence: float = 0.0


@dataclass(frozen=True)
class ComputedValues:
    """Concrete market snapshot and order parameters for one asset"""
    # Market snapshot from the latest signal
    current_price: float = 0.0
    ma_long: float = 0.0
    ma_short: float = 0.0
    rs_ma_short: float = 0.0
    rs_ma_long: float = 0.0
    atr_14: float = 0.0
    volatility: float = 0.0  # annualized fraction

    # Signal status
    trend_signal: bool = False
    momentum_signal: bool = False
    rs_signal: bool = False
    all_signals: bool = False
    partial_signals: bool = False

    # Position sizing
    stop_price: float = 0.0
    risk_per_share: float = 0.0
    max_shares_by_risk: float = 0.0
    max_shares_by_position: float = 0.0
    recommended_shares: int = 0
    position_value: float = 0.0
    position_percent: float = 0.0

    # Profit taking
    profit_target: float = 0.0
    profit_target_percent: float = 0.0
    scale_out_shares: int = 0
    remaining_shares: int = 0
    scale_out_value: float = 0.0

    # Stop loss levels
    initial_stop: float = 0.0
    stop_loss_percent: float = 0.0
    trailing_stop: float = 0.0
    stop_distance_atr: float = 0.0

    # Risk management
    portfolio_risk: float = 0.0
    risk_reward_ratio: float = 0.0
    max_loss: float = 0.0
    max_gain: float = 0.0

    # Execution
    is_extended: bool = False
    pullback_price: float = 0.0
    extended_percent: float = 0.0
    signal_strength: float = 0.0  # 1.0 full, 0.5 partial, 0.0 none


@dataclass(frozen=True)
class TradePlan:
    """Read-only playbook for one asset"""
    asset: str
    entry_rules: EntryRules
    exit_rules: ExitRules
    position_sizing: PositionSizing
    conviction: Conviction
    execution_mode: ExecutionMode
    backtest_stats: BacktestStats
    computed_values: ComputedValues
    notes: str

    @property
    def risk_cap(self) -> float:
        return self.position_sizing.risk_cap_percent / 100.0

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
