"""Default configuration parameters for the backtest and playbook pipeline."""

from dataclasses import dataclass


@dataclass(frozen=True)
class StrategyParams:
    """Signal engine and portfolio simulation parameters."""
    baseline: str = "BTC"                 # Relative-strength reference asset

    # Moving-average lookbacks (days)
    ma_short: int = 3
    ma_long: int = 7

    # Entry rules
    min_signals: int = 2                  # Signals required for half weight (with RS bullish)
    short_alts: bool = False              # Allow -1.0 weight on 3/3 bearish

    # Baseline hedge weight while the baseline is in a bear state
    btc_hedge: float = 0.3

    # Stop configuration
    stop_lookback: int = 14               # ATR / return-std window
    atr_mult: float = 3.0                 # close - atr_mult * ATR
    vol_mult: float = 2.5                 # close * (1 - vol_mult * std) fallback

    @property
    def min_history(self) -> int:
        """Rows required per series and after alignment."""
        return self.ma_long + 10


@dataclass(frozen=True)
class AnalysisParams:
    """Performance analyzer parameters."""
    trading_day_epsilon: float = 1e-6     # |raw_weight| above this counts as a trading day
    periods_per_year: float = 365.25      # Crypto trades every calendar day


@dataclass(frozen=True)
class PlaybookParams:
    """Position sizing and playbook parameters."""
    portfolio_value: float = 100_000.0

    # Risk cap derivation
    base_risk: float = 0.010
    risk_cap_floor: float = 0.002
    risk_cap_ceiling: float = 0.025
    provisional_risk_cap: float = 0.010   # Used for the first pass of computed values

    # Stops and targets
    stop_atr_mult: float = 3.0
    target_r_multiple: float = 2.0
    scale_out_fraction: float = 0.5

    # Market snapshot windows
    atr_period: int = 14
    volatility_period: int = 14

    top_n: int = 10


@dataclass(frozen=True)
class InsightParams:
    """Narrative insight provider parameters."""
    provider: str = "offline"             # offline | openai
    model: str = "gpt-4o-mini"
    api_url: str = "https://api.openai.com/v1/chat/completions"
    api_key_env: str = "OPENAI_API_KEY"
    timeout_seconds: int = 30
    temperature: float = 0.7
    max_tokens: int = 1000


@dataclass(frozen=True)
class DefaultConfig:
    """Complete default configuration."""
    strategy: StrategyParams
    analysis: AnalysisParams
    playbook: PlaybookParams
    insights: InsightParams


def get_default_config() -> DefaultConfig:
    """Get the default configuration instance."""
    return DefaultConfig(
        strategy=StrategyParams(),
        analysis=AnalysisParams(),
        playbook=PlaybookParams(),
        insights=InsightParams(),
    )
