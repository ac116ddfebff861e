"""
Main backtest engine coordinator.

Orchestrates the backtest pipeline, coordinating series alignment, signal
generation, portfolio simulation, performance analysis, playbook building and
artifact export.
"""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import Optional, Union

import structlog

from .analysis import (
    PortfolioMetrics,
    StrategyOverview,
    StrategyStatistics,
    analyze,
    rank_by_total_return,
    summarize_equity,
    summarize_strategies,
)
from .config import DefaultConfig, get_default_config
from .data import AlignedUniverse, PriceSeries, align_universe, load_price_directory
from .errors import MalformedInputSeriesError
from .insights import TextInsightProvider, create_insight_provider, fallback_portfolio_summary
from .logging.config import get_backtest_logger, log_asset_exclusion
from .persistence import (
    read_signals_csv,
    signals_file_name,
    write_equity_curve_csv,
    write_metrics_summary,
    write_playbooks_json,
    write_signals_csv,
)
from .playbook import TradePlan, build_top_playbooks
from .portfolio import PortfolioState, simulate_portfolio
from .signals import BaselineState, DailySignal, compute_baseline_states, compute_signals

logger = structlog.get_logger(__name__)
backtest_logger = get_backtest_logger(__name__)


@dataclass(frozen=True)
class BacktestResult:
    """Everything produced by one backtest run."""
    dates: tuple[date, ...]
    baseline: str
    baseline_states: list[BaselineState]
    signals: dict[str, list[DailySignal]]
    portfolio: list[PortfolioState]
    analyses: list[StrategyStatistics]
    metrics: PortfolioMetrics
    excluded: dict[str, str] = field(default_factory=dict)

    @property
    def overview(self) -> StrategyOverview:
        return summarize_strategies(self.analyses)

    def top_performers(self, n: int = 5) -> list[tuple[str, float]]:
        """(asset, total_return) of the best profitable strategies."""
        ranked = rank_by_total_return([a for a in self.analyses if a.is_profitable])
        return [(a.asset, a.total_return) for a in ranked[:n]]


class BacktestEngine:
    """
    Main coordinator for the relative-strength momentum backtest.

    Manages the pipeline:
    Price Series → Alignment → Signals → Portfolio → Statistics → Playbooks
    """

    def __init__(self, config: Optional[DefaultConfig] = None,
                 insight_provider: Optional[TextInsightProvider] = None) -> None:
        self.config = config or get_default_config()
        self.insight_provider = insight_provider or create_insight_provider(self.config.insights)
        self.logger = logger

    def run(self, series: Mapping[str, PriceSeries],
            excluded: Optional[Mapping[str, str]] = None) -> BacktestResult:
        """
        Run the backtest over in-memory series.

        Args:
            series: Asset name -> series, including the baseline
            excluded: Assets already dropped by the caller (name -> reason)

        Raises:
            MissingDataError: If the baseline series is absent
            InsufficientHistoryError: If the aligned calendar is too short
        """
        strategy = self.config.strategy
        universe = align_universe(series, strategy.baseline, strategy.min_history, excluded)
        return self._run_aligned(universe)

    def run_directory(self, directory: Union[str, Path]) -> BacktestResult:
        """
        Run the backtest over ``<ASSET>.csv`` files in a directory.

        Files that fail to parse are excluded and reported; the baseline file
        must be named after the configured baseline.
        """
        series, failures = load_price_directory(directory)
        for asset, reason in failures.items():
            log_asset_exclusion(backtest_logger, asset, reason, {"directory": str(directory)})

        self.logger.info("Price files loaded", directory=str(directory),
                         loaded=len(series), failed=len(failures))
        return self.run(series, excluded=failures)

    def _run_aligned(self, universe: AlignedUniverse) -> BacktestResult:
        strategy = self.config.strategy
        dates = list(universe.dates)

        baseline_states = compute_baseline_states(dates, universe.baseline, strategy)
        signals = {
            name: compute_signals(dates, universe.assets[name], universe.baseline, strategy)
            for name in universe.asset_names
        }

        portfolio = simulate_portfolio(dates, signals, baseline_states, strategy.btc_hedge)
        analyses = [
            analyze(signals[name], asset=name, epsilon=self.config.analysis.trading_day_epsilon)
            for name in universe.asset_names
        ]
        metrics = summarize_equity(portfolio, self.config.analysis.periods_per_year)

        self.logger.info(
            "Backtest complete",
            assets=len(signals),
            days=len(dates),
            total_return=metrics.total_return,
            sharpe=metrics.sharpe_annualized,
            max_drawdown=metrics.max_drawdown,
            profitable=sum(1 for a in analyses if a.is_profitable),
        )

        return BacktestResult(
            dates=universe.dates,
            baseline=universe.baseline.name,
            baseline_states=baseline_states,
            signals=signals,
            portfolio=portfolio,
            analyses=analyses,
            metrics=metrics,
            excluded=dict(universe.excluded),
        )

    def build_playbooks(self, result: BacktestResult,
                        top_n: Optional[int] = None) -> list[TradePlan]:
        """Playbooks for the top profitable assets of a run."""
        playbook_params = self.config.playbook
        return build_top_playbooks(
            result.analyses,
            result.signals,
            top_n=playbook_params.top_n if top_n is None else top_n,
            params=playbook_params,
            min_signals=self.config.strategy.min_signals,
            insight_provider=self.insight_provider,
        )

    def playbooks_from_signal_directory(self, directory: Union[str, Path],
                                        top_n: Optional[int] = None) -> list[TradePlan]:
        """
        Analyze exported ``signals_<ASSET>.csv`` tables and build playbooks.

        Tables that cannot be read are skipped with a warning.
        """
        signals: dict[str, list[DailySignal]] = {}
        for path in sorted(Path(directory).glob("signals_*.csv")):
            asset = path.stem.removeprefix("signals_")
            try:
                signals[asset] = read_signals_csv(path)
            except MalformedInputSeriesError as e:
                log_asset_exclusion(backtest_logger, asset, str(e), {"path": str(path)})

        analyses = [
            analyze(sigs, asset=asset, epsilon=self.config.analysis.trading_day_epsilon)
            for asset, sigs in signals.items()
        ]
        playbook_params = self.config.playbook
        return build_top_playbooks(
            analyses,
            signals,
            top_n=playbook_params.top_n if top_n is None else top_n,
            params=playbook_params,
            min_signals=self.config.strategy.min_signals,
            insight_provider=self.insight_provider,
        )

    def portfolio_summary(self, result: BacktestResult,
                          market_conditions: str = "Not specified") -> str:
        """Narrative paragraph for the whole run."""
        try:
            return self.insight_provider.summarize_portfolio(
                result.overview, result.top_performers(), market_conditions
            )
        except Exception as e:
            # Narrative text is optional; any provider failure degrades to the offline summary
            logger.warning(
                "Insight provider failed, using offline portfolio summary",
                provider=getattr(self.insight_provider, "name", type(self.insight_provider).__name__),
                error=str(e),
            )
            return fallback_portfolio_summary(result.overview, market_conditions)

    def export(self, result: BacktestResult, out_dir: Union[str, Path],
               playbooks: Optional[Sequence[TradePlan]] = None) -> dict[str, Path]:
        """
        Write run artifacts into ``out_dir``.

        Returns:
            Artifact name -> written path
        """
        out_dir = Path(out_dir)
        written: dict[str, Path] = {}

        for asset, sigs in result.signals.items():
            written[signals_file_name(asset)] = write_signals_csv(
                out_dir / signals_file_name(asset), sigs
            )

        written["equity_curve.csv"] = write_equity_curve_csv(
            out_dir / "equity_curve.csv", result.portfolio, result.baseline_states
        )
        written["metrics.txt"] = write_metrics_summary(out_dir / "metrics.txt", result.metrics)

        if playbooks is not None:
            written["playbooks.json"] = write_playbooks_json(out_dir / "playbooks.json", playbooks)

        self.logger.info("Artifacts exported", out_dir=str(out_dir), files=len(written))
        return written
