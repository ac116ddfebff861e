"""
Centralized logging configuration for the backtest pipeline.

This module provides standardized logging configuration using structlog
for all components. All logging throughout the system should use this
configuration to ensure consistent formatting and structured logging.
"""
import logging
import sys
from typing import Any, Optional

import structlog
from structlog.types import FilteringBoundLogger


def configure_logging(
    level: str = "INFO",
    format_json: bool = False,
    include_timestamp: bool = True,
    include_caller: bool = False,
    extra_processors: Optional[list] = None
) -> None:
    """
    Configure structlog for the entire application.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format_json: If True, output JSON format; otherwise human-readable
        include_timestamp: Include timestamp in log output
        include_caller: Include caller information (filename, line number)
        extra_processors: Additional structlog processors to include
    """
    log_level = getattr(logging, level.upper())

    logging.basicConfig(
        level=log_level,
        stream=sys.stdout,
        format="%(message)s"  # structlog will handle formatting
    )

    processors = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if include_timestamp:
        processors.append(structlog.processors.TimeStamper(fmt="iso"))

    if include_caller:
        processors.append(structlog.processors.CallsiteParameterAdder(
            parameters=[structlog.processors.CallsiteParameter.FILENAME,
                        structlog.processors.CallsiteParameter.LINENO]
        ))

    if extra_processors:
        processors.extend(extra_processors)

    if format_json:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> FilteringBoundLogger:
    """
    Get a configured structlog logger instance.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured structlog logger instance
    """
    return structlog.get_logger(name)


def get_backtest_logger(name: str) -> FilteringBoundLogger:
    """
    Get a logger bound to the backtest subsystem.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured structlog logger for backtest decisions
    """
    logger = get_logger(name)

    return logger.bind(
        subsystem="backtest",
        audit_trail=True
    )


def log_asset_exclusion(
    logger: FilteringBoundLogger,
    asset: str,
    reason: str,
    context: Optional[dict[str, Any]] = None
) -> None:
    """
    Log that an asset was dropped from the run.

    Args:
        logger: Structlog logger instance
        asset: Name of the excluded asset
        reason: Why the asset was excluded
        context: Additional context data (row counts, file path, ...)
    """
    bound_logger = logger.bind(
        asset=asset,
        reason=reason,
        decision="excluded"
    )

    if context:
        bound_logger = bound_logger.bind(context=context)

    bound_logger.warning("Asset excluded from backtest")


def log_stop_trigger(
    logger: FilteringBoundLogger,
    asset: str,
    date: Any,
    price: float,
    stop_level: float
) -> None:
    """
    Log a stop-out applied by the portfolio simulator.

    Args:
        logger: Structlog logger instance
        asset: Asset that was stopped out
        date: Simulation date of the stop-out
        price: Close price that breached the stop
        stop_level: Prior-day stop level
    """
    logger.debug(
        "Stop triggered",
        asset=asset,
        date=str(date),
        price=price,
        stop_level=stop_level
    )
