"""
Centralized logging configuration for the candle engine.

Every module logs through structlog so that events carry key-value
context (symbol, timeframe, order id) instead of interpolated strings.
Output goes through the standard library logging tree, which lets a
hosting transport attach its own handlers.
"""
import logging
import sys
from typing import Any, Optional

import structlog
from structlog.types import FilteringBoundLogger

from ..errors import ConfigurationError

_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def configure_logging(
    level: str = "INFO",
    format_json: bool = False,
    include_timestamp: bool = True,
    include_caller: bool = False,
    extra_processors: Optional[list] = None
) -> None:
    """
    Configure structlog for the whole engine.

    Args:
        level: Minimum level name, case-insensitive
        format_json: Render one JSON object per event instead of console lines
        include_timestamp: Add an ISO timestamp to every event
        include_caller: Add filename and line number of the log call
        extra_processors: Processors inserted just before rendering

    Raises:
        ConfigurationError: If level is not a known level name
    """
    level_name = str(level).upper()
    if level_name not in _LEVELS:
        raise ConfigurationError(
            f"Unknown log level '{level}'. Use one of: {', '.join(_LEVELS)}",
            parameter="logging.level",
            value=level
        )
    log_level = getattr(logging, level_name)

    logging.basicConfig(level=log_level, stream=sys.stdout, format="%(message)s")
    logging.getLogger().setLevel(log_level)

    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
    ]

    if include_timestamp:
        processors.append(structlog.processors.TimeStamper(fmt="iso", utc=True))

    if include_caller:
        processors.append(structlog.processors.CallsiteParameterAdder(
            parameters=[structlog.processors.CallsiteParameter.FILENAME,
                        structlog.processors.CallsiteParameter.LINENO]
        ))

    processors.extend([
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ])

    if extra_processors:
        processors.extend(extra_processors)

    if format_json:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

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


def get_store_logger(name: str) -> FilteringBoundLogger:
    """Logger bound to the market data store subsystem."""
    return get_logger(name).bind(subsystem="market_data_store")


def get_simulation_logger(name: str) -> FilteringBoundLogger:
    """
    Get a logger specifically configured for order simulation.

    Simulated fills are audited, so the logger is bound with an
    audit_trail marker that downstream processors can filter on.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured structlog logger for order simulation
    """
    return get_logger(name).bind(
        subsystem="order_simulation",
        audit_trail=True
    )


def log_order_outcome(
    logger: FilteringBoundLogger,
    order_id: str,
    symbol: str,
    success: bool,
    reason: str,
    context: Optional[dict[str, Any]] = None
) -> None:
    """
    Log a simulated order outcome with standardized format.

    Args:
        logger: Structlog logger instance
        order_id: Correlation id generated for the order
        symbol: Instrument the order was placed on
        success: Whether the order filled
        reason: Human-readable outcome message
        context: Additional context data (action, kind, prices)
    """
    bound_logger = logger.bind(
        order_id=order_id,
        symbol=symbol,
        order_result="FILLED" if success else "NOT_FILLED",
        reason=reason,
    )

    if context:
        bound_logger = bound_logger.bind(**context)

    if success:
        bound_logger.info("Order simulated")
    else:
        bound_logger.warning("Order not filled")
