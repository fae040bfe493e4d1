"""Structured logging configuration using structlog.

JSON output for log aggregation in production, a coloured console renderer
for development.

Services and the API emit structlog events. The analysis engines log
per-rule notes through stdlib ``logging`` under ``statement_interpreter.engines``
and get their own level, so rule-by-rule debug output can be switched on
without flooding the service events.

Usage::

    from statement_interpreter.logging_config import analysis_context, get_logger

    logger = get_logger(__name__)
    with analysis_context("AAPL"):
        logger.info("analysis_completed", grade="A-")
    # Output: {"event": "analysis_completed", "symbol": "AAPL", "grade": "A-", ...}
"""

import logging
import sys
from contextlib import contextmanager
from typing import Any, Iterator, Optional

import structlog

ENGINE_LOGGER = "statement_interpreter.engines"


def _level(name: str) -> int:
    return getattr(logging, name.upper())


def setup_logging(
    json_logs: bool = False,
    log_level: str = "INFO",
    engine_log_level: Optional[str] = None,
) -> None:
    """Configure structured logging for the application.

    Args:
        json_logs: If True, output JSON format. If False, use human-readable format.
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        engine_log_level: Level for the analysis engines; defaults to ``log_level``.
    """
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=_level(log_level),
    )
    logging.getLogger(ENGINE_LOGGER).setLevel(_level(engine_log_level or log_level))

    common_processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if json_logs:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=True)

    structlog.configure(
        processors=common_processors + [renderer],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


@contextmanager
def analysis_context(symbol: str, **extra: Any) -> Iterator[None]:
    """Bind *symbol* (and any *extra* keys) to every event logged in the block."""
    with structlog.contextvars.bound_contextvars(symbol=symbol, **extra):
        yield


def get_logger(name: str) -> Any:
    """Get a structured logger bound to *name* (usually ``__name__``)."""
    return structlog.get_logger(name)
