"""Structured logging setup.

Conduit logs through structlog loggers obtained with ``get_logger(__name__)``.
``setup_logging`` routes them through the standard library ``logging`` module
so that one handler renders both structlog events and plain stdlib records.
"""

import logging
import sys
from typing import Any

import structlog
from rich.traceback import install as install_rich_traceback


__all__ = ["get_logger", "setup_logging"]


def _shared_processors(show_time: bool) -> list[Any]:
    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.PositionalArgumentsFormatter(),
    ]
    if show_time:
        processors.append(structlog.processors.TimeStamper(fmt="iso"))
    processors.append(structlog.processors.StackInfoRenderer())
    return processors


def setup_logging(
    json_logs: bool = False,
    log_level_name: str = "INFO",
    show_time: bool = True,
    plain: bool = False,
) -> structlog.stdlib.BoundLogger:
    """Configure structlog and the stdlib root logger.

    Args:
        json_logs: Render one JSON object per line instead of the console format
        log_level_name: Minimum level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        show_time: Whether to add an ISO timestamp to every event
        plain: Console output without colors or rich tracebacks; ignored with ``json_logs``

    Returns:
        A logger bound to the ``conduit`` namespace
    """
    log_level = getattr(logging, log_level_name.upper(), None)
    if not isinstance(log_level, int):
        raise ValueError(f"Invalid log level: {log_level_name}")

    shared_processors = _shared_processors(show_time)

    renderer: Any
    if json_logs:
        shared_processors.append(structlog.processors.format_exc_info)
        renderer = structlog.processors.JSONRenderer()
    elif plain:
        renderer = structlog.dev.ConsoleRenderer(
            colors=False,
            exception_formatter=structlog.dev.plain_traceback,
        )
    else:
        install_rich_traceback(show_locals=False)
        renderer = structlog.dev.ConsoleRenderer(
            colors=sys.stderr.isatty(),
            exception_formatter=structlog.dev.rich_traceback,
        )

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared_processors,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers = [handler]
    root_logger.setLevel(log_level)

    logger: structlog.stdlib.BoundLogger = structlog.get_logger("conduit")
    return logger


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a structlog logger.

    Args:
        name: Logger name (typically ``__name__``)
    """
    logger: structlog.stdlib.BoundLogger = structlog.get_logger(name)
    return logger
