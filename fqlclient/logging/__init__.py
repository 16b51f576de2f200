"""Structured logging for fqlclient.

The library never configures logging on import. Applications call
``configure_logging`` once; otherwise structlog's defaults apply.

Usage:
    from fqlclient.logging import configure_logging, get_component_logger

    configure_logging("DEBUG", json_output=False)
    logger = get_component_logger("Client")
    logger.info("query_sending", url=url)
"""

from __future__ import annotations

import logging
import sys
from contextvars import ContextVar
from typing import Any, Dict, Optional

import structlog

from fqlclient.protocols import LoggerProtocol
from fqlclient.settings import get_settings

# Module state
_CONFIGURED = False

_current_logger: ContextVar[Optional[LoggerProtocol]] = ContextVar(
    "current_logger",
    default=None
)


class Logger:
    """LoggerProtocol implementation backed by structlog."""

    def __init__(
        self,
        base_logger: Any = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        """Initialize logger.

        Args:
            base_logger: Underlying structlog logger (created if None)
            context: Bound context fields
        """
        self._base_logger = base_logger or structlog.get_logger("fqlclient")
        self._logger = self._base_logger
        self._context = context or {}

        if self._context:
            self._logger = self._logger.bind(**self._context)

    def debug(self, msg: str, **kwargs: Any) -> None:
        self._logger.debug(msg, **kwargs)

    def info(self, msg: str, **kwargs: Any) -> None:
        self._logger.info(msg, **kwargs)

    def warning(self, msg: str, **kwargs: Any) -> None:
        self._logger.warning(msg, **kwargs)

    def error(self, msg: str, **kwargs: Any) -> None:
        self._logger.error(msg, **kwargs)

    def exception(self, msg: str, **kwargs: Any) -> None:
        self._logger.exception(msg, **kwargs)

    def bind(self, **kwargs: Any) -> "Logger":
        """Create child logger with additional context."""
        return Logger(self._base_logger, context={**self._context, **kwargs})


def configure_logging(
    level: Optional[str] = None,
    *,
    json_output: bool = True,
) -> None:
    """Configure stdlib logging and structlog for an application.

    Only the first call has an effect.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR); defaults to
            ``get_settings().log_level`` (``FAUNA_LOG_LEVEL``)
        json_output: If True, render JSON lines; if False, console format
    """
    global _CONFIGURED

    if _CONFIGURED:
        return

    if level is None:
        level = get_settings().log_level
    log_level = getattr(logging, level.upper(), logging.INFO)

    logging.basicConfig(
        level=log_level,
        format="%(message)s",
        stream=sys.stdout,
    )

    # httpx logs every request at INFO
    for noisy in ["httpx", "httpcore"]:
        logging.getLogger(noisy).setLevel(logging.WARNING)

    if json_output:
        renderer = structlog.processors.JSONRenderer(sort_keys=True)
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=True)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        cache_logger_on_first_use=True,
    )

    _CONFIGURED = True


def create_logger(component: str, **context: Any) -> LoggerProtocol:
    """Create a logger bound to a component name and extra context."""
    return Logger(context={"component": component, **context})


def get_current_logger() -> LoggerProtocol:
    """Return the context-bound logger, or a fresh default one."""
    logger = _current_logger.get()
    if logger is None:
        return Logger()
    return logger


def set_current_logger(logger: LoggerProtocol) -> None:
    _current_logger.set(logger)


def get_component_logger(
    component: str,
    logger: Optional[LoggerProtocol] = None,
) -> LoggerProtocol:
    """Get a logger bound to a component name.

    Args:
        component: Component name (e.g., "Client", "HttpxClient")
        logger: Optional injected logger. If None, uses the context logger.
    """
    base_logger = logger or get_current_logger()
    return base_logger.bind(component=component)


__all__ = [
    "configure_logging",
    "create_logger",
    "get_component_logger",
    "get_current_logger",
    "set_current_logger",
    "Logger",
]
