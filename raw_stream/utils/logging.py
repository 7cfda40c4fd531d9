"""
Structured logging configuration for the raw data stream relay.

Uses structlog for structured, contextual logging. Sessions report their
diagnostics through a ``DiagnosticsSink`` supplied at construction; the
default sink forwards to structlog.
"""

import logging
import sys
from typing import Any, Protocol, runtime_checkable

import structlog


def configure_logging(level: str = "INFO", json_output: bool = False) -> None:
    """
    Route structlog through stdlib logging on stderr.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR)
        json_output: Render JSON lines instead of colored console output
    """
    # stdout stays free for piped byte streams
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=logging.getLevelName(level.upper()),
    )

    renderer: Any = (
        structlog.processors.JSONRenderer()
        if json_output
        else structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())
    )
    structlog.configure(
        processors=[
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """
    Get a structured logger.

    Args:
        name: Logger name (optional)

    Returns:
        Bound structlog logger
    """
    return structlog.get_logger(name)


@runtime_checkable
class DiagnosticsSink(Protocol):
    """Observability sink with info/warning/error levels."""

    def info(self, message: str, **kwargs: Any) -> None:
        ...

    def warning(self, message: str, **kwargs: Any) -> None:
        ...

    def error(self, message: str, **kwargs: Any) -> None:
        ...


class StructlogDiagnostics:
    """
    Diagnostics sink backed by structlog.

    Usage:
        diagnostics = StructlogDiagnostics(node="raw_data_pa")
        diagnostics.info("Logging raw data to file", path=path)
    """

    def __init__(self, **context: Any):
        self._logger = structlog.get_logger().bind(**context)

    def bind(self, **kwargs: Any) -> "StructlogDiagnostics":
        """Bind additional context to the logger."""
        self._logger = self._logger.bind(**kwargs)
        return self

    def info(self, message: str, **kwargs: Any) -> None:
        self._logger.info(message, **kwargs)

    def warning(self, message: str, **kwargs: Any) -> None:
        self._logger.warning(message, **kwargs)

    def error(self, message: str, **kwargs: Any) -> None:
        self._logger.error(message, **kwargs)
