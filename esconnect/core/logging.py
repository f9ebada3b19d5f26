"""
esconnect - Structured Logging

The library only emits structlog events (``elasticsearch_request``,
``connection_created``, ...). Applications that have no structlog setup of
their own call configure_logging() once to get them rendered.

Patterns Applied:
- One-time configure_logging() at startup
- Per-client bound loggers carrying the engine's base URL

Anti-Patterns Avoided:
- #16: structlog.configure() called per get_logger() - PREVENTED via _configured flag
"""

import logging
import sys
from typing import IO, Any, Final

import structlog
from structlog.typing import EventDict, WrappedLogger

from esconnect._version import __version__
from esconnect.core.exceptions import ConfigurationError

SERVICE_NAME: Final[str] = "esconnect"

LOG_LEVELS: Final[dict[str, int]] = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}

_configured: bool = False


def add_library_info(
    logger: WrappedLogger,  # noqa: ARG001 - Required by structlog interface
    method_name: str,  # noqa: ARG001 - Required by structlog interface
    event_dict: EventDict,
) -> EventDict:
    """Tag every event with the library name and version.

    Values already bound by the caller are left alone.
    """
    event_dict.setdefault("library", SERVICE_NAME)
    event_dict.setdefault("library_version", __version__)
    return event_dict


def resolve_level(log_level: str) -> int:
    """Map a level name (case-insensitive) to its numeric value.

    Raises:
        ConfigurationError: On an unknown level name
    """
    try:
        return LOG_LEVELS[log_level.upper()]
    except KeyError:
        raise ConfigurationError(
            f"Unknown log level {log_level!r}, expected one of {', '.join(LOG_LEVELS)}"
        ) from None


def configure_logging(
    log_level: str = "INFO",
    json_output: bool = True,
    stream: IO[str] | None = None,
) -> None:
    """Configure structlog rendering for the process.

    Only the first call takes effect until reset_logging() is called. The
    root stdlib logger is not touched.

    Args:
        log_level: DEBUG, INFO, WARNING, ERROR or CRITICAL
        json_output: One JSON object per line (False for a console renderer)
        stream: Where events are written (stderr when omitted)

    Raises:
        ConfigurationError: On an unknown log level
    """
    global _configured

    if _configured:
        return

    level = resolve_level(log_level)
    renderer: Any = (
        structlog.processors.JSONRenderer() if json_output else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            add_library_info,
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=stream or sys.stderr),
        cache_logger_on_first_use=False,
    )

    _configured = True


def get_logger(name: str, **initial_values: Any) -> Any:
    """Get a structlog logger, optionally pre-bound with key-value context."""
    return structlog.get_logger(name, **initial_values)


def reset_logging() -> None:
    """Drop the installed configuration (tests)."""
    global _configured
    _configured = False
    structlog.reset_defaults()
