"""
esconnect - Bootstrap

One-time process startup: logging, tracing and the connection described by
the environment.

Patterns Applied:
- One-time configure_logging()/configure_tracing() at startup
- Pydantic Settings injection for testing
"""

from __future__ import annotations

from esconnect.core.config import Settings, get_settings
from esconnect.core.logging import configure_logging, get_logger
from esconnect.core.tracing import configure_tracing
from esconnect.registry import ConnectionRegistry, get_registry

logger = get_logger(__name__)


def bootstrap(
    settings: Settings | None = None,
    registry: ConnectionRegistry | None = None,
) -> ConnectionRegistry:
    """Configure logging/tracing and register the environment's connection.

    Example environment:
        ELASTICSEARCH_HOST=elasticsearch
        ELASTICSEARCH_PORT=9200
        ELASTICSEARCH_TIMEOUT_MILLIS=400

    Args:
        settings: Settings override (read from the environment when omitted)
        registry: Registry to configure (the default registry when omitted)

    Returns:
        The registry with ``settings.connection_name`` configured

    Raises:
        ConfigurationError: If the settings do not form a valid connection
    """
    settings = settings or get_settings()
    registry = registry or get_registry()

    configure_logging(
        log_level=settings.log_level,
        json_output=settings.log_json,
    )

    if settings.tracing_enabled:
        configure_tracing(console_export=settings.tracing_console_export)
        logger.info("tracing_configured")

    registry.configure(settings.connection_name, settings.connection_config())
    logger.info("startup", connection=settings.connection_name)
    return registry
