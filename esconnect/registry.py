"""
esconnect - Connection Registry

Named connection configurations with lazily built, cached clients.

Patterns Applied:
- Registry with lazy construction and client caching (Anti-Pattern #12)
- get_registry()/reset_registry() for a process-wide default instance
- Atomic check-and-set under a lock for concurrent first access

Anti-Patterns Avoided:
- #12: New client per request (one client per name, cached)
- Silent fallback to defaults for an unknown name (raises instead)

Usage:
    registry = get_registry()
    registry.configure("default", host="elasticsearch", port=9200)
    client = registry.connection()
"""

from __future__ import annotations

import threading
from collections.abc import Callable, Mapping
from dataclasses import asdict
from typing import Any

from esconnect.clients.elasticsearch import ElasticsearchClient
from esconnect.core.config import DEFAULT_CONNECTION_NAME, ConnectionConfig
from esconnect.core.exceptions import ConfigurationNotFoundError
from esconnect.core.logging import get_logger
from esconnect.protocols import TransportProtocol

logger = get_logger(__name__)

TransportFactory = Callable[[ConnectionConfig], TransportProtocol]


class ConnectionRegistry:
    """Store of named connection configurations and their clients.

    At most one ElasticsearchClient exists per name for the life of the
    registry. Re-configuring a name does not touch a client that was
    already built for it; use drop() to rebuild it on next access.
    """

    def __init__(self, transport_factory: TransportFactory | None = None) -> None:
        """Initialize an empty registry.

        Args:
            transport_factory: Builds the transport of every client created
                by this registry. Clients use HttpxTransport when omitted.
        """
        self._transport_factory = transport_factory
        self._configs: dict[str, ConnectionConfig] = {}
        self._connections: dict[str, ElasticsearchClient] = {}
        self._lock = threading.Lock()

    def configure(
        self,
        name: str,
        config: ConnectionConfig | Mapping[str, Any] | None = None,
        **options: Any,
    ) -> ConnectionConfig:
        """Store (or overwrite) the configuration for a name. No I/O.

        Args:
            name: Connection name
            config: A ConnectionConfig or a mapping of its fields; defaults
                are used for anything not given
            **options: Field overrides applied on top of config

        Returns:
            The stored ConnectionConfig

        Raises:
            ConfigurationError: On unknown keys or invalid values
        """
        if isinstance(config, ConnectionConfig):
            base = asdict(config)
        else:
            base = dict(config or {})
        resolved = ConnectionConfig.from_mapping({**base, **options})

        with self._lock:
            self._configs[name] = resolved

        logger.info("connection_configured", name=name, base_url=resolved.base_url)
        return resolved

    def config(self, name: str) -> ConnectionConfig | None:
        """Get the stored configuration for a name, or None."""
        with self._lock:
            return self._configs.get(name)

    def is_configured(self, name: str) -> bool:
        with self._lock:
            return name in self._configs

    def names(self) -> list[str]:
        """Configured connection names, in configuration order."""
        with self._lock:
            return list(self._configs)

    def connection(self, name: str = DEFAULT_CONNECTION_NAME) -> ElasticsearchClient:
        """Get the client for a name, building and caching it on first access.

        Args:
            name: Connection name

        Returns:
            The cached ElasticsearchClient for the name

        Raises:
            ConfigurationNotFoundError: If the name was never configured
        """
        with self._lock:
            client = self._connections.get(name)
            if client is not None:
                return client

            config = self._configs.get(name)
            if config is None:
                raise ConfigurationNotFoundError(name)

            transport = self._transport_factory(config) if self._transport_factory else None
            client = ElasticsearchClient(config=config, transport=transport)
            self._connections[name] = client

        logger.info("connection_created", name=name, base_url=client.base_url)
        return client

    def drop(self, name: str) -> bool:
        """Close and evict the cached client of a name; its config is kept.

        Returns:
            True if a cached client was dropped
        """
        with self._lock:
            client = self._connections.pop(name, None)
        if client is None:
            return False
        client.close()
        logger.info("connection_dropped", name=name)
        return True

    def close(self) -> None:
        """Close every cached client and clear the cache."""
        with self._lock:
            clients = list(self._connections.items())
            self._connections.clear()
        for name, client in clients:
            client.close()
            logger.info("connection_dropped", name=name)


# =============================================================================
# Process-wide default registry
# =============================================================================

_registry: ConnectionRegistry | None = None
_registry_lock = threading.Lock()


def get_registry() -> ConnectionRegistry:
    """Get the process-wide default registry, creating it on first call."""
    global _registry
    with _registry_lock:
        if _registry is None:
            _registry = ConnectionRegistry()
        return _registry


def reset_registry() -> None:
    """Close and discard the default registry (test isolation)."""
    global _registry
    with _registry_lock:
        registry, _registry = _registry, None
    if registry is not None:
        registry.close()

