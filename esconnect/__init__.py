"""esconnect: connection-managed client for Elasticsearch-compatible engines.

This package mediates all communication with a search engine's HTTP
interface:
- Named connection configurations with lazily built, cached clients
- Index and document operations translated into HTTP requests
- Engine error envelopes and transport failures mapped to typed errors
- Search hits normalized into flat document records
"""

from esconnect._version import __version__
from esconnect.clients.elasticsearch import ElasticsearchClient, LastResponse
from esconnect.core.config import ConnectionConfig
from esconnect.core.exceptions import (
    ConfigurationError,
    ConfigurationNotFoundError,
    EngineError,
    EsConnectError,
    NotFoundError,
    TransportError,
)
from esconnect.protocols import Searchable
from esconnect.registry import ConnectionRegistry, get_registry, reset_registry

__all__ = [
    "ConfigurationError",
    "ConfigurationNotFoundError",
    "ConnectionConfig",
    "ConnectionRegistry",
    "ElasticsearchClient",
    "EngineError",
    "EsConnectError",
    "LastResponse",
    "NotFoundError",
    "Searchable",
    "TransportError",
    "__version__",
    "get_registry",
    "reset_registry",
]
