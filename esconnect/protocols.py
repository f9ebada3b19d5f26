"""
esconnect - Protocols

Defines Protocol interfaces for duck typing support.

Patterns Applied:
- Protocol typing for duck typing
- Structural subtyping (no inheritance required)

Anti-Patterns Avoided:
- Tight coupling to concrete implementations
- Runtime trait detection (models declare the Searchable capability instead)
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from esconnect.clients.transport import RawResponse


class TransportProtocol(Protocol):
    """Protocol for the HTTP transport used by ElasticsearchClient.

    Enables FakeTransport for testing without a running engine.
    """

    def send(
        self,
        method: str,
        url: str,
        json_body: Any | None = None,
        params: dict[str, str] | None = None,
    ) -> RawResponse:
        """Perform one request/response cycle."""
        ...

    def close(self) -> None:
        """Release the underlying connection."""
        ...


@runtime_checkable
class Searchable(Protocol):
    """Capability of a model type that can rebuild its search index.

    A reindex loop checks ``isinstance(model, Searchable)`` and calls
    reindex() on the models that have the capability, skipping the others.
    Implementations use add_index/remove_index/index on a client.
    """

    def reindex(self) -> int:
        """Drop, recreate and refill the model's index.

        Returns:
            Number of records added to the index
        """
        ...
