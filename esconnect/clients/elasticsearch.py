"""
Elasticsearch Client

Index and document operations against one engine connection.

Every body-bearing operation follows the same shape: build method + path
(+ JSON body), send it, decode the body, raise EngineError when the body is
an error envelope, then apply the operation's own success logic.

Patterns Applied:
- Anti-Pattern #12: One transport (connection pool) per client
- Repository Pattern: TransportProtocol injection, FakeTransport in tests
- Anti-Pattern #7/#13: Custom namespaced exceptions
"""

from __future__ import annotations

import threading
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any, Final
from urllib.parse import quote

from esconnect.clients.decoder import decode_body, error_reason
from esconnect.clients.normalizer import normalize_hits
from esconnect.clients.transport import HttpxTransport
from esconnect.core.config import ConnectionConfig
from esconnect.core.exceptions import EngineError, NotFoundError
from esconnect.core.logging import get_logger
from esconnect.core.tracing import record_status, request_span
from esconnect.protocols import TransportProtocol

STATUS_OK: Final[int] = 200


@dataclass(frozen=True)
class LastResponse:
    """Status code and decoded body of the most recent request."""

    status_code: int
    body: Any | None = None


def _segment(value: Any) -> str:
    """Percent-encode one URL path segment."""
    return quote(str(value), safe="")


# =============================================================================
# ElasticsearchClient Implementation
# =============================================================================


class ElasticsearchClient:
    """Client for one engine connection.

    Calls on one client are serialized; the lock also guards the
    ``last_response`` slot, which is kept for introspection only. Operations
    compute their results from the response they received.

    Attributes:
        config: Connection configuration the client was built from
        base_url: e.g. http://127.0.0.1:9200, computed once
        timeout_millis: Per-request timeout in milliseconds
    """

    def __init__(
        self,
        config: ConnectionConfig | None = None,
        transport: TransportProtocol | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            config: Connection configuration (defaults when omitted)
            transport: Transport to send requests with (HttpxTransport when omitted)
        """
        self.config = config or ConnectionConfig()
        self.base_url = self.config.base_url
        self.timeout_millis = self.config.timeout_millis
        self._transport: TransportProtocol = transport or HttpxTransport(
            timeout_millis=self.timeout_millis
        )
        self._log = get_logger(__name__, base_url=self.base_url)
        self._lock = threading.RLock()
        self._last_response: LastResponse | None = None

    def __enter__(self) -> ElasticsearchClient:
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"ElasticsearchClient(base_url={self.base_url!r})"

    @property
    def last_response(self) -> LastResponse | None:
        """The last response received from the engine, if any."""
        with self._lock:
            return self._last_response

    def close(self) -> None:
        """Release the underlying HTTP connection."""
        self._transport.close()

    # =========================================================================
    # Request primitives
    # =========================================================================

    def send_request(
        self,
        method: str,
        path: str,
        data: Any | None = None,
        params: dict[str, str] | None = None,
    ) -> LastResponse:
        """Send a request to the engine and record the response.

        No error-envelope check is made here; the engine's answer is returned
        as-is.

        Args:
            method: HTTP method
            path: Path below the base URL, starting with "/"
            data: JSON body (only sent when non-empty)
            params: Query string parameters

        Returns:
            LastResponse with status code and decoded body

        Raises:
            TransportError: When the engine cannot be reached in time
        """
        url = f"{self.base_url}{path}"
        with self._lock, request_span(method, url) as span:
            self._log.debug("elasticsearch_request", method=method, path=path)

            raw = self._transport.send(method, url, json_body=data, params=params)

            record_status(span, raw.status_code)
            response = LastResponse(status_code=raw.status_code, body=decode_body(raw.body))
            self._last_response = response
            return response

    def _request(
        self,
        method: str,
        path: str,
        data: Any | None = None,
        params: dict[str, str] | None = None,
    ) -> LastResponse:
        """send_request() followed by the error-envelope check.

        Raises:
            EngineError: If the body carries ``error.reason``
        """
        response = self.send_request(method, path, data=data, params=params)
        reason = error_reason(response.body)
        if reason is not None:
            self._log.warning(
                "elasticsearch_engine_error",
                method=method,
                path=path,
                status_code=response.status_code,
                reason=reason,
            )
            raise EngineError(reason, status_code=response.status_code)
        return response

    @staticmethod
    def _body(response: LastResponse) -> dict[str, Any]:
        return response.body if isinstance(response.body, dict) else {}

    # =========================================================================
    # Index operations
    # =========================================================================

    def indexes(self) -> list[str]:
        """List the names of all indexes.

        Raises:
            EngineError: On an engine error envelope
        """
        response = self._request("GET", "/_all")
        return list(self._body(response))

    def add_index(self, name: str, settings: Mapping[str, Any] | None = None) -> bool:
        """Create an index.

        Args:
            name: Index name
            settings: Optional settings/mappings body

        Returns:
            True if the engine acknowledged the creation

        Raises:
            EngineError: E.g. when the index already exists
        """
        response = self._request(
            "PUT", f"/{_segment(name)}", data=dict(settings) if settings else None
        )
        return self._body(response).get("acknowledged") is True

    def remove_index(self, name: str) -> bool:
        """Delete an index.

        Returns:
            True if the engine acknowledged the deletion

        Raises:
            EngineError: E.g. when the index does not exist
        """
        response = self._request("DELETE", f"/{_segment(name)}")
        return self._body(response).get("acknowledged") is True

    def index_exists(self, name: str) -> bool:
        """Check whether an index exists. Never raises on 404."""
        response = self.send_request("HEAD", f"/{_segment(name)}")
        return response.status_code == STATUS_OK

    def get_index(self, name: str) -> dict[str, Any] | None:
        """Get the aliases, mappings and settings of an index.

        Returns:
            The index information, or None if the body does not contain it

        Raises:
            EngineError: On an engine error envelope
        """
        response = self._request("GET", f"/{_segment(name)}")
        return self._body(response).get(name)

    # =========================================================================
    # Document operations
    # =========================================================================

    def index(self, index: str, doc_id: Any, data: Mapping[str, Any]) -> bool:
        """Index (insert or replace) a document.

        Args:
            index: Index name e.g. development_posts
            doc_id: Document identifier
            data: Fields to store, e.g. {"title": "article title"}

        Returns:
            True if the engine answered with a non-empty body

        Raises:
            EngineError: On an engine error envelope
        """
        response = self._request(
            "PUT", f"/{_segment(index)}/_doc/{_segment(doc_id)}", data=dict(data)
        )
        return bool(response.body)

    def get(self, index: str, doc_id: Any) -> dict[str, Any]:
        """Fetch the stored fields of a document.

        Returns:
            The document's ``_source``

        Raises:
            NotFoundError: If the document does not exist
            EngineError: On an engine error envelope
        """
        response = self._request("GET", f"/{_segment(index)}/_doc/{_segment(doc_id)}")
        body = self._body(response)
        if body.get("found"):
            return body.get("_source") or {}
        raise NotFoundError(index, doc_id)

    def exists(self, index: str, doc_id: Any) -> bool:
        """Check whether a document exists. Never raises on 404."""
        response = self.send_request("HEAD", f"/{_segment(index)}/_doc/{_segment(doc_id)}")
        return response.status_code == STATUS_OK

    def deindex(self, index: str, doc_id: Any) -> bool:
        """Remove one document, or several via delete-by-query.

        Args:
            index: Index name
            doc_id: A single id, or a collection of ids

        Returns:
            For a single id, True if the engine reports it deleted. For a
            collection, True once the delete-by-query request round-trips
            without an engine error (no per-id outcome is reported).

        Raises:
            EngineError: On an engine error envelope
        """
        if isinstance(doc_id, Iterable) and not isinstance(doc_id, (str, bytes)):
            return self._deindex_all(index, list(doc_id))

        response = self._request("DELETE", f"/{_segment(index)}/_doc/{_segment(doc_id)}")
        return self._body(response).get("result") == "deleted"

    def _deindex_all(self, index: str, ids: list[Any]) -> bool:
        query = {"query": {"terms": {"_id": ids}}}
        self._request("POST", f"/{_segment(index)}/_delete_by_query", data=query)
        return True

    def search(
        self,
        index: str | Sequence[str],
        query: str | Mapping[str, Any],
    ) -> list[dict[str, Any]]:
        """Search one or more indexes.

        Args:
            index: Index name, or names searched together (order kept)
            query: A query string such as ``"+python +framework"`` or
                ``"title:how to"``, sent as the ``q`` parameter; or a request
                body such as
                ``{"query": {"multi_match": {"query": "kw", "fields": ["title"]}}}``

        Returns:
            Document records ``{"id": ..., **_source}`` in engine order

        Raises:
            ValueError: If no index is given
            EngineError: On an engine error envelope
        """
        names = [index] if isinstance(index, str) else list(index)
        if not names:
            raise ValueError("At least one index is required")
        path = "/{}/_search".format(",".join(_segment(name) for name in names))

        if isinstance(query, str):
            response = self._request("GET", path, params={"q": query})
        else:
            response = self._request("GET", path, data=dict(query))

        return normalize_hits(response.body)

    def count(self, index: str, query: Mapping[str, Any] | None = None) -> int:
        """Count the documents of an index.

        Args:
            index: Index name
            query: Optional term query, e.g. {"title": "how to"}

        Returns:
            Number of matching documents

        Raises:
            EngineError: On an engine error envelope, or an answer without
                a count
        """
        data = {"query": {"term": dict(query)}} if query else None
        response = self._request("GET", f"/{_segment(index)}/_count", data=data)
        body = self._body(response)
        if "count" not in body:
            raise EngineError("Response carries no `count`", status_code=response.status_code)
        return int(body["count"])
