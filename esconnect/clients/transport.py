"""
HTTP Transport

Performs a single HTTP request/response cycle against the engine.

Patterns Applied:
- Anti-Pattern #12: Connection pooling (one httpx.Client per connection)
- Repository Pattern: TransportProtocol for duck typing, FakeTransport for tests
- Anti-Pattern #7/#13: Custom namespaced exceptions

There is deliberately no retry loop: a failed attempt surfaces immediately.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import Any, Final

import httpx

from esconnect.core.exceptions import TransportError
from esconnect.core.logging import get_logger

logger = get_logger(__name__)

# Mapped statuses for I/O failures
TIMEOUT_STATUS: Final[int] = 500
UNREACHABLE_STATUS: Final[int] = 504


@dataclass(frozen=True)
class RawResponse:
    """Raw status code and body bytes of one HTTP exchange."""

    status_code: int
    body: bytes = b""


# =============================================================================
# HttpxTransport Implementation
# =============================================================================


class HttpxTransport:
    """httpx-backed transport.

    Attributes:
        timeout_millis: Per-request timeout in milliseconds
    """

    def __init__(
        self,
        timeout_millis: int,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """Initialize the transport.

        Args:
            timeout_millis: Per-request timeout in milliseconds
            transport: Optional httpx transport (httpx.MockTransport in tests)
        """
        self.timeout_millis = timeout_millis

        # Connection pooling: single client instance (Anti-Pattern #12)
        self._client = httpx.Client(
            timeout=httpx.Timeout(timeout_millis / 1000),
            transport=transport,
        )

    def send(
        self,
        method: str,
        url: str,
        json_body: Any | None = None,
        params: dict[str, str] | None = None,
    ) -> RawResponse:
        """Send one request.

        The body is only sent (as application/json) when json_body is
        non-empty.

        Args:
            method: HTTP method (GET, PUT, POST, DELETE, HEAD)
            url: Absolute URL
            json_body: JSON-serializable payload
            params: Query string parameters

        Returns:
            RawResponse with status code and body bytes

        Raises:
            TransportError: 500 on timeout, 504 on any other request failure,
                including a response body that cannot be decoded
        """
        try:
            response = self._client.request(
                method,
                url,
                json=json_body if json_body else None,
                params=params,
            )
        except httpx.TimeoutException as e:
            logger.warning("elasticsearch_transport_failed", method=method, url=url, error=str(e))
            raise TransportError(
                str(e) or f"Request to {url} timed out",
                status_code=TIMEOUT_STATUS,
            ) from e
        except httpx.RequestError as e:
            logger.warning("elasticsearch_transport_failed", method=method, url=url, error=str(e))
            raise TransportError(
                str(e) or f"Could not reach {url}",
                status_code=UNREACHABLE_STATUS,
            ) from e

        return RawResponse(status_code=response.status_code, body=response.content)

    def close(self) -> None:
        """Close the HTTP client connection pool."""
        self._client.close()


# =============================================================================
# FakeTransport for Testing
# =============================================================================


@dataclass
class SentRequest:
    """A request captured by FakeTransport."""

    method: str
    url: str
    json_body: Any | None = None
    params: dict[str, str] | None = None


@dataclass
class FakeTransport:
    """Fake transport for unit testing without real HTTP.

    Implements TransportProtocol for duck typing. Queued responses (or
    exceptions) are replayed in order; once the queue is empty every request
    gets ``default``.
    """

    default: RawResponse = field(default_factory=lambda: RawResponse(200, b"{}"))
    requests: list[SentRequest] = field(default_factory=list)
    closed: bool = False
    _queue: deque[RawResponse | Exception] = field(default_factory=deque)

    def queue(self, *responses: RawResponse | Exception) -> None:
        """Queue responses (or exceptions to raise) for the next requests."""
        self._queue.extend(responses)

    def send(
        self,
        method: str,
        url: str,
        json_body: Any | None = None,
        params: dict[str, str] | None = None,
    ) -> RawResponse:
        self.requests.append(SentRequest(method, url, json_body, params))
        item = self._queue.popleft() if self._queue else self.default
        if isinstance(item, Exception):
            raise item
        return item

    def close(self) -> None:
        self.closed = True

    @property
    def last_request(self) -> SentRequest:
        return self.requests[-1]
