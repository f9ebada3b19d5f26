"""
HTTP Transport Tests

Tests for HttpxTransport and FakeTransport:
- Request shape (method, JSON body, Content-Type, query string)
- Raw status/body passthrough
- Timeout -> TransportError(500), other I/O failures -> TransportError(504)
- FakeTransport replay semantics
"""

import json

import httpx
import pytest

from esconnect.clients.transport import FakeTransport, HttpxTransport, RawResponse
from esconnect.core.exceptions import TransportError

BASE_URL = "http://es.local:9200"


def make_transport(handler, timeout_millis: int = 1000) -> HttpxTransport:
    return HttpxTransport(
        timeout_millis=timeout_millis,
        transport=httpx.MockTransport(handler),
    )


class RecordingHandler:
    """httpx.MockTransport handler remembering the last request."""

    def __init__(self, response: httpx.Response | None = None) -> None:
        self.response = response or httpx.Response(200, json={})
        self.request: httpx.Request | None = None

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.request = request
        return self.response


# =============================================================================
# Request Shape Tests
# =============================================================================


class TestHttpxTransportRequests:
    """Tests for how HttpxTransport builds requests."""

    def test_sends_json_body_with_content_type(self) -> None:
        """A non-empty body is sent as application/json."""
        handler = RecordingHandler()
        transport = make_transport(handler)

        transport.send("PUT", f"{BASE_URL}/posts/_doc/1", json_body={"title": "a"})

        assert handler.request is not None
        assert handler.request.method == "PUT"
        assert handler.request.headers["content-type"] == "application/json"
        assert json.loads(handler.request.content) == {"title": "a"}

    def test_get_request_may_carry_body(self) -> None:
        """Search bodies travel on GET requests."""
        handler = RecordingHandler()
        transport = make_transport(handler)
        query = {"query": {"match_all": {}}}

        transport.send("GET", f"{BASE_URL}/posts/_search", json_body=query)

        assert handler.request.method == "GET"
        assert json.loads(handler.request.content) == query

    def test_no_body_means_no_content_type(self) -> None:
        """Without a body, no Content-Type header is sent."""
        handler = RecordingHandler()
        transport = make_transport(handler)

        transport.send("GET", f"{BASE_URL}/_all")

        assert "content-type" not in handler.request.headers
        assert handler.request.content == b""

    def test_empty_body_is_not_sent(self) -> None:
        """An empty mapping is treated like no body."""
        handler = RecordingHandler()
        transport = make_transport(handler)

        transport.send("GET", f"{BASE_URL}/posts/_count", json_body={})

        assert "content-type" not in handler.request.headers
        assert handler.request.content == b""

    def test_query_params_are_encoded(self) -> None:
        """Query string parameters are URL-encoded."""
        handler = RecordingHandler()
        transport = make_transport(handler)

        transport.send("GET", f"{BASE_URL}/posts/_search", params={"q": "+php +framework"})

        assert handler.request.url.params["q"] == "+php +framework"
        assert handler.request.url.path == "/posts/_search"

    def test_timeout_is_converted_from_milliseconds(self) -> None:
        """timeout_millis is applied in seconds to the httpx client."""
        transport = make_transport(RecordingHandler(), timeout_millis=2500)

        assert transport.timeout_millis == 2500
        assert transport._client.timeout.read == 2.5
        assert transport._client.timeout.connect == 2.5


# =============================================================================
# Response Tests
# =============================================================================


class TestHttpxTransportResponses:
    """Tests for the RawResponse returned by HttpxTransport."""

    def test_returns_status_and_raw_body(self) -> None:
        """Status code and body bytes are passed through untouched."""
        handler = RecordingHandler(httpx.Response(404, content=b'{"found": false}'))
        transport = make_transport(handler)

        response = transport.send("GET", f"{BASE_URL}/posts/_doc/9")

        assert response == RawResponse(status_code=404, body=b'{"found": false}')

    def test_head_returns_empty_body(self) -> None:
        """HEAD answers carry a status only."""
        handler = RecordingHandler(httpx.Response(200))
        transport = make_transport(handler)

        response = transport.send("HEAD", f"{BASE_URL}/posts")

        assert response.status_code == 200
        assert response.body == b""

    def test_close_closes_client(self) -> None:
        """close() releases the httpx client."""
        transport = make_transport(RecordingHandler())

        transport.close()

        assert transport._client.is_closed


# =============================================================================
# Error Mapping Tests
# =============================================================================


class TestHttpxTransportErrors:
    """Tests for I/O failure mapping."""

    def test_timeout_maps_to_500(self) -> None:
        """A timed-out request raises TransportError with status 500."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        transport = make_transport(handler)

        with pytest.raises(TransportError) as exc_info:
            transport.send("GET", f"{BASE_URL}/_all")

        assert exc_info.value.status_code == 500
        assert "timed out" in str(exc_info.value)
        assert isinstance(exc_info.value.__cause__, httpx.ReadTimeout)

    def test_connect_timeout_maps_to_500(self) -> None:
        """Connect timeouts are timeouts too."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectTimeout("connect timed out", request=request)

        with pytest.raises(TransportError) as exc_info:
            make_transport(handler).send("GET", f"{BASE_URL}/_all")

        assert exc_info.value.status_code == 500

    def test_connection_refused_maps_to_504(self) -> None:
        """A refused connection raises TransportError with status 504."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("Connection refused", request=request)

        with pytest.raises(TransportError) as exc_info:
            make_transport(handler).send("GET", f"{BASE_URL}/_all")

        assert exc_info.value.status_code == 504
        assert str(exc_info.value) == "Connection refused"
        assert isinstance(exc_info.value.__cause__, httpx.ConnectError)

    def test_other_io_failures_map_to_504(self) -> None:
        """Protocol-level failures also map to 504."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.RemoteProtocolError("peer closed connection", request=request)

        with pytest.raises(TransportError) as exc_info:
            make_transport(handler).send("GET", f"{BASE_URL}/_all")

        assert exc_info.value.status_code == 504

    def test_undecodable_body_maps_to_504(self) -> None:
        """A body that fails content decoding is a transport failure, not a raw httpx error."""

        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(
                200,
                headers={"content-encoding": "gzip"},
                content=b"not gzip",
            )

        with pytest.raises(TransportError) as exc_info:
            make_transport(handler).send("GET", f"{BASE_URL}/_all")

        assert exc_info.value.status_code == 504
        assert isinstance(exc_info.value.__cause__, httpx.DecodingError)

    def test_single_attempt_only(self) -> None:
        """Failures are not retried."""
        calls = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            raise httpx.ConnectError("Connection refused", request=request)

        with pytest.raises(TransportError):
            make_transport(handler).send("GET", f"{BASE_URL}/_all")

        assert len(calls) == 1


# =============================================================================
# FakeTransport Tests
# =============================================================================


class TestFakeTransport:
    """Tests for FakeTransport used throughout the client tests."""

    def test_records_requests(self) -> None:
        fake = FakeTransport()

        fake.send("PUT", f"{BASE_URL}/posts", json_body={"settings": {}}, params=None)

        assert len(fake.requests) == 1
        assert fake.last_request.method == "PUT"
        assert fake.last_request.url == f"{BASE_URL}/posts"
        assert fake.last_request.json_body == {"settings": {}}

    def test_replays_queue_then_default(self) -> None:
        fake = FakeTransport(default=RawResponse(204, b""))
        fake.queue(RawResponse(201, b"{}"), RawResponse(202, b"{}"))

        statuses = [fake.send("GET", BASE_URL).status_code for _ in range(3)]

        assert statuses == [201, 202, 204]

    def test_raises_queued_exceptions(self) -> None:
        fake = FakeTransport()
        fake.queue(TransportError("Connection refused", status_code=504))

        with pytest.raises(TransportError):
            fake.send("GET", BASE_URL)

        assert fake.send("GET", BASE_URL).status_code == 200

    def test_close(self) -> None:
        fake = FakeTransport()

        fake.close()

        assert fake.closed is True
