"""
Search Engine Clients

HTTP client for Elasticsearch-compatible engines, split into:
- transport: one HTTP request/response cycle (httpx)
- decoder: JSON decoding and error-envelope detection
- normalizer: search hits to flat document records
- elasticsearch: the index/document operations
"""

from esconnect.clients.elasticsearch import ElasticsearchClient, LastResponse
from esconnect.clients.transport import FakeTransport, HttpxTransport, RawResponse

__all__ = [
    "ElasticsearchClient",
    "FakeTransport",
    "HttpxTransport",
    "LastResponse",
    "RawResponse",
]
