"""
esconnect - Custom Exceptions

Error model for the search engine client.

Anti-Patterns Avoided:
- #7, #13 (Exception Shadowing): Custom namespaced exceptions.
  Use TransportError/NotFoundError from this module instead of shadowing
  builtins like ConnectionError or LookupError.
"""

from __future__ import annotations

from typing import Any


class EsConnectError(Exception):
    """Base exception for esconnect.

    All custom exceptions inherit from this base class so callers can catch
    every client failure with a single ``except`` clause.
    """

    pass


class ConfigurationError(EsConnectError):
    """Raised when a connection configuration is invalid."""

    pass


class ConfigurationNotFoundError(EsConnectError):
    """Raised when a connection name was never configured.

    The registry never falls back to a default configuration; callers must
    configure a name before asking for its connection.
    """

    def __init__(self, name: str) -> None:
        super().__init__(f"Configuration `{name}` not found")
        self.name = name


class TransportError(EsConnectError):
    """Raised when the engine could not be reached or did not answer in time.

    Attributes:
        status_code: Mapped status, 500 for timeouts and 504 for every other
            I/O failure (connection refused, DNS failure, ...).
    """

    def __init__(self, message: str, status_code: int) -> None:
        super().__init__(message)
        self.status_code = status_code


class EngineError(EsConnectError):
    """Raised when the engine answers with an ``{"error": {"reason": ...}}`` body,
    or with a body missing a field the operation cannot do without.

    ``str(error)`` is the engine's reason, verbatim.

    Attributes:
        reason: Reason string taken from the error envelope
        status_code: HTTP status of the response carrying the envelope
    """

    def __init__(self, reason: str, status_code: int | None = None) -> None:
        super().__init__(reason)
        self.reason = reason
        self.status_code = status_code


class NotFoundError(EsConnectError):
    """Raised when a document fetch round-trips but the document is absent."""

    def __init__(self, index: str, doc_id: Any) -> None:
        super().__init__(f"Document `{doc_id}` in index `{index}` does not exist")
        self.index = index
        self.doc_id = doc_id
