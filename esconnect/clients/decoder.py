"""Response decoding and error-envelope detection."""

from __future__ import annotations

import json
from typing import Any


def decode_body(raw: bytes | None) -> Any | None:
    """Parse a raw response body as JSON.

    HEAD responses carry no body and some endpoints answer with plain text,
    so an empty or unparseable body decodes to None instead of raising.

    Args:
        raw: Body bytes as returned by the transport

    Returns:
        Decoded JSON value, or None
    """
    if not raw:
        return None
    try:
        return json.loads(raw)
    except ValueError:
        return None


def error_reason(body: Any | None) -> str | None:
    """Extract the reason of an engine error envelope.

    Args:
        body: Decoded response body

    Returns:
        ``body["error"]["reason"]``, the bare string when ``error`` is a
        string, or None when the body carries no error
    """
    if not isinstance(body, dict) or "error" not in body:
        return None
    error = body["error"]
    if isinstance(error, dict):
        reason = error.get("reason")
        return None if reason is None else str(reason)
    if isinstance(error, str):
        return error
    return None
