"""
Result Normalizer

Converts search responses into flat document records:

    [{"id": "1234", "title": "this is a test"}]
"""

from __future__ import annotations

from typing import Any


def to_document_record(hit: dict[str, Any]) -> dict[str, Any]:
    """Merge a hit's identifier and its stored fields.

    ``id`` is set first and ``_source`` is merged over it, so a stored field
    literally named ``id`` replaces the engine identifier.
    """
    record: dict[str, Any] = {"id": hit.get("_id")}
    record.update(hit.get("_source") or {})
    return record


def _total_hits(hits: dict[str, Any]) -> int:
    total = hits.get("total")
    # Engines before 7.0 report the total as a bare integer
    if isinstance(total, dict):
        total = total.get("value")
    return total if isinstance(total, int) else 0


def normalize_hits(body: Any | None) -> list[dict[str, Any]]:
    """Project the hits of a search response into document records.

    Args:
        body: Decoded search response

    Returns:
        Document records in the order the engine returned them, or an empty
        list when the response reports no hits
    """
    if not isinstance(body, dict):
        return []
    hits = body.get("hits")
    if not isinstance(hits, dict) or _total_hits(hits) <= 0:
        return []
    return [to_document_record(hit) for hit in hits.get("hits", [])]
