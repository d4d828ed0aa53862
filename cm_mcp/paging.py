"""Client-side pagination for Cloudera Manager endpoints that return everything at once."""

from __future__ import annotations

from typing import Any, TypedDict

DEFAULT_LIMIT = 50
MAX_LIMIT = 500


class Paging(TypedDict):
    total: int
    limit: int
    offset: int
    nextOffset: int | None


class PagedResult(TypedDict):
    items: list[Any]
    paging: Paging


def collection_items(raw: Any) -> list[Any]:
    """Normalise a bare list or an ``{"items": [...]}`` envelope to a list."""
    if isinstance(raw, list):
        return raw
    if isinstance(raw, dict) and isinstance(raw.get("items"), list):
        return raw["items"]
    return []


def page(raw: Any, limit: int = DEFAULT_LIMIT, offset: int = 0) -> PagedResult:
    items = collection_items(raw)
    total = len(items)
    end = offset + limit
    return {
        "items": items[offset:end],
        "paging": {
            "total": total,
            "limit": limit,
            "offset": offset,
            "nextOffset": end if end < total else None,
        },
    }
