"""Offset pagination metadata for list-returning tools."""

from __future__ import annotations

from typing import Any


def build_pagination_metadata(total: int, offset: int, limit: int) -> dict[str, Any]:
    """Describe one page of an offset/limit slice.

    ``has_more`` is true when at least one item lies beyond this page.
    ``next_offset`` is None on the last page.
    """
    has_more = offset + limit < total
    return {
        "total": total,
        "offset": offset,
        "limit": limit,
        "has_more": has_more,
        "next_offset": offset + limit if has_more else None,
    }
