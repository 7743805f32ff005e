"""Cursor pagination over materialized, newest-first candidate lists.

Two cursor styles coexist:

- follower/following lists resume *after* an edge id (``paginate_after``);
  a cursor that is no longer in the list restarts from the beginning.
- the feed uses a timestamp as an exclusive upper bound; that filter runs in
  the query, and the already-filtered rows go through ``take_page``.

Both detect ``has_more`` by probing for ``limit + 1`` items instead of counting.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import Generic, TypeVar

T = TypeVar("T")
K = TypeVar("K")


@dataclass
class Page(Generic[T, K]):
    """One page of results plus the cursor for the next one."""

    items: list[T] = field(default_factory=list)
    next_cursor: K | None = None
    has_more: bool = False


def clamp_limit(limit: int | None, default: int, maximum: int) -> int:
    """Apply the default page size and keep it within [1, maximum]."""
    if not limit or limit < 1:
        return default
    return min(limit, maximum)


def take_page(candidates: Sequence[T], limit: int, key: Callable[[T], K]) -> Page[T, K]:
    """Slice the first page out of ``candidates`` by fetching limit+1 rows."""
    window = list(candidates[: limit + 1])
    has_more = len(window) > limit
    items = window[:limit]
    next_cursor = key(items[-1]) if has_more and items else None
    return Page(items=items, next_cursor=next_cursor, has_more=has_more)


def paginate_after(
    candidates: Sequence[T],
    cursor: K | None,
    limit: int,
    key: Callable[[T], K],
) -> Page[T, K]:
    """Return the page that starts right after the item whose key equals ``cursor``.

    Stale cursors (not found) fail open and start from the first item.
    """
    start = 0
    if cursor is not None:
        for index, item in enumerate(candidates):
            if key(item) == cursor:
                start = index + 1
                break
    return take_page(candidates[start:], limit, key)
