"""Revision windowing — which revision numbers belong on a page.

Revisions are numbered 1..N and shown newest first.  The ceiling is either
the backend's live revision count or a caller-supplied upper bound, which
may exceed what the backend actually holds.  Out-of-range input yields an
empty window, never an exception.
"""

from __future__ import annotations

PAGE_SIZE = 20


def window(
    ceiling: int | None,
    page: int = 1,
    show_all: bool = False,
    *,
    page_size: int = PAGE_SIZE,
) -> list[int]:
    """Return the revisions for *page*, descending.

    >>> window(25, 2)
    [5, 4, 3, 2, 1]
    """
    if ceiling is None or ceiling <= 0:
        return []
    if show_all:
        return list(range(ceiling, 0, -1))
    if page < 1 or page_size < 1:
        return []

    upper = ceiling - (page - 1) * page_size
    if upper < 1:
        return []
    lower = max(1, ceiling - page * page_size + 1)
    return list(range(upper, lower - 1, -1))


def page_count(ceiling: int | None, *, page_size: int = PAGE_SIZE) -> int:
    """Number of non-empty pages for *ceiling*."""
    if ceiling is None or ceiling <= 0 or page_size < 1:
        return 0
    return -(-ceiling // page_size)


def has_next_page(
    ceiling: int | None, page: int, *, page_size: int = PAGE_SIZE
) -> bool:
    return page >= 1 and page < page_count(ceiling, page_size=page_size)
