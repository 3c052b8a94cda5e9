"""Page slicing and page-number tokens for catalog views."""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")

ELLIPSIS = "..."

PageToken = int | str


def total_pages(count: int, page_size: int) -> int:
    """Number of pages needed for ``count`` items; an empty view still has one page."""
    if page_size < 1:
        raise ValueError(f"page_size must be >= 1, got {page_size}")
    return max(1, math.ceil(count / page_size))


def paginate(items: Sequence[T], page: int, page_size: int) -> list[T]:
    """Return the 1-based ``page`` of ``items``; pages past the end are empty.

    Raises:
        ValueError: If ``page`` or ``page_size`` is less than 1.
    """
    if page < 1:
        raise ValueError(f"page must be >= 1, got {page}")
    if page_size < 1:
        raise ValueError(f"page_size must be >= 1, got {page_size}")
    start = (page - 1) * page_size
    return list(items[start : start + page_size])


def page_tokens(current: int, total: int) -> list[PageToken]:
    """Page numbers to display, with ``ELLIPSIS`` marking skipped ranges.

    Always shows the first and last page and the pages adjacent to
    ``current`` (clamped into range). A single skipped page is shown as its
    number; ``ELLIPSIS`` only stands in for two or more pages.

    Example:
        >>> page_tokens(5, 10)
        [1, '...', 4, 5, 6, '...', 10]
    """
    total = max(1, total)
    current = min(max(1, current), total)
    shown = sorted({1, total, *(p for p in (current - 1, current, current + 1) if 1 <= p <= total)})

    tokens: list[PageToken] = []
    previous: int | None = None
    for number in shown:
        if previous is not None and number - previous == 2:
            tokens.append(previous + 1)
        elif previous is not None and number - previous > 2:
            tokens.append(ELLIPSIS)
        tokens.append(number)
        previous = number
    return tokens


@dataclass(frozen=True)
class Page(Generic[T]):
    """One page of a view plus the numbers needed to render navigation."""

    items: list[T]
    page: int
    page_size: int
    total_items: int

    @property
    def total_pages(self) -> int:
        return total_pages(self.total_items, self.page_size)

    @property
    def tokens(self) -> list[PageToken]:
        return page_tokens(self.page, self.total_pages)

    @property
    def has_previous(self) -> bool:
        return self.page > 1

    @property
    def has_next(self) -> bool:
        return self.page < self.total_pages


def build_page(items: Sequence[T], page: int, page_size: int) -> Page[T]:
    """Slice ``items`` and wrap the result with its navigation metadata."""
    return Page(
        items=paginate(items, page, page_size),
        page=page,
        page_size=page_size,
        total_items=len(items),
    )


__all__ = ["ELLIPSIS", "Page", "PageToken", "build_page", "page_tokens", "paginate", "total_pages"]
