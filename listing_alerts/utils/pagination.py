"""Pagination arithmetic shared by the notification queries."""

from __future__ import annotations

import math

NOTIFICATIONS_PAGE_SIZE = 20
ADMIN_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100
# Keeps ``(page - 1) * page_size`` inside a signed 64-bit SQL integer.
MAX_PAGE = 1_000_000


def clamp_pagination(
    page: int | None, page_size: int | None, *, default_page_size: int
) -> tuple[int, int]:
    """Return ``(page, page_size)`` clamped to ``[1, MAX_PAGE]`` and ``[1, MAX_PAGE_SIZE]``.

    A missing ``page_size`` falls back to ``default_page_size``; each call site
    passes its own default.
    """

    page = page if page is not None else 1
    if page_size is None:
        page_size = default_page_size
    return min(max(page, 1), MAX_PAGE), min(max(page_size, 1), MAX_PAGE_SIZE)


def total_pages(total: int, page_size: int) -> int:
    return math.ceil(total / page_size) if total > 0 else 0


__all__ = [
    "ADMIN_PAGE_SIZE",
    "MAX_PAGE",
    "MAX_PAGE_SIZE",
    "NOTIFICATIONS_PAGE_SIZE",
    "clamp_pagination",
    "total_pages",
]
