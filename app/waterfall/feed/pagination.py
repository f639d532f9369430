"""Pagination helpers.

List APIs work in pages (e.g. 30 templates/page). Keep the math here so
feeds don't re-implement offset calculations differently.
"""

from __future__ import annotations


def page_to_limit_offset(*, page: int, page_size: int) -> tuple[int, int]:
    """Convert a 1-based page number to (limit, offset)."""

    if page <= 0:
        raise ValueError("page must be >= 1")
    if page_size <= 0:
        raise ValueError("page_size must be > 0")

    return int(page_size), int((page - 1) * page_size)
