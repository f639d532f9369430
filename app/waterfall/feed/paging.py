"""Infinite-scroll item feed.

Feeds the layout engine an ever-growing item list. Pages can overlap when
the backend list shifts between requests, so keys already seen are dropped
here; the engine itself never dedupes.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, List, Mapping, Sequence

from app.waterfall.feed.pagination import page_to_limit_offset
from app.waterfall.items.template_items import items_from_records
from app.waterfall.layout.items import LayoutItem

logger = logging.getLogger(__name__)

FetchPage = Callable[[int, int], Sequence[Mapping[str, Any]]]


class PagedItemFeed:
    def __init__(self, fetch_page: FetchPage, *, page_size: int = 30) -> None:
        if page_size <= 0:
            raise ValueError("page_size must be > 0")
        self._fetch_page = fetch_page
        self.page_size = page_size
        self.pages_loaded = 0
        self.finished = False
        self._items: List[LayoutItem] = []
        self._seen: set[str] = set()

    @property
    def items(self) -> List[LayoutItem]:
        return list(self._items)

    def load_next(self) -> List[LayoutItem]:
        """Fetch the next page and return the items it added.

        A short page marks the feed finished. Fetch errors propagate and
        leave the feed unchanged.
        """
        if self.finished:
            return []

        limit, offset = page_to_limit_offset(page=self.pages_loaded + 1, page_size=self.page_size)
        records = list(self._fetch_page(limit, offset))

        added: List[LayoutItem] = []
        for item in items_from_records(records):
            if item.key in self._seen:
                logger.debug("Dropping duplicate key %s from page %d", item.key, self.pages_loaded + 1)
                continue
            self._seen.add(item.key)
            added.append(item)

        self.pages_loaded += 1
        if len(records) < self.page_size:
            self.finished = True
        self._items.extend(added)
        return added

    def restart(self) -> None:
        """Forget everything loaded (new query, filter or sort)."""
        self.pages_loaded = 0
        self.finished = False
        self._items = []
        self._seen = set()


def list_fetcher(records: Sequence[Mapping[str, Any]]) -> FetchPage:
    """fetch_page over an in-memory record list."""

    def _fetch(limit: int, offset: int) -> Sequence[Mapping[str, Any]]:
        return records[offset:offset + limit]

    return _fetch
