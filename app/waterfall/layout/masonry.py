"""Masonry layout (container-first) engine.

This module is intentionally UI-framework agnostic.

Goal: given a *known* container width and a growing list of items with
declared dimensions, assign every item to a column and a pixel height
without waiting for assets to load, and keep already-placed items where
they are when more items arrive (infinite scroll).

One engine instance per rendered grid. The engine is synchronous and holds
the only mutable layout state; callers coalesce resize events before
calling layout().
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Tuple

from app.waterfall.layout.assign import SLACK, choose_column
from app.waterfall.layout.columns import (
    DEFAULT_TABLE,
    BreakpointTable,
    LayoutConfig,
    resolve_layout_config,
)
from app.waterfall.layout.heights import HeightPolicy, estimate_height
from app.waterfall.layout.items import LayoutItem

logger = logging.getLogger(__name__)


@dataclass
class MasonryColumn:
    accumulated_height: float = 0.0
    items: List[str] = field(default_factory=list)
    heights: List[float] = field(default_factory=list)

    def place(self, key: str, height: float) -> None:
        self.items.append(key)
        self.heights.append(height)
        self.accumulated_height += height

    def copy(self) -> "MasonryColumn":
        return MasonryColumn(self.accumulated_height, list(self.items), list(self.heights))


@dataclass(frozen=True)
class MasonryPlacement:
    key: str
    column: int
    x: float
    y: float
    width: float
    height: float


@dataclass(frozen=True)
class MasonryLayout:
    """Snapshot returned by MasonryLayoutEngine.layout()."""

    columns: Tuple[MasonryColumn, ...]
    heights_by_key: Dict[str, float]
    config: LayoutConfig
    epoch: int

    @property
    def card_width(self) -> float:
        return self.config.card_width

    @property
    def gap(self) -> float:
        return self.config.gap

    @property
    def column_heights(self) -> List[float]:
        return [c.accumulated_height for c in self.columns]

    @property
    def imbalance(self) -> float:
        heights = self.column_heights
        return max(heights) - min(heights)

    def placements(self, *, row_gap: Optional[float] = None) -> List[MasonryPlacement]:
        """Absolute card rectangles, column by column, top to bottom.

        row_gap defaults to the column gap.
        """
        spacing = self.gap if row_gap is None else row_gap
        out: List[MasonryPlacement] = []
        for col_index, column in enumerate(self.columns):
            x = col_index * (self.card_width + self.gap)
            y = 0.0
            for key, height in zip(column.items, column.heights):
                out.append(MasonryPlacement(key, col_index, x, y, self.card_width, height))
                y += height + spacing
        return out

    def total_height(self, *, row_gap: Optional[float] = None) -> float:
        spacing = self.gap if row_gap is None else row_gap
        totals = [
            c.accumulated_height + spacing * max(0, len(c.items) - 1)
            for c in self.columns
        ]
        return max(totals) if totals else 0.0


class MasonryLayoutEngine:
    def __init__(
        self,
        *,
        table: BreakpointTable = DEFAULT_TABLE,
        slack: float = SLACK,
        padding_px: float = 0,
        height_policy: Optional[HeightPolicy] = None,
    ) -> None:
        if slack < 0:
            raise ValueError("slack must be >= 0")
        self.table = table
        self.slack = slack
        self.padding_px = padding_px
        self.height_policy = height_policy

        self.epoch = 0
        self.config: Optional[LayoutConfig] = None
        self.columns: List[MasonryColumn] = []
        self.last_processed_count = 0
        self._heights_by_key: Dict[str, float] = {}

    def reset(self) -> None:
        """Drop all placements and start a new epoch."""
        columns = self.config.column_count if self.config else self.table.mobile_columns
        self._start_epoch(columns)

    def _start_epoch(self, column_count: int) -> None:
        self.epoch += 1
        self._clear(column_count)
        logger.debug("Layout epoch %d: %d columns", self.epoch, column_count)

    def _clear(self, column_count: int) -> None:
        self.columns = [MasonryColumn() for _ in range(column_count)]
        self._heights_by_key = {}
        self.last_processed_count = 0

    def layout(self, items: Sequence[LayoutItem], container_width_px: float) -> MasonryLayout:
        """Place any items not yet placed and return the current layout.

        A list no longer than the one already processed is treated as a
        replacement (filter or sort change upstream) and replayed from the
        start; a longer list only has its tail appended.
        """
        last_cols = self.config.column_count if self.config else None
        config = resolve_layout_config(
            container_width_px,
            table=self.table,
            padding_px=self.padding_px,
            last_known_columns=last_cols,
        )
        if (
            self.config is None
            or config.column_count != self.config.column_count
            or config.card_width != self.config.card_width
        ):
            self.config = config
            self._start_epoch(config.column_count)
        else:
            self.config = config

        if not config.is_ready:
            return self._snapshot(config)

        if len(items) <= self.last_processed_count:
            if len(items) < self.last_processed_count:
                logger.debug(
                    "Item list shrank (%d -> %d); replaying", self.last_processed_count, len(items)
                )
            self._clear(config.column_count)
            window = items
        else:
            window = items[self.last_processed_count:]

        heights = [c.accumulated_height for c in self.columns]
        for item in window:
            height = estimate_height(item, config.card_width, policy=self.height_policy)
            target = choose_column(heights, slack=self.slack)
            self.columns[target].place(item.key, height)
            heights[target] += height
            self._heights_by_key[item.key] = height

        self.last_processed_count = len(items)
        return self._snapshot(config)

    def _snapshot(self, config: LayoutConfig) -> MasonryLayout:
        return MasonryLayout(
            columns=tuple(c.copy() for c in self.columns),
            heights_by_key=dict(self._heights_by_key),
            config=config,
            epoch=self.epoch,
        )
