"""Responsive column-count helpers for masonry layouts.

The storefront grids size themselves from a breakpoint table: narrow
(mobile) containers always get three columns and a tight gap, wider ones
step up through desktop tiers with a wider gap.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

MOBILE_MAX_WIDTH = 768
MOBILE_COLUMNS = 3
MOBILE_GAP_PX = 8
DESKTOP_GAP_PX = 16

# (exclusive upper width, columns); anything wider gets DESKTOP_MAX_COLUMNS.
DEFAULT_BREAKPOINTS: Tuple[Tuple[int, int], ...] = ((1024, 5), (1280, 6))
DESKTOP_MAX_COLUMNS = 8

# Home feed variant. Not the default; kept so callers can opt in explicitly.
ALTERNATE_BREAKPOINTS: Tuple[Tuple[int, int], ...] = ((1024, 6), (1440, 7))


def choose_columns(
    *,
    container_width_px: int,
    min_column_width_px: int,
    gutter_px: int,
    max_columns: int = 12,
) -> int:
    """Choose a column count from a minimum column width.

    Policy:
    - columns >= 1
    - each column should be at least min_column_width_px
    - account for gutters between columns
    - clamp to max_columns
    """

    if container_width_px <= 0:
        raise ValueError("container_width_px must be > 0")
    if min_column_width_px <= 0:
        raise ValueError("min_column_width_px must be > 0")
    if gutter_px < 0:
        raise ValueError("gutter_px must be >= 0")
    if max_columns <= 0:
        raise ValueError("max_columns must be > 0")

    # Largest N such that N*min + (N-1)*gutter <= container
    denom = min_column_width_px + gutter_px
    n = (container_width_px + gutter_px) // denom
    n = int(max(1, min(max_columns, n)))
    return n


@dataclass(frozen=True)
class BreakpointTable:
    """Column counts keyed by container width.

    tiers: ascending (upper_width_px, columns) pairs; a width below
    upper_width_px uses that tier. Widths past the last tier use
    max_columns. Widths below mobile_max_width use mobile_columns.
    """

    tiers: Tuple[Tuple[int, int], ...] = DEFAULT_BREAKPOINTS
    max_columns: int = DESKTOP_MAX_COLUMNS
    mobile_max_width: int = MOBILE_MAX_WIDTH
    mobile_columns: int = MOBILE_COLUMNS
    mobile_gap_px: float = MOBILE_GAP_PX
    desktop_gap_px: float = DESKTOP_GAP_PX

    def __post_init__(self) -> None:
        if self.mobile_columns <= 0:
            raise ValueError("mobile_columns must be > 0")
        if self.mobile_gap_px < 0 or self.desktop_gap_px < 0:
            raise ValueError("gaps must be >= 0")

        prev_width = self.mobile_max_width
        prev_cols = self.mobile_columns
        for upper, cols in self.tiers:
            if upper <= prev_width:
                raise ValueError("breakpoint widths must be strictly increasing")
            if cols < prev_cols:
                raise ValueError("column counts must not decrease as width grows")
            prev_width, prev_cols = upper, cols
        if self.max_columns < prev_cols:
            raise ValueError("max_columns must be >= every tier's column count")

    @classmethod
    def from_min_column_width(
        cls,
        *,
        widths: Sequence[int],
        min_column_width_px: int,
        gutter_px: float = DESKTOP_GAP_PX,
        max_columns: int = 12,
        mobile_max_width: int = MOBILE_MAX_WIDTH,
        mobile_columns: int = MOBILE_COLUMNS,
        mobile_gap_px: float = MOBILE_GAP_PX,
    ) -> "BreakpointTable":
        """Build tiers by sampling choose_columns at each tier's lower edge.

        Sampling the lower edge keeps every card in a tier at least
        min_column_width_px wide. Desktop tiers never drop below
        mobile_columns; a min width too large for that just gets
        mobile_columns there.
        """

        if max_columns < mobile_columns:
            raise ValueError("max_columns must be >= mobile_columns")

        def _cols(width: int) -> int:
            n = choose_columns(
                container_width_px=width,
                min_column_width_px=min_column_width_px,
                gutter_px=int(gutter_px),
                max_columns=max_columns,
            )
            return max(mobile_columns, n)

        lower = int(mobile_max_width)
        tiers = []
        for upper in sorted(int(w) for w in widths):
            tiers.append((upper, _cols(lower)))
            lower = upper
        return cls(
            tiers=tuple(tiers),
            max_columns=_cols(lower),
            mobile_max_width=mobile_max_width,
            mobile_columns=mobile_columns,
            mobile_gap_px=mobile_gap_px,
            desktop_gap_px=gutter_px,
        )

    def columns_for(self, width_px: float) -> int:
        if width_px < self.mobile_max_width:
            return self.mobile_columns
        for upper, cols in self.tiers:
            if width_px < upper:
                return cols
        return self.max_columns

    def gap_for(self, column_count: int) -> float:
        return self.mobile_gap_px if column_count == self.mobile_columns else self.desktop_gap_px


DEFAULT_TABLE = BreakpointTable()


@dataclass(frozen=True)
class LayoutConfig:
    container_width_px: float
    column_count: int
    card_width: float
    gap: float

    @property
    def is_ready(self) -> bool:
        """False while there is no usable width to place cards into."""
        return self.card_width > 0


def resolve_layout_config(
    container_width_px: float,
    *,
    table: BreakpointTable = DEFAULT_TABLE,
    padding_px: float = 0,
    last_known_columns: Optional[int] = None,
) -> LayoutConfig:
    """Derive column count, card width and gap for a container width.

    Never raises for bad widths: a non-finite or non-positive width yields a
    config with card_width == 0 that callers treat as "not ready".
    """

    width = float(container_width_px) if container_width_px is not None else 0.0
    if not math.isfinite(width) or width <= 0:
        cols = last_known_columns if last_known_columns and last_known_columns > 0 else table.mobile_columns
        return LayoutConfig(
            container_width_px=0.0,
            column_count=int(cols),
            card_width=0.0,
            gap=table.gap_for(int(cols)),
        )

    cols = table.columns_for(width)
    gap = table.gap_for(cols)
    usable = width - max(0.0, float(padding_px)) - gap * (cols - 1)
    card_width = max(0.0, usable / cols)
    return LayoutConfig(container_width_px=width, column_count=cols, card_width=card_width, gap=gap)
