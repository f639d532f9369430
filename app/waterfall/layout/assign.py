"""Column choice for the next card.

Two policies exist. The strict one always picks the shortest column. The
default one walks left to right and takes the first column within SLACK
pixels of the shortest, which keeps incremental growth filling from the
left instead of hopping between columns that differ by a few pixels.
"""

from __future__ import annotations

from typing import Sequence

SLACK = 100.0


def choose_shortest_column(column_heights: Sequence[float]) -> int:
    """Index of the shortest column (stable: lowest index on ties)."""
    if not column_heights:
        raise ValueError("column_heights must not be empty")
    return min(range(len(column_heights)), key=lambda c: column_heights[c])


def choose_column(column_heights: Sequence[float], *, slack: float = SLACK) -> int:
    """Leftmost column whose height is within slack of the shortest one."""
    if not column_heights:
        raise ValueError("column_heights must not be empty")
    if slack < 0:
        raise ValueError("slack must be >= 0")

    limit = min(column_heights) + slack
    for i, height in enumerate(column_heights):
        if height <= limit:
            return i
    return choose_shortest_column(column_heights)
