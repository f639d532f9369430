from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import List, Optional, Sequence

from app.waterfall.feed.paging import PagedItemFeed, list_fetcher
from app.waterfall.items.image_items import scan_image_items
from app.waterfall.layout.columns import DEFAULT_BREAKPOINTS, DEFAULT_TABLE, BreakpointTable
from app.waterfall.layout.heights import tall_cover_policy
from app.waterfall.layout.items import LayoutItem
from app.waterfall.layout.masonry import MasonryLayout, MasonryLayoutEngine


def load_records(path: str | Path) -> list[dict]:
    """Read template records from a JSON file (a list, or {"data": [...]})."""
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    if isinstance(data, dict):
        data = data.get("data") or data.get("templates") or []
    if not isinstance(data, list):
        raise ValueError("expected a JSON list of template records")
    return [r for r in data if isinstance(r, dict)]


def run_layout(
    source: str,
    *,
    width: float,
    page_size: Optional[int] = None,
    padding_px: float = 0,
    tall_covers: bool = False,
    table: BreakpointTable = DEFAULT_TABLE,
) -> MasonryLayout:
    """Lay out a JSON record file or an image folder at the given width.

    With page_size, items arrive page by page through the incremental path,
    the way an infinite-scroll grid receives them.
    """
    if page_size is not None and page_size <= 0:
        raise ValueError("page_size must be > 0")

    engine = MasonryLayoutEngine(
        table=table,
        padding_px=padding_px,
        height_policy=tall_cover_policy() if tall_covers else None,
    )

    src = Path(source)
    if src.is_dir():
        items: List[LayoutItem] = scan_image_items(src)
        if not page_size:
            return engine.layout(items, width)
        result = engine.layout([], width)
        for end in range(page_size, len(items) + page_size, page_size):
            result = engine.layout(items[:end], width)
        return result

    records = load_records(src)
    feed = PagedItemFeed(list_fetcher(records), page_size=page_size or max(1, len(records)))
    result = engine.layout([], width)
    while not feed.finished:
        feed.load_next()
        result = engine.layout(feed.items, width)
    return result


def format_layout(result: MasonryLayout) -> List[str]:
    lines = [
        f"Columns: {result.config.column_count}  card width: {result.card_width:.2f}px  gap: {result.gap:g}px",
    ]
    for i, column in enumerate(result.columns):
        keys = ", ".join(column.items) if column.items else "-"
        lines.append(f"[{i}] {column.accumulated_height:8.1f}px  {keys}")
    return lines


def positive_int(value: str) -> int:
    n = int(value)
    if n <= 0:
        raise argparse.ArgumentTypeError(f"must be > 0: {value}")
    return n


def main(argv: Optional[Sequence[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Waterfall layout runner")
    parser.add_argument("source", help="JSON file of template records, or a folder of images")
    parser.add_argument("--width", type=float, default=1280, help="Container width in px")
    parser.add_argument("--page-size", type=positive_int, default=None, help="Feed items page by page")
    parser.add_argument("--padding", type=float, default=0, help="Horizontal container padding in px")
    parser.add_argument("--tall-covers", action="store_true", help="Use the fixed ratio for very tall covers")
    parser.add_argument(
        "--min-column-width",
        type=positive_int,
        default=None,
        help="Derive desktop column counts from a minimum card width instead of the fixed tiers",
    )
    parser.add_argument("--log-level", default="WARNING")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    table = DEFAULT_TABLE
    if args.min_column_width:
        table = BreakpointTable.from_min_column_width(
            widths=[upper for upper, _ in DEFAULT_BREAKPOINTS],
            min_column_width_px=args.min_column_width,
        )

    result = run_layout(
        args.source,
        width=args.width,
        page_size=args.page_size,
        padding_px=args.padding,
        tall_covers=args.tall_covers,
        table=table,
    )
    if not result.config.is_ready:
        print("Container width too small to place cards")
        return
    for line in format_layout(result):
        print(line)


if __name__ == "__main__":
    main()
