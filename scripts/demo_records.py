#!/usr/bin/env python3
from __future__ import annotations

import argparse
import json
import random
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from app.waterfall.main import format_layout, run_layout

# Cover sizes seen on the storefront: phone posters, long scrolls, square, landscape.
COVER_SIZES = [(750, 1334), (750, 1624), (750, 2400), (800, 800), (1080, 720), (540, 960)]


def make_records(count: int, seed: int) -> list[dict]:
    rng = random.Random(seed)
    records = []
    for i in range(count):
        record: dict = {"template_id": f"T{i:04d}", "name": f"Template {i}"}
        roll = rng.random()
        if roll < 0.1:
            pass  # no cover size at all
        elif roll < 0.2:
            w, h = rng.choice(COVER_SIZES)
            record["page_width"], record["page_height"] = w, h
        else:
            w, h = rng.choice(COVER_SIZES)
            record["coverV3"] = {"url": f"https://example.invalid/{i}.jpg", "width": w, "height": h}
        records.append(record)
    return records


def main() -> None:
    parser = argparse.ArgumentParser(description="Demo: write sample template records and lay them out")
    parser.add_argument("--out", default="data/demo_templates.json")
    parser.add_argument("--count", type=int, default=60)
    parser.add_argument("--seed", type=int, default=7)
    parser.add_argument("--width", type=float, default=1300)
    parser.add_argument("--page-size", type=int, default=20)
    args = parser.parse_args()

    out = Path(args.out)
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(json.dumps(make_records(args.count, args.seed), indent=2), encoding="utf-8")
    print(f"Wrote {args.count} records to {out}")

    result = run_layout(str(out), width=args.width, page_size=args.page_size, tall_covers=True)
    for line in format_layout(result):
        print(line)
    print(f"Imbalance: {result.imbalance:.1f}px")


if __name__ == "__main__":
    main()
