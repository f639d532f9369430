"""Turn storefront template records into layout items.

Template records come from several list APIs that disagree on where the
cover size lives. Look in the same order the storefront cards do.
"""

from __future__ import annotations

import logging
import math
from typing import Any, Iterable, List, Mapping, Optional, Tuple

from app.waterfall.layout.items import LayoutItem

logger = logging.getLogger(__name__)


def _number(value: Any) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        num = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(num) or num <= 0:
        return None
    return num


def record_key(record: Mapping[str, Any]) -> Optional[str]:
    key = record.get("template_id") or record.get("id")
    if key is None or key == "":
        return None
    return str(key)


def record_dimensions(record: Mapping[str, Any]) -> Tuple[Optional[float], Optional[float]]:
    """Return (width, height) of the record's cover, or (None, None)."""
    cover = record.get("coverV3")
    spec = record.get("spec")
    candidates = [
        (cover.get("width"), cover.get("height")) if isinstance(cover, Mapping) else (None, None),
        (record.get("width"), record.get("height")),
        (record.get("page_width"), record.get("page_height")),
        (spec.get("preview_width"), spec.get("preview_height")) if isinstance(spec, Mapping) else (None, None),
    ]
    for raw_w, raw_h in candidates:
        w, h = _number(raw_w), _number(raw_h)
        if w is not None and h is not None:
            return w, h
    return None, None


def item_from_record(record: Mapping[str, Any]) -> Optional[LayoutItem]:
    key = record_key(record)
    if key is None:
        return None
    width, height = record_dimensions(record)
    return LayoutItem(key=key, intrinsic_width=width, intrinsic_height=height)


def items_from_records(records: Iterable[Mapping[str, Any]]) -> List[LayoutItem]:
    """Convert records in order, skipping any without an identifier."""
    items: List[LayoutItem] = []
    for record in records:
        item = item_from_record(record)
        if item is None:
            logger.warning("Skipping template record without id: %r", dict(record))
            continue
        items.append(item)
    return items
