"""Card height estimation.

Heights come from the item's declared dimensions, never from decoded
pixels, so the layout is stable before any image has loaded.
"""

from __future__ import annotations

import math
from typing import Callable, Optional

from app.waterfall.layout.items import LayoutItem

# height / width for items without usable dimensions (9:16 portrait).
DEFAULT_ASPECT_RATIO = 16 / 9

# No card renders taller than this many card widths.
MAX_HEIGHT_FACTOR = 4.0

HeightPolicy = Callable[[LayoutItem, float], float]


def _positive(value: Optional[float]) -> bool:
    return value is not None and math.isfinite(value) and value > 0


def aspect_ratio(item: LayoutItem) -> float:
    """Return height / width, falling back to DEFAULT_ASPECT_RATIO."""
    if _positive(item.intrinsic_width) and _positive(item.intrinsic_height):
        return float(item.intrinsic_height) / float(item.intrinsic_width)
    return DEFAULT_ASPECT_RATIO


def estimate_height(
    item: LayoutItem,
    card_width: float,
    *,
    policy: Optional[HeightPolicy] = None,
    max_height_factor: float = MAX_HEIGHT_FACTOR,
) -> float:
    ratio = aspect_ratio(item)
    if policy is not None:
        ratio = policy(item, ratio)

    height = card_width * ratio
    height = min(height, card_width * max_height_factor)
    if not math.isfinite(height) or height <= 0:
        return 0.0
    return float(height)


def tall_cover_policy(*, threshold_px: float = 1400, ratio: float = 20 / 9) -> HeightPolicy:
    """Force a fixed ratio for covers whose source height exceeds threshold_px.

    Long scrolling covers otherwise all hit the height clamp; a fixed ratio
    keeps them a uniform, shorter size.
    """

    def _policy(item: LayoutItem, current: float) -> float:
        if _positive(item.intrinsic_height) and float(item.intrinsic_height) > threshold_px:
            return ratio
        return current

    return _policy
