from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class LayoutItem:
    """Input item for layout.

    key: stable identifier supplied by the item source.
    intrinsic_width / intrinsic_height: natural size of the card's cover.
    Leave either unset (or zero) when unknown; the default ratio applies.
    """

    key: str
    intrinsic_width: Optional[float] = None
    intrinsic_height: Optional[float] = None
