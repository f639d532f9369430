from __future__ import annotations

import logging
from pathlib import Path
from typing import List

from PIL import Image, UnidentifiedImageError

from app.waterfall.layout.items import LayoutItem

logger = logging.getLogger(__name__)

IMAGE_EXTS = {".jpg", ".jpeg", ".png", ".gif", ".webp", ".bmp"}


def item_from_image(path: str | Path) -> LayoutItem:
    """Build a layout item from an image's pixel size.

    Only the header is read. Unreadable files still produce an item (with
    the default ratio) so they keep their slot in the grid.
    """
    p = Path(path)
    try:
        with Image.open(p) as img:
            width, height = img.size
    except (OSError, UnidentifiedImageError) as e:
        logger.warning("Could not read image size for %s: %s", p, e)
        return LayoutItem(key=p.as_posix())
    return LayoutItem(key=p.as_posix(), intrinsic_width=width, intrinsic_height=height)


def scan_image_items(folder: str | Path, *, include_hidden: bool = False) -> List[LayoutItem]:
    """Layout items for the images directly inside folder, sorted by name."""
    root = Path(folder)
    if not root.is_dir():
        raise ValueError(f"not a directory: {root}")

    paths = sorted(
        (
            p
            for p in root.iterdir()
            if p.is_file()
            and p.suffix.lower() in IMAGE_EXTS
            and (include_hidden or not p.name.startswith("."))
        ),
        key=lambda p: p.name.casefold(),
    )
    return [item_from_image(p) for p in paths]
