from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from PySide6.QtCore import QRectF, Qt, QTimer, Signal
from PySide6.QtGui import QColor, QPainter, QPixmap
from PySide6.QtWidgets import (
    QApplication,
    QLabel,
    QMainWindow,
    QScrollArea,
    QVBoxLayout,
    QWidget,
)

from app.waterfall.feed.paging import PagedItemFeed, list_fetcher
from app.waterfall.items.image_items import scan_image_items
from app.waterfall.layout.heights import tall_cover_policy
from app.waterfall.layout.masonry import MasonryLayout, MasonryLayoutEngine
from app.waterfall.main import load_records, positive_int

logger = logging.getLogger(__name__)

RESIZE_DEBOUNCE_MS = 120
LOAD_MORE_THRESHOLD_PX = 400


class WaterfallCanvas(QWidget):
    """Paints one waterfall grid. Owns its own layout engine."""

    laidOut = Signal()

    def __init__(self, feed: PagedItemFeed, *, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self._feed = feed
        self._engine = MasonryLayoutEngine(height_policy=tall_cover_policy())
        self._layout: MasonryLayout | None = None
        self._pixmaps: dict[str, QPixmap] = {}
        self._pending_width = 0

        # Resize events arrive in bursts while dragging; relayout once they settle.
        self._resize_timer = QTimer(self)
        self._resize_timer.setSingleShot(True)
        self._resize_timer.timeout.connect(self._apply_resize)

    @property
    def finished(self) -> bool:
        return self._feed.finished

    @property
    def item_count(self) -> int:
        return len(self._feed.items)

    @property
    def is_ready(self) -> bool:
        return self._layout is not None and self._layout.config.is_ready

    @property
    def layout_result(self) -> MasonryLayout | None:
        return self._layout

    def set_container_width(self, width: int) -> None:
        self._pending_width = width
        self._resize_timer.start(RESIZE_DEBOUNCE_MS)

    def _apply_resize(self) -> None:
        self.relayout()

    def load_more(self) -> None:
        if self._feed.finished:
            return
        added = self._feed.load_next()
        logger.debug("Loaded page %d (+%d items)", self._feed.pages_loaded, len(added))
        self.relayout()

    def relayout(self) -> None:
        self._layout = self._engine.layout(self._feed.items, self._pending_width)
        height = self._layout.total_height() if self._layout.config.is_ready else 0
        self.setMinimumHeight(int(height) + 16)
        self.update()
        self.laidOut.emit()

    def resizeEvent(self, event) -> None:  # type: ignore[override]
        super().resizeEvent(event)
        # The scroll area keeps the canvas as wide as its viewport, so this
        # also fires when the vertical scrollbar appears or disappears.
        if event.size().width() != event.oldSize().width():
            self.set_container_width(event.size().width())

    def _pixmap_for(self, key: str) -> QPixmap | None:
        if key not in self._pixmaps:
            pm = QPixmap(key) if Path(key).is_file() else QPixmap()
            self._pixmaps[key] = pm
        pm = self._pixmaps[key]
        return None if pm.isNull() else pm

    def paintEvent(self, event) -> None:  # type: ignore[override]
        p = QPainter(self)
        p.setRenderHint(QPainter.RenderHint.SmoothPixmapTransform)
        p.setRenderHint(QPainter.RenderHint.Antialiasing)
        p.fillRect(self.rect(), QColor("#f4f4f5"))

        if self._layout is None or not self._layout.config.is_ready:
            return

        visible = event.rect()
        for placement in self._layout.placements():
            rect = QRectF(placement.x, placement.y, placement.width, placement.height)
            if not rect.intersects(QRectF(visible)):
                continue
            pm = self._pixmap_for(placement.key)
            if pm is not None:
                p.drawPixmap(rect, pm, QRectF(pm.rect()))
            else:
                p.fillRect(rect, QColor("#d4d4d8"))
                p.setPen(QColor("#52525b"))
                p.drawText(rect, Qt.AlignmentFlag.AlignCenter, Path(placement.key).name)


class MainWindow(QMainWindow):
    def __init__(self, feed: PagedItemFeed) -> None:
        super().__init__()
        self.setWindowTitle("Waterfall")
        self.resize(1300, 860)

        self.canvas = WaterfallCanvas(feed)
        self.status = QLabel("")

        self.scroll = QScrollArea()
        self.scroll.setWidgetResizable(True)
        self.scroll.setWidget(self.canvas)
        self.scroll.verticalScrollBar().valueChanged.connect(self._on_scroll)
        self.canvas.laidOut.connect(self._on_laid_out)

        root = QWidget()
        lay = QVBoxLayout(root)
        lay.setContentsMargins(0, 0, 0, 0)
        lay.addWidget(self.scroll, 1)
        lay.addWidget(self.status)
        self.setCentralWidget(root)

        self.canvas.load_more()

    def _remaining_below(self) -> int:
        """Content height still below the visible part of the viewport."""
        viewport_bottom = self.scroll.verticalScrollBar().value() + self.scroll.viewport().height()
        return self.canvas.minimumHeight() - viewport_bottom

    def _maybe_load_more(self) -> None:
        if (
            self.canvas.is_ready
            and not self.canvas.finished
            and self._remaining_below() < LOAD_MORE_THRESHOLD_PX
        ):
            self.canvas.load_more()
        self._update_status()

    def _on_scroll(self, _value: int) -> None:
        self._maybe_load_more()

    def _on_laid_out(self) -> None:
        # A page that does not fill the viewport produces no scrolling, so
        # check again once the new height has been applied.
        QTimer.singleShot(0, self._maybe_load_more)

    def _update_status(self) -> None:
        state = "all loaded" if self.canvas.finished else "scroll for more"
        self.status.setText(f"{self.canvas.item_count} items ({state})")


def build_feed(source: str, page_size: int) -> PagedItemFeed:
    src = Path(source)
    if src.is_dir():
        records = [
            {"id": item.key, "width": item.intrinsic_width, "height": item.intrinsic_height}
            for item in scan_image_items(src)
        ]
    else:
        records = load_records(src)
    return PagedItemFeed(list_fetcher(records), page_size=page_size)


def main() -> None:
    parser = argparse.ArgumentParser(description="Waterfall desktop viewer")
    parser.add_argument("source", help="Folder of images or JSON file of template records")
    parser.add_argument("--page-size", type=positive_int, default=30)
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    app = QApplication(sys.argv)
    app.setApplicationName("Waterfall")

    win = MainWindow(build_feed(args.source, args.page_size))
    win.show()
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
