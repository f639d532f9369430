import os
import unittest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from PySide6.QtTest import QTest
from PySide6.QtWidgets import QApplication

from app.waterfall.feed.paging import PagedItemFeed, list_fetcher
from app.waterfall.layout.columns import resolve_layout_config
from native.waterfall_app.main import LOAD_MORE_THRESHOLD_PX, MainWindow


def records(n):
    return [{"template_id": f"T{i}", "width": 100, "height": 100 + (i % 4) * 20} for i in range(n)]


def wait_until(predicate, timeout_ms=3000, step_ms=50):
    waited = 0
    while waited < timeout_ms:
        QTest.qWait(step_ms)
        waited += step_ms
        if predicate():
            return True
    return predicate()


class TestViewer(unittest.TestCase):
    @classmethod
    def setUpClass(cls) -> None:
        cls.app = QApplication.instance() or QApplication([])

    def open_window(self, feed: PagedItemFeed) -> MainWindow:
        win = MainWindow(feed)
        win.resize(1300, 860)
        win.show()
        self.addCleanup(win.deleteLater)
        self.addCleanup(win.close)
        return win

    def test_layout_follows_viewport_width(self) -> None:
        win = self.open_window(PagedItemFeed(list_fetcher(records(120)), page_size=60))

        def settled():
            result = win.canvas.layout_result
            return (
                result is not None
                and result.config.is_ready
                and result.config.container_width_px == win.scroll.viewport().width()
            )

        self.assertTrue(wait_until(settled))
        result = win.canvas.layout_result
        viewport_width = win.scroll.viewport().width()
        self.assertEqual(
            result.config.column_count,
            resolve_layout_config(viewport_width).column_count,
        )
        self.assertGreater(result.config.column_count, 3)

    def test_short_pages_keep_loading_until_viewport_is_filled(self) -> None:
        win = self.open_window(PagedItemFeed(list_fetcher(records(200)), page_size=5))

        def filled():
            return win.canvas.finished or (
                win.canvas.is_ready and win._remaining_below() >= LOAD_MORE_THRESHOLD_PX
            )

        self.assertTrue(wait_until(filled))
        self.assertGreater(win.canvas.item_count, 5)


if __name__ == "__main__":
    unittest.main()
