import unittest

from app.waterfall.layout.assign import SLACK
from app.waterfall.layout.items import LayoutItem
from app.waterfall.layout.masonry import MasonryLayoutEngine

# (width, height) pairs cycled to build item lists with uneven heights.
DIMS = [(100, 100), (90, 160), (300, 200), (None, None), (100, 250), (640, 480), (1, 100), (200, 90)]


def make_items(n, prefix="t"):
    return [
        LayoutItem(f"{prefix}{i}", *DIMS[i % len(DIMS)])
        for i in range(n)
    ]


def column_keys(result):
    return [list(c.items) for c in result.columns]


class TestMasonryLayoutEngine(unittest.TestCase):
    def test_empty_items_still_yield_all_columns(self):
        for width, cols in ((500, 3), (900, 5), (1100, 6), (1300, 8)):
            with self.subTest(width=width):
                result = MasonryLayoutEngine().layout([], width)
                self.assertEqual(len(result.columns), cols)
                self.assertTrue(all(not c.items for c in result.columns))

    def test_eight_squares_fill_eight_columns(self):
        items = [LayoutItem(f"sq{i}", 100, 100) for i in range(8)]
        result = MasonryLayoutEngine().layout(items, 1300)

        self.assertEqual(result.config.column_count, 8)
        self.assertAlmostEqual(result.card_width, 148.5)
        self.assertEqual(column_keys(result), [[f"sq{i}"] for i in range(8)])
        for column in result.columns:
            self.assertAlmostEqual(column.accumulated_height, 148.5)
        self.assertEqual(result.imbalance, 0)
        self.assertEqual(result.heights_by_key["sq3"], 148.5)

    def test_left_bias_within_slack(self):
        # 3 columns of width 100: the second square still fits in column 0.
        items = [LayoutItem(k, 100, 100) for k in "abc"]
        result = MasonryLayoutEngine().layout(items, 316)
        self.assertAlmostEqual(result.card_width, 100)
        self.assertEqual(column_keys(result), [["a", "b"], ["c"], []])

        strict = MasonryLayoutEngine(slack=0).layout(items, 316)
        self.assertEqual(column_keys(strict), [["a"], ["b"], ["c"]])

    def test_clamp_applies_in_engine(self):
        result = MasonryLayoutEngine().layout([LayoutItem("tall", 1, 100)], 316)
        self.assertEqual(result.heights_by_key["tall"], 400)

    def test_balance_bound(self):
        items = make_items(120)
        result = MasonryLayoutEngine().layout(items, 1300)
        tallest_item = max(result.heights_by_key.values())
        self.assertLessEqual(result.imbalance, SLACK + tallest_item)

    def test_append_keeps_existing_placements(self):
        items = make_items(40)
        engine = MasonryLayoutEngine()
        first = engine.layout(items[:15], 1100)
        second = engine.layout(items, 1100)

        self.assertEqual(first.epoch, second.epoch)
        for before, after in zip(first.columns, second.columns):
            self.assertEqual(after.items[:len(before.items)], before.items)
            self.assertEqual(after.heights[:len(before.heights)], before.heights)
        self.assertEqual(sum(len(c.items) for c in second.columns), 40)

    def test_paged_growth_matches_single_pass(self):
        items = make_items(50)
        engine = MasonryLayoutEngine()
        for end in (10, 20, 35, 50):
            paged = engine.layout(items[:end], 900)
        full = MasonryLayoutEngine().layout(items, 900)
        self.assertEqual(column_keys(paged), column_keys(full))

    def test_same_input_twice_is_idempotent(self):
        items = make_items(30)
        engine = MasonryLayoutEngine()
        first = engine.layout(items, 1300)
        second = engine.layout(items, 1300)

        self.assertEqual(first, second)
        self.assertEqual(engine.last_processed_count, 30)

    def test_shrink_resets_from_scratch(self):
        items = make_items(30)
        engine = MasonryLayoutEngine()
        engine.layout(items, 1300)
        shrunk = engine.layout(items[:7], 1300)

        fresh = MasonryLayoutEngine().layout(items[:7], 1300)
        self.assertEqual(column_keys(shrunk), column_keys(fresh))
        self.assertEqual(shrunk.heights_by_key, fresh.heights_by_key)
        self.assertEqual(engine.last_processed_count, 7)

    def test_replaced_list_of_same_length_is_replayed(self):
        engine = MasonryLayoutEngine()
        engine.layout(make_items(10, prefix="old"), 1300)
        result = engine.layout(make_items(10, prefix="new"), 1300)

        placed = {k for c in result.columns for k in c.items}
        self.assertEqual(placed, {f"new{i}" for i in range(10)})

    def test_breakpoint_change_starts_new_epoch(self):
        items = make_items(25)
        engine = MasonryLayoutEngine()
        wide = engine.layout(items, 1300)
        narrow = engine.layout(items, 900)

        self.assertEqual(narrow.epoch, wide.epoch + 1)
        self.assertEqual(len(narrow.columns), 5)
        fresh = MasonryLayoutEngine().layout(items, 900)
        self.assertEqual(column_keys(narrow), column_keys(fresh))

    def test_card_width_change_within_tier_starts_new_epoch(self):
        engine = MasonryLayoutEngine()
        a = engine.layout(make_items(5), 1300)
        b = engine.layout(make_items(5), 1310)
        c = engine.layout(make_items(5), 1310)
        self.assertEqual(b.epoch, a.epoch + 1)
        self.assertEqual(c.epoch, b.epoch)

    def test_degenerate_width_places_nothing(self):
        items = make_items(10)
        engine = MasonryLayoutEngine()
        result = engine.layout(items, 0)
        self.assertEqual(len(result.columns), 3)
        self.assertEqual(result.heights_by_key, {})
        self.assertFalse(result.config.is_ready)

        ready = engine.layout(items, 1300)
        self.assertEqual(sum(len(c.items) for c in ready.columns), 10)

    def test_degenerate_width_after_layout_keeps_column_count(self):
        engine = MasonryLayoutEngine()
        engine.layout(make_items(10), 1300)
        result = engine.layout(make_items(10), float("nan"))
        self.assertEqual(len(result.columns), 8)
        self.assertEqual(result.card_width, 0)
        self.assertTrue(all(not c.items for c in result.columns))

    def test_duplicate_keys_are_not_deduped(self):
        items = [LayoutItem("dup", 100, 100), LayoutItem("dup", 100, 100)]
        result = MasonryLayoutEngine().layout(items, 1300)
        keys = [k for c in result.columns for k in c.items]
        self.assertEqual(keys, ["dup", "dup"])

    def test_explicit_reset(self):
        items = make_items(12)
        engine = MasonryLayoutEngine()
        before = engine.layout(items, 1300)
        engine.reset()
        self.assertEqual(engine.epoch, before.epoch + 1)
        self.assertEqual(engine.last_processed_count, 0)

        after = engine.layout(items, 1300)
        self.assertEqual(after.epoch, before.epoch + 1)
        self.assertEqual(column_keys(after), column_keys(before))

    def test_snapshot_is_detached_from_engine_state(self):
        engine = MasonryLayoutEngine()
        first = engine.layout(make_items(3), 1300)
        engine.layout(make_items(20), 1300)
        self.assertEqual(sum(len(c.items) for c in first.columns), 3)

    def test_placements_and_total_height(self):
        items = [LayoutItem(f"sq{i}", 100, 100) for i in range(9)]
        result = MasonryLayoutEngine().layout(items, 1300)
        placements = {p.key: p for p in result.placements()}

        self.assertAlmostEqual(placements["sq1"].x, 164.5)
        self.assertEqual(placements["sq1"].y, 0)
        self.assertEqual(placements["sq8"].column, 0)
        self.assertAlmostEqual(placements["sq8"].y, 164.5)
        self.assertAlmostEqual(result.total_height(), 313)
        self.assertAlmostEqual(result.total_height(row_gap=0), 297)

    def test_invalid_slack(self):
        with self.assertRaises(ValueError):
            MasonryLayoutEngine(slack=-1)

    def test_snapshot_carries_resolved_config(self):
        engine = MasonryLayoutEngine()
        not_ready = engine.layout(make_items(3), 0)
        self.assertIs(not_ready.config, engine.config)
        ready = engine.layout(make_items(3), 1300)
        self.assertIs(ready.config, engine.config)
        self.assertEqual(ready.config.container_width_px, 1300)


if __name__ == "__main__":
    unittest.main()
