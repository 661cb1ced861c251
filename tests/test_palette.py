import unittest

from dotback.errors import ValidationError
from dotback.palette import (
    CUSTOM,
    DEFAULT,
    merge,
    reconcile_colors,
    reconcile_dot_sizes,
)
from dotback.scores import default_colors, default_dot_sizes


def color_values(palette):
    return [entry["color"] for entry in palette]


class ReconcileColorsTestCase(unittest.TestCase):
    def test_defaults_when_nothing_stored_or_submitted(self):
        colors, tag = reconcile_colors(None, None)
        self.assertEqual(colors, default_colors())
        self.assertEqual(tag, DEFAULT)
        self.assertEqual(color_values(colors), sorted(color_values(colors)))

    def test_empty_submission_on_create_uses_defaults(self):
        colors, tag = reconcile_colors(None, [])
        self.assertEqual(colors, default_colors())
        self.assertEqual(tag, DEFAULT)

    def test_partial_update_is_merged_not_replaced(self):
        colors, tag = reconcile_colors(default_colors(), [{"color": "#123456", "score": 9}])
        self.assertEqual(
            color_values(colors),
            ["#0000ff", "#00ff00", "#123456", "#ff0000", "#ffff00", "#ffffff"],
        )
        self.assertIn({"color": "#123456", "score": 9}, colors)
        self.assertEqual(tag, CUSTOM)

    def test_incoming_entry_wins_on_case_insensitive_key(self):
        colors, tag = reconcile_colors(default_colors(), [{"color": "#FF0000", "score": 77}])
        self.assertEqual(len(colors), 5)
        self.assertIn({"color": "#FF0000", "score": 77}, colors)
        self.assertNotIn({"color": "#ff0000", "score": 10}, colors)
        self.assertEqual(tag, CUSTOM)

    def test_resubmitting_default_values_keeps_default_tag(self):
        colors, tag = reconcile_colors(default_colors(), [{"color": "#FFFFFF", "score": "30"}])
        self.assertEqual(tag, DEFAULT)
        self.assertIn({"color": "#FFFFFF", "score": 30}, colors)

    def test_new_palette_on_create_is_taken_as_given(self):
        colors, tag = reconcile_colors(None, [{"color": "#bbbbbb"}, {"color": "#aaaaaa", "score": "x"}])
        self.assertEqual(colors, [{"color": "#aaaaaa", "score": 0}, {"color": "#bbbbbb", "score": 0}])
        self.assertEqual(tag, CUSTOM)

    def test_missing_submission_keeps_stored_palette(self):
        stored = [{"color": "#abcdef", "score": 3}]
        colors, tag = reconcile_colors(stored, None)
        self.assertEqual(colors, stored)
        self.assertEqual(tag, CUSTOM)

    def test_rejects_non_array(self):
        with self.assertRaises(ValidationError):
            reconcile_colors(default_colors(), {"color": "#ffffff"})

    def test_rejects_entry_without_color(self):
        with self.assertRaises(ValidationError) as ctx:
            reconcile_colors(default_colors(), [{"color": "#ffffff"}, {"score": 4}])
        self.assertIn("index 1", ctx.exception.message)
        with self.assertRaises(ValidationError):
            reconcile_colors(default_colors(), [{"color": "   "}])
        with self.assertRaises(ValidationError):
            reconcile_colors(default_colors(), ["#ffffff"])


class ReconcileDotSizesTestCase(unittest.TestCase):
    def test_defaults(self):
        sizes, tag = reconcile_dot_sizes(None, None)
        self.assertEqual(sizes, default_dot_sizes())
        self.assertEqual(tag, DEFAULT)

    def test_submission_order_is_kept(self):
        sizes, tag = reconcile_dot_sizes(None, [{"size": "big", "score": "5"}, {"size": "Small", "score": 1}])
        self.assertEqual(sizes, [{"size": "big", "score": 5}, {"size": "Small", "score": 1}])
        self.assertEqual(tag, CUSTOM)

    def test_merge_into_stored_sizes(self):
        sizes, tag = reconcile_dot_sizes(default_dot_sizes(), [{"size": "MEDIUM", "score": 99}, {"size": "giant", "score": 1}])
        self.assertEqual(
            [entry["size"] for entry in sizes],
            ["tiny", "small", "MEDIUM", "large", "huge", "giant"],
        )
        self.assertEqual(tag, CUSTOM)

    def test_rejects_entry_without_size(self):
        with self.assertRaises(ValidationError):
            reconcile_dot_sizes(None, [{"score": 3}])


class MergeTestCase(unittest.TestCase):
    def test_sequential_merges_equal_merge_of_key_union(self):
        stored = [{"color": "#111111", "score": 1}, {"color": "#222222", "score": 2}]
        first = [{"color": "#222222", "score": 20}, {"color": "#333333", "score": 3}]
        second = [{"color": "#333333", "score": 30}, {"color": "#444444", "score": 4}]

        step = list(merge(stored, first, "color").values())
        sequential = merge(step, second, "color")
        union = merge(stored, first + second, "color")

        self.assertEqual(sequential, union)
        self.assertEqual(sequential["#333333"]["score"], 30)
        self.assertEqual(sequential["#222222"]["score"], 20)
        self.assertEqual(sequential["#111111"]["score"], 1)

    def test_merge_does_not_mutate_inputs(self):
        stored = [{"color": "#111111", "score": 1}]
        merged = merge(stored, [{"color": "#111111", "score": 5}], "color")
        merged["#111111"]["score"] = 42
        self.assertEqual(stored[0]["score"], 1)


if __name__ == "__main__":
    unittest.main()
