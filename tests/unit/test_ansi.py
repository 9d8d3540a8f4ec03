import sys
import unittest
from pathlib import Path

ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(ROOT / "packages" / "renderer"))
sys.path.insert(0, str(ROOT / "packages" / "telemetry"))

from powerdash_renderer import ansi


class ColorBarTests(unittest.TestCase):
    def test_exact_width_for_any_percentage(self):
        for pct in (float("-inf"), -5, 0, 37.5, 50, 100, 150, float("inf"), float("nan")):
            bar = ansi.color_bar(pct, 20, ansi.GREEN)
            self.assertEqual(ansi.visible_len(bar), 20, pct)

    def test_fill_proportion(self):
        bar = ansi.strip_ansi(ansi.color_bar(50, 20, ansi.GREEN))
        self.assertEqual(bar, ansi.FILL * 10 + ansi.EMPTY * 10)

    def test_nan_renders_empty(self):
        bar = ansi.strip_ansi(ansi.color_bar(float("nan"), 10, ansi.GREEN))
        self.assertEqual(bar, ansi.EMPTY * 10)

    def test_overflow_clamps_full(self):
        bar = ansi.strip_ansi(ansi.color_bar(250, 10, ansi.GREEN))
        self.assertEqual(bar, ansi.FILL * 10)


class SplitBarTests(unittest.TestCase):
    def test_segments_fill_width(self):
        for sys_pct, bat_pct in ((77, 23), (100, 0), (0, 100), (33, 33), (0, 0), (1, 1)):
            bar = ansi.split_bar(sys_pct, bat_pct, 40)
            self.assertEqual(ansi.visible_len(bar), 40, (sys_pct, bat_pct))

    def test_rounding_remainder_goes_to_battery(self):
        bar = ansi.split_bar(77, 23, 40, sys_color="<s>", bat_color="<b>", reset="")
        system, battery = bar[len("<s>"):].split("<b>")
        self.assertEqual(len(system), 30)
        self.assertEqual(len(battery), 10)

    def test_system_segment_is_a_share_of_width_not_of_the_sum(self):
        for sys_pct, bat_pct, expected_sys in ((30, 30, 12), (50, 0, 20), (0, 0, 0), (150, 10, 40)):
            bar = ansi.split_bar(sys_pct, bat_pct, 40, sys_color="<s>", bat_color="<b>", reset="")
            system, battery = bar[len("<s>"):].split("<b>")
            self.assertEqual(len(system), expected_sys, (sys_pct, bat_pct))
            self.assertEqual(len(battery), 40 - expected_sys, (sys_pct, bat_pct))


class BoxLineTests(unittest.TestCase):
    def test_line_pads_colored_content_to_box_width(self):
        row = ansi.line(ansi.RED + "ON BATTERY" + ansi.RESET)
        self.assertEqual(ansi.visible_len(row), ansi.BOX_WIDTH)
        self.assertTrue(row.startswith("║ "))
        self.assertTrue(row.endswith(" ║"))

    def test_line_keeps_overflowing_content(self):
        content = "x" * 60
        row = ansi.line(content)
        self.assertIn(content, row)
        self.assertEqual(ansi.visible_len(row), 64)

    def test_borders_match_box_width(self):
        for kind in ("top", "mid", "bottom"):
            self.assertEqual(len(ansi.border(kind)), ansi.BOX_WIDTH)
        self.assertTrue(ansi.border("top").startswith("╔"))
        self.assertTrue(ansi.border("bottom").endswith("╝"))


if __name__ == "__main__":
    unittest.main()
