import io
import sys
import unittest
from datetime import datetime
from pathlib import Path

ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(ROOT / "packages" / "renderer"))
sys.path.insert(0, str(ROOT / "packages" / "telemetry"))

from powerdash_renderer import ansi
from powerdash_renderer.dashboard import CLEAR_BELOW, DashboardRenderer, derive_dashboard
from powerdash_renderer.themes import get_theme, list_themes
from powerdash_telemetry.models import PowerSnapshot

NOW = datetime(2024, 6, 3, 10, 0, 1)


def charging_snapshot():
    return PowerSnapshot(
        cpu_power=1500.0,
        gpu_power=640.0,
        ane_power=12.0,
        package_power=2152.0,
        battery_percent=86,
        charger_watts=65,
        charger_voltage=20000,
        charger_current=3250,
        battery_voltage=12500,
        battery_amps=1200,
        temperature=3112,
        is_charging=True,
        on_ac=True,
    )


def battery_snapshot():
    return PowerSnapshot(
        cpu_power=4250.0,
        battery_percent=54,
        battery_voltage=11800,
        battery_amps=-900,
        temperature=2990,
    )


class DeriveDashboardTests(unittest.TestCase):
    def test_unit_conversion(self):
        d = derive_dashboard(charging_snapshot(), NOW)
        self.assertAlmostEqual(d.cpu_w, 1.5)
        self.assertAlmostEqual(d.gpu_w, 0.64)
        self.assertAlmostEqual(d.charger_v, 20.0)
        self.assertAlmostEqual(d.charger_a, 3.25)
        self.assertAlmostEqual(d.battery_v, 12.5)
        self.assertAlmostEqual(d.temp_c, 31.12)

    def test_power_split_on_ac(self):
        d = derive_dashboard(charging_snapshot(), NOW)
        self.assertAlmostEqual(d.battery_w, 15.0)
        self.assertAlmostEqual(d.system_w, 50.0)
        self.assertEqual(d.split.battery_pct, 23)
        self.assertEqual(d.split.system_pct, 77)
        self.assertIsNone(d.drain_w)
        self.assertEqual(d.status, "charging")

    def test_drain_on_battery(self):
        d = derive_dashboard(battery_snapshot(), NOW)
        self.assertAlmostEqual(d.drain_w, 10.62)
        self.assertIsNone(d.system_w)
        self.assertIsNone(d.split)
        self.assertEqual(d.status, "draining")

    def test_maintaining_status(self):
        snap = charging_snapshot()
        snap.is_charging = False
        snap.battery_amps = 0
        d = derive_dashboard(snap, NOW)
        self.assertEqual(d.status, "full/maintaining")
        self.assertEqual(d.split.battery_pct, 0)
        self.assertEqual(d.split.system_pct, 100)

    def test_zero_charger_watts_has_no_split(self):
        snap = charging_snapshot()
        snap.charger_watts = 0
        self.assertIsNone(derive_dashboard(snap, NOW).split)

    def test_battery_share_clamped(self):
        snap = charging_snapshot()
        snap.charger_watts = 5
        d = derive_dashboard(snap, NOW)
        self.assertEqual(d.split.battery_pct, 100)
        self.assertEqual(d.split.system_pct, 0)


class DashboardRendererTests(unittest.TestCase):
    def test_every_row_has_box_width(self):
        for name in list_themes():
            renderer = DashboardRenderer(name)
            for snap in (charging_snapshot(), battery_snapshot(), PowerSnapshot()):
                for row in renderer.render_lines(derive_dashboard(snap, NOW)):
                    self.assertEqual(ansi.visible_len(row), ansi.BOX_WIDTH, (name, row))

    def test_charging_layout_sections(self):
        text = ansi.strip_ansi(DashboardRenderer().render_text(derive_dashboard(charging_snapshot(), NOW)))
        self.assertIn("LIVE POWER MONITOR", text)
        self.assertIn("CPU:   1.50 W", text)
        self.assertIn("CHARGER", text)
        self.assertIn("20.0V × 3.25A = 65W", text)
        self.assertIn("System:   50.0 W", text)
        self.assertIn("system 77%", text)
        self.assertIn("battery 23%", text)
        self.assertIn("86% │ 12.50V │ 1200mA │ 31.1°C", text)
        self.assertIn("10:00:01", text)
        self.assertNotIn("ON BATTERY", text)

    def test_battery_layout_sections(self):
        text = ansi.strip_ansi(DashboardRenderer().render_text(derive_dashboard(battery_snapshot(), NOW)))
        self.assertIn("ON BATTERY", text)
        self.assertIn("Drain: 10.6 W", text)
        self.assertIn("draining", text)
        self.assertNotIn("POWER SPLIT", text)

    def test_mono_theme_has_no_escapes(self):
        text = DashboardRenderer("Mono").render_text(derive_dashboard(charging_snapshot(), NOW))
        self.assertNotIn("\033", text)

    def test_unknown_theme_falls_back(self):
        self.assertEqual(DashboardRenderer("Neon").theme, get_theme("Classic"))

    def test_draw_repaints_in_place(self):
        out = io.StringIO()
        renderer = DashboardRenderer(out=out)
        renderer.draw(charging_snapshot(), NOW)
        renderer.draw(battery_snapshot(), NOW)
        written = out.getvalue()
        self.assertTrue(written.startswith(ansi.CURSOR_HOME))
        self.assertEqual(written.count(ansi.CURSOR_HOME), 2)
        self.assertTrue(written.endswith(CLEAR_BELOW))
        self.assertNotIn(ansi.CLEAR_SCREEN, written)
        self.assertEqual(renderer.frames, 2)


if __name__ == "__main__":
    unittest.main()
