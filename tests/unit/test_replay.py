import io
import sys
import tempfile
import unittest
from pathlib import Path

ROOT = Path(__file__).resolve().parents[2]
sys.path.insert(0, str(ROOT / "packages" / "core"))
sys.path.insert(0, str(ROOT / "packages" / "renderer"))
sys.path.insert(0, str(ROOT / "packages" / "telemetry"))

from powerdash_core.replay import ReplayRunner
from powerdash_renderer.ansi import CURSOR_HOME, strip_ansi

TRANSCRIPTS = ROOT / "tests" / "transcripts"


class ReplayTests(unittest.TestCase):
    def test_replay_report_counts_frames_and_fields(self):
        runner = ReplayRunner()
        report = runner.run(TRANSCRIPTS / "powermetrics_sample.txt", strict=True)

        self.assertEqual(report.frames, 3)
        self.assertEqual(
            report.field_updates,
            {"ane_power": 2, "battery_percent": 3, "cpu_power": 2, "gpu_power": 5, "package_power": 2},
        )
        self.assertEqual(report.errors, [])

    def test_rejected_readings_keep_previous_values(self):
        report = ReplayRunner().run(TRANSCRIPTS / "powermetrics_sample.txt")
        final = report.final_snapshot
        self.assertEqual(final["cpu_power"], 4250.0)
        self.assertEqual(final["package_power"], 5074.0)
        self.assertEqual(final["gpu_power"], 640.0)
        self.assertEqual(final["ane_power"], 12.0)
        self.assertEqual(final["battery_percent"], 1)

    def test_ioreg_dump_fills_slow_fields(self):
        report = ReplayRunner().run(TRANSCRIPTS / "powermetrics_sample.txt", ioreg_path=TRANSCRIPTS / "ioreg_sample.txt")
        self.assertEqual(
            report.ioreg_fields,
            sorted(
                [
                    "battery_amps",
                    "battery_voltage",
                    "charger_current",
                    "charger_voltage",
                    "charger_watts",
                    "is_charging",
                    "on_ac",
                    "temperature",
                ]
            ),
        )
        self.assertEqual(report.final_snapshot["charger_watts"], 65)
        self.assertTrue(report.final_snapshot["on_ac"])
        self.assertEqual(report.errors, [])

    def test_frames_render_values_seen_before_each_delimiter(self):
        out = io.StringIO()
        ReplayRunner(theme_name="Mono", out=out).run(TRANSCRIPTS / "powermetrics_sample.txt")
        frames = [strip_ansi(chunk) for chunk in out.getvalue().split(CURSOR_HOME) if chunk]
        self.assertEqual(len(frames), 3)
        self.assertIn("CPU:   0.00 W", frames[0])
        self.assertIn("CPU:   1.50 W", frames[1])
        self.assertIn("CPU:   4.25 W", frames[2])
        self.assertIn("ON BATTERY", frames[2])

    def test_strict_errors(self):
        with tempfile.TemporaryDirectory() as tmp:
            transcript = Path(tmp) / "empty.txt"
            transcript.write_text("Machine model: Mac14,2\n", encoding="utf-8")
            dump = Path(tmp) / "ioreg.txt"
            dump.write_text("no battery here\n", encoding="utf-8")
            report = ReplayRunner().run(transcript, ioreg_path=dump, strict=True)
        self.assertEqual(report.errors, ["missing_sample_delimiter", "no_power_readings", "no_ioreg_readings"])

    def test_non_strict_reports_no_errors(self):
        with tempfile.TemporaryDirectory() as tmp:
            transcript = Path(tmp) / "empty.txt"
            transcript.write_text("\n", encoding="utf-8")
            report = ReplayRunner().run(transcript, strict=False)
        self.assertEqual(report.errors, [])
        self.assertEqual(report.total_lines, 1)


if __name__ == "__main__":
    unittest.main()
