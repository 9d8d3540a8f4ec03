"""Fixed-width text dashboard composer for the terminal."""

from __future__ import annotations

import sys
from datetime import datetime
from typing import TextIO

from powerdash_telemetry.models import PowerSnapshot

from . import ansi
from .models import DashboardData, PowerSplit, ThemeConfig
from .themes import get_theme

SILICON_BAR_WIDTH = 20
SPLIT_BAR_WIDTH = 40
BATTERY_BAR_WIDTH = 44

CLEAR_BELOW = "\033[J"


def _status_label(is_charging: bool, on_ac: bool) -> str:
    if is_charging:
        return "charging"
    if on_ac:
        return "full/maintaining"
    return "draining"


def derive_dashboard(snap: PowerSnapshot, now: datetime | None = None) -> DashboardData:
    """Convert raw device units into the watts, volts and shares the dashboard shows."""
    battery_v = snap.battery_voltage / 1000
    battery_a = snap.battery_amps / 1000
    battery_w = battery_v * battery_a

    system_w = None
    drain_w = None
    split = None
    if snap.on_ac:
        system_w = snap.charger_watts - battery_w
        if snap.charger_watts > 0:
            fraction = max(0.0, min(1.0, battery_w / snap.charger_watts))
            battery_pct = int(fraction * 100)
            split = PowerSplit(system_pct=100 - battery_pct, battery_pct=battery_pct)
    else:
        drain_w = -battery_w

    return DashboardData(
        cpu_w=snap.cpu_power / 1000,
        gpu_w=snap.gpu_power / 1000,
        ane_w=snap.ane_power / 1000,
        chip_w=snap.package_power / 1000,
        charger_v=snap.charger_voltage / 1000,
        charger_a=snap.charger_current / 1000,
        charger_watts=snap.charger_watts,
        battery_v=battery_v,
        battery_a=battery_a,
        battery_w=battery_w,
        battery_ma=snap.battery_amps,
        battery_percent=snap.battery_percent,
        temp_c=snap.temperature / 100,
        on_ac=snap.on_ac,
        is_charging=snap.is_charging,
        system_w=system_w,
        drain_w=drain_w,
        split=split,
        status=_status_label(snap.is_charging, snap.on_ac),
        timestamp=now or datetime.now(),
    )


class DashboardRenderer:
    """Draws the boxed power dashboard in place, one frame per sample."""

    def __init__(self, theme_name: str | None = None, out: TextIO | None = None) -> None:
        self.theme: ThemeConfig = get_theme(theme_name)
        self.out = out
        self.frames = 0

    def _bar(self, pct: float, width: int, color: str) -> str:
        t = self.theme
        return ansi.color_bar(pct, width, color, dim=t.dim, reset=t.reset)

    def _paint(self, color: str, text: str) -> str:
        return f"{color}{text}{self.theme.reset}"

    def render_lines(self, d: DashboardData) -> list[str]:
        t = self.theme
        line = ansi.line
        rows = [
            ansi.border("top"),
            line("       LIVE POWER MONITOR  (Ctrl+C to stop)"),
            ansi.border("mid"),
            line(self._paint(t.silicon, "SILICON") + " (live)"),
            line(f"  CPU:  {d.cpu_w:5.2f} W  [{self._bar(d.cpu_w * 10, SILICON_BAR_WIDTH, t.silicon)}]"),
            line(f"  GPU:  {d.gpu_w:5.2f} W  [{self._bar(d.gpu_w * 10, SILICON_BAR_WIDTH, t.silicon)}]"),
            line(f"  ANE:  {d.ane_w:5.2f} W  [{self._bar(d.ane_w * 10, SILICON_BAR_WIDTH, t.silicon)}]"),
            line(f"  Chip: {d.chip_w:5.2f} W"),
            ansi.border("mid"),
        ]
        rows.extend(self._supply_rows(d))
        rows.extend(
            [
                ansi.border("mid"),
                line(self._paint(t.battery, "BATTERY")),
                line(f"  {d.battery_percent}% │ {d.battery_v:.2f}V │ {d.battery_ma}mA │ {d.temp_c:.1f}°C"),
                line(f"  {self._status_text(d)}"),
                line(f"  [{self._bar(d.battery_percent, BATTERY_BAR_WIDTH, t.battery)}]"),
                ansi.border("mid"),
                line(d.timestamp.strftime("%H:%M:%S")),
                ansi.border("bottom"),
            ]
        )
        return rows

    def _supply_rows(self, d: DashboardData) -> list[str]:
        t = self.theme
        line = ansi.line
        if not d.on_ac:
            return [
                line(self._paint(t.alert, "ON BATTERY")),
                line(f"  Drain: {self._paint(t.alert, f'{d.drain_w:.1f} W')}"),
            ]

        rows = [
            line(self._paint(t.good, "CHARGER")),
            line(f"  {d.charger_v:.1f}V × {d.charger_a:.2f}A = {self._paint(t.good, f'{d.charger_watts}W')}"),
            ansi.border("mid"),
            line("POWER SPLIT (~30s refresh)"),
            line(f"  → {self._paint(t.system, f'System:  {d.system_w:5.1f} W')}"),
            line(f"  → {self._paint(t.battery, f'Battery: {d.battery_w:5.1f} W')}"),
        ]
        if d.split is not None:
            bar = ansi.split_bar(
                d.split.system_pct,
                d.split.battery_pct,
                SPLIT_BAR_WIDTH,
                sys_color=t.system,
                bat_color=t.battery,
                reset=t.reset,
            )
            rows.append(line(f"  [{bar}]"))
            rows.append(
                line(
                    "   "
                    + self._paint(t.system, f"system {d.split.system_pct}%")
                    + "          "
                    + self._paint(t.battery, f"battery {d.split.battery_pct}%")
                )
            )
        return rows

    def _status_text(self, d: DashboardData) -> str:
        t = self.theme
        color = t.good if d.is_charging else t.info if d.on_ac else t.alert
        return self._paint(color, d.status)

    def render_text(self, d: DashboardData) -> str:
        return "".join(row + "\n" for row in self.render_lines(d)) + "\n"

    def draw(self, snap: PowerSnapshot, now: datetime | None = None) -> None:
        out = self.out or sys.stdout
        text = self.render_text(derive_dashboard(snap, now))
        # Home the cursor and overwrite; only rows left over from a taller frame are erased.
        out.write(ansi.CURSOR_HOME + text + CLEAR_BELOW)
        out.flush()
        self.frames += 1
