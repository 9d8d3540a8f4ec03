"""Replay captured powermetrics/ioreg output through the live pipeline."""

from __future__ import annotations

import io
import time
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, TextIO

from powerdash_renderer import DashboardRenderer
from powerdash_telemetry import IoregPoller, PowermetricsSampler, SnapshotStore


@dataclass
class ReplayReport:
    total_lines: int = 0
    frames: int = 0
    field_updates: dict[str, int] = field(default_factory=dict)
    ioreg_fields: list[str] = field(default_factory=list)
    final_snapshot: dict[str, Any] = field(default_factory=dict)
    errors: list[str] = field(default_factory=list)


class ReplayRunner:
    def __init__(self, theme_name: str | None = None, out: TextIO | None = None, delay_s: float = 0.0) -> None:
        self.theme_name = theme_name
        self.out = out
        self.delay_s = max(0.0, delay_s)

    def run(self, transcript_path: Path, ioreg_path: Path | None = None, strict: bool = True) -> ReplayReport:
        store = SnapshotStore()
        renderer = DashboardRenderer(theme_name=self.theme_name, out=self.out or io.StringIO())
        report = ReplayReport()

        if ioreg_path is not None:
            dump = ioreg_path.read_text(encoding="utf-8", errors="replace")
            applied = IoregPoller(store).apply(dump)
            report.ioreg_fields = sorted(applied)

        def on_frame() -> None:
            renderer.draw(store.snapshot())
            if self.delay_s:
                time.sleep(self.delay_s)

        sampler = PowermetricsSampler(store, on_frame=on_frame)
        with transcript_path.open(encoding="utf-8", errors="replace") as fh:
            sampler.consume(fh)

        report.total_lines = sampler.stats.lines
        report.frames = sampler.stats.frames
        report.field_updates = dict(sorted(sampler.stats.field_updates.items()))
        report.final_snapshot = asdict(store.snapshot())

        if strict:
            if report.frames < 1:
                report.errors.append("missing_sample_delimiter")
            if not report.field_updates:
                report.errors.append("no_power_readings")
            if ioreg_path is not None and not report.ioreg_fields:
                report.errors.append("no_ioreg_readings")

        return report
