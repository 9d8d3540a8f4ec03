"""Typed renderer models."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class ThemeConfig:
    name: str
    silicon: str
    good: str
    system: str
    battery: str
    alert: str
    info: str
    dim: str
    reset: str


@dataclass(frozen=True)
class PowerSplit:
    system_pct: int
    battery_pct: int


@dataclass(frozen=True)
class DashboardData:
    cpu_w: float
    gpu_w: float
    ane_w: float
    chip_w: float
    charger_v: float
    charger_a: float
    charger_watts: int
    battery_v: float
    battery_a: float
    battery_w: float
    battery_ma: int
    battery_percent: int
    temp_c: float
    on_ac: bool
    is_charging: bool
    system_w: float | None
    drain_w: float | None
    split: PowerSplit | None
    status: str
    timestamp: datetime
