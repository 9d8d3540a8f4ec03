"""Typed telemetry models."""

from __future__ import annotations

from dataclasses import dataclass, field, fields


@dataclass
class PowerSnapshot:
    # powermetrics, milliwatts
    cpu_power: float = 0.0
    gpu_power: float = 0.0
    ane_power: float = 0.0
    package_power: float = 0.0
    battery_percent: int = 0

    # ioreg, device units
    charger_watts: int = 0
    charger_voltage: int = 0
    charger_current: int = 0
    battery_voltage: int = 0
    battery_amps: int = 0
    temperature: int = 0
    is_charging: bool = False
    on_ac: bool = False


FAST_FIELDS = frozenset({"cpu_power", "gpu_power", "ane_power", "package_power", "battery_percent"})
SLOW_FIELDS = frozenset(
    {
        "charger_watts",
        "charger_voltage",
        "charger_current",
        "battery_voltage",
        "battery_amps",
        "temperature",
        "is_charging",
        "on_ac",
    }
)

SNAPSHOT_FIELDS = frozenset(f.name for f in fields(PowerSnapshot))


@dataclass
class SamplerStats:
    lines: int = 0
    frames: int = 0
    field_updates: dict[str, int] = field(default_factory=dict)

    def record(self, updated: dict[str, object]) -> None:
        for name in updated:
            self.field_updates[name] = self.field_updates.get(name, 0) + 1
