"""Bounded field extraction from powermetrics and ioreg text.

Every reading goes through a plausibility range. A garbled or half-written
line yields no value at all; the caller keeps its last good reading.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class FieldRule:
    field: str
    pattern: re.Pattern[str]
    lo: float = 0
    hi: float = 0
    kind: str = "int"


def extract_int(text: str, pattern: re.Pattern[str], lo: int, hi: int) -> tuple[int, bool]:
    match = pattern.search(text)
    if match is None:
        return 0, False
    try:
        value = int(match.group(1))
    except (IndexError, ValueError):
        return 0, False
    if lo <= value <= hi:
        return value, True
    return 0, False


def extract_float(text: str, pattern: re.Pattern[str], lo: float, hi: float) -> tuple[float, bool]:
    match = pattern.search(text)
    if match is None:
        return 0.0, False
    try:
        value = float(match.group(1))
    except (IndexError, ValueError):
        return 0.0, False
    # NaN fails both comparisons
    if lo <= value <= hi:
        return value, True
    return 0.0, False


def extract_flag(text: str, pattern: re.Pattern[str]) -> tuple[bool, bool]:
    match = pattern.search(text)
    if match is None:
        return False, False
    raw = match.group(1)
    if raw not in ("Yes", "No"):
        return False, False
    return raw == "Yes", True


def apply_rules(text: str, rules: tuple[FieldRule, ...]) -> dict[str, Any]:
    """Return ``{field: value}`` for every rule that extracted a plausible value."""
    updates: dict[str, Any] = {}
    for rule in rules:
        if rule.kind == "flag":
            value, ok = extract_flag(text, rule.pattern)
        elif rule.kind == "float":
            value, ok = extract_float(text, rule.pattern, rule.lo, rule.hi)
        else:
            value, ok = extract_int(text, rule.pattern, int(rule.lo), int(rule.hi))
        if ok:
            updates[rule.field] = value
    return updates


_MAX_SILICON_MW = 200_000.0

POWERMETRICS_RULES: tuple[FieldRule, ...] = (
    FieldRule("cpu_power", re.compile(r"CPU Power:\s+([\d.]+)\s+mW"), 0.0, _MAX_SILICON_MW, "float"),
    FieldRule("gpu_power", re.compile(r"GPU Power:\s+([\d.]+)\s+mW"), 0.0, _MAX_SILICON_MW, "float"),
    FieldRule("ane_power", re.compile(r"ANE Power:\s+([\d.]+)\s+mW"), 0.0, _MAX_SILICON_MW, "float"),
    FieldRule(
        "package_power",
        re.compile(r"Combined Power \(CPU \+ GPU \+ ANE\):\s+([\d.]+)\s+mW"),
        0.0,
        _MAX_SILICON_MW,
        "float",
    ),
    FieldRule("battery_percent", re.compile(r"percent_charge:\s+(\d+)"), 0, 100),
)

IOREG_RULES: tuple[FieldRule, ...] = (
    FieldRule("charger_watts", re.compile(r'"Watts"\s*=\s*(\d+)'), 0, 500),
    FieldRule("charger_voltage", re.compile(r'"AdapterVoltage"\s*=\s*(\d+)'), 0, 50_000),
    FieldRule("charger_current", re.compile(r'"Current"\s*=\s*(\d+)'), 0, 10_000),
    FieldRule("battery_voltage", re.compile(r'"AppleRawBatteryVoltage"\s*=\s*(\d+)'), 5_000, 25_000),
    FieldRule("battery_amps", re.compile(r'"Amperage"\s*=\s*(-?\d+)'), -15_000, 15_000),
    FieldRule("temperature", re.compile(r'"Temperature"\s*=\s*(\d+)'), 0, 10_000),
    FieldRule("is_charging", re.compile(r'"IsCharging"\s*=\s*(Yes|No)'), kind="flag"),
    FieldRule("on_ac", re.compile(r'"ExternalConnected"\s*=\s*(Yes|No)'), kind="flag"),
)
