"""Telemetry producers and the shared snapshot store for PowerDash."""

from .extract import IOREG_RULES, POWERMETRICS_RULES, FieldRule, apply_rules, extract_flag, extract_float, extract_int
from .ioreg import IoregPoller
from .models import FAST_FIELDS, SLOW_FIELDS, PowerSnapshot, SamplerStats
from .powermetrics import PowermetricsSampler, SamplerLaunchError
from .store import ReadWriteLock, SnapshotStore

__all__ = [
    "FAST_FIELDS",
    "IOREG_RULES",
    "POWERMETRICS_RULES",
    "SLOW_FIELDS",
    "FieldRule",
    "IoregPoller",
    "PowerSnapshot",
    "PowermetricsSampler",
    "ReadWriteLock",
    "SamplerLaunchError",
    "SamplerStats",
    "SnapshotStore",
    "apply_rules",
    "extract_flag",
    "extract_float",
    "extract_int",
]
