"""Core app services: settings, logging, live monitor, replay and diagnostics."""

from .config import AppConfig, load_config, save_config
from .diagnostics import DiagnosticsExporter, build_doctor_payload
from .monitor import PowerMonitor
from .replay import ReplayReport, ReplayRunner

__all__ = [
    "AppConfig",
    "DiagnosticsExporter",
    "PowerMonitor",
    "ReplayReport",
    "ReplayRunner",
    "build_doctor_payload",
    "load_config",
    "save_config",
]
