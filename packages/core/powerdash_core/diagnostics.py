"""Diagnostics payload and support bundle export."""

from __future__ import annotations

import json
import platform
import shutil
import tempfile
import zipfile
from dataclasses import asdict
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import psutil

from powerdash_telemetry import ioreg, powermetrics

from .config import AppConfig, config_path
from .logging_setup import log_dir


def _battery_payload() -> dict[str, Any] | None:
    try:
        battery = psutil.sensors_battery()
    except (AttributeError, NotImplementedError, OSError):
        return None
    if battery is None:
        return None
    secs = battery.secsleft
    return {
        "percent": float(battery.percent),
        "power_plugged": battery.power_plugged,
        "secs_left": secs if isinstance(secs, int) and secs >= 0 else None,
    }


def _tool_payload(cfg: AppConfig) -> dict[str, Any]:
    tools = {
        "powermetrics": cfg.sampler.powermetrics_path,
        "ioreg": cfg.sampler.ioreg_path,
    }
    if cfg.sampler.use_sudo:
        tools["sudo"] = "sudo"
    return {name: {"command": cmd, "path": shutil.which(cmd)} for name, cmd in tools.items()}


def build_doctor_payload(cfg: AppConfig) -> dict[str, Any]:
    tools = _tool_payload(cfg)
    return {
        "ts_utc": datetime.now(timezone.utc).isoformat(),
        "platform": platform.platform(),
        "python": platform.python_version(),
        "macos": platform.system() == "Darwin",
        "tools": tools,
        "ready": all(t["path"] for t in tools.values()),
        "commands": {
            "powermetrics": powermetrics.build_command(cfg.sampler.powermetrics_path, cfg.sampler.use_sudo),
            "ioreg": ioreg.build_command(cfg.sampler.ioreg_path),
        },
        "battery": _battery_payload(),
        "config": asdict(cfg),
    }


class DiagnosticsExporter:
    def __init__(self, app_name: str = "PowerDash") -> None:
        self.app_name = app_name

    def bundle(self, cfg: AppConfig, doctor_payload: dict[str, Any], output_dir: Path | None = None) -> Path:
        output_base = output_dir or Path(tempfile.gettempdir())
        output_base.mkdir(parents=True, exist_ok=True)
        stamp = datetime.now().strftime("%Y%m%d-%H%M%S")
        zip_path = output_base / f"powerdash-diagnostics-{stamp}.zip"

        logs = sorted(log_dir().glob("*.log*"))

        with zipfile.ZipFile(zip_path, "w", compression=zipfile.ZIP_DEFLATED) as zf:
            manifest = {
                "app": self.app_name,
                "created_utc": datetime.now(timezone.utc).isoformat(),
                "host": platform.platform(),
                "python": platform.python_version(),
                "config_path": str(config_path()),
                "log_dir": str(log_dir()),
            }
            zf.writestr("manifest.json", json.dumps(manifest, indent=2, sort_keys=True))
            zf.writestr("doctor.json", json.dumps(doctor_payload, indent=2, sort_keys=True, default=str))
            zf.writestr("config.json", json.dumps(asdict(cfg), indent=2, sort_keys=True))

            # fault.log matches the glob too
            for item in logs:
                zf.write(item, arcname=f"logs/{item.name}")

        return zip_path
