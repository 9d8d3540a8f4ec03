"""Persistent app settings schema and load/save helpers.

Sampling intervals are fixed constants in the samplers, not settings.
"""

from __future__ import annotations

import json
import logging
import os
import platform
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

from powerdash_renderer.themes import DEFAULT_THEME_NAME, THEMES


CONFIG_VERSION = 1
_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


@dataclass
class UiConfig:
    theme: str = DEFAULT_THEME_NAME


@dataclass
class SamplerConfig:
    use_sudo: bool = True
    powermetrics_path: str = "powermetrics"
    ioreg_path: str = "ioreg"


@dataclass
class DiagnosticsConfig:
    keep_log_files: int = 7
    log_level: str = "INFO"


@dataclass
class AppConfig:
    config_version: int = CONFIG_VERSION
    ui: UiConfig = field(default_factory=UiConfig)
    sampler: SamplerConfig = field(default_factory=SamplerConfig)
    diagnostics: DiagnosticsConfig = field(default_factory=DiagnosticsConfig)


def config_root() -> Path:
    override = os.environ.get("POWERDASH_HOME")
    if override:
        return Path(override).expanduser()
    if platform.system() == "Darwin":
        return Path.home() / "Library" / "Application Support" / "PowerDash"
    return Path.home() / ".config" / "powerdash"


def config_path() -> Path:
    return config_root() / "config.json"


def _merge(dataclass_type, raw: Any):
    defaults = dataclass_type()  # type: ignore[misc]
    if not isinstance(raw, dict):
        return defaults
    for k, v in raw.items():
        if hasattr(defaults, k):
            setattr(defaults, k, v)
    return defaults


def _normalize_ui(cfg: AppConfig) -> None:
    if cfg.ui.theme not in THEMES:
        cfg.ui.theme = DEFAULT_THEME_NAME


def _normalize_sampler(cfg: AppConfig) -> None:
    if not isinstance(cfg.sampler.use_sudo, bool):
        cfg.sampler.use_sudo = SamplerConfig().use_sudo
    if not isinstance(cfg.sampler.powermetrics_path, str) or not cfg.sampler.powermetrics_path.strip():
        cfg.sampler.powermetrics_path = "powermetrics"
    if not isinstance(cfg.sampler.ioreg_path, str) or not cfg.sampler.ioreg_path.strip():
        cfg.sampler.ioreg_path = "ioreg"


def _normalize_diagnostics(cfg: AppConfig) -> None:
    try:
        keep = int(cfg.diagnostics.keep_log_files)
    except (TypeError, ValueError):
        keep = 7
    cfg.diagnostics.keep_log_files = max(2, min(90, keep))
    level = str(cfg.diagnostics.log_level).upper()
    cfg.diagnostics.log_level = level if level in _LOG_LEVELS else "INFO"


def log_level(cfg: AppConfig) -> int:
    return getattr(logging, cfg.diagnostics.log_level, logging.INFO)


def load_config(path: Path | None = None) -> AppConfig:
    path = path or config_path()
    if not path.exists():
        return AppConfig()

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return AppConfig()
    if not isinstance(data, dict):
        return AppConfig()

    cfg = AppConfig(
        ui=_merge(UiConfig, data.get("ui", {})),
        sampler=_merge(SamplerConfig, data.get("sampler", {})),
        diagnostics=_merge(DiagnosticsConfig, data.get("diagnostics", {})),
    )

    _normalize_ui(cfg)
    _normalize_sampler(cfg)
    _normalize_diagnostics(cfg)
    return cfg


def save_config(cfg: AppConfig, path: Path | None = None) -> Path:
    cfg.config_version = CONFIG_VERSION
    path = path or config_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(asdict(cfg), indent=2, sort_keys=True), encoding="utf-8")
    return path
