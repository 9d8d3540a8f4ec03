"""Built-in terminal colour themes."""

from __future__ import annotations

from . import ansi
from .models import ThemeConfig

DEFAULT_THEME_NAME = "Classic"

THEMES: dict[str, ThemeConfig] = {
    "Classic": ThemeConfig(
        name="Classic",
        silicon=ansi.MAGENTA,
        good=ansi.GREEN,
        system=ansi.CYAN,
        battery=ansi.YELLOW,
        alert=ansi.RED,
        info=ansi.BLUE,
        dim=ansi.DIM,
        reset=ansi.RESET,
    ),
    "High Contrast": ThemeConfig(
        name="High Contrast",
        silicon="\033[1;95m",
        good="\033[1;92m",
        system="\033[1;96m",
        battery="\033[1;93m",
        alert="\033[1;91m",
        info="\033[1;94m",
        dim="\033[90m",
        reset=ansi.RESET,
    ),
    "Mono": ThemeConfig(
        name="Mono",
        silicon="",
        good="",
        system="",
        battery="",
        alert="",
        info="",
        dim="",
        reset="",
    ),
}


def list_themes() -> list[str]:
    return sorted(THEMES.keys())


def get_theme(name: str | None) -> ThemeConfig:
    if not name:
        return THEMES[DEFAULT_THEME_NAME]
    return THEMES.get(name, THEMES[DEFAULT_THEME_NAME])
