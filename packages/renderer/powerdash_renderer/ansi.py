"""ANSI escape helpers and width-safe box primitives."""

from __future__ import annotations

import math
import re

RESET = "\033[0m"
RED = "\033[31m"
GREEN = "\033[32m"
YELLOW = "\033[33m"
BLUE = "\033[34m"
MAGENTA = "\033[35m"
CYAN = "\033[36m"
DIM = "\033[2m"

HIDE_CURSOR = "\033[?25l"
SHOW_CURSOR = "\033[?25h"
CURSOR_HOME = "\033[H"
CLEAR_SCREEN = "\033[2J"

FILL = "█"
EMPTY = "░"

INNER_WIDTH = 52
BOX_WIDTH = INNER_WIDTH + 4

_ANSI_RE = re.compile(r"\x1b\[[0-9;]*m")

_BORDERS = {
    "top": ("╔", "╗"),
    "mid": ("╠", "╣"),
    "bottom": ("╚", "╝"),
}


def strip_ansi(text: str) -> str:
    return _ANSI_RE.sub("", text)


def visible_len(text: str) -> int:
    """Number of code points left once colour sequences are removed."""
    return len(strip_ansi(text))


def _clamp_pct(pct: float) -> float:
    if isinstance(pct, float) and math.isnan(pct):
        return 0.0
    return max(0.0, min(100.0, float(pct)))


def color_bar(pct: float, width: int, color: str, dim: str = DIM, reset: str = RESET) -> str:
    filled = int(_clamp_pct(pct) * width // 100)
    empty = max(width - filled, 0)
    return color + FILL * filled + reset + dim + EMPTY * empty + reset


def split_bar(
    sys_pct: float,
    bat_pct: float,
    width: int,
    sys_color: str = CYAN,
    bat_color: str = YELLOW,
    reset: str = RESET,
) -> str:
    """Two adjacent segments covering exactly ``width`` cells.

    The system segment is ``sys_pct`` percent of ``width``; everything left,
    rounding included, goes to the battery segment, so ``bat_pct`` never
    changes the cell counts.
    """
    sys_cells = int(_clamp_pct(sys_pct) * width // 100)
    sys_cells = max(0, min(width, sys_cells))
    bat_cells = width - sys_cells
    return sys_color + FILL * sys_cells + reset + bat_color + FILL * bat_cells + reset


def line(content: str, width: int = INNER_WIDTH) -> str:
    # overflowing content is kept whole; padding just bottoms out at zero
    pad = max(width - visible_len(content), 0)
    return "║ " + content + " " * pad + " ║"


def border(kind: str = "mid", width: int = INNER_WIDTH) -> str:
    left, right = _BORDERS[kind]
    return left + "═" * (width + 2) + right
