"""Renderer package for the PowerDash terminal dashboard."""

from .ansi import color_bar, line, split_bar, strip_ansi, visible_len
from .dashboard import DashboardRenderer, derive_dashboard
from .models import DashboardData, PowerSplit, ThemeConfig
from .themes import DEFAULT_THEME_NAME, get_theme, list_themes

__all__ = [
    "DEFAULT_THEME_NAME",
    "DashboardData",
    "DashboardRenderer",
    "PowerSplit",
    "ThemeConfig",
    "color_bar",
    "derive_dashboard",
    "get_theme",
    "line",
    "list_themes",
    "split_bar",
    "strip_ansi",
    "visible_len",
]
