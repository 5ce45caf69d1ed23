#!/usr/bin/env python3
"""TUI themes and styling."""

from typing import Dict, Optional

from prompt_toolkit.styles import Style

from core import TaskStatus


def style_key(status: Optional[str]) -> str:
    """Style-class suffix for a status code (`in-progress` → `in_progress`)."""
    found = TaskStatus.from_string(status)
    if found is None:
        return "unknown"
    return found.code.replace("-", "_")


def _status_entries(colors: Dict[str, str], selected_bg: str) -> Dict[str, str]:
    entries: Dict[str, str] = {}
    for code, color in colors.items():
        key = style_key(code)
        entries[f"status.{key}"] = f"{color} bold"
        entries[f"selected.{key}"] = f"bg:{selected_bg} {color} bold"
    return entries


THEMES: Dict[str, Dict[str, str]] = {
    "dark-olive": {
        "": "#d7dfe6",
        "text": "#d7dfe6",
        "text.dim": "#97a0a9",
        "text.dimmer": "#6d717a",
        "selected": "bg:#3b3b3b #d7dfe6 bold",
        "header": "#ffb347 bold",
        "border": "#4b525a",
        "indicator": "#6d717a italic",
        "error": "#ff5156 bold",
        "icon.check": "#9ad974 bold",
        "icon.warn": "#f9ac60 bold",
        "icon.fail": "#ff5156 bold",
        "priority.high": "#ff6b6b",
        "priority.medium": "#e5c07b",
        "priority.low": "#7a7f85",
        **_status_entries(
            {
                "pending": "#e5c07b",
                "in-progress": "#f9ac60",
                "done": "#9ad974",
                "completed": "#9ad974",
                "blocked": "#e06c75",
                "review": "#c678dd",
                "deferred": "#7a7f85",
                "cancelled": "#7a7f85",
            },
            "#3b3b3b",
        ),
        "status.unknown": "#7a7f85",
        "selected.unknown": "bg:#3b3b3b #e8eaec bold",
    },
    "dark-contrast": {
        "": "#e8eaec",
        "text": "#e8eaec",
        "text.dim": "#a7b0ba",
        "text.dimmer": "#6f757d",
        "selected": "bg:#3d4047 #e8eaec bold",
        "header": "#ffb347 bold",
        "border": "#5a6169",
        "indicator": "#8a9097 italic",
        "error": "#ff5156 bold",
        "icon.check": "#b8f171 bold",
        "icon.warn": "#f9ac60 bold",
        "icon.fail": "#ff5156 bold",
        "priority.high": "#ff6b6b bold",
        "priority.medium": "#f0c674",
        "priority.low": "#8a9097",
        **_status_entries(
            {
                "pending": "#f0c674",
                "in-progress": "#ffb347",
                "done": "#b8f171",
                "completed": "#b8f171",
                "blocked": "#ff6b6b",
                "review": "#d19bff",
                "deferred": "#8a9097",
                "cancelled": "#8a9097",
            },
            "#3d4047",
        ),
        "status.unknown": "#8a9097",
        "selected.unknown": "bg:#3d4047 #e8eaec bold",
    },
}

DEFAULT_THEME = "dark-olive"


def status_style(status: Optional[str], *, selected: bool = False, mono: bool = False) -> str:
    if selected and mono:
        return "class:selected"
    prefix = "selected" if selected else "status"
    return f"class:{prefix}.{style_key(status)}"


def get_theme_palette(theme: str) -> Dict[str, str]:
    """Get theme palette, falling back to default if theme not found."""
    base = THEMES.get(theme)
    if not base:
        base = THEMES[DEFAULT_THEME]
    return dict(base)


def build_style(theme: str) -> Style:
    """Build Style object from theme name."""
    palette = get_theme_palette(theme)
    return Style.from_dict(palette)
