from __future__ import annotations

import logging
import os
import yaml
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Dict, Any

USER_CONFIG_PATH = Path.home() / ".tasklive_config.yaml"
ENV_PREFIX = "TASKLIVE_"

logger = logging.getLogger("tasklive.config")


@dataclass
class LiveListSettings:
    lang: str = "en"
    theme: str = "dark-olive"
    poll_interval: float = 1.0
    update_throttle: float = 1.0
    input_throttle: float = 0.05
    show_subtasks: bool = True
    loop_navigation: bool = True
    page_size: int = 10
    tag: str = "master"


def _load_config() -> Dict[str, Any]:
    if not USER_CONFIG_PATH.exists():
        return {}
    try:
        data = yaml.safe_load(USER_CONFIG_PATH.read_text(encoding="utf-8")) or {}
    except Exception as exc:
        logger.warning("ignoring unreadable config %s: %s", USER_CONFIG_PATH, exc)
        return {}
    return data if isinstance(data, dict) else {}


def _coerce(value: Any, default: Any) -> Any:
    if isinstance(default, bool):
        if isinstance(value, bool):
            return value
        token = str(value).strip().lower()
        if token in ("1", "true", "yes", "on"):
            return True
        if token in ("0", "false", "no", "off"):
            return False
        raise ValueError(f"not a boolean: {value!r}")
    if isinstance(default, int):
        return int(value)
    if isinstance(default, float):
        return float(value)
    text = str(value).strip()
    if not text:
        raise ValueError("empty value")
    return text


def load_settings(overrides: Dict[str, Any] | None = None) -> LiveListSettings:
    """Defaults, then the YAML config, then TASKLIVE_* env, then explicit overrides."""
    settings = LiveListSettings()
    data = _load_config()
    for item in fields(LiveListSettings):
        default = getattr(settings, item.name)
        sources = (
            ("config", data.get(item.name)),
            ("env", os.getenv(ENV_PREFIX + item.name.upper())),
            ("override", (overrides or {}).get(item.name)),
        )
        for origin, raw in sources:
            if raw is None:
                continue
            try:
                setattr(settings, item.name, _coerce(raw, default))
            except (TypeError, ValueError):
                logger.warning("ignoring invalid %s value for %s: %r", origin, item.name, raw)
    return settings


def get_user_lang() -> str:
    return str(_load_config().get("lang", "") or "").strip()


def get_tui_ttimeoutlen(default: float = 0.05) -> float:
    raw = os.getenv(ENV_PREFIX + "TUI_TTIMEOUTLEN")
    if not raw:
        return default
    try:
        return max(0.0, float(raw))
    except ValueError:
        return default
