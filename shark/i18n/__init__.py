"""Message catalog: key-based user-facing text loaded from per-language JSON tables."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

_DEFAULT_LANG = "en_US"
_current_lang: str = _DEFAULT_LANG
_I18N_DIR = Path(__file__).parent

# Lazy-loaded translation cache: lang → dict
_cache: dict[str, dict[str, str]] = {}


def _load(lang: str) -> dict[str, str]:
    """Load and cache a language JSON file."""
    if lang not in _cache:
        fp = _I18N_DIR / f"{lang}.json"
        if fp.exists():
            with open(fp, "r", encoding="utf-8") as f:
                _cache[lang] = json.load(f)
        else:
            _cache[lang] = {}
    return _cache[lang]


def supported_languages() -> tuple[str, ...]:
    """Return the language codes that ship a message table."""
    return tuple(sorted(p.stem for p in _I18N_DIR.glob("*.json")))


def set_language(lang: str) -> None:
    """Set the active language.  Falls back to en_US if unsupported."""
    global _current_lang
    _current_lang = lang if lang in supported_languages() else _DEFAULT_LANG


def current_language() -> str:
    """Return the current active language code."""
    return _current_lang


def t(key: str, **kwargs: Any) -> str:
    """Translate *key* to the current language.

    Supports ``{name}``-style placeholders via keyword arguments::

        t("remove.no_save_files", title="Chrono Trigger")
        # → "No save files found for 'Chrono Trigger'"
    """
    table = _load(_current_lang)
    text = table.get(key)
    if text is None:
        # Fall back to en_US, then raw key
        text = _load(_DEFAULT_LANG).get(key, key)
    if kwargs:
        try:
            text = text.format(**kwargs)
        except (KeyError, IndexError):
            pass
    return text
