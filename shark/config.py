"""Application configuration: read-only JSON file merged over defaults.

``config.json`` in the data directory is edited by hand; the application
only reads it.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from loguru import logger

_instance: "Config | None" = None

# Default data directory
_DEFAULT_DATA_DIR = Path.home() / "Documents" / "SaveShark"


def get_config(data_dir: Path | None = None) -> Config:
    """Module-level factory for the single global Config instance."""
    global _instance
    if _instance is None:
        _instance = Config(data_dir)
    return _instance


def reset_config() -> None:
    """Reset the global config instance (for testing)."""
    global _instance
    _instance = None


class Config:
    """Settings loaded once from ``<data_dir>/config.json``."""

    _DEFAULTS: dict[str, Any] = {
        "language": "en_US",
        "backup_path": "",
        "database_name": "local_games.db",
        "log_level": "INFO",
        "confirm_remove": True,
    }

    def __init__(self, data_dir: Path | None = None) -> None:
        self._data: dict[str, Any] = {}
        self._dir = Path(data_dir) if data_dir else _DEFAULT_DATA_DIR
        self._path = self._dir / "config.json"
        self._load()

    def _load(self) -> None:
        """Load config from disk, merging with defaults."""
        self._data = json.loads(json.dumps(self._DEFAULTS))  # deep copy defaults
        if self._path.exists():
            try:
                with open(self._path, encoding="utf-8") as f:
                    user_data = json.load(f)
                if not isinstance(user_data, dict):
                    raise ValueError(f"expected a JSON object, got {type(user_data).__name__}")
                self._deep_merge(self._data, user_data)
            except (ValueError, OSError) as e:
                logger.warning(f"Failed to load config, using defaults: {e}")

    def _deep_merge(self, base: dict, override: dict) -> None:
        """Recursively merge override into base."""
        for key, value in override.items():
            if key in base and isinstance(base[key], dict) and isinstance(value, dict):
                self._deep_merge(base[key], value)
            else:
                base[key] = value

    # ── Typed properties ──

    @property
    def data_dir(self) -> Path:
        return self._dir

    @property
    def config_path(self) -> Path:
        return self._path

    @property
    def language(self) -> str:
        return self._data.get("language", "en_US")

    @property
    def backup_path(self) -> Path | None:
        raw = self._data.get("backup_path", "")
        return Path(raw) if raw else None

    @property
    def backup_root(self) -> Path:
        """Configured backup root, or ``<data_dir>/backups``."""
        return self.backup_path or self._dir / "backups"

    @property
    def database_name(self) -> str:
        return self._data.get("database_name") or "local_games.db"

    @property
    def database_path(self) -> Path:
        return self._dir / self.database_name

    @property
    def log_level(self) -> str:
        return str(self._data.get("log_level", "INFO")).upper()

    @property
    def confirm_remove(self) -> bool:
        return bool(self._data.get("confirm_remove", True))
