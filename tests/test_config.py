"""Tests for the Config system."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from shark.config import Config, get_config, reset_config


@pytest.fixture(autouse=True)
def _clean_config():
    reset_config()
    yield
    reset_config()


def _write_config(data_dir: Path, data: object) -> None:
    (data_dir / "config.json").write_text(json.dumps(data), encoding="utf-8")


class TestConfig:
    def test_default_values(self, tmp_path: Path) -> None:
        config = Config(data_dir=tmp_path)
        assert config.language == "en_US"
        assert config.backup_path is None
        assert config.backup_root == tmp_path / "backups"
        assert config.database_path == tmp_path / "local_games.db"
        assert config.log_level == "INFO"
        assert config.confirm_remove is True

    def test_loading_never_writes(self, tmp_path: Path) -> None:
        config = Config(data_dir=tmp_path)
        assert not config.config_path.exists()
        assert list(tmp_path.iterdir()) == []

    def test_backup_path_override(self, tmp_path: Path) -> None:
        _write_config(tmp_path, {"backup_path": "/some/path"})
        config = Config(data_dir=tmp_path)
        assert config.backup_path == Path("/some/path")
        assert config.backup_root == Path("/some/path")

    def test_values_from_file(self, tmp_path: Path) -> None:
        _write_config(
            tmp_path,
            {"log_level": "debug", "database_name": "other.db", "confirm_remove": False},
        )
        config = Config(data_dir=tmp_path)
        assert config.log_level == "DEBUG"
        assert config.database_path == tmp_path / "other.db"
        assert config.confirm_remove is False

    def test_empty_database_name_falls_back(self, tmp_path: Path) -> None:
        _write_config(tmp_path, {"database_name": ""})
        assert Config(data_dir=tmp_path).database_name == "local_games.db"

    def test_user_file_merged_with_defaults(self, tmp_path: Path) -> None:
        _write_config(tmp_path, {"language": "fr_FR"})
        config = Config(data_dir=tmp_path)
        assert config.language == "fr_FR"
        assert config.database_name == "local_games.db"

    def test_corrupt_file_uses_defaults(self, tmp_path: Path) -> None:
        (tmp_path / "config.json").write_text("{not json", encoding="utf-8")
        assert Config(data_dir=tmp_path).language == "en_US"

    def test_non_object_file_uses_defaults(self, tmp_path: Path) -> None:
        _write_config(tmp_path, ["language", "fr_FR"])
        assert Config(data_dir=tmp_path).language == "en_US"

    def test_get_config_singleton(self, tmp_path: Path) -> None:
        assert get_config(tmp_path) is get_config()
