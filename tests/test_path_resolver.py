"""Tests for the backup path key."""

from __future__ import annotations

from pathlib import Path

import pytest

from shark.core.path_resolver import (
    backup_dir,
    backup_dir_for,
    backup_key,
    game_backup_dir,
)
from shark.models.catalog import Save


class TestBackupKey:
    def test_layout(self) -> None:
        assert backup_key(7, 3, 12).as_posix() == "7/3/12"

    def test_backup_dir_under_root(self, tmp_path: Path) -> None:
        assert backup_dir(tmp_path / "backups", 1, 2, 3) == tmp_path / "backups" / "1" / "2" / "3"

    def test_backup_dir_for_save(self, tmp_path: Path) -> None:
        save = Save(id=9, game_id=4, location_id=5, platform_id=6)
        assert backup_dir_for(tmp_path, save) == tmp_path / "4" / "6" / "9"

    def test_game_backup_dir(self, tmp_path: Path) -> None:
        assert game_backup_dir(tmp_path, 4) == tmp_path / "4"

    @pytest.mark.parametrize("bad", [-1, True, "1", None])
    def test_rejects_non_ids(self, bad) -> None:
        with pytest.raises(ValueError):
            backup_key(1, bad, 1)
