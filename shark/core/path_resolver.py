"""Backup path key: maps catalog identifiers to a directory in the backup tree.

Layout::

    {backup_root}/{game_id}/{platform_id}/{save_id}/
        └── ... mirrored contents of the live save directory

Every component that reads or writes backup content derives the directory
through this module.
"""

from __future__ import annotations

from pathlib import Path, PurePosixPath

from shark.models.catalog import Save


def backup_key(game_id: int, platform_id: int, save_id: int) -> PurePosixPath:
    """Relative key ``<game_id>/<platform_id>/<save_id>`` for one backup."""
    for name, value in (("game_id", game_id), ("platform_id", platform_id), ("save_id", save_id)):
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            raise ValueError(f"{name} must be a non-negative integer, got {value!r}")
    return PurePosixPath(str(game_id), str(platform_id), str(save_id))


def backup_dir(backup_root: Path, game_id: int, platform_id: int, save_id: int) -> Path:
    """Absolute backup directory for a (game, platform, save) triple."""
    return Path(backup_root).joinpath(*backup_key(game_id, platform_id, save_id).parts)


def backup_dir_for(backup_root: Path, save: Save) -> Path:
    """Backup directory for a catalog Save row."""
    return backup_dir(backup_root, save.game_id, save.platform_id, save.id)


def game_backup_dir(backup_root: Path, game_id: int) -> Path:
    """Directory holding every backup of one game."""
    return Path(backup_root) / str(game_id)
