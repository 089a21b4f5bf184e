"""Game save manager: add, restore, edit and remove game saves.

Each workflow composes the catalog and the filesystem mirror and returns a
result object. A workflow stops at the first failing step and reports it;
steps already completed are left in place.
"""

from __future__ import annotations

from datetime import date
from pathlib import Path
from typing import Protocol

from loguru import logger

from shark.core.mirror import FilesystemMirror
from shark.core.path_resolver import backup_dir, backup_dir_for, game_backup_dir
from shark.data.catalog import Catalog, CatalogError
from shark.i18n import t
from shark.models.catalog import Game, SaveDetails
from shark.models.results import AddResult, EditResult, RemoveResult, RestoreMode, RestoreResult


class RestorePrompter(Protocol):
    """Decisions the presentation layer makes during a restore."""

    def choose_mode(self, details: SaveDetails) -> RestoreMode: ...

    def confirm_file(self, details: SaveDetails, relative_path: Path) -> bool: ...


def _valid_release_date(value: str) -> bool:
    if not value:
        return True
    try:
        date.fromisoformat(value)
    except ValueError:
        return False
    return True


def _overlaps(a: Path, b: Path) -> bool:
    """True when one resolved path equals the other or lies under it."""
    a, b = a.resolve(), b.resolve()
    return a == b or a in b.parents or b in a.parents


class GameSaveManager:
    """
    Backup orchestrator.

    Uses *Catalog* for bookkeeping and *FilesystemMirror* to move save files
    between live locations and ``{backup_root}/{game}/{platform}/{save}/``.
    """

    def __init__(self, catalog: Catalog, mirror: FilesystemMirror, backup_root: Path) -> None:
        self._catalog = catalog
        self._mirror = mirror
        self._backup_root = Path(backup_root)

    @property
    def backup_root(self) -> Path:
        return self._backup_root

    # ── Queries ──

    def list_games(self) -> list[Game]:
        return self._catalog.get_all_games()

    def find_games(self, title: str) -> list[Game]:
        """Exact title matches if any, otherwise every game starting with *title*."""
        title = title.strip()
        exact = self._catalog.get_games_by_title(title)
        if exact:
            return exact
        return self._catalog.get_games_by_title_prefix(title)

    def get_save_details(self, game_id: int) -> list[SaveDetails]:
        """Every save of a game with its location and platform resolved."""
        game = self._catalog.get_game(game_id)
        return [
            SaveDetails(
                save=save,
                game=game,
                platform=self._catalog.get_platform(save.platform_id),
                location=self._catalog.get_location(save.location_id),
            )
            for save in self._catalog.find_saves(game_id=game_id)
        ]

    # ── Add ──

    def add_game_save(
        self,
        title: str,
        publisher: str,
        release_date: str,
        platform: str,
        location: str,
    ) -> AddResult:
        """Catalog a new game save and back up the files under *location*."""
        result = AddResult()
        title, publisher, release_date = title.strip(), publisher.strip(), release_date.strip()
        platform, location = platform.strip(), location.strip()

        if not title:
            result.fail(t("add.missing_title"))
            return result
        if not platform:
            result.fail(t("add.missing_platform"))
            return result
        if not location:
            result.fail(t("add.missing_location"))
            return result
        if not _valid_release_date(release_date):
            result.fail(t("common.invalid_date", value=release_date))
            return result
        if not Path(location).is_dir():
            result.fail(t("add.location_not_found", path=location))
            return result
        if _overlaps(Path(location), self._backup_root):
            result.fail(
                t("add.location_overlaps_backups", path=location, backups=self._backup_root)
            )
            return result

        try:
            result.game_id = self._catalog.insert_game(title, publisher, release_date)
            result.platform_id = self._catalog.insert_platform(platform)
            result.location_id = self._catalog.insert_location(location, "")
            result.save_id = self._catalog.insert_save(
                result.game_id, result.location_id, result.platform_id, ""
            )
        except CatalogError as e:
            logger.error(f"Failed to catalog '{title}': {e}")
            result.fail(t("add.catalog_failed", error=e))
            return result

        result.backup_dir = backup_dir(
            self._backup_root, result.game_id, result.platform_id, result.save_id
        )
        try:
            count = self._mirror.copy_tree(Path(location), result.backup_dir)
        except OSError as e:
            # Catalog rows stay; the save points at an incomplete backup
            logger.error(f"Failed to copy save files for '{title}': {e}")
            result.fail(t("add.copy_failed", error=e))
            return result

        logger.info(
            f"Backed up {count} file(s) for '{title}' ({platform}) to {result.backup_dir}"
        )
        return result

    # ── Restore ──

    def restore_game_save(self, game_id: int, prompter: RestorePrompter) -> RestoreResult:
        """Copy backed-up files back into each save's live location."""
        result = RestoreResult()
        try:
            game = self._catalog.get_game(game_id)
            details_list = self.get_save_details(game_id) if game is not None else []
        except CatalogError as e:
            logger.error(f"Failed to read saves of game {game_id}: {e}")
            result.fail(t("restore.catalog_failed", error=e))
            return result
        if game is None:
            result.fail(t("common.game_not_found"))
            return result

        if not details_list:
            result.warnings.append(t("restore.no_saves", title=game.title))

        for details in details_list:
            save = details.save
            source = backup_dir_for(self._backup_root, save)
            if details.location is None:
                result.warnings.append(t("restore.location_missing", save_id=save.id))
                result.skipped_saves.append(save.id)
                continue
            if not source.is_dir():
                logger.warning(f"No backup directory for save {save.id}: {source}")
                result.warnings.append(t("common.no_save_files", title=game.title))
                result.skipped_saves.append(save.id)
                continue

            mode = prompter.choose_mode(details)
            live = Path(details.location.location_path)
            try:
                if mode == RestoreMode.ALL:
                    self._mirror.copy_tree(source, live)
                    result.restored_files.extend(
                        str(live / rel) for rel in self._mirror.list_files(source)
                    )
                elif mode == RestoreMode.SELECT:
                    self._restore_selected(details, source, live, prompter, result)
                else:
                    result.skipped_saves.append(save.id)
            except OSError as e:
                logger.error(f"Restore of save {save.id} for '{game.title}' failed: {e}")
                result.fail(t("restore.copy_failed", error=e))
                return result

        logger.info(
            f"Restored {len(result.restored_files)} file(s) for '{game.title}', "
            f"{len(result.skipped_files)} skipped"
        )
        return result

    def _restore_selected(
        self,
        details: SaveDetails,
        source: Path,
        live: Path,
        prompter: RestorePrompter,
        result: RestoreResult,
    ) -> None:
        for rel in self._mirror.list_files(source):
            dest = live / rel
            if prompter.confirm_file(details, rel):
                self._mirror.copy_file(source / rel, dest)
                result.restored_files.append(str(dest))
                logger.debug(f"Restored {rel} -> {dest}")
            else:
                result.skipped_files.append(str(dest))

    # ── Edit ──

    def edit_game_save(
        self,
        game_id: int,
        title: str = "",
        publisher: str = "",
        release_date: str = "",
    ) -> EditResult:
        """Replace a game's details. Empty values keep the current ones."""
        result = EditResult()
        existing = self._catalog.get_game(game_id)
        if existing is None:
            result.fail(t("common.game_not_found"))
            return result

        release_date = release_date.strip()
        if not _valid_release_date(release_date):
            result.fail(t("common.invalid_date", value=release_date))
            result.game = existing
            return result

        updated = Game(
            id=existing.id,
            title=title.strip() or existing.title,
            publisher=publisher.strip() or existing.publisher,
            release_date=release_date or existing.release_date,
        )
        result.game = existing
        if updated == existing:
            logger.debug(f"No changes for game {game_id}")
            return result

        try:
            self._catalog.update_game(
                game_id, updated.title, updated.publisher, updated.release_date
            )
        except CatalogError as e:
            logger.error(f"Failed to update game {game_id}: {e}")
            result.fail(t("edit.update_failed", error=e))
            return result

        result.changed = True
        result.game = updated
        logger.info(f"Updated game {game_id}: {updated.title}")
        return result

    # ── Remove ──

    def remove_game_save(self, game_id: int) -> RemoveResult:
        """
        Remove a game, its saves, their locations and their backup directories.

        For each save the backup directory goes first, so a failed delete
        leaves that save's catalog rows in place for a retry. Platforms are
        kept; other games may share them. A location still referenced by
        another save is kept as well.
        """
        result = RemoveResult()
        game = self._catalog.get_game(game_id)
        if game is None:
            result.fail(t("common.game_not_found"))
            return result

        try:
            for save in self._catalog.find_saves(game_id=game_id):
                target = backup_dir_for(self._backup_root, save)
                if target.exists():
                    try:
                        self._mirror.delete_tree(target)
                    except OSError as e:
                        logger.error(f"Failed to delete {target}: {e}")
                        result.fail(t("remove.delete_failed", error=e))
                        return result
                    self._mirror.prune_empty_parents(target, self._backup_root)
                    result.deleted_dirs.append(str(target))
                    logger.info(f"Game save for '{game.title}' deleted")
                else:
                    logger.warning(f"No save files found for '{game.title}' (save {save.id})")
                    result.warnings.append(t("common.no_save_files", title=game.title))

                self._catalog.delete_save(save.id)
                result.removed_saves.append(save.id)
                if self._catalog.count_saves_for_location(save.location_id) == 0:
                    self._catalog.delete_location(save.location_id)
                    result.removed_locations.append(save.location_id)

            self._catalog.delete_game(game_id)
        except CatalogError as e:
            logger.error(f"Failed to remove '{game.title}' from catalog: {e}")
            result.fail(t("remove.catalog_failed", error=e))
            return result

        leftover = game_backup_dir(self._backup_root, game_id)
        if leftover.is_dir() and not any(leftover.iterdir()):
            try:
                leftover.rmdir()
            except OSError as e:
                logger.warning(f"Could not remove empty backup directory {leftover}: {e}")

        logger.info(f"'{game.title}' deleted")
        return result
