"""Interactive terminal front-end for the game save manager."""

from __future__ import annotations

from pathlib import Path
from typing import Callable

from loguru import logger

from shark.context import AppContext
from shark.data.catalog import CatalogError
from shark.i18n import t
from shark.models.catalog import Game, SaveDetails
from shark.models.results import OperationResult, RestoreMode

InputFn = Callable[[str], str]
OutputFn = Callable[[str], None]


class ConsolePrompter:
    """Asks restore questions on the terminal. Implements RestorePrompter."""

    def __init__(self, read: InputFn, write: OutputFn) -> None:
        self._read = read
        self._write = write

    def choose_mode(self, details: SaveDetails) -> RestoreMode:
        game = details.game
        if game is not None:
            self._write(
                t(
                    "console.game_info",
                    title=game.title,
                    publisher=game.publisher,
                    release_date=game.release_date,
                )
            )
        self._write(t("console.save_info", platform=details.platform_name, path=details.location_path))
        answer = self._read(t("console.restore_save")).strip().lower()
        if answer in ("", "y"):
            return RestoreMode.SELECT
        if answer == "a":
            return RestoreMode.ALL
        return RestoreMode.NONE

    def confirm_file(self, details: SaveDetails, relative_path: Path) -> bool:
        answer = self._read(t("console.restore_file", name=relative_path.as_posix())).strip().lower()
        return answer in ("", "y")


class Console:
    """
    Menu loop mirroring the add / restore / edit / remove buttons of the
    desktop shell. Holds no logic beyond collecting input and printing results.
    """

    def __init__(
        self,
        ctx: AppContext,
        read: InputFn = input,
        write: OutputFn = print,
    ) -> None:
        self._ctx = ctx
        self._saves = ctx.game_saves
        self._read = read
        self._write = write
        self._actions: dict[str, Callable[[], None]] = {
            "l": self.list_games,
            "a": self.add,
            "r": self.restore,
            "e": self.edit,
            "d": self.remove,
        }

    def run(self) -> int:
        self._write(t("console.title"))
        while True:
            try:
                choice = self._read(f"{t('console.menu')}\n> ").strip().lower()
            except EOFError:
                return 0
            if choice in ("q", "quit"):
                return 0
            action = self._actions.get(choice[:1])
            if action is None:
                self._write(t("console.invalid_choice"))
                continue
            try:
                action()
            except CatalogError as e:
                logger.error(f"Catalog error during '{choice}': {e}")
                self._write(t("console.error", message=e))

    # ── Helpers ──

    def _report(self, result: OperationResult, done: str) -> None:
        for warning in result.warnings:
            self._write(t("console.warning", message=warning))
        if result.success:
            self._write(done)
        else:
            self._write(t("console.error", message=result.error))

    def _select_game(self) -> Game | None:
        """Ask for a title and let the user pick among the matching games."""
        games = self._saves.find_games(self._read(t("console.prompt_title")))
        if not games:
            self._write(t("console.no_match"))
            return None
        if len(games) == 1:
            return games[0]

        self._write(t("console.select_game"))
        for game in games:
            self._write(f"{game.id} - {game.title}")
        choice = self._read("> ").strip()
        by_id = {str(g.id): g for g in games}
        if choice not in by_id:
            self._write(t("console.invalid_choice"))
            return None
        return by_id[choice]

    # ── Actions ──

    def list_games(self) -> None:
        games = self._saves.list_games()
        if not games:
            self._write(t("console.no_games"))
            return
        self._write(f"{'Game ID':<8} {'Publisher':<24} Title")
        for game in games:
            self._write(f"{game.id:<8} {game.publisher[:24]:<24} {game.title}")

    def add(self) -> None:
        title = self._read(t("console.prompt_title"))
        publisher = self._read(t("console.prompt_publisher"))
        release_date = self._read(t("console.prompt_release_date"))
        platform = self._read(t("console.prompt_platform"))
        location = self._read(t("console.prompt_location"))

        result = self._saves.add_game_save(title, publisher, release_date, platform, location)
        self._report(result, t("add.done", title=title.strip(), path=result.backup_dir))

    def restore(self) -> None:
        game = self._select_game()
        if game is None:
            return
        prompter = ConsolePrompter(self._read, self._write)
        result = self._saves.restore_game_save(game.id, prompter)
        self._report(
            result,
            t(
                "restore.done",
                restored=len(result.restored_files),
                skipped=len(result.skipped_files),
            ),
        )

    def edit(self) -> None:
        game = self._select_game()
        if game is None:
            return
        self._write(
            t(
                "console.game_info",
                title=game.title,
                publisher=game.publisher,
                release_date=game.release_date,
            )
        )
        new_title = self._read(t("console.prompt_new_title"))
        new_publisher = self._read(t("console.prompt_new_publisher"))
        new_release_date = self._read(t("console.prompt_new_release_date"))

        result = self._saves.edit_game_save(game.id, new_title, new_publisher, new_release_date)
        self._report(result, t("edit.done") if result.changed else t("edit.unchanged"))

    def remove(self) -> None:
        game = self._select_game()
        if game is None:
            return
        if self._ctx.config.confirm_remove:
            answer = self._read(t("console.confirm_remove", title=game.title)).strip().lower()
            if answer != "y":
                self._write(t("console.cancelled"))
                return
        result = self._saves.remove_game_save(game.id)
        self._report(result, t("remove.done", title=game.title))
