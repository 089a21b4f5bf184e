"""Result models returned by the game-save workflows."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from pathlib import Path

from shark.models.catalog import Game


class RestoreMode(StrEnum):
    """Per-save restore decision made by the user."""

    ALL = "all"
    SELECT = "select"  # ask for each file
    NONE = "none"


@dataclass
class OperationResult:
    """Common outcome fields. ``error`` names the step that failed."""

    success: bool = True
    error: str = ""
    warnings: list[str] = field(default_factory=list)

    def fail(self, error: str) -> None:
        self.success = False
        self.error = error


@dataclass
class AddResult(OperationResult):
    """Result of adding a game save."""

    game_id: int | None = None
    platform_id: int | None = None
    location_id: int | None = None
    save_id: int | None = None
    backup_dir: Path | None = None


@dataclass
class RestoreResult(OperationResult):
    """Result of a restore operation."""

    restored_files: list[str] = field(default_factory=list)
    skipped_files: list[str] = field(default_factory=list)
    skipped_saves: list[int] = field(default_factory=list)


@dataclass
class EditResult(OperationResult):
    """Result of editing a game's details."""

    changed: bool = False
    game: Game | None = None


@dataclass
class RemoveResult(OperationResult):
    """Result of removing a game and its saves."""

    removed_saves: list[int] = field(default_factory=list)
    removed_locations: list[int] = field(default_factory=list)
    deleted_dirs: list[str] = field(default_factory=list)
