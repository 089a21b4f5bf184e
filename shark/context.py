"""Application context: service container for dependency injection."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from shark.config import Config
    from shark.core.game_saves import GameSaveManager
    from shark.core.mirror import FilesystemMirror
    from shark.data.catalog import Catalog


@dataclass
class AppContext:
    """
    Central service container.

    The presentation layer receives this at construction time and talks to
    the core only through ``game_saves``.
    """

    config: Config
    catalog: Catalog
    mirror: FilesystemMirror
    game_saves: GameSaveManager

    def close(self) -> None:
        self.catalog.close()
