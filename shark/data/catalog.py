"""Catalog store: SQLite persistence for games, platforms, locations and saves."""

from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator

from loguru import logger

from shark.models.catalog import Game, Location, Platform, Save

_SCHEMA = """
CREATE TABLE IF NOT EXISTS Game (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    title TEXT NOT NULL,
    publisher TEXT NOT NULL DEFAULT '',
    release_date TEXT NOT NULL DEFAULT ''
);

CREATE TABLE IF NOT EXISTS Platform (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    platform_name TEXT NOT NULL UNIQUE
);

CREATE TABLE IF NOT EXISTS Location (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    location_path TEXT NOT NULL,
    description TEXT NOT NULL DEFAULT ''
);

CREATE TABLE IF NOT EXISTS Save (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    game_id INTEGER NOT NULL,
    location_id INTEGER NOT NULL,
    platform_id INTEGER NOT NULL,
    metadata TEXT NOT NULL DEFAULT ''
);

CREATE INDEX IF NOT EXISTS idx_save_game ON Save(game_id);
CREATE INDEX IF NOT EXISTS idx_save_location ON Save(location_id);
"""


class CatalogError(Exception):
    """A catalog read or write failed in the storage engine."""


class Catalog:
    """
    Relational catalog backed by a single SQLite file.

    Ids are assigned by SQLite (``AUTOINCREMENT``), so they only ever grow and
    a deleted save's id is never handed out again. Lookups return ``None``
    when nothing matches.
    """

    def __init__(self, db_path: Path | str) -> None:
        self._path = db_path
        if db_path != ":memory:":
            Path(db_path).parent.mkdir(parents=True, exist_ok=True)
        try:
            self._conn = sqlite3.connect(str(db_path))
            self._conn.row_factory = sqlite3.Row
            self._conn.executescript(_SCHEMA)
        except sqlite3.Error as e:
            raise CatalogError(f"Failed to open catalog {db_path}: {e}") from e
        logger.debug(f"Catalog opened: {db_path}")

    def close(self) -> None:
        self._conn.close()

    def __enter__(self) -> Catalog:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    @contextmanager
    def _transaction(self) -> Iterator[sqlite3.Connection]:
        """Commit on success, roll back and raise CatalogError on failure."""
        try:
            with self._conn:
                yield self._conn
        except sqlite3.Error as e:
            raise CatalogError(str(e)) from e

    def _query(self, sql: str, params: tuple[Any, ...] = ()) -> list[sqlite3.Row]:
        try:
            return self._conn.execute(sql, params).fetchall()
        except sqlite3.Error as e:
            raise CatalogError(str(e)) from e

    def _insert(self, sql: str, params: tuple[Any, ...]) -> int:
        # fetchall steps the statement to completion before the commit
        with self._transaction() as conn:
            rows = conn.execute(sql, params).fetchall()
        return int(rows[0][0])

    # ── Inserts ──

    def insert_game(self, title: str, publisher: str, release_date: str) -> int:
        """Insert a new game row. Never deduplicates."""
        game_id = self._insert(
            "INSERT INTO Game (title, publisher, release_date) VALUES (?, ?, ?) RETURNING id",
            (title, publisher, release_date),
        )
        logger.debug(f"Inserted game {game_id}: {title}")
        return game_id

    def insert_platform(self, name: str) -> int:
        """Return the id of platform *name*, inserting it if absent."""
        with self._transaction() as conn:
            conn.execute("INSERT OR IGNORE INTO Platform (platform_name) VALUES (?)", (name,))
            rows = conn.execute("SELECT id FROM Platform WHERE platform_name = ?", (name,)).fetchall()
        return int(rows[0][0])

    def insert_location(self, path: str, description: str = "") -> int:
        return self._insert(
            "INSERT INTO Location (location_path, description) VALUES (?, ?) RETURNING id",
            (path, description),
        )

    def insert_save(self, game_id: int, location_id: int, platform_id: int, metadata: str = "") -> int:
        """
        Insert a save linking existing game, location and platform rows.

        References are checked here rather than by SQLite foreign keys, so
        deleting a game or location never trips over its saves.
        """
        if self.get_game(game_id) is None:
            raise CatalogError(f"No game with id {game_id}")
        if self.get_location(location_id) is None:
            raise CatalogError(f"No location with id {location_id}")
        if self.get_platform(platform_id) is None:
            raise CatalogError(f"No platform with id {platform_id}")
        return self._insert(
            "INSERT INTO Save (game_id, location_id, platform_id, metadata) "
            "VALUES (?, ?, ?, ?) RETURNING id",
            (game_id, location_id, platform_id, metadata),
        )

    # ── Updates ──

    def update_game(self, game_id: int, title: str, publisher: str, release_date: str) -> bool:
        """Overwrite a game's fields. Returns False if no such game exists."""
        with self._transaction() as conn:
            cursor = conn.execute(
                "UPDATE Game SET title = ?, publisher = ?, release_date = ? WHERE id = ?",
                (title, publisher, release_date, game_id),
            )
        return cursor.rowcount > 0

    # ── Point lookups ──

    def get_game(self, game_id: int) -> Game | None:
        rows = self._query("SELECT * FROM Game WHERE id = ?", (game_id,))
        return Game(**dict(rows[0])) if rows else None

    def get_platform(self, platform_id: int) -> Platform | None:
        rows = self._query("SELECT * FROM Platform WHERE id = ?", (platform_id,))
        return Platform(**dict(rows[0])) if rows else None

    def get_platform_by_name(self, name: str) -> Platform | None:
        rows = self._query("SELECT * FROM Platform WHERE platform_name = ?", (name,))
        return Platform(**dict(rows[0])) if rows else None

    def get_location(self, location_id: int) -> Location | None:
        rows = self._query("SELECT * FROM Location WHERE id = ?", (location_id,))
        return Location(**dict(rows[0])) if rows else None

    def get_save(self, save_id: int) -> Save | None:
        rows = self._query("SELECT * FROM Save WHERE id = ?", (save_id,))
        return Save(**dict(rows[0])) if rows else None

    # ── Title queries ──

    def get_games_by_title(self, title: str) -> list[Game]:
        """Games whose title equals *title* exactly."""
        rows = self._query("SELECT * FROM Game WHERE title = ? ORDER BY id", (title,))
        return [Game(**dict(r)) for r in rows]

    def get_games_by_title_prefix(self, prefix: str) -> list[Game]:
        """Games whose title starts with *prefix* (case-sensitive)."""
        # LIKE is case-insensitive for ASCII, so compare the leading substring instead
        rows = self._query(
            "SELECT * FROM Game WHERE substr(title, 1, length(?)) = ? ORDER BY id",
            (prefix, prefix),
        )
        return [Game(**dict(r)) for r in rows]

    # ── Bulk lookups ──

    def get_all_games(self) -> list[Game]:
        return [Game(**dict(r)) for r in self._query("SELECT * FROM Game ORDER BY id")]

    def get_all_platforms(self) -> list[Platform]:
        return [Platform(**dict(r)) for r in self._query("SELECT * FROM Platform ORDER BY id")]

    def get_all_locations(self) -> list[Location]:
        return [Location(**dict(r)) for r in self._query("SELECT * FROM Location ORDER BY id")]

    def get_all_saves(self) -> list[Save]:
        return self.find_saves()

    def find_saves(
        self,
        game_id: int | None = None,
        platform_id: int | None = None,
        location_id: int | None = None,
    ) -> list[Save]:
        """Saves matching every given filter; all saves when none is given."""
        clauses: list[str] = []
        params: list[int] = []
        for column, value in (
            ("game_id", game_id),
            ("platform_id", platform_id),
            ("location_id", location_id),
        ):
            if value is not None:
                clauses.append(f"{column} = ?")
                params.append(value)
        where = f" WHERE {' AND '.join(clauses)}" if clauses else ""
        rows = self._query(f"SELECT * FROM Save{where} ORDER BY id", tuple(params))
        return [Save(**dict(r)) for r in rows]

    def count_saves_for_location(self, location_id: int) -> int:
        rows = self._query("SELECT COUNT(*) FROM Save WHERE location_id = ?", (location_id,))
        return int(rows[0][0])

    # ── Deletes ──

    def delete_game(self, game_id: int) -> None:
        with self._transaction() as conn:
            conn.execute("DELETE FROM Game WHERE id = ?", (game_id,))

    def delete_save(self, save_id: int) -> None:
        with self._transaction() as conn:
            conn.execute("DELETE FROM Save WHERE id = ?", (save_id,))

    def delete_location(self, location_id: int) -> None:
        with self._transaction() as conn:
            conn.execute("DELETE FROM Location WHERE id = ?", (location_id,))
