"""Catalog record models: one dataclass per table row."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Game:
    """A game title as entered by the user."""

    id: int
    title: str
    publisher: str = ""
    release_date: str = ""  # ISO date (YYYY-MM-DD) or empty


@dataclass(frozen=True)
class Platform:
    """A platform a game runs on. Names are unique."""

    id: int
    platform_name: str


@dataclass(frozen=True)
class Location:
    """A live save directory on the local filesystem."""

    id: int
    location_path: str
    description: str = ""


@dataclass(frozen=True)
class Save:
    """Join row binding one game + platform + location to one backup."""

    id: int
    game_id: int
    location_id: int
    platform_id: int
    metadata: str = ""


@dataclass(frozen=True)
class SaveDetails:
    """A Save with its referenced rows resolved for display and restore."""

    save: Save
    game: Game | None
    platform: Platform | None
    location: Location | None

    @property
    def platform_name(self) -> str:
        return self.platform.platform_name if self.platform else ""

    @property
    def location_path(self) -> str:
        return self.location.location_path if self.location else ""
