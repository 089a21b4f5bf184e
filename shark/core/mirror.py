"""Filesystem mirror: recursive copy and delete of save directory trees.

Only file *content* is carried over; permissions and timestamps are whatever
the destination filesystem assigns. Symbolic links are followed. Sockets,
FIFOs and device files are skipped.
"""

from __future__ import annotations

import shutil
from pathlib import Path

from loguru import logger


class MirrorError(OSError):
    """A copy or delete step failed. Work done before the failure stays on disk."""


class FilesystemMirror:
    """Synchronous directory-tree copy/delete used by backup and restore."""

    def copy_tree(self, source: Path, destination: Path) -> int:
        """
        Mirror every file and subdirectory under *source* into *destination*.

        *destination* and its missing parents are created. Existing files are
        overwritten. Returns the number of files copied. A *destination* equal to
        *source* or inside it is refused with MirrorError before anything is
        written.
        """
        source = Path(source)
        destination = Path(destination)
        if not source.exists():
            raise MirrorError(f"Source directory not found: {source}")
        if not source.is_dir():
            raise MirrorError(f"Source is not a directory: {source}")
        resolved_source = source.resolve()
        resolved_destination = destination.resolve()
        if resolved_destination == resolved_source or resolved_source in resolved_destination.parents:
            # copying into itself would keep walking its own output
            raise MirrorError(f"Destination {destination} lies inside source {source}")

        count = self._copy_dir(source, destination)
        logger.debug(f"Copied {count} file(s): {source} -> {destination}")
        return count

    def _copy_dir(self, source: Path, destination: Path) -> int:
        try:
            destination.mkdir(parents=True, exist_ok=True)
            entries = sorted(source.iterdir())
        except OSError as e:
            raise MirrorError(f"Failed to read {source}: {e}") from e

        count = 0
        for entry in entries:
            target = destination / entry.name
            if entry.is_dir():
                count += self._copy_dir(entry, target)
            elif entry.is_file():
                self._copy_content(entry, target)
                count += 1
            else:
                logger.debug(f"Skipping special file: {entry}")
        return count

    def copy_file(self, source: Path, destination: Path) -> None:
        """Copy one file's content, creating the destination's parent directories."""
        source = Path(source)
        destination = Path(destination)
        if not source.is_file():
            raise MirrorError(f"Source file not found: {source}")
        try:
            destination.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise MirrorError(f"Failed to create {destination.parent}: {e}") from e
        self._copy_content(source, destination)

    @staticmethod
    def _copy_content(source: Path, destination: Path) -> None:
        try:
            shutil.copyfile(source, destination)
        except OSError as e:
            raise MirrorError(f"Failed to copy {source} -> {destination}: {e}") from e

    def delete_tree(self, path: Path) -> None:
        """
        Remove *path* together with every file and subdirectory under it.

        Stops at the first entry that cannot be removed.
        """
        path = Path(path)
        if not path.exists():
            raise MirrorError(f"Directory not found: {path}")
        try:
            if path.is_dir() and not path.is_symlink():
                shutil.rmtree(path)
            else:
                path.unlink()
        except OSError as e:
            raise MirrorError(f"Failed to delete {path}: {e}") from e
        logger.debug(f"Deleted tree: {path}")

    @staticmethod
    def list_files(root: Path) -> list[Path]:
        """Every regular file under *root*, relative to it, sorted."""
        root = Path(root)
        if not root.is_dir():
            return []
        return sorted(p.relative_to(root) for p in root.rglob("*") if p.is_file())

    @staticmethod
    def prune_empty_parents(path: Path, stop: Path) -> None:
        """Remove empty ancestors of *path* up to, not including, *stop*."""
        path = Path(path)
        stop = Path(stop)
        parent = path.parent
        while parent != stop and stop in parent.parents:
            try:
                parent.rmdir()
            except OSError:
                break  # not empty or not removable
            parent = parent.parent
