"""Tests for the FilesystemMirror."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from shark.core.mirror import FilesystemMirror, MirrorError


def _snapshot(root: Path) -> dict[str, bytes | None]:
    """Map every entry under root to its content (None for directories)."""
    result: dict[str, bytes | None] = {}
    for dirpath, dirnames, filenames in os.walk(root):
        base = Path(dirpath)
        for name in dirnames:
            result[(base / name).relative_to(root).as_posix()] = None
        for name in filenames:
            result[(base / name).relative_to(root).as_posix()] = (base / name).read_bytes()
    return result


@pytest.fixture
def mirror() -> FilesystemMirror:
    return FilesystemMirror()


@pytest.fixture
def save_tree(tmp_path: Path) -> Path:
    """A live save directory with nested and empty subdirectories."""
    root = tmp_path / "live"
    (root / "slot1" / "deep").mkdir(parents=True)
    (root / "empty").mkdir()
    (root / "system.dat").write_bytes(b"\x00\x01\x02system")
    (root / "slot1" / "save.sav").write_bytes(b"slot one data")
    (root / "slot1" / "deep" / "extra.bin").write_bytes(os.urandom(4096))
    return root


class TestCopyTree:
    def test_round_trip_fidelity(self, mirror: FilesystemMirror, save_tree: Path, tmp_path: Path) -> None:
        dest = tmp_path / "backups" / "1" / "1" / "1"
        mirror.copy_tree(save_tree, dest)
        assert _snapshot(dest) == _snapshot(save_tree)

    def test_empty_subdirectory_reproduced(self, mirror: FilesystemMirror, save_tree: Path, tmp_path: Path) -> None:
        dest = tmp_path / "out"
        mirror.copy_tree(save_tree, dest)
        assert (dest / "empty").is_dir()
        assert not any((dest / "empty").iterdir())

    def test_returns_file_count(self, mirror: FilesystemMirror, save_tree: Path, tmp_path: Path) -> None:
        assert mirror.copy_tree(save_tree, tmp_path / "out") == 3

    def test_overwrites_existing_files(self, mirror: FilesystemMirror, save_tree: Path, tmp_path: Path) -> None:
        dest = tmp_path / "out"
        dest.mkdir()
        (dest / "system.dat").write_bytes(b"stale")
        (dest / "keep.txt").write_text("untouched")
        mirror.copy_tree(save_tree, dest)
        assert (dest / "system.dat").read_bytes() == b"\x00\x01\x02system"
        assert (dest / "keep.txt").read_text() == "untouched"

    def test_missing_source_raises(self, mirror: FilesystemMirror, tmp_path: Path) -> None:
        with pytest.raises(MirrorError):
            mirror.copy_tree(tmp_path / "nope", tmp_path / "out")
        assert not (tmp_path / "out").exists()

    def test_source_file_raises(self, mirror: FilesystemMirror, tmp_path: Path) -> None:
        file = tmp_path / "file.txt"
        file.write_text("x")
        with pytest.raises(OSError):
            mirror.copy_tree(file, tmp_path / "out")

    def test_destination_inside_source_refused(
        self, mirror: FilesystemMirror, save_tree: Path
    ) -> None:
        before = _snapshot(save_tree)
        with pytest.raises(MirrorError):
            mirror.copy_tree(save_tree, save_tree / "backups" / "1" / "1" / "1")
        assert _snapshot(save_tree) == before

    def test_destination_equal_to_source_refused(
        self, mirror: FilesystemMirror, save_tree: Path
    ) -> None:
        with pytest.raises(MirrorError):
            mirror.copy_tree(save_tree, save_tree / "slot1" / "..")

    def test_destination_beside_source_allowed(
        self, mirror: FilesystemMirror, save_tree: Path, tmp_path: Path
    ) -> None:
        # shares a name prefix with the source but is not under it
        assert mirror.copy_tree(save_tree, tmp_path / "live-copy") == 3


class TestDeleteTree:
    def test_removes_path_and_contents(self, mirror: FilesystemMirror, save_tree: Path) -> None:
        mirror.delete_tree(save_tree)
        assert not save_tree.exists()

    def test_missing_path_raises(self, mirror: FilesystemMirror, tmp_path: Path) -> None:
        with pytest.raises(MirrorError):
            mirror.delete_tree(tmp_path / "missing")


class TestHelpers:
    def test_copy_file_creates_parents(self, mirror: FilesystemMirror, save_tree: Path, tmp_path: Path) -> None:
        dest = tmp_path / "a" / "b" / "save.sav"
        mirror.copy_file(save_tree / "slot1" / "save.sav", dest)
        assert dest.read_bytes() == b"slot one data"

    def test_list_files_relative_and_sorted(self, mirror: FilesystemMirror, save_tree: Path) -> None:
        files = [p.as_posix() for p in mirror.list_files(save_tree)]
        assert files == ["slot1/deep/extra.bin", "slot1/save.sav", "system.dat"]

    def test_list_files_missing_root(self, mirror: FilesystemMirror, tmp_path: Path) -> None:
        assert mirror.list_files(tmp_path / "missing") == []

    def test_prune_empty_parents_stops_at_root(self, mirror: FilesystemMirror, tmp_path: Path) -> None:
        root = tmp_path / "backups"
        leaf = root / "1" / "2" / "3"
        leaf.mkdir(parents=True)
        leaf.rmdir()
        mirror.prune_empty_parents(leaf, root)
        assert root.is_dir()
        assert not (root / "1").exists()

    def test_prune_keeps_non_empty_parent(self, mirror: FilesystemMirror, tmp_path: Path) -> None:
        root = tmp_path / "backups"
        leaf = root / "1" / "2" / "3"
        leaf.mkdir(parents=True)
        (root / "1" / "2" / "4").mkdir()
        leaf.rmdir()
        mirror.prune_empty_parents(leaf, root)
        assert (root / "1" / "2" / "4").is_dir()
