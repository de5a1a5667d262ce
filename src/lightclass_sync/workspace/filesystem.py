"""File system capability used by the tracker."""

from __future__ import annotations

import os
import time
from pathlib import Path
from typing import Protocol


class FileSystem(Protocol):
    """File operations the tracker performs below the output directory."""

    def exists(self, path: Path) -> bool:
        """Return True when a file or directory exists."""

    def create_if_absent(self, path: Path) -> bool:
        """Create an empty file; return False when it already existed."""

    def touch(self, path: Path) -> None:
        """Advance the modification time without changing content."""

    def create_directories(self, path: Path) -> tuple[Path, ...]:
        """Create ``path`` and any missing ancestors; return what was created."""

    def list_files(self, root: Path) -> list[Path]:
        """Return every regular file below ``root``."""

    def delete(self, path: Path) -> None:
        """Delete one file."""

    def remove_dir(self, path: Path) -> None:
        """Remove one empty directory."""

    def remove_empty_dirs(self, root: Path) -> tuple[Path, ...]:
        """Remove empty directories below ``root`` (never ``root`` itself)."""


class LocalFileSystem:
    """FileSystem implementation backed by the local disk."""

    def exists(self, path: Path) -> bool:
        return path.exists()

    def create_if_absent(self, path: Path) -> bool:
        try:
            with path.open("xb"):
                pass
        except FileExistsError:
            return False
        return True

    def touch(self, path: Path) -> None:
        previous = path.stat().st_mtime_ns
        # strictly increasing, even on coarse clocks
        stamp = max(time.time_ns(), previous + 1)
        os.utime(path, ns=(stamp, stamp))

    def create_directories(self, path: Path) -> tuple[Path, ...]:
        missing: list[Path] = []
        current = path
        while not current.exists():
            missing.append(current)
            if current.parent == current:
                break
            current = current.parent
        created: list[Path] = []
        for directory in reversed(missing):
            directory.mkdir(exist_ok=True)
            created.append(directory)
        return tuple(created)

    def list_files(self, root: Path) -> list[Path]:
        files: list[Path] = []
        if not root.is_dir():
            return files
        stack: list[Path] = [root]
        while stack:
            current = stack.pop()
            with os.scandir(current) as entries:
                ordered_entries = sorted(entries, key=lambda item: item.name)
            for entry in reversed(ordered_entries):
                if entry.is_dir(follow_symlinks=False):
                    stack.append(Path(entry.path))
                    continue
                if entry.is_file(follow_symlinks=False):
                    files.append(Path(entry.path))
        files.sort()
        return files

    def delete(self, path: Path) -> None:
        path.unlink()

    def remove_dir(self, path: Path) -> None:
        path.rmdir()

    def remove_empty_dirs(self, root: Path) -> tuple[Path, ...]:
        if not root.is_dir():
            return ()
        directories = sorted(
            (Path(dirpath) for dirpath, _, _ in os.walk(root)),
            key=lambda item: len(item.parts),
            reverse=True,
        )
        removed: list[Path] = []
        for directory in directories:
            if directory == root:
                continue
            if any(directory.iterdir()):
                continue
            self.remove_dir(directory)
            removed.append(directory)
        return tuple(sorted(removed))
