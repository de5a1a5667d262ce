"""Handle for one generated light-class file."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from lightclass_sync.workspace.filesystem import FileSystem


@dataclass(slots=True, frozen=True)
class LightClassFile:
    """A light-class artifact identified by its project-relative path."""

    key: str
    location: Path
    fs: FileSystem

    def exists(self) -> bool:
        return self.fs.exists(self.location)

    def ensure_parent_dirs(self) -> tuple[Path, ...]:
        """Create missing parent directories, outermost first."""
        return self.fs.create_directories(self.location.parent)

    def create_if_absent(self) -> bool:
        """Create the empty stub file; True when it did not exist before."""
        return self.fs.create_if_absent(self.location)

    def touch(self) -> None:
        """Mark the artifact modified so downstream consumers reload it."""
        self.fs.touch(self.location)
