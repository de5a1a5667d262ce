"""Path helpers for artifacts rooted under the binary output directory."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Final

WINDOWS_ABSOLUTE_PATTERN: Final[re.Pattern[str]] = re.compile(r"^[a-zA-Z]:[\\/]")
CLASS_FILE_SUFFIX: Final[str] = ".class"


class ArtifactPathError(Exception):
    """Raised when an artifact path would land outside the output directory."""

    def __init__(self, reason: str, hint: str) -> None:
        super().__init__(reason)
        self.reason = reason
        self.hint = hint


def resolve_output_path(output_root: Path, relative_path: str) -> Path:
    """Resolve an output-relative artifact path under ``output_root``."""
    normalized = relative_path.replace("\\", "/").strip()
    if not normalized:
        raise ArtifactPathError(
            reason="Artifact path is empty.",
            hint="Output files must declare a path such as 'pkg/Foo.class'.",
        )
    if normalized.startswith("/") or WINDOWS_ABSOLUTE_PATTERN.match(normalized):
        raise ArtifactPathError(
            reason="Artifact path must be relative to the output directory.",
            hint="Drop the leading root and use a path such as 'pkg/Foo.class'.",
        )
    parts = [part for part in normalized.split("/") if part not in ("", ".")]
    if any(part == ".." for part in parts):
        raise ArtifactPathError(
            reason="Path traversal is blocked.",
            hint="Remove '..' segments from the output file path.",
        )
    if not parts:
        raise ArtifactPathError(
            reason="Artifact path names the output directory itself.",
            hint="Output files must declare a file path such as 'pkg/Foo.class'.",
        )
    return output_root.joinpath(*parts)


def class_file_path(output_root: Path, internal_name: str) -> Path:
    """Return ``<output_root>/<internal_name>.class``."""
    return resolve_output_path(output_root, f"{internal_name}{CLASS_FILE_SUFFIX}")


def project_key(project_root: Path, path: Path) -> str:
    """Return the project-relative POSIX key for a location under the project."""
    return path.relative_to(project_root).as_posix()


def normalize_project_key(project_root: Path, raw: str | Path) -> str | None:
    """Normalize a caller-supplied path to its project-relative key.

    Relative inputs are taken as project-relative. Returns None for
    locations outside the project.
    """
    candidate = Path(str(raw).replace("\\", "/"))
    if not candidate.is_absolute():
        candidate = project_root / candidate
    parts: list[str] = []
    for part in candidate.parts:
        if part == "..":
            if parts:
                parts.pop()
            continue
        if part == ".":
            continue
        parts.append(part)
    normalized = Path(*parts) if parts else candidate
    if not normalized.is_relative_to(project_root):
        return None
    return project_key(project_root, normalized)
