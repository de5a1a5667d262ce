"""Deterministic discovery of source files below configured source roots."""

from __future__ import annotations

import fnmatch
import os
from pathlib import Path

from lightclass_sync.config import SourcesConfig


def discover_source_files(project_root: Path, config: SourcesConfig) -> list[str]:
    """Return project-relative POSIX paths of every trackable source file."""
    root = project_root.resolve()
    include_extensions = set(config.include_extensions)
    excluded_dir_names = _excluded_dir_names(config.exclude_globs)
    found: set[str] = set()
    for source_root in config.roots:
        start = root / source_root
        if not start.is_dir():
            continue
        stack: list[Path] = [start]
        while stack:
            current = stack.pop()
            try:
                with os.scandir(current) as entries:
                    ordered_entries = sorted(entries, key=lambda item: item.name)
            except OSError:
                continue
            for entry in reversed(ordered_entries):
                full_path = Path(entry.path)
                relative = full_path.relative_to(root).as_posix()
                if entry.is_dir(follow_symlinks=False):
                    if entry.name in excluded_dir_names and should_exclude(
                        relative, config.exclude_globs
                    ):
                        continue
                    stack.append(full_path)
                    continue
                if not entry.is_file(follow_symlinks=False):
                    continue
                if should_exclude(relative, config.exclude_globs):
                    continue
                if Path(relative).suffix.lower() not in include_extensions:
                    continue
                found.add(relative)
    return sorted(found)


def is_source_path(relative_path: str, config: SourcesConfig) -> bool:
    """Return True when a project-relative path belongs to a configured source root."""
    if Path(relative_path).suffix.lower() not in config.include_extensions:
        return False
    if should_exclude(relative_path, config.exclude_globs):
        return False
    return any(
        relative_path.startswith(f"{source_root}/") for source_root in config.roots
    )


def should_exclude(relative_path: str, exclude_globs: tuple[str, ...]) -> bool:
    """Return True when a path matches configured ignore globs."""
    anchored = f"/{relative_path}"
    return any(
        fnmatch.fnmatch(relative_path, pattern) or fnmatch.fnmatch(anchored, pattern)
        for pattern in exclude_globs
    )


def _excluded_dir_names(exclude_globs: tuple[str, ...]) -> set[str]:
    """Extract directory-name prunes from **/name/** glob patterns."""
    output: set[str] = set()
    for pattern in exclude_globs:
        if not pattern.startswith("**/") or not pattern.endswith("/**"):
            continue
        name = pattern[3:-3].strip("/")
        if not name or any(char in name for char in "*?[]{}"):
            continue
        output.add(name)
    return output
