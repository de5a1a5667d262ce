"""Registry of tracked project source files and their parsed units."""

from __future__ import annotations

import hashlib
import threading
from dataclasses import dataclass
from pathlib import Path

from lightclass_sync.adapters import AdapterRegistry, ParsedUnit, build_adapter_registry
from lightclass_sync.config import SourcesConfig
from lightclass_sync.workspace.discovery import discover_source_files, is_source_path
from lightclass_sync.workspace.paths import normalize_project_key


@dataclass(slots=True, frozen=True)
class TrackedFile:
    """Project identity of a source file."""

    path: str
    location: Path


class SourceRegistryError(Exception):
    """Raised when the tracked file set is changed inconsistently."""


@dataclass(slots=True)
class _CachedUnit:
    size: int
    mtime_ns: int
    unit: ParsedUnit


class SourceRegistry:
    """Tracks the project's source files and caches their parsed form.

    The file set is discovered lazily on first use and then maintained
    through ``add_file``/``remove_file`` as the host reports changes.
    """

    def __init__(
        self,
        project_root: Path,
        config: SourcesConfig,
        adapters: AdapterRegistry | None = None,
    ) -> None:
        self._project_root = project_root.resolve()
        self._config = config
        self._adapters = adapters or build_adapter_registry()
        self._lock = threading.RLock()
        self._files: set[str] | None = None
        self._cache: dict[str, _CachedUnit] = {}

    @property
    def project_root(self) -> Path:
        return self._project_root

    def files(self) -> tuple[TrackedFile, ...]:
        """Return tracked files in path order."""
        with self._lock:
            return tuple(self._tracked(path) for path in sorted(self._known()))

    def contains(self, tracked: TrackedFile) -> bool:
        with self._lock:
            return tracked.path in self._known()

    def add_file(self, tracked: TrackedFile) -> None:
        """Start tracking a newly created source file."""
        with self._lock:
            known = self._known()
            if tracked.path in known:
                raise SourceRegistryError(f"Source file is already tracked: {tracked.path}")
            if not is_source_path(tracked.path, self._config):
                raise SourceRegistryError(f"Not a source file of this project: {tracked.path}")
            known.add(tracked.path)

    def remove_file(self, tracked: TrackedFile) -> None:
        """Stop tracking a deleted source file and drop its parsed unit."""
        with self._lock:
            known = self._known()
            if tracked.path not in known:
                raise SourceRegistryError(f"Source file is not tracked: {tracked.path}")
            known.discard(tracked.path)
            self._cache.pop(tracked.path, None)

    def track_if_present(self, tracked: TrackedFile) -> bool:
        """Start tracking a source file created since discovery.

        Returns True when the file is tracked afterwards.
        """
        with self._lock:
            known = self._known()
            if tracked.path in known:
                return True
            if not is_source_path(tracked.path, self._config) or not tracked.location.is_file():
                return False
            known.add(tracked.path)
            return True

    def reset(self) -> None:
        """Forget the file set and parse cache; the next access rediscovers."""
        with self._lock:
            self._files = None
            self._cache.clear()

    def resolve_tracked_file(self, raw: str | Path) -> TrackedFile | None:
        """Map a raw file system location back to a tracked-file identity.

        Resolution is path based: a deleted file still resolves as long as
        its location lies in a source root, so staleness checks can see it.
        """
        key = normalize_project_key(self._project_root, raw)
        if key is None or not is_source_path(key, self._config):
            return None
        return self._tracked(key)

    def parse(self, tracked: TrackedFile) -> ParsedUnit | None:
        """Return the parsed unit, or None for untracked or missing files."""
        with self._lock:
            if tracked.path not in self._known():
                return None
            try:
                stat = tracked.location.stat()
            except FileNotFoundError:
                self._cache.pop(tracked.path, None)
                return None
            cached = self._cache.get(tracked.path)
            if (
                cached is not None
                and cached.size == stat.st_size
                and cached.mtime_ns == stat.st_mtime_ns
            ):
                return cached.unit
            text = tracked.location.read_text(encoding="utf-8", errors="replace")
            unit = self._parse_text(tracked, text)
            self._cache[tracked.path] = _CachedUnit(
                size=stat.st_size, mtime_ns=stat.st_mtime_ns, unit=unit
            )
            return unit

    def commit_text(self, tracked: TrackedFile, text: str) -> ParsedUnit:
        """Reparse a tracked file from unsaved editor text."""
        with self._lock:
            if tracked.path not in self._known():
                raise SourceRegistryError(f"Source file is not tracked: {tracked.path}")
            normalized = normalize_line_separators(text)
            cached = self._cache.get(tracked.path)
            content_hash = hashlib.sha256(normalized.encode("utf-8")).hexdigest()
            if cached is not None and cached.unit.content_hash == content_hash:
                return cached.unit
            unit = self._adapters.select(tracked.path).parse(tracked.path, normalized)
            try:
                stat = tracked.location.stat()
                size, mtime_ns = stat.st_size, stat.st_mtime_ns
            except FileNotFoundError:
                size, mtime_ns = -1, -1
            self._cache[tracked.path] = _CachedUnit(size=size, mtime_ns=mtime_ns, unit=unit)
            return unit

    def _parse_text(self, tracked: TrackedFile, text: str) -> ParsedUnit:
        adapter = self._adapters.select(tracked.path)
        return adapter.parse(tracked.path, normalize_line_separators(text))

    def _known(self) -> set[str]:
        if self._files is None:
            self._files = set(discover_source_files(self._project_root, self._config))
        return self._files

    def _tracked(self, path: str) -> TrackedFile:
        return TrackedFile(path=path, location=self._project_root / path)


def normalize_line_separators(text: str) -> str:
    """Convert CRLF and lone CR line endings to LF."""
    return text.replace("\r\n", "\n").replace("\r", "\n")
