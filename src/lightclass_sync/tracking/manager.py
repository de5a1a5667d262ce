"""Per-project entry point tying the table, updaters and sweeper together."""

from __future__ import annotations

import threading
from collections.abc import Callable, Iterable
from pathlib import Path

from lightclass_sync.adapters import ParsedUnit
from lightclass_sync.binding import BindingContext
from lightclass_sync.config import CliOverrides, TrackerConfig, load_effective_config
from lightclass_sync.logging import (
    JsonlAuditLogger,
    UpdateEvent,
    summarize_report,
    utc_timestamp,
)
from lightclass_sync.tracking.errors import UntrackedSourceError, UpdateAbortedError
from lightclass_sync.tracking.incremental import OPERATION as INCREMENTAL_EDIT
from lightclass_sync.tracking.incremental import IncrementalUpdater
from lightclass_sync.tracking.models import CompilationResult, TrackerStatus, UpdateReport
from lightclass_sync.tracking.rebuild import OPERATION as FULL_REBUILD
from lightclass_sync.tracking.rebuild import FullRebuildUpdater
from lightclass_sync.tracking.sweeper import OrphanSweeper
from lightclass_sync.tracking.table import CorrespondenceTable
from lightclass_sync.workspace import (
    ArtifactPathError,
    FileSystem,
    LocalFileSystem,
    SourceRegistry,
    TrackedFile,
    normalize_project_key,
)

AffectedFiles = Iterable[TrackedFile | Path | str]

_ERROR_CODES: dict[type[Exception], str] = {
    UpdateAbortedError: "UPDATE_ABORTED",
    ArtifactPathError: "ARTIFACT_PATH_BLOCKED",
    UntrackedSourceError: "UNTRACKED_SOURCE",
}


class LightClassManager:
    """Tracks which sources produced each light class of one project.

    One instance is created per project and handed to the build and editor
    pipelines. Updates are serialized; lookups never wait for them.
    """

    def __init__(
        self,
        config: TrackerConfig,
        sources: SourceRegistry,
        fs: FileSystem | None = None,
        audit_logger: JsonlAuditLogger | None = None,
    ) -> None:
        self._config = config
        self._project_root = config.project_root
        self._output_root = config.output_root
        self._sources = sources
        self._fs = fs or LocalFileSystem()
        self._audit_logger = audit_logger
        self._table = CorrespondenceTable()
        self._update_lock = threading.Lock()
        self._cycle_counter = 0
        self._last_operation: str | None = None
        self._last_update_timestamp: str | None = None
        sweeper = OrphanSweeper(
            fs=self._fs,
            project_root=self._project_root,
            output_root=self._output_root,
            prune_empty_dirs=config.output.prune_empty_dirs,
        )
        self._full_rebuild = FullRebuildUpdater(
            table=self._table,
            sources=sources,
            sweeper=sweeper,
            fs=self._fs,
            project_root=self._project_root,
            output_root=self._output_root,
        )
        self._incremental = IncrementalUpdater(
            table=self._table,
            sources=sources,
            sweeper=sweeper,
            fs=self._fs,
            project_root=self._project_root,
            output_root=self._output_root,
        )

    @property
    def config(self) -> TrackerConfig:
        return self._config

    @property
    def sources(self) -> SourceRegistry:
        return self._sources

    def lookup_sources_for(self, artifact_path: str | Path) -> list[ParsedUnit]:
        """Return parsed sources of an artifact, dropping ones that no longer resolve."""
        key = normalize_project_key(self._project_root, artifact_path)
        if key is None:
            return []
        units: list[ParsedUnit] = []
        for location in self._table.sources_for(key):
            tracked = self._sources.resolve_tracked_file(location)
            if tracked is None or not self._sources.track_if_present(tracked):
                continue
            unit = self._sources.parse(tracked)
            if unit is not None:
                units.append(unit)
        return units

    def on_full_rebuild(
        self, result: CompilationResult, affected_files: AffectedFiles
    ) -> UpdateReport:
        """Rebuild the table after a project build."""
        affected = self._affected_keys(affected_files)
        return self._run(
            FULL_REBUILD,
            lambda cycle_id: self._full_rebuild.run(result, affected, cycle_id),
            affected_count=len(affected),
        )

    def on_incremental_edit(
        self, binding: BindingContext, affected_files: AffectedFiles
    ) -> UpdateReport:
        """Rebuild the table from the files changed by an edit."""
        affected = self._affected_keys(affected_files)
        return self._run(
            INCREMENTAL_EDIT,
            lambda cycle_id: self._incremental.run(binding, affected, cycle_id),
            affected_count=len(affected),
        )

    def status(self) -> TrackerStatus:
        snapshot = self._table.snapshot()
        return TrackerStatus(
            artifact_count=len(snapshot),
            source_location_count=sum(len(locations) for locations in snapshot.values()),
            generation=self._table.generation,
            last_operation=self._last_operation,
            last_update_timestamp=self._last_update_timestamp,
        )

    def dispose(self) -> None:
        """Drop all tracked state at session teardown."""
        with self._update_lock:
            self._table.clear()
            self._sources.reset()

    def _run(
        self,
        operation: str,
        action: Callable[[str], UpdateReport],
        affected_count: int,
    ) -> UpdateReport:
        with self._update_lock:
            self._cycle_counter += 1
            cycle_id = f"cycle-{self._cycle_counter}"
            try:
                report = action(cycle_id)
            except Exception as exc:
                self._audit(
                    UpdateEvent(
                        timestamp=utc_timestamp(),
                        cycle_id=cycle_id,
                        operation=operation,
                        ok=False,
                        error_code=_error_code(exc),
                        metadata={"affected_count": affected_count, "message": str(exc)},
                    )
                )
                raise
            self._last_operation = operation
            self._last_update_timestamp = report.timestamp
            metadata = summarize_report(report)
            metadata["affected_count"] = affected_count
            self._audit(
                UpdateEvent(
                    timestamp=report.timestamp,
                    cycle_id=cycle_id,
                    operation=operation,
                    ok=True,
                    error_code=None,
                    metadata=metadata,
                )
            )
            return report

    def _audit(self, event: UpdateEvent) -> None:
        if self._audit_logger is not None:
            self._audit_logger.append(event)

    def _affected_keys(self, affected_files: AffectedFiles) -> frozenset[str]:
        keys: set[str] = set()
        for item in affected_files:
            if isinstance(item, TrackedFile):
                tracked: TrackedFile | None = item
            else:
                tracked = self._sources.resolve_tracked_file(item)
            if tracked is None:
                continue
            # files created since discovery join the tracked set here
            self._sources.track_if_present(tracked)
            keys.add(tracked.path)
        return frozenset(keys)


def _error_code(exc: Exception) -> str:
    for error_type, code in _ERROR_CODES.items():
        if isinstance(exc, error_type):
            return code
    return "INTERNAL_ERROR"


def create_manager(
    project_root: str | Path,
    cli_overrides: CliOverrides | None = None,
    fs: FileSystem | None = None,
) -> LightClassManager:
    """Create a configured manager for one project."""
    config = load_effective_config(Path(project_root), cli_overrides)
    sources = SourceRegistry(project_root=config.project_root, config=config.sources)
    audit_logger = None
    if config.audit.enabled:
        audit_logger = JsonlAuditLogger(path=config.data_dir / "audit.jsonl")
    return LightClassManager(config=config, sources=sources, fs=fs, audit_logger=audit_logger)
