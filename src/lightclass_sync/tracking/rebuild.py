"""Table reconstruction from a complete compilation result."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

from lightclass_sync.tracking.cycle import UpdateCycle
from lightclass_sync.tracking.errors import UntrackedSourceError
from lightclass_sync.tracking.models import CompilationResult, UpdateReport
from lightclass_sync.tracking.sweeper import OrphanSweeper
from lightclass_sync.tracking.table import CorrespondenceTable
from lightclass_sync.workspace import FileSystem, SourceRegistry, resolve_output_path

OPERATION = "full_rebuild"


class FullRebuildUpdater:
    """Rebuilds the whole table after a project build."""

    def __init__(
        self,
        table: CorrespondenceTable,
        sources: SourceRegistry,
        sweeper: OrphanSweeper,
        fs: FileSystem,
        project_root: Path,
        output_root: Path,
    ) -> None:
        self._table = table
        self._sources = sources
        self._sweeper = sweeper
        self._fs = fs
        self._project_root = project_root
        self._output_root = output_root

    def run(
        self,
        result: CompilationResult,
        affected: frozenset[str],
        cycle_id: str,
    ) -> UpdateReport:
        """Rebuild from ``result``; ``affected`` holds tracked source paths."""
        cycle = UpdateCycle(OPERATION, cycle_id, self._fs, self._project_root)
        with cycle.guard():
            for output in result.output_files:
                location = resolve_output_path(self._output_root, output.relative_path)
                artifact = cycle.artifact(location)
                cycle.materialize(artifact)

                # a source dropped from the artifact only shows up in the old entry
                previous = self._table.sources_for(artifact.key)
                if self._contains_affected(output.source_files, affected) or (
                    self._contains_affected(previous, affected)
                ):
                    cycle.touch(artifact)

                cycle.record(artifact, output.source_files)

        self._table.replace(cycle.mapping)
        return cycle.report(self._sweeper.sweep(self._table))

    def _contains_affected(self, locations: Iterable[Path], affected: frozenset[str]) -> bool:
        for location in locations:
            tracked = self._sources.resolve_tracked_file(location)
            if tracked is None:
                raise UntrackedSourceError(location)
            if tracked.path in affected:
                return True
        return False
