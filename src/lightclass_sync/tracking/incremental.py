"""Table reconstruction from the sources touched by an edit."""

from __future__ import annotations

from pathlib import Path

from lightclass_sync.binding import BindingContext, internal_name
from lightclass_sync.tracking.cycle import UpdateCycle
from lightclass_sync.tracking.models import UpdateReport
from lightclass_sync.tracking.sweeper import OrphanSweeper
from lightclass_sync.tracking.table import CorrespondenceTable
from lightclass_sync.workspace import FileSystem, SourceRegistry, TrackedFile, class_file_path

OPERATION = "incremental_edit"


class IncrementalUpdater:
    """Rebuilds the table from the affected source files only.

    Without a compilation result the complete source set of an artifact is
    unknown, so every artifact an affected file produces is treated as stale.
    Entries of unaffected files are not carried over.
    """

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
        binding: BindingContext,
        affected: frozenset[str],
        cycle_id: str,
    ) -> UpdateReport:
        cycle = UpdateCycle(OPERATION, cycle_id, self._fs, self._project_root)
        with cycle.guard():
            for tracked in self._sources.files():
                if tracked.path not in affected:
                    continue
                for location in self.artifact_locations(tracked, binding):
                    artifact = cycle.artifact(location)
                    if not cycle.materialize(artifact):
                        cycle.touch(artifact)
                    cycle.record(artifact, (tracked.location,))

        self._table.replace(cycle.mapping)
        return cycle.report(self._sweeper.sweep(self._table))

    def artifact_locations(self, tracked: TrackedFile, binding: BindingContext) -> list[Path]:
        """Return class file locations for the resolvable top-level types of a file."""
        unit = self._sources.parse(tracked)
        if unit is None:
            return []
        locations: list[Path] = []
        for declaration in unit.top_level_declarations():
            if declaration.fq_name is None:
                continue
            descriptor = binding.resolve(declaration.fq_name)
            if descriptor is None:
                continue
            locations.append(class_file_path(self._output_root, internal_name(descriptor)))
        return locations
