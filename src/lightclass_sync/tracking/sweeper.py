"""Removal of artifacts that no longer have a contributing source."""

from __future__ import annotations

from pathlib import Path

from lightclass_sync.tracking.models import SweepFailure, SweepResult
from lightclass_sync.tracking.table import CorrespondenceTable
from lightclass_sync.workspace import FileSystem, project_key


class OrphanSweeper:
    """Reconciles the output directory against a freshly published table.

    Must only run after the table swap. A file that cannot be removed is
    reported and skipped; it never stops the rest of the sweep.
    """

    def __init__(
        self,
        fs: FileSystem,
        project_root: Path,
        output_root: Path,
        prune_empty_dirs: bool = True,
    ) -> None:
        self._fs = fs
        self._project_root = project_root
        self._output_root = output_root
        self._prune_empty_dirs = prune_empty_dirs

    def sweep(self, table: CorrespondenceTable) -> SweepResult:
        deleted: list[str] = []
        failures: list[SweepFailure] = []
        try:
            candidates = self._fs.list_files(self._output_root)
        except OSError as exc:
            failures.append(
                SweepFailure(
                    key=project_key(self._project_root, self._output_root),
                    reason=exc.strerror or str(exc),
                )
            )
            return SweepResult(failures=tuple(failures))

        for location in candidates:
            key = project_key(self._project_root, location)
            if table.sources_for(key):
                continue
            try:
                self._fs.delete(location)
            except OSError as exc:
                failures.append(SweepFailure(key=key, reason=exc.strerror or str(exc)))
                continue
            deleted.append(key)

        pruned: tuple[str, ...] = ()
        if self._prune_empty_dirs:
            try:
                pruned = tuple(
                    project_key(self._project_root, directory)
                    for directory in self._fs.remove_empty_dirs(self._output_root)
                )
            except OSError as exc:
                failures.append(
                    SweepFailure(
                        key=project_key(self._project_root, self._output_root),
                        reason=exc.strerror or str(exc),
                    )
                )
        return SweepResult(deleted=tuple(deleted), pruned_dirs=pruned, failures=tuple(failures))
