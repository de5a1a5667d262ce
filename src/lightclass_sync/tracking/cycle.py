"""Bookkeeping shared by both update protocols."""

from __future__ import annotations

import time
from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from pathlib import Path

from lightclass_sync.logging import utc_timestamp
from lightclass_sync.tracking.errors import UpdateAbortedError
from lightclass_sync.tracking.models import SweepResult, UpdateReport
from lightclass_sync.workspace import FileSystem, LightClassFile, project_key


class UpdateCycle:
    """Collects the next table and the file changes of one update.

    Artifacts and directories created during the cycle are remembered so an
    aborted cycle can remove them again.
    """

    def __init__(
        self,
        operation: str,
        cycle_id: str,
        fs: FileSystem,
        project_root: Path,
    ) -> None:
        self.operation = operation
        self.cycle_id = cycle_id
        self._fs = fs
        self._project_root = project_root
        self._started = time.perf_counter()
        self._mapping: dict[str, list[Path]] = {}
        self._created: dict[str, LightClassFile] = {}
        self._created_dirs: list[Path] = []
        self._touched: dict[str, None] = {}

    @property
    def mapping(self) -> dict[str, list[Path]]:
        return self._mapping

    def artifact(self, location: Path) -> LightClassFile:
        return LightClassFile(
            key=project_key(self._project_root, location),
            location=location,
            fs=self._fs,
        )

    def materialize(self, artifact: LightClassFile) -> bool:
        """Ensure parent directories and the stub file exist; True if created."""
        self._created_dirs.extend(artifact.ensure_parent_dirs())
        created = artifact.create_if_absent()
        if created:
            self._created[artifact.key] = artifact
        return created

    def touch(self, artifact: LightClassFile) -> None:
        artifact.touch()
        self._touched[artifact.key] = None

    def record(self, artifact: LightClassFile, sources: Iterable[Path]) -> None:
        self._mapping.setdefault(artifact.key, []).extend(sources)

    @contextmanager
    def guard(self) -> Iterator[None]:
        """Roll back this cycle's file changes when table construction fails."""
        try:
            yield
        except OSError as exc:
            failures = self.rollback()
            raise UpdateAbortedError(
                operation=self.operation,
                path=str(exc.filename) if exc.filename is not None else "",
                reason=exc.strerror or str(exc),
                rollback_failures=failures,
            ) from exc
        except BaseException as exc:
            # path, tracking and collaborator failures keep their own type
            for failure in self.rollback():
                exc.add_note(f"rollback: {failure}")
            raise

    def rollback(self) -> tuple[str, ...]:
        """Delete artifacts and directories created by this cycle."""
        failures: list[str] = []
        for artifact in reversed(list(self._created.values())):
            try:
                self._fs.delete(artifact.location)
            except OSError as exc:
                failures.append(f"{artifact.key}: {exc.strerror or exc}")
        for directory in reversed(self._created_dirs):
            try:
                self._fs.remove_dir(directory)
            except OSError as exc:
                failures.append(f"{directory}: {exc.strerror or exc}")
        self._created.clear()
        self._created_dirs.clear()
        return tuple(failures)

    def report(self, sweep: SweepResult) -> UpdateReport:
        return UpdateReport(
            operation=self.operation,
            cycle_id=self.cycle_id,
            artifact_count=len(self._mapping),
            created=tuple(self._created),
            touched=tuple(self._touched),
            sweep=sweep,
            duration_ms=int((time.perf_counter() - self._started) * 1000),
            timestamp=utc_timestamp(),
        )
