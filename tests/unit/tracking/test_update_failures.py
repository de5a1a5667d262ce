from __future__ import annotations

from pathlib import Path

import pytest

from lightclass_sync.binding import ClassDescriptor
from lightclass_sync.tracking import (
    CompilationResult,
    LightClassManager,
    OutputFile,
    UntrackedSourceError,
    UpdateAbortedError,
)
from lightclass_sync.workspace import ArtifactPathError


def _result(*outputs: tuple[str, tuple[Path, ...]]) -> CompilationResult:
    return CompilationResult(
        output_files=tuple(
            OutputFile(relative_path=relative, source_files=sources) for relative, sources in outputs
        )
    )


@pytest.fixture
def built(project: Path, write_source, manager: LightClassManager) -> Path:
    source = write_source("src/a.kt", "class A\n")
    manager.on_full_rebuild(_result(("Keep.class", (source,))), affected_files=[])
    return source


def test_io_failure_aborts_and_rolls_back_created_files(
    project: Path, built: Path, manager: LightClassManager
) -> None:
    (project / "bin/kotlin/pkg").write_bytes(b"not a directory")
    generation = manager.status().generation

    with pytest.raises(UpdateAbortedError) as excinfo:
        manager.on_full_rebuild(
            _result(("other/B.class", (built,)), ("pkg/A.class", (built,))),
            affected_files=[built],
        )

    error = excinfo.value
    assert error.operation == "full_rebuild"
    assert error.path.endswith("pkg/A.class")
    assert error.rollback_failures == ()
    assert isinstance(error.__cause__, OSError)
    assert not (project / "bin/kotlin/other").exists()
    assert (project / "bin/kotlin/Keep.class").is_file()
    assert manager.status().generation == generation
    assert [unit.path for unit in manager.lookup_sources_for("bin/kotlin/Keep.class")] == [
        "src/a.kt"
    ]


def test_traversal_output_path_is_blocked_and_rolled_back(
    project: Path, built: Path, manager: LightClassManager
) -> None:
    generation = manager.status().generation

    with pytest.raises(ArtifactPathError, match="Path traversal is blocked"):
        manager.on_full_rebuild(
            _result(("fresh/B.class", (built,)), ("../../escape.class", (built,))),
            affected_files=[],
        )

    assert not (project / "bin/kotlin/fresh").exists()
    assert not (project / "escape.class").exists()
    assert manager.status().generation == generation


def test_absolute_output_path_is_blocked(built: Path, manager: LightClassManager) -> None:
    with pytest.raises(ArtifactPathError, match="must be relative"):
        manager.on_full_rebuild(_result(("/etc/A.class", (built,))), affected_files=[])


def test_source_outside_source_roots_is_untracked(
    project: Path, built: Path, manager: LightClassManager
) -> None:
    stray = project / "scripts/tool.kt"
    stray.parent.mkdir()
    stray.write_text("class Tool\n", encoding="utf-8")

    with pytest.raises(UntrackedSourceError) as excinfo:
        manager.on_full_rebuild(_result(("Tool.class", (stray,))), affected_files=[])

    assert excinfo.value.location == stray
    assert not (project / "bin/kotlin/Tool.class").exists()
    assert manager.lookup_sources_for("bin/kotlin/Keep.class")[0].path == "src/a.kt"


def test_manager_keeps_working_after_a_failed_cycle(
    project: Path, built: Path, manager: LightClassManager
) -> None:
    with pytest.raises(ArtifactPathError):
        manager.on_full_rebuild(_result(("..", (built,))), affected_files=[])

    report = manager.on_full_rebuild(_result(("Keep.class", (built,))), affected_files=[built])

    assert report.touched == ("bin/kotlin/Keep.class",)
    assert report.cycle_id == "cycle-3"


class _FailingBinding:
    def __init__(self, failing_name: str) -> None:
        self._failing_name = failing_name

    def resolve(self, fq_name: str) -> ClassDescriptor | None:
        if fq_name == self._failing_name:
            raise RuntimeError(f"analysis failed for {fq_name}")
        return ClassDescriptor(fq_name=fq_name)


def test_collaborator_failure_rolls_back_created_artifacts(
    project: Path, write_source, manager: LightClassManager
) -> None:
    write_source("src/a.kt", "class A\n")
    write_source("src/b.kt", "class B\n")

    with pytest.raises(RuntimeError, match="analysis failed for B"):
        manager.on_incremental_edit(_FailingBinding("B"), ["src/a.kt", "src/b.kt"])

    assert not (project / "bin/kotlin/A.class").exists()
    assert not (project / "bin").exists()
    assert manager.status().generation == 0
