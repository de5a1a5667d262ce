from __future__ import annotations

import threading
from pathlib import Path

from lightclass_sync.binding import declared_binding_context
from lightclass_sync.tracking import CompilationResult, LightClassManager, OutputFile


def test_status_reflects_last_published_update(
    write_source, manager: LightClassManager
) -> None:
    assert manager.status().artifact_count == 0
    assert manager.status().last_operation is None

    a = write_source("src/a.kt", "class A\n")
    report = manager.on_full_rebuild(
        CompilationResult(output_files=(OutputFile(relative_path="A.class", source_files=(a,)),)),
        affected_files=[],
    )

    status = manager.status()
    assert status.artifact_count == 1
    assert status.source_location_count == 1
    assert status.generation == 1
    assert status.last_operation == "full_rebuild"
    assert status.last_update_timestamp == report.timestamp


def test_dispose_drops_table_and_source_state(
    write_source, manager: LightClassManager
) -> None:
    a = write_source("src/a.kt", "class A\n")
    manager.on_full_rebuild(
        CompilationResult(output_files=(OutputFile(relative_path="A.class", source_files=(a,)),)),
        affected_files=[],
    )

    manager.dispose()

    assert manager.status().artifact_count == 0
    assert manager.lookup_sources_for("bin/kotlin/A.class") == []


def test_editor_commit_feeds_incremental_edit(
    project: Path, write_source, manager: LightClassManager
) -> None:
    write_source("src/p/Shapes.kt", "package p\n\nclass Circle\n")
    tracked = manager.sources.resolve_tracked_file("src/p/Shapes.kt")
    assert tracked is not None

    unit = manager.sources.commit_text(tracked, "package p\r\n\r\nclass Circle\r\nclass Square\r\n")
    report = manager.on_incremental_edit(declared_binding_context([unit]), [tracked])

    assert report.created == ("bin/kotlin/p/Circle.class", "bin/kotlin/p/Square.class")
    assert (project / "bin/kotlin/p/Square.class").is_file()


def test_lookups_during_updates_see_complete_tables(
    write_source, manager: LightClassManager
) -> None:
    a = write_source("src/a.kt", "class A\n")
    b = write_source("src/b.kt", "class B\n")
    both = CompilationResult(
        output_files=(OutputFile(relative_path="X.class", source_files=(a, b)),)
    )
    manager.on_full_rebuild(both, affected_files=[])
    stop = threading.Event()
    observed: set[tuple[str, ...]] = set()

    def read() -> None:
        while not stop.is_set():
            units = manager.lookup_sources_for("bin/kotlin/X.class")
            observed.add(tuple(unit.path for unit in units))

    reader = threading.Thread(target=read)
    reader.start()
    swapped = CompilationResult(
        output_files=(OutputFile(relative_path="X.class", source_files=(b, a)),)
    )
    for index in range(30):
        manager.on_full_rebuild(swapped if index % 2 == 0 else both, affected_files=[a])
    stop.set()
    reader.join()

    assert observed <= {("src/a.kt", "src/b.kt"), ("src/b.kt", "src/a.kt")}
