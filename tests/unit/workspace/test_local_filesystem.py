from __future__ import annotations

import os
from pathlib import Path

from lightclass_sync.workspace import LightClassFile, LocalFileSystem


def test_create_if_absent_reports_whether_it_created(tmp_path: Path) -> None:
    fs = LocalFileSystem()
    target = tmp_path / "A.class"

    assert fs.create_if_absent(target) is True
    target.write_bytes(b"content")
    assert fs.create_if_absent(target) is False
    assert target.read_bytes() == b"content"


def test_touch_advances_mtime_and_keeps_content(tmp_path: Path) -> None:
    fs = LocalFileSystem()
    target = tmp_path / "A.class"
    target.write_bytes(b"content")
    future = 4_000_000_000 * 1_000_000_000
    os.utime(target, ns=(future, future))

    fs.touch(target)

    assert target.stat().st_mtime_ns > future
    assert target.read_bytes() == b"content"


def test_create_directories_returns_created_outermost_first(tmp_path: Path) -> None:
    fs = LocalFileSystem()
    (tmp_path / "a").mkdir()

    created = fs.create_directories(tmp_path / "a/b/c")

    assert created == (tmp_path / "a/b", tmp_path / "a/b/c")
    assert fs.create_directories(tmp_path / "a/b/c") == ()


def test_list_files_is_sorted_and_recursive(tmp_path: Path) -> None:
    fs = LocalFileSystem()
    for rel in ("b/B.class", "a/A.class", "a/z/Z.class", "Top.class"):
        path = tmp_path / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(b"")

    listed = fs.list_files(tmp_path)

    assert listed == sorted(listed)
    assert {path.relative_to(tmp_path).as_posix() for path in listed} == {
        "b/B.class",
        "a/A.class",
        "a/z/Z.class",
        "Top.class",
    }
    assert fs.list_files(tmp_path / "missing") == []


def test_remove_empty_dirs_never_removes_root(tmp_path: Path) -> None:
    fs = LocalFileSystem()
    (tmp_path / "a/b").mkdir(parents=True)
    (tmp_path / "keep").mkdir()
    (tmp_path / "keep/K.class").write_bytes(b"")

    removed = fs.remove_empty_dirs(tmp_path)

    assert removed == (tmp_path / "a", tmp_path / "a/b")
    assert tmp_path.is_dir()
    assert (tmp_path / "keep").is_dir()


def test_light_class_file_creates_parents_and_stub(tmp_path: Path) -> None:
    artifact = LightClassFile(
        key="bin/kotlin/pkg/A.class",
        location=tmp_path / "bin/kotlin/pkg/A.class",
        fs=LocalFileSystem(),
    )

    assert artifact.exists() is False
    created_dirs = artifact.ensure_parent_dirs()
    assert artifact.create_if_absent() is True

    assert created_dirs[-1] == tmp_path / "bin/kotlin/pkg"
    assert artifact.exists() is True
    assert artifact.location.read_bytes() == b""
