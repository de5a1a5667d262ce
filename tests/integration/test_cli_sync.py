from __future__ import annotations

import io
import json
from pathlib import Path

import pytest

from lightclass_sync.cli import main


def _run(argv: list[str]) -> tuple[int, dict[str, object]]:
    stream = io.StringIO()
    code = main(argv, out_stream=stream)
    return code, json.loads(stream.getvalue())


def _manifest(path: Path, outputs: list[dict[str, object]]) -> Path:
    path.write_text(json.dumps({"output_files": outputs}), encoding="utf-8")
    return path


def test_sync_creates_artifacts_and_reports(project: Path, write_source) -> None:
    write_source("src/app/Main.kt", "package app\n\nclass Main\n")
    manifest = _manifest(
        project / "manifest.json",
        [{"relative_path": "app/Main.class", "source_files": ["src/app/Main.kt"]}],
    )

    code, payload = _run(
        ["--project-root", str(project), "sync", "--manifest", str(manifest)]
    )

    assert code == 0
    assert payload["ok"] is True
    assert payload["error"] is None
    result = payload["result"]
    assert isinstance(result, dict)
    assert result["operation"] == "full_rebuild"
    assert result["created"] == ["bin/kotlin/app/Main.class"]
    assert result["touched"] == []
    assert (project / "bin/kotlin/app/Main.class").is_file()
    assert (project / ".lightclass" / "audit.jsonl").is_file()


def test_sync_honors_output_dir_and_audit_flags(project: Path, write_source) -> None:
    write_source("src/A.kt", "class A\n")
    manifest = _manifest(
        project / "manifest.json",
        [{"relative_path": "A.class", "source_files": ["src/A.kt"]}],
    )

    code, payload = _run(
        [
            "--project-root",
            str(project),
            "--output-dir",
            "out/light",
            "--audit",
            "false",
            "sync",
            "--manifest",
            str(manifest),
            "--affected",
            "src/A.kt",
        ]
    )

    assert code == 0
    result = payload["result"]
    assert isinstance(result, dict)
    assert result["touched"] == ["out/light/A.class"]
    assert (project / "out/light/A.class").is_file()
    assert not (project / ".lightclass" / "audit.jsonl").exists()


def test_sync_blocks_traversal_in_manifest(project: Path, write_source) -> None:
    write_source("src/A.kt", "class A\n")
    manifest = _manifest(
        project / "manifest.json",
        [{"relative_path": "../../A.class", "source_files": ["src/A.kt"]}],
    )

    code, payload = _run(["--project-root", str(project), "sync", "--manifest", str(manifest)])

    assert code == 1
    assert payload["ok"] is False
    assert payload["error"] == {
        "code": "ARTIFACT_PATH_BLOCKED",
        "message": "Path traversal is blocked.",
    }


def test_sync_reports_untracked_source(project: Path) -> None:
    manifest = _manifest(
        project / "manifest.json",
        [{"relative_path": "A.class", "source_files": ["elsewhere/A.kt"]}],
    )

    code, payload = _run(["--project-root", str(project), "sync", "--manifest", str(manifest)])

    assert code == 1
    error = payload["error"]
    assert isinstance(error, dict)
    assert error["code"] == "UNTRACKED_SOURCE"


def test_sync_rejects_malformed_manifest(project: Path) -> None:
    manifest = project / "manifest.json"
    manifest.write_text(json.dumps({"output_files": [{"source_files": []}]}), encoding="utf-8")

    code, payload = _run(["--project-root", str(project), "sync", "--manifest", str(manifest)])

    assert code == 2
    error = payload["error"]
    assert isinstance(error, dict)
    assert error["code"] == "INVALID_INPUT"
    assert "relative_path must be a string" in str(error["message"])


def test_sync_reports_missing_manifest(project: Path) -> None:
    code, payload = _run(
        ["--project-root", str(project), "sync", "--manifest", str(project / "missing.json")]
    )

    assert code == 2
    assert payload["ok"] is False


def test_sync_help_explains_fresh_table_per_run(capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as excinfo:
        main(["sync", "--help"])

    assert excinfo.value.code == 0
    help_text = " ".join(capsys.readouterr().out.split())
    assert "starts from an empty table" in help_text
    assert "lost an affected source is not" in help_text
