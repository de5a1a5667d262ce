from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

from lightclass_sync.config import CliOverrides
from lightclass_sync.tracking import LightClassManager, create_manager

SourceWriter = Callable[[str, str], Path]


@pytest.fixture
def project(tmp_path: Path) -> Path:
    (tmp_path / "src").mkdir()
    return tmp_path.resolve()


@pytest.fixture
def write_source(project: Path) -> SourceWriter:
    def _write(relative_path: str, text: str) -> Path:
        path = project / relative_path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def manager(project: Path) -> LightClassManager:
    return create_manager(project, cli_overrides=CliOverrides(audit_enabled=False))
