"""Typed inputs and results of tracker update cycles."""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path


@dataclass(slots=True, frozen=True)
class OutputFile:
    """One compiled output and the sources that contributed to it."""

    relative_path: str
    source_files: tuple[Path, ...]


@dataclass(slots=True, frozen=True)
class CompilationResult:
    """Output files produced by one compilation."""

    output_files: tuple[OutputFile, ...]

    @classmethod
    def from_manifest(cls, payload: object, project_root: Path) -> CompilationResult:
        """Build a result from a JSON manifest payload.

        Relative source paths are rooted at ``project_root``.
        """
        if not isinstance(payload, dict):
            raise ValueError("Compilation manifest must be a JSON object.")
        raw_outputs = payload.get("output_files")
        if not isinstance(raw_outputs, list):
            raise ValueError("Compilation manifest field 'output_files' must be a list.")
        root = project_root.resolve()
        outputs: list[OutputFile] = []
        for index, raw in enumerate(raw_outputs):
            if not isinstance(raw, dict):
                raise ValueError(f"Manifest output_files[{index}] must be an object.")
            relative_path = raw.get("relative_path")
            if not isinstance(relative_path, str):
                raise ValueError(
                    f"Manifest output_files[{index}].relative_path must be a string."
                )
            raw_sources = raw.get("source_files", [])
            if not isinstance(raw_sources, list) or not all(
                isinstance(item, str) for item in raw_sources
            ):
                raise ValueError(
                    f"Manifest output_files[{index}].source_files must be a list of strings."
                )
            outputs.append(
                OutputFile(
                    relative_path=relative_path,
                    source_files=tuple(_rooted(root, item) for item in raw_sources),
                )
            )
        return cls(output_files=tuple(outputs))

    @classmethod
    def load(cls, manifest_path: Path, project_root: Path) -> CompilationResult:
        """Read a JSON manifest file."""
        with manifest_path.open("r", encoding="utf-8") as handle:
            payload = json.load(handle)
        return cls.from_manifest(payload, project_root)


@dataclass(slots=True, frozen=True)
class SweepFailure:
    """An artifact the orphan sweep could not remove."""

    key: str
    reason: str


@dataclass(slots=True, frozen=True)
class SweepResult:
    """Outcome of one orphan sweep."""

    deleted: tuple[str, ...] = ()
    pruned_dirs: tuple[str, ...] = ()
    failures: tuple[SweepFailure, ...] = ()


@dataclass(slots=True, frozen=True)
class UpdateReport:
    """Outcome of one published update cycle."""

    operation: str
    cycle_id: str
    artifact_count: int
    created: tuple[str, ...]
    touched: tuple[str, ...]
    sweep: SweepResult
    duration_ms: int
    timestamp: str

    @property
    def refreshed(self) -> tuple[str, ...]:
        """Artifacts whose modification time moved: created or touched."""
        return tuple(sorted(set(self.created) | set(self.touched)))

    def to_dict(self) -> dict[str, object]:
        return {
            "operation": self.operation,
            "cycle_id": self.cycle_id,
            "artifact_count": self.artifact_count,
            "created": list(self.created),
            "touched": list(self.touched),
            "deleted": list(self.sweep.deleted),
            "pruned_dirs": list(self.sweep.pruned_dirs),
            "sweep_failures": [
                {"key": failure.key, "reason": failure.reason} for failure in self.sweep.failures
            ],
            "duration_ms": self.duration_ms,
            "timestamp": self.timestamp,
        }


@dataclass(slots=True, frozen=True)
class TrackerStatus:
    """Current tracker status snapshot."""

    artifact_count: int
    source_location_count: int
    generation: int
    last_operation: str | None
    last_update_timestamp: str | None


def _rooted(root: Path, raw: str) -> Path:
    candidate = Path(raw)
    if candidate.is_absolute():
        return candidate
    return root / candidate
