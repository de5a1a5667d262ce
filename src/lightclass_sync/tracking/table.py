"""Artifact -> source correspondence table with snapshot publication."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType


@dataclass(slots=True, frozen=True)
class _Snapshot:
    generation: int
    entries: Mapping[str, tuple[Path, ...]]


_EMPTY = _Snapshot(generation=0, entries=MappingProxyType({}))


class CorrespondenceTable:
    """Maps artifact keys to the source locations that produced them.

    Every update builds a complete mapping off to the side and publishes it
    with a single reference assignment. Readers grab the current snapshot
    once per call and never see a partially replaced table.
    """

    def __init__(self) -> None:
        self._current = _EMPTY

    @property
    def generation(self) -> int:
        return self._current.generation

    def sources_for(self, artifact_key: str) -> tuple[Path, ...]:
        """Return raw source locations; unmapped artifacts have none."""
        return self._current.entries.get(artifact_key, ())

    def snapshot(self) -> Mapping[str, tuple[Path, ...]]:
        """Return the current read-only mapping."""
        return self._current.entries

    def replace(self, mapping: Mapping[str, Iterable[Path]]) -> None:
        """Publish ``mapping`` as the only visible state."""
        frozen = {key: tuple(locations) for key, locations in mapping.items()}
        self._current = _Snapshot(
            generation=self._current.generation + 1,
            entries=MappingProxyType(frozen),
        )

    def clear(self) -> None:
        self.replace({})
