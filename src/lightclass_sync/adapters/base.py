"""Core adapter protocol and parsed-unit data types."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Protocol

TOP_LEVEL = "top_level"
MEMBER = "member"
LOCAL = "local"

_ALLOWED_SCOPES = {TOP_LEVEL, MEMBER, LOCAL}


@dataclass(slots=True, frozen=True)
class Declaration:
    """Single class-like declaration found in a source unit."""

    kind: str
    name: str
    fq_name: str | None
    scope: str
    start_line: int
    end_line: int
    parent: str | None = None

    @property
    def is_top_level(self) -> bool:
        return self.scope == TOP_LEVEL


@dataclass(slots=True, frozen=True)
class ParsedUnit:
    """Parsed view of one source file."""

    path: str
    package_name: str | None
    declarations: tuple[Declaration, ...]
    content_hash: str = ""

    def top_level_declarations(self) -> tuple[Declaration, ...]:
        """Return declarations that compile to their own artifact."""
        return tuple(item for item in self.declarations if item.is_top_level)


class AdapterContractError(ValueError):
    """Raised when adapter output violates the shared declaration contract."""


def validate_declarations(declarations: list[Declaration]) -> None:
    """Validate declarations against required invariant fields."""
    for declaration in declarations:
        if not declaration.kind.strip():
            raise AdapterContractError("Declaration kind must be non-empty.")
        if not declaration.name.strip():
            raise AdapterContractError("Declaration name must be non-empty.")
        if declaration.scope not in _ALLOWED_SCOPES:
            raise AdapterContractError("Declaration scope must be one of top_level, member, local.")
        if declaration.start_line < 1:
            raise AdapterContractError("Declaration start_line must be >= 1.")
        if declaration.end_line < declaration.start_line:
            raise AdapterContractError("Declaration end_line must be >= start_line.")
        if declaration.scope == TOP_LEVEL and declaration.parent is not None:
            raise AdapterContractError("Top-level declarations cannot have a parent.")


def declaration_sort_key(declaration: Declaration) -> tuple[int, int, str, str]:
    """Return deterministic sort key for declarations."""
    return (declaration.start_line, declaration.end_line, declaration.name, declaration.kind)


def normalize_and_sort_declarations(declarations: list[Declaration]) -> tuple[Declaration, ...]:
    """Strip optional text, validate invariants, and sort deterministically."""
    normalized = [
        replace(
            declaration,
            fq_name=_normalize_optional_text(declaration.fq_name),
            parent=_normalize_optional_text(declaration.parent),
        )
        for declaration in declarations
    ]
    validate_declarations(normalized)
    return tuple(sorted(normalized, key=declaration_sort_key))


def _normalize_optional_text(value: str | None) -> str | None:
    if value is None:
        return None
    normalized = value.strip()
    if not normalized:
        return None
    return normalized


class SourceAdapter(Protocol):
    """Protocol implemented by language adapters."""

    name: str

    def supports_path(self, path: str) -> bool:
        """Return True when adapter supports a file path."""

    def parse(self, path: str, text: str) -> ParsedUnit:
        """Return the parsed unit for a source file."""
