"""Lexical Kotlin adapter for class-like declaration discovery."""

from __future__ import annotations

import hashlib
import re
from dataclasses import dataclass

from lightclass_sync.adapters.base import (
    LOCAL,
    MEMBER,
    TOP_LEVEL,
    Declaration,
    ParsedUnit,
    normalize_and_sort_declarations,
)
from lightclass_sync.adapters.lexical import line_depths, mask_comments_and_strings, scan_brace_blocks

_IDENT = r"[A-Za-z_][A-Za-z0-9_]*"
_PACKAGE_RE = re.compile(rf"^\s*package\s+({_IDENT}(?:\s*\.\s*{_IDENT})*)")
_DECLARATION_RE = re.compile(
    rf"^\s*(?:@{_IDENT}(?:\.{_IDENT})*(?:\([^)]*\))?\s+)*"
    r"((?:(?:public|private|internal|protected|open|abstract|final|sealed|data|enum|annotation"
    r"|inner|value|inline|expect|actual|external|companion|fun)\s+)*)"
    rf"(class|interface|object)\b\s*({_IDENT})?"
)
_KIND_PREFIXES = ("enum", "annotation", "companion")
_CONTINUATION_SUFFIXES = (":", ",", "(", "<")
_CONTINUATION_PREFIXES = (":", ",", "{", ")", "where")
_HEADER_LOOKAHEAD_LINES = 50
ANONYMOUS_NAME = "<anonymous>"
COMPANION_DEFAULT_NAME = "Companion"


@dataclass(slots=True, frozen=True)
class _OpenBody:
    fq_name: str | None
    end_line: int
    depth: int


class KotlinLexicalAdapter:
    """Deterministic lexical adapter for Kotlin source files."""

    name = "kotlin_lexical"

    def supports_path(self, path: str) -> bool:
        """Return True when path is a Kotlin source file."""
        return path.lower().endswith(".kt")

    def parse(self, path: str, text: str) -> ParsedUnit:
        """Extract the package and every class, interface and object declaration."""
        masked = mask_comments_and_strings(text)
        lines = masked.splitlines()
        depths = line_depths(masked)
        body_ends = {
            (block.start_line, block.start_col): block.end_line
            for block in scan_brace_blocks(masked).blocks
        }
        package_name = _find_package(lines)

        declarations: list[Declaration] = []
        open_bodies: list[_OpenBody] = []
        for index, line in enumerate(lines):
            matched = _DECLARATION_RE.match(line)
            if matched is None:
                continue
            line_number = index + 1
            depth = depths[index]
            while open_bodies and open_bodies[-1].end_line < line_number:
                open_bodies.pop()

            modifiers = matched.group(1).split()
            keyword = matched.group(2)
            name = matched.group(3)
            if name is None:
                name = COMPANION_DEFAULT_NAME if "companion" in modifiers else None

            enclosing = open_bodies[-1] if open_bodies else None
            if depth == 0:
                scope = TOP_LEVEL
                parent = None
                fq_name = _qualify(package_name, name)
            elif enclosing is not None and enclosing.depth == depth:
                scope = MEMBER
                parent = enclosing.fq_name
                fq_name = _qualify(parent, name) if parent is not None else None
            else:
                scope = LOCAL
                parent = None
                fq_name = None

            body_end = _body_end(lines, index, matched.end(), body_ends)
            declarations.append(
                Declaration(
                    kind=_kind(modifiers, keyword),
                    name=name or ANONYMOUS_NAME,
                    fq_name=fq_name if name is not None else None,
                    scope=scope,
                    start_line=line_number,
                    end_line=body_end or line_number,
                    parent=parent,
                )
            )
            if body_end is not None:
                open_bodies.append(
                    _OpenBody(
                        fq_name=fq_name if name is not None else None,
                        end_line=body_end,
                        depth=depth + 1,
                    )
                )

        return ParsedUnit(
            path=path,
            package_name=package_name,
            declarations=normalize_and_sort_declarations(declarations),
            content_hash=hashlib.sha256(text.encode("utf-8")).hexdigest(),
        )


def _find_package(lines: list[str]) -> str | None:
    for line in lines:
        matched = _PACKAGE_RE.match(line)
        if matched is not None:
            return re.sub(r"\s+", "", matched.group(1))
    return None


def _qualify(prefix: str | None, name: str | None) -> str | None:
    if name is None:
        return None
    if prefix is None:
        return name
    return f"{prefix}.{name}"


def _kind(modifiers: list[str], keyword: str) -> str:
    for prefix in _KIND_PREFIXES:
        if prefix in modifiers:
            return f"{prefix}_{keyword}"
    return keyword


def _body_end(
    lines: list[str],
    line_index: int,
    column: int,
    body_ends: dict[tuple[int, int], int],
) -> int | None:
    """Follow a declaration header to its body brace, if the declaration has one."""
    paren_depth = 0
    last_index = min(len(lines), line_index + _HEADER_LOOKAHEAD_LINES)
    for index in range(line_index, last_index):
        line = lines[index]
        start = column if index == line_index else 0
        for offset in range(start, len(line)):
            char = line[offset]
            if char == "(":
                paren_depth += 1
            elif char == ")":
                paren_depth = max(0, paren_depth - 1)
            elif char == "{" and paren_depth == 0:
                return body_ends.get((index + 1, offset + 1))
            elif char == "}" and paren_depth == 0:
                return None
        if paren_depth == 0 and not _header_continues(lines, index, start):
            return None
    return None


def _header_continues(lines: list[str], index: int, start: int) -> bool:
    if lines[index][start:].rstrip().endswith(_CONTINUATION_SUFFIXES):
        return True
    for following in lines[index + 1 :]:
        stripped = following.strip()
        if not stripped:
            continue
        return stripped.startswith(_CONTINUATION_PREFIXES)
    return False
