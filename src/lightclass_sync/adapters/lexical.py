"""Lexical scanning helpers for brace-structured source files."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True, frozen=True)
class LexicalRules:
    """Markers used while masking comments and string literals."""

    line_comment_prefixes: tuple[str, ...] = ("//",)
    block_comment_pairs: tuple[tuple[str, str], ...] = (("/*", "*/"),)
    string_delimiters: tuple[str, ...] = ('"""', '"', "'")
    escape_char: str = "\\"


KOTLIN_RULES = LexicalRules()


@dataclass(slots=True, frozen=True)
class BraceBlock:
    """Matched brace block range with nesting depth."""

    start_line: int
    start_col: int
    end_line: int
    end_col: int
    depth: int


@dataclass(slots=True, frozen=True)
class BraceScanResult:
    """Result of deterministic brace scanning."""

    blocks: tuple[BraceBlock, ...]
    unmatched_closing: int
    unclosed_opening: int


def mask_comments_and_strings(text: str, rules: LexicalRules | None = None) -> str:
    """Blank out comments and strings, keeping line count and character offsets."""
    active_rules = rules or KOTLIN_RULES
    line_prefixes = _longest_first(active_rules.line_comment_prefixes)
    block_pairs = tuple(
        sorted(
            ((start, end) for start, end in active_rules.block_comment_pairs if start and end),
            key=lambda pair: len(pair[0]),
            reverse=True,
        )
    )
    string_delimiters = _longest_first(active_rules.string_delimiters)

    chars = list(text)
    length = len(text)
    index = 0
    # (mode, closing marker) while inside a comment or string
    state: tuple[str, str] | None = None

    while index < length:
        if state is None:
            marker = _match_any(text, index, line_prefixes)
            if marker is not None:
                _blank(chars, index, len(marker))
                state = ("line_comment", "\n")
                index += len(marker)
                continue

            pair = _match_block_start(text, index, block_pairs)
            if pair is not None:
                _blank(chars, index, len(pair[0]))
                state = ("block_comment", pair[1])
                index += len(pair[0])
                continue

            marker = _match_any(text, index, string_delimiters)
            if marker is not None:
                _blank(chars, index, len(marker))
                state = ("string", marker)
                index += len(marker)
                continue

            index += 1
            continue

        mode, closing = state
        if mode == "line_comment":
            if text[index] == "\n":
                state = None
            else:
                chars[index] = " "
            index += 1
            continue

        closes = text.startswith(closing, index)
        if closes and mode == "string":
            closes = not _is_escaped(text, index, closing, active_rules.escape_char)
        if closes:
            _blank(chars, index, len(closing))
            state = None
            index += len(closing)
            continue
        if text[index] != "\n":
            chars[index] = " "
        index += 1

    return "".join(chars)


def scan_brace_blocks(masked_text: str) -> BraceScanResult:
    """Scan brace block ranges with 1-based line and column accounting."""
    stack: list[tuple[int, int, int]] = []
    blocks: list[BraceBlock] = []
    line = 1
    col = 1
    unmatched_closing = 0

    for char in masked_text:
        if char == "{":
            stack.append((line, col, len(stack) + 1))
        elif char == "}":
            if not stack:
                unmatched_closing += 1
            else:
                start_line, start_col, depth = stack.pop()
                blocks.append(
                    BraceBlock(
                        start_line=start_line,
                        start_col=start_col,
                        end_line=line,
                        end_col=col,
                        depth=depth,
                    )
                )

        if char == "\n":
            line += 1
            col = 1
        else:
            col += 1

    ordered = tuple(
        sorted(blocks, key=lambda item: (item.start_line, item.start_col, item.depth))
    )
    return BraceScanResult(
        blocks=ordered,
        unmatched_closing=unmatched_closing,
        unclosed_opening=len(stack),
    )


def line_depths(masked_text: str) -> list[int]:
    """Return the brace depth in effect at the start of every line."""
    depths: list[int] = []
    depth = 0
    for line in masked_text.splitlines():
        depths.append(depth)
        for char in line:
            if char == "{":
                depth += 1
            elif char == "}":
                depth = max(0, depth - 1)
    return depths


def _longest_first(markers: tuple[str, ...]) -> tuple[str, ...]:
    return tuple(sorted((marker for marker in markers if marker), key=len, reverse=True))


def _blank(chars: list[str], index: int, count: int) -> None:
    for offset in range(count):
        chars[index + offset] = " "


def _match_any(text: str, index: int, markers: tuple[str, ...]) -> str | None:
    for marker in markers:
        if text.startswith(marker, index):
            return marker
    return None


def _match_block_start(
    text: str,
    index: int,
    pairs: tuple[tuple[str, str], ...],
) -> tuple[str, str] | None:
    for start, end in pairs:
        if text.startswith(start, index):
            return start, end
    return None


def _is_escaped(text: str, index: int, marker: str, escape_char: str) -> bool:
    if len(marker) > 1:
        return False
    backslashes = 0
    cursor = index - 1
    while cursor >= 0 and text[cursor] == escape_char:
        backslashes += 1
        cursor -= 1
    return backslashes % 2 == 1
