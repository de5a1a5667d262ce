"""Fallback adapter for tracked files no language adapter understands."""

from __future__ import annotations

import hashlib

from lightclass_sync.adapters.base import ParsedUnit


class LexicalFallbackAdapter:
    """Default adapter that reports no declarations."""

    name = "lexical"

    def supports_path(self, path: str) -> bool:
        """Fallback supports any path."""
        _ = path
        return True

    def parse(self, path: str, text: str) -> ParsedUnit:
        """Fallback yields an empty unit, so the file produces no artifacts."""
        return ParsedUnit(
            path=path,
            package_name=None,
            declarations=(),
            content_hash=hashlib.sha256(text.encode("utf-8")).hexdigest(),
        )
