from __future__ import annotations

from dataclasses import dataclass

import pytest

from lightclass_sync.adapters import (
    AdapterRegistry,
    LexicalFallbackAdapter,
    ParsedUnit,
    build_adapter_registry,
)


@dataclass(slots=True)
class PrefixAdapter:
    name: str
    prefix: str

    def supports_path(self, path: str) -> bool:
        return path.startswith(self.prefix)

    def parse(self, path: str, text: str) -> ParsedUnit:
        _ = text
        return ParsedUnit(path=path, package_name=None, declarations=())


def test_registry_selects_first_matching_adapter_in_registration_order() -> None:
    registry = AdapterRegistry()
    registry.register(PrefixAdapter(name="first-src", prefix="src/"))
    registry.register(PrefixAdapter(name="second-src", prefix="src/"))
    registry.register(LexicalFallbackAdapter(), fallback=True)

    selected = registry.select("src/Main.kt")

    assert selected.name == "first-src"
    assert registry.names() == ("first-src", "second-src", "lexical")


def test_registry_uses_fallback_for_non_matching_path() -> None:
    registry = AdapterRegistry()
    registry.register(PrefixAdapter(name="kotlin-only", prefix="pkg/"))
    registry.register(LexicalFallbackAdapter(), fallback=True)

    selected = registry.select("docs/readme.md")

    assert selected.name == "lexical"


def test_registry_without_fallback_raises() -> None:
    registry = AdapterRegistry()

    with pytest.raises(LookupError, match="No adapter supports path"):
        registry.select("src/A.kt")


def test_runtime_registry_prefers_kotlin_adapter() -> None:
    registry = build_adapter_registry()

    assert registry.names() == ("kotlin_lexical", "lexical")
    assert registry.select("src/A.kt").name == "kotlin_lexical"
    assert registry.select("src/A.java").name == "lexical"


def test_fallback_adapter_yields_no_declarations() -> None:
    unit = LexicalFallbackAdapter().parse("src/A.java", "class A {}\n")

    assert unit.declarations == ()
    assert unit.package_name is None
    assert unit.content_hash
