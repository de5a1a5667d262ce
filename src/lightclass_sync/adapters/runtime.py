"""Runtime adapter registry construction."""

from __future__ import annotations

from lightclass_sync.adapters.fallback import LexicalFallbackAdapter
from lightclass_sync.adapters.kotlin import KotlinLexicalAdapter
from lightclass_sync.adapters.registry import AdapterRegistry


def build_adapter_registry() -> AdapterRegistry:
    """Build the adapter registry used for source parsing."""
    registry = AdapterRegistry()
    registry.register(KotlinLexicalAdapter())
    registry.register(LexicalFallbackAdapter(), fallback=True)
    return registry
