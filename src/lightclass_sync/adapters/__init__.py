"""Source parsing adapters."""

from .base import (
    LOCAL,
    MEMBER,
    TOP_LEVEL,
    AdapterContractError,
    Declaration,
    ParsedUnit,
    SourceAdapter,
    normalize_and_sort_declarations,
    validate_declarations,
)
from .fallback import LexicalFallbackAdapter
from .kotlin import KotlinLexicalAdapter
from .lexical import (
    BraceBlock,
    BraceScanResult,
    LexicalRules,
    line_depths,
    mask_comments_and_strings,
    scan_brace_blocks,
)
from .registry import AdapterRegistry
from .runtime import build_adapter_registry

__all__ = [
    "AdapterContractError",
    "AdapterRegistry",
    "BraceBlock",
    "BraceScanResult",
    "Declaration",
    "KotlinLexicalAdapter",
    "LOCAL",
    "LexicalFallbackAdapter",
    "LexicalRules",
    "MEMBER",
    "ParsedUnit",
    "SourceAdapter",
    "TOP_LEVEL",
    "build_adapter_registry",
    "line_depths",
    "mask_comments_and_strings",
    "normalize_and_sort_declarations",
    "scan_brace_blocks",
    "validate_declarations",
]
