"""Tracking of generated light classes against the sources that produce them."""

from lightclass_sync.tracking import (
    CompilationResult,
    LightClassManager,
    OutputFile,
    UpdateReport,
    create_manager,
)

__all__ = [
    "CompilationResult",
    "LightClassManager",
    "OutputFile",
    "UpdateReport",
    "create_manager",
]
