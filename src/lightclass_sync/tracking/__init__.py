"""Light-class tracking: correspondence table, updaters and orphan sweep."""

from .errors import UntrackedSourceError, UpdateAbortedError
from .incremental import IncrementalUpdater
from .manager import LightClassManager, create_manager
from .models import (
    CompilationResult,
    OutputFile,
    SweepFailure,
    SweepResult,
    TrackerStatus,
    UpdateReport,
)
from .rebuild import FullRebuildUpdater
from .sweeper import OrphanSweeper
from .table import CorrespondenceTable

__all__ = [
    "CompilationResult",
    "CorrespondenceTable",
    "FullRebuildUpdater",
    "IncrementalUpdater",
    "LightClassManager",
    "OrphanSweeper",
    "OutputFile",
    "SweepFailure",
    "SweepResult",
    "TrackerStatus",
    "UntrackedSourceError",
    "UpdateAbortedError",
    "UpdateReport",
    "create_manager",
]
