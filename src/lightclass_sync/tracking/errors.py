"""Failures raised by tracker update cycles."""

from __future__ import annotations

from pathlib import Path


class UpdateAbortedError(Exception):
    """Raised when an I/O failure aborts an update before publication."""

    def __init__(
        self,
        operation: str,
        path: str,
        reason: str,
        rollback_failures: tuple[str, ...] = (),
    ) -> None:
        super().__init__(f"{operation} aborted at '{path}': {reason}")
        self.operation = operation
        self.path = path
        self.reason = reason
        self.rollback_failures = rollback_failures


class UntrackedSourceError(LookupError):
    """Raised when a recorded source location no longer maps to a tracked file."""

    def __init__(self, location: Path) -> None:
        super().__init__(f"Source location is not a tracked project file: {location}")
        self.location = location
