"""Structured audit logging utilities."""

from .audit import JsonlAuditLogger, UpdateEvent, summarize_report, utc_timestamp

__all__ = ["JsonlAuditLogger", "UpdateEvent", "summarize_report", "utc_timestamp"]
