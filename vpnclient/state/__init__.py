"""
State Management Module
=======================

Two pieces:
1. Event log (append-only JSON file, the ground truth)
2. Status resolver (derives the effective status from the log)
"""

from .events import Event, EventLog, Status, create_event_log
from .resolver import resolve_latest_not_failed

__all__ = [
    "Event",
    "EventLog",
    "Status",
    "create_event_log",
    "resolve_latest_not_failed",
]
