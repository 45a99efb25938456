"""
Append-Only Event Log
=====================

The persisted history of every connection state transition.

File layout (events.json by default):
    {"events": [{"status": "STARTING", "timestamp": 1731165513000}, ...]}

Each write rewrites the whole file:
- Atomic replace (temp file + fsync + rename) so a crash never leaves a
  half-written log behind
- Read-modify-write of append() serialized with an advisory file lock
- Human-readable JSON for debugging
"""

import json
import os
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional

import structlog
from filelock import FileLock

from vpnclient.errors import EventStoreError

logger = structlog.get_logger(__name__)


DEFAULT_EVENTS_FILE = "events.json"


class Status(str, Enum):
    """Connection status values recorded in the event log"""
    STARTING = "STARTING"
    UP = "UP"
    STOPPING = "STOPPING"
    DOWN = "DOWN"
    FAILED = "FAILED"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Event:
    """A single status transition"""
    status: Status
    timestamp: int  # milliseconds since epoch

    def to_dict(self) -> Dict[str, Any]:
        return {"status": self.status.value, "timestamp": self.timestamp}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Event":
        timestamp = data["timestamp"]
        if isinstance(timestamp, bool) or not isinstance(timestamp, int):
            raise TypeError(f"timestamp must be an integer, got {timestamp!r}")
        return cls(status=Status(data["status"]), timestamp=timestamp)


class EventLog:
    """
    Append-only event log stored as a single JSON document.

    The log is created empty the first time it is accessed. Insertion
    order is the only ordering: the last event in the file is the latest.
    """

    def __init__(self, log_path: str | Path):
        self.log_path = Path(log_path)
        self.lock_path = self.log_path.with_name(self.log_path.name + ".lock")

    def load(self) -> List[Event]:
        """Read all events, creating an empty log if none exists"""
        if not self.log_path.exists():
            self._write_atomic([])
            logger.debug("event_log_created", path=str(self.log_path))
            return []

        try:
            with open(self.log_path, 'r', encoding='utf-8') as f:
                document = json.load(f)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise EventStoreError(f"Corrupted event log {self.log_path}: {e}", self.log_path) from e
        except OSError as e:
            raise EventStoreError(f"Failed to read {self.log_path}: {e}", self.log_path) from e

        return self._decode(document)

    def append(self, event: Event) -> Event:
        """
        Append an event to the log.

        Loads the current log, adds the event and persists the full
        sequence. Concurrent appends from other processes are serialized
        by the lock file.
        """
        try:
            self.log_path.parent.mkdir(parents=True, exist_ok=True)
            lock = FileLock(str(self.lock_path))
            lock.acquire()
        except OSError as e:
            raise EventStoreError(f"Failed to lock {self.log_path}: {e}", self.log_path) from e

        try:
            events = self.load()
            events.append(event)
            self._write_atomic(events)
        finally:
            lock.release()

        logger.debug(
            "event_appended",
            status=event.status.value,
            timestamp=event.timestamp,
            count=len(events),
        )
        return event

    def _decode(self, document: Any) -> List[Event]:
        if not isinstance(document, dict) or not isinstance(document.get("events"), list):
            raise EventStoreError(
                f"Corrupted event log {self.log_path}: expected an object with an 'events' list",
                self.log_path,
            )

        events = []
        for index, record in enumerate(document["events"]):
            try:
                events.append(Event.from_dict(record))
            except (KeyError, TypeError, ValueError) as e:
                raise EventStoreError(
                    f"Corrupted event at index {index} in {self.log_path}: {e}",
                    self.log_path,
                ) from e
        return events

    def _write_atomic(self, events: List[Event]) -> None:
        """
        Atomic write: temp file → fsync → rename

        The file is either completely written or left untouched.
        """
        temp_path = self.log_path.with_name(self.log_path.name + ".tmp")
        document = {"events": [event.to_dict() for event in events]}

        try:
            self.log_path.parent.mkdir(parents=True, exist_ok=True)
            with open(temp_path, 'w', encoding='utf-8') as f:
                json.dump(document, f, indent=2)
                f.flush()
                os.fsync(f.fileno())
            os.replace(temp_path, self.log_path)
        except OSError as e:
            temp_path.unlink(missing_ok=True)
            raise EventStoreError(f"Failed to write {self.log_path}: {e}", self.log_path) from e


def create_event_log(config: dict, events_file: Optional[str | Path] = None) -> EventLog:
    """Create an event log from config"""
    if events_file is None:
        events_file = config.get("paths", {}).get("events_file", DEFAULT_EVENTS_FILE)
    return EventLog(events_file)
