"""Resolution of the effective connection status from the event log."""

from typing import Optional, Sequence

from .events import Event, Status

# Statuses a FAILED outcome falls back to
STABLE_STATUSES = frozenset({Status.UP, Status.DOWN})


def resolve_latest_not_failed(events: Sequence[Event]) -> Optional[Event]:
    """
    Return the event that determines the current status.

    The latest event wins unless it is FAILED, in which case the last
    UP or DOWN event is used instead. Returns None for an empty log, or
    when a FAILED log has no stable event to fall back to.
    """
    if not events:
        return None

    latest = events[-1]
    if latest.status != Status.FAILED:
        return latest

    for event in reversed(events):
        if event.status in STABLE_STATUSES:
            return event
    return None
