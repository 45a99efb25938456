"""
History Queries
===============

Filters and sorts the event log for the ``history`` command.

All arguments are parsed before a single event is looked at, so a bad
date or status never produces partial output. Filtering happens first,
then sorting; the sort is stable, so events sharing a timestamp keep
their insertion order.
"""

import re
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import List, Optional, Sequence

import structlog
from dateutil.parser import isoparse

from .errors import DateParseError, UnknownStatusError
from .state import Event, Status

logger = structlog.get_logger(__name__)

DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")

ONE_MILLISECOND = timedelta(milliseconds=1)

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


class SortOrder(str, Enum):
    """Ordering applied to history results"""
    ASC = "asc"
    DESC = "desc"
    NONE = "none"


def parse_date(token: str) -> datetime:
    """Parse a YYYY-MM-DD date as midnight UTC"""
    if not DATE_PATTERN.match(token):
        raise DateParseError(token, "expected a date in YYYY-MM-DD format")
    try:
        parsed = isoparse(token)
    except ValueError as e:
        raise DateParseError(token, str(e)) from e
    return parsed.replace(tzinfo=timezone.utc)


def start_of_day_millis(token: str) -> int:
    """First millisecond of the given day"""
    return _to_millis(parse_date(token))


def end_of_day_millis(token: str) -> int:
    """Last millisecond of the given day"""
    return _to_millis(parse_date(token) + timedelta(days=1) - ONE_MILLISECOND)


def parse_status(token: str) -> Status:
    """Look up a status by its exact name"""
    try:
        return Status[token]
    except KeyError:
        raise UnknownStatusError(token, [status.value for status in Status]) from None


def parse_sort_order(token: Optional[str]) -> SortOrder:
    """asc or desc; anything else keeps insertion order"""
    if isinstance(token, SortOrder):
        return token
    if token == SortOrder.ASC.value:
        return SortOrder.ASC
    if token == SortOrder.DESC.value:
        return SortOrder.DESC
    return SortOrder.NONE


def query(
    events: Sequence[Event],
    date_from: Optional[str] = None,
    date_to: Optional[str] = None,
    sort: Optional[str | SortOrder] = None,
    status: Optional[str | Status] = None,
) -> List[Event]:
    """
    Select events from the log.

    Args:
        events: The event log, in insertion order
        date_from: Inclusive lower bound, YYYY-MM-DD (UTC)
        date_to: Inclusive upper bound, YYYY-MM-DD (UTC), covering the whole day
        sort: "asc" or "desc"; any other value keeps insertion order
        status: Only keep events with exactly this status

    Raises:
        DateParseError: A date bound is malformed
        UnknownStatusError: The status is not a known status name
    """
    lower = start_of_day_millis(date_from) if date_from is not None else None
    upper = end_of_day_millis(date_to) if date_to is not None else None
    order = parse_sort_order(sort)
    wanted = None
    if status is not None:
        wanted = status if isinstance(status, Status) else parse_status(status)

    results = [
        event for event in events
        if (lower is None or event.timestamp >= lower)
        and (upper is None or event.timestamp <= upper)
        and (wanted is None or event.status == wanted)
    ]

    if order == SortOrder.ASC:
        results.sort(key=lambda event: event.timestamp)
    elif order == SortOrder.DESC:
        results.sort(key=lambda event: event.timestamp, reverse=True)

    logger.debug(
        "history_queried",
        total=len(events),
        matched=len(results),
        date_from=date_from,
        date_to=date_to,
        sort=order.value,
        status=wanted.value if wanted else None,
    )
    return results


def format_timestamp(timestamp: int) -> str:
    """Render epoch milliseconds as a UTC timestamp with seconds precision"""
    moment = datetime.fromtimestamp(timestamp // 1000, tz=timezone.utc)
    return moment.strftime("%Y-%m-%dT%H:%M:%S")


def format_event(event: Event) -> str:
    return f"Status: {event.status.value}, Timestamp: {format_timestamp(event.timestamp)}"


def _to_millis(moment: datetime) -> int:
    return (moment - EPOCH) // ONE_MILLISECOND
