"""Pytest configuration and fixtures."""

from datetime import datetime, timedelta, timezone

import pytest

from vpnclient.controller import ConnectionController
from vpnclient.state import Event, EventLog, Status


def millis(*args) -> int:
    """Epoch milliseconds for a UTC datetime"""
    moment = datetime(*args, tzinfo=timezone.utc)
    return (moment - datetime(1970, 1, 1, tzinfo=timezone.utc)) // timedelta(milliseconds=1)


BASE_TIME = millis(2024, 11, 9, 15, 18, 33)


class FixedClock:
    """Clock that only moves when told to"""

    def __init__(self, now: int = BASE_TIME):
        self.now = now

    def __call__(self) -> int:
        return self.now

    def advance(self, seconds: float = 0, millis: int = 0) -> None:
        self.now += int(seconds * 1000) + millis


class ScriptedOutcomes:
    """Outcome source replaying a fixed list of results"""

    def __init__(self, *results: bool):
        self.results = list(results)

    def push(self, *results: bool) -> None:
        self.results.extend(results)

    def succeeded(self) -> bool:
        return self.results.pop(0)


@pytest.fixture
def events_file(tmp_path):
    return tmp_path / "events.json"


@pytest.fixture
def event_log(events_file):
    return EventLog(events_file)


@pytest.fixture
def clock():
    return FixedClock()


@pytest.fixture
def outcomes():
    return ScriptedOutcomes()


@pytest.fixture
def messages():
    return []


@pytest.fixture
def controller(event_log, outcomes, clock, messages):
    return ConnectionController(
        event_log,
        outcomes=outcomes,
        clock=clock,
        notify=messages.append,
    )


@pytest.fixture
def seed_events(event_log):
    """Append (status, timestamp) pairs to the log"""

    def _seed(*pairs):
        for status, timestamp in pairs:
            event_log.append(Event(Status(status), timestamp))
        return event_log.load()

    return _seed
