"""
Connection Controller
=====================

Executes the up / down / status commands against the event log.

Transition rules:
    up:    (resolved != UP)   → STARTING → UP | FAILED
    down:  (resolved != DOWN) → STOPPING → DOWN | FAILED

A command whose target status is already the resolved status is a no-op
and writes nothing. Otherwise exactly two events are appended: the
intermediate event, then the simulated terminal outcome.
"""

import random
import time
from dataclasses import dataclass
from typing import Callable, Optional, Protocol

import structlog

from .state import Event, EventLog, Status, resolve_latest_not_failed

logger = structlog.get_logger(__name__)


class OutcomeSource(Protocol):
    """Decides whether a simulated transition succeeds"""

    def succeeded(self) -> bool:
        ...


class RandomOutcome:
    """Coin-flip outcome: success and failure are equally likely"""

    def __init__(self, seed: Optional[int] = None, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random(seed)

    def succeeded(self) -> bool:
        return self.rng.random() < 0.5


def now_millis() -> int:
    """Current wall-clock time in milliseconds since epoch"""
    return time.time_ns() // 1_000_000


@dataclass(frozen=True)
class Transition:
    """Parameters of one direction of the state machine"""
    command: str
    target: Status
    intermediate: Status
    progress_message: str


UP_TRANSITION = Transition(
    command="up",
    target=Status.UP,
    intermediate=Status.STARTING,
    progress_message="Starting...",
)

DOWN_TRANSITION = Transition(
    command="down",
    target=Status.DOWN,
    intermediate=Status.STOPPING,
    progress_message="Stopping...",
)


@dataclass(frozen=True)
class StatusReport:
    """Result of a status query"""
    event: Event
    uptime_seconds: Optional[int] = None

    @property
    def status(self) -> Status:
        return self.event.status


class ConnectionController:
    """
    Simulated VPN connection control backed by an event log.

    Messages meant for the user are passed to ``notify`` one line at a
    time, in the order they happen.
    """

    def __init__(
        self,
        log: EventLog,
        outcomes: Optional[OutcomeSource] = None,
        clock: Optional[Callable[[], int]] = None,
        notify: Optional[Callable[[str], None]] = None,
    ):
        self.log = log
        self.outcomes = outcomes if outcomes is not None else RandomOutcome()
        self.clock = clock or now_millis
        self.notify = notify or (lambda message: None)

    def current(self) -> Optional[Event]:
        """The event that determines the current status, if any"""
        return resolve_latest_not_failed(self.log.load())

    def up(self) -> Optional[Status]:
        """Bring the connection up. Returns the outcome, or None if already UP."""
        return self._transition(UP_TRANSITION)

    def down(self) -> Optional[Status]:
        """Bring the connection down. Returns the outcome, or None if already DOWN."""
        return self._transition(DOWN_TRANSITION)

    def status(self) -> Optional[StatusReport]:
        """Report the current status, with uptime when UP"""
        event = self.current()
        if event is None:
            logger.debug("status_resolved", status=None)
            self.notify("No events found")
            return None

        self.notify(f"Status: {event.status.value}")

        uptime = None
        if event.status == Status.UP:
            uptime = (self.clock() - event.timestamp) // 1000
            self.notify(f"Uptime: {uptime} seconds")

        logger.debug("status_resolved", status=event.status.value, uptime=uptime)
        return StatusReport(event=event, uptime_seconds=uptime)

    def _transition(self, transition: Transition) -> Optional[Status]:
        current = self.current()
        if current is not None and current.status == transition.target:
            logger.debug("transition_skipped", command=transition.command, status=current.status.value)
            self.notify(f"Already {transition.target.value}")
            return None

        outcome = transition.target if self.outcomes.succeeded() else Status.FAILED
        logger.debug(
            "transition_started",
            command=transition.command,
            previous=current.status.value if current else None,
        )

        self.notify(transition.progress_message)
        self.log.append(Event(transition.intermediate, self.clock()))

        self.notify(f"Status: {outcome.value}")
        self.log.append(Event(outcome, self.clock()))

        logger.debug("transition_finished", command=transition.command, outcome=outcome.value)
        return outcome


def create_controller(
    config: dict,
    log: EventLog,
    outcomes: Optional[OutcomeSource] = None,
    clock: Optional[Callable[[], int]] = None,
    notify: Optional[Callable[[str], None]] = None,
) -> ConnectionController:
    """Create a controller from config"""
    if outcomes is None:
        outcomes = RandomOutcome(seed=config.get("simulation", {}).get("seed"))
    return ConnectionController(log, outcomes=outcomes, clock=clock, notify=notify)
