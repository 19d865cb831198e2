"""Pytest configuration and fixtures for countdown tests."""

from typing import List, Optional, Tuple

import pytest

from core.scheduler import EventLoop


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 100.0):
        self.time = start

    def __call__(self) -> float:
        return self.time

    def advance(self, seconds: float) -> None:
        self.time += seconds


class RecordingListener:
    """Listener that records every notification in order."""

    def __init__(self):
        self.events: List[Tuple[str, Optional[str]]] = []

    def on_tick(self, display: str) -> None:
        self.events.append(("tick", display))

    def on_finished(self) -> None:
        self.events.append(("finished", None))

    @property
    def ticks(self) -> List[str]:
        return [display for kind, display in self.events if kind == "tick"]

    @property
    def finished_count(self) -> int:
        return sum(1 for kind, _ in self.events if kind == "finished")


def advance(loop: EventLoop, clock: FakeClock, seconds: float) -> int:
    """Move the fake clock forward, running jobs as they come due."""
    target = clock.time + seconds
    ran = 0
    while True:
        due = loop.next_due()
        if due is None or due > target:
            break
        clock.time = max(clock.time, due)
        ran += loop.run_pending()
    clock.time = target
    return ran


def drain(loop: EventLoop, clock: FakeClock, limit: int = 10_000) -> int:
    """Run jobs until the loop is empty."""
    ran = 0
    while ran < limit:
        due = loop.next_due()
        if due is None:
            return ran
        clock.time = max(clock.time, due)
        ran += loop.run_pending()
    raise AssertionError("event loop did not drain")


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def loop(clock) -> EventLoop:
    return EventLoop(clock=clock)


@pytest.fixture
def listener() -> RecordingListener:
    return RecordingListener()


@pytest.fixture
def run_for(loop, clock):
    """Advance the fake clock by N seconds, running due jobs."""
    return lambda seconds: advance(loop, clock, seconds)


@pytest.fixture
def run_all(loop, clock):
    """Run the loop until nothing is pending."""
    return lambda: drain(loop, clock)
