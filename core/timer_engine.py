# -*- coding: utf-8 -*-

from dataclasses import dataclass


class InvalidDuration(ValueError):
    """Raised when a countdown is configured with no time to count."""


@dataclass
class EngineState:
    minutes: int
    seconds: int
    is_finished: bool


def normalize_seconds(minutes: int, seconds: int) -> int:
    if minutes > 0 and seconds <= 0:
        return 0
    if seconds <= 0 or seconds > 59:
        return 59
    return seconds


class CountdownEngine:
    """
    Pure minutes:seconds countdown (no scheduling, no listeners).
    The timer service calls step() once per tick interval.
    """

    def __init__(self, minutes: int, seconds: int):
        minutes = int(minutes)
        seconds = int(seconds)
        if minutes <= 0 and seconds <= 0:
            raise InvalidDuration(f"can't count down from {minutes}:{seconds:02d}")
        if minutes < 0 or seconds < 0:
            raise InvalidDuration(
                f"negative duration component: minutes={minutes}, seconds={seconds}"
            )

        self.total_minutes = minutes
        self.total_seconds = seconds

        self.minutes = 0
        self.seconds = 0
        self.is_finished = False
        self.reset()

    def state(self) -> EngineState:
        return EngineState(
            minutes=self.minutes,
            seconds=self.seconds,
            is_finished=self.is_finished,
        )

    def reset(self) -> None:
        # back to the configured duration
        self.minutes = self.total_minutes
        self.seconds = normalize_seconds(self.total_minutes, self.total_seconds)
        self.is_finished = False

    def step(self) -> bool:
        """
        Advance by one tick. Returns True if this step reached 0:00.
        The zero check runs before borrowing so 0:00 is hit exactly once.
        """
        if self.is_finished:
            return False

        self.seconds -= 1

        if self.minutes == 0 and self.seconds == 0:
            self.is_finished = True
            return True

        if self.seconds < 0 and self.minutes > 0:
            self.seconds = 59
            self.minutes -= 1

        return False
