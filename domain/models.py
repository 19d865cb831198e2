# -*- coding: utf-8 -*-

from dataclasses import dataclass
from typing import Callable, Optional, Protocol


class CountdownListener(Protocol):
    def on_tick(self, display: str) -> None:
        ...

    def on_finished(self) -> None:
        ...


@dataclass
class CallbackListener:
    """Adapts plain callables to the listener interface."""

    tick: Optional[Callable[[str], None]] = None
    finished: Optional[Callable[[], None]] = None

    def on_tick(self, display: str) -> None:
        if self.tick:
            self.tick(display)

    def on_finished(self) -> None:
        if self.finished:
            self.finished()


@dataclass(frozen=True)
class TimerSnapshot:
    minutes: int
    seconds: int
    display: str
    is_running: bool
    is_finished: bool
    in_background: bool


@dataclass(frozen=True)
class TimerConfig:
    minutes: int = 0
    seconds: int = 10
    interval: float = 1.0
    pattern: str = "mm:ss"
    background: bool = False
