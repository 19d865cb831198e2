# -*- coding: utf-8 -*-

import logging
import math
import threading
from typing import Any, Optional

from core.scheduler import BackgroundScheduler, EventLoop, Scheduler
from core.time_format import DEFAULT_PATTERN, format_countdown, normalize_pattern
from core.timer_engine import CountdownEngine
from domain.models import CountdownListener, TimerConfig, TimerSnapshot

logger = logging.getLogger(__name__)

DEFAULT_TICK_INTERVAL = 1


def _coerce_interval(tick_interval) -> float:
    try:
        value = float(tick_interval)
    except (TypeError, ValueError):
        value = 0.0
    if not math.isfinite(value) or value <= 0:
        logger.debug(
            "Tick interval %r is not a positive number, using %s",
            tick_interval,
            DEFAULT_TICK_INTERVAL,
        )
        return DEFAULT_TICK_INTERVAL
    return value


class _PendingTick:
    """The one outstanding tick: scheduler handle plus when it is due."""

    __slots__ = ("handle", "due")

    def __init__(self, due: float):
        self.handle: Any = None
        self.due = due


class CountdownTimer:
    """
    Counts down minutes:seconds and notifies a listener:
    - on_tick(display) right away on start() and then once per tick interval
    - on_finished() once, when 0:00 is reached

    Ticks run on the caller's EventLoop by default. After
    move_to_background_context() they run (and notify) on a worker thread.
    """

    def __init__(
        self,
        minutes: int,
        seconds: int,
        listener: CountdownListener,
        tick_interval: float = DEFAULT_TICK_INTERVAL,
        scheduler: Optional[Scheduler] = None,
    ):
        # raises InvalidDuration before anything else is set up
        self.engine = CountdownEngine(minutes, seconds)

        self.listener = listener
        self._tick_interval = _coerce_interval(tick_interval)
        self._pattern = DEFAULT_PATTERN

        self._scheduler: Scheduler = scheduler if scheduler is not None else EventLoop()
        self._background: Optional[Scheduler] = None
        self._owns_background = False
        self._pending: Optional[_PendingTick] = None
        self._closed = False
        self._lock = threading.RLock()

    @classmethod
    def from_config(
        cls,
        config: TimerConfig,
        listener: CountdownListener,
        scheduler: Optional[Scheduler] = None,
    ) -> "CountdownTimer":
        timer = cls(
            config.minutes,
            config.seconds,
            listener,
            tick_interval=config.interval,
            scheduler=scheduler,
        )
        if not timer.set_format(config.pattern):
            logger.warning("Ignoring unsupported time pattern %r", config.pattern)
        if config.background:
            timer.move_to_background_context()
        return timer

    # ----- Accessors -----
    def remaining_minutes(self) -> int:
        return self.engine.minutes

    def remaining_seconds(self) -> int:
        return self.engine.seconds

    @property
    def total_minutes(self) -> int:
        return self.engine.total_minutes

    @property
    def total_seconds(self) -> int:
        return self.engine.total_seconds

    @property
    def tick_interval(self) -> float:
        return self._tick_interval

    @property
    def display_format(self) -> str:
        return self._pattern

    @property
    def scheduler(self) -> Scheduler:
        return self._scheduler

    @property
    def is_finished(self) -> bool:
        return self.engine.is_finished

    @property
    def is_running(self) -> bool:
        return self._pending is not None

    @property
    def in_background(self) -> bool:
        return self._background is not None

    def current_display(self) -> str:
        with self._lock:
            return format_countdown(self.engine.minutes, self.engine.seconds, self._pattern)

    def snapshot(self) -> TimerSnapshot:
        with self._lock:
            state = self.engine.state()
            return TimerSnapshot(
                minutes=state.minutes,
                seconds=state.seconds,
                display=format_countdown(state.minutes, state.seconds, self._pattern),
                is_running=self.is_running,
                is_finished=state.is_finished,
                in_background=self.in_background,
            )

    # ----- Public API -----
    def start(self, resume: bool = False) -> None:
        """Start from the configured duration, or resume where pause() left off."""
        with self._lock:
            if self._closed:
                logger.debug("Ignoring start() on a closed countdown")
                return
            self._cancel_pending()
            if not resume:
                self.engine.reset()
                logger.debug(
                    "Countdown started from %d:%02d",
                    self.engine.minutes,
                    self.engine.seconds,
                )
            else:
                logger.debug(
                    "Countdown resumed at %d:%02d",
                    self.engine.minutes,
                    self.engine.seconds,
                )
            self._run_countdown()

    def pause(self) -> None:
        with self._lock:
            if self._pending is not None:
                logger.debug(
                    "Countdown paused at %d:%02d",
                    self.engine.minutes,
                    self.engine.seconds,
                )
            self._cancel_pending()

    def set_format(self, pattern) -> bool:
        p = normalize_pattern(pattern)
        if p is None:
            logger.debug("Rejected time pattern %r, keeping %r", pattern, self._pattern)
            return False
        with self._lock:
            self._pattern = p
        return True

    def move_to_background_context(self, context: Optional[Scheduler] = None) -> bool:
        """
        Move ticking (and listener delivery) to a worker scheduler, once.
        A tick already pending is re-registered there with the delay it
        still had left. Later calls are no-ops and return False.
        """
        with self._lock:
            if self._closed or self._background is not None:
                return False

            if context is None:
                context = BackgroundScheduler(name=type(self).__name__)
                self._owns_background = True
            context.start()

            old = self._scheduler
            pending = self._pending
            delay = None
            if pending is not None:
                delay = max(0.0, pending.due - old.now())
                self._cancel_pending()

            self._scheduler = context
            self._background = context

            if delay is not None:
                self._schedule_tick(delay)

            logger.debug(
                "Countdown moved from %s to %s (pending tick: %s)",
                old.name,
                context.name,
                "yes" if delay is not None else "no",
            )
            return True

    def close(self) -> None:
        """Stop ticking for good. start() and context moves become no-ops."""
        owned = None
        with self._lock:
            self._closed = True
            self._cancel_pending()
            if self._owns_background:
                owned = self._background
                self._owns_background = False
        # joined outside the lock, the worker may be waiting on it
        if owned is not None:
            owned.close()

    # ----- Tick internals -----
    def _run_countdown(self) -> None:
        if self.engine.is_finished:
            return
        self._emit_tick()
        self._schedule_tick(self._tick_interval)

    def _schedule_tick(self, delay: float) -> None:
        pending = _PendingTick(due=self._scheduler.now() + delay)
        self._pending = pending
        pending.handle = self._scheduler.call_later(delay, lambda: self._on_tick(pending))

    def _cancel_pending(self) -> None:
        pending = self._pending
        self._pending = None
        if pending is not None and pending.handle is not None:
            self._scheduler.cancel(pending.handle)

    def _on_tick(self, pending: _PendingTick) -> None:
        with self._lock:
            # superseded by pause(), start() or a context move
            if pending is not self._pending:
                return
            self._pending = None

            if self.engine.step():
                self._finish()
                return

            self._run_countdown()

    def _finish(self) -> None:
        # pending was already cleared, so a start() from on_finished sticks
        logger.debug("Countdown finished")
        self.listener.on_finished()

    def _emit_tick(self) -> None:
        self.listener.on_tick(
            format_countdown(self.engine.minutes, self.engine.seconds, self._pattern)
        )
