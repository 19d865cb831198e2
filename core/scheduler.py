# -*- coding: utf-8 -*-

import heapq
import itertools
import logging
import threading
import time
from abc import ABC, abstractmethod
from typing import Any, Callable, List, Optional

logger = logging.getLogger(__name__)


class Scheduler(ABC):
    """
    Where delayed callbacks run.
    call_later() returns an opaque handle accepted by cancel().
    """

    name = "scheduler"

    @abstractmethod
    def call_later(self, delay: float, fn: Callable[[], None]) -> Any:
        ...

    @abstractmethod
    def cancel(self, handle: Any) -> None:
        ...

    def now(self) -> float:
        return time.monotonic()

    def start(self) -> None:
        pass

    def close(self) -> None:
        pass


class _Job:
    __slots__ = ("due", "seq", "fn", "cancelled")

    def __init__(self, due: float, seq: int, fn: Callable[[], None]):
        self.due = due
        self.seq = seq
        self.fn = fn
        self.cancelled = False

    def __lt__(self, other: "_Job") -> bool:
        return (self.due, self.seq) < (other.due, other.seq)


class EventLoop(Scheduler):
    """
    Run loop owned by the caller: jobs only run when the caller
    drives it with run_pending() or run().
    """

    name = "event-loop"

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._queue: List[_Job] = []
        self._seq = itertools.count()
        self._cond = threading.Condition()
        self._stopped = False

    def now(self) -> float:
        return self._clock()

    def call_later(self, delay: float, fn: Callable[[], None]) -> _Job:
        job = _Job(self._clock() + max(0.0, float(delay)), next(self._seq), fn)
        with self._cond:
            heapq.heappush(self._queue, job)
            self._cond.notify()
        return job

    def cancel(self, handle: Any) -> None:
        if not isinstance(handle, _Job):
            return
        with self._cond:
            handle.cancelled = True
            self._cond.notify()

    def _prune(self) -> None:
        while self._queue and self._queue[0].cancelled:
            heapq.heappop(self._queue)

    def next_due(self) -> Optional[float]:
        with self._cond:
            self._prune()
            return self._queue[0].due if self._queue else None

    def pending_count(self) -> int:
        with self._cond:
            return sum(1 for job in self._queue if not job.cancelled)

    def _pop_due(self) -> Optional[_Job]:
        with self._cond:
            self._prune()
            if self._queue and self._queue[0].due <= self._clock():
                return heapq.heappop(self._queue)
        return None

    def _invoke(self, job: _Job) -> None:
        job.fn()

    def run_pending(self) -> int:
        """Run every job that is due now. Returns how many ran."""
        ran = 0
        while True:
            job = self._pop_due()
            if job is None:
                return ran
            self._invoke(job)
            ran += 1

    def stop(self) -> None:
        with self._cond:
            self._stopped = True
            self._cond.notify_all()

    def _keep_running_when_idle(self) -> bool:
        return False

    def run(self, timeout: Optional[float] = None) -> None:
        """
        Block and run jobs as they come due, until the queue drains,
        stop() is called or timeout seconds pass.
        """
        with self._cond:
            self._stopped = False
        self._run_loop(timeout)

    def _run_loop(self, timeout: Optional[float] = None) -> None:
        deadline = None if timeout is None else self._clock() + timeout
        while True:
            self.run_pending()
            with self._cond:
                if self._stopped:
                    return
                self._prune()
                if not self._queue and not self._keep_running_when_idle():
                    return

                now = self._clock()
                if deadline is not None and now >= deadline:
                    return

                wait = None
                if self._queue:
                    wait = max(0.0, self._queue[0].due - now)
                if deadline is not None:
                    remaining = deadline - now
                    wait = remaining if wait is None else min(wait, remaining)
                if wait is None or wait > 0:
                    self._cond.wait(wait)


class BackgroundScheduler(EventLoop):
    """Event loop driven by its own daemon worker thread."""

    def __init__(self, name: str = "countdown-worker"):
        super().__init__()
        self.name = name
        self._thread: Optional[threading.Thread] = None

    def start(self) -> None:
        if self.is_alive():
            return
        with self._cond:
            self._stopped = False
        self._thread = threading.Thread(
            target=self._run_loop, name=self.name, daemon=True
        )
        self._thread.start()
        logger.debug("Background scheduler %s started", self.name)

    def is_alive(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def _keep_running_when_idle(self) -> bool:
        return True

    def _invoke(self, job: _Job) -> None:
        try:
            job.fn()
        except Exception:
            logger.exception("Job failed on %s", self.name)

    def close(self, timeout: float = 2.0) -> None:
        thread = self._thread
        self.stop()
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout)
        self._thread = None
        logger.debug("Background scheduler %s stopped", self.name)
