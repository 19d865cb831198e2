"""Tests for the event loop and background scheduler."""

import threading
import time

import pytest

from core.scheduler import BackgroundScheduler, EventLoop


class TestEventLoop:
    """Caller-driven run loop."""

    def test_jobs_run_only_when_due(self, loop, clock) -> None:
        calls = []
        loop.call_later(1.0, lambda: calls.append("a"))
        assert loop.run_pending() == 0
        clock.advance(1.0)
        assert loop.run_pending() == 1
        assert calls == ["a"]

    def test_jobs_run_in_due_then_insertion_order(self, loop, run_for) -> None:
        calls = []
        loop.call_later(2.0, lambda: calls.append("late"))
        loop.call_later(1.0, lambda: calls.append("first"))
        loop.call_later(1.0, lambda: calls.append("second"))
        run_for(2.0)
        assert calls == ["first", "second", "late"]

    def test_cancelled_job_never_runs(self, loop, clock) -> None:
        calls = []
        handle = loop.call_later(1.0, lambda: calls.append("x"))
        loop.cancel(handle)
        clock.advance(5.0)
        assert loop.run_pending() == 0
        assert calls == []
        assert loop.next_due() is None
        assert loop.pending_count() == 0

    def test_cancel_unknown_handle_ignored(self, loop) -> None:
        loop.cancel(None)
        loop.cancel("not-a-handle")

    def test_negative_delay_runs_immediately(self, loop) -> None:
        calls = []
        loop.call_later(-3, lambda: calls.append("now"))
        assert loop.run_pending() == 1
        assert calls == ["now"]

    def test_job_exception_propagates(self, loop) -> None:
        def boom():
            raise RuntimeError("boom")

        loop.call_later(0, boom)
        with pytest.raises(RuntimeError, match="boom"):
            loop.run_pending()

    def test_run_returns_when_queue_drains(self) -> None:
        real = EventLoop()
        calls = []
        real.call_later(0.01, lambda: calls.append(1))
        real.call_later(0.02, lambda: calls.append(2))
        real.run(timeout=2.0)
        assert calls == [1, 2]

    def test_run_stops_at_timeout(self) -> None:
        real = EventLoop()
        calls = []
        real.call_later(5.0, lambda: calls.append(1))
        started = time.monotonic()
        real.run(timeout=0.05)
        assert calls == []
        assert time.monotonic() - started < 2.0


class TestBackgroundScheduler:
    """Worker-thread scheduler."""

    def test_runs_jobs_on_worker_thread(self) -> None:
        worker = BackgroundScheduler(name="test-worker")
        worker.start()
        try:
            done = threading.Event()
            seen = []

            def job():
                seen.append(threading.current_thread().name)
                done.set()

            worker.call_later(0.01, job)
            assert done.wait(2.0)
            assert seen == ["test-worker"]
        finally:
            worker.close()

    def test_start_is_idempotent(self) -> None:
        worker = BackgroundScheduler()
        worker.start()
        try:
            first = worker._thread
            worker.start()
            assert worker._thread is first
            assert worker.is_alive()
        finally:
            worker.close()
        assert not worker.is_alive()

    def test_failing_job_does_not_kill_worker(self, caplog) -> None:
        worker = BackgroundScheduler()
        worker.start()
        try:
            done = threading.Event()

            def boom():
                raise RuntimeError("boom")

            worker.call_later(0, boom)
            worker.call_later(0.02, done.set)
            assert done.wait(2.0)
            assert worker.is_alive()
        finally:
            worker.close()
        assert "Job failed" in caplog.text

    def test_close_before_first_job(self) -> None:
        worker = BackgroundScheduler()
        worker.start()
        worker.close()
        assert not worker.is_alive()
