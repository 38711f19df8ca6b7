"""
Unit tests for timer schedulers.
"""

import asyncio
import threading

from pagebuilder.editing.scheduler import AsyncioScheduler, ManualScheduler, ThreadingScheduler


class TestManualScheduler:
    """Tests for the virtual-clock scheduler."""

    def test_fires_only_when_due(self, scheduler):
        calls = []
        scheduler.call_later(1.0, lambda: calls.append("a"))

        assert scheduler.advance(0.5) == 0
        assert calls == []
        assert scheduler.advance(0.5) == 1
        assert calls == ["a"]
        assert scheduler.now == 1.0

    def test_fires_in_due_order(self, scheduler):
        calls = []
        scheduler.call_later(2.0, lambda: calls.append("late"))
        scheduler.call_later(1.0, lambda: calls.append("early"))
        scheduler.call_later(1.0, lambda: calls.append("early-second"))

        scheduler.advance(5.0)

        assert calls == ["early", "early-second", "late"]

    def test_cancelled_timer_does_not_fire(self, scheduler):
        calls = []
        handle = scheduler.call_later(1.0, lambda: calls.append("x"))

        handle.cancel()
        handle.cancel()

        assert handle.cancelled is True
        assert scheduler.pending_count == 0
        assert scheduler.advance(2.0) == 0
        assert calls == []

    def test_timer_scheduled_from_callback(self, scheduler):
        """A callback may schedule another timer within the same advance."""
        calls = []

        def first():
            calls.append("first")
            scheduler.call_later(0.5, lambda: calls.append("second"))

        scheduler.call_later(1.0, first)
        scheduler.advance(2.0)

        assert calls == ["first", "second"]

    def test_run_all(self, scheduler):
        calls = []
        scheduler.call_later(10.0, lambda: calls.append(1))
        scheduler.call_later(20.0, lambda: calls.append(2))

        assert scheduler.pending_count == 2
        assert scheduler.run_all() == 2
        assert calls == [1, 2]
        assert scheduler.run_all() == 0


class TestThreadingScheduler:
    """Tests for threading.Timer backed timers."""

    def test_callback_runs(self):
        fired = threading.Event()
        ThreadingScheduler().call_later(0.01, fired.set)
        assert fired.wait(timeout=2.0)

    def test_cancel(self):
        fired = threading.Event()
        handle = ThreadingScheduler().call_later(0.2, fired.set)

        handle.cancel()

        assert handle.cancelled is True
        assert not fired.wait(timeout=0.4)


class TestAsyncioScheduler:
    """Tests for event-loop backed timers."""

    def test_callback_runs_on_running_loop(self):
        async def scenario():
            fired = asyncio.Event()
            AsyncioScheduler().call_later(0.01, fired.set)
            await asyncio.wait_for(fired.wait(), timeout=2.0)
            return fired.is_set()

        assert asyncio.run(scenario()) is True

    def test_cancel(self):
        async def scenario():
            calls = []
            handle = AsyncioScheduler().call_later(0.01, lambda: calls.append(1))
            handle.cancel()
            await asyncio.sleep(0.05)
            return handle.cancelled, calls

        cancelled, calls = asyncio.run(scenario())
        assert cancelled is True
        assert calls == []
