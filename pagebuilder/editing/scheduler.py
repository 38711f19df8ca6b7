"""
editing/scheduler.py - Timer sources for debounced commits

An EditSession never sleeps or starts threads itself; it asks a Scheduler
for a cancellable one-shot timer. Hosts pick the scheduler that matches
their event loop, tests use ManualScheduler and advance a virtual clock.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Callable, List, Optional
import asyncio
import itertools
import logging
import threading

logger = logging.getLogger("pagebuilder.editing.scheduler")


TimerCallback = Callable[[], None]


class TimerHandle(ABC):
    """A pending one-shot timer."""

    @abstractmethod
    def cancel(self) -> None:
        """Prevent the callback from running. Safe to call more than once."""

    @property
    @abstractmethod
    def cancelled(self) -> bool:
        ...


class Scheduler(ABC):
    """Source of one-shot timers."""

    @abstractmethod
    def call_later(self, delay: float, callback: TimerCallback) -> TimerHandle:
        """
        Run callback once after delay seconds.

        Args:
            delay: Seconds to wait
            callback: Zero-argument function

        Returns:
            Handle that can cancel the timer
        """


# =============================================================================
# THREADING
# =============================================================================

class _ThreadTimerHandle(TimerHandle):
    def __init__(self, timer: threading.Timer):
        self._timer = timer
        self._cancelled = False

    def cancel(self) -> None:
        self._cancelled = True
        self._timer.cancel()

    @property
    def cancelled(self) -> bool:
        return self._cancelled


class ThreadingScheduler(Scheduler):
    """Timers backed by threading.Timer daemon threads."""

    def call_later(self, delay: float, callback: TimerCallback) -> TimerHandle:
        timer = threading.Timer(delay, callback)
        timer.daemon = True
        timer.start()
        return _ThreadTimerHandle(timer)


# =============================================================================
# ASYNCIO
# =============================================================================

class _AsyncioTimerHandle(TimerHandle):
    def __init__(self, handle: asyncio.TimerHandle):
        self._handle = handle

    def cancel(self) -> None:
        self._handle.cancel()

    @property
    def cancelled(self) -> bool:
        return self._handle.cancelled()


class AsyncioScheduler(Scheduler):
    """
    Timers on an asyncio event loop.

    Without an explicit loop, the running loop at call time is used, so
    call_later must then be called from inside that loop.
    """

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        self._loop = loop

    def call_later(self, delay: float, callback: TimerCallback) -> TimerHandle:
        loop = self._loop or asyncio.get_running_loop()
        return _AsyncioTimerHandle(loop.call_later(delay, callback))


# =============================================================================
# MANUAL (VIRTUAL CLOCK)
# =============================================================================

@dataclass
class _ManualTimer(TimerHandle):
    due: float
    seq: int
    callback: TimerCallback
    _cancelled: bool = field(default=False, repr=False)
    fired: bool = False

    def cancel(self) -> None:
        self._cancelled = True

    @property
    def cancelled(self) -> bool:
        return self._cancelled


class ManualScheduler(Scheduler):
    """
    Deterministic scheduler driven by advance().

    Usage:
        scheduler = ManualScheduler()
        scheduler.call_later(1.0, callback)
        scheduler.advance(0.5)   # nothing fires
        scheduler.advance(0.5)   # callback fires
    """

    def __init__(self, start: float = 0.0):
        self._now = start
        self._timers: List[_ManualTimer] = []
        self._seq = itertools.count()

    @property
    def now(self) -> float:
        return self._now

    @property
    def pending_count(self) -> int:
        return sum(1 for t in self._timers if not t.cancelled and not t.fired)

    def call_later(self, delay: float, callback: TimerCallback) -> TimerHandle:
        timer = _ManualTimer(due=self._now + max(delay, 0.0), seq=next(self._seq), callback=callback)
        self._timers.append(timer)
        return timer

    def advance(self, seconds: float) -> int:
        """
        Move the clock forward, firing due timers in due-time order.

        Returns:
            Number of callbacks fired
        """
        target = self._now + seconds
        fired = 0
        while True:
            due = [t for t in self._timers if not t.cancelled and not t.fired and t.due <= target]
            if not due:
                break
            timer = min(due, key=lambda t: (t.due, t.seq))
            self._now = timer.due
            timer.fired = True
            timer.callback()
            fired += 1
        self._now = target
        self._timers = [t for t in self._timers if not t.cancelled and not t.fired]
        return fired

    def run_all(self) -> int:
        """Fire every pending timer regardless of due time."""
        pending = [t for t in self._timers if not t.cancelled and not t.fired]
        if not pending:
            return 0
        return self.advance(max(t.due for t in pending) - self._now)
