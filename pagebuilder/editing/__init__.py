"""
pagebuilder.editing - Draft/commit editing protocol
"""

from .scheduler import (
    TimerHandle,
    Scheduler,
    ThreadingScheduler,
    AsyncioScheduler,
    ManualScheduler,
)
from .session import (
    EditSession,
    SessionClosedError,
    DEFAULT_DEBOUNCE_SECONDS,
)

__all__ = [
    "TimerHandle",
    "Scheduler",
    "ThreadingScheduler",
    "AsyncioScheduler",
    "ManualScheduler",
    "EditSession",
    "SessionClosedError",
    "DEFAULT_DEBOUNCE_SECONDS",
]
