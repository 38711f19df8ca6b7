"""
pagebuilder/events.py - Store events and instance-scoped dispatcher

Each SectionStore owns its own EventDispatcher; there is no process-wide
event bus. Handlers are called synchronously in subscription order and a
failing handler never interrupts the store operation that emitted the event.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, Dict, List, Optional
import logging
import uuid


logger = logging.getLogger("pagebuilder.events")


# =============================================================================
# EVENT TYPES
# =============================================================================

class StoreEventType(str, Enum):
    """Types of section store events."""

    SECTION_ADDED = "section_added"
    SECTION_UPDATED = "section_updated"
    SECTION_MOVED = "section_moved"
    SECTION_DELETED = "section_deleted"
    SECTION_DUPLICATED = "section_duplicated"

    SELECTION_CHANGED = "selection_changed"
    PREVIEW_TOGGLED = "preview_toggled"
    PREVIEW_DEVICE_CHANGED = "preview_device_changed"

    PAGE_LOADED = "page_loaded"
    PAGE_RESET = "page_reset"
    HISTORY_CHANGED = "history_changed"


@dataclass(frozen=True)
class StoreEvent:
    """An event emitted after a store mutation."""

    event_type: StoreEventType
    page_id: str = ""
    section_id: Optional[str] = None
    data: Dict[str, Any] = field(default_factory=dict)
    event_id: str = field(default_factory=lambda: uuid.uuid4().hex[:8])
    timestamp: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())

    def to_dict(self) -> Dict[str, Any]:
        return {
            "event_type": self.event_type.value,
            "page_id": self.page_id,
            "section_id": self.section_id,
            "data": self.data,
            "event_id": self.event_id,
            "timestamp": self.timestamp,
        }


EventHandler = Callable[[StoreEvent], None]


# =============================================================================
# DISPATCHER
# =============================================================================

class EventDispatcher:
    """
    Instance-scoped event dispatcher.

    Usage:
        dispatcher = EventDispatcher(page_id="home")
        dispatcher.subscribe(StoreEventType.SECTION_UPDATED, handler)
        dispatcher.subscribe_all(audit_log)
        dispatcher.emit(StoreEvent(StoreEventType.SECTION_UPDATED, ...))
    """

    def __init__(self, page_id: str = "", max_history: int = 100):
        """
        Initialize the event dispatcher.

        Args:
            page_id: Page the events belong to
            max_history: Maximum events to retain in history
        """
        self._page_id = page_id
        self._max_history = max_history
        self._handlers: Dict[StoreEventType, List[EventHandler]] = {}
        self._wildcard_handlers: List[EventHandler] = []
        self._history: List[StoreEvent] = []
        self._paused = False

    @property
    def page_id(self) -> str:
        return self._page_id

    def subscribe(self, event_type: StoreEventType, handler: EventHandler) -> bool:
        """
        Subscribe to events of a specific type.

        Returns:
            True if the handler was added, False if already subscribed
        """
        handlers = self._handlers.setdefault(event_type, [])
        if handler in handlers:
            return False
        handlers.append(handler)
        logger.debug(f"Subscribed handler to {event_type.value}")
        return True

    def subscribe_all(self, handler: EventHandler) -> bool:
        """Subscribe to every event type."""
        if handler in self._wildcard_handlers:
            return False
        self._wildcard_handlers.append(handler)
        return True

    def unsubscribe(self, event_type: StoreEventType, handler: EventHandler) -> bool:
        """Remove a type-specific handler. Returns True if it was removed."""
        handlers = self._handlers.get(event_type, [])
        if handler in handlers:
            handlers.remove(handler)
            return True
        return False

    def unsubscribe_all(self, handler: EventHandler) -> bool:
        """Remove a wildcard handler. Returns True if it was removed."""
        if handler in self._wildcard_handlers:
            self._wildcard_handlers.remove(handler)
            return True
        return False

    def emit(self, event: StoreEvent) -> None:
        """
        Emit an event to all subscribers.

        Args:
            event: Event to emit
        """
        if self._paused:
            logger.debug(f"Dispatcher paused, dropping: {event.event_type.value}")
            return

        self._history.append(event)
        if len(self._history) > self._max_history:
            self._history = self._history[-self._max_history:]

        for handler in list(self._handlers.get(event.event_type, [])):
            try:
                handler(event)
            except Exception as e:
                logger.error(f"Handler failed for {event.event_type.value}: {e}")

        for handler in list(self._wildcard_handlers):
            try:
                handler(event)
            except Exception as e:
                logger.error(f"Wildcard handler failed: {e}")

    def pause(self) -> None:
        """Pause event emission (events are dropped)."""
        self._paused = True

    def resume(self) -> None:
        self._paused = False

    @property
    def is_paused(self) -> bool:
        return self._paused

    def clear_handlers(self) -> None:
        self._handlers.clear()
        self._wildcard_handlers.clear()

    def get_history(
        self,
        limit: int = 20,
        event_type: Optional[StoreEventType] = None,
    ) -> List[StoreEvent]:
        """
        Get recent events, newest last.

        Args:
            limit: Maximum events to return
            event_type: Filter by type (optional)
        """
        history = self._history
        if event_type:
            history = [e for e in history if e.event_type == event_type]
        return history[-limit:]

    def clear_history(self) -> None:
        self._history.clear()

    @property
    def handler_count(self) -> int:
        count = sum(len(handlers) for handlers in self._handlers.values())
        return count + len(self._wildcard_handlers)

    @property
    def event_count(self) -> int:
        return len(self._history)
