"""
Unit tests for EventDispatcher.

Tests event subscription, emission, and history.
"""

import pytest
from unittest.mock import Mock

from pagebuilder.events import EventDispatcher, StoreEvent, StoreEventType


def make_event(event_type=StoreEventType.SECTION_UPDATED, section_id="s1"):
    return StoreEvent(event_type=event_type, page_id="home", section_id=section_id)


class TestEventDispatcherBasics:
    """Tests for basic EventDispatcher functionality."""

    def test_creation(self):
        """Can create an EventDispatcher."""
        dispatcher = EventDispatcher(page_id="home")
        assert dispatcher.page_id == "home"
        assert dispatcher.handler_count == 0
        assert dispatcher.event_count == 0

    def test_event_to_dict(self):
        data = make_event().to_dict()
        assert data["event_type"] == "section_updated"
        assert data["section_id"] == "s1"
        assert len(data["event_id"]) == 8


class TestSubscription:
    """Tests for event subscription."""

    def test_subscribe_to_event_type(self):
        dispatcher = EventDispatcher()
        handler = Mock()

        assert dispatcher.subscribe(StoreEventType.SECTION_ADDED, handler) is True
        assert dispatcher.handler_count == 1

    def test_duplicate_subscription_ignored(self):
        dispatcher = EventDispatcher()
        handler = Mock()
        dispatcher.subscribe(StoreEventType.SECTION_ADDED, handler)

        assert dispatcher.subscribe(StoreEventType.SECTION_ADDED, handler) is False
        assert dispatcher.handler_count == 1

    def test_unsubscribe(self):
        dispatcher = EventDispatcher()
        handler = Mock()
        dispatcher.subscribe(StoreEventType.SECTION_ADDED, handler)

        assert dispatcher.unsubscribe(StoreEventType.SECTION_ADDED, handler) is True
        assert dispatcher.handler_count == 0

    def test_unsubscribe_nonexistent(self):
        dispatcher = EventDispatcher()
        assert dispatcher.unsubscribe(StoreEventType.SECTION_ADDED, Mock()) is False

    def test_unsubscribe_all(self):
        dispatcher = EventDispatcher()
        handler = Mock()
        dispatcher.subscribe_all(handler)

        assert dispatcher.unsubscribe_all(handler) is True
        assert dispatcher.handler_count == 0


class TestEmission:
    """Tests for event emission."""

    def test_emit_to_type_handler(self):
        dispatcher = EventDispatcher()
        handler = Mock()
        dispatcher.subscribe(StoreEventType.SECTION_UPDATED, handler)
        event = make_event()

        dispatcher.emit(event)

        handler.assert_called_once_with(event)

    def test_emit_skips_other_types(self):
        dispatcher = EventDispatcher()
        handler = Mock()
        dispatcher.subscribe(StoreEventType.SECTION_DELETED, handler)

        dispatcher.emit(make_event(StoreEventType.SECTION_ADDED))

        handler.assert_not_called()

    def test_wildcard_receives_everything(self):
        dispatcher = EventDispatcher()
        handler = Mock()
        dispatcher.subscribe_all(handler)

        dispatcher.emit(make_event(StoreEventType.SECTION_ADDED))
        dispatcher.emit(make_event(StoreEventType.PAGE_LOADED))

        assert handler.call_count == 2

    def test_handler_error_does_not_stop_others(self):
        dispatcher = EventDispatcher()
        failing = Mock(side_effect=RuntimeError("boom"))
        working = Mock()
        dispatcher.subscribe(StoreEventType.SECTION_UPDATED, failing)
        dispatcher.subscribe(StoreEventType.SECTION_UPDATED, working)

        dispatcher.emit(make_event())

        working.assert_called_once()

    def test_paused_dispatcher_drops_events(self):
        dispatcher = EventDispatcher()
        handler = Mock()
        dispatcher.subscribe_all(handler)

        dispatcher.pause()
        dispatcher.emit(make_event())
        assert dispatcher.is_paused is True
        handler.assert_not_called()

        dispatcher.resume()
        dispatcher.emit(make_event())
        handler.assert_called_once()


class TestHistory:
    """Tests for event history."""

    def test_history_limit(self):
        dispatcher = EventDispatcher(max_history=3)
        for i in range(5):
            dispatcher.emit(make_event(section_id=f"s{i}"))

        assert dispatcher.event_count == 3
        assert [e.section_id for e in dispatcher.get_history()] == ["s2", "s3", "s4"]

    def test_history_filter(self):
        dispatcher = EventDispatcher()
        dispatcher.emit(make_event(StoreEventType.SECTION_ADDED))
        dispatcher.emit(make_event(StoreEventType.SECTION_DELETED))

        history = dispatcher.get_history(event_type=StoreEventType.SECTION_DELETED)

        assert len(history) == 1

    def test_clear(self):
        dispatcher = EventDispatcher()
        dispatcher.subscribe_all(Mock())
        dispatcher.emit(make_event())

        dispatcher.clear_history()
        dispatcher.clear_handlers()

        assert dispatcher.event_count == 0
        assert dispatcher.handler_count == 0
