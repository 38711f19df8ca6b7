"""
core/store.py - Section Store

Owns the committed, ordered list of sections for one page, the current
selection and the real-time-preview flag. Every mutation goes through this
class; readers get SectionView snapshots they cannot mutate.

INVARIANTS:
- Section ids are unique within the store
- Orders are contiguous 0..n-1 after every operation
- A section's id and type never change after creation
"""

from __future__ import annotations
from typing import Any, Dict, Iterable, Iterator, List, Optional, Union
import copy
import logging
import threading

from pagebuilder.events import EventDispatcher, EventHandler, StoreEvent, StoreEventType

from .enums import DEVICE_VIEWPORTS, DeviceViewport, MoveDirection, PreviewDevice, SectionType, parse_section_type
from .history import DEFAULT_HISTORY_LIMIT, PageHistory
from .section import Section, SectionView, generate_section_id, thaw
from .settings import DEFAULT_CONTENT, default_settings

logger = logging.getLogger("pagebuilder.store")


# Patch keys a commit may never change
IMMUTABLE_FIELDS = frozenset({"id", "type", "order"})

# Patch key aliases accepted by update_section
_PATCH_FIELDS = {
    "content": "content",
    "settings": "settings",
    "is_visible": "is_visible",
    "isVisible": "is_visible",
}

_TIMESTAMP_KEYS = ("createdAt", "updatedAt")


def _without_timestamps(snapshot: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    return [{k: v for k, v in item.items() if k not in _TIMESTAMP_KEYS} for item in snapshot]


class SectionStore:
    """
    Authoritative committed state of a page being edited.

    Usage:
        store = SectionStore(page_id="home")
        hero_id = store.add_section(SectionType.HERO)
        store.update_section(hero_id, {"content": "Welcome"})
        store.move_section(hero_id, "down")
    """

    def __init__(
        self,
        page_id: str = "",
        real_time_preview: bool = True,
        history_limit: int = DEFAULT_HISTORY_LIMIT,
        preview_device: PreviewDevice = PreviewDevice.DESKTOP,
        dispatcher: Optional[EventDispatcher] = None,
    ):
        self._page_id = page_id
        self._sections: List[Section] = []
        self._selected_id: Optional[str] = None
        self._real_time_preview = real_time_preview
        self._preview_device = PreviewDevice(preview_device)
        self._history = PageHistory(limit=history_limit)
        self._baseline: List[Dict[str, Any]] = []
        self._dispatcher = dispatcher or EventDispatcher(page_id=page_id)
        self._lock = threading.RLock()

    # =========================================================================
    # READ SIDE
    # =========================================================================

    @property
    def page_id(self) -> str:
        return self._page_id

    @property
    def dispatcher(self) -> EventDispatcher:
        return self._dispatcher

    @property
    def sections(self) -> List[SectionView]:
        """Committed sections in order, as read-only views."""
        with self._lock:
            return [s.view() for s in self._sections]

    @property
    def section_ids(self) -> List[str]:
        with self._lock:
            return [s.id for s in self._sections]

    @property
    def selected_section_id(self) -> Optional[str]:
        return self._selected_id

    @property
    def selected_section(self) -> Optional[SectionView]:
        return self.get_view(self._selected_id) if self._selected_id else None

    @property
    def real_time_preview(self) -> bool:
        return self._real_time_preview

    @property
    def preview_device(self) -> PreviewDevice:
        return self._preview_device

    @property
    def preview_viewport(self) -> DeviceViewport:
        """Viewport size of the current preview device."""
        return DEVICE_VIEWPORTS[self._preview_device]

    def get_section(self, section_id: str) -> Optional[Section]:
        """Detached deep copy of a committed section, for editors."""
        with self._lock:
            section = self._find(section_id)
            return section.copy() if section else None

    def get_view(self, section_id: str) -> Optional[SectionView]:
        with self._lock:
            section = self._find(section_id)
            return section.view() if section else None

    def snapshot(self) -> List[Dict[str, Any]]:
        """Serialized committed list, in persistence shape."""
        with self._lock:
            return [s.to_dict() for s in self._sections]

    def subscribe(self, event_type: StoreEventType, handler: EventHandler) -> bool:
        return self._dispatcher.subscribe(event_type, handler)

    def __len__(self) -> int:
        return len(self._sections)

    def __contains__(self, section_id: object) -> bool:
        return any(s.id == section_id for s in self._sections)

    def __iter__(self) -> Iterator[SectionView]:
        return iter(self.sections)

    # =========================================================================
    # SECTION OPERATIONS
    # =========================================================================

    def add_section(
        self,
        section_type: Union[str, SectionType],
        template: Optional[Dict[str, Any]] = None,
    ) -> str:
        """
        Append a new section with default settings.

        Args:
            section_type: Variant to create
            template: Optional overrides for content, settings and is_visible

        Returns:
            Id of the new section

        Raises:
            ValueError: If section_type is not a known variant
        """
        known = parse_section_type(section_type)
        if known is None:
            raise ValueError(f"Unknown section type: {section_type}")

        template = template or {}
        settings = default_settings(known)
        settings.update(copy.deepcopy(template.get("settings") or {}))

        with self._lock:
            section = Section(
                id=generate_section_id(),
                type=known.value,
                order=len(self._sections),
                content=template.get("content", DEFAULT_CONTENT[known]),
                settings=settings,
                is_visible=bool(template.get("is_visible", template.get("isVisible", True))),
            )
            self._sections.append(section)
            logger.debug(f"Added {known.value} section {section.id} at order {section.order}")
            self._emit(StoreEventType.SECTION_ADDED, section.id, {"type": known.value, "order": section.order})
            return section.id

    def update_section(
        self,
        section_id: str,
        patch: Dict[str, Any],
        description: Optional[str] = None,
    ) -> bool:
        """
        Replace a committed section's content, settings or visibility.

        id, type and order are ignored if present in the patch. An unknown
        id is a logged no-op.

        Args:
            section_id: Section to update
            patch: New values keyed by field name
            description: If given, record a history checkpoint afterwards

        Returns:
            True if the section was updated
        """
        with self._lock:
            section = self._find(section_id)
            if section is None:
                logger.warning(f"update_section: no section with id {section_id}")
                return False

            changed = []
            for key, value in patch.items():
                if key in IMMUTABLE_FIELDS:
                    logger.warning(f"update_section: ignoring immutable field '{key}' on {section_id}")
                    continue
                attr = _PATCH_FIELDS.get(key)
                if attr is None:
                    logger.warning(f"update_section: ignoring unknown field '{key}' on {section_id}")
                    continue
                if attr == "settings":
                    value = copy.deepcopy(thaw(value or {}))
                elif attr == "content":
                    value = "" if value is None else str(value)
                else:
                    value = bool(value)
                setattr(section, attr, value)
                changed.append(attr)

            section.touch()
            self._emit(StoreEventType.SECTION_UPDATED, section_id, {"fields": changed})
            if description:
                self.checkpoint(description)
            return True

    def move_section(self, section_id: str, direction: Union[str, MoveDirection]) -> bool:
        """
        Swap a section with its neighbour.

        Moving the first section up or the last section down is a no-op.

        Returns:
            True if the section moved

        Raises:
            ValueError: If direction is not 'up' or 'down'
        """
        direction = MoveDirection(direction)
        with self._lock:
            index = self._index_of(section_id)
            if index is None:
                logger.warning(f"move_section: no section with id {section_id}")
                return False

            target = index - 1 if direction == MoveDirection.UP else index + 1
            if target < 0 or target >= len(self._sections):
                return False

            self._sections[index], self._sections[target] = self._sections[target], self._sections[index]
            self._renumber()
            self._emit(
                StoreEventType.SECTION_MOVED,
                section_id,
                {"direction": direction.value, "order": target},
            )
            return True

    def delete_section(self, section_id: str) -> bool:
        """
        Remove a section and renumber the rest.

        Clears the selection if it pointed at the removed section.
        """
        with self._lock:
            index = self._index_of(section_id)
            if index is None:
                logger.warning(f"delete_section: no section with id {section_id}")
                return False

            del self._sections[index]
            self._renumber()
            self._emit(StoreEventType.SECTION_DELETED, section_id)
            if self._selected_id == section_id:
                self.select_section(None)
            return True

    def duplicate_section(self, section_id: str) -> Optional[str]:
        """
        Insert a deep copy of a section directly after it.

        Returns:
            Id of the copy, or None if section_id is unknown
        """
        with self._lock:
            index = self._index_of(section_id)
            if index is None:
                logger.warning(f"duplicate_section: no section with id {section_id}")
                return None

            source = self._sections[index]
            clone = Section(
                id=generate_section_id(),
                type=source.type,
                content=source.content,
                settings=copy.deepcopy(source.settings),
                is_visible=source.is_visible,
                extra=copy.deepcopy(source.extra),
            )
            self._sections.insert(index + 1, clone)
            self._renumber()
            self._emit(StoreEventType.SECTION_DUPLICATED, clone.id, {"source_id": section_id})
            return clone.id

    def select_section(self, section_id: Optional[str]) -> bool:
        """
        Select a section, or clear the selection with None.

        Returns:
            False if section_id is unknown (selection unchanged)
        """
        with self._lock:
            if section_id is not None and self._find(section_id) is None:
                logger.warning(f"select_section: no section with id {section_id}")
                return False
            if section_id != self._selected_id:
                self._selected_id = section_id
                self._emit(StoreEventType.SELECTION_CHANGED, section_id)
            return True

    def set_real_time_preview(self, enabled: bool) -> None:
        enabled = bool(enabled)
        if enabled != self._real_time_preview:
            self._real_time_preview = enabled
            self._emit(StoreEventType.PREVIEW_TOGGLED, None, {"enabled": enabled})

    def set_preview_device(self, device: Union[str, PreviewDevice]) -> None:
        device = PreviewDevice(device)
        if device != self._preview_device:
            self._preview_device = device
            self._emit(StoreEventType.PREVIEW_DEVICE_CHANGED, None, {"device": device.value})

    # =========================================================================
    # PAGE LIFECYCLE
    # =========================================================================

    def load(self, sections: Iterable[Union[Section, Dict[str, Any]]]) -> None:
        """
        Seed the store with a persisted page.

        Sections are sorted by their stored order and renumbered. Duplicate
        ids get a fresh id. The loaded list becomes the saved baseline and
        the first history entry.
        """
        loaded: List[Section] = []
        seen = set()
        for item in sections:
            section = item.copy() if isinstance(item, Section) else Section.from_dict(item)
            if section.id in seen:
                new_id = generate_section_id()
                logger.warning(f"Duplicate section id {section.id} on load, reassigned to {new_id}")
                section.id = new_id
            seen.add(section.id)
            loaded.append(section)

        with self._lock:
            self._sections = sorted(loaded, key=lambda s: s.order)
            self._renumber()
            self._selected_id = None
            self._baseline = self.snapshot()
            self._history.clear()
            self._history.record(self._baseline, "Initial load")
            logger.info(f"Loaded page '{self._page_id}' with {len(self._sections)} sections")
            self._emit(StoreEventType.PAGE_LOADED, None, {"section_count": len(self._sections)})

    def reset(self) -> None:
        """Tear down all state."""
        with self._lock:
            self._sections = []
            self._selected_id = None
            self._baseline = []
            self._history.clear()
            self._emit(StoreEventType.PAGE_RESET)

    @property
    def has_unsaved_changes(self) -> bool:
        """True if the committed list differs from the last loaded or saved page."""
        with self._lock:
            return _without_timestamps(self.snapshot()) != _without_timestamps(self._baseline)

    def mark_saved(self) -> None:
        """Make the current committed list the saved baseline."""
        with self._lock:
            self._baseline = self.snapshot()

    def revert_section(self, section_id: str) -> bool:
        """
        Restore one section's content, settings and visibility from the saved baseline.

        Returns:
            False if the section is unknown or was never saved
        """
        with self._lock:
            saved = next((item for item in self._baseline if item.get("id") == section_id), None)
            if saved is None or self._find(section_id) is None:
                logger.warning(f"revert_section: no saved version of {section_id}")
                return False
            baseline = Section.from_dict(saved)
            return self.update_section(section_id, {
                "content": baseline.content,
                "settings": baseline.settings,
                "is_visible": baseline.is_visible,
            })

    def discard_changes(self) -> None:
        """Restore the last loaded or saved page."""
        with self._lock:
            self._restore(self._baseline)
            self.checkpoint("Discard changes")

    # =========================================================================
    # HISTORY
    # =========================================================================

    @property
    def history(self) -> PageHistory:
        return self._history

    @property
    def can_undo(self) -> bool:
        return self._history.can_undo

    @property
    def can_redo(self) -> bool:
        return self._history.can_redo

    def checkpoint(self, description: str = "") -> None:
        """Record the committed list as a history entry."""
        with self._lock:
            entry = self._history.record(self.snapshot(), description)
            self._emit(StoreEventType.HISTORY_CHANGED, None, {"action": "record", "entry_id": entry.entry_id})

    def undo(self) -> bool:
        with self._lock:
            entry = self._history.undo()
            if entry is None:
                return False
            self._restore(entry.sections)
            self._emit(StoreEventType.HISTORY_CHANGED, None, {"action": "undo", "entry_id": entry.entry_id})
            return True

    def redo(self) -> bool:
        with self._lock:
            entry = self._history.redo()
            if entry is None:
                return False
            self._restore(entry.sections)
            self._emit(StoreEventType.HISTORY_CHANGED, None, {"action": "redo", "entry_id": entry.entry_id})
            return True

    # =========================================================================
    # INTERNALS
    # =========================================================================

    def _find(self, section_id: Optional[str]) -> Optional[Section]:
        for section in self._sections:
            if section.id == section_id:
                return section
        return None

    def _index_of(self, section_id: str) -> Optional[int]:
        for index, section in enumerate(self._sections):
            if section.id == section_id:
                return index
        return None

    def _renumber(self) -> None:
        for index, section in enumerate(self._sections):
            section.order = index

    def _restore(self, snapshot: List[Dict[str, Any]]) -> None:
        self._sections = [Section.from_dict(item) for item in snapshot]
        self._renumber()
        if self._selected_id is not None and self._find(self._selected_id) is None:
            self.select_section(None)

    def _emit(
        self,
        event_type: StoreEventType,
        section_id: Optional[str] = None,
        data: Optional[Dict[str, Any]] = None,
    ) -> None:
        self._dispatcher.emit(StoreEvent(
            event_type=event_type,
            page_id=self._page_id,
            section_id=section_id,
            data=data or {},
        ))
