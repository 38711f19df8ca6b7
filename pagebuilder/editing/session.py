"""
editing/session.py - Draft/commit editing protocol

An EditSession is opened on one committed section. It clones the section
into draft state, applies operator edits to the draft, and pushes the draft
into the SectionStore:

- settings and field edits commit immediately when real-time preview is on
- content edits commit immediately and also arm a debounce timer that
  re-commits the same draft once typing pauses (and records history)
- save() validates, commits once and closes; cancel() just closes

Every commit carries the complete draft, so the last commit always wins.

INVARIANT: at most one debounce timer is pending per session, and a timer
that fires after the session closed does nothing.
"""

from __future__ import annotations
from typing import Any, Callable, Dict, List, Optional
import copy
import logging
import threading

from pagebuilder.core.paths import set_path
from pagebuilder.core.section import Section
from pagebuilder.core.store import IMMUTABLE_FIELDS, SectionStore
from pagebuilder.validators import ValidationError, format_errors, validate_section

from .scheduler import Scheduler, ThreadingScheduler, TimerHandle

logger = logging.getLogger("pagebuilder.editing.session")


DEFAULT_DEBOUNCE_SECONDS = 1.0

Validator = Callable[[Section, Dict[str, Any]], List[ValidationError]]


class SessionClosedError(RuntimeError):
    """Raised when a closed EditSession is used."""


class EditSession:
    """
    Draft state for editing one section.

    Usage:
        with EditSession(store, section_id, scheduler=scheduler) as session:
            session.update_config("hero.overlayOpacity", 0.5)
            session.update_content("Welcome")
            if not session.save():
                show(session.errors)
    """

    def __init__(
        self,
        store: SectionStore,
        section_id: str,
        scheduler: Optional[Scheduler] = None,
        debounce_seconds: float = DEFAULT_DEBOUNCE_SECONDS,
        validator: Validator = validate_section,
        on_close: Optional[Callable[["EditSession"], None]] = None,
    ):
        """
        Open a session on a committed section.

        Args:
            store: Store holding the committed section
            section_id: Section to edit
            scheduler: Timer source for debounced commits
            debounce_seconds: Quiet period before a content edit is re-committed
            validator: Validation function run on every draft change
            on_close: Called once when the session closes

        Raises:
            KeyError: If the store has no section with section_id
        """
        section = store.get_section(section_id)
        if section is None:
            raise KeyError(f"No section with id {section_id}")

        self._store = store
        self._scheduler = scheduler or ThreadingScheduler()
        self._debounce_seconds = debounce_seconds
        self._validator = validator
        self._on_close = on_close

        self._local_section = section
        self._local_settings: Dict[str, Any] = copy.deepcopy(section.settings)
        self._errors: List[ValidationError] = []

        self._timer: Optional[TimerHandle] = None
        self._generation = 0
        self._closed = False
        self._lock = threading.RLock()

        self._revalidate()
        logger.debug(f"Opened edit session on {section_id}")

    # =========================================================================
    # DRAFT STATE
    # =========================================================================

    @property
    def section_id(self) -> str:
        return self._local_section.id

    @property
    def local_section(self) -> Section:
        return self._local_section

    @property
    def local_settings(self) -> Dict[str, Any]:
        return self._local_settings

    @property
    def content(self) -> str:
        return self._local_section.content

    @property
    def errors(self) -> List[ValidationError]:
        """Errors from the latest validation pass."""
        return list(self._errors)

    @property
    def can_save(self) -> bool:
        return not self._errors

    @property
    def is_open(self) -> bool:
        return not self._closed

    @property
    def has_pending_commit(self) -> bool:
        return self._timer is not None and not self._timer.cancelled

    # =========================================================================
    # EDITS
    # =========================================================================

    def update_config(self, path: str, value: Any) -> None:
        """
        Set a settings value by dotted path, e.g. "hero.overlayOpacity".

        Missing intermediate maps are created.
        """
        with self._lock:
            self._ensure_open()
            set_path(self._local_settings, path, copy.deepcopy(value))
            self._revalidate()
            if self._store.real_time_preview:
                self._commit()

    def update_section_fields(self, patch: Dict[str, Any]) -> None:
        """
        Merge non-content section fields (visibility) into the draft.

        content, id, type and order are not accepted here and are ignored.
        """
        with self._lock:
            self._ensure_open()
            for key, value in patch.items():
                if key in ("is_visible", "isVisible"):
                    self._local_section.is_visible = bool(value)
                elif key == "content" or key in IMMUTABLE_FIELDS:
                    logger.warning(f"update_section_fields: '{key}' cannot be changed here, ignoring")
                else:
                    logger.warning(f"update_section_fields: unknown field '{key}', ignoring")
            self._revalidate()
            if self._store.real_time_preview:
                self._commit()

    def update_content(self, text: str) -> None:
        """
        Replace the draft content.

        With real-time preview on, commits now and (re)arms the debounce
        timer; an earlier pending timer is cancelled first.
        """
        with self._lock:
            self._ensure_open()
            self._local_section.content = "" if text is None else str(text)
            self._revalidate()
            if self._store.real_time_preview:
                self._commit()
                self._arm_debounce()

    # =========================================================================
    # LIFECYCLE
    # =========================================================================

    def save(self) -> bool:
        """
        Validate and commit the draft, then close the session.

        Returns:
            True if saved. False leaves the store untouched and the session
            open with errors populated.
        """
        with self._lock:
            self._ensure_open()
            self._revalidate()
            if self._errors:
                logger.info(f"Save blocked for {self.section_id}:\n{format_errors(self._errors)}")
                return False

            self._cancel_timer()
            self._commit(description="Save section")
            self.close()
            return True

    def cancel(self) -> None:
        """Close without a final commit. Earlier preview commits stay."""
        self.close()

    def close(self) -> None:
        """Tear the session down. Idempotent."""
        with self._lock:
            if self._closed:
                return
            self._cancel_timer()
            self._closed = True
            logger.debug(f"Closed edit session on {self.section_id}")

        if self._on_close is not None:
            try:
                self._on_close(self)
            except Exception as e:
                logger.error(f"on_close callback failed for {self.section_id}: {e}")

    def __enter__(self) -> "EditSession":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # =========================================================================
    # INTERNALS
    # =========================================================================

    def _ensure_open(self) -> None:
        if self._closed:
            raise SessionClosedError(f"Edit session on {self.section_id} is closed")

    def _revalidate(self) -> None:
        self._errors = self._validator(self._local_section, self._local_settings)

    def _draft_patch(self) -> Dict[str, Any]:
        return {
            "content": self._local_section.content,
            "settings": copy.deepcopy(self._local_settings),
            "is_visible": self._local_section.is_visible,
        }

    def _commit(self, description: Optional[str] = None) -> None:
        self._store.update_section(self.section_id, self._draft_patch(), description=description)

    def _arm_debounce(self) -> None:
        self._cancel_timer()
        self._generation += 1
        generation = self._generation
        self._timer = self._scheduler.call_later(
            self._debounce_seconds, lambda: self._on_debounce(generation)
        )

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        self._generation += 1

    def _on_debounce(self, generation: int) -> None:
        with self._lock:
            if self._closed or generation != self._generation:
                logger.debug(f"Stale debounce timer for {self.section_id} ignored")
                return
            self._timer = None
            try:
                self._commit(description="Edit content")
            except Exception as e:
                logger.error(f"Debounced commit failed for {self.section_id}: {e}")
