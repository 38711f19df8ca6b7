"""
pagebuilder/builder.py - Page builder controller

Thin caller around the editing core: seeds the SectionStore from a
PageRepository, opens at most one EditSession at a time, renders through a
PageRenderer and saves or publishes the committed list. Failures talking to
the repository are classified and kept in an error list with recovery
actions instead of being raised. Kinds with an automatic recovery policy
(network failures) are also retried on the scheduler with backoff.
"""

from __future__ import annotations
from typing import Callable, Dict, List, Optional
import logging

from pagebuilder.config import PageBuilderConfig, get_config
from pagebuilder.core.enums import PreviewDevice
from pagebuilder.core.section import Section
from pagebuilder.core.store import SectionStore
from pagebuilder.editing import EditSession, Scheduler, ThreadingScheduler, TimerHandle
from pagebuilder.errors import (
    PageBuilderError,
    RecoveryAction,
    classify_exception,
    create_page_builder_error,
    generate_recovery_actions,
    get_retry_delay,
    log_page_builder_error,
    should_retry_error,
)
from pagebuilder.persistence import JsonFilePageRepository, PageRepository
from pagebuilder.rendering import PageRenderer, RenderedPage, RendererRegistry

logger = logging.getLogger("pagebuilder.builder")


class PageBuilder:
    """
    Editing controller for one page.

    Usage:
        builder = PageBuilder.from_config("home")
        builder.open()
        hero_id = builder.store.add_section("hero")
        with builder.edit(hero_id) as session:
            session.update_content("Welcome")
            session.save()
        builder.save_page()
    """

    def __init__(
        self,
        page_id: str,
        repository: PageRepository,
        config: Optional[PageBuilderConfig] = None,
        scheduler: Optional[Scheduler] = None,
        registry: Optional[RendererRegistry] = None,
    ):
        self.page_id = page_id
        self.config = config or get_config()
        self._repository = repository
        self._scheduler = scheduler or ThreadingScheduler()

        editor = self.config.editor
        self.store = SectionStore(
            page_id=page_id,
            real_time_preview=editor.real_time_preview,
            history_limit=editor.history_limit,
            preview_device=PreviewDevice(editor.default_preview_device),
        )
        self.renderer = PageRenderer(
            self.store,
            registry=registry,
            show_error_details=editor.show_error_details or self.config.debug,
        )

        self._session: Optional[EditSession] = None
        self._errors: List[PageBuilderError] = []
        self._recovery: Dict[str, List[RecoveryAction]] = {}
        self._retry_timers: Dict[str, TimerHandle] = {}

        self.is_loading = False
        self.is_saving = False
        self.is_publishing = False

    @classmethod
    def from_config(
        cls,
        page_id: str,
        config: Optional[PageBuilderConfig] = None,
        scheduler: Optional[Scheduler] = None,
        registry: Optional[RendererRegistry] = None,
    ) -> "PageBuilder":
        """Builder backed by the JSON page repository under config.storage.pages_dir."""
        config = config or get_config()
        repository = JsonFilePageRepository(config.storage.pages_dir)
        return cls(page_id, repository, config=config, scheduler=scheduler, registry=registry)

    # =========================================================================
    # LOAD
    # =========================================================================

    def open(self, attempt: int = 0) -> bool:
        """
        Load the page into the store.

        Args:
            attempt: Automatic retries already made for this load

        Returns:
            False if the repository failed (error recorded)
        """
        self.is_loading = True
        try:
            sections = self._repository.load_page(self.page_id)
        except Exception as exc:
            error = self._record_failure(exc, "Load Page", retry=self.open)
            self._schedule_auto_retry(error, attempt, lambda: self.open(attempt + 1))
            return False
        finally:
            self.is_loading = False

        self.store.load(sections)
        return True

    # =========================================================================
    # EDITING
    # =========================================================================

    @property
    def session(self) -> Optional[EditSession]:
        """Currently open edit session, if any."""
        if self._session is not None and not self._session.is_open:
            self._session = None
        return self._session

    def edit(self, section_id: str) -> EditSession:
        """
        Open an editor on a section, closing any editor already open.

        Raises:
            KeyError: If the section does not exist
        """
        if self._session is not None:
            self._session.close()

        self._session = EditSession(
            self.store,
            section_id,
            scheduler=self._scheduler,
            debounce_seconds=self.config.editor.debounce_seconds,
            on_close=self._on_session_closed,
        )
        self.store.select_section(section_id)
        return self._session

    def _on_session_closed(self, session: EditSession) -> None:
        if self._session is session:
            self._session = None

    # =========================================================================
    # RENDER
    # =========================================================================

    def render(self, is_preview: bool = True) -> RenderedPage:
        return self.renderer.render_page(is_preview=is_preview)


    # =========================================================================
    # SAVE / PUBLISH
    # =========================================================================

    def save_page(self) -> bool:
        """Save the committed list as a draft."""
        return self._persist(publish=False)

    def publish_page(self) -> bool:
        """Save the committed list and publish it."""
        return self._persist(publish=True)

    def _persist(self, publish: bool, attempt: int = 0) -> bool:
        label = "Publish Page" if publish else "Save Page"
        # Full wire form, so unrecognised keys kept on load survive the save
        sections = [Section.from_dict(data) for data in self.store.snapshot()]

        if publish:
            self.is_publishing = True
        else:
            self.is_saving = True
        try:
            self._repository.save_page(self.page_id, sections, publish=publish)
        except Exception as exc:
            error = self._record_failure(
                exc,
                label,
                retry=lambda: self._persist(publish),
                reset=self.store.discard_changes,
            )
            self._schedule_auto_retry(error, attempt, lambda: self._persist(publish, attempt + 1))
            return False
        finally:
            self.is_saving = False
            self.is_publishing = False

        self.store.checkpoint(label)
        self.store.mark_saved()
        logger.info(f"{label}: '{self.page_id}' with {len(sections)} sections")
        return True

    @property
    def has_unsaved_changes(self) -> bool:
        return self.store.has_unsaved_changes

    # =========================================================================
    # ERRORS
    # =========================================================================

    @property
    def errors(self) -> List[PageBuilderError]:
        return list(self._errors)

    def recovery_actions(self, error: PageBuilderError) -> List[RecoveryAction]:
        return list(self._recovery.get(error.error_id, []))

    def dismiss_error(self, index: int) -> None:
        """Drop an error, cancelling its automatic retry."""
        if 0 <= index < len(self._errors):
            self._forget(self._errors[index].error_id)

    def clear_errors(self) -> None:
        for error in list(self._errors):
            self._forget(error.error_id)

    @property
    def pending_retry_count(self) -> int:
        return len(self._retry_timers)

    def _record_failure(
        self,
        exc: Exception,
        component: str,
        retry: Optional[Callable[[], object]] = None,
        reset: Optional[Callable[[], None]] = None,
    ) -> PageBuilderError:
        error = create_page_builder_error(exc, kind=classify_exception(exc), component=component)
        log_page_builder_error(error, page_id=self.page_id)

        def retry_action() -> None:
            self._forget(error.error_id)
            retry()

        def reset_action() -> None:
            self._forget(error.error_id)
            reset()

        self._errors.append(error)
        self._recovery[error.error_id] = generate_recovery_actions(
            error,
            on_retry=retry_action if retry is not None else None,
            on_reset=reset_action if reset is not None else None,
        )
        return error

    def _schedule_auto_retry(self, error: PageBuilderError, attempt: int, retry: Callable[[], object]) -> None:
        """Arm a retry for kinds whose policy allows another attempt."""
        if not should_retry_error(error, attempt):
            return
        delay = get_retry_delay(error, attempt)

        def fire() -> None:
            if self._retry_timers.pop(error.error_id, None) is None:
                return
            self._forget(error.error_id)
            logger.info(f"Automatic retry {attempt + 1} of {error.component} for '{self.page_id}'")
            retry()

        self._retry_timers[error.error_id] = self._scheduler.call_later(delay, fire)
        logger.info(f"{error.component} failed, retrying in {delay:.1f}s")

    def _forget(self, error_id: str) -> None:
        self._errors = [e for e in self._errors if e.error_id != error_id]
        self._recovery.pop(error_id, None)
        timer = self._retry_timers.pop(error_id, None)
        if timer is not None:
            timer.cancel()

    # =========================================================================
    # TEARDOWN
    # =========================================================================

    def close(self) -> None:
        """Close any open editor, cancel pending retries and tear the store down."""
        if self._session is not None:
            self._session.close()
        self.clear_errors()
        self.store.reset()

    def __enter__(self) -> "PageBuilder":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
