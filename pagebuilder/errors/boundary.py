"""
errors/boundary.py - Error isolation boundary

Wraps one renderable unit (a section, the editor panel). A failing render is
caught here, classified and replaced with an error card offering recovery
actions; siblings outside the boundary keep rendering.

State machine:
    OK --render raises--> ERRORED
    ERRORED --retry/reset action completes--> OK
    ERRORED --fallback/dismiss--> ERRORED (until remount())
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from html import escape
from typing import Callable, List, Optional, Union
import logging

from .recovery import (
    RecoveryAction,
    RecoveryActionType,
    RecoveryCallback,
    generate_recovery_actions,
    invoke_recovery_action,
)
from .taxonomy import ErrorKind, PageBuilderError, create_page_builder_error, log_page_builder_error

logger = logging.getLogger("pagebuilder.errors.boundary")


class BoundaryState(Enum):
    OK = "ok"
    ERRORED = "errored"


@dataclass
class ErrorCard:
    """Fallback panel shown in place of a failed child."""

    error: PageBuilderError
    actions: List[RecoveryAction] = field(default_factory=list)
    show_details: bool = False

    def render_html(self) -> str:
        """Render as HTML."""
        buttons = "".join(
            f'<button type="button" class="recovery-action" data-action="{a.type.value}">'
            f"{escape(a.label)}</button>"
            for a in self.actions
        )
        details = ""
        if self.show_details and self.error.details:
            details = f"<details><summary>Technical details</summary><pre>{escape(self.error.details)}</pre></details>"
        section_attr = f' data-section-id="{escape(self.error.section_id)}"' if self.error.section_id else ""
        return (
            f'<div class="error-card error-{self.error.kind.value}" role="alert"'
            f' data-error-id="{self.error.error_id}"{section_attr}>'
            f'<p class="error-component">{escape(self.error.component or "Component")} failed to render</p>'
            f'<p class="error-message">{escape(self.error.message)}</p>'
            f'<div class="recovery-actions">{buttons}</div>'
            f"{details}</div>"
        )

    def render_ascii(self) -> str:
        """Render as ASCII text."""
        lines = [
            f"[!] {self.error.component or 'Component'} failed to render",
            f"    {self.error.message}",
        ]
        for i, action in enumerate(self.actions, 1):
            lines.append(f"    ({i}) {action.label}")
        return "\n".join(lines)


ActionRef = Union[RecoveryAction, RecoveryActionType, str, int]


class ErrorBoundary:
    """
    Isolates failures of one child render.

    Usage:
        boundary = ErrorBoundary("Hero Section", section_id=sid, on_retry=refresh)
        html = boundary.render(lambda: hero_renderer(view, False))
        if boundary.state is BoundaryState.ERRORED:
            boundary.run_action(RecoveryActionType.RETRY)
    """

    def __init__(
        self,
        component: str,
        section_id: Optional[str] = None,
        on_retry: Optional[RecoveryCallback] = None,
        on_reset: Optional[RecoveryCallback] = None,
        on_fallback: Optional[RecoveryCallback] = None,
        on_error: Optional[Callable[[PageBuilderError], None]] = None,
        show_details: bool = False,
    ):
        self.component = component
        self.section_id = section_id
        self._on_retry = on_retry
        self._on_reset = on_reset
        self._on_fallback = on_fallback
        self._on_error = on_error
        self._show_details = show_details

        self._state = BoundaryState.OK
        self._error: Optional[PageBuilderError] = None
        self._actions: List[RecoveryAction] = []
        self._dismissed = False

    @property
    def state(self) -> BoundaryState:
        return self._state

    @property
    def error(self) -> Optional[PageBuilderError]:
        return self._error

    @property
    def actions(self) -> List[RecoveryAction]:
        return list(self._actions)

    @property
    def is_dismissed(self) -> bool:
        return self._dismissed

    def render(self, child: Callable[[], str]) -> str:
        """
        Render the child, or the error card if the child fails.

        No exception raised by the child escapes this call.
        """
        if self._state is BoundaryState.ERRORED:
            return self._fallback()
        try:
            return child()
        except Exception as exc:
            self._capture(exc)
            return self._fallback()

    def run_action(self, ref: ActionRef) -> bool:
        """
        Invoke one of the offered recovery actions.

        Args:
            ref: The action itself, its type, its type value or its index

        Returns:
            True if the action completed. A failing action is logged and
            the error card stays up.
        """
        action = self._resolve(ref)
        if action is None:
            logger.warning(f"{self.component}: no recovery action matching {ref!r}")
            return False

        if not invoke_recovery_action(action):
            return False

        if action.type in (RecoveryActionType.RETRY, RecoveryActionType.RESET):
            self._clear()
        elif action.type is RecoveryActionType.DISMISS:
            self._dismissed = True
        return True

    def remount(self) -> None:
        """Drop any captured error so the next render calls the child again."""
        self._clear()

    # =========================================================================
    # INTERNALS
    # =========================================================================

    def _capture(self, exc: Exception) -> None:
        error = create_page_builder_error(
            exc,
            kind=ErrorKind.RENDER,
            component=self.component,
            section_id=self.section_id,
        )
        self._error = error
        self._actions = generate_recovery_actions(
            error,
            on_retry=self._on_retry,
            on_reset=self._on_reset,
            on_fallback=self._on_fallback,
        )
        self._state = BoundaryState.ERRORED
        self._dismissed = False
        log_page_builder_error(error, section_id=self.section_id)

        if self._on_error is not None:
            try:
                self._on_error(error)
            except Exception as e:
                logger.error(f"{self.component}: error callback failed: {e}")

    def _clear(self) -> None:
        self._state = BoundaryState.OK
        self._error = None
        self._actions = []
        self._dismissed = False

    def _fallback(self) -> str:
        if self._dismissed or self._error is None:
            return ""
        return ErrorCard(self._error, self._actions, self._show_details).render_html()

    def _resolve(self, ref: ActionRef) -> Optional[RecoveryAction]:
        if isinstance(ref, RecoveryAction):
            return ref if ref in self._actions else None
        if isinstance(ref, int):
            return self._actions[ref] if 0 <= ref < len(self._actions) else None
        try:
            action_type = RecoveryActionType(ref)
        except ValueError:
            return None
        for action in self._actions:
            if action.type is action_type:
                return action
        return None
