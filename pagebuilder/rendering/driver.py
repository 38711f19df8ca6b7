"""
rendering/driver.py - Page render driver

Renders the store's committed sections through the renderer registry, each
inside its own ErrorBoundary so one failing section never takes the page
down. Boundaries persist across renders (keyed by section id) so their
error state survives until an operator recovers it.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Set, TYPE_CHECKING

from pagebuilder.core.enums import parse_section_type
from pagebuilder.core.section import SectionView
from pagebuilder.core.store import SectionStore
from pagebuilder.errors import (
    ActionRef,
    BoundaryState,
    ErrorBoundary,
    PageBuilderError,
)

from .registry import RendererRegistry, render_fallback

if TYPE_CHECKING:
    from pagebuilder.editing import EditSession


EDITOR_COMPONENT = "Section Editor"


def component_name(view: SectionView) -> str:
    """Label shown on a section's error card, e.g. 'Hero Section'."""
    known = parse_section_type(view.type)
    return f"{known.label if known else view.type} Section"


@dataclass
class RenderedSection:
    section_id: str
    section_type: str
    html: str
    errored: bool = False


@dataclass
class RenderedPage:
    sections: List[RenderedSection] = field(default_factory=list)
    is_preview: bool = False

    @property
    def html(self) -> str:
        return "\n".join(s.html for s in self.sections if s.html)

    @property
    def errored_ids(self) -> List[str]:
        return [s.section_id for s in self.sections if s.errored]


class PageRenderer:
    """
    Read path from the Section Store to HTML.

    Usage:
        renderer = PageRenderer(store)
        page = renderer.render_page(is_preview=True)
        for section_id in page.errored_ids:
            renderer.run_action(section_id, "retry")
    """

    def __init__(
        self,
        store: SectionStore,
        registry: Optional[RendererRegistry] = None,
        show_error_details: bool = False,
        on_error: Optional[Callable[[PageBuilderError], None]] = None,
    ):
        self._store = store
        self._registry = registry or RendererRegistry()
        self._show_error_details = show_error_details
        self._on_error = on_error

        self._boundaries: Dict[str, ErrorBoundary] = {}
        self._fallback_ids: Set[str] = set()
        self._editor_boundary: Optional[ErrorBoundary] = None
        self._editor_session_id: Optional[int] = None

    @property
    def registry(self) -> RendererRegistry:
        return self._registry

    def boundary(self, section_id: str) -> Optional[ErrorBoundary]:
        return self._boundaries.get(section_id)

    def render_page(self, is_preview: bool = False) -> RenderedPage:
        """
        Render every committed section in order.

        Hidden sections are skipped on the public page and shown (marked
        hidden) in preview.
        """
        views = self._store.sections
        live_ids = {v.id for v in views}
        for stale in set(self._boundaries) - live_ids:
            del self._boundaries[stale]
        self._fallback_ids &= live_ids

        page = RenderedPage(is_preview=is_preview)
        for view in views:
            if not view.is_visible and not is_preview:
                continue
            page.sections.append(self.render_section(view, is_preview))
        return page

    def render_section(self, view: SectionView, is_preview: bool = False) -> RenderedSection:
        boundary = self._boundary_for(view)
        if view.id in self._fallback_ids:
            renderer = render_fallback
        else:
            renderer = self._registry.get(view.type)
        html = boundary.render(lambda: renderer(view, is_preview))
        return RenderedSection(
            section_id=view.id,
            section_type=view.type,
            html=html,
            errored=boundary.state is BoundaryState.ERRORED,
        )

    def run_action(self, section_id: str, ref: ActionRef) -> bool:
        """Invoke a recovery action on a section's boundary."""
        boundary = self._boundaries.get(section_id)
        if boundary is None:
            return False
        return boundary.run_action(ref)

    def render_editor(self, session: "EditSession", panel: Callable[["EditSession"], str]) -> str:
        """
        Render an editor panel inside its own boundary.

        Reset closes the session; retry re-renders the panel.
        """
        if self._editor_boundary is None or self._editor_session_id != id(session):
            self._editor_boundary = ErrorBoundary(
                EDITOR_COMPONENT,
                section_id=session.section_id,
                on_retry=lambda: None,
                on_reset=session.cancel,
                on_error=self._on_error,
                show_details=self._show_error_details,
            )
            self._editor_session_id = id(session)
        return self._editor_boundary.render(lambda: panel(session))

    @property
    def editor_boundary(self) -> Optional[ErrorBoundary]:
        return self._editor_boundary

    # =========================================================================
    # INTERNALS
    # =========================================================================

    def _boundary_for(self, view: SectionView) -> ErrorBoundary:
        boundary = self._boundaries.get(view.id)
        if boundary is None:
            section_id = view.id
            boundary = ErrorBoundary(
                component_name(view),
                section_id=section_id,
                on_retry=lambda: None,
                on_reset=lambda: self._reset_section(section_id),
                on_fallback=lambda: self._use_fallback(section_id),
                on_error=self._on_error,
                show_details=self._show_error_details,
            )
            self._boundaries[section_id] = boundary
        return boundary

    def _reset_section(self, section_id: str) -> None:
        self._fallback_ids.discard(section_id)
        self._store.revert_section(section_id)

    def _use_fallback(self, section_id: str) -> None:
        self._fallback_ids.add(section_id)
        self._boundaries[section_id].remount()
