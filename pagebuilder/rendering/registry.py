"""
rendering/registry.py - Section renderer registry

Maps section types to renderer functions. A renderer receives a read-only
SectionView and whether the page is being previewed in the editor, and
returns HTML. Types without a renderer (including unknown types in loaded
data) get the placeholder renderer instead of failing.
"""

from __future__ import annotations
from html import escape
from typing import Callable, Dict, List, Optional, Union
import logging

from pagebuilder.core.enums import SectionType, parse_section_type
from pagebuilder.core.section import SectionView

logger = logging.getLogger("pagebuilder.rendering")


Renderer = Callable[[SectionView, bool], str]


def render_placeholder(view: SectionView, is_preview: bool = False) -> str:
    """Stand-in for sections that cannot be rendered by type."""
    return (
        f'<div class="section-placeholder" data-section-id="{escape(view.id)}">'
        f"Unknown section type: {escape(view.type)}</div>"
    )


def render_fallback(view: SectionView, is_preview: bool = False) -> str:
    """Safe content substituted for a section whose renderer keeps failing."""
    return (
        f'<div class="section-fallback" data-section-id="{escape(view.id)}">'
        "This section is temporarily unavailable.</div>"
    )


def render_generic(view: SectionView, is_preview: bool = False) -> str:
    """Minimal markup for any known section: a wrapper plus escaped content."""
    classes = ["page-section", f"section-{view.type}"]
    if is_preview:
        classes.append("is-preview")
    if not view.is_visible:
        classes.append("is-hidden")
    body = f'<div class="section-content">{escape(view.content)}</div>' if view.content else ""
    return (
        f'<section class="{" ".join(classes)}" data-section-id="{escape(view.id)}"'
        f' data-order="{view.order}">{body}</section>'
    )


class RendererRegistry:
    """
    Type -> renderer lookup.

    Usage:
        registry = RendererRegistry()

        @registry.register(SectionType.HERO)
        def hero(view, is_preview):
            ...
    """

    def __init__(self, include_defaults: bool = True):
        self._renderers: Dict[SectionType, Renderer] = {}
        if include_defaults:
            for section_type in SectionType:
                self._renderers[section_type] = render_generic

    def register(
        self,
        section_type: Union[str, SectionType],
        renderer: Optional[Renderer] = None,
    ):
        """
        Register a renderer, directly or as a decorator.

        Raises:
            ValueError: If section_type is not a known variant
        """
        known = parse_section_type(section_type)
        if known is None:
            raise ValueError(f"Unknown section type: {section_type}")

        def decorator(func: Renderer) -> Renderer:
            self._renderers[known] = func
            logger.debug(f"Registered renderer for {known.value}")
            return func

        if renderer is not None:
            return decorator(renderer)
        return decorator

    def unregister(self, section_type: Union[str, SectionType]) -> bool:
        known = parse_section_type(section_type)
        return self._renderers.pop(known, None) is not None if known else False

    def get(self, section_type: str) -> Renderer:
        """Renderer for a type; the placeholder when none is registered."""
        known = parse_section_type(section_type)
        if known is None or known not in self._renderers:
            return render_placeholder
        return self._renderers[known]

    def has(self, section_type: str) -> bool:
        known = parse_section_type(section_type)
        return known is not None and known in self._renderers

    def registered_types(self) -> List[SectionType]:
        return list(self._renderers)
