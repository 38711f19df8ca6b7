"""
pagebuilder.rendering - Renderer registry and page render driver
"""

from .registry import Renderer, RendererRegistry, render_fallback, render_generic, render_placeholder
from .driver import (
    PageRenderer,
    RenderedPage,
    RenderedSection,
    component_name,
    EDITOR_COMPONENT,
)

__all__ = [
    "Renderer",
    "RendererRegistry",
    "render_fallback",
    "render_generic",
    "render_placeholder",
    "PageRenderer",
    "RenderedPage",
    "RenderedSection",
    "component_name",
    "EDITOR_COMPONENT",
]
