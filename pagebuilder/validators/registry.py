"""
validators/registry.py - Per-type validation rule registry
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Callable, Dict, Iterable, Iterator, List, Optional, Union

from pagebuilder.core.enums import SectionType, parse_section_type

from .taxonomy import ValidationError


@dataclass
class RuleContext:
    """
    What a rule sees of the section under validation.

    values holds the active settings merged over the variant's defaults,
    keyed by wire (camelCase) names.
    """

    section_type: SectionType
    settings_key: str
    content: str
    values: Dict[str, Any]

    def field(self, *parts: Union[str, int]) -> str:
        """Qualified field name, e.g. field('images', 0, 'url') -> 'gallery.images.0.url'."""
        return ".".join([self.settings_key] + [str(p) for p in parts])

    def get(self, name: str, default: Any = None) -> Any:
        return self.values.get(name, default)

    def items(self, name: str) -> Iterator[tuple]:
        """(index, item) pairs of a list setting, skipping entries that are not dicts."""
        value = self.values.get(name)
        if not isinstance(value, list):
            return iter(())
        return ((i, item) for i, item in enumerate(value) if isinstance(item, dict))


RuleFunction = Callable[[RuleContext], Iterable[Optional[ValidationError]]]

_RULES: Dict[SectionType, List[RuleFunction]] = {}


def register_rules(section_type: Union[str, SectionType]) -> Callable[[RuleFunction], RuleFunction]:
    """
    Decorator registering a rule function for a section type.

    The function yields ValidationError or None for each check it runs.

    Usage:
        @register_rules(SectionType.HERO)
        def hero_rules(ctx):
            yield checks.max_length(ctx.content, 200, "content", "Headline")
    """
    known = parse_section_type(section_type)
    if known is None:
        raise ValueError(f"Unknown section type: {section_type}")

    def decorator(func: RuleFunction) -> RuleFunction:
        _RULES.setdefault(known, []).append(func)
        return func

    return decorator


def get_rules(section_type: SectionType) -> List[RuleFunction]:
    return list(_RULES.get(section_type, []))


def registered_types() -> List[SectionType]:
    return [t for t in SectionType if _RULES.get(t)]
