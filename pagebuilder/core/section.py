"""
core/section.py - Section data model

A Section is one typed, orderable block of a page. The store owns mutable
Section instances; everything handed to renderers is a SectionView, a
recursively frozen snapshot.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime, timezone
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Union
import copy
import uuid

from .enums import SectionType, parse_section_type, settings_key_for
from .settings import SettingsModel, typed_settings


# Persistence keys, in the shape the page backend stores them
_WIRE_FIELDS = ("id", "type", "order", "content", "settings", "isVisible", "createdAt", "updatedAt")


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def generate_section_id() -> str:
    """Mint a new opaque section id."""
    return f"section-{uuid.uuid4().hex[:12]}"


def freeze(value: Any) -> Any:
    """Recursively convert dicts to read-only mappings and lists to tuples."""
    if isinstance(value, Mapping):
        return MappingProxyType({k: freeze(v) for k, v in value.items()})
    if isinstance(value, (list, tuple)):
        return tuple(freeze(v) for v in value)
    return value


def thaw(value: Any) -> Any:
    """Inverse of freeze: produce plain, mutable dicts and lists."""
    if isinstance(value, Mapping):
        return {k: thaw(v) for k, v in value.items()}
    if isinstance(value, tuple):
        return [thaw(v) for v in value]
    return value


@dataclass
class Section:
    """One block of a page."""

    id: str
    type: str
    order: int = 0
    content: str = ""
    settings: Dict[str, Any] = field(default_factory=dict)
    is_visible: bool = True
    created_at: str = field(default_factory=_now)
    updated_at: str = field(default_factory=_now)

    # Unrecognised top-level keys from persisted data, kept for round trips
    extra: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if isinstance(self.type, SectionType):
            self.type = self.type.value

    @property
    def section_type(self) -> Optional[SectionType]:
        """Known variant of this section, None if the type is unrecognised."""
        return parse_section_type(self.type)

    @property
    def settings_key(self) -> str:
        return settings_key_for(self.type)

    def touch(self) -> None:
        """Refresh the update timestamp."""
        self.updated_at = _now()

    def copy(self) -> "Section":
        """Detached deep copy."""
        return copy.deepcopy(self)

    def view(self) -> "SectionView":
        """Read-only snapshot for renderers."""
        return SectionView(
            id=self.id,
            type=self.type,
            order=self.order,
            content=self.content,
            settings=freeze(self.settings),
            is_visible=self.is_visible,
            created_at=self.created_at,
            updated_at=self.updated_at,
        )

    def to_dict(self) -> Dict[str, Any]:
        data = dict(copy.deepcopy(self.extra))
        data.update({
            "id": self.id,
            "type": self.type,
            "order": self.order,
            "content": self.content,
            "settings": copy.deepcopy(self.settings),
            "isVisible": self.is_visible,
            "createdAt": self.created_at,
            "updatedAt": self.updated_at,
        })
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Section":
        """
        Build a Section from its persisted form.

        Unknown section types are accepted and kept verbatim so that the
        render path can degrade them to a placeholder.
        """
        if "id" not in data or "type" not in data:
            raise ValueError("Section data requires 'id' and 'type'")
        settings = data.get("settings")
        if settings is None:
            # Older payloads call the settings bag "config"
            settings = data.get("config") or {}
        extra = {
            k: copy.deepcopy(v) for k, v in data.items()
            if k not in _WIRE_FIELDS and k != "config"
        }
        kwargs: Dict[str, Any] = {}
        if data.get("createdAt"):
            kwargs["created_at"] = data["createdAt"]
        if data.get("updatedAt"):
            kwargs["updated_at"] = data["updatedAt"]
        return cls(
            id=str(data["id"]),
            type=str(data["type"]),
            order=int(data.get("order", 0)),
            content=data.get("content") or "",
            settings=copy.deepcopy(settings),
            is_visible=bool(data.get("isVisible", True)),
            extra=extra,
            **kwargs,
        )


@dataclass(frozen=True)
class SectionView:
    """Immutable view of a committed section."""

    id: str
    type: str
    order: int
    content: str
    settings: Mapping[str, Any]
    is_visible: bool
    created_at: str
    updated_at: str

    @property
    def section_type(self) -> Optional[SectionType]:
        return parse_section_type(self.type)

    @property
    def active_settings(self) -> Mapping[str, Any]:
        """Read-only settings stored under this section's key."""
        value = self.settings.get(settings_key_for(self.type))
        return value if isinstance(value, Mapping) else MappingProxyType({})

    def typed_settings(self) -> Optional[SettingsModel]:
        """Parsed settings model for the active key (None for unknown types)."""
        return typed_settings(self.type, thaw(self.settings))

    def to_section(self) -> Section:
        """Mutable, detached copy."""
        return Section(
            id=self.id,
            type=self.type,
            order=self.order,
            content=self.content,
            settings=thaw(self.settings),
            is_visible=self.is_visible,
            created_at=self.created_at,
            updated_at=self.updated_at,
        )


SectionLike = Union[Section, SectionView]
