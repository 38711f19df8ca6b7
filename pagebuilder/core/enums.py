"""
core/enums.py - Section types and editor enumerations

Defines the closed set of section variants, the settings key each variant
stores its configuration under, and the preview devices of the editor.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Union


class SectionType(str, Enum):
    """Closed set of section variants."""
    HERO = "hero"
    TEXT = "text"
    IMAGE = "image"
    GALLERY = "gallery"
    STUDIO_OVERVIEW = "studio-overview"
    SHOWS = "shows"
    TESTIMONIALS = "testimonials"
    CTA = "cta"
    DIVIDER = "divider"
    VIDEO = "video"
    AUDIO = "audio"
    SOCIAL_FEED = "social-feed"
    STORY = "story"
    COMMUNITY_SPOTLIGHT = "community-spotlight"
    GRID = "grid"
    HOURS_LOCATION = "hours-location"
    CONTACT = "contact"

    @property
    def settings_key(self) -> str:
        """camelCase key of this variant inside a section's settings bag."""
        return settings_key_for(self.value)

    @property
    def label(self) -> str:
        """Human-readable name, e.g. 'Social Feed'."""
        return " ".join(part.capitalize() for part in self.value.split("-"))


class MoveDirection(str, Enum):
    """Direction for reordering a section."""
    UP = "up"
    DOWN = "down"


class PreviewDevice(str, Enum):
    """Viewport the editor previews the page in."""
    DESKTOP = "desktop"
    TABLET = "tablet"
    MOBILE = "mobile"


@dataclass(frozen=True)
class DeviceViewport:
    """Viewport dimensions for a preview device."""
    width: int
    height: int


DEVICE_VIEWPORTS: Dict[PreviewDevice, DeviceViewport] = {
    PreviewDevice.DESKTOP: DeviceViewport(width=1200, height=800),
    PreviewDevice.TABLET: DeviceViewport(width=768, height=1024),
    PreviewDevice.MOBILE: DeviceViewport(width=375, height=667),
}


def settings_key_for(section_type: Union[str, SectionType]) -> str:
    """
    Convert a section type to its settings key.

    'hours-location' -> 'hoursLocation', 'hero' -> 'hero'.
    """
    value = section_type.value if isinstance(section_type, SectionType) else str(section_type)
    head, *rest = value.split("-")
    return head + "".join(part.capitalize() for part in rest)


def parse_section_type(value: Union[str, SectionType, None]) -> Optional[SectionType]:
    """Return the SectionType for value, or None if it is not a known variant."""
    if isinstance(value, SectionType):
        return value
    try:
        return SectionType(value)
    except ValueError:
        return None
