"""
core/settings.py - Typed settings schemas per section variant

Each section stores its configuration under exactly one top-level key of its
settings bag (see SectionType.settings_key). The models here describe that
bag for every variant. Keys are camelCase on the wire, every field has a
default, and fields the schema does not know about are kept untouched.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Type, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from .enums import SectionType, parse_section_type, settings_key_for


# =============================================================================
# BASE
# =============================================================================


class SettingsModel(BaseModel):
    """Base for all section settings schemas."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
    )

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data: Any) -> Any:
        """A null field falls back to its default."""
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v is not None}
        return data

    def to_settings(self) -> Dict[str, Any]:
        """Dump with wire (camelCase) keys, extra fields included."""
        return self.model_dump(by_alias=True)


class ItemModel(SettingsModel):
    """Base for list items nested inside a settings bag."""


# =============================================================================
# NESTED ITEMS
# =============================================================================


class GalleryImage(ItemModel):
    url: str = ""
    alt: str = ""
    caption: str = ""


class Testimonial(ItemModel):
    name: str = ""
    quote: str = ""
    rating: Optional[int] = None
    avatar: str = ""


class ShowItem(ItemModel):
    title: str = ""
    date: str = ""
    venue: str = ""
    ticket_link: str = ""
    image: str = ""


class SpotlightItem(ItemModel):
    title: str = ""
    description: str = ""
    image: str = ""
    link: str = ""


class GridItem(ItemModel):
    title: str = ""
    description: str = ""
    image: str = ""
    link: str = ""


class OpeningHours(ItemModel):
    day: str = ""
    hours: str = ""


# =============================================================================
# VARIANTS
# =============================================================================


class HeroSettings(SettingsModel):
    background_image: str = "/hero-image.jpg"
    overlay_color: str = "#E1B84B"
    overlay_opacity: float = 0.8
    text_color: str = "#FFFFFF"
    text_alignment: str = "center"
    subheadline: str = ""
    button_text: str = "Learn More"
    button_link: str = "#"
    button_style: str = "primary"
    full_height: bool = True
    scroll_indicator: bool = False


class TextSettings(SettingsModel):
    content_alignment: str = "left"
    text_size: str = "medium"
    background_color: str = "transparent"
    text_color: str = "inherit"
    padding: str = "medium"
    max_width: str = "4xl"


class ImageSettings(SettingsModel):
    image_url: str = "/placeholder-image.jpg"
    alt_text: str = "Image description"
    caption: str = ""
    image_size: str = "medium"
    image_alignment: str = "center"
    border_radius: str = "medium"
    shadow: str = "medium"
    caption_position: str = "below"


class GallerySettings(SettingsModel):
    images: List[GalleryImage] = Field(default_factory=list)
    layout: str = "grid"
    columns: int = 3
    gap: str = "medium"
    show_captions: bool = True
    show_thumbnails: bool = False


class StudioOverviewSettings(SettingsModel):
    studio_image: str = "/studio-image.jpg"
    equipment: List[Any] = Field(default_factory=list)
    services: List[Any] = Field(default_factory=list)
    testimonials: List[Testimonial] = Field(default_factory=list)
    booking_link: str = "/contact"
    show_equipment: bool = True
    show_services: bool = True
    show_testimonials: bool = True
    show_booking_button: bool = True


class ShowsSettings(SettingsModel):
    show_type: str = "upcoming"
    layout: str = "grid"
    shows_per_page: int = 6
    shows: List[ShowItem] = Field(default_factory=list)
    show_images: bool = True
    show_venue: bool = True
    show_ticket_link: bool = True


class TestimonialsSettings(SettingsModel):
    layout: str = "grid"
    columns: int = 3
    show_ratings: bool = True
    show_avatars: bool = True
    testimonials: List[Testimonial] = Field(default_factory=list)


class CtaSettings(SettingsModel):
    cta_title: str = "Ready to Get Started?"
    cta_description: str = ""
    button_text: str = "Shop Now"
    button_link: str = "/store"
    button_style: str = "primary"
    background_color: str = "#f3f4f6"
    text_color: str = "#111827"
    layout: str = "center"


class DividerSettings(SettingsModel):
    style: str = "line"
    thickness: str = "medium"
    color: str = "#e5e7eb"
    width: str = "full"
    spacing: str = "normal"


class VideoSettings(SettingsModel):
    video_url: str = ""
    video_type: str = "youtube"
    aspect_ratio: str = "16:9"
    autoplay: bool = False
    controls: bool = True
    loop: bool = False
    muted: bool = False
    poster: str = ""
    caption: str = ""


class AudioSettings(SettingsModel):
    audio_url: str = ""
    title: str = "Featured Track"
    artist: str = ""
    album: str = ""
    album_art: str = ""
    autoplay: bool = False
    loop: bool = False
    show_playlist: bool = False
    player_style: str = "default"
    background_color: str = "#ffffff"


class SocialFeedSettings(SettingsModel):
    feed_type: str = "instagram"
    handle: str = ""
    post_count: int = 6
    layout: str = "grid"
    columns: int = 3
    show_captions: bool = True
    show_dates: bool = True
    show_likes: bool = True
    open_in_new_tab: bool = True
    hashtag: str = ""
    refresh_interval: int = 15


class StorySettings(SettingsModel):
    story_title: str = ""
    story_content: str = ""
    story_image: str = ""
    image_position: str = "right"
    background_color: str = "white"
    text_color: str = "inherit"
    layout: str = "text-image"
    show_divider: bool = True
    divider_style: str = "line"


class CommunitySpotlightSettings(SettingsModel):
    title: str = "Local Artists & Events"
    description: str = ""
    spotlight_items: List[SpotlightItem] = Field(default_factory=list)
    layout: str = "grid"
    columns: int = 3
    background_color: str = "white"
    text_color: str = "inherit"


class GridSettings(SettingsModel):
    title: str = "Grid Section"
    description: str = ""
    items: List[GridItem] = Field(default_factory=list)
    layout: str = "grid"
    columns: int = 3
    show_images: bool = True
    background_color: str = "gray-50"


class HoursLocationSettings(SettingsModel):
    title: str = "Visit Us"
    address: str = ""
    phone: str = ""
    email: str = ""
    hours: List[OpeningHours] = Field(default_factory=list)
    map_url: str = ""
    map_embed: bool = True
    background_color: str = "white"
    text_color: str = "inherit"


class ContactSettings(SettingsModel):
    title: str = "Get in Touch"
    email: str = ""
    phone: str = ""
    address: str = ""
    show_form: bool = True


# =============================================================================
# REGISTRY
# =============================================================================


SETTINGS_MODELS: Dict[SectionType, Type[SettingsModel]] = {
    SectionType.HERO: HeroSettings,
    SectionType.TEXT: TextSettings,
    SectionType.IMAGE: ImageSettings,
    SectionType.GALLERY: GallerySettings,
    SectionType.STUDIO_OVERVIEW: StudioOverviewSettings,
    SectionType.SHOWS: ShowsSettings,
    SectionType.TESTIMONIALS: TestimonialsSettings,
    SectionType.CTA: CtaSettings,
    SectionType.DIVIDER: DividerSettings,
    SectionType.VIDEO: VideoSettings,
    SectionType.AUDIO: AudioSettings,
    SectionType.SOCIAL_FEED: SocialFeedSettings,
    SectionType.STORY: StorySettings,
    SectionType.COMMUNITY_SPOTLIGHT: CommunitySpotlightSettings,
    SectionType.GRID: GridSettings,
    SectionType.HOURS_LOCATION: HoursLocationSettings,
    SectionType.CONTACT: ContactSettings,
}

# Content a freshly added section starts with
DEFAULT_CONTENT: Dict[SectionType, str] = {
    SectionType.HERO: "Your Hero Title",
    SectionType.TEXT: "Add your content here...",
    SectionType.IMAGE: "Image caption",
    SectionType.GALLERY: "Image Gallery",
    SectionType.STUDIO_OVERVIEW: "Studio Overview",
    SectionType.SHOWS: "Live Shows",
    SectionType.TESTIMONIALS: "What Our Customers Say",
    SectionType.CTA: "Ready to Get Started?",
    SectionType.DIVIDER: "",
    SectionType.VIDEO: "Watch Our Story",
    SectionType.AUDIO: "Featured Track",
    SectionType.SOCIAL_FEED: "Follow Us",
    SectionType.STORY: "Our Story",
    SectionType.COMMUNITY_SPOTLIGHT: "Community Spotlight",
    SectionType.GRID: "Grid Content",
    SectionType.HOURS_LOCATION: "Visit Us",
    SectionType.CONTACT: "Contact Us",
}


def settings_model_for(section_type: Union[str, SectionType]) -> Optional[Type[SettingsModel]]:
    """Schema class for a section type, or None for unknown types."""
    known = parse_section_type(section_type)
    if known is None:
        return None
    return SETTINGS_MODELS[known]


def default_settings(section_type: Union[str, SectionType]) -> Dict[str, Any]:
    """
    Build the settings bag of a new section.

    Args:
        section_type: A known section type

    Returns:
        Dict with the variant's settings key populated with defaults

    Raises:
        ValueError: If section_type is not a known variant
    """
    model = settings_model_for(section_type)
    if model is None:
        raise ValueError(f"Unknown section type: {section_type}")
    return {settings_key_for(section_type): model().to_settings()}


def active_settings(section_type: Union[str, SectionType], settings: Dict[str, Any]) -> Dict[str, Any]:
    """Raw settings stored under the type's key, or an empty dict."""
    value = (settings or {}).get(settings_key_for(section_type))
    return value if isinstance(value, dict) else {}


def typed_settings(section_type: Union[str, SectionType], settings: Dict[str, Any]) -> Optional[SettingsModel]:
    """
    Runtime-checked accessor for the active settings of a section.

    Missing fields fall back to their defaults. Values of the wrong type
    raise pydantic.ValidationError.

    Returns:
        Parsed settings model, or None for unknown section types
    """
    model = settings_model_for(section_type)
    if model is None:
        return None
    return model.model_validate(active_settings(section_type, settings))
