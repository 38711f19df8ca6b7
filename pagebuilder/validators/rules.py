"""
validators/rules.py - Validation rules for each section type
"""

from __future__ import annotations

from pagebuilder.core.enums import SectionType

from . import checks
from .registry import RuleContext, register_rules


# Column counts each layout supports
GRID_COLUMNS = (1, 2, 3, 4, 5, 6)
CARD_COLUMNS = (1, 2, 3, 4)

ASPECT_RATIOS = ("16:9", "4:3", "1:1", "21:9", "9:16")


def _rating_checks(ctx: RuleContext, list_name: str):
    for i, item in ctx.items(list_name):
        yield checks.number_range(item.get("rating"), 1, 5, ctx.field(list_name, i, "rating"), "Rating")
        yield checks.max_length(item.get("name"), 100, ctx.field(list_name, i, "name"), "Name")
        yield checks.max_length(item.get("quote"), 1000, ctx.field(list_name, i, "quote"), "Quote")
        yield checks.url(item.get("avatar"), ctx.field(list_name, i, "avatar"), "Avatar")


@register_rules(SectionType.HERO)
def hero_rules(ctx: RuleContext):
    yield checks.max_length(ctx.content, 200, "content", "Headline")
    yield checks.max_length(ctx.get("subheadline"), 300, ctx.field("subheadline"), "Subheadline")
    yield checks.url(ctx.get("backgroundImage"), ctx.field("backgroundImage"), "Background Image")
    yield checks.number_range(ctx.get("overlayOpacity"), 0, 1, ctx.field("overlayOpacity"), "Overlay Opacity")


@register_rules(SectionType.TEXT)
def text_rules(ctx: RuleContext):
    yield checks.max_length(ctx.content, 10000, "content", "Content")


@register_rules(SectionType.IMAGE)
def image_rules(ctx: RuleContext):
    yield checks.url(ctx.get("imageUrl"), ctx.field("imageUrl"), "Image URL")
    yield checks.max_length(ctx.get("altText"), 200, ctx.field("altText"), "Alt Text")
    yield checks.max_length(ctx.get("caption"), 300, ctx.field("caption"), "Caption")


@register_rules(SectionType.GALLERY)
def gallery_rules(ctx: RuleContext):
    images = ctx.get("images")
    if isinstance(images, list) and not images:
        yield checks.required(images, ctx.field("images"), "Gallery Images")
    for i, image in ctx.items("images"):
        field = ctx.field("images", i, "url")
        yield checks.required(image.get("url"), field, f"Image {i + 1} URL") or checks.url(
            image.get("url"), field, f"Image {i + 1} URL"
        )
        yield checks.max_length(image.get("alt"), 200, ctx.field("images", i, "alt"), f"Image {i + 1} Alt Text")
        yield checks.max_length(image.get("caption"), 300, ctx.field("images", i, "caption"), f"Image {i + 1} Caption")
    yield checks.one_of(ctx.get("columns"), GRID_COLUMNS, ctx.field("columns"), "Columns")


@register_rules(SectionType.STUDIO_OVERVIEW)
def studio_overview_rules(ctx: RuleContext):
    yield checks.url(ctx.get("studioImage"), ctx.field("studioImage"), "Studio Image")
    yield checks.url(ctx.get("bookingLink"), ctx.field("bookingLink"), "Booking Link")
    yield from _rating_checks(ctx, "testimonials")


@register_rules(SectionType.SHOWS)
def shows_rules(ctx: RuleContext):
    yield checks.number_range(ctx.get("showsPerPage"), 1, 50, ctx.field("showsPerPage"), "Shows Per Page")
    for i, show in ctx.items("shows"):
        yield checks.url(show.get("ticketLink"), ctx.field("shows", i, "ticketLink"), "Ticket Link")
        yield checks.url(show.get("image"), ctx.field("shows", i, "image"), "Show Image")


@register_rules(SectionType.TESTIMONIALS)
def testimonials_rules(ctx: RuleContext):
    yield checks.one_of(ctx.get("columns"), CARD_COLUMNS, ctx.field("columns"), "Columns")
    yield from _rating_checks(ctx, "testimonials")


@register_rules(SectionType.CTA)
def cta_rules(ctx: RuleContext):
    yield checks.required(ctx.get("ctaTitle"), ctx.field("ctaTitle"), "CTA Title")
    yield checks.max_length(ctx.get("ctaTitle"), 200, ctx.field("ctaTitle"), "CTA Title")
    yield checks.max_length(ctx.get("ctaDescription"), 500, ctx.field("ctaDescription"), "CTA Description")
    yield checks.url(ctx.get("buttonLink"), ctx.field("buttonLink"), "Button Link")


@register_rules(SectionType.VIDEO)
def video_rules(ctx: RuleContext):
    yield checks.url(ctx.get("videoUrl"), ctx.field("videoUrl"), "Video URL")
    yield checks.url(ctx.get("poster"), ctx.field("poster"), "Poster Image")
    yield checks.one_of(ctx.get("aspectRatio"), ASPECT_RATIOS, ctx.field("aspectRatio"), "Aspect Ratio")


@register_rules(SectionType.AUDIO)
def audio_rules(ctx: RuleContext):
    yield checks.url(ctx.get("audioUrl"), ctx.field("audioUrl"), "Audio URL")
    yield checks.max_length(ctx.get("album"), 200, ctx.field("album"), "Album")
    yield checks.max_length(ctx.get("artist"), 200, ctx.field("artist"), "Artist")
    yield checks.url(ctx.get("albumArt"), ctx.field("albumArt"), "Album Art")


@register_rules(SectionType.SOCIAL_FEED)
def social_feed_rules(ctx: RuleContext):
    yield checks.one_of(ctx.get("columns"), GRID_COLUMNS, ctx.field("columns"), "Columns")
    yield checks.number_range(ctx.get("postCount"), 1, 24, ctx.field("postCount"), "Post Count")
    yield checks.max_length(ctx.get("handle"), 100, ctx.field("handle"), "Handle")


@register_rules(SectionType.STORY)
def story_rules(ctx: RuleContext):
    yield checks.max_length(ctx.get("storyTitle"), 200, ctx.field("storyTitle"), "Story Title")
    yield checks.url(ctx.get("storyImage"), ctx.field("storyImage"), "Story Image")


@register_rules(SectionType.COMMUNITY_SPOTLIGHT)
def community_spotlight_rules(ctx: RuleContext):
    yield checks.max_length(ctx.get("title"), 200, ctx.field("title"), "Title")
    yield checks.one_of(ctx.get("columns"), CARD_COLUMNS, ctx.field("columns"), "Columns")
    for i, item in ctx.items("spotlightItems"):
        yield checks.url(item.get("image"), ctx.field("spotlightItems", i, "image"), "Spotlight Image")
        yield checks.url(item.get("link"), ctx.field("spotlightItems", i, "link"), "Spotlight Link")


@register_rules(SectionType.GRID)
def grid_rules(ctx: RuleContext):
    yield checks.max_length(ctx.get("title"), 200, ctx.field("title"), "Title")
    yield checks.one_of(ctx.get("columns"), GRID_COLUMNS, ctx.field("columns"), "Columns")
    for i, item in ctx.items("items"):
        yield checks.url(item.get("image"), ctx.field("items", i, "image"), "Item Image")
        yield checks.url(item.get("link"), ctx.field("items", i, "link"), "Item Link")


@register_rules(SectionType.HOURS_LOCATION)
def hours_location_rules(ctx: RuleContext):
    yield checks.email(ctx.get("email"), ctx.field("email"), "Email")
    yield checks.max_length(ctx.get("phone"), 20, ctx.field("phone"), "Phone")
    yield checks.max_length(ctx.get("address"), 500, ctx.field("address"), "Address")
    yield checks.url(ctx.get("mapUrl"), ctx.field("mapUrl"), "Map URL")


@register_rules(SectionType.CONTACT)
def contact_rules(ctx: RuleContext):
    yield checks.email(ctx.get("email"), ctx.field("email"), "Email")
    yield checks.max_length(ctx.get("phone"), 20, ctx.field("phone"), "Phone")
    yield checks.max_length(ctx.get("address"), 500, ctx.field("address"), "Address")
