# Output format and aspect ratio lookups
# Pure tables: unknown keys fall back to the square / packshot defaults

from typing import Iterable, Optional

from furniture_prompt_engine.state import normalize_context_preset

DEFAULT_ASPECT_RATIO = "1:1"

# Output format id -> aspect ratio
FORMAT_ASPECT_RATIOS: dict[str, str] = {
    "square-format": "1:1",
    "ecommerce-square": "1:1",
    "instagram-post": "1:1",
    "instagram-story": "9:16",
    "lifestyle-horizontal": "3:2",
    "facebook": "16:9",
    "web-banner": "16:9",
    "ecommerce": "4:3",
    "print": "4:3",
}

# Output format id -> context preset used to build its prompt
FORMAT_CONTEXT_PRESETS: dict[str, str] = {
    "square-format": "packshot",
    "ecommerce-square": "packshot",
    "ecommerce": "packshot",
    "instagram-post": "social_media_square",
    "facebook": "social_media_square",
    "instagram-story": "social_media_story",
    "lifestyle-horizontal": "lifestyle",
    "print": "lifestyle",
    "web-banner": "hero",
}

_WIDE_CONTEXTS = ("hero", "lifestyle")


def get_format_aspect_ratio(format_id: str) -> str:
    return FORMAT_ASPECT_RATIOS.get(format_id, DEFAULT_ASPECT_RATIO)


def map_formats_to_aspect_ratios(formats: Iterable[str]) -> list[str]:
    """Map each output format to its aspect ratio, keeping order."""
    return [get_format_aspect_ratio(f) for f in formats]


def get_format_context_preset(format_id: str) -> str:
    return FORMAT_CONTEXT_PRESETS.get(format_id, "packshot")


def get_gemini_aspect_ratio(context: Optional[str]) -> str:
    preset = normalize_context_preset(context)
    if preset == "social_media_story":
        return "9:16"
    if preset in _WIDE_CONTEXTS:
        return "3:2"
    return DEFAULT_ASPECT_RATIO


def get_flux_aspect_ratio(context: Optional[str]) -> str:
    """FLUX Kontext has no 9:16 preset; stories use 2:3."""
    preset = normalize_context_preset(context)
    if preset == "social_media_story":
        return "2:3"
    if preset in _WIDE_CONTEXTS:
        return "3:2"
    return DEFAULT_ASPECT_RATIO


def get_image_size(context: Optional[str]) -> str:
    """Pixel size string for size-based image APIs."""
    preset = normalize_context_preset(context)
    if preset == "social_media_story":
        return "1024x1536"
    if preset in _WIDE_CONTEXTS:
        return "1536x1024"
    return "1024x1024"
