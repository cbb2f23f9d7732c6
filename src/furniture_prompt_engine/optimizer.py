"""
Prompt Length Optimizer

Image vendors cap prompt length (1000 characters by default). This module
validates a prompt against that cap and shrinks it when needed:

    1. condensed rebuild from the profile (short base sentence, at most 3
       features, fixed character caps per field)
    2. whitespace collapse, then a fixed word abbreviation dictionary
    3. hard truncation with a trailing "..."

optimize_prompt() always returns a string no longer than the target for any
target of 3 characters or more.
"""

import logging
import re
from typing import Optional

from furniture_prompt_engine.config import settings as engine_settings
from furniture_prompt_engine.prompt_builder import POSITIONED_CONTEXTS, build_prompt
from furniture_prompt_engine.state import (
    OptimizedPromptResult,
    ProductProfile,
    PromptValidationResult,
    UiSettings,
    field_list,
    field_text,
    normalize_context_preset,
)

logger = logging.getLogger(__name__)

ELLIPSIS = "..."

# Applied case-insensitively on whole words, in this order
ABBREVIATIONS: list[tuple[str, str]] = [
    ("professional", "pro"),
    ("commercial", "comm."),
    ("high-quality", "hi-qual"),
    ("specifications", "specs"),
    ("requirements", "req."),
    ("composition", "comp."),
    ("lighting", "light"),
    ("background", "bg"),
    ("product", "prod"),
]

_CONDENSED_SUBJECTS = {
    "packshot": "Professional product packshot",
    "lifestyle": "Lifestyle product scene",
    "hero": "Website hero product image",
    "social_media_square": "Instagram product post",
    "social_media_story": "Instagram story product image",
    "detail": "Detailed product close-up",
}

_CONDENSED_CONTEXT_NOTES = {
    "packshot": "Clean neutral focus, minimal distractions, catalog-quality.",
    "lifestyle": "Realistic interior environment, natural lighting, contextual integration.",
    "social_media_square": "Social-ready composition, mobile-optimized, professional aesthetic.",
    "social_media_story": "Vertical mobile format, centered product, thumb-stopping appeal.",
    "detail": "Close-up focus, high detail, craftsmanship showcase.",
}


def truncate_text(text: str, max_length: int) -> str:
    """Cut text to max_length characters, ending in "..." when cut."""
    if len(text) <= max_length:
        return text
    if max_length < len(ELLIPSIS):
        return text[:max(max_length, 0)]
    return text[: max_length - len(ELLIPSIS)] + ELLIPSIS


def validate_prompt_length(
    prompt: str,
    limit: Optional[int] = None,
    near_limit: Optional[int] = None,
) -> PromptValidationResult:
    """Check a prompt against the vendor character limit.

    ``is_near_limit`` is only set when the prompt is above ``near_limit`` but
    still within ``limit``. Both flags are advisory.
    """
    limit = engine_settings.prompt_char_limit if limit is None else limit
    near_limit = engine_settings.prompt_near_limit if near_limit is None else near_limit

    length = len(prompt)
    exceeds = length > limit
    near = length > near_limit and not exceeds

    suggestions: list[str] = []
    if exceeds:
        suggestions.append(f"Prompt is {length - limit} characters over the {limit} character limit")
        suggestions.append("Consider reducing product features, simplifying descriptions, or enabling optimization")
    elif near:
        suggestions.append(f"Prompt is {length}/{limit} characters - close to limit")
        suggestions.append("Consider enabling optimization to ensure reliable generation")

    return PromptValidationResult(
        is_valid=not exceeds,
        length=length,
        limit=limit,
        exceeds_limit=exceeds,
        is_near_limit=near,
        suggestions=suggestions,
    )


def _near_limit_for(limit: int) -> int:
    """Scale the configured near-limit threshold to another limit."""
    if limit == engine_settings.prompt_char_limit:
        return engine_settings.prompt_near_limit
    ratio = engine_settings.prompt_near_limit / max(engine_settings.prompt_char_limit, 1)
    return int(limit * ratio)


# ============================================================
# Condensed rebuild
# ============================================================

def _condensed_product(profile: ProductProfile) -> str:
    materials = field_text(profile.materials)
    style = field_text(profile.style)
    color = truncate_text(field_text(profile.color_override) or field_text(profile.detected_color, "neutral"), 40)
    features = [truncate_text(f, 30) for f in field_list(profile.features)[:3]]

    parts = [f"Type: {field_text(profile.type, 'product')}"]
    if materials:
        parts.append(f"Materials: {truncate_text(materials, 80)}")
    parts.append(f"Color: {color}")
    if style:
        parts.append(f"Style: {truncate_text(style, 50)}")
    if features:
        parts.append(f"Features: {', '.join(features)}")
    if profile.is_wall_mounted:
        parts.append("Wall-mounted.")
    return ". ".join(parts)


def _condensed_layout(settings: UiSettings, context: str) -> str:
    parts = [f"Background: {truncate_text(settings.background_style or 'neutral', 40)}"]
    if context in POSITIONED_CONTEXTS:
        parts.append(f"Position: {truncate_text(settings.product_position or 'center', 20)}")
    if settings.reserved_text_zone:
        parts.append(f"Text zone: {truncate_text(settings.reserved_text_zone, 30)}")
    props = [truncate_text(p, 30) for p in settings.props[:2]]
    parts.append(f"Props: {', '.join(props)}" if props else "No props")
    parts.append(f"Lighting: {truncate_text((settings.lighting or '').replace('_', ' '), 40)}")
    return ". ".join(parts)


def _condensed_constraints(profile: ProductProfile, settings: UiSettings) -> str:
    constraints = ["Exact product fidelity", "Commercial quality"]
    if settings.strict_mode:
        constraints.append("No text/labels")
    if profile.is_wall_mounted:
        constraints.append("Wall-mounted only, no floor contact")
    override = field_text(profile.color_override)
    if override and override != field_text(profile.detected_color):
        constraints.append(f"Color: {truncate_text(override, 40)}")
    return f"Constraints: {', '.join(constraints)}."


def _condensed_context_note(settings: UiSettings, context: str) -> str:
    if context == "hero":
        room = truncate_text(settings.reserved_text_zone or "opposite product", 30)
        return f"Hero banner: Visual balance, breathing room {room}, no text in image."
    return _CONDENSED_CONTEXT_NOTES.get(context, "")


def build_condensed_prompt(
    profile: ProductProfile,
    settings: UiSettings,
    context: Optional[str] = None,
) -> str:
    """Rebuild a short prompt from the inputs, most important section first."""
    preset = normalize_context_preset(context or settings.context_preset)
    sections = [
        f"Create {_CONDENSED_SUBJECTS[preset]} using reference image. "
        "Commercial-grade product visualization with exact fidelity.",
        _condensed_product(profile),
        _condensed_layout(settings, preset),
        _condensed_constraints(profile, settings),
        _condensed_context_note(settings, preset),
    ]
    return "\n\n".join(s for s in sections if s.strip()).strip()


# ============================================================
# Progressive passes
# ============================================================

def collapse_whitespace(prompt: str) -> str:
    return re.sub(r"\s+", " ", prompt).strip()


def apply_abbreviations(prompt: str) -> str:
    for word, short in ABBREVIATIONS:
        prompt = re.sub(rf"\b{re.escape(word)}\b", short, prompt, flags=re.IGNORECASE)
    return prompt


def apply_progressive_optimization(prompt: str, target_length: int) -> str:
    """Shrink a prompt in passes, stopping as soon as it fits."""
    if len(prompt) <= target_length:
        return prompt

    optimized = collapse_whitespace(prompt)
    if len(optimized) <= target_length:
        logger.debug("Prompt fits after whitespace collapse (%d chars)", len(optimized))
        return optimized

    optimized = apply_abbreviations(optimized)
    if len(optimized) <= target_length:
        logger.debug("Prompt fits after abbreviations (%d chars)", len(optimized))
        return optimized

    logger.debug("Hard truncating prompt from %d to %d chars", len(optimized), target_length)
    return truncate_text(optimized, target_length)


def optimize_prompt(
    prompt: str,
    target_length: int,
    profile: Optional[ProductProfile] = None,
    settings: Optional[UiSettings] = None,
    context: Optional[str] = None,
) -> tuple[str, PromptValidationResult]:
    """Fit a prompt into ``target_length`` characters.

    A prompt that already fits is returned unchanged. Otherwise, when the
    profile and settings are given, a condensed prompt is rebuilt from them
    first; the progressive passes then run on whichever text is still too long.

    Returns:
        (prompt, validation) with validation measured against target_length
    """
    result = prompt
    if len(result) > target_length and profile is not None and settings is not None:
        result = build_condensed_prompt(profile, settings, context)
        logger.debug("Condensed rebuild: %d -> %d chars", len(prompt), len(result))

    result = apply_progressive_optimization(result, target_length)

    validation = validate_prompt_length(result, limit=target_length, near_limit=_near_limit_for(target_length))
    return result, validation


def build_optimized_prompt(
    profile: ProductProfile,
    settings: UiSettings,
    context: Optional[str] = None,
    limit: Optional[int] = None,
) -> OptimizedPromptResult:
    """Build the prompt and optimize it when it exceeds or nears the vendor limit.

    Optimization targets ``limit - optimization_margin`` so the result keeps
    some headroom below the cap.
    """
    limit = engine_settings.prompt_char_limit if limit is None else limit
    preset = normalize_context_preset(context or settings.context_preset)

    initial = build_prompt(profile, settings, preset)
    validation = validate_prompt_length(initial, limit=limit, near_limit=_near_limit_for(limit))

    final = initial
    applied = False
    if validation.exceeds_limit or validation.is_near_limit:
        target = limit - engine_settings.optimization_margin
        final, _ = optimize_prompt(initial, target, profile, settings, preset)
        validation = validate_prompt_length(final, limit=limit, near_limit=_near_limit_for(limit))
        applied = True
        logger.info(
            "Optimized %s prompt from %d to %d chars",
            preset,
            len(initial),
            len(final),
            extra={"context_preset": preset},
        )

    return OptimizedPromptResult(
        prompt=final,
        original_length=len(initial),
        optimized_length=len(final),
        optimization_applied=applied,
        validation_result=validation,
    )
