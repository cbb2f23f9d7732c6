"""
Prompt Builder - Full Prompt Assembly

This module provides:
- assemble_prompt(): template-driven prompt in five fixed sections
- build_gpt_image_prompt(): prompt built from precomputed analysis fragments
- build_prompt(): picks one of the two based on the profile
- NEGATIVE_PROMPT and the wall-mount note

Section order of assemble_prompt():
    1. opening sentence + product specification lines
    2. context elaboration (context requirements, photography, quality)
    3. constraint bands (critical, high, standard)
    4. user setting lines
    5. negative prompt

Every builder is total: missing profile fields fall back to generic
defaults ("furniture", "standard", "modern") instead of raising.
"""

import logging
from typing import Optional

from furniture_prompt_engine.constraints import build_constraint_enforcement
from furniture_prompt_engine.state import (
    ProductProfile,
    TextToImagePrompts,
    UiSettings,
    field_list,
    field_text,
    normalize_context_preset,
)
from furniture_prompt_engine.templates import fill_template, get_template
from furniture_prompt_engine.vocabulary import (
    build_construction_details,
    describe_materials,
    describe_product_type,
    describe_style,
    determine_environment_type,
    get_color_specification,
    get_placement_description,
)

logger = logging.getLogger(__name__)


NEGATIVE_PROMPT = (
    "🚫 FURNITURE PHOTOGRAPHY PROHIBITIONS (AVOID AT ALL COSTS): text overlays, captions, logos, stickers, "
    "price tags, model numbers, annotations, extra furniture not listed in approved props, floor contact "
    "for wall-mounted furniture, unrealistic reflections, heavy noise, over-saturation, cartoonish "
    "appearance, duplicate furniture pieces, cluttered composition, consumer-grade photography aesthetics, "
    "amateur furniture staging, non-commercial presentation quality."
)

# Contexts whose composition depends on where the product sits in frame
POSITIONED_CONTEXTS = ("packshot", "hero")


def get_negative_prompt() -> str:
    return NEGATIVE_PROMPT


def _lighting_text(lighting: Optional[str]) -> str:
    return (lighting or "").replace("_", " ")


def build_wall_mounted_note(profile: ProductProfile) -> str:
    """Mounting reminder for wall-mounted products; desks get the 75cm height."""
    product_type = profile.type_text.lower()
    if "desk" in product_type or "workstation" in product_type:
        return (
            "CRITICAL WALL-MOUNTED DESK REQUIREMENT: This desk MUST be wall-mounted at exactly 75cm "
            "(29.5 inches) from floor to desktop surface - never show floor contact, legs, or free-standing "
            "placement. Show heavy-duty mounting brackets and clear space underneath."
        )
    return (
        "CRITICAL WALL-MOUNTED REQUIREMENT: This furniture piece MUST remain securely wall-mounted - never "
        "show floor contact or free-standing placement. Keep the wall-mounting system visible."
    )


def build_opening(profile: ProductProfile, settings: UiSettings, context: str) -> str:
    """Fill the context template's base sentence from the profile."""
    template = get_template(context)
    return fill_template(
        template.base_structure,
        {
            "PRODUCT_TYPE": describe_product_type(profile),
            "MATERIAL_SPECS": describe_materials(profile),
            "STYLE_DESCRIPTION": describe_style(profile),
            "CONSTRUCTION_DETAILS": build_construction_details(profile),
            "ENVIRONMENT_TYPE": determine_environment_type(context, settings),
        },
    )


def build_product_specification(profile: ProductProfile) -> str:
    """Product identification lines that follow the opening sentence."""
    placement = field_text(profile.placement_type)
    lines = [
        "🏢 PRODUCT SPECIFICATIONS:",
        f"- Product Type: {field_text(profile.type, 'furniture')}",
        f"- Placement: {placement.replace('_', ' ') if placement else 'floor standing'}",
        f"- Support System: {get_placement_description(placement) if placement else 'Standard floor-based support'}",
        f"- Color Specification: {get_color_specification(profile)}",
    ]

    features = field_list(profile.features)
    if features:
        lines.append(f"- Features: {', '.join(features)}")

    dims = profile.real_dimensions
    if dims is not None and not dims.is_empty():
        lines.append(
            f"- Dimensions: {dims.width or '?'}cm W x {dims.height or '?'}cm H x {dims.depth or '?'}cm D"
        )

    if profile.is_wall_mounted:
        lines.append(f"- {build_wall_mounted_note(profile)}")

    if profile.notes:
        lines.append(f"- Notes: {profile.notes}")

    return "\n".join(lines)


def build_context_elaboration(context: str) -> str:
    template = get_template(context)
    sections = [
        f"CONTEXT REQUIREMENTS:\n{template.context_specific}",
        f"PHOTOGRAPHY SPECIFICATIONS:\n{template.photography_specs}",
    ]
    if template.constraints:
        sections.append("FURNITURE INDUSTRY CONSTRAINTS:\n" + "\n".join(f"- {c}" for c in template.constraints))
    if template.quality_requirements:
        sections.append(
            "QUALITY REQUIREMENTS:\n" + "\n".join(f"- {q}" for q in template.quality_requirements)
        )
    return "\n\n".join(sections)


def build_settings_specifications(settings: UiSettings, context: str) -> str:
    """User setting lines: background, position, text zone, props, lighting."""
    lines = [
        "USER SETTINGS REQUIREMENTS:",
        f"- Background Style: {settings.background_style or 'neutral'} with professional presentation",
    ]
    if context in POSITIONED_CONTEXTS:
        lines.append(f"- Product Position: {settings.product_position or 'center'} placement with optimal composition")
    if settings.reserved_text_zone:
        lines.append(
            f"- Reserved Text Zone: Keep {settings.reserved_text_zone} area clear for text overlay integration"
        )
    if settings.props:
        lines.append(f"- Approved Props: Include only {', '.join(settings.props)} as complementary elements")
    else:
        lines.append("- No Props: Clean focus on furniture product without additional objects")
    lines.append(
        f"- Lighting Style: {_lighting_text(settings.lighting) or 'soft commercial'} with professional "
        "photography standards"
    )
    return "\n".join(lines)


def assemble_prompt(
    profile: ProductProfile,
    settings: UiSettings,
    context: Optional[str] = None,
) -> str:
    """Assemble the full template-driven prompt.

    Args:
        profile: Product being photographed
        settings: User generation settings
        context: Context preset; defaults to settings.context_preset

    Returns:
        Prompt text with sections separated by blank lines
    """
    preset = normalize_context_preset(context or settings.context_preset)

    sections = [
        build_opening(profile, settings, preset) + "\n\n" + build_product_specification(profile),
        build_context_elaboration(preset),
        build_constraint_enforcement(profile, settings, preset),
        build_settings_specifications(settings, preset),
        NEGATIVE_PROMPT,
    ]
    prompt = "\n\n".join(section.strip() for section in sections if section.strip())
    logger.debug("Assembled %s prompt (%d chars)", preset, len(prompt))
    return prompt


# ============================================================
# Precomputed fragment path
# ============================================================

_CONTEXT_REQUIREMENTS = {
    "packshot": (
        "🎯 COMMERCIAL PACKSHOT REQUIREMENTS:\n"
        "- Seamless white studio backdrop with professional gradient lighting\n"
        "- Furniture as exclusive visual focus with zero competing elements\n"
        "- Catalog quality suitable for large format printing"
    ),
    "lifestyle": (
        "🏠 LIFESTYLE ENVIRONMENT REQUIREMENTS:\n"
        "- Authentic office or upscale residential interior for the furniture category\n"
        "- Natural daylight with soft directional quality\n"
        "- Realistic spatial relationships and usage context"
    ),
    "hero": (
        "🌟 HERO BANNER REQUIREMENTS:\n"
        "- Architectural composition for website header placement\n"
        "- Negative space reserved for text overlay\n"
        "- Premium brand presentation with clear visual hierarchy"
    ),
    "social_media_square": (
        "📷 INSTAGRAM REQUIREMENTS:\n"
        "- Square 1:1 composition for feed showcase\n"
        "- Lighting tuned for mobile screens\n"
        "- Professional yet approachable brand aesthetic"
    ),
    "social_media_story": (
        "📱 STORY FORMAT REQUIREMENTS:\n"
        "- Vertical 9:16 composition for story formats\n"
        "- Product prominent within the vertical frame\n"
        "- Clean, uncluttered layout for quick impact"
    ),
    "detail": (
        "🔍 DETAIL CRAFTSMANSHIP REQUIREMENTS:\n"
        "- Macro-level view of construction and materials\n"
        "- Joinery, hardware and finish quality in sharp focus"
    ),
}

_FALLBACK_QUALITY = (
    "🎯 FURNITURE INDUSTRY QUALITY STANDARDS:\n"
    "- Photorealistic commercial furniture rendering\n"
    "- High-resolution detail with material clarity\n"
    "- No text, labels, model numbers, or watermarks"
)


def build_gpt_image_prompt(
    fragments: TextToImagePrompts,
    context: str,
    settings: UiSettings,
    profile: Optional[ProductProfile] = None,
) -> str:
    """Build a prompt from precomputed analysis fragments.

    Missing fragments fall back to generic commercial-photography text. When a
    profile is given the constraint block is appended; otherwise a short fixed
    quality block is used. The negative prompt always closes the text.
    """
    preset = normalize_context_preset(context)
    base = fragments.base_description or (
        "Professional commercial furniture photography meeting enterprise catalog standards"
    )
    context_fragment = fragments.for_context(preset) or (
        "Clean commercial furniture packshot with professional studio lighting"
    )
    specs = fragments.photography_specs
    visual = fragments.visual_details
    furniture_type = describe_product_type(profile) if profile else "commercial_grade_furniture"

    prompt = "\n".join([
        "🏢 ENTERPRISE FURNITURE PHOTOGRAPHY SPECIFICATION:",
        context_fragment,
        "",
        "📋 COMMERCIAL FURNITURE TECHNICAL REQUIREMENTS:",
        base,
        "",
        "🔧 MATERIAL & CONSTRUCTION SPECIFICATIONS:",
        f"- Materials: {visual.get('materialTextures') or 'Commercial-grade materials with authentic textures and finishes'}",
        f"- Color: {visual.get('colorPalette') or 'Precise color reproduction with accurate undertones'}",
        f"- Hardware: {visual.get('hardwareDetails') or 'Commercial-grade hardware and joint construction'}",
        f"- Proportions: {visual.get('proportionalRelationships') or 'Industry-standard proportions and scaling'}",
        "",
        "📸 PHOTOGRAPHY SPECIFICATIONS:",
        f"- Camera: {specs.get('cameraAngle') or 'Three-quarter view with human-scale perspective'}",
        f"- Lighting: {specs.get('lightingSetup') or 'Three-point lighting at 5600K'}",
        f"- Focus: {specs.get('depthOfField') or 'Sharp throughout at f/8'}",
        f"- Composition: {specs.get('composition') or 'Catalog composition with clear visual hierarchy'}",
        "",
        "⚙️ CLIENT SETTINGS:",
        f"- Background: {settings.background_style or 'professional neutral backdrop'}",
        f"- Position: {settings.product_position or 'centered'} placement for {furniture_type}",
        f"- Lighting: {_lighting_text(settings.lighting) or 'soft commercial lighting'}",
    ])

    prompt += "\n\n" + _CONTEXT_REQUIREMENTS[preset]

    if profile is not None:
        prompt += "\n\n" + build_constraint_enforcement(profile, settings, preset)
    else:
        prompt += "\n\n" + _FALLBACK_QUALITY

    prompt += "\n\n" + NEGATIVE_PROMPT
    return prompt.strip()


def build_prompt(
    profile: ProductProfile,
    settings: UiSettings,
    context: Optional[str] = None,
) -> str:
    """Build the prompt for a profile.

    Profiles carrying precomputed fragments with a base description use
    build_gpt_image_prompt(); everything else goes through assemble_prompt().
    """
    preset = normalize_context_preset(context or settings.context_preset)
    fragments = profile.text_to_image_prompts
    if fragments is not None and fragments.base_description:
        logger.debug("Using precomputed prompt fragments for %s", preset)
        return build_gpt_image_prompt(fragments, preset, settings, profile)
    return assemble_prompt(profile, settings, preset)
