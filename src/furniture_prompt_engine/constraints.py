"""
Constraint Catalog and Enforcement Block

Static, severity-tagged enforcement rules grouped by category:
- WALL_MOUNTED_CONSTRAINTS (only for wall-mounted products)
- MATERIAL_CONSTRAINTS
- COMMERCIAL_QUALITY_CONSTRAINTS
- CONTEXT_CONSTRAINTS (one subset per context preset)
- STRICT_MODE_CONSTRAINTS (only when strict mode is on)

select_constraints() is a pure function of (profile, settings, context);
build_constraint_enforcement() renders the selected rules as a banded
bullet block, critical first.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Optional

from furniture_prompt_engine.state import (
    ConstraintSeverity,
    ProductProfile,
    UiSettings,
    field_text,
    normalize_context_preset,
)

logger = logging.getLogger(__name__)

Predicate = Callable[[ProductProfile, UiSettings], bool]


@dataclass(frozen=True)
class ConstraintRule:
    """A single enforcement instruction injected into prompts"""

    id: str
    name: str
    description: str
    severity: ConstraintSeverity
    enforcement: str
    validation: Optional[Predicate] = None  # None means always applicable

    def applies(self, profile: ProductProfile, settings: UiSettings) -> bool:
        if self.validation is None:
            return True
        return bool(self.validation(profile, settings))


def _wall_mounted(profile: ProductProfile, settings: UiSettings) -> bool:
    return profile.is_wall_mounted


def _wall_mounted_desk(profile: ProductProfile, settings: UiSettings) -> bool:
    return profile.is_wall_mounted and "desk" in profile.type_text.lower()


def _has_materials(profile: ProductProfile, settings: UiSettings) -> bool:
    return bool(field_text(profile.materials))


def _has_color(profile: ProductProfile, settings: UiSettings) -> bool:
    return bool(profile.color_override or field_text(profile.detected_color))


def _has_proportions(profile: ProductProfile, settings: UiSettings) -> bool:
    dims = profile.real_dimensions
    return bool((dims is not None and not dims.is_empty()) or profile.type_text)


def _has_text_zone(profile: ProductProfile, settings: UiSettings) -> bool:
    return bool(settings.reserved_text_zone)


def _strict(profile: ProductProfile, settings: UiSettings) -> bool:
    return bool(settings.strict_mode)


# ============================================================
# Wall-mounted rules
# ============================================================

WALL_MOUNTED_CONSTRAINTS: list[ConstraintRule] = [
    ConstraintRule(
        id="wall_mounted_positioning",
        name="Wall-Mounted Safety Positioning",
        description="Product must remain securely attached to wall with no floor contact whatsoever",
        severity=ConstraintSeverity.CRITICAL,
        enforcement=(
            "CRITICAL WALL-MOUNTED SAFETY REQUIREMENT - MANDATORY COMPLIANCE: This furniture piece MUST "
            "remain securely attached to the wall at all times. ABSOLUTE ZERO-TOLERANCE PROHIBITION: No floor "
            "contact whatsoever, no legs touching ground, no free-standing placement, no detached positioning, "
            "no support from floor or other furniture. The product must appear properly wall-mounted with "
            "minimum 5cm clearance from floor surface. Wall attachment points must be clearly visible and "
            "structurally appropriate."
        ),
        validation=_wall_mounted,
    ),
    ConstraintRule(
        id="wall_mounted_desk_height_specification",
        name="Wall-Mounted Desk Standard Height Positioning",
        description="Wall-mounted desks must be positioned at exactly 75cm from floor to desktop surface",
        severity=ConstraintSeverity.CRITICAL,
        enforcement=(
            "CRITICAL DESK HEIGHT REQUIREMENT: Wall-mounted desks MUST be positioned at exactly 75cm "
            "(29.5 inches) from the floor to the desktop surface. The desk MUST appear suspended at this "
            "precise height with visible heavy-duty mounting hardware and clear open space underneath. "
            "No legs, supports, pedestals, or floor contact permitted."
        ),
        validation=_wall_mounted_desk,
    ),
    ConstraintRule(
        id="mounting_hardware_visibility",
        name="Commercial Grade Mounting Hardware Visibility",
        description="Wall mounting system must show commercial-grade hardware appropriate for the load",
        severity=ConstraintSeverity.HIGH,
        enforcement=(
            "COMMERCIAL MOUNTING SYSTEM REQUIREMENT: Display commercial-grade wall-mounting hardware suitable "
            "for this furniture type and load. Desks: heavy-duty cantilever brackets, French cleats or "
            "fold-down mechanisms. Shelving: steel brackets or track systems. Cabinets: hidden brackets or "
            "rail systems. Hardware must appear robust and properly sized."
        ),
        validation=_wall_mounted,
    ),
    ConstraintRule(
        id="wall_clearance_specifications",
        name="Precise Wall Clearance Specifications",
        description="Spacing between product and wall surface for proper installation",
        severity=ConstraintSeverity.HIGH,
        enforcement=(
            "INSTALLATION CLEARANCE REQUIREMENT: Maintain realistic clearance between the furniture piece "
            "and the wall surface. Desks: 5-10cm mounting depth with cable space behind. Shelves: "
            "1-3 inch mounting depth. Cabinets: room for doors and drawers to open."
        ),
        validation=_wall_mounted,
    ),
    ConstraintRule(
        id="absolute_floor_contact_prohibition",
        name="Absolute Floor Contact Prohibition",
        description="No part of wall-mounted furniture may touch the floor",
        severity=ConstraintSeverity.CRITICAL,
        enforcement=(
            "ABSOLUTE FLOOR CONTACT PROHIBITION - ZERO TOLERANCE: NO PART of this wall-mounted furniture may "
            "touch, rest on, or be supported by the floor. Minimum 5cm visible gap between the lowest point "
            "of the furniture and the floor. No legs, feet, bases, pedestals or stands."
        ),
        validation=_wall_mounted,
    ),
    ConstraintRule(
        id="wall_suspension_visual_verification",
        name="Wall Suspension Visual Verification",
        description="Furniture must visually appear suspended from the wall mounting system",
        severity=ConstraintSeverity.CRITICAL,
        enforcement=(
            "WALL SUSPENSION VERIFICATION REQUIREMENT: The furniture MUST visibly hang from the wall mounting "
            "system: mounting hardware, clear space beneath, wall attachment points, floating appearance. "
            "Nothing may suggest floor support or free-standing stability."
        ),
        validation=_wall_mounted,
    ),
    ConstraintRule(
        id="structural_wall_compatibility",
        name="Wall Structure Compatibility Requirements",
        description="Mounting must appear compatible with commercial wall construction",
        severity=ConstraintSeverity.MEDIUM,
        enforcement=(
            "STRUCTURAL COMPATIBILITY REQUIREMENT: Wall mounting must look compatible with commercial "
            "construction standards, with stud-backed drywall for heavy items and hardware suited to the "
            "wall type."
        ),
        validation=_wall_mounted,
    ),
]


# ============================================================
# Material fidelity rules
# ============================================================

MATERIAL_CONSTRAINTS: list[ConstraintRule] = [
    ConstraintRule(
        id="material_accuracy",
        name="Enterprise Material Accuracy",
        description="Exact reproduction of specified materials",
        severity=ConstraintSeverity.CRITICAL,
        enforcement=(
            "ENTERPRISE MATERIAL FIDELITY CRITICAL: Reproduce EXACT material specifications with authentic "
            "surface textures, grain patterns, finish characteristics and reflectance. No artistic "
            "interpretation or stylization of materials."
        ),
        validation=_has_materials,
    ),
    ConstraintRule(
        id="surface_texture_authenticity",
        name="Commercial Grade Surface Texture Authenticity",
        description="Precise representation of material surface properties",
        severity=ConstraintSeverity.HIGH,
        enforcement=(
            "COMMERCIAL SURFACE TEXTURE REQUIREMENT: Wood shows grain direction and natural character marks, "
            "metal shows brushing patterns and mill finish, leather shows grain and natural wrinkles, fabric "
            "shows weave and thread."
        ),
        validation=_has_materials,
    ),
    ConstraintRule(
        id="color_fidelity",
        name="Enterprise Color Fidelity Standards",
        description="Precise color reproduction including undertones",
        severity=ConstraintSeverity.CRITICAL,
        enforcement=(
            "ENTERPRISE COLOR ACCURACY CRITICAL: Maintain EXACT color specifications including undertones, "
            "highlights, shadow characteristics and material-appropriate reflectance."
        ),
        validation=_has_color,
    ),
    ConstraintRule(
        id="finish_quality",
        name="Finish Quality Standards",
        description="Professional-grade finish appearance",
        severity=ConstraintSeverity.HIGH,
        enforcement=(
            "FINISH QUALITY REQUIREMENT: Display professional commercial-grade finish quality with appropriate "
            "sheen levels and surface smoothness."
        ),
    ),
]


# ============================================================
# Commercial quality rules
# ============================================================

COMMERCIAL_QUALITY_CONSTRAINTS: list[ConstraintRule] = [
    ConstraintRule(
        id="professional_construction",
        name="Professional Construction Standards",
        description="Enterprise-grade construction quality indicators",
        severity=ConstraintSeverity.HIGH,
        enforcement=(
            "COMMERCIAL CONSTRUCTION REQUIREMENT: Show tight tolerances, clean joint lines, precise alignments "
            "and enterprise-grade hardware."
        ),
    ),
    ConstraintRule(
        id="proportional_accuracy",
        name="Proportional Accuracy",
        description="Correct furniture proportions and scaling",
        severity=ConstraintSeverity.CRITICAL,
        enforcement=(
            "PROPORTIONAL ACCURACY CRITICAL: Maintain correct furniture proportions, scaling between "
            "components and realistic dimensions for the furniture type."
        ),
        validation=_has_proportions,
    ),
    ConstraintRule(
        id="hardware_quality",
        name="Hardware Quality Standards",
        description="Commercial-grade hardware appearance",
        severity=ConstraintSeverity.MEDIUM,
        enforcement=(
            "HARDWARE QUALITY REQUIREMENT: Hinges, handles, brackets and fasteners must look robust and "
            "professionally finished."
        ),
    ),
]


# ============================================================
# Context-specific rules
# ============================================================

CONTEXT_CONSTRAINTS: dict[str, list[ConstraintRule]] = {
    "packshot": [
        ConstraintRule(
            id="packshot_background",
            name="Packshot Background Requirements",
            description="Clean studio background with no distractions",
            severity=ConstraintSeverity.CRITICAL,
            enforcement=(
                "PACKSHOT BACKGROUND CRITICAL: Use only a seamless white studio background. No environmental "
                "elements or unapproved props. Product must be the sole focus."
            ),
        ),
        ConstraintRule(
            id="packshot_lighting",
            name="Studio Lighting Standards",
            description="Professional three-point lighting setup",
            severity=ConstraintSeverity.HIGH,
            enforcement=(
                "STUDIO LIGHTING REQUIREMENT: Three-point lighting with key, fill and rim lights; soft and even "
                "while keeping material texture definition."
            ),
        ),
    ],
    "lifestyle": [
        ConstraintRule(
            id="lifestyle_environment",
            name="Realistic Environment Context",
            description="Authentic interior environment settings",
            severity=ConstraintSeverity.HIGH,
            enforcement=(
                "LIFESTYLE ENVIRONMENT REQUIREMENT: Show the product in a realistic, professionally designed "
                "interior that enhances it without overshadowing it."
            ),
        ),
        ConstraintRule(
            id="lifestyle_integration",
            name="Natural Product Integration",
            description="Product naturally integrated within scene",
            severity=ConstraintSeverity.MEDIUM,
            enforcement=(
                "NATURAL INTEGRATION REQUIREMENT: Product should appear naturally placed, with consistent "
                "lighting, shadows and spatial relationships."
            ),
        ),
    ],
    "hero": [
        ConstraintRule(
            id="hero_composition",
            name="Banner Composition Requirements",
            description="Composition optimized for website headers",
            severity=ConstraintSeverity.HIGH,
            enforcement=(
                "HERO BANNER REQUIREMENT: Compose for website header usage with negative space for text "
                "overlay and strong visual impact."
            ),
        ),
        ConstraintRule(
            id="hero_text_space",
            name="Text Overlay Space Reservation",
            description="Reserved space for text overlay integration",
            severity=ConstraintSeverity.MEDIUM,
            enforcement=(
                "TEXT SPACE REQUIREMENT: Reserve the specified text zone for typography without compromising "
                "product visibility."
            ),
            validation=_has_text_zone,
        ),
    ],
    "social_media_square": [
        ConstraintRule(
            id="instagram_format",
            name="Square Format Optimization",
            description="1:1 aspect ratio composition",
            severity=ConstraintSeverity.CRITICAL,
            enforcement=(
                "INSTAGRAM FORMAT CRITICAL: Compose for a 1:1 square aspect ratio with the product centered "
                "and prominent within the frame."
            ),
        ),
        ConstraintRule(
            id="social_appeal",
            name="Social Media Visual Appeal",
            description="Engaging composition for social media",
            severity=ConstraintSeverity.MEDIUM,
            enforcement=(
                "SOCIAL MEDIA APPEAL REQUIREMENT: Visually engaging, thumb-stopping composition optimized for "
                "mobile viewing."
            ),
        ),
    ],
    "social_media_story": [
        ConstraintRule(
            id="vertical_composition",
            name="Vertical Mobile Composition",
            description="9:16 aspect ratio for mobile stories",
            severity=ConstraintSeverity.CRITICAL,
            enforcement=(
                "VERTICAL STORY CRITICAL: Compose for a 9:16 vertical aspect ratio with the product "
                "prominently displayed in the vertical frame."
            ),
        ),
    ],
    "detail": [
        ConstraintRule(
            id="detail_focus",
            name="Material Detail Focus",
            description="Close-up emphasis on materials and construction",
            severity=ConstraintSeverity.HIGH,
            enforcement=(
                "DETAIL FOCUS REQUIREMENT: Emphasize material textures, surface finishes, construction details "
                "and craftsmanship using macro photography."
            ),
        ),
    ],
}


# ============================================================
# Strict mode rules
# ============================================================

STRICT_MODE_CONSTRAINTS: list[ConstraintRule] = [
    ConstraintRule(
        id="no_text_elements",
        name="Text Element Prohibition",
        description="Absolutely no text, labels, or written content",
        severity=ConstraintSeverity.CRITICAL,
        enforcement=(
            "TEXT PROHIBITION CRITICAL: Absolutely no text, labels, captions, watermarks, logos, product "
            "numbers, model identifiers, or any written content within the image. Image must be completely "
            "free of textual elements."
        ),
        validation=_strict,
    ),
    ConstraintRule(
        id="no_extra_objects",
        name="Extra Object Prohibition",
        description="No additional furniture or objects beyond approved props",
        severity=ConstraintSeverity.CRITICAL,
        enforcement=(
            "OBJECT PROHIBITION CRITICAL: Do not add furniture pieces, decorative objects, or elements not "
            "specifically listed in approved props."
        ),
        validation=_strict,
    ),
    ConstraintRule(
        id="commercial_photography_only",
        name="Commercial Photography Standards",
        description="Professional commercial photography quality only",
        severity=ConstraintSeverity.HIGH,
        enforcement=(
            "COMMERCIAL STANDARD REQUIREMENT: Maintain professional commercial photography standards. "
            "No consumer-grade or amateur aesthetics."
        ),
        validation=_strict,
    ),
]


# ============================================================
# Selection
# ============================================================

def select_constraints(
    profile: ProductProfile,
    settings: UiSettings,
    context: Optional[str] = None,
) -> list[ConstraintRule]:
    """Return the applicable rules in source order, de-duplicated by id.

    Sources are consulted in a fixed order (wall-mounted, material, commercial
    quality, context, strict mode); the first rule seen with a given id wins.
    ``context`` defaults to ``settings.context_preset``.
    """
    preset = normalize_context_preset(context or settings.context_preset)

    sources: list[list[ConstraintRule]] = []
    if profile.is_wall_mounted:
        sources.append(WALL_MOUNTED_CONSTRAINTS)
    sources.append(MATERIAL_CONSTRAINTS)
    sources.append(COMMERCIAL_QUALITY_CONSTRAINTS)
    sources.append(CONTEXT_CONSTRAINTS.get(preset, []))
    if settings.strict_mode:
        sources.append(STRICT_MODE_CONSTRAINTS)

    selected: list[ConstraintRule] = []
    seen: set[str] = set()
    for source in sources:
        for rule in source:
            if rule.id in seen or not rule.applies(profile, settings):
                continue
            seen.add(rule.id)
            selected.append(rule)

    logger.debug("Selected %d constraints for context=%s", len(selected), preset)
    return selected


def sort_by_severity(rules: list[ConstraintRule]) -> list[ConstraintRule]:
    """Stable sort, CRITICAL first and LOW last."""
    return sorted(rules, key=lambda rule: rule.severity.rank)


# ============================================================
# Rendering
# ============================================================

_RULE_LINE = "=" * 70

# (heading, severities rendered under it)
_BANDS = [
    ("🔴 CRITICAL REQUIREMENTS (MANDATORY):", (ConstraintSeverity.CRITICAL,)),
    ("🟠 HIGH PRIORITY REQUIREMENTS:", (ConstraintSeverity.HIGH,)),
    ("🟡 STANDARD REQUIREMENTS:", (ConstraintSeverity.MEDIUM, ConstraintSeverity.LOW)),
]

CONSTRAINT_BLOCK_HEADER = "🚨 ENTERPRISE FURNITURE CONSTRAINTS (STRICT ADHERENCE REQUIRED):"


def render_constraint_block(rules: list[ConstraintRule]) -> str:
    """Render rules as severity bands followed by a count summary."""
    ordered = sort_by_severity(rules)
    lines = [CONSTRAINT_BLOCK_HEADER, _RULE_LINE]

    counts = []
    for heading, severities in _BANDS:
        band = [rule for rule in ordered if rule.severity in severities]
        counts.append(len(band))
        if not band:
            continue
        lines.append("")
        lines.append(heading)
        for rule in band:
            lines.append(f"• {rule.enforcement}")

    lines.append(_RULE_LINE)
    lines.append(f"TOTAL CONSTRAINTS ENFORCED: {len(ordered)}")
    lines.append(f"- Critical: {counts[0]}")
    lines.append(f"- High Priority: {counts[1]}")
    lines.append(f"- Standard: {counts[2]}")
    lines.append(_RULE_LINE)
    return "\n".join(lines)


def build_constraint_enforcement(
    profile: ProductProfile,
    settings: UiSettings,
    context: Optional[str] = None,
) -> str:
    """Select the applicable rules and render them as a prompt block."""
    return render_constraint_block(select_constraints(profile, settings, context))


def get_constraint_statistics(
    profile: ProductProfile,
    settings: UiSettings,
    context: Optional[str] = None,
) -> dict[str, int]:
    """Count applicable rules per severity, for logging and the CLI."""
    rules = select_constraints(profile, settings, context)
    stats = {"total": len(rules)}
    for severity in ConstraintSeverity:
        stats[severity.value.lower()] = sum(1 for rule in rules if rule.severity is severity)
    return stats
