"""
Furniture Vocabulary - Trade Terminology Helpers

This module provides:
- FURNITURE_CATEGORIES: enterprise product classifications by market
- Type, material, style and feature descriptions used in prompt text
- Placement, environment and color specification helpers

Every helper is total: unknown input falls through to a generic
"professional"/"commercial_grade" description.
"""

import re

from furniture_prompt_engine.state import ProductProfile, UiSettings, field_list, field_text


# ============================================================
# Classifications
# ============================================================

FURNITURE_CATEGORIES: dict[str, dict[str, list[str]]] = {
    "office": {
        "seating": [
            "executive_chair", "task_chair", "conference_chair", "guest_chair", "drafting_stool",
            "ergonomic_office_chair", "mesh_back_chair", "swivel_chair", "stacking_chair",
        ],
        "desking": [
            "executive_desk", "sit_stand_desk", "corner_desk", "reception_desk", "workstation",
            "height_adjustable_desk", "conference_table", "meeting_table", "standing_desk",
            "l_shaped_desk", "u_shaped_desk",
        ],
        "storage": [
            "filing_cabinet", "bookcase", "shelving_unit", "credenza", "storage_tower",
            "lateral_file", "mobile_pedestal", "display_cabinet",
        ],
    },
    "residential": {
        "seating": [
            "dining_chair", "lounge_chair", "accent_chair", "recliner", "sectional_sofa",
            "loveseat", "ottoman", "bar_stool", "armchair", "chaise_lounge",
        ],
        "tables": [
            "dining_table", "coffee_table", "side_table", "console_table", "end_table",
            "nesting_tables", "bistro_table", "extension_table",
        ],
        "storage": [
            "dresser", "chest_of_drawers", "armoire", "entertainment_center", "bookshelf",
            "china_cabinet", "sideboard", "buffet", "shoe_cabinet",
        ],
        "bedroom": ["bed_frame", "headboard", "nightstand", "bedside_table", "vanity", "wardrobe"],
    },
    "hospitality": {
        "seating": ["restaurant_booth_seating", "lounge_chair_hospitality", "dining_chair_stackable_commercial"],
        "tables": ["restaurant_table_laminate_top", "hotel_room_desk_compact", "cocktail_table_high_top"],
        "casegoods": ["lobby_reception_desk", "restaurant_server_station", "luggage_rack_folding"],
    },
    "healthcare": {
        "seating": ["patient_waiting_chair", "medical_exam_chair", "rehabilitation_chair"],
        "tables": ["medical_exam_table", "overbed_table_adjustable", "instrument_table_stainless"],
    },
    "education": {
        "seating": ["classroom_stack_chair", "library_study_chair", "lecture_hall_seating"],
        "tables": ["library_study_table", "science_lab_table_phenolic", "collaboration_table_hexagonal"],
    },
}

# Generic names mapped straight to a trade description
_TYPE_MAP = {
    "chair": "professional_ergonomic_task_chair",
    "desk": "commercial_executive_workstation",
    "walldesk": "floating_wall_desk_cantilever_design",
    "wallmounteddesk": "wall_mounted_floating_desk_75cm_height",
    "floatingdesk": "wall_mounted_desk_suspended_design",
    "table": "conference_room_meeting_table",
    "cabinet": "modular_storage_system_commercial_grade",
    "shelf": "adjustable_shelving_unit_steel_construction",
    "lamp": "articulating_led_desk_lamp",
    "stool": "height_adjustable_drafting_stool",
    "bench": "commercial_seating_bench",
    "dresser": "bedroom_storage_dresser_solid_wood",
    "nightstand": "bedside_table_two_drawer",
    "bookcase": "library_bookshelf_adjustable_shelves",
    "wardrobe": "bedroom_armoire_hanging_storage",
    "sofa": "commercial_lounge_sofa_three_seat",
    "ottoman": "upholstered_ottoman_storage",
    "sideboard": "dining_room_credenza_buffet",
}

_PLACEMENT_DESCRIPTIONS = {
    "wall_mounted": "Wall-mounted with appropriate mounting hardware",
    "floor_standing": "Floor-standing with base or leg support system",
    "table_top": "Designed for table or surface placement",
    "ceiling_mounted": "Ceiling-mounted with appropriate suspension system",
    "built_in": "Built-in installation system",
    "modular": "Modular connection system",
}

_ENVIRONMENTS = {
    "office": "modern commercial office",
    "residential": "contemporary residential interior",
    "hospitality": "upscale hospitality environment",
    "healthcare": "professional healthcare facility",
    "education": "modern educational facility",
}


def _squash(text: str) -> str:
    return re.sub(r"[-_\s]", "", text.lower())


# ============================================================
# Descriptions
# ============================================================

def get_furniture_type_description(furniture_type: str) -> str:
    """Translate a generic product type into trade terminology.

    Exact generic names win, then the first catalog entry that contains the
    type (or is contained in it), then a ``commercial_grade_`` fallback.
    """
    normalized = _squash(furniture_type)
    if normalized in _TYPE_MAP:
        return _TYPE_MAP[normalized]

    if len(normalized) >= 3:
        for category, groups in FURNITURE_CATEGORIES.items():
            for products in groups.values():
                for product in products:
                    squashed = product.replace("_", "")
                    if normalized in squashed or squashed in normalized:
                        return f"{category}_{product}"

    slug = re.sub(r"[-_\s]+", "_", furniture_type.strip().lower()) or "furniture"
    return f"commercial_grade_{slug}"


def get_material_description(material: str) -> str:
    lowered = material.lower()
    if any(word in lowered for word in ("wood", "oak", "maple")):
        return "solid_hardwood_construction"
    if "metal" in lowered or "steel" in lowered:
        return "powder_coated_steel_frame"
    if "leather" in lowered:
        return "full_grain_leather_upholstery"
    if "fabric" in lowered:
        return "commercial_grade_fabric"
    return f"premium_{material}_construction"


def get_style_description(style: str) -> str:
    lowered = style.lower()
    if "modern" in lowered:
        return "contemporary_commercial_design"
    if "traditional" in lowered:
        return "classic_professional_styling"
    if "industrial" in lowered:
        return "urban_industrial_aesthetic"
    if "minimal" in lowered:
        return "clean_minimalist_design"
    return f"professional_{style}_design"


def build_material_specification(materials: list[str]) -> str:
    return ", ".join(get_material_description(m) for m in materials)


def build_feature_specification(features: list[str]) -> str:
    """Describe features in trade terms, skipping blank entries."""
    described = []
    for feature in features:
        if not feature or not feature.strip():
            continue
        lowered = feature.lower()
        if "adjust" in lowered:
            described.append("height_adjustable_mechanism")
        elif "storage" in lowered:
            described.append("integrated_storage_solution")
        elif "wheel" in lowered:
            described.append("smooth_rolling_casters")
        else:
            described.append("professional_" + re.sub(r"\s+", "_", feature.strip()))
    return ", ".join(described)


def get_placement_description(placement_type: str) -> str:
    return _PLACEMENT_DESCRIPTIONS.get(placement_type, "Standard support system as designed")


# ============================================================
# Profile-level helpers
# ============================================================

def describe_product_type(profile: ProductProfile) -> str:
    return get_furniture_type_description(field_text(profile.type, "furniture"))


def describe_materials(profile: ProductProfile) -> str:
    materials = field_list(profile.materials) or ["standard"]
    return build_material_specification(materials)


def describe_style(profile: ProductProfile) -> str:
    return get_style_description(field_text(profile.style, "modern"))


def build_construction_details(profile: ProductProfile) -> str:
    details = build_feature_specification(field_list(profile.features))
    return details or "professional construction details"


def determine_environment_type(context: str, settings: UiSettings) -> str:
    """Interior type for lifestyle scenes; other contexts have none."""
    if context != "lifestyle":
        return ""
    return _ENVIRONMENTS.get(settings.background_style, "professional commercial interior")


def get_color_specification(profile: ProductProfile) -> str:
    if profile.color_override:
        return f"{profile.color_override} with accurate color fidelity and undertones"
    detected = field_text(profile.detected_color)
    if detected:
        return f"{detected} with authentic material color characteristics"
    return "accurate material color representation"
