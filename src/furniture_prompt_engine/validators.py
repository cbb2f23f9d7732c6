# Schema and Rule-based validators
# Layer 1: Schema validation (raw profile / settings dicts)
# Layer 2: Rules validation (assembled prompt text)

from typing import Any, Optional

from furniture_prompt_engine.constraints import STRICT_MODE_CONSTRAINTS, WALL_MOUNTED_CONSTRAINTS
from furniture_prompt_engine.prompt_builder import NEGATIVE_PROMPT
from furniture_prompt_engine.state import (
    CONTEXT_PRESETS,
    ProductProfile,
    ReviewLevel,
    ReviewResult,
    UiSettings,
    field_int,
    get_field_value,
)

VALID_QUALITIES = ("high", "medium", "low")
VALID_CONTEXT_NAMES = CONTEXT_PRESETS + ("instagram", "story")
MAX_VARIATIONS = 4


def clamp_variations(value: Any) -> int:
    """Clamp a requested variation count into 1..MAX_VARIATIONS."""
    return min(max(field_int(value, 1), 1), MAX_VARIATIONS)


def _is_text_or_text_list(value: Any) -> bool:
    if isinstance(value, str):
        return True
    return isinstance(value, list) and all(isinstance(v, str) for v in value)


# ===== Layer 1: Schema Validators =====


def validate_profile_schema(data: dict[str, Any]) -> ReviewResult:
    """Validate a raw product profile dict (Layer 1)"""
    errors: list[str] = []

    if not isinstance(data, dict):
        return ReviewResult(passed=False, level=ReviewLevel.SCHEMA, errors=["Profile must be an object"])

    product_type = get_field_value(data.get("type"))
    if product_type in (None, "", []):
        errors.append("Missing required field: type")
    elif not _is_text_or_text_list(data.get("type")):
        errors.append("type must be a string or list of strings")

    for name in ("materials", "style", "detectedColor", "features", "placementType"):
        value = data.get(name)
        if value is not None and not _is_text_or_text_list(value):
            errors.append(f"{name} must be a string or list of strings")

    for name in ("colorOverride", "notes"):
        value = data.get(name)
        if value is not None and not isinstance(value, str):
            errors.append(f"{name} must be a string")

    wall_mounted = data.get("wallMounted")
    if wall_mounted is not None and not isinstance(wall_mounted, (bool, str, list)):
        errors.append("wallMounted must be a boolean")

    dims = data.get("realDimensions")
    if dims is not None:
        if not isinstance(dims, dict):
            errors.append("realDimensions must be an object")
        else:
            for axis in ("width", "height", "depth"):
                value = dims.get(axis)
                if value is None:
                    continue
                if isinstance(value, bool) or not isinstance(value, (int, float)):
                    errors.append(f"realDimensions.{axis} must be a number")
                elif value < 0:
                    errors.append(f"realDimensions.{axis} must not be negative")

    fragments = data.get("textToImagePrompts")
    if fragments is not None and not isinstance(fragments, dict):
        errors.append("textToImagePrompts must be an object")

    return ReviewResult(passed=len(errors) == 0, level=ReviewLevel.SCHEMA, errors=errors)


def validate_settings_schema(data: dict[str, Any]) -> ReviewResult:
    """Validate a raw UI settings dict (Layer 1)"""
    errors: list[str] = []

    if not isinstance(data, dict):
        return ReviewResult(passed=False, level=ReviewLevel.SCHEMA, errors=["Settings must be an object"])

    context = data.get("contextPreset")
    if context is not None and context not in VALID_CONTEXT_NAMES:
        errors.append(f"Invalid contextPreset: {context}. Must be one of {list(CONTEXT_PRESETS)}")

    quality = data.get("quality")
    if quality is not None and quality not in VALID_QUALITIES:
        errors.append(f"Invalid quality: {quality}. Must be one of {list(VALID_QUALITIES)}")

    variations = data.get("variations")
    if variations is not None:
        if isinstance(variations, bool) or not isinstance(variations, int):
            errors.append("variations must be an integer")
        elif not 1 <= variations <= MAX_VARIATIONS:
            errors.append(f"variations must be between 1 and {MAX_VARIATIONS}")

    for name in ("props", "formats"):
        value = data.get(name)
        if value is not None and not (isinstance(value, list) and all(isinstance(v, str) for v in value)):
            errors.append(f"{name} must be an array of strings")

    strict = data.get("strictMode")
    if strict is not None and not isinstance(strict, bool):
        errors.append("strictMode must be a boolean")

    for name in ("backgroundStyle", "productPosition", "lighting", "reservedTextZone"):
        value = data.get(name)
        if value is not None and not isinstance(value, str):
            errors.append(f"{name} must be a string")

    return ReviewResult(passed=len(errors) == 0, level=ReviewLevel.SCHEMA, errors=errors)


# ===== Layer 2: Rules Validators =====


def validate_prompt_rules(
    prompt: str,
    profile: ProductProfile,
    settings: UiSettings,
    limit: Optional[int] = None,
) -> ReviewResult:
    """Check an assembled (unoptimized) prompt against the selection rules (Layer 2)

    - length within ``limit`` when one is given
    - negative prompt present
    - wall-mount enforcement present exactly when the profile is wall-mounted
    - strict-mode text prohibition present exactly when strict mode is on
    """
    errors: list[str] = []
    if not prompt.strip():
        return ReviewResult(passed=False, level=ReviewLevel.RULES, errors=["Prompt is empty"])

    if limit is not None and len(prompt) > limit:
        errors.append(f"Prompt length {len(prompt)} exceeds limit {limit}")

    if NEGATIVE_PROMPT not in prompt:
        errors.append("Negative prompt missing")

    wall_texts = [rule.enforcement for rule in WALL_MOUNTED_CONSTRAINTS]
    has_wall_rule = any(text in prompt for text in wall_texts)
    if profile.is_wall_mounted and not has_wall_rule:
        errors.append("Wall-mounted product but no wall-mount enforcement in prompt")
    if not profile.is_wall_mounted and has_wall_rule:
        errors.append("Wall-mount enforcement present for a free-standing product")

    no_text_rule = next(rule for rule in STRICT_MODE_CONSTRAINTS if rule.id == "no_text_elements")
    has_text_rule = no_text_rule.enforcement in prompt
    if settings.strict_mode and not has_text_rule:
        errors.append("Strict mode on but text prohibition missing")
    if not settings.strict_mode and has_text_rule:
        errors.append("Text prohibition present while strict mode is off")

    return ReviewResult(passed=len(errors) == 0, level=ReviewLevel.RULES, errors=errors)
