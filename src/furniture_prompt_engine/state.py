# Product profile, UI settings and review result definitions
# Plain data consumed by the constraint selector and prompt builders

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import Any, Literal, Optional, get_args


class ConstraintSeverity(str, Enum):
    """Severity of a constraint rule, highest first"""

    CRITICAL = "CRITICAL"  # Generation is useless if violated
    HIGH = "HIGH"  # Emphasised in several places
    MEDIUM = "MEDIUM"  # Single clear instruction
    LOW = "LOW"  # Guidance only

    @property
    def rank(self) -> int:
        return _SEVERITY_RANK[self]


_SEVERITY_RANK = {
    ConstraintSeverity.CRITICAL: 0,
    ConstraintSeverity.HIGH: 1,
    ConstraintSeverity.MEDIUM: 2,
    ConstraintSeverity.LOW: 3,
}


class ReviewLevel(IntEnum):
    """Review levels: Schema(1) -> Rules(2)"""

    SCHEMA = 1  # Input structure checks
    RULES = 2  # Checks on the assembled prompt text


@dataclass
class ReviewResult:
    """Review result"""

    passed: bool
    level: ReviewLevel
    errors: list[str] = field(default_factory=list)
    feedback: Optional[str] = None


# Context preset definition
ContextPreset = Literal[
    "packshot",
    "lifestyle",
    "hero",
    "social_media_square",
    "social_media_story",
    "detail",
]

CONTEXT_PRESETS: tuple[str, ...] = get_args(ContextPreset)

# Older names still sent by some clients
_CONTEXT_ALIASES = {
    "instagram": "social_media_square",
    "story": "social_media_story",
}

Quality = Literal["high", "medium", "low"]


def normalize_context_preset(value: Optional[str]) -> str:
    """Map a raw context name to a canonical preset, defaulting to packshot."""
    if not value:
        return "packshot"
    key = str(value).strip().lower().replace("-", "_")
    key = _CONTEXT_ALIASES.get(key, key)
    return key if key in CONTEXT_PRESETS else "packshot"


def get_field_value(value: Any) -> Any:
    """Collapse a one-element list to its element; everything else is returned as is."""
    if isinstance(value, (list, tuple)):
        return value[0] if len(value) == 1 else list(value)
    return value


def field_text(value: Any, default: str = "") -> str:
    """Render a string-or-list profile field as text.

    Lists are joined with ", ". Empty values fall back to ``default``.
    """
    value = get_field_value(value)
    if isinstance(value, list):
        parts = [str(v).strip() for v in value if v is not None and str(v).strip()]
        return ", ".join(parts) if parts else default
    if value is None or value is False:
        return default
    text = str(value).strip()
    return text or default


def field_list(value: Any) -> list[str]:
    """Render a string-or-list profile field as a list of non-empty strings."""
    if value is None or value is False:
        return []
    if isinstance(value, (list, tuple)):
        return [str(v).strip() for v in value if v is not None and str(v).strip()]
    text = str(value).strip()
    return [text] if text else []


def _pick(data: dict, *keys: str, default: Any = None) -> Any:
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    return default


def _as_bool(value: Any) -> bool:
    """Read a flag that may arrive as bool, string ("true", "yes", "1") or one-element list."""
    value = get_field_value(value)
    if isinstance(value, str):
        return value.strip().lower() in ("true", "yes", "1")
    return bool(value)


def field_int(value: Any, default: int) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


@dataclass
class RealDimensions:
    """Physical dimensions in centimetres"""

    width: Optional[float] = None
    height: Optional[float] = None
    depth: Optional[float] = None

    def is_empty(self) -> bool:
        return not (self.width or self.height or self.depth)

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> Optional["RealDimensions"]:
        if not isinstance(data, dict):
            return None
        return cls(
            width=data.get("width"),
            height=data.get("height"),
            depth=data.get("depth"),
        )


@dataclass
class TextToImagePrompts:
    """Per-context prompt fragments produced by an upstream product analysis."""

    base_description: Optional[str] = None
    contexts: dict[str, str] = field(default_factory=dict)
    photography_specs: dict[str, str] = field(default_factory=dict)
    visual_details: dict[str, str] = field(default_factory=dict)

    def for_context(self, context: str) -> Optional[str]:
        return self.contexts.get(context) or self.contexts.get("packshot")

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> Optional["TextToImagePrompts"]:
        if not isinstance(data, dict):
            return None
        contexts: dict[str, str] = {}
        for key, value in data.items():
            if not isinstance(value, str):
                continue
            name = _CONTEXT_ALIASES.get(key, key)
            if name in CONTEXT_PRESETS:
                contexts[name] = value
        return cls(
            base_description=_pick(data, "baseDescription", "base_description"),
            contexts=contexts,
            photography_specs=_camel_keys(_pick(data, "photographySpecs", "photography_specs")),
            visual_details=_camel_keys(_pick(data, "visualDetails", "visual_details")),
        )


def _camel_keys(data: Optional[dict]) -> dict[str, str]:
    """Normalise snake_case keys (camera_angle) to camelCase (cameraAngle)."""
    if not isinstance(data, dict):
        return {}
    result = {}
    for key, value in data.items():
        head, *rest = str(key).split("_")
        result[head + "".join(part.title() for part in rest)] = value
    return result


@dataclass
class ProductProfile:
    """One physical product as described by image analysis.

    String fields may also hold lists (analysis sometimes returns several
    candidates); read them through ``get_field_value`` / ``field_text``.
    """

    type: Any = None
    materials: Any = None
    style: Any = None
    detected_color: Any = None
    color_override: Optional[str] = None
    features: Any = field(default_factory=list)
    placement_type: Any = None
    real_dimensions: Optional[RealDimensions] = None
    wall_mounted: Any = False
    notes: Optional[str] = None
    text_to_image_prompts: Optional[TextToImagePrompts] = None
    analysis_version: Optional[str] = None

    @property
    def is_wall_mounted(self) -> bool:
        return _as_bool(self.wall_mounted)

    @property
    def type_text(self) -> str:
        return field_text(self.type)

    @classmethod
    def from_dict(cls, data: dict) -> "ProductProfile":
        """Build a profile from camelCase or snake_case keys."""
        return cls(
            type=_pick(data, "type"),
            materials=_pick(data, "materials"),
            style=_pick(data, "style"),
            detected_color=_pick(data, "detectedColor", "detected_color"),
            color_override=_pick(data, "colorOverride", "color_override"),
            features=_pick(data, "features", default=[]),
            placement_type=_pick(data, "placementType", "placement_type"),
            real_dimensions=RealDimensions.from_dict(_pick(data, "realDimensions", "real_dimensions")),
            wall_mounted=_pick(data, "wallMounted", "wall_mounted", default=False),
            notes=_pick(data, "notes"),
            text_to_image_prompts=TextToImagePrompts.from_dict(
                _pick(data, "textToImagePrompts", "text_to_image_prompts")
            ),
            analysis_version=_pick(data, "analysisVersion", "analysis_version"),
        )


@dataclass
class UiSettings:
    """User-chosen generation parameters for one request"""

    background_style: str = "white"
    product_position: str = "center"
    reserved_text_zone: Optional[str] = None
    props: list[str] = field(default_factory=list)
    lighting: str = "soft_daylight"
    strict_mode: bool = False
    context_preset: str = "packshot"
    variations: int = 1
    quality: Quality = "high"
    formats: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict) -> "UiSettings":
        """Build settings from camelCase or snake_case keys."""
        defaults = cls()
        return cls(
            background_style=_pick(data, "backgroundStyle", "background_style", default=defaults.background_style),
            product_position=_pick(data, "productPosition", "product_position", default=defaults.product_position),
            reserved_text_zone=_pick(data, "reservedTextZone", "reserved_text_zone") or None,
            props=field_list(_pick(data, "props", default=[])),
            lighting=_pick(data, "lighting", default=defaults.lighting),
            strict_mode=_as_bool(_pick(data, "strictMode", "strict_mode", default=False)),
            context_preset=normalize_context_preset(_pick(data, "contextPreset", "context_preset")),
            variations=field_int(_pick(data, "variations"), defaults.variations),
            quality=_pick(data, "quality", default=defaults.quality),
            formats=field_list(_pick(data, "formats", default=[])),
        )


@dataclass
class PromptValidationResult:
    """Length check of a prompt against a vendor character limit"""

    is_valid: bool
    length: int
    limit: int
    exceeds_limit: bool
    is_near_limit: bool
    suggestions: list[str] = field(default_factory=list)


@dataclass
class OptimizedPromptResult:
    """Prompt plus before/after lengths from build_optimized_prompt"""

    prompt: str
    original_length: int
    optimized_length: int
    optimization_applied: bool
    validation_result: PromptValidationResult
