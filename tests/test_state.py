# Tests for profile / settings parsing and ReviewResult

from furniture_prompt_engine.prompt_builder import build_prompt
from furniture_prompt_engine.state import (
    CONTEXT_PRESETS,
    ConstraintSeverity,
    ProductProfile,
    ReviewLevel,
    ReviewResult,
    UiSettings,
    field_list,
    field_text,
    get_field_value,
    normalize_context_preset,
)


class TestReviewResult:
    """ReviewResult dataclass"""

    def test_defaults(self):
        result = ReviewResult(passed=True, level=ReviewLevel.SCHEMA)
        assert result.errors == []
        assert result.feedback is None

    def test_levels_are_ordered(self):
        assert ReviewLevel.SCHEMA < ReviewLevel.RULES


class TestConstraintSeverity:
    def test_rank_orders_critical_first(self):
        ranks = [s.rank for s in (ConstraintSeverity.CRITICAL, ConstraintSeverity.HIGH,
                                  ConstraintSeverity.MEDIUM, ConstraintSeverity.LOW)]
        assert ranks == sorted(ranks)


class TestNormalizeContextPreset:
    """Context names are canonicalised, unknown names fall back to packshot"""

    def test_canonical_names_pass_through(self):
        for preset in CONTEXT_PRESETS:
            assert normalize_context_preset(preset) == preset

    def test_aliases(self):
        assert normalize_context_preset("instagram") == "social_media_square"
        assert normalize_context_preset("story") == "social_media_story"
        assert normalize_context_preset("Social-Media-Story") == "social_media_story"

    def test_unknown_and_empty(self):
        assert normalize_context_preset("billboard") == "packshot"
        assert normalize_context_preset(None) == "packshot"
        assert normalize_context_preset("") == "packshot"


class TestFieldHelpers:
    def test_single_element_list_collapses(self):
        assert get_field_value(["desk"]) == "desk"
        assert get_field_value(["a", "b"]) == ["a", "b"]

    def test_field_text_joins_lists(self):
        assert field_text(["oak", "steel"]) == "oak, steel"
        assert field_text(None, "furniture") == "furniture"
        assert field_text([], "furniture") == "furniture"
        assert field_text("  ") == ""

    def test_field_list(self):
        assert field_list("oak") == ["oak"]
        assert field_list(["oak", " ", None]) == ["oak"]
        assert field_list(None) == []


class TestProductProfile:
    """ProductProfile.from_dict accepts camelCase and snake_case"""

    def test_from_camel_case(self):
        profile = ProductProfile.from_dict({
            "type": "desk",
            "detectedColor": "walnut",
            "colorOverride": "black",
            "placementType": "wall_mounted",
            "realDimensions": {"width": 120, "height": 40, "depth": 50},
            "wallMounted": True,
        })
        assert profile.detected_color == "walnut"
        assert profile.color_override == "black"
        assert profile.real_dimensions.width == 120
        assert profile.is_wall_mounted is True

    def test_from_snake_case(self):
        profile = ProductProfile.from_dict({"type": "shelf", "wall_mounted": True, "detected_color": "white"})
        assert profile.is_wall_mounted is True
        assert profile.detected_color == "white"

    def test_wall_mounted_string_values(self):
        assert ProductProfile(wall_mounted="true").is_wall_mounted is True
        assert ProductProfile(wall_mounted="no").is_wall_mounted is False
        assert ProductProfile(wall_mounted=[True]).is_wall_mounted is True
        assert ProductProfile().is_wall_mounted is False

    def test_text_to_image_prompts_aliases(self):
        profile = ProductProfile.from_dict({
            "type": "chair",
            "textToImagePrompts": {
                "baseDescription": "A task chair",
                "packshot": "Studio shot",
                "instagram": "Square post",
                "photographySpecs": {"camera_angle": "low"},
            },
        })
        fragments = profile.text_to_image_prompts
        assert fragments.base_description == "A task chair"
        assert fragments.contexts["social_media_square"] == "Square post"
        assert fragments.photography_specs == {"cameraAngle": "low"}
        # missing context falls back to the packshot fragment
        assert fragments.for_context("detail") == "Studio shot"


class TestUiSettings:
    def test_defaults(self):
        settings = UiSettings.from_dict({})
        assert settings.background_style == "white"
        assert settings.product_position == "center"
        assert settings.lighting == "soft_daylight"
        assert settings.strict_mode is False
        assert settings.context_preset == "packshot"
        assert settings.props == []

    def test_from_dict(self):
        settings = UiSettings.from_dict({
            "backgroundStyle": "office",
            "props": ["plant", "laptop"],
            "strictMode": True,
            "contextPreset": "story",
            "variations": 3,
            "formats": ["instagram-story"],
        })
        assert settings.background_style == "office"
        assert settings.props == ["plant", "laptop"]
        assert settings.strict_mode is True
        assert settings.context_preset == "social_media_story"
        assert settings.variations == 3
        assert settings.formats == ["instagram-story"]

    def test_strict_mode_string_values(self):
        assert UiSettings.from_dict({"strictMode": "false"}).strict_mode is False
        assert UiSettings.from_dict({"strictMode": "no"}).strict_mode is False
        assert UiSettings.from_dict({"strictMode": "true"}).strict_mode is True
        assert UiSettings.from_dict({"strict_mode": "1"}).strict_mode is True

    def test_strict_mode_false_string_skips_text_rule(self):
        prompt = build_prompt(ProductProfile(type="desk"), UiSettings.from_dict({"strictMode": "false"}))
        assert "TEXT PROHIBITION CRITICAL" not in prompt

    def test_unparseable_variations_default_to_one(self):
        assert UiSettings.from_dict({"variations": "two"}).variations == 1
        assert UiSettings.from_dict({"variations": "3"}).variations == 3
