"""Tests for the constraint catalog, selection and rendering."""

from furniture_prompt_engine import constraints
from furniture_prompt_engine.constraints import (
    CONSTRAINT_BLOCK_HEADER,
    CONTEXT_CONSTRAINTS,
    ConstraintRule,
    build_constraint_enforcement,
    get_constraint_statistics,
    render_constraint_block,
    select_constraints,
    sort_by_severity,
)
from furniture_prompt_engine.state import CONTEXT_PRESETS, ConstraintSeverity, ProductProfile, UiSettings


def _ids(rules):
    return [rule.id for rule in rules]


def _wall_desk():
    return ProductProfile(
        type="desk", materials=["oak"], detected_color="walnut", wall_mounted=True, placement_type="wall_mounted"
    )


class TestCatalog:
    def test_rule_ids_unique_within_each_catalog(self):
        catalogs = [
            constraints.WALL_MOUNTED_CONSTRAINTS,
            constraints.MATERIAL_CONSTRAINTS,
            constraints.COMMERCIAL_QUALITY_CONSTRAINTS,
            constraints.STRICT_MODE_CONSTRAINTS,
            *CONTEXT_CONSTRAINTS.values(),
        ]
        for catalog in catalogs:
            assert len(_ids(catalog)) == len(set(_ids(catalog)))

    def test_every_preset_has_context_rules(self):
        assert set(CONTEXT_CONSTRAINTS) == set(CONTEXT_PRESETS)

    def test_desk_height_text(self):
        rule = next(r for r in constraints.WALL_MOUNTED_CONSTRAINTS if r.id == "wall_mounted_desk_height_specification")
        assert "75cm (29.5 inches)" in rule.enforcement
        assert rule.severity is ConstraintSeverity.CRITICAL


class TestSelectConstraints:
    """select_constraints is a pure function of (profile, settings, context)"""

    def test_wall_rules_only_for_wall_mounted(self):
        settings = UiSettings()
        free = _ids(select_constraints(ProductProfile(type="desk"), settings))
        wall = _ids(select_constraints(_wall_desk(), settings))
        assert not any(i in free for i in _ids(constraints.WALL_MOUNTED_CONSTRAINTS))
        assert "wall_mounted_positioning" in wall
        assert "absolute_floor_contact_prohibition" in wall

    def test_desk_height_only_for_desks(self):
        settings = UiSettings()
        shelf = ProductProfile(type="shelf", wall_mounted=True)
        assert "wall_mounted_desk_height_specification" in _ids(select_constraints(_wall_desk(), settings))
        assert "wall_mounted_desk_height_specification" not in _ids(select_constraints(shelf, settings))
        assert "wall_mounted_positioning" in _ids(select_constraints(shelf, settings))

    def test_strict_mode_gating(self):
        profile = ProductProfile(type="chair")
        off = _ids(select_constraints(profile, UiSettings(strict_mode=False)))
        on = _ids(select_constraints(profile, UiSettings(strict_mode=True)))
        assert "no_text_elements" not in off
        assert "no_text_elements" in on
        assert "no_extra_objects" in on

    def test_material_and_color_gating(self):
        bare = _ids(select_constraints(ProductProfile(), UiSettings()))
        assert "material_accuracy" not in bare
        assert "color_fidelity" not in bare
        assert "proportional_accuracy" not in bare
        # always-applicable rules
        assert "finish_quality" in bare
        assert "hardware_quality" in bare

    def test_context_rules_follow_context(self):
        profile = ProductProfile(type="chair")
        story = _ids(select_constraints(profile, UiSettings(), "social_media_story"))
        square = _ids(select_constraints(profile, UiSettings(), "instagram"))
        assert "vertical_composition" in story
        assert "packshot_background" not in story
        assert "instagram_format" in square

    def test_context_defaults_to_settings(self):
        profile = ProductProfile(type="chair")
        rules = _ids(select_constraints(profile, UiSettings(context_preset="detail")))
        assert "detail_focus" in rules

    def test_hero_text_zone_rule(self):
        profile = ProductProfile(type="chair")
        without = _ids(select_constraints(profile, UiSettings(), "hero"))
        with_zone = _ids(select_constraints(profile, UiSettings(reserved_text_zone="left"), "hero"))
        assert "hero_text_space" not in without
        assert "hero_text_space" in with_zone

    def test_idempotent(self):
        profile, settings = _wall_desk(), UiSettings(strict_mode=True)
        assert select_constraints(profile, settings) == select_constraints(profile, settings)

    def test_deduplicated_by_id_first_wins(self, monkeypatch):
        duplicate = ConstraintRule(
            id="finish_quality",
            name="Duplicate",
            description="Duplicate",
            severity=ConstraintSeverity.LOW,
            enforcement="DUPLICATE FINISH RULE",
        )
        monkeypatch.setitem(CONTEXT_CONSTRAINTS, "detail", [duplicate])
        rules = select_constraints(ProductProfile(), UiSettings(), "detail")
        finish = [r for r in rules if r.id == "finish_quality"]
        assert len(finish) == 1
        assert finish[0].severity is ConstraintSeverity.HIGH


class TestRendering:
    def test_sort_is_stable(self):
        rules = select_constraints(_wall_desk(), UiSettings())
        ordered = sort_by_severity(rules)
        ranks = [r.severity.rank for r in ordered]
        assert ranks == sorted(ranks)
        critical_in_source = [r.id for r in rules if r.severity is ConstraintSeverity.CRITICAL]
        assert [r.id for r in ordered][: len(critical_in_source)] == critical_in_source

    def test_bands_in_severity_order(self):
        block = build_constraint_enforcement(_wall_desk(), UiSettings())
        assert block.startswith(CONSTRAINT_BLOCK_HEADER)
        critical = block.index("🔴 CRITICAL REQUIREMENTS (MANDATORY):")
        high = block.index("🟠 HIGH PRIORITY REQUIREMENTS:")
        standard = block.index("🟡 STANDARD REQUIREMENTS:")
        assert critical < high < standard

    def test_every_critical_bullet_precedes_high_band(self):
        block = build_constraint_enforcement(_wall_desk(), UiSettings(strict_mode=True))
        high = block.index("🟠 HIGH PRIORITY REQUIREMENTS:")
        for rule in select_constraints(_wall_desk(), UiSettings(strict_mode=True)):
            if rule.severity is ConstraintSeverity.CRITICAL:
                assert block.index(rule.enforcement) < high

    def test_low_renders_in_standard_band(self):
        low = ConstraintRule(
            id="low_rule", name="Low", description="Low", severity=ConstraintSeverity.LOW, enforcement="LOW GUIDANCE"
        )
        block = render_constraint_block([low])
        assert "🟡 STANDARD REQUIREMENTS:" in block
        assert "• LOW GUIDANCE" in block
        assert "🔴 CRITICAL" not in block
        assert "- Standard: 1" in block

    def test_footer_counts(self):
        block = build_constraint_enforcement(_wall_desk(), UiSettings())
        assert "TOTAL CONSTRAINTS ENFORCED: 16" in block
        assert "- Critical: 8" in block
        assert "- High Priority: 6" in block
        assert "- Standard: 2" in block


class TestStatistics:
    def test_wall_desk_counts(self):
        stats = get_constraint_statistics(_wall_desk(), UiSettings())
        assert stats == {"total": 16, "critical": 8, "high": 6, "medium": 2, "low": 0}

    def test_minimal_profile(self):
        stats = get_constraint_statistics(ProductProfile(), UiSettings())
        assert stats["total"] == 5
        assert stats["total"] == stats["critical"] + stats["high"] + stats["medium"] + stats["low"]
