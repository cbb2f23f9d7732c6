#!/usr/bin/env python3
"""Build one optimized prompt per output format for a product

Usage:
    python scripts/build_format_prompts.py profile.json settings.json
    python scripts/build_format_prompts.py profile.json settings.json -o prompts.json

Each format in settings.formats is mapped to its context preset and aspect
ratio; the prompt for that preset is built and fitted to the vendor limit.

Exit codes:
    0 = every prompt passed the rules review and fits the limit
    1 = input error, or at least one prompt failed review
"""

import argparse
import json
import sys
from pathlib import Path

from furniture_prompt_engine.formats import get_format_aspect_ratio, get_format_context_preset
from furniture_prompt_engine.optimizer import build_optimized_prompt
from furniture_prompt_engine.prompt_builder import build_prompt
from furniture_prompt_engine.state import ProductProfile, UiSettings
from furniture_prompt_engine.validators import (
    validate_profile_schema,
    validate_prompt_rules,
    validate_settings_schema,
)


def build_format_prompts(profile: ProductProfile, settings: UiSettings) -> list[dict]:
    entries = []
    for format_id in settings.formats or ["square-format"]:
        preset = get_format_context_preset(format_id)
        optimized = build_optimized_prompt(profile, settings, preset)
        review = validate_prompt_rules(build_prompt(profile, settings, preset), profile, settings)
        entries.append({
            "format": format_id,
            "context": preset,
            "aspect_ratio": get_format_aspect_ratio(format_id),
            "prompt": optimized.prompt,
            "original_length": optimized.original_length,
            "optimized_length": optimized.optimized_length,
            "valid": optimized.validation_result.is_valid and review.passed,
            "errors": review.errors,
        })
    return entries


def main():
    parser = argparse.ArgumentParser(description="Build per-format prompts for one product")
    parser.add_argument("profile", help="Product profile JSON")
    parser.add_argument("settings", help="UI settings JSON")
    parser.add_argument("-o", "--output", help="Write results to this JSON file instead of stdout")
    args = parser.parse_args()

    try:
        profile_data = json.loads(Path(args.profile).read_text(encoding="utf-8"))
        settings_data = json.loads(Path(args.settings).read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    schema_errors = validate_profile_schema(profile_data).errors + validate_settings_schema(settings_data).errors
    if schema_errors:
        for error in schema_errors:
            print(f"L1 ERROR: {error}", file=sys.stderr)
        sys.exit(1)

    entries = build_format_prompts(ProductProfile.from_dict(profile_data), UiSettings.from_dict(settings_data))

    text = json.dumps(entries, indent=2, ensure_ascii=False)
    if args.output:
        Path(args.output).write_text(text, encoding="utf-8")
    else:
        print(text)

    failed = [e for e in entries if not e["valid"]]
    for entry in failed:
        print(f"L2 ERROR ({entry['format']}): {'; '.join(entry['errors']) or 'over length limit'}", file=sys.stderr)
    sys.exit(1 if failed else 0)


if __name__ == "__main__":
    main()
