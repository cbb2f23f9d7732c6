#!/usr/bin/env python3
# CLI entry point for the furniture prompt engine
# Builds, inspects and optionally renders the prompt for one product

import argparse
import asyncio
import json
import sys
from pathlib import Path
from typing import Optional

from furniture_prompt_engine.config import settings as engine_settings
from furniture_prompt_engine.constraints import get_constraint_statistics
from furniture_prompt_engine.formats import map_formats_to_aspect_ratios
from furniture_prompt_engine.logging_config import configure_logging
from furniture_prompt_engine.optimizer import build_optimized_prompt, validate_prompt_length
from furniture_prompt_engine.prompt_builder import build_prompt
from furniture_prompt_engine.state import CONTEXT_PRESETS, ProductProfile, UiSettings, normalize_context_preset
from furniture_prompt_engine.validators import (
    validate_profile_schema,
    validate_prompt_rules,
    validate_settings_schema,
)


def load_json_arg(path: Optional[str], data: Optional[str], label: str) -> dict:
    """Read a JSON object from a file path or an inline string."""
    if data:
        raw = data
    elif path:
        file_path = Path(path)
        if not file_path.exists():
            raise ValueError(f"{label} file not found: {path}")
        raw = file_path.read_text(encoding="utf-8")
    else:
        return {}

    try:
        parsed = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid {label} JSON: {e}") from e
    if not isinstance(parsed, dict):
        raise ValueError(f"{label} JSON must be an object")
    return parsed


def print_review(name: str, errors: list[str]) -> None:
    if not errors:
        print(f"✅ {name}: passed")
        return
    print(f"❌ {name}: {len(errors)} error(s)")
    for error in errors:
        print(f"   - {error}")


def run_generation(args: argparse.Namespace, profile: ProductProfile, settings: UiSettings, context: str) -> dict:
    output_dir = Path(args.output_dir)
    if args.provider == "flux":
        from furniture_prompt_engine.flux_client import generate_product_images_flux

        reference = args.reference[0] if args.reference else None
        return asyncio.run(
            generate_product_images_flux(
                profile,
                settings,
                output_dir,
                context=context,
                reference_image_path=reference,
                api_key=args.bfl_api_key,
                seed=args.seed,
            )
        )

    from furniture_prompt_engine.image_generator import generate_product_images

    return generate_product_images(
        profile,
        settings,
        output_dir,
        context=context,
        reference_image_paths=args.reference,
        api_key=args.gemini_api_key,
    )


def main():
    parser = argparse.ArgumentParser(
        description="Furniture Prompt Engine - build constraint-driven image generation prompts"
    )
    parser.add_argument("--profile", help="Path to product profile JSON")
    parser.add_argument("--profile-data", help="Product profile as an inline JSON string")
    parser.add_argument("--settings", help="Path to UI settings JSON")
    parser.add_argument("--settings-data", help="UI settings as an inline JSON string")
    parser.add_argument(
        "--context",
        help=f"Context preset ({', '.join(CONTEXT_PRESETS)}); defaults to the settings value",
    )
    parser.add_argument("--optimize", action="store_true", help="Fit the prompt to the vendor length limit")
    parser.add_argument("--stats", action="store_true", help="Print constraint counts per severity")
    parser.add_argument("--review", action="store_true", help="Check the full prompt against the selection rules")
    parser.add_argument("--formats", action="store_true", help="Print aspect ratios for settings.formats")
    parser.add_argument("--generate", action="store_true", help="Generate images after building the prompt")
    parser.add_argument("--provider", choices=["gemini", "flux"], default="gemini", help="Image provider")
    parser.add_argument("--reference", action="append", help="Reference product image (repeatable)")
    parser.add_argument("--output-dir", default="./generated", help="Directory for generated images")
    parser.add_argument("--seed", type=int, help="Base seed for FLUX variations")
    parser.add_argument("--gemini-api-key", help="Gemini API key")
    parser.add_argument("--bfl-api-key", help="Black Forest Labs API key")
    parser.add_argument("--log-level", default=engine_settings.log_level, help="Logging level")

    args = parser.parse_args()
    configure_logging(args.log_level)

    try:
        profile_data = load_json_arg(args.profile, args.profile_data, "profile")
        settings_data = load_json_arg(args.settings, args.settings_data, "settings")
    except ValueError as e:
        print(f"Error: {e}")
        sys.exit(1)

    if not profile_data:
        print("Error: --profile or --profile-data is required")
        sys.exit(1)

    schema_errors = validate_profile_schema(profile_data).errors + validate_settings_schema(settings_data).errors
    if schema_errors:
        for error in schema_errors:
            print(f"Error: {error}")
        sys.exit(1)

    profile = ProductProfile.from_dict(profile_data)
    settings = UiSettings.from_dict(settings_data)
    context = normalize_context_preset(args.context or settings.context_preset)

    if args.optimize or args.generate:
        result = build_optimized_prompt(profile, settings, context)
        prompt = result.prompt
        validation = result.validation_result
    else:
        prompt = build_prompt(profile, settings, context)
        validation = validate_prompt_length(prompt)

    print(prompt)
    print()
    print(f"Context: {context}")
    print(f"Length: {validation.length}/{validation.limit}")
    for suggestion in validation.suggestions:
        print(f"  ⚠️ {suggestion}")

    if args.stats:
        stats = get_constraint_statistics(profile, settings, context)
        print(
            f"Constraints: {stats['total']} total "
            f"(critical={stats['critical']}, high={stats['high']}, medium={stats['medium']}, low={stats['low']})"
        )

    if args.formats:
        for format_id, ratio in zip(settings.formats, map_formats_to_aspect_ratios(settings.formats)):
            print(f"Format {format_id}: {ratio}")

    if args.review:
        full_prompt = build_prompt(profile, settings, context)
        print_review("Prompt rules", validate_prompt_rules(full_prompt, profile, settings).errors)

    if args.generate:
        try:
            gen = run_generation(args, profile, settings, context)
        except ValueError as e:
            print(f"Error: {e}")
            sys.exit(1)

        print(f"\nGenerated: {len(gen['generated'])}, Failed: {len(gen['failed'])}")
        for path in gen["generated"]:
            print(f"  ✅ {path}")
        for failure in gen["failed"]:
            print(f"  ❌ variation {failure['variation']}: {failure['error']}")
        sys.exit(0 if gen["success"] else 1)


if __name__ == "__main__":
    main()
