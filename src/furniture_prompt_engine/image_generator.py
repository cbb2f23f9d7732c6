"""Gemini Image Generation for furniture product photography.

Builds the optimized prompt for a product, then calls the Gemini image model
once per requested variation and writes the results as PNG files.

Flow:
    1. build_optimized_prompt() assembles and length-checks the prompt.
    2. The context preset picks the Gemini aspect ratio.
    3. generate_image_gemini() is called per variation with the reference
       images attached as inline parts.
    4. Each image is written to ``<output_dir>/<context>_<n>.png``; a failing
       variation is recorded and the loop continues.
"""

import logging
from pathlib import Path
from typing import Any, Optional

from google import genai
from google.genai import types
from langsmith import traceable
from langsmith.run_helpers import get_current_run_tree

from furniture_prompt_engine.config import settings as engine_settings
from furniture_prompt_engine.formats import get_gemini_aspect_ratio
from furniture_prompt_engine.logging_config import bind_generation_id
from furniture_prompt_engine.optimizer import build_optimized_prompt
from furniture_prompt_engine.state import ProductProfile, UiSettings, normalize_context_preset
from furniture_prompt_engine.validators import clamp_variations

logger = logging.getLogger(__name__)

REFERENCE_INSTRUCTION = (
    "Use the provided reference images to understand the exact product appearance, style, materials, "
    "and details. Generate a new image that maintains the same product identity while applying this "
    "instruction: {prompt}"
)


def wrap_with_reference_instruction(prompt: str) -> str:
    return REFERENCE_INSTRUCTION.replace("{prompt}", prompt)


def _load_reference_parts(reference_image_paths: list[str]) -> list[Any]:
    parts: list[Any] = []
    for ref_path in reference_image_paths:
        p = Path(ref_path)
        if not p.exists():
            logger.warning("Reference image not found: %s", ref_path)
            continue
        mime_type = "image/png" if p.suffix.lower() == ".png" else "image/jpeg"
        parts.append(types.Part.from_bytes(data=p.read_bytes(), mime_type=mime_type))
    return parts


@traceable(run_type="llm", name="Gemini Image")
def generate_image_gemini(
    prompt: str,
    reference_image_paths: list[str] | None = None,
    aspect_ratio: str = "1:1",
    api_key: str | None = None,
) -> bytes:
    """Generate a single image with the Gemini image model.

    Args:
        prompt: Generation prompt text.
        reference_image_paths: Optional local product photos. When any are
            loaded the prompt is wrapped in the reference-image instruction.
        aspect_ratio: Gemini aspect ratio, e.g. "1:1", "3:2", "9:16".
        api_key: Gemini API key (falls back to GEMINI_API_KEY).

    Returns:
        Raw image bytes of the first image part in the response.

    Raises:
        ValueError: If no API key is available or no image was returned.
    """
    api_key = api_key or engine_settings.gemini_api_key
    if not api_key:
        raise ValueError("GEMINI_API_KEY not set")

    client = genai.Client(api_key=api_key)

    contents: list[Any] = _load_reference_parts(reference_image_paths or [])
    contents.append(wrap_with_reference_instruction(prompt) if contents else prompt)

    run = get_current_run_tree()
    if run is not None:
        run.metadata["aspect_ratio"] = aspect_ratio
        run.metadata["reference_images"] = len(contents) - 1

    response = client.models.generate_content(
        model=engine_settings.gemini_image_model,
        contents=contents,
        config=types.GenerateContentConfig(
            response_modalities=["TEXT", "IMAGE"],
            image_config=types.ImageConfig(aspect_ratio=aspect_ratio),
        ),
    )

    for candidate in response.candidates or []:
        for part in candidate.content.parts or []:
            if part.inline_data is not None:
                return part.inline_data.data

    raise ValueError("No image generated in response")


def generate_product_images(
    profile: ProductProfile,
    settings: UiSettings,
    output_dir: Path,
    context: Optional[str] = None,
    reference_image_paths: list[str] | None = None,
    api_key: str | None = None,
) -> dict:
    """Generate ``settings.variations`` images for one product and context.

    Args:
        profile: Product being photographed
        settings: User generation settings
        output_dir: Directory the PNG files are written to (created if missing)
        context: Context preset; defaults to settings.context_preset
        reference_image_paths: Optional product photos sent with every call
        api_key: Gemini API key

    Returns:
        {"success", "generation_id", "output_dir", "prompt", "aspect_ratio",
         "generated", "failed"}

    Raises:
        ValueError: If no Gemini API key is configured.
    """
    if not (api_key or engine_settings.gemini_api_key):
        raise ValueError("GEMINI_API_KEY not set")

    preset = normalize_context_preset(context or settings.context_preset)
    output_dir.mkdir(parents=True, exist_ok=True)

    with bind_generation_id() as generation_id:
        optimized = build_optimized_prompt(profile, settings, preset)
        aspect_ratio = get_gemini_aspect_ratio(preset)
        count = clamp_variations(settings.variations)

        logger.info(
            "Generating %d %s image(s) with Gemini",
            count,
            preset,
            extra={"aspect_ratio": aspect_ratio, "prompt_length": optimized.optimized_length},
        )

        generated: list[str] = []
        failed: list[dict] = []
        for i in range(count):
            output_path = output_dir / f"{preset}_{i + 1}.png"
            try:
                image_bytes = generate_image_gemini(
                    optimized.prompt,
                    reference_image_paths=reference_image_paths,
                    aspect_ratio=aspect_ratio,
                    api_key=api_key,
                )
            except Exception as e:
                logger.warning("Variation %d failed: %s", i + 1, e)
                failed.append({"variation": i + 1, "error": str(e)})
                continue

            output_path.write_bytes(image_bytes)
            generated.append(str(output_path))
            logger.info("Saved %s", output_path.name)

    return {
        "success": len(failed) == 0,
        "generation_id": generation_id,
        "output_dir": str(output_dir),
        "prompt": optimized.prompt,
        "aspect_ratio": aspect_ratio,
        "generated": generated,
        "failed": failed,
    }
