"""FLUX Kontext Pro image generation for furniture product photography.

Black Forest Labs runs generation as a job: a submit call returns a
``polling_url`` that is polled until the job is Ready, and the finished
image is downloaded from the short-lived ``sample`` URL it reports.

Flow of generate_product_images_flux():
    1. build_optimized_prompt() assembles and length-checks the prompt.
    2. The context preset picks the FLUX aspect ratio (2:3 for stories).
    3. One job per variation, seeded ``seed + i``; failed jobs are skipped.
    4. Each image is written to ``<output_dir>/<context>_<n>.png``.
"""

import asyncio
import base64
import logging
import random
from pathlib import Path
from typing import Optional

import httpx
from langsmith import traceable

from furniture_prompt_engine.config import settings as engine_settings
from furniture_prompt_engine.formats import get_flux_aspect_ratio
from furniture_prompt_engine.logging_config import bind_generation_id
from furniture_prompt_engine.optimizer import build_optimized_prompt
from furniture_prompt_engine.state import ProductProfile, UiSettings, normalize_context_preset
from furniture_prompt_engine.validators import clamp_variations

logger = logging.getLogger(__name__)

KONTEXT_ENDPOINT = "/flux-kontext-pro"

_READY = "Ready"
_FAILED_STATES = ("Error", "Failed")


class FluxGenerationError(RuntimeError):
    """A FLUX job finished in an error state or returned no image."""


class FluxClient:
    """Black Forest Labs FLUX Kontext Pro client.

    Generation is asynchronous on the vendor side: ``submit`` returns a job
    with a ``polling_url``, and ``poll`` waits until that job is Ready.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        poll_interval: Optional[float] = None,
        max_attempts: Optional[int] = None,
        timeout: Optional[float] = None,
    ) -> None:
        self.api_key = api_key or engine_settings.bfl_api_key
        if not self.api_key:
            raise ValueError("BFL_API_KEY not set")
        self.base_url = (base_url or engine_settings.bfl_api_base).rstrip("/")
        self.poll_interval = engine_settings.flux_poll_interval if poll_interval is None else poll_interval
        self.max_attempts = engine_settings.flux_max_attempts if max_attempts is None else max_attempts
        self.timeout = engine_settings.flux_timeout if timeout is None else timeout
        self._headers = {
            "accept": "application/json",
            "x-key": self.api_key,
            "Content-Type": "application/json",
        }

    async def _post(self, path: str, payload: dict) -> dict:
        url = f"{self.base_url}{path}"
        logger.debug("FLUX POST %s", url)
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            resp = await client.post(url, headers=self._headers, json=payload)
            if not resp.is_success:
                logger.error("FLUX API error %s for %s: %s", resp.status_code, url, resp.text[:500])
            resp.raise_for_status()
            return resp.json()

    async def _get(self, url: str) -> dict:
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            resp = await client.get(url, headers=self._headers)
            if not resp.is_success:
                logger.error("FLUX polling error %s for %s: %s", resp.status_code, url, resp.text[:200])
            resp.raise_for_status()
            return resp.json()

    async def submit(
        self,
        prompt: str,
        input_image: Optional[bytes] = None,
        aspect_ratio: str = "1:1",
        seed: Optional[int] = None,
        output_format: str = "png",
    ) -> dict:
        """Submit one Kontext job.

        Args:
            prompt: Generation prompt text
            input_image: Optional reference image bytes, sent base64 encoded
            aspect_ratio: FLUX aspect ratio, e.g. "1:1", "3:2", "2:3"
            seed: Optional seed for reproducible output

        Returns:
            Job dict with at least ``id`` and ``polling_url``
        """
        payload: dict = {
            "prompt": prompt,
            "aspect_ratio": aspect_ratio,
            "output_format": output_format,
            "safety_tolerance": 2,
        }
        if input_image is not None:
            payload["input_image"] = base64.b64encode(input_image).decode("utf-8")
        if seed is not None:
            payload["seed"] = seed

        job = await self._post(KONTEXT_ENDPOINT, payload)
        if not job.get("polling_url"):
            raise FluxGenerationError("No polling URL returned from BFL API")
        logger.info("FLUX job submitted", extra={"flux_job_id": job.get("id")})
        return job

    async def poll(self, polling_url: str) -> str:
        """Poll a job until it is Ready and return the image URL.

        Raises:
            FluxGenerationError: If the job reports Error/Failed or has no sample.
            TimeoutError: If the job is not Ready after ``max_attempts`` polls.
        """
        for attempt in range(1, self.max_attempts + 1):
            result = await self._get(polling_url)
            status = result.get("status")

            if status == _READY:
                sample = (result.get("result") or {}).get("sample")
                if not sample:
                    raise FluxGenerationError("FLUX job is Ready but returned no image")
                return sample
            if status in _FAILED_STATES:
                raise FluxGenerationError(f"FLUX generation failed: {result.get('error') or status}")

            logger.debug("FLUX job status %s (attempt %d/%d)", status, attempt, self.max_attempts)
            await asyncio.sleep(self.poll_interval)

        raise TimeoutError(f"FLUX generation timed out after {self.max_attempts} attempts")

    @traceable(run_type="tool", name="FLUX Kontext")
    async def generate(
        self,
        prompt: str,
        input_image: Optional[bytes] = None,
        aspect_ratio: str = "1:1",
        seed: Optional[int] = None,
    ) -> str:
        """Submit a job and wait for its image URL."""
        job = await self.submit(prompt, input_image=input_image, aspect_ratio=aspect_ratio, seed=seed)
        return await self.poll(job["polling_url"])

    async def generate_variations(
        self,
        prompt: str,
        count: int,
        input_image: Optional[bytes] = None,
        aspect_ratio: str = "1:1",
        seed: Optional[int] = None,
    ) -> list[dict]:
        """Generate ``count`` images one after another.

        Variation ``i`` uses ``seed + i`` (a random seed when none is given).
        A failing variation is logged and skipped.

        Returns:
            [{"url", "seed", "aspect_ratio"}] for each successful variation
        """
        results: list[dict] = []
        for i in range(count):
            variation_seed = seed + i if seed is not None else random.randint(0, 999_999)
            try:
                url = await self.generate(
                    prompt,
                    input_image=input_image,
                    aspect_ratio=aspect_ratio,
                    seed=variation_seed,
                )
            except (httpx.HTTPError, FluxGenerationError, TimeoutError) as e:
                logger.warning("FLUX variation %d failed: %s", i + 1, e)
                continue
            results.append({"url": url, "seed": variation_seed, "aspect_ratio": aspect_ratio})
        return results

    async def download(self, url: str) -> bytes:
        """Fetch a generated image (sample URLs are short-lived)."""
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            resp = await client.get(url)
            resp.raise_for_status()
            return resp.content


async def generate_product_images_flux(
    profile: ProductProfile,
    settings: UiSettings,
    output_dir: Path,
    context: Optional[str] = None,
    reference_image_path: Optional[str] = None,
    api_key: Optional[str] = None,
    seed: Optional[int] = None,
) -> dict:
    """FLUX counterpart of image_generator.generate_product_images.

    Returns:
        {"success", "generation_id", "output_dir", "prompt", "aspect_ratio",
         "generated", "failed"}
    """
    preset = normalize_context_preset(context or settings.context_preset)
    client = FluxClient(api_key=api_key)
    output_dir.mkdir(parents=True, exist_ok=True)

    input_image = Path(reference_image_path).read_bytes() if reference_image_path else None

    with bind_generation_id() as generation_id:
        optimized = build_optimized_prompt(profile, settings, preset)
        aspect_ratio = get_flux_aspect_ratio(preset)
        count = clamp_variations(settings.variations)
        logger.info("Generating %d %s image(s) with FLUX", count, preset, extra={"aspect_ratio": aspect_ratio})

        variations = await client.generate_variations(
            optimized.prompt,
            count,
            input_image=input_image,
            aspect_ratio=aspect_ratio,
            seed=seed,
        )

        generated: list[str] = []
        failed: list[dict] = []
        for i, variation in enumerate(variations):
            output_path = output_dir / f"{preset}_{i + 1}.png"
            try:
                output_path.write_bytes(await client.download(variation["url"]))
            except httpx.HTTPError as e:
                logger.warning("Download of variation %d failed: %s", i + 1, e)
                failed.append({"variation": i + 1, "error": str(e)})
                continue
            generated.append(str(output_path))

        # generate_variations drops failed jobs; only the count is known here
        for _ in range(count - len(variations)):
            failed.append({"variation": None, "error": "FLUX generation failed"})

    return {
        "success": len(failed) == 0,
        "generation_id": generation_id,
        "output_dir": str(output_dir),
        "prompt": optimized.prompt,
        "aspect_ratio": aspect_ratio,
        "generated": generated,
        "failed": failed,
    }
