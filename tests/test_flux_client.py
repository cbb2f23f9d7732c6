"""Tests for the FLUX Kontext client."""

from unittest.mock import AsyncMock, patch

import httpx
import pytest

from furniture_prompt_engine.config import settings as engine_settings
from furniture_prompt_engine.flux_client import (
    KONTEXT_ENDPOINT,
    FluxClient,
    FluxGenerationError,
    generate_product_images_flux,
)
from furniture_prompt_engine.state import ProductProfile, UiSettings

POLLING_URL = "https://api.bfl.ai/v1/get_result?id=job-1"


@pytest.fixture
def client():
    return FluxClient(api_key="test-key", poll_interval=0, max_attempts=3)


def test_requires_api_key(monkeypatch):
    monkeypatch.setattr(engine_settings, "bfl_api_key", "")
    with pytest.raises(ValueError, match="BFL_API_KEY not set"):
        FluxClient()


def test_headers_carry_key(client):
    assert client._headers["x-key"] == "test-key"
    assert client.base_url == "https://api.bfl.ai/v1"


class TestSubmit:
    @pytest.mark.asyncio
    async def test_payload(self, client):
        with patch.object(client, "_post", new_callable=AsyncMock) as mock_post:
            mock_post.return_value = {"id": "job-1", "polling_url": POLLING_URL}
            job = await client.submit("a desk", input_image=b"img", aspect_ratio="3:2", seed=7)

        path, payload = mock_post.call_args.args
        assert path == KONTEXT_ENDPOINT
        assert payload["prompt"] == "a desk"
        assert payload["aspect_ratio"] == "3:2"
        assert payload["seed"] == 7
        assert payload["input_image"] == "aW1n"
        assert payload["safety_tolerance"] == 2
        assert job["polling_url"] == POLLING_URL

    @pytest.mark.asyncio
    async def test_missing_polling_url(self, client):
        with patch.object(client, "_post", new_callable=AsyncMock) as mock_post:
            mock_post.return_value = {"id": "job-1"}
            with pytest.raises(FluxGenerationError, match="No polling URL"):
                await client.submit("a desk")


class TestPoll:
    @pytest.mark.asyncio
    async def test_ready_after_pending(self, client):
        with patch.object(client, "_get", new_callable=AsyncMock) as mock_get:
            mock_get.side_effect = [
                {"status": "Pending"},
                {"status": "Ready", "result": {"sample": "https://cdn/img.png"}},
            ]
            url = await client.poll(POLLING_URL)

        assert url == "https://cdn/img.png"
        assert mock_get.call_count == 2

    @pytest.mark.asyncio
    async def test_error_status(self, client):
        with patch.object(client, "_get", new_callable=AsyncMock) as mock_get:
            mock_get.return_value = {"status": "Error", "error": "moderated"}
            with pytest.raises(FluxGenerationError, match="moderated"):
                await client.poll(POLLING_URL)

    @pytest.mark.asyncio
    async def test_timeout(self, client):
        with patch.object(client, "_get", new_callable=AsyncMock) as mock_get:
            mock_get.return_value = {"status": "Pending"}
            with pytest.raises(TimeoutError):
                await client.poll(POLLING_URL)
        assert mock_get.call_count == 3


class TestGenerateVariations:
    @pytest.mark.asyncio
    async def test_seeds_increment(self, client):
        with patch.object(client, "generate", new_callable=AsyncMock) as mock_generate:
            mock_generate.side_effect = ["u1", "u2", "u3"]
            results = await client.generate_variations("a desk", 3, seed=100)

        assert [r["seed"] for r in results] == [100, 101, 102]
        assert [r["url"] for r in results] == ["u1", "u2", "u3"]

    @pytest.mark.asyncio
    async def test_failed_variation_skipped(self, client):
        with patch.object(client, "generate", new_callable=AsyncMock) as mock_generate:
            mock_generate.side_effect = [FluxGenerationError("boom"), "u2"]
            results = await client.generate_variations("a desk", 2, seed=1)

        assert len(results) == 1
        assert results[0]["seed"] == 2


class TestGenerateProductImagesFlux:
    @pytest.mark.asyncio
    async def test_writes_images(self, tmp_path):
        settings = UiSettings(variations=2, context_preset="story")
        variations = [
            {"url": "https://cdn/1.png", "seed": 5, "aspect_ratio": "2:3"},
            {"url": "https://cdn/2.png", "seed": 6, "aspect_ratio": "2:3"},
        ]
        with patch.object(FluxClient, "generate_variations", new_callable=AsyncMock) as mock_variations, \
             patch.object(FluxClient, "download", new_callable=AsyncMock) as mock_download:
            mock_variations.return_value = variations
            mock_download.return_value = b"png"
            result = await generate_product_images_flux(
                ProductProfile(type="shelf", wall_mounted=True), settings, tmp_path, api_key="test-key", seed=5
            )

        assert result["success"] is True
        assert result["aspect_ratio"] == "2:3"
        assert (tmp_path / "social_media_story_2.png").read_bytes() == b"png"
        assert mock_variations.call_args.kwargs["seed"] == 5

    @pytest.mark.asyncio
    async def test_missing_and_failed_downloads(self, tmp_path):
        settings = UiSettings(variations=3)
        variations = [
            {"url": "https://cdn/1.png", "seed": 1, "aspect_ratio": "1:1"},
            {"url": "https://cdn/2.png", "seed": 2, "aspect_ratio": "1:1"},
        ]
        with patch.object(FluxClient, "generate_variations", new_callable=AsyncMock) as mock_variations, \
             patch.object(FluxClient, "download", new_callable=AsyncMock) as mock_download:
            mock_variations.return_value = variations
            mock_download.side_effect = [b"png", httpx.ConnectError("down")]
            result = await generate_product_images_flux(
                ProductProfile(type="chair"), settings, tmp_path, api_key="test-key"
            )

        assert result["success"] is False
        assert len(result["generated"]) == 1
        assert result["failed"][0]["variation"] == 2
        assert result["failed"][1] == {"variation": None, "error": "FLUX generation failed"}
