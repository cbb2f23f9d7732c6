"""Tests for the furniture-prompt CLI."""

import json
import sys
from unittest.mock import patch

import pytest

from furniture_prompt_engine import cli
from furniture_prompt_engine.prompt_builder import NEGATIVE_PROMPT

PROFILE = {"type": "desk", "materials": ["oak"], "detectedColor": "walnut", "wallMounted": True}


def run_cli(monkeypatch, *argv):
    monkeypatch.setattr(sys, "argv", ["furniture-prompt", *argv])
    with patch("furniture_prompt_engine.cli.configure_logging"):
        cli.main()


def test_prints_full_prompt(monkeypatch, capsys):
    run_cli(monkeypatch, "--profile-data", json.dumps(PROFILE))
    out = capsys.readouterr().out
    assert NEGATIVE_PROMPT in out
    assert "Context: packshot" in out
    assert "Length: " in out


def test_optimize_and_stats(monkeypatch, capsys):
    run_cli(monkeypatch, "--profile-data", json.dumps(PROFILE), "--optimize", "--stats")
    out = capsys.readouterr().out
    assert "Type: desk" in out
    assert "Constraints: 16 total" in out


def test_profile_file_and_review(monkeypatch, capsys, tmp_path):
    profile_path = tmp_path / "profile.json"
    profile_path.write_text(json.dumps(PROFILE))
    settings_path = tmp_path / "settings.json"
    settings_path.write_text(json.dumps({"strictMode": True, "formats": ["instagram-story"]}))

    run_cli(
        monkeypatch,
        "--profile", str(profile_path),
        "--settings", str(settings_path),
        "--context", "story",
        "--review",
        "--formats",
    )
    out = capsys.readouterr().out
    assert "Context: social_media_story" in out
    assert "✅ Prompt rules: passed" in out
    assert "Format instagram-story: 9:16" in out


def test_missing_profile_exits(monkeypatch, capsys):
    with pytest.raises(SystemExit) as exc:
        run_cli(monkeypatch)
    assert exc.value.code == 1
    assert "Error: --profile or --profile-data is required" in capsys.readouterr().out


def test_invalid_json_exits(monkeypatch, capsys):
    with pytest.raises(SystemExit) as exc:
        run_cli(monkeypatch, "--profile-data", "{not json")
    assert exc.value.code == 1
    assert "Invalid profile JSON" in capsys.readouterr().out


def test_generate_gemini(monkeypatch, capsys, tmp_path):
    result = {
        "success": True,
        "generation_id": "abc",
        "output_dir": str(tmp_path),
        "prompt": "p",
        "aspect_ratio": "1:1",
        "generated": [str(tmp_path / "packshot_1.png")],
        "failed": [],
    }
    with patch("furniture_prompt_engine.image_generator.generate_product_images", return_value=result) as mock_gen:
        with pytest.raises(SystemExit) as exc:
            run_cli(monkeypatch, "--profile-data", json.dumps(PROFILE), "--generate",
                    "--output-dir", str(tmp_path), "--gemini-api-key", "k")

    assert exc.value.code == 0
    assert mock_gen.call_args.kwargs["api_key"] == "k"
    assert "Generated: 1, Failed: 0" in capsys.readouterr().out


def test_generate_missing_key_exits(monkeypatch, capsys, tmp_path):
    with patch(
        "furniture_prompt_engine.image_generator.generate_product_images",
        side_effect=ValueError("GEMINI_API_KEY not set"),
    ):
        with pytest.raises(SystemExit) as exc:
            run_cli(monkeypatch, "--profile-data", json.dumps(PROFILE), "--generate", "--output-dir", str(tmp_path))

    assert exc.value.code == 1
    assert "Error: GEMINI_API_KEY not set" in capsys.readouterr().out


def test_invalid_settings_exit_with_error(monkeypatch, capsys):
    with pytest.raises(SystemExit) as exc:
        run_cli(monkeypatch, "--profile-data", json.dumps(PROFILE), "--settings-data", '{"variations": "two"}')
    assert exc.value.code == 1
    out = capsys.readouterr().out
    assert "Error: variations must be an integer" in out
    assert NEGATIVE_PROMPT not in out
