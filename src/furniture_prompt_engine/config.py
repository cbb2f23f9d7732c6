from pathlib import Path

from dotenv import load_dotenv
from pydantic_settings import BaseSettings

# Export LANGSMITH_* and provider keys from .env into os.environ so the
# langsmith SDK sees them as well as Settings.
load_dotenv(Path.cwd() / ".env")


class Settings(BaseSettings):
    """Engine settings loaded from environment variables."""

    # Provider API keys
    gemini_api_key: str = ""
    bfl_api_key: str = ""

    # Gemini image model
    gemini_image_model: str = "gemini-2.5-flash-image-preview"

    # Black Forest Labs FLUX Kontext
    bfl_api_base: str = "https://api.bfl.ai/v1"
    flux_poll_interval: float = 2.0
    flux_max_attempts: int = 30
    flux_timeout: float = 60.0

    # Prompt length budget of the image vendors
    prompt_char_limit: int = 1000
    prompt_near_limit: int = 900
    # Headroom kept below the limit when optimizing
    optimization_margin: int = 50

    log_level: str = "INFO"

    model_config = {"env_file": ".env", "extra": "ignore"}


settings = Settings()
