"""Environment-backed settings for the gateway."""
from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv


load_dotenv()

DEFAULT_MODEL = "gemini-2.5-flash"
DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"
# Names understood by both logging and uvicorn
LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


@dataclass(frozen=True)
class Settings:
    """Application settings loaded from environment variables.

    Keep all credentials and config centralized here.
    """

    api_key: str | None
    port: int = 3000
    host: str = "0.0.0.0"
    model: str = DEFAULT_MODEL
    text_model: str = DEFAULT_MODEL
    image_model: str = DEFAULT_MODEL
    document_model: str = DEFAULT_MODEL
    audio_model: str = DEFAULT_MODEL
    base_url: str = DEFAULT_BASE_URL
    timeout: float = 120.0
    log_level: str = "INFO"

    def model_for(self, kind: str) -> str:
        """Return the model id configured for a route kind ("chat", "text", "image", ...)."""
        return getattr(self, f"{kind}_model", self.model)


def _log_level(value: str) -> str:
    level = value.strip().upper()
    return level if level in LOG_LEVELS else "INFO"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    model = os.getenv("GEMINI_MODEL", DEFAULT_MODEL)
    return Settings(
        api_key=os.getenv("API_KEY") or None,
        port=int(os.getenv("PORT", "3000")),
        host=os.getenv("HOST", "0.0.0.0"),
        model=model,
        text_model=os.getenv("GEMINI_TEXT_MODEL", model),
        image_model=os.getenv("GEMINI_IMAGE_MODEL", model),
        document_model=os.getenv("GEMINI_DOCUMENT_MODEL", model),
        audio_model=os.getenv("GEMINI_AUDIO_MODEL", model),
        base_url=os.getenv("GEMINI_BASE_URL", DEFAULT_BASE_URL).rstrip("/"),
        timeout=float(os.getenv("UPSTREAM_TIMEOUT", "120")),
        log_level=_log_level(os.getenv("LOG_LEVEL", "INFO")),
    )
