from __future__ import annotations

import os
from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv


load_dotenv()


class Settings:
    """Application settings loaded from environment variables.

    Keep all credentials and config centralized here.
    """

    app_env: str = os.getenv("APP_ENV", "development")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    google_api_key: Optional[str] = os.getenv("GOOGLE_API_KEY")
    gemini_model: str = os.getenv("GEMINI_MODEL", "gemini-2.0-flash")
    temperature: float = float(os.getenv("MODEL_TEMPERATURE", "2.0"))
    top_p: float = float(os.getenv("MODEL_TOP_P", "0.95"))
    top_k: int = int(os.getenv("MODEL_TOP_K", "40"))
    max_output_tokens: int = int(os.getenv("MODEL_MAX_OUTPUT_TOKENS", "8192"))
    max_retries: int = int(os.getenv("MODEL_MAX_RETRIES", "0"))
    request_timeout: float = float(os.getenv("REQUEST_TIMEOUT_SECONDS", "30"))
    max_concurrent_requests: int = int(os.getenv("MAX_CONCURRENT_REQUESTS", "8"))
    history_max_turns: int = int(os.getenv("HISTORY_MAX_TURNS", "20"))


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
