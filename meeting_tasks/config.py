from __future__ import annotations

from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings validated via Pydantic.

    Values are loaded from environment variables and/or a .env file.
    """

    # API Keys
    anthropic_api_key: str = ""
    openai_api_key: str = ""
    gemini_api_key: str = ""  # Optional; without it the Gemini provider falls back to heuristics

    # Extraction provider: heuristic, anthropic, openai, gemini
    extraction_provider: str = "heuristic"
    anthropic_model: str = "claude-sonnet-4-20250514"
    openai_model: str = "gpt-4o-mini"
    gemini_model: str = "gemini-2.5-flash"
    llm_max_tokens: int = 4000
    llm_temperature: float = 0.1

    # Refinement thresholds
    task_min: int = 9
    task_max: int = 11
    fallback_floor: int = 6
    long_input_chars: int = 2000

    # Chunked extraction for long transcripts
    chunk_size: int = 8000
    chunk_delay_seconds: float = 1.0

    # App config
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    max_notes_length: int = 50000
    log_level: str = "INFO"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached Settings instance.

    Gracefully handles missing .env files (e.g. in CI/testing) by falling
    back to environment variables and defaults.
    """
    try:
        return Settings()
    except Exception:
        # If .env is missing or unreadable, build settings from env vars only.
        return Settings(_env_file=None)  # type: ignore[call-arg]


settings = get_settings()
