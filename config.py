"""
Centralised settings loader.

Settings are built once at process start (`get_settings()`) and handed to
the app factory / Gemini wrapper explicitly.  Nothing else reads the
environment.
"""

from __future__ import annotations
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


# ------------------------------------------------------------------ #
#  Master settings model
# ------------------------------------------------------------------ #
class Settings(BaseSettings):
    # env var = upper-cased field name (GEMINI_API_KEY, LOG_LEVEL, ...)
    # ─── runtime ─────────────────────────────────────────────────────
    env_name: str = "local"
    log_level: str = "INFO"
    cors_origins: list[str] = ["*"]

    # ─── Gemini ──────────────────────────────────────────────────────
    gemini_api_key: str | None = None
    gemini_model: str = "gemini-2.0-flash"
    gemini_temperature: float = 0.7
    gemini_max_output_tokens: int = 4096
    gemini_max_retries: int = Field(3, ge=0)

    # allow other teammates’ env-vars without crashing
    model_config = SettingsConfigDict(
        extra="ignore",
        env_file=".env",
        env_file_encoding="utf-8",
    )


# ------------------------------------------------------------------ #
#  Cached accessor (call once at startup, then pass the object around)
# ------------------------------------------------------------------ #
@lru_cache
def get_settings() -> Settings:  # pragma: no cover
    return Settings()  # type: ignore[call-arg]
