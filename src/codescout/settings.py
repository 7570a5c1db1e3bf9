"""Application settings, loaded from environment variables."""

from __future__ import annotations

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

from codescout.constants import (
    DEFAULT_IGNORE_FILE,
    DEFAULT_MAX_DEPTH,
    DEFAULT_MAX_FILE_SIZE,
    DEFAULT_MAX_FILES,
    DEFAULT_MEMORY_LIMIT,
    DEFAULT_TIMEOUT,
)


class Settings(BaseSettings):
    """Central configuration loaded from ``CODESCOUT_*`` env vars (or ``.env``)."""

    model_config = SettingsConfigDict(
        env_prefix="CODESCOUT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    log_level: str = "INFO"
    max_files: int = DEFAULT_MAX_FILES
    max_file_size: int = DEFAULT_MAX_FILE_SIZE
    max_depth: int = DEFAULT_MAX_DEPTH
    timeout: float = DEFAULT_TIMEOUT
    memory_limit: int = DEFAULT_MEMORY_LIMIT
    ignore_file: str = DEFAULT_IGNORE_FILE


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the singleton settings (cached after first call)."""
    return Settings()
