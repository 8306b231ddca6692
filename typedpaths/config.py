"""
Configuration management for the library.
"""

from __future__ import annotations

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Environment-driven library settings."""

    model_config = SettingsConfigDict(env_prefix="TYPEDPATHS_", case_sensitive=False)

    sandbox: bool = True
    encoding: str = "utf-8"
    temp_prefix: str = "typedpaths"

    log_level: str = "INFO"


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance."""

    return Settings()  # type: ignore[call-arg]
