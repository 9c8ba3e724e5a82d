"""Application configuration utilities.

This module defines application settings loaded from environment variables.
"""
from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Typed application settings loaded from the environment.

    Notes
    -----
    - Environment variables are read with the ``YTT_`` prefix (e.g., ``YTT_IMAGE_HOST``).
    - ``image_host`` is substituted into every candidate thumbnail address; overriding it
      is mostly useful for tests or mirrors.
    """

    model_config = SettingsConfigDict(env_prefix="YTT_", env_file=".env", extra="ignore")

    app_name: str = Field(default="YouTube Thumbnail Downloader", description="Application display name")
    debug: bool = Field(default=False, description="Enable debug mode")
    image_host: str = Field(
        default="img.youtube.com",
        description="Host serving thumbnail images under /vi/<id>/<tier>.jpg",
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Load and cache application settings.

    Notes
    -----
    - Cached with ``functools.lru_cache(maxsize=1)`` to provide a single settings instance
      across the process. Call ``get_settings.cache_clear()`` to reload.

    Returns
    -------
    Settings
        The application settings instance.
    """

    return Settings()
