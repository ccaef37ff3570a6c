"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

from on_the_map.adapters.geocoder import DEFAULT_MAPBOX_BASE_URL
from on_the_map.adapters.udacity_client import (
    DEFAULT_BASE_URL,
    DEFAULT_SESSION_PROVIDER,
)

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    api_base_url: str = DEFAULT_BASE_URL
    session_provider: str = DEFAULT_SESSION_PROVIDER
    mapbox_token: str = ""
    mapbox_base_url: str = DEFAULT_MAPBOX_BASE_URL
    request_timeout_seconds: float | None = None
    log_level: str = "INFO"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_prefix="ON_THE_MAP_",
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )
