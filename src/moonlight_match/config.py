"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Client settings loaded from environment variables."""

    api_base_url: str = "http://10.0.2.2:3000"
    storage_path: str = "~/.moonlight_match/storage.json"
    default_event_id: str = "moonlight-gala"
    poll_interval_seconds: float = 5.0
    request_timeout_seconds: float = 10.0
    log_level: str = "INFO"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def normalize_base_url(raw: str) -> str:
    """Strip whitespace and trailing slashes from an API base URL."""
    cleaned = raw.strip().rstrip("/")
    if not cleaned:
        raise ValueError("api_base_url must not be empty")
    return cleaned
