"""Application configuration."""

import os
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Gateway settings loaded from environment variables."""

    custom_story_backend: str
    connect_timeout_seconds: float = 30
    read_timeout_seconds: float = 30
    write_timeout_seconds: float = 30
    token_path: Path = Path(".story_token")
    supabase_url: str | None = None
    supabase_service_key: str | None = None
    token_owner_id: str = "default"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )

    @property
    def uses_supabase_token_store(self) -> bool:
        return bool(self.supabase_url and self.supabase_service_key)


def normalize_base_url(raw: str) -> str:
    """Strip whitespace and trailing slashes from the backend base URL."""
    cleaned = raw.strip().rstrip("/")
    if not cleaned:
        raise ValueError("CUSTOM_STORY_BACKEND must not be empty")
    return cleaned
