"""Client configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")

CLIENT_VERSION = "0.1.0"


class Settings(BaseSettings):
    """Client settings loaded from environment variables."""

    username: str | None = None
    password: str | None = None
    user_agent: str = f"Mozilla/5.0 GPhotosClient/{CLIENT_VERSION}"
    http_timeout: float = 30.0
    upload_timeout: float = 600.0
    upload_chunk_size: int = 256 * 1024
    headless: bool = True
    log_level: str = "INFO"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_prefix="GPHOTOS_",
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )
