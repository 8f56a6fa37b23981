from __future__ import annotations

from typing import Literal, Optional

from pydantic import BaseModel
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_TASK_WAIT_MS = 10000


class AppConfig(BaseModel):
    """Application-specific configuration values."""

    name: str = "docuindex"
    log_level: str = "INFO"
    # Transport settings for FastMCP: "stdio" (default), "http", or "sse"
    transport: Literal["stdio", "http", "sse"] = "stdio"
    host: str = "127.0.0.1"
    port: int = 8000


class ServiceConfig(BaseModel):
    """Remote search service connection values."""

    base_url: Optional[str] = None
    app_id: Optional[str] = None
    api_key: Optional[str] = None
    timeout: float = 30.0
    verify_ssl: bool = True


class TaskConfig(BaseModel):
    """Task polling defaults, in milliseconds."""

    # The first sleep and the ceiling for every later sleep
    initial_delay_ms: int = DEFAULT_TASK_WAIT_MS
    max_delay_ms: int = DEFAULT_TASK_WAIT_MS


class Settings(BaseSettings):
    """Top-level settings loaded from environment variables and .env only."""

    model_config = SettingsConfigDict(
        env_prefix="DOCUINDEX_",
        env_nested_delimiter="__",
        env_file=".env",
        extra="ignore",
    )

    app: AppConfig = AppConfig()
    service: ServiceConfig = ServiceConfig()
    tasks: TaskConfig = TaskConfig()


def load_settings() -> Settings:
    """Load settings from environment variables and .env only."""
    return Settings()  # type: ignore[call-arg]
