from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_APP_NAME = "k8s-cleaner"
DEFAULT_DATABASE_URL = "sqlite+aiosqlite:///./k8s_cleaner.db"


class NotifierSettings(BaseSettings):
    """Settings for the cleaner notification dispatcher."""

    app_name: str = Field(default=DEFAULT_APP_NAME)
    environment: Literal["local", "dev", "staging", "prod"] = Field(default="local")
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(default="INFO")
    database_url: str = Field(default=DEFAULT_DATABASE_URL)
    http_timeout_seconds: float = Field(default=10.0, gt=0.0)
    smtp_timeout_seconds: float = Field(default=30.0, gt=0.0)
    slack_api_url: str = Field(default="https://slack.com/api")
    discord_api_url: str = Field(default="https://discord.com/api/v10")
    webex_api_url: str = Field(default="https://webexapis.com/v1")
    enable_tracing: bool = Field(default=False)
    tracing_endpoint: str | None = Field(default=None)
    tracing_protocol: Literal["http/protobuf", "grpc"] = Field(default="http/protobuf")
    tracing_insecure: bool = Field(default=True)
    tracing_sample_rate: float = Field(default=1.0, ge=0.0, le=1.0)

    model_config = SettingsConfigDict(
        env_file=(".env", ".env.local"), env_prefix="CLEANER_", extra="ignore"
    )


@lru_cache
def get_settings() -> NotifierSettings:
    """Return cached notifier settings."""

    return NotifierSettings()
