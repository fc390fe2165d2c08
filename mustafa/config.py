"""Application configuration via pydantic-settings."""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Hosting platform
    pantheon_machine_token: str = ""
    pantheon_api_url: str = "https://terminus.pantheon.io/api"
    pantheon_platform_host: str = "pantheonsite.io"
    http_timeout: float = 30.0

    # Workflow polling
    workflow_timeout: float = Field(default=600.0, gt=0)
    workflow_poll_interval: float = Field(default=1.0, gt=0)
    workflow_poll_max_interval: float = Field(default=15.0, gt=0)

    # CDN
    aws_region: str = "us-east-1"
    distribution_comment: str = "Created by mustafa"

    # Logging
    log_level: str = "INFO"
    log_format: str = "console"
