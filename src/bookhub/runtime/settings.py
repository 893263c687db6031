"""Primitive settings read from the process environment and ``.env`` files.

These values decide *where* configuration comes from; the structured
configuration itself lives in config.yaml and is parsed into ``ConfigData``.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class EnvironmentVariables(BaseSettings):
    """Simple primitive values loaded from environment variables and .env files."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        extra="ignore",
    )

    environment: Literal["development", "production", "test"] = Field(
        default="development", validation_alias="APP_ENVIRONMENT"
    )
    config_file: Path = Field(
        default=Path("config.yaml"), validation_alias="BOOKHUB_CONFIG_FILE"
    )


def get_environment_variables() -> EnvironmentVariables:
    """Read the environment afresh."""
    return EnvironmentVariables()
