"""Pydantic models for parsing the config.yaml configuration file.

This module contains Pydantic models that correspond to the structure of config.yaml.
These models handle validation and type conversion of the YAML configuration data.
"""

from __future__ import annotations

from typing import Literal

from loguru import logger
from pydantic import BaseModel, Field, computed_field


class CORSConfig(BaseModel):
    """CORS configuration for the application."""

    origins: list[str] = Field(
        default=[
            "http://localhost:3000",
            "http://localhost:5173",
            "http://127.0.0.1:3000",
            "http://127.0.0.1:5173",
        ]
    )
    allow_credentials: bool = True
    allow_methods: list[str] = Field(
        default=["GET", "POST", "PUT", "DELETE", "OPTIONS"]
    )
    allow_headers: list[str] = Field(default=["Content-Type", "Authorization"])


class JWTConfig(BaseModel):
    """Bearer token validation configuration."""

    allowed_algorithms: list[str] = Field(
        default_factory=lambda: ["HS256"],
        description="JWT algorithms allowed for token validation",
    )
    gen_issuer: str = Field(
        default="bookhub", description="Issuer name to use when generating tokens"
    )
    clock_skew: int = Field(default=60, description="Clock skew tolerance in seconds")
    access_token_ttl_seconds: int = Field(
        default=24 * 3600, description="Lifetime of tokens minted by the dev CLI"
    )


class LoggingConfig(BaseModel):
    """Logging configuration model."""

    level: str = Field(default="INFO", description="Logging level")
    format: Literal["json", "plain"] = Field(default="json", description="Log format")
    file: str | None = Field(default=None, description="Log file path, no file sink when empty")
    max_size_mb: int = Field(default=10, description="Maximum log file size in MB")
    backup_count: int = Field(
        default=5, description="Number of backup log files to keep"
    )


class DatabaseConfig(BaseModel):
    """Database configuration model."""

    url: str = Field(
        default="sqlite:///./bookhub.db",
        description="Database connection URL",
    )
    pool_size: int = Field(default=20, description="Connection pool size")
    max_overflow: int = Field(default=10, description="Maximum pool overflow")
    pool_timeout: int = Field(default=30, description="Pool timeout in seconds")
    pool_recycle: int = Field(default=1800, description="Pool recycle time in seconds")
    password_file: str | None = Field(
        default=None,
        description="Path to file containing database password",
    )

    @computed_field
    @property
    def connection_string(self) -> str:
        """Construct the database connection string, resolving a password file if set."""
        from sqlalchemy.engine import make_url

        base_url = make_url(self.url)
        if not self.password_file:
            return self.url

        if base_url.password:
            logger.warning(
                "Database URL already contains a password; ignoring password_file."
            )
            return self.url

        try:
            with open(self.password_file) as f:
                password = f.read().strip()
        except OSError as e:
            raise ValueError("Failed to read database password from file.") from e

        return base_url.set(password=password).render_as_string(hide_password=False)


class PaginationConfig(BaseModel):
    """Defaults applied when a listing request omits or mangles paging input."""

    default_page: int = Field(default=1, ge=1, description="Page used when none is given")
    default_limit: int = Field(
        default=12, ge=1, description="Items per page used when none (or <= 0) is given"
    )


class UsersConfig(BaseModel):
    """User document mutation settings."""

    max_update_attempts: int = Field(
        default=3,
        ge=1,
        description="Attempts for a version-checked list update before giving up",
    )


class ReviewsConfig(BaseModel):
    """Review submission settings."""

    max_comment_length: int = Field(
        default=2000, ge=1, description="Maximum review comment length"
    )


class AppConfig(BaseModel):
    """Application configuration model."""

    environment: Literal["development", "production", "test"] = Field(
        default="development", description="Application environment"
    )
    host: str = Field(default="localhost", description="Application host")
    port: int = Field(default=8000, description="Application port")
    session_signing_secret: str | None = Field(
        default=None, description="Secret for verifying bearer JWTs"
    )
    cors: CORSConfig = Field(
        default_factory=CORSConfig, description="CORS configuration"
    )

    @property
    def base_url(self) -> str:
        """Construct the base URL from host and port."""
        scheme = "https" if self.environment == "production" else "http"
        return f"{scheme}://{self.host}:{self.port}"


class ConfigData(BaseModel):
    """Root configuration model that matches the config.yaml structure."""

    jwt: JWTConfig = Field(
        default_factory=JWTConfig, description="JWT validation configuration"
    )
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig, description="Logging configuration"
    )
    database: DatabaseConfig = Field(
        default_factory=DatabaseConfig, description="Database configuration"
    )
    pagination: PaginationConfig = Field(
        default_factory=PaginationConfig, description="Pagination defaults"
    )
    users: UsersConfig = Field(
        default_factory=UsersConfig, description="User document settings"
    )
    reviews: ReviewsConfig = Field(
        default_factory=ReviewsConfig, description="Review settings"
    )
    app: AppConfig = Field(
        default_factory=AppConfig,
        description="Application configuration",
    )
