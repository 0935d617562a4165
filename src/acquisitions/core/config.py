"""Configuration management for the Acquisitions API.

This module uses Pydantic Settings to load and validate configuration from
environment variables and .env files. A single Settings instance is built at
startup and handed to the components that need it; business logic never reads
the process environment directly.
"""

import re
from datetime import timedelta
from functools import lru_cache
from typing import Annotated, Literal

from pydantic import AliasChoices, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

DEFAULT_JWT_SECRET = "your-secret-key-please-change-in-production"

_DURATION_PATTERN = re.compile(r"^\s*(\d+)\s*([smhd]?)\s*$", re.IGNORECASE)
_DURATION_UNITS = {
    "": "seconds",
    "s": "seconds",
    "m": "minutes",
    "h": "hours",
    "d": "days",
}


def parse_duration(value: str | int) -> timedelta:
    """Parse a duration such as ``1d``, ``12h``, ``30m``, ``45s`` or ``3600``.

    Args:
        value: Duration string or number of seconds.

    Returns:
        The duration as a timedelta.

    Raises:
        ValueError: If the value is not a recognised duration.
    """
    if isinstance(value, int):
        return timedelta(seconds=value)

    match = _DURATION_PATTERN.match(value)
    if match is None:
        raise ValueError(f"Invalid duration: {value!r}")

    amount, unit = match.groups()
    return timedelta(**{_DURATION_UNITS[unit.lower()]: int(amount)})


class Settings(BaseSettings):
    """Application configuration settings.

    Settings are loaded from environment variables and .env files.
    All configuration values are validated at startup.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application Settings
    app_name: str = "Acquisitions API"
    app_version: str = "1.0.0"
    environment: Literal["development", "production", "testing"] = Field(
        default="development",
        validation_alias=AliasChoices("environment", "node_env"),
    )
    debug: bool = False
    api_prefix: str = "/api/v1"

    # Server Settings
    host: str = "0.0.0.0"
    port: int = 3000

    # Database Settings
    database_url: str = "sqlite+aiosqlite:///./data/acquisitions.db"
    db_pool_size: int = 5
    db_max_overflow: int = 10
    db_pool_timeout: int = 30
    db_pool_recycle: int = 1800
    db_echo: bool = False

    # Token Settings
    jwt_secret: str = Field(
        default=DEFAULT_JWT_SECRET,
        description="Secret key for JWT token signing",
    )
    jwt_expires_in: str = "1d"

    # Cookie Settings
    cookie_max_age_seconds: int = 15 * 60

    # CORS Settings
    cors_origins: Annotated[list[str], NoDecode] = Field(default=["http://localhost:3000", "http://localhost:5173"])
    cors_allow_credentials: bool = True

    # Security Headers
    security_headers_enabled: bool = True
    hsts_max_age: int = 31536000
    csp_policy: str = "default-src 'self'; script-src 'self'; frame-ancestors 'none'"
    permissions_policy: str = "geolocation=(), microphone=(), camera=()"

    # Logging Settings
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    log_format: Literal["json", "console"] = "console"
    log_file: str | None = None

    @field_validator("cors_origins", mode="before")
    @classmethod
    def parse_cors_origins(cls, v: str | list[str]) -> list[str]:
        """Parse CORS origins from comma-separated string or list."""
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        """Accept log levels in any case."""
        return v.upper() if isinstance(v, str) else v

    @field_validator("jwt_expires_in")
    @classmethod
    def validate_jwt_expires_in(cls, v: str) -> str:
        """Reject durations that cannot be parsed."""
        parse_duration(v)
        return v

    @field_validator("database_url")
    @classmethod
    def normalize_database_url(cls, v: str) -> str:
        """Rewrite plain Postgres URLs to use the asyncpg driver.

        Managed Postgres providers hand out ``postgresql://...?sslmode=require``
        URLs; asyncpg expects ``ssl=require`` instead.
        """
        for prefix in ("postgres://", "postgresql://"):
            if v.startswith(prefix):
                v = "postgresql+asyncpg://" + v[len(prefix):]
                break
        if v.startswith("postgresql+asyncpg://"):
            v = v.replace("sslmode=", "ssl=")
            v = v.replace("&channel_binding=require", "")
        return v

    @model_validator(mode="after")
    def validate_production_secret(self) -> "Settings":
        """Refuse to run in production with the development signing secret."""
        if self.is_production and self.jwt_secret == DEFAULT_JWT_SECRET:
            raise ValueError(
                "JWT_SECRET must be set to a non-default value when ENVIRONMENT=production"
            )
        return self

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment == "development"

    @property
    def is_testing(self) -> bool:
        """Check if running in testing environment."""
        return self.environment == "testing"

    @property
    def uses_default_secret(self) -> bool:
        """Whether the development placeholder secret is in use."""
        return self.jwt_secret == DEFAULT_JWT_SECRET

    @property
    def jwt_expires_delta(self) -> timedelta:
        """Token lifetime as a timedelta."""
        return parse_duration(self.jwt_expires_in)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    This function caches the settings instance to avoid reloading
    configuration on every call. Settings are loaded once at startup.

    Returns:
        Settings: Application settings instance.
    """
    return Settings()
