"""
Centralized configuration for the RelayDrive backend.

All settings are loaded from environment variables with sensible defaults.
DATABASE_URL and JWT_SECRET are required; anything invalid aborts startup
with a single error that lists every offending variable.
"""

from functools import lru_cache
from typing import Literal
from urllib.parse import urlsplit

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import ConfigurationError


def _require_http_url(value: str) -> str:
    parts = urlsplit(value)
    if parts.scheme not in ("http", "https") or not parts.netloc:
        raise ValueError(f"must be an http(s) URL, got {value!r}")
    return value.rstrip("/")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "RelayDrive API"
    app_version: str = "0.1.0"
    node_env: Literal["development", "production", "test"] = "development"
    base_url: str = "http://localhost:3000"
    log_level: str = "INFO"
    debug: bool = False

    # Server
    host: str = "0.0.0.0"
    port: int = 8000
    reload: bool = False

    # Database
    database_url: str = Field(..., min_length=1)
    db_max_pool_size: int = Field(default=10, ge=1)
    db_connect_timeout: int = Field(default=5, ge=1)  # seconds
    db_socket_timeout: int = Field(default=45, ge=1)  # seconds

    # Auth
    jwt_secret: str = Field(..., min_length=32)

    # Relay backend
    relay_bot_token: str = ""
    relay_chat_id: str = ""
    relay_api_base: str = "https://api.telegram.org"
    relay_connect_timeout: float = 10.0  # seconds
    relay_read_timeout: float = 60.0  # seconds

    # Security
    allowed_origin: str = "http://localhost:3000"

    # Rate limiting
    rate_limit_sweep_interval: float = 300.0  # seconds

    @field_validator("base_url", "relay_api_base")
    @classmethod
    def _check_url(cls, value: str) -> str:
        return _require_http_url(value)

    @field_validator("allowed_origin")
    @classmethod
    def _check_origins(cls, value: str) -> str:
        origins = [item.strip() for item in value.split(",") if item.strip()]
        if not origins:
            raise ValueError("at least one origin is required")
        return ",".join(_require_http_url(origin) for origin in origins)

    @property
    def allowed_origins(self) -> list[str]:
        """Origins allowed to make cross-origin state-changing requests."""
        return self.allowed_origin.split(",")

    @property
    def is_production(self) -> bool:
        return self.node_env == "production"

    @property
    def relay_configured(self) -> bool:
        return bool(self.relay_bot_token and self.relay_chat_id)


def load_settings(**overrides) -> Settings:
    """
    Load and validate settings from the environment.

    Raises:
        ConfigurationError: Listing every invalid or missing variable.
    """
    try:
        return Settings(**overrides)
    except ValidationError as e:
        problems = []
        for error in e.errors():
            field = ".".join(str(part) for part in error["loc"]).upper()
            problems.append(f"{field}: {error['msg']}")
        raise ConfigurationError(
            "Invalid environment variables:\n" + "\n".join(problems),
            details={"fields": problems},
        ) from e


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses lru_cache to ensure settings are only loaded once.
    """
    return load_settings()
