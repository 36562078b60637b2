# This file defines runtime settings for the API layer in one place.
# It exists so pagination limits, pool sizing, token settings, and payload caps can change without code edits.
# The config loader reads environment variables and applies safe defaults for local development.
# Secrets and the database URL have no defaults and fail startup loudly when missing.

from __future__ import annotations

import os
from functools import lru_cache

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, field_validator

DEVELOPMENT_ENVIRONMENT = "development"


class ApiConfig(BaseModel):
    """Typed API runtime configuration."""

    model_config = ConfigDict(extra="ignore")

    api_name: str = "Vehicle Maintenance Tracking API"
    api_prefix: str = "/api"
    app_version: str = "1.0.0"
    environment: str = "local"
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 3000
    database_url: str
    db_pool_size: int = 10
    db_max_overflow: int = 0
    db_pool_timeout_seconds: int = 10
    db_pool_recycle_seconds: int = 1800
    db_statement_timeout_ms: int = 30000
    jwt_secret: str
    jwt_algorithm: str = "HS256"
    jwt_expires_minutes: int = 1440
    default_page_size: int = 10
    max_page_size: int = 100
    max_search_length: int = 100
    max_body_bytes: int = 10 * 1024 * 1024
    allowed_origins: list[str] = Field(default_factory=list)

    @field_validator("api_prefix")
    @classmethod
    def validate_api_prefix(cls, value: str) -> str:
        if not value.startswith("/"):
            raise ValueError("api_prefix must start with '/'.")
        return value.rstrip("/")

    @field_validator(
        "db_pool_size",
        "db_pool_timeout_seconds",
        "db_pool_recycle_seconds",
        "db_statement_timeout_ms",
        "jwt_expires_minutes",
        "default_page_size",
        "max_page_size",
        "max_search_length",
        "max_body_bytes",
    )
    @classmethod
    def validate_positive_ints(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("Value must be greater than 0.")
        return value

    @field_validator("db_max_overflow")
    @classmethod
    def validate_non_negative(cls, value: int) -> int:
        if value < 0:
            raise ValueError("db_max_overflow must be >= 0.")
        return value

    @field_validator("jwt_secret")
    @classmethod
    def validate_secret(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("jwt_secret cannot be blank.")
        return value

    @property
    def is_development(self) -> bool:
        return self.environment.strip().lower() == DEVELOPMENT_ENVIRONMENT


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from exc


def _env_list(name: str, default: list[str] | None = None) -> list[str]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return list(default or [])
    return [item.strip() for item in raw.split(",") if item.strip()]


def load_api_config(*, load_env: bool = True) -> ApiConfig:
    """Load API configuration from `.env` and process environment."""

    if load_env:
        load_dotenv()

    config_values: dict[str, object] = {
        "api_name": os.getenv("API_NAME", "Vehicle Maintenance Tracking API"),
        "api_prefix": os.getenv("API_PREFIX", "/api"),
        "app_version": os.getenv("APP_VERSION", "1.0.0"),
        "environment": os.getenv("ENV", "local"),
        "log_level": os.getenv("LOG_LEVEL", "INFO"),
        "host": os.getenv("API_HOST", "0.0.0.0"),
        "port": _env_int("API_PORT", 3000),
        "database_url": os.getenv("DATABASE_URL", ""),
        "db_pool_size": _env_int("DB_POOL_SIZE", 10),
        "db_max_overflow": _env_int("DB_MAX_OVERFLOW", 0),
        "db_pool_timeout_seconds": _env_int("DB_POOL_TIMEOUT_SECONDS", 10),
        "db_pool_recycle_seconds": _env_int("DB_POOL_RECYCLE_SECONDS", 1800),
        "db_statement_timeout_ms": _env_int("DB_STATEMENT_TIMEOUT_MS", 30000),
        "jwt_secret": os.getenv("JWT_SECRET", ""),
        "jwt_algorithm": os.getenv("JWT_ALGORITHM", "HS256"),
        "jwt_expires_minutes": _env_int("JWT_EXPIRES_MINUTES", 1440),
        "default_page_size": _env_int("API_DEFAULT_PAGE_SIZE", 10),
        "max_page_size": _env_int("API_MAX_PAGE_SIZE", 100),
        "max_search_length": _env_int("API_MAX_SEARCH_LENGTH", 100),
        "max_body_bytes": _env_int("API_MAX_BODY_BYTES", 10 * 1024 * 1024),
        "allowed_origins": _env_list("API_ALLOWED_ORIGINS", []),
    }
    if not config_values["database_url"]:
        raise RuntimeError("DATABASE_URL is required for API startup.")
    if not config_values["jwt_secret"]:
        raise RuntimeError("JWT_SECRET is required for API startup.")

    return ApiConfig.model_validate(config_values)


@lru_cache(maxsize=1)
def get_api_config() -> ApiConfig:
    """Cached accessor for API config."""

    return load_api_config()
